from typing import Tuple

from pad_dragger.errors import LengthMismatchError
from pad_dragger.models.cipher_bytes import BytesLike, as_bytes
from pad_dragger.models.results import ByteInsight

SPACE_LETTER_HINT = "possible space/letter pair"
SAME_TYPE_HINT = "same character type"


def xor_bytes(a: BytesLike, b: BytesLike) -> bytes:
    """XOR two equal-length byte sequences.

    Unequal operands are refused rather than truncated or padded.
    """
    a, b = as_bytes(a), as_bytes(b)
    if len(a) != len(b):
        raise LengthMismatchError(
            f"XOR operands must be of equal length ({len(a)} != {len(b)})"
        )
    return bytes(x ^ y for x, y in zip(a, b))


def xor_hint(value: int) -> str:
    """Guess what kind of characters produced one byte of a plaintext XOR.

    ASCII letters live in 0x40-0x7f and space is 0x20, so a letter XOR space
    has its top two bits set to 01. Two letters (or two non-letters) cancel
    those bits to 00.
    """
    top_bits = value >> 6
    if top_bits == 0b01:
        return SPACE_LETTER_HINT
    if top_bits == 0b00:
        return SAME_TYPE_HINT
    return ""


def describe_xor_bytes(seq: BytesLike) -> Tuple[ByteInsight, ...]:
    return tuple(
        ByteInsight(position=i, value=value, binary=f"{value:08b}", hint=xor_hint(value))
        for i, value in enumerate(as_bytes(seq))
    )
