from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Tuple, Union

from pad_dragger.errors import InsufficientCiphertextsError, LengthMismatchError

BytesLike = Union[bytes, bytearray, memoryview]


def as_bytes(data: BytesLike) -> bytes:
    """Normalize a bytes-like value to immutable bytes."""
    if isinstance(data, bytes):
        return data
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"Expected a bytes-like value, got {type(data).__name__}")


@dataclass(frozen=True, slots=True)
class CiphertextSet:
    """Messages enciphered under one shared key stream.

    Every message has the same length and there are at least two of them,
    otherwise there is nothing to pair up.
    """

    messages: Tuple[bytes, ...] = field(default_factory=tuple)

    def __post_init__(self):
        messages = tuple(as_bytes(m) for m in self.messages)
        if len(messages) < 2:
            raise InsufficientCiphertextsError(
                f"Need at least 2 ciphertexts for analysis, got {len(messages)}"
            )

        expected = len(messages[0])
        for idx, message in enumerate(messages):
            if len(message) != expected:
                raise LengthMismatchError(
                    f"Ciphertext {idx} is {len(message)} bytes, expected {expected} like ciphertext 0"
                )
        object.__setattr__(self, "messages", messages)

    @classmethod
    def of(cls, messages: Iterable[BytesLike]) -> CiphertextSet:
        return cls(messages=tuple(messages))

    @property
    def message_length(self) -> int:
        return len(self.messages[0])

    def __len__(self) -> int:
        return len(self.messages)

    def __getitem__(self, index: int) -> bytes:
        return self.messages[index]

    def __iter__(self) -> Iterator[bytes]:
        return iter(self.messages)


@dataclass(frozen=True, slots=True)
class CiphertextPair:
    """Two message indices (i < j) and the XOR of their ciphertexts.

    With a shared key the key cancels out, so ``xor_result`` equals the XOR
    of the two plaintexts.
    """

    index_i: int
    index_j: int
    xor_result: bytes

    def __post_init__(self):
        if self.index_i == self.index_j:
            raise ValueError("A pair needs two distinct ciphertext indices")
        object.__setattr__(self, "xor_result", as_bytes(self.xor_result))

    @property
    def indices(self) -> Tuple[int, int]:
        return self.index_i, self.index_j

    def __len__(self) -> int:
        return len(self.xor_result)

    def __str__(self) -> str:
        return f"{self.index_i}^{self.index_j}"
