from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True, slots=True)
class PlausibilityVerdict:
    is_plausible: bool
    printable_ratio: float


@dataclass(frozen=True, slots=True)
class DragResult:
    """The fragment recovered by a crib at one offset of one pair.

    If the crib really is part of one message of the pair at ``offset``,
    ``fragment`` is the same span of the other message. The XOR is
    symmetric, so the result does not say which side the crib came from.
    """

    index_i: int
    index_j: int
    offset: int
    fragment: bytes
    verdict: PlausibilityVerdict

    @property
    def is_plausible(self) -> bool:
        return self.verdict.is_plausible

    @property
    def printable_ratio(self) -> float:
        return self.verdict.printable_ratio


@dataclass(frozen=True, slots=True)
class RecoveredKeySpan:
    offset: int
    key: bytes

    @property
    def length(self) -> int:
        return len(self.key)

    @property
    def end(self) -> int:
        return self.offset + len(self.key)


@dataclass(frozen=True, slots=True)
class DecodedSpan:
    """A key span together with the plaintext it reveals in every message."""

    key_span: RecoveredKeySpan
    source_index: int
    fragments: Tuple[bytes, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class ByteInsight:
    position: int
    value: int
    binary: str
    hint: str = ""
