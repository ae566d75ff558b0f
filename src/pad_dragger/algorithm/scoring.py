"""Plausibility scoring for recovered fragments.

A scorer decides whether a byte fragment looks like natural-language text.
The crib dragger only depends on the ``Scorer`` protocol, so a stronger
policy (n-gram frequencies, a dictionary) can be dropped in without
touching the drag sweep.
"""
import string
from typing import Callable, FrozenSet, Protocol

from pad_dragger.models.cipher_bytes import BytesLike, as_bytes
from pad_dragger.models.results import PlausibilityVerdict

DEFAULT_THRESHOLD = 0.7

TEXT_PUNCTUATION = ".,'\"!?;:-"

TEXTUAL_BYTES: FrozenSet[int] = frozenset(
    (string.ascii_letters + string.digits + " " + TEXT_PUNCTUATION).encode("ascii")
)

PRINTABLE_MIN = 0x20
PRINTABLE_MAX = 0x7E


class Scorer(Protocol):
    threshold: float

    def score(self, fragment: bytes) -> PlausibilityVerdict: ...


def validate_threshold(threshold: float) -> float:
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"Threshold must be between 0 and 1, got {threshold}")
    return float(threshold)


class CharsetScorer:
    """Scores a fragment by the share of its bytes that are textual.

    Non-textual bytes lower the ratio but never disqualify a fragment on
    their own.
    """

    def __init__(self, threshold: float = DEFAULT_THRESHOLD):
        self.threshold = validate_threshold(threshold)

    def is_textual(self, value: int) -> bool:
        raise NotImplementedError

    def ratio(self, fragment: BytesLike) -> float:
        fragment = as_bytes(fragment)
        if not fragment:
            return 0.0
        textual = sum(1 for b in fragment if self.is_textual(b))
        return textual / len(fragment)

    def score(self, fragment: BytesLike) -> PlausibilityVerdict:
        ratio = self.ratio(fragment)
        return PlausibilityVerdict(is_plausible=ratio > self.threshold, printable_ratio=ratio)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(threshold={self.threshold})"


class TextualCharsetScorer(CharsetScorer):
    """Letters, digits, space and ``. , ' " ! ? ; : -`` count as text."""

    def is_textual(self, value: int) -> bool:
        return value in TEXTUAL_BYTES


class PrintableRangeScorer(CharsetScorer):
    """Any printable ASCII byte (0x20-0x7e) counts as text."""

    def is_textual(self, value: int) -> bool:
        return PRINTABLE_MIN <= value <= PRINTABLE_MAX


class CallableScorer:
    """Wraps a plain ``fn(fragment) -> ratio`` function as a scorer."""

    def __init__(self, fn: Callable[[bytes], float], threshold: float = DEFAULT_THRESHOLD):
        self.fn = fn
        self.threshold = validate_threshold(threshold)

    def score(self, fragment: BytesLike) -> PlausibilityVerdict:
        ratio = float(self.fn(as_bytes(fragment)))
        if not 0.0 <= ratio <= 1.0:
            raise ValueError(f"Scoring function returned {ratio}, expected a ratio between 0 and 1")
        return PlausibilityVerdict(is_plausible=ratio > self.threshold, printable_ratio=ratio)

    def __repr__(self) -> str:
        name = getattr(self.fn, "__name__", repr(self.fn))
        return f"CallableScorer({name}, threshold={self.threshold})"


SCORERS = {
    "textual": TextualCharsetScorer,
    "printable": PrintableRangeScorer,
}
