from typing import Optional, Tuple

import structlog

from pad_dragger.algorithm.crib_drag import StopFn, apply_key_span, confirm_key, drag_pairs
from pad_dragger.algorithm.pairs import build_pairs
from pad_dragger.algorithm.scoring import Scorer, TextualCharsetScorer
from pad_dragger.errors import LengthMismatchError
from pad_dragger.models.cipher_bytes import BytesLike, CiphertextPair, CiphertextSet, as_bytes
from pad_dragger.models.results import DecodedSpan, DragResult, RecoveredKeySpan

log = structlog.get_logger(__name__)


class CribSolver:
    """Crib-dragging analysis over one set of same-key ciphertexts.

    All pairs are XORed once when the solver is built; every query after that
    only reads them.
    """

    def __init__(self, ciphertexts: CiphertextSet, scorer: Optional[Scorer] = None):
        self.__ciphertexts = ciphertexts
        self.__pairs = build_pairs(ciphertexts.messages)
        self.__scorer = scorer or TextualCharsetScorer()
        log.info(
            "solver ready",
            ciphertexts=len(ciphertexts),
            pairs=len(self.__pairs),
            message_length=ciphertexts.message_length,
            scorer=repr(self.__scorer),
        )

    @property
    def ciphertexts(self) -> CiphertextSet:
        return self.__ciphertexts

    @property
    def pairs(self) -> Tuple[CiphertextPair, ...]:
        return self.__pairs

    @property
    def scorer(self) -> Scorer:
        return self.__scorer

    def __check_index(self, index: int) -> None:
        if not 0 <= index < len(self.__ciphertexts):
            raise IndexError(
                f"Ciphertext index {index} out of range (0-{len(self.__ciphertexts) - 1})"
            )

    def pair(self, i: int, j: int) -> CiphertextPair:
        self.__check_index(i)
        self.__check_index(j)
        if i == j:
            raise IndexError("A pair needs two distinct ciphertext indices")
        i, j = min(i, j), max(i, j)
        for pair in self.__pairs:
            if pair.indices == (i, j):
                return pair
        raise IndexError(f"No pair for ciphertexts {i} and {j}")

    def pairs_with(self, index: int) -> Tuple[CiphertextPair, ...]:
        self.__check_index(index)
        return tuple(p for p in self.__pairs if index in p.indices)

    def drag(
        self,
        crib: BytesLike,
        *,
        threshold: Optional[float] = None,
        stop_when: Optional[StopFn] = None,
        max_workers: Optional[int] = None,
    ) -> Tuple[DragResult, ...]:
        """Drag a crib over every pair.

        With ``threshold`` set, only results whose ratio is above it are
        returned; otherwise every offset of every pair is.
        """
        results = drag_pairs(
            self.__pairs,
            crib,
            self.__scorer,
            stop_when=stop_when,
            max_workers=max_workers,
        )
        if threshold is None:
            return results
        return tuple(r for r in results if r.printable_ratio > threshold)

    def decode_span(self, index: int, crib: BytesLike, offset: int) -> DecodedSpan:
        """Assume ``crib`` sits in message ``index`` at ``offset`` and decode that span everywhere."""
        self.__check_index(index)
        span = confirm_key(self.__ciphertexts[index], crib, offset)
        fragments = apply_key_span(self.__ciphertexts.messages, span)
        log.info("span decoded", source_index=index, offset=offset, length=span.length)
        return DecodedSpan(key_span=span, source_index=index, fragments=fragments)

    def test_guess(self, guess: BytesLike) -> Tuple[RecoveredKeySpan, ...]:
        """XOR a whole-message guess with every ciphertext.

        Entry k is the key implied if the guess is message k; the right one
        decodes every other message into readable text.
        """
        guess = as_bytes(guess)
        if len(guess) != self.__ciphertexts.message_length:
            raise LengthMismatchError(
                f"Guess is {len(guess)} bytes; it must be exactly {self.__ciphertexts.message_length}"
            )
        return tuple(confirm_key(c, guess, 0) for c in self.__ciphertexts)
