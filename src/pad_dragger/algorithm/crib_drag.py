"""Crib dragging over key-free pair sequences.

For a pair (i, j) the key-free sequence is P_i ^ P_j. XORing a guessed
fragment of P_i into it at offset o leaves P_j[o:o+L] when the guess is right
and in the right place, and noise otherwise. Sliding the crib over every
offset and scoring each result finds the positions worth a closer look.
"""
from concurrent.futures import ThreadPoolExecutor
import threading
from typing import Callable, Iterator, Optional, Sequence, Tuple

import structlog

from pad_dragger.algorithm.scoring import Scorer, TextualCharsetScorer
from pad_dragger.algorithm.xor_engine import xor_bytes
from pad_dragger.errors import CribTooLongError, EmptyCribError, InvalidOffsetError
from pad_dragger.models.cipher_bytes import BytesLike, CiphertextPair, as_bytes
from pad_dragger.models.results import DragResult, RecoveredKeySpan

log = structlog.get_logger(__name__)

StopFn = Callable[[DragResult], bool]


def check_crib(crib: bytes, available: int) -> None:
    if not crib:
        raise EmptyCribError("Crib cannot be empty")
    if len(crib) > available:
        raise CribTooLongError(
            f"Crib is {len(crib)} bytes but only {available} bytes are available"
        )


def iter_drag(
    pair: CiphertextPair,
    crib: BytesLike,
    scorer: Optional[Scorer] = None,
    *,
    cancelled: Optional[threading.Event] = None,
) -> Iterator[DragResult]:
    """Lazily yield one result per offset, in ascending offset order."""
    crib = as_bytes(crib)
    check_crib(crib, len(pair.xor_result))
    scorer = scorer or TextualCharsetScorer()

    crib_length = len(crib)
    max_offset = len(pair.xor_result) - crib_length
    for offset in range(max_offset + 1):
        if cancelled is not None and cancelled.is_set():
            return
        window = pair.xor_result[offset:offset + crib_length]
        fragment = xor_bytes(window, crib)
        yield DragResult(
            index_i=pair.index_i,
            index_j=pair.index_j,
            offset=offset,
            fragment=fragment,
            verdict=scorer.score(fragment),
        )


def drag(
    pair: CiphertextPair,
    crib: BytesLike,
    scorer: Optional[Scorer] = None,
    *,
    stop_when: Optional[StopFn] = None,
    cancelled: Optional[threading.Event] = None,
) -> Tuple[DragResult, ...]:
    """Slide a crib across every offset of a pair and score each fragment.

    Nothing is filtered out here. When ``stop_when`` returns True for a
    result, that result is kept and the sweep ends.
    """
    results = []
    for result in iter_drag(pair, crib, scorer, cancelled=cancelled):
        results.append(result)
        if stop_when is not None and stop_when(result):
            log.debug("drag stopped early", pair=str(pair), offset=result.offset)
            if cancelled is not None:
                cancelled.set()
            break

    log.debug(
        "drag sweep finished",
        pair=str(pair),
        offsets=len(results),
        plausible=sum(1 for r in results if r.is_plausible),
    )
    return tuple(results)


def drag_pairs(
    pairs: Sequence[CiphertextPair],
    crib: BytesLike,
    scorer: Optional[Scorer] = None,
    *,
    stop_when: Optional[StopFn] = None,
    max_workers: Optional[int] = None,
) -> Tuple[DragResult, ...]:
    """Drag one crib over many pairs on a thread pool.

    Results are returned in pair order, then offset order. A ``stop_when``
    hit in any pair cancels the sweeps that have not finished yet.
    """
    crib = as_bytes(crib)
    scorer = scorer or TextualCharsetScorer()
    cancelled = threading.Event()

    # Bad cribs raise here, not inside a worker.
    for pair in pairs:
        check_crib(crib, len(pair.xor_result))

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        per_pair = executor.map(
            lambda pair: drag(pair, crib, scorer, stop_when=stop_when, cancelled=cancelled),
            pairs,
        )
        results = tuple(result for pair_results in per_pair for result in pair_results)

    log.info(
        "crib dragged",
        crib_length=len(crib),
        pairs=len(pairs),
        results=len(results),
        stopped_early=cancelled.is_set(),
    )
    return results


def confirm_key(ciphertext: BytesLike, crib: BytesLike, offset: int) -> RecoveredKeySpan:
    """Recover the key bytes under a crib confirmed against one ciphertext.

    This uses the ciphertext itself, not a pair XOR: C ^ P = K.
    """
    ciphertext, crib = as_bytes(ciphertext), as_bytes(crib)
    if offset < 0:
        raise InvalidOffsetError(f"Offset must not be negative, got {offset}")
    check_crib(crib, len(ciphertext) - offset)

    key = xor_bytes(ciphertext[offset:offset + len(crib)], crib)
    log.debug("key span recovered", offset=offset, length=len(key))
    return RecoveredKeySpan(offset=offset, key=key)


def apply_key_span(ciphertexts: Sequence[BytesLike], span: RecoveredKeySpan) -> Tuple[bytes, ...]:
    """Decode the span covered by a recovered key in every ciphertext."""
    fragments = []
    for idx, ciphertext in enumerate(ciphertexts):
        ciphertext = as_bytes(ciphertext)
        if span.end > len(ciphertext):
            raise CribTooLongError(
                f"Key span {span.offset}:{span.end} runs past ciphertext {idx} ({len(ciphertext)} bytes)"
            )
        fragments.append(xor_bytes(ciphertext[span.offset:span.end], span.key))
    return tuple(fragments)
