from itertools import combinations
from typing import Sequence, Tuple

import structlog

from pad_dragger.algorithm.xor_engine import xor_bytes
from pad_dragger.errors import InsufficientCiphertextsError
from pad_dragger.models.cipher_bytes import BytesLike, CiphertextPair

log = structlog.get_logger(__name__)


def build_pairs(ciphertexts: Sequence[BytesLike]) -> Tuple[CiphertextPair, ...]:
    """XOR every unordered pair of ciphertexts.

    Pairs come out ordered by ascending i, then ascending j, so repeated runs
    over the same input produce the same sequence. XORing two ciphertexts
    under the same key cancels the key and leaves the XOR of the plaintexts.
    """
    count = len(ciphertexts)
    if count < 2:
        raise InsufficientCiphertextsError(
            f"Need at least 2 ciphertexts to build pairs, got {count}"
        )

    pairs = tuple(
        CiphertextPair(index_i=i, index_j=j, xor_result=xor_bytes(ciphertexts[i], ciphertexts[j]))
        for i, j in combinations(range(count), 2)
    )
    log.debug("pairs built", ciphertexts=count, pairs=len(pairs))
    return pairs
