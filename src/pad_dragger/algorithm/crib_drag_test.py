import pytest

from pad_dragger.algorithm.crib_drag import (
    apply_key_span,
    confirm_key,
    drag,
    drag_pairs,
    iter_drag,
)
from pad_dragger.algorithm.pairs import build_pairs
from pad_dragger.algorithm.scoring import PrintableRangeScorer, TextualCharsetScorer
from pad_dragger.algorithm.xor_engine import xor_bytes
from pad_dragger.errors import CribTooLongError, EmptyCribError, InvalidOffsetError
from pad_dragger.models.cipher_bytes import CiphertextPair
from pad_dragger.models.results import RecoveredKeySpan


@pytest.fixture
def pair(ciphertexts) -> CiphertextPair:
    return build_pairs(ciphertexts.messages)[0]


class TestDrag:
    """Test suite for drag / iter_drag"""

    def test_hello_recovers_goodbye(self, pair):
        """Dragging 'HELLO' at offset 0 of pair (0, 1) recovers 'GOODB'"""
        results = drag(pair, b"HELLO")
        first = results[0]

        assert first.offset == 0
        assert (first.index_i, first.index_j) == (0, 1)
        assert first.fragment == b"GOODB"
        assert first.is_plausible
        assert first.printable_ratio == 1.0

    def test_symmetric(self, pair):
        """A crib from the other message recovers this one"""
        assert drag(pair, b"GOODB")[0].fragment == b"HELLO"

    def test_correct_crib_at_true_offset(self, pair, plaintexts):
        """If the crib is P_j[o:o+L], the result at o is exactly P_i[o:o+L]"""
        p_i, p_j = plaintexts[0], plaintexts[1]
        for offset, length in ((8, 5), (3, 7), (10, 5), (0, 15)):
            crib = p_j[offset:offset + length]
            result = drag(pair, crib)[offset]
            assert result.offset == offset
            assert result.fragment == p_i[offset:offset + length]

    def test_every_offset_reported_in_order(self, pair):
        results = drag(pair, b"THE")
        assert [r.offset for r in results] == list(range(15 - 3 + 1))
        assert all(len(r.fragment) == 3 for r in results)

    def test_crib_fills_message(self, pair):
        results = drag(pair, b"X" * 15)
        assert len(results) == 1
        assert results[0].offset == 0

    def test_crib_too_long(self, pair):
        with pytest.raises(CribTooLongError):
            drag(pair, b"X" * 16)

    def test_empty_crib(self, pair):
        with pytest.raises(EmptyCribError):
            drag(pair, b"")

    def test_uses_given_scorer(self, pair):
        strict = drag(pair, b"HELLO", TextualCharsetScorer(threshold=1.0))
        assert not any(r.is_plausible for r in strict)

        loose = drag(pair, b"HELLO", PrintableRangeScorer(threshold=0.0))
        assert loose[0].is_plausible

    def test_nothing_filtered(self, pair):
        """Implausible offsets are still reported"""
        results = drag(pair, b"HELLO", TextualCharsetScorer(threshold=1.0))
        assert len(results) == 11
        assert not any(r.is_plausible for r in results)

    def test_stop_when(self, pair):
        results = drag(pair, b"HELLO", stop_when=lambda r: r.offset == 3)
        assert [r.offset for r in results] == [0, 1, 2, 3]

    def test_iter_drag_is_lazy(self, pair):
        iterator = iter_drag(pair, b"HELLO")
        assert next(iterator).fragment == b"GOODB"
        assert next(iterator).offset == 1


class TestDragPairs:
    """Test suite for drag_pairs"""

    def test_pair_then_offset_order(self, ciphertexts):
        pairs = build_pairs(ciphertexts.messages)
        results = drag_pairs(pairs, b"HELLO", max_workers=4)

        assert len(results) == 3 * 11
        keys = [(r.index_i, r.index_j, r.offset) for r in results]
        assert keys == sorted(keys)

    def test_matches_sequential(self, ciphertexts):
        pairs = build_pairs(ciphertexts.messages)
        expected = tuple(r for p in pairs for r in drag(p, b"SECRET"))
        assert drag_pairs(pairs, b"SECRET") == expected

    def test_stop_when_cancels_other_pairs(self, ciphertexts):
        """With one worker, a hit in the first pair ends the whole sweep"""
        pairs = build_pairs(ciphertexts.messages)
        results = drag_pairs(pairs, b"HELLO", stop_when=lambda r: r.is_plausible, max_workers=1)

        assert len(results) == 1
        assert results[0].fragment == b"GOODB"

    def test_crib_checked_before_sweep(self, ciphertexts):
        pairs = build_pairs(ciphertexts.messages)
        with pytest.raises(CribTooLongError):
            drag_pairs(pairs, b"X" * 20)


class TestConfirmKey:
    """Test suite for confirm_key / apply_key_span"""

    def test_recovers_key_span(self, ciphertexts, key):
        span = confirm_key(ciphertexts[0], b"WORLD", 6)
        assert span.offset == 6
        assert span.length == 5
        assert span.end == 11
        assert span.key == key[6:11]

    def test_span_decodes_every_message(self, ciphertexts, plaintexts):
        span = confirm_key(ciphertexts[1], b"CRUEL", 8)
        fragments = apply_key_span(ciphertexts.messages, span)
        assert fragments == tuple(p[8:13] for p in plaintexts)

    def test_uses_ciphertext_not_pair(self, ciphertexts, key, pair):
        """XORing the crib with the pair sequence would not give the key"""
        span = confirm_key(ciphertexts[0], b"HELLO", 0)
        assert span.key == key[:5]
        assert span.key != xor_bytes(pair.xor_result[:5], b"HELLO")

    def test_offset_past_end(self, ciphertexts):
        with pytest.raises(CribTooLongError):
            confirm_key(ciphertexts[0], b"WORLD", 11)

    def test_negative_offset(self, ciphertexts):
        with pytest.raises(InvalidOffsetError):
            confirm_key(ciphertexts[0], b"WORLD", -1)

    def test_apply_span_past_end(self):
        span = RecoveredKeySpan(offset=2, key=b"\x00\x00")
        with pytest.raises(CribTooLongError):
            apply_key_span([b"abcd", b"abc"], span)
