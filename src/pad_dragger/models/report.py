from typing import List

from pydantic import BaseModel

from pad_dragger.models.cipher_bytes import CiphertextPair
from pad_dragger.models.results import ByteInsight, DecodedSpan, DragResult, RecoveredKeySpan
from pad_dragger.utils import encode_hex, render_fragment


class PairReport(BaseModel):
    index_i: int
    index_j: int
    xor_hex: str

    @classmethod
    def from_pair(cls, pair: CiphertextPair) -> "PairReport":
        return cls(index_i=pair.index_i, index_j=pair.index_j, xor_hex=encode_hex(pair.xor_result))


class DragResultReport(BaseModel):
    index_i: int
    index_j: int
    offset: int
    fragment_hex: str
    fragment_text: str
    printable_ratio: float
    is_plausible: bool

    @classmethod
    def from_result(cls, result: DragResult) -> "DragResultReport":
        return cls(
            index_i=result.index_i,
            index_j=result.index_j,
            offset=result.offset,
            fragment_hex=encode_hex(result.fragment),
            fragment_text=render_fragment(result.fragment),
            printable_ratio=result.printable_ratio,
            is_plausible=result.is_plausible,
        )


class KeySpanReport(BaseModel):
    offset: int
    length: int
    key_hex: str

    @classmethod
    def from_span(cls, span: RecoveredKeySpan) -> "KeySpanReport":
        return cls(offset=span.offset, length=span.length, key_hex=encode_hex(span.key))


class DecodedFragmentReport(BaseModel):
    index: int
    fragment_hex: str
    fragment_text: str


class DecodedSpanReport(BaseModel):
    source_index: int
    key_span: KeySpanReport
    fragments: List[DecodedFragmentReport]

    @classmethod
    def from_decoded(cls, decoded: DecodedSpan) -> "DecodedSpanReport":
        return cls(
            source_index=decoded.source_index,
            key_span=KeySpanReport.from_span(decoded.key_span),
            fragments=[
                DecodedFragmentReport(index=i, fragment_hex=encode_hex(f), fragment_text=render_fragment(f))
                for i, f in enumerate(decoded.fragments)
            ],
        )


class ByteInsightReport(BaseModel):
    position: int
    value_hex: str
    binary: str
    hint: str

    @classmethod
    def from_insight(cls, insight: ByteInsight) -> "ByteInsightReport":
        return cls(
            position=insight.position,
            value_hex=f"{insight.value:02X}",
            binary=insight.binary,
            hint=insight.hint,
        )
