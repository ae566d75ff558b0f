from typing import Literal, Sequence

from rich.markup import escape
from rich.table import Table

from pad_dragger.algorithm.xor_engine import SAME_TYPE_HINT, SPACE_LETTER_HINT
from pad_dragger.models.cipher_bytes import CiphertextPair, CiphertextSet
from pad_dragger.models.results import ByteInsight, DecodedSpan, DragResult, RecoveredKeySpan
from pad_dragger.utils import encode_hex


COLORS = {
    "fragment": {
        "printable": "spring_green2",
        "masked": "dark_red",
    },
    "verdict": {
        "plausible": "bold green",
        "implausible": "dim",
    },
    "hint": {
        SPACE_LETTER_HINT: "yellow",
        SAME_TYPE_HINT: "cyan",
    },
}

type FragmentStyle = Literal["plain", "colored"]


def fragment_to_string(fragment: bytes, style: FragmentStyle = "colored") -> str:
    """Render a fragment as text, masking unprintable bytes with '?'."""
    chars = []
    for b in fragment:
        if 32 <= b <= 126:
            char = escape(chr(b))
            color = COLORS["fragment"]["printable"]
        else:
            char = "?"
            color = COLORS["fragment"]["masked"]
        if style == "colored":
            char = f"[{color}]{char}[/{color}]"
        chars.append(char)
    return "".join(chars)


def render_ciphertexts(ciphertexts: CiphertextSet) -> Table:
    table = Table(title=f"Loaded Ciphertexts  |  {len(ciphertexts)} x {ciphertexts.message_length} bytes")
    table.add_column("#", justify="right")
    table.add_column("Ciphertext (hex)")
    for idx, message in enumerate(ciphertexts):
        table.add_row(str(idx), encode_hex(message))
    return table


def render_pairs(pairs: Sequence[CiphertextPair]) -> Table:
    table = Table(title="XORed Ciphertext Pairs  (Cᵢ ⊕ Cⱼ = Pᵢ ⊕ Pⱼ)")
    table.add_column("Pair", justify="right")
    table.add_column("XOR (hex)")
    for pair in pairs:
        table.add_row(f"{pair.index_i} ⊕ {pair.index_j}", encode_hex(pair.xor_result))
    return table


def render_insights(pair: CiphertextPair, insights: Sequence[ByteInsight]) -> Table:
    """Byte-by-byte view of a pair XOR with the space/letter hints."""
    table = Table(title=f"Analysis of {pair.index_i} ⊕ {pair.index_j}  |  {encode_hex(pair.xor_result)}")
    table.add_column("Position", justify="right")
    table.add_column("Hex")
    table.add_column("Binary")
    table.add_column("Notes")
    for insight in insights:
        notes = insight.hint
        if notes:
            color = COLORS["hint"][notes]
            notes = f"[{color}]{notes}[/{color}]"
        table.add_row(str(insight.position), f"{insight.value:02X}", insight.binary, notes)
    return table


def render_drag_results(crib: bytes, results: Sequence[DragResult]) -> Table:
    table = Table(title=f"Crib {escape(repr(crib))}  |  {len(results)} results")
    table.add_column("Pair", justify="right")
    table.add_column("Offset", justify="right")
    table.add_column("Fragment")
    table.add_column("Hex")
    table.add_column("Ratio", justify="right")
    table.add_column("Plausible")
    for result in results:
        verdict = "plausible" if result.is_plausible else "implausible"
        color = COLORS["verdict"][verdict]
        table.add_row(
            f"{result.index_i} ⊕ {result.index_j}",
            str(result.offset),
            fragment_to_string(result.fragment),
            encode_hex(result.fragment),
            f"{result.printable_ratio:.2f}",
            f"[{color}]{'yes' if result.is_plausible else 'no'}[/{color}]",
        )
    return table


def render_decoded(decoded: DecodedSpan) -> Table:
    span = decoded.key_span
    table = Table(
        title=f"Key span {span.offset}:{span.end} from ciphertext {decoded.source_index}  |  key {encode_hex(span.key)}"
    )
    table.add_column("#", justify="right")
    table.add_column("Plaintext")
    table.add_column("Hex")
    for idx, fragment in enumerate(decoded.fragments):
        marker = "*" if idx == decoded.source_index else ""
        table.add_row(f"{marker}{idx}", fragment_to_string(fragment), encode_hex(fragment))
    return table


def render_guess(spans: Sequence[RecoveredKeySpan]) -> Table:
    """One implied key per ciphertext the guess might belong to."""
    table = Table(title="Keys implied by the guess")
    table.add_column("If guess is #", justify="right")
    table.add_column("Key (hex)")
    table.add_column("Key (text)")
    for idx, span in enumerate(spans):
        table.add_row(str(idx), encode_hex(span.key), fragment_to_string(span.key))
    return table
