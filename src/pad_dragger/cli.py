from typing import List, Optional

import click
from pydantic import TypeAdapter
from rich.console import Console

from pad_dragger.algorithm.scoring import DEFAULT_THRESHOLD
from pad_dragger.algorithm.xor_engine import describe_xor_bytes
from pad_dragger.config import AnalysisConfig
from pad_dragger.errors import PadDraggerError, PluginLoadError, PluginSignatureError
from pad_dragger.log import configure_logging
from pad_dragger.models.report import (
    ByteInsightReport,
    DecodedSpanReport,
    DragResultReport,
    KeySpanReport,
    PairReport,
)
from pad_dragger.solver import CribSolver
from pad_dragger.ui import (
    render_ciphertexts,
    render_decoded,
    render_drag_results,
    render_guess,
    render_insights,
    render_pairs,
)
from pad_dragger.utils import decode_hex, encode_hex, load_ciphertexts

HANDLED_ERRORS = (PadDraggerError, PluginLoadError, PluginSignatureError, IndexError)


def get_console() -> Console:
    return Console(highlight=False)


def emit_json(model_type, items) -> None:
    click.echo(TypeAdapter(List[model_type]).dump_json(items, indent=2).decode("utf-8"))


def parse_text_arg(value: str, is_hex: bool) -> bytes:
    """Command line cribs and guesses are UTF-8 text unless --hex is given."""
    if is_hex:
        return decode_hex(value)
    return value.encode("utf-8")


@click.group()
@click.option("--ciphertexts", "-c", "ciphertext_path", required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--format", "-f", "ciphertext_format", type=click.Choice(["hex", "b64"]), default="hex")
@click.option("--json", "as_json", is_flag=True, help="Print structured JSON instead of tables")
@click.option("--verbose", "-v", is_flag=True, help="Log debug events to stderr")
@click.pass_context
def cli(ctx: click.Context, ciphertext_path: str, ciphertext_format: str, as_json: bool, verbose: bool):
    """Crib-drag ciphertexts that were encrypted with a reused one-time pad."""
    configure_logging(verbose)
    try:
        ciphertexts = load_ciphertexts(ciphertext_path, ciphertext_format)
    except PadDraggerError as e:
        raise click.ClickException(f"Error loading ciphertexts: {e}")

    ctx.obj = {
        "ciphertexts": ciphertexts,
        "as_json": as_json,
    }


def build_solver(ctx: click.Context, config: Optional[AnalysisConfig] = None) -> CribSolver:
    config = config or AnalysisConfig()
    try:
        return CribSolver(ctx.obj["ciphertexts"], scorer=config.build_scorer())
    except HANDLED_ERRORS as e:
        raise click.ClickException(str(e))


@cli.command("list")
@click.pass_context
def list_ciphertexts(ctx: click.Context):
    """Show the loaded ciphertexts."""
    ciphertexts = ctx.obj["ciphertexts"]
    if ctx.obj["as_json"]:
        click.echo(TypeAdapter(List[str]).dump_json([encode_hex(m) for m in ciphertexts], indent=2).decode("utf-8"))
        return
    get_console().print(render_ciphertexts(ciphertexts))


@cli.command()
@click.option("--with", "with_index", type=int, default=None, help="Only pairs involving this ciphertext")
@click.pass_context
def pairs(ctx: click.Context, with_index: Optional[int]):
    """Show the XOR of every ciphertext pair."""
    solver = build_solver(ctx)
    try:
        selected = solver.pairs if with_index is None else solver.pairs_with(with_index)
    except HANDLED_ERRORS as e:
        raise click.ClickException(str(e))

    if ctx.obj["as_json"]:
        emit_json(PairReport, [PairReport.from_pair(p) for p in selected])
        return
    get_console().print(render_pairs(selected))


@cli.command()
@click.argument("first", type=int)
@click.argument("second", type=int)
@click.pass_context
def inspect(ctx: click.Context, first: int, second: int):
    """Byte-by-byte view of one pair XOR with space/letter hints."""
    solver = build_solver(ctx)
    try:
        pair = solver.pair(first, second)
    except HANDLED_ERRORS as e:
        raise click.ClickException(str(e))

    insights = describe_xor_bytes(pair.xor_result)
    if ctx.obj["as_json"]:
        emit_json(ByteInsightReport, [ByteInsightReport.from_insight(i) for i in insights])
        return
    get_console().print(render_insights(pair, insights))


@cli.command()
@click.argument("crib")
@click.option("--hex", "crib_is_hex", is_flag=True, help="Crib is given as hex")
@click.option("--threshold", "-t", type=click.FloatRange(0.0, 1.0), default=DEFAULT_THRESHOLD, show_default=True)
@click.option("--scorer", "-s", type=click.Choice(["textual", "printable"]), default="textual", show_default=True)
@click.option("--scorer-plugin", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Python file defining score(fragment: bytes) -> float")
@click.option("--all", "show_all", is_flag=True, help="Report every offset, not only plausible ones")
@click.option("--first", "stop_at_first", is_flag=True, help="Stop at the first plausible fragment")
@click.option("--workers", "-w", type=click.IntRange(min=1), default=None)
@click.pass_context
def drag(
    ctx: click.Context,
    crib: str,
    crib_is_hex: bool,
    threshold: float,
    scorer: str,
    scorer_plugin: Optional[str],
    show_all: bool,
    stop_at_first: bool,
    workers: Optional[int],
):
    """Slide CRIB across every pair and report plausible fragments."""
    config = AnalysisConfig(
        threshold=threshold,
        scorer=scorer,
        scorer_plugin=scorer_plugin,
        max_workers=workers,
        show_all=show_all,
    )
    solver = build_solver(ctx, config)
    try:
        crib_bytes = parse_text_arg(crib, crib_is_hex)
        results = solver.drag(
            crib_bytes,
            threshold=None if config.show_all else config.threshold,
            stop_when=(lambda r: r.is_plausible) if stop_at_first else None,
            max_workers=config.max_workers,
        )
    except HANDLED_ERRORS as e:
        raise click.ClickException(str(e))

    if ctx.obj["as_json"]:
        emit_json(DragResultReport, [DragResultReport.from_result(r) for r in results])
        return
    get_console().print(render_drag_results(crib_bytes, results))


@cli.command()
@click.argument("index", type=int)
@click.argument("offset", type=int)
@click.argument("crib")
@click.option("--hex", "crib_is_hex", is_flag=True, help="Crib is given as hex")
@click.pass_context
def decode(ctx: click.Context, index: int, offset: int, crib: str, crib_is_hex: bool):
    """Confirm CRIB in ciphertext INDEX at OFFSET and decode that span in every message."""
    solver = build_solver(ctx)
    try:
        decoded = solver.decode_span(index, parse_text_arg(crib, crib_is_hex), offset)
    except HANDLED_ERRORS as e:
        raise click.ClickException(str(e))

    if ctx.obj["as_json"]:
        click.echo(DecodedSpanReport.from_decoded(decoded).model_dump_json(indent=2))
        return
    get_console().print(render_decoded(decoded))


@cli.command()
@click.argument("guess")
@click.option("--hex", "guess_is_hex", is_flag=True, help="Guess is given as hex")
@click.pass_context
def guess(ctx: click.Context, guess: str, guess_is_hex: bool):
    """XOR a full-length plaintext GUESS with every ciphertext."""
    solver = build_solver(ctx)
    try:
        spans = solver.test_guess(parse_text_arg(guess, guess_is_hex))
    except HANDLED_ERRORS as e:
        raise click.ClickException(str(e))

    if ctx.obj["as_json"]:
        emit_json(KeySpanReport, [KeySpanReport.from_span(s) for s in spans])
        return
    get_console().print(render_guess(spans))


if __name__ == "__main__":
    cli()
