import base64
import binascii
import importlib.util
import inspect
import re
import types
from typing import Callable, Iterable, Literal, Union

import structlog

from pad_dragger.errors import (
    MalformedHexError,
    MalformedInputError,
    PluginLoadError,
    PluginSignatureError,
)
from pad_dragger.models.cipher_bytes import BytesLike, CiphertextSet, as_bytes

log = structlog.get_logger(__name__)

ScoreFn = Callable[[bytes], float]

PLUGIN_FUNC_NAME = "score"

type CiphertextFormat = Union[Literal["hex", "b64"], str]

HEX_PATTERN = re.compile(r"[0-9A-Fa-f]*")


def decode_hex(text: str) -> bytes:
    """Decode a run of hex digits (no separators, either case) to bytes."""
    if not HEX_PATTERN.fullmatch(text):
        raise MalformedHexError(f"Not a hexadecimal string: {text!r}")
    if len(text) % 2:
        raise MalformedHexError(
            f"Hex string has odd length {len(text)}; every byte needs two digits"
        )
    return bytes.fromhex(text)


def encode_hex(data: BytesLike) -> str:
    """Encode bytes as uppercase hex."""
    return as_bytes(data).hex().upper()


def b64_decode(b64_text: str) -> bytes:
    """Decodes either standard or URL-safe b64. Tolerates missing '=' padding."""
    missing = len(b64_text) % 4
    if missing:
        b64_text += "=" * (4 - missing)

    try:
        return base64.b64decode(b64_text, validate=True)
    except binascii.Error:
        pass

    try:
        return base64.b64decode(b64_text, altchars=b"-_", validate=True)  # URL-safe fallback
    except binascii.Error as e:
        raise MalformedInputError(f"Not a base64 string: {b64_text!r}") from e


def decode_line(text: str, format: CiphertextFormat = "hex") -> bytes:
    if format == "hex":
        return decode_hex(text)
    elif format == "b64":
        return b64_decode(text)
    else:
        raise ValueError(f"Invalid ciphertext format: {format}")


def parse_ciphertexts(lines: Iterable[str], format: CiphertextFormat = "hex") -> CiphertextSet:
    """Build a ciphertext set from text lines, one message per line.

    Blank lines are skipped. A line that fails to decode is rejected with its
    line number instead of being dropped, and the length and count checks of
    ``CiphertextSet`` apply to whatever is left.
    """
    messages = []
    for line_no, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            log.debug("skipping blank line", line_no=line_no)
            continue
        try:
            messages.append(decode_line(line, format))
        except MalformedInputError as e:
            raise type(e)(f"Line {line_no}: {e}") from e

    return CiphertextSet.of(messages)


def load_ciphertexts(file_path: str, format: CiphertextFormat = "hex") -> CiphertextSet:
    """Load the ciphertexts from a file."""
    with open(file_path, "r", encoding="utf-8") as f:
        ciphertexts = parse_ciphertexts(f, format)
    log.info(
        "ciphertexts loaded",
        path=file_path,
        count=len(ciphertexts),
        message_length=ciphertexts.message_length,
    )
    return ciphertexts


def render_fragment(data: BytesLike, placeholder: str = "?") -> str:
    """Show printable ASCII as-is and mask every other byte."""
    return "".join(chr(b) if 32 <= b <= 126 else placeholder for b in as_bytes(data))


def load_module_from_file(module_file_path: str) -> types.ModuleType:
    """Load a Python module file."""
    spec = importlib.util.spec_from_file_location("score_fn", module_file_path)
    if spec is None or spec.loader is None:
        raise PluginLoadError(f"Could not load spec for: {module_file_path}")
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)  # executes user code
    return mod


def load_score_fn(module_file_path: str) -> ScoreFn:
    """Load the user defined scoring function from a Python module file."""
    mod = load_module_from_file(module_file_path)
    fn = getattr(mod, PLUGIN_FUNC_NAME, None)
    if fn is None:
        raise PluginLoadError(
            f"Plugin must define `{PLUGIN_FUNC_NAME}(fragment: bytes) -> float`"
        )

    sig = inspect.signature(fn)
    params = list(sig.parameters.values())
    if len(params) != 1 or params[0].kind not in (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
    ):
        raise PluginSignatureError(
            "score must accept exactly one positional arg: (fragment: bytes)"
        )
    return fn
