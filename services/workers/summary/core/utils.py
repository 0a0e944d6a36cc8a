from __future__ import annotations
import math
import re
from typing import Any, IO, Optional, cast

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .types import BinaryInput
from .constants import _TEMPLATE_DIR

_JINJA_ENV = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=select_autoescape(["html", "xml"]),
    keep_trailing_newline=True,
)

_DECIMAL_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _ensure_bytes(body: BinaryInput) -> bytes:
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    return cast(IO[bytes], body).read()


def parse_number(value: Any) -> Optional[float]:
    """Parse a cell as a finite decimal number, or return ``None``.

    Text must be a plain decimal literal (optional sign, fraction and exponent)
    once surrounding whitespace is removed. ``inf``/``nan`` spellings, digit
    separators and values that overflow to infinity are rejected. Booleans are
    never numeric.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        trimmed = value.strip()
        if not _DECIMAL_PATTERN.fullmatch(trimmed):
            return None
        number = float(trimmed)
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def format_number(value: float) -> str:
    """Shortest text for a number: ``30`` rather than ``30.0``."""
    if math.isfinite(value) and float(value).is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(float(value))
