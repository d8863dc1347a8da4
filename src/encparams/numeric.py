"""Lenient numeric prefix parsing for parameter values and header fields."""

from __future__ import annotations

import re
from typing import Tuple

__all__ = ["parse_leading_float", "parse_leading_int"]

_INT_RE = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")
_FLOAT_RE = re.compile(
    r"[ \t\n\v\f\r]*("
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)"
    r")",
    re.IGNORECASE,
)


def parse_leading_int(text: str) -> Tuple[int, str, bool]:
    """
    Parse the decimal integer at the start of ``text``.

    Returns ``(value, rest, matched)``. Leading whitespace and a sign are
    accepted; when no digits are present the value is ``0``, ``rest`` is the
    untouched input and ``matched`` is False.
    """

    match = _INT_RE.match(text)
    if match is None:
        return 0, text, False
    return int(match.group(1)), text[match.end() :], True


def parse_leading_float(text: str) -> Tuple[float, str, bool]:
    """Parse a decimal or exponential literal at the start of ``text``."""

    match = _FLOAT_RE.match(text)
    if match is None:
        return 0.0, text, False
    return float(match.group(1)), text[match.end() :], True
