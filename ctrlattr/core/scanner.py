"""Cursor-based string readers shared by the attribute and token parsers.

Every reader takes the input text and a cursor position and returns the
advanced position together with the value it read. Readers never consume past
the end of the text or past a caller-supplied terminator.
"""

from __future__ import annotations

import math
import re

from ctrlattr.core.errors import MissingSeparatorError, NoDigitsError, ValueRangeError

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


def skip_whitespace(text: str, pos: int = 0) -> int:
    end = len(text)
    while pos < end and text[pos].isspace():
        pos += 1
    return pos


def chop_whitespace(text: str) -> str:
    return text.rstrip()


def skip_integer(text: str, pos: int = 0) -> int:
    match = _INT_RE.match(text, pos)
    return match.end() if match else pos


def read_integer(text: str, pos: int = 0) -> tuple[int, int]:
    pos = skip_whitespace(text, pos)
    match = _INT_RE.match(text, pos)
    if not match:
        raise NoDigitsError(f"expected an integer at offset {pos}")
    value = int(match.group(0))
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise ValueRangeError(f"integer {match.group(0)} is out of range")
    return match.end(), value


def read_float(text: str, pos: int = 0) -> tuple[int, float]:
    pos = skip_whitespace(text, pos)
    match = _FLOAT_RE.match(text, pos)
    if not match:
        raise NoDigitsError(f"expected a number at offset {pos}")
    value = float(match.group(0))
    if not math.isfinite(value):
        raise ValueRangeError(f"number {match.group(0)} is out of range")
    return match.end(), value


def read_integer_pair(text: str, pos: int, separator: str) -> tuple[int, tuple[int, int]]:
    pos, first = read_integer(text, pos)
    pos = skip_whitespace(text, pos)
    if pos >= len(text) or text[pos] != separator:
        raise MissingSeparatorError(f"expected '{separator}' at offset {pos}")
    pos, second = read_integer(text, pos + 1)
    return pos, (first, second)


def read_float_range(text: str, pos: int = 0) -> tuple[int, tuple[float, float]]:
    pos, low = read_float(text, pos)
    pos = skip_whitespace(text, pos)
    if pos >= len(text) or text[pos] != "-":
        raise MissingSeparatorError(f"expected '-' at offset {pos}")
    pos, high = read_float(text, pos + 1)
    if low > high:
        raise ValueRangeError(f"range minimum {low:g} is greater than maximum {high:g}")
    return pos, (low, high)


def read_name(text: str, pos: int, term: str) -> tuple[int, str]:
    """Read up to ``term`` (or the end of text); the cursor lands past ``term``."""
    end = text.find(term, pos)
    if end < 0:
        return len(text), text[pos:]
    return end + 1, text[pos:end]


def read_display_id(text: str, pos: int = 0) -> tuple[int, int]:
    pos = skip_whitespace(text, pos)
    if text[pos : pos + 4].upper() in ("DPY-", "DPY:"):
        pos += 4
    pos, value = read_integer(text, pos)
    if value < 0:
        raise ValueRangeError(f"display id {value} is negative")
    return pos, value


def parse_numerical(text: str) -> int | None:
    """Return ``text`` as a signed integer if that is all it contains."""
    stripped = text.strip()
    match = _INT_RE.fullmatch(stripped)
    return int(stripped) if match else None


def tokenize(text: str, separator: str) -> tuple[tuple[str, ...], int]:
    if len(separator) != 1:
        raise ValueError("separator must be a single character")
    tokens = tuple(text.split(separator))
    return tokens, len(tokens)


def remove_spaces(text: str) -> str:
    return "".join(ch for ch in text if not ch.isspace())


def replace_characters(text: str, char: str, replacement: str) -> str:
    return text.replace(char, replacement)
