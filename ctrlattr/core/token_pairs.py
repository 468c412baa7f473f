"""Parser for loose ``token=value`` lists such as ``"mode=1, rate=60"``."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from ctrlattr.core.errors import TokenValueError
from ctrlattr.core.scanner import chop_whitespace, read_name, skip_whitespace

ApplyTokenFunc = Callable[[str, str, Any], None]


def split_token_value_pairs(text: str, separator: str = ",") -> list[tuple[str, str]]:
    """Return the ``(token, value)`` pairs in ``text`` in order.

    Whitespace around tokens and values is dropped and empty segments are
    skipped. Raises :class:`TokenValueError` on the first segment without an
    ``=`` or with an empty token.
    """
    if len(separator) != 1:
        raise TokenValueError("Pair separator must be a single character")
    pairs: list[tuple[str, str]] = []
    pos = 0
    while pos < len(text):
        pos, segment = read_name(text, pos, separator)
        segment = chop_whitespace(segment[skip_whitespace(segment) :])
        if not segment:
            continue
        if "=" not in segment:
            raise TokenValueError(f"Missing '=' in '{segment}'")
        end, token = read_name(segment, 0, "=")
        token = chop_whitespace(token)
        if not token:
            raise TokenValueError(f"Missing token name in '{segment}'")
        value = segment[skip_whitespace(segment, end) :]
        pairs.append((token, value))
    return pairs


def parse_token_value_pairs(
    text: str,
    func: ApplyTokenFunc,
    data: Any = None,
    separator: str = ",",
) -> None:
    """Call ``func(token, value, data)`` for every pair in ``text``.

    The whole string is validated first, so ``func`` never runs when any
    segment is malformed.
    """
    for token, value in split_token_value_pairs(text, separator):
        func(token, value, data)
