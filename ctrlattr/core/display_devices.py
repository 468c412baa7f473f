"""Conversions between display device names and display device masks.

A display device mask packs three categories of eight devices each:

    bits  0-7   CRT-0 .. CRT-7
    bits  8-15  TV-0  .. TV-7
    bits 16-23  DFP-0 .. DFP-7
    bit  24/25/26  every CRT / TV / DFP (wildcards)
"""

from __future__ import annotations

from ctrlattr.core.model import INVALID_DISPLAY_DEVICE_MASK

BITSHIFT_CRT = 0
BITSHIFT_TV = 8
BITSHIFT_DFP = 16

BITMASK_ALL_CRT = 0xFF << BITSHIFT_CRT
BITMASK_ALL_TV = 0xFF << BITSHIFT_TV
BITMASK_ALL_DFP = 0xFF << BITSHIFT_DFP

VALID_DISPLAY_DEVICES_MASK = 0x00FFFFFF
DISPLAY_DEVICES_WILDCARD_MASK = 0xFF000000

DISPLAY_DEVICES_WILDCARD_CRT = 1 << 24
DISPLAY_DEVICES_WILDCARD_TV = 1 << 25
DISPLAY_DEVICES_WILDCARD_DFP = 1 << 26

_USABLE_MASK = (
    VALID_DISPLAY_DEVICES_MASK
    | DISPLAY_DEVICES_WILDCARD_CRT
    | DISPLAY_DEVICES_WILDCARD_TV
    | DISPLAY_DEVICES_WILDCARD_DFP
)

# (keyword, bit shift, wildcard bit), in output order
_CATEGORIES = (
    ("CRT", BITSHIFT_CRT, DISPLAY_DEVICES_WILDCARD_CRT),
    ("TV", BITSHIFT_TV, DISPLAY_DEVICES_WILDCARD_TV),
    ("DFP", BITSHIFT_DFP, DISPLAY_DEVICES_WILDCARD_DFP),
)
_CATEGORY_BY_KEYWORD = {keyword: (shift, wildcard) for keyword, shift, wildcard in _CATEGORIES}


def _token_to_mask(token: str) -> int:
    keyword, dash, index = token.partition("-")
    category = _CATEGORY_BY_KEYWORD.get(keyword.upper())
    if category is None:
        return INVALID_DISPLAY_DEVICE_MASK
    shift, wildcard = category
    if not dash:
        return wildcard
    if len(index) != 1 or index not in "01234567":
        return INVALID_DISPLAY_DEVICE_MASK
    return 1 << (shift + int(index))


def display_device_name_to_mask(name: str) -> int:
    """Return the mask for a name such as ``"CRT-1, DFP"``.

    Returns ``INVALID_DISPLAY_DEVICE_MASK`` if any token is malformed.
    """
    mask = 0
    for raw in name.split(","):
        token = raw.strip()
        if not token:
            return INVALID_DISPLAY_DEVICE_MASK
        bits = _token_to_mask(token)
        if bits == INVALID_DISPLAY_DEVICE_MASK:
            return INVALID_DISPLAY_DEVICE_MASK
        mask |= bits
    return mask


def display_device_mask_to_name(mask: int) -> str:
    """Return the canonical name for ``mask``: CRT, then TV, then DFP."""
    tokens: list[str] = []
    for keyword, shift, wildcard in _CATEGORIES:
        if mask & wildcard:
            tokens.append(keyword)
            continue
        for index in range(8):
            if mask & (1 << (shift + index)):
                tokens.append(f"{keyword}-{index}")
    return ",".join(tokens)


def expand_display_device_mask_wildcards(mask: int) -> int:
    for _, shift, wildcard in _CATEGORIES:
        if mask & wildcard:
            mask = (mask | (0xFF << shift)) & ~wildcard
    return mask


def is_valid_display_device_mask(mask: int) -> bool:
    return mask != INVALID_DISPLAY_DEVICE_MASK and not mask & ~_USABLE_MASK


def count_number_of_bits(mask: int) -> int:
    mask &= 0xFFFFFFFF
    mask = mask - ((mask >> 1) & 0x55555555)
    mask = (mask & 0x33333333) + ((mask >> 2) & 0x33333333)
    mask = (mask + (mask >> 4)) & 0x0F0F0F0F
    return ((mask * 0x01010101) & 0xFFFFFFFF) >> 24
