from __future__ import annotations

import pytest

from ctrlattr.core.display_devices import (
    BITMASK_ALL_DFP,
    DISPLAY_DEVICES_WILDCARD_CRT,
    DISPLAY_DEVICES_WILDCARD_DFP,
    DISPLAY_DEVICES_WILDCARD_TV,
    count_number_of_bits,
    display_device_mask_to_name,
    display_device_name_to_mask,
    expand_display_device_mask_wildcards,
    is_valid_display_device_mask,
)
from ctrlattr.core.model import INVALID_DISPLAY_DEVICE_MASK


def test_indexed_tokens_set_single_bits() -> None:
    assert display_device_name_to_mask("CRT-1") == 0x00000002
    assert display_device_name_to_mask("TV-0") == 0x00000100
    assert display_device_name_to_mask("DFP-7") == 0x00800000
    assert display_device_name_to_mask("crt-1, dfp-0") == 0x00010002


def test_bare_keyword_sets_wildcard_bit() -> None:
    assert display_device_name_to_mask("CRT") == DISPLAY_DEVICES_WILDCARD_CRT
    assert display_device_name_to_mask("tv") == DISPLAY_DEVICES_WILDCARD_TV
    assert display_device_name_to_mask("DFP,CRT-0") == DISPLAY_DEVICES_WILDCARD_DFP | 0x1


@pytest.mark.parametrize(
    "name", ["CRT-8", "DFP-", "LCD-0", "CRT-1,", "", "CRT-01", "TV-x", "CRT-\u00b2", "CRT-\u0663"]
)
def test_malformed_names_are_invalid(name: str) -> None:
    assert display_device_name_to_mask(name) == INVALID_DISPLAY_DEVICE_MASK


def test_mask_to_name_orders_categories_and_indices() -> None:
    assert display_device_mask_to_name(0x00010102) == "CRT-1,TV-0,DFP-0"
    assert display_device_mask_to_name(0x00000009) == "CRT-0,CRT-3"
    assert display_device_mask_to_name(DISPLAY_DEVICES_WILDCARD_DFP | 0x00010000) == "DFP"
    assert display_device_mask_to_name(0) == ""


def test_canonical_name_reparses_to_same_mask() -> None:
    for name in ["DFP-2,CRT-1,CRT-1", "tv,CRT-7", "DFP-0,DFP-1,TV-3", "CRT,TV,DFP"]:
        mask = display_device_name_to_mask(name)
        assert display_device_name_to_mask(display_device_mask_to_name(mask)) == mask


def test_expand_wildcards() -> None:
    mask = display_device_name_to_mask("CRT-0,CRT-3,DFP")
    expanded = expand_display_device_mask_wildcards(mask)
    assert expanded == 0x00000009 | BITMASK_ALL_DFP
    assert expand_display_device_mask_wildcards(expanded) == expanded

    roundtrip = display_device_name_to_mask(display_device_mask_to_name(mask))
    assert expand_display_device_mask_wildcards(roundtrip) == expanded


def test_expand_leaves_other_categories_alone() -> None:
    mask = DISPLAY_DEVICES_WILDCARD_TV | 0x00000004
    assert expand_display_device_mask_wildcards(mask) == 0x0000FF04


def test_mask_validity() -> None:
    assert is_valid_display_device_mask(0x00FFFFFF)
    assert is_valid_display_device_mask(DISPLAY_DEVICES_WILDCARD_CRT)
    assert not is_valid_display_device_mask(INVALID_DISPLAY_DEVICE_MASK)
    assert not is_valid_display_device_mask(1 << 27)


def test_count_number_of_bits() -> None:
    assert count_number_of_bits(0) == 0
    assert count_number_of_bits(0x00010000) == 1
    assert count_number_of_bits(0x00FFFFFF) == 24
    assert count_number_of_bits(0xFFFFFFFF) == 32
