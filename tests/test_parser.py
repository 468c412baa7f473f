from __future__ import annotations

import pytest

from ctrlattr.core.catalog_loader import default_catalog
from ctrlattr.core.display_devices import BITMASK_ALL_DFP
from ctrlattr.core.errors import AttributeParseError, ParseStatus
from ctrlattr.core.model import (
    INVALID_DISPLAY_DEVICE_MASK,
    ParsedAttribute,
    ParserMode,
    ValueType,
)
from ctrlattr.core.parser import parse_attribute_string, parse_status
from ctrlattr.core.targets import TargetType

ASSIGN = ParserMode.ASSIGNMENT
QUERY = ParserMode.QUERY


def _status(text: object, mode: ParserMode = ASSIGN) -> ParseStatus:
    with pytest.raises(AttributeParseError) as excinfo:
        parse_attribute_string(text, mode)  # type: ignore[arg-type]
    return excinfo.value.status


def test_plain_assignment_without_address() -> None:
    record = parse_attribute_string("/Brightness=50", ASSIGN)
    assert record.attr_entry is not None
    assert record.attr_entry.name == "Brightness"
    assert record.value is not None
    assert record.value.data == 50
    assert record.has_value
    assert not record.has_x_display
    assert not record.has_target
    assert record.display is None
    assert record.target_specification is None
    assert record.assign_all_displays


def test_separator_is_optional_without_address() -> None:
    record = parse_attribute_string("  DigitalVibrance = -12  ", ASSIGN)
    assert record.value is not None
    assert record.value.data == -12


def test_name_lookup_ignores_case() -> None:
    names = ["brightness", "BRIGHTNESS", "BrIgHtNeSs"]
    entries = {parse_attribute_string(name, QUERY).attr_entry for name in names}
    assert entries == {default_catalog().lookup("Brightness")}


def test_host_display_and_screen() -> None:
    record = parse_attribute_string("localhost:1.2/Brightness", QUERY)
    assert record.display == "localhost:1.2"
    assert record.has_x_display
    assert record.target_type is TargetType.X_SCREEN
    assert record.target_id == 2
    assert record.has_target
    assert not record.has_value


def test_host_display_without_screen() -> None:
    record = parse_attribute_string(":0/Brightness", QUERY)
    assert record.display == ":0"
    assert record.has_x_display
    assert not record.has_target


def test_screen_number_alone() -> None:
    record = parse_attribute_string("1/GPUCoreTemp", QUERY)
    assert record.display is None
    assert record.target_type is TargetType.X_SCREEN
    assert record.target_id == 1


def test_bracket_target_alone() -> None:
    record = parse_attribute_string("[GPU:1]/GPUCoreTemp", QUERY)
    assert record.target_type is TargetType.GPU
    assert record.target_id == 1
    assert record.has_target
    assert not record.has_x_display
    assert record.effective_target() == (TargetType.GPU, 1)


def test_bracket_target_after_display() -> None:
    record = parse_attribute_string("host:0[framelock:0]/FrameLockSyncDelay", QUERY)
    assert record.display == "host:0"
    assert record.target_type is TargetType.FRAMELOCK
    assert record.target_id == 0


@pytest.mark.parametrize("address", ["gpu:0", "GPU-0", "DPY-1", "fan"])
def test_free_form_target_specification(address: str) -> None:
    record = parse_attribute_string(f"{address}/GPUCoreTemp", QUERY)
    assert record.target_specification == address
    assert record.effective_target() == address
    assert not record.has_x_display


def test_bracket_without_colon_is_free_form() -> None:
    record = parse_attribute_string("[GPU-0]/GPUCoreTemp", QUERY)
    assert record.target_specification == "GPU-0"


def test_target_specification_wins_over_direct_target() -> None:
    record = ParsedAttribute(
        target_specification="gpu:1",
        target_type=TargetType.X_SCREEN,
        target_id=0,
        has_target=True,
    )
    assert record.effective_target() == "gpu:1"


def test_unknown_name_after_free_form_address() -> None:
    assert _status("gpu:0/ x") is ParseStatus.UNKNOWN_ATTR_NAME


def test_screen_and_bracket_target_are_exclusive() -> None:
    assert _status("localhost:1.2[gpu:0]/Brightness=1") is ParseStatus.TARGET_SPEC_TRAILING_GARBAGE
    assert _status("localhost:1[gpu:0].2/Brightness=1") is ParseStatus.TARGET_SPEC_TRAILING_GARBAGE
    assert _status("0[gpu:0]/Brightness=1") is ParseStatus.TARGET_SPEC_TRAILING_GARBAGE


@pytest.mark.parametrize(
    ("text", "status"),
    [
        ("[]/GPUCoreTemp", ParseStatus.TARGET_SPEC_NO_TARGETS),
        ("[gpu 0;1]/GPUCoreTemp", ParseStatus.TARGET_SPEC_NO_COLON),
        ("[toaster:0]/GPUCoreTemp", ParseStatus.TARGET_SPEC_BAD_TARGET),
        ("[gpu:0/GPUCoreTemp", ParseStatus.TARGET_SPEC_BAD_TARGET),
        ("[gpu:]/GPUCoreTemp", ParseStatus.TARGET_SPEC_NO_TARGET_ID),
        ("[gpu:x]/GPUCoreTemp", ParseStatus.TARGET_SPEC_BAD_TARGET_ID),
        ("[gpu:-1]/GPUCoreTemp", ParseStatus.TARGET_SPEC_BAD_TARGET_ID),
        ("[gpu:0]x/GPUCoreTemp", ParseStatus.TARGET_SPEC_TRAILING_GARBAGE),
        ("host:0.x/GPUCoreTemp", ParseStatus.TARGET_SPEC_BAD_TARGET_ID),
        ("host:0x/GPUCoreTemp", ParseStatus.TARGET_SPEC_TRAILING_GARBAGE),
    ],
)
def test_target_spec_errors(text: str, status: ParseStatus) -> None:
    assert _status(text, QUERY) is status


def test_argument_and_empty_errors() -> None:
    assert _status(None) is ParseStatus.BAD_ARGUMENT
    with pytest.raises(AttributeParseError) as excinfo:
        parse_attribute_string("Brightness", "query")  # type: ignore[arg-type]
    assert excinfo.value.status is ParseStatus.BAD_ARGUMENT
    assert _status("") is ParseStatus.EMPTY_STRING
    assert _status("   ") is ParseStatus.EMPTY_STRING


def test_attribute_name_errors() -> None:
    assert _status("/=5") is ParseStatus.ATTR_NAME_MISSING
    assert _status("localhost:0/") is ParseStatus.ATTR_NAME_MISSING
    assert _status("/" + "A" * 256 + "=1") is ParseStatus.ATTR_NAME_TOO_LONG
    assert _status("/" + "A" * 255 + "=1") is ParseStatus.UNKNOWN_ATTR_NAME
    assert _status("/NoSuchThing=1") is ParseStatus.UNKNOWN_ATTR_NAME


def test_value_errors() -> None:
    assert _status("/Brightness 50") is ParseStatus.MISSING_EQUAL_SIGN
    assert _status("/Brightness") is ParseStatus.MISSING_EQUAL_SIGN
    assert _status("/Brightness=") is ParseStatus.NO_VALUE
    assert _status("/Brightness=   ") is ParseStatus.NO_VALUE
    assert _status("/Brightness=50extra") is ParseStatus.TRAILING_GARBAGE
    assert _status("/Brightness=abc") is ParseStatus.TRAILING_GARBAGE


def test_out_of_range_integer_is_reported_with_detail() -> None:
    with pytest.raises(AttributeParseError) as excinfo:
        parse_attribute_string("/Brightness=99999999999", ASSIGN)
    assert excinfo.value.status is ParseStatus.TRAILING_GARBAGE
    assert "out of range" in str(excinfo.value)


@pytest.mark.parametrize("text", ["/Brightness=50", "Brightness=1", "[gpu:0]/GPUCoreTemp=3"])
def test_query_mode_rejects_values(text: str) -> None:
    assert _status(text, QUERY) is ParseStatus.TRAILING_GARBAGE


def test_display_device_bracket() -> None:
    record = parse_attribute_string("/DigitalVibrance[CRT-0, dfp]=10", ASSIGN)
    assert record.has_display_device
    assert record.display_device_specification == "CRT-0, dfp"
    assert record.display_device_mask == 0x1 | BITMASK_ALL_DFP
    assert not record.assign_all_displays


@pytest.mark.parametrize(
    "text",
    [
        "/Dithering[CRT-9]=1",
        "/Dithering[LCD]=1",
        "/Dithering[]=1",
        "/Dithering[CRT-0=1",
        "/Dithering[CRT-\u00b2]=1",
        "/Dithering[DFP-\u0663]=1",
        "/AssociatedDisplays=CRT-\u00b2",
    ],
)
def test_bad_display_device(text: str) -> None:
    assert _status(text) is ParseStatus.BAD_DISPLAY_DEVICE


def test_junk_after_display_device_bracket() -> None:
    assert _status("/Dithering[CRT-0]]=1") is ParseStatus.TRAILING_GARBAGE
    assert _status("/Dithering[CRT-0] x=1") is ParseStatus.TRAILING_GARBAGE
    assert _status("/Dithering[CRT-0]") is ParseStatus.MISSING_EQUAL_SIGN


def test_hijacking_attribute_keeps_raw_bracket() -> None:
    record = parse_attribute_string("FrameLockDisplayConfig[DPY-2]=1", ASSIGN)
    assert record.display_device_specification == "DPY-2"
    assert record.has_display_device
    assert record.display_device_mask == INVALID_DISPLAY_DEVICE_MASK


def test_float_value() -> None:
    record = parse_attribute_string("/Gamma=1.25", ASSIGN)
    assert record.value is not None
    assert record.value.type is ValueType.FLOAT
    assert record.value.data == 1.25


def test_float_range_value() -> None:
    record = parse_attribute_string("RefreshRateRange=50-75.5", ASSIGN)
    assert record.value is not None
    assert record.value.data == (50.0, 75.5)
    with pytest.raises(AttributeParseError) as excinfo:
        parse_attribute_string("RefreshRateRange=75-50", ASSIGN)
    assert excinfo.value.status is ParseStatus.TRAILING_GARBAGE
    assert "greater than" in str(excinfo.value)


def test_packed_integer_value() -> None:
    record = parse_attribute_string("GPU3DClockFreqs=300,800", ASSIGN)
    assert record.value is not None
    assert record.value.data == (300 << 16) | 800
    assert _status("GPU3DClockFreqs=300") is ParseStatus.MISSING_COMMA


def test_display_mask_value() -> None:
    record = parse_attribute_string("AssociatedDisplays=CRT-0,DFP-1", ASSIGN)
    assert record.value is not None
    assert record.value.data == 0x00020001

    record = parse_attribute_string("AssociatedDisplays=0x10000", ASSIGN)
    assert record.value is not None
    assert record.value.data == 0x00010000

    record = parse_attribute_string("AssociatedDisplays=TV", ASSIGN)
    assert record.value is not None
    assert record.value.data == 0x0000FF00

    assert _status("AssociatedDisplays=CRT-8") is ParseStatus.BAD_DISPLAY_DEVICE


def test_display_id_value() -> None:
    record = parse_attribute_string("PrimaryDisplay=DPY-3", ASSIGN)
    assert record.value is not None
    assert record.value.data == 3


def test_csc_matrix_value() -> None:
    record = parse_attribute_string("GvoCSCMatrix=ITU709", ASSIGN)
    assert record.value is not None
    assert record.value.type is ValueType.SDI_CSC
    assert len(record.value.data) == 15
    assert _status("GvoCSCMatrix=sepia") is ParseStatus.TRAILING_GARBAGE


def test_string_value_keeps_inner_text() -> None:
    record = parse_attribute_string(":0.0/CurrentMetaMode=DPY-1: nvidia-auto-select +0+0 ", ASSIGN)
    assert record.value is not None
    assert record.value.data == "DPY-1: nvidia-auto-select +0+0"
    assert record.target_id == 0


def test_parse_status_reports_without_raising() -> None:
    assert parse_status("/Brightness=")[0] is ParseStatus.NO_VALUE
    status, record = parse_status("/Brightness=5")
    assert status is ParseStatus.SUCCESS
    assert record is not None


def test_record_is_reusable_after_failure() -> None:
    record = ParsedAttribute()
    with pytest.raises(AttributeParseError):
        parse_attribute_string("localhost:0/Brightness=x", ASSIGN, record=record)
    assert record.display == "localhost:0"

    parse_attribute_string("/Gamma=2.0", ASSIGN, record=record)
    assert record.display is None
    assert record.attr_entry is not None
    assert record.attr_entry.name == "Gamma"
