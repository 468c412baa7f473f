"""Parser for attribute strings.

The accepted syntax is::

    {host}:{display}.{screen}/{attribute name}[{display devices}]={value}

``{host}:{display}.{screen}`` selects the X server and X screen and is
optional. ``{screen}`` may appear on its own, and instead of a screen a
bracketed target may be given, either alone or right after the display name::

    [{target-type}:{target-id}]/{attribute name}...
    {host}:{display}[{target-type}:{target-id}]/{attribute name}...

Anything else to the left of the ``/`` is kept as a free-form target
specification (``gpu:0``, ``GPU-1``, ``DPY-2``) for a resolver to interpret.

``[{display devices}]`` is optional; without it all display devices are
assumed. In query mode the ``={value}`` part must be omitted.
"""

from __future__ import annotations

import logging
import re
from typing import NoReturn

from ctrlattr.core.catalog_loader import default_catalog
from ctrlattr.core.display_devices import (
    display_device_name_to_mask,
    expand_display_device_mask_wildcards,
    is_valid_display_device_mask,
)
from ctrlattr.core.errors import (
    AttributeParseError,
    MissingSeparatorError,
    ParseStatus,
    ScanError,
)
from ctrlattr.core.model import (
    INVALID_DISPLAY_DEVICE_MASK,
    AttributeCatalog,
    AttributeValue,
    CatalogEntry,
    ParsedAttribute,
    ParserMode,
    ValueType,
)
from ctrlattr.core.scanner import (
    read_display_id,
    read_float,
    read_float_range,
    read_integer,
    read_integer_pair,
    skip_whitespace,
)
from ctrlattr.core.sdi_csc import get_sdi_csc_matrix, sdi_csc_matrix_names
from ctrlattr.core.targets import TargetType, target_type_by_name

LOGGER = logging.getLogger(__name__)

NV_PARSER_MAX_NAME_LEN = 256
DISPLAY_NAME_SEPARATOR = "/"

_DIGITS_RE = re.compile(r"[0-9]+")
_FREEFORM_TARGET_RE = re.compile(r"[A-Za-z0-9_.\-]+")
_HEX_RE = re.compile(r"0[xX][0-9a-fA-F]+")
_NAME_TERMINATORS = "[="


def _fail(status: ParseStatus, detail: str | None = None) -> NoReturn:
    raise AttributeParseError(status, detail)


def _address_end(text: str) -> int | None:
    """Return the index of the ``/`` closing the address, if there is one.

    Only a ``/`` ahead of the first ``=`` counts; string values may contain
    slashes of their own.
    """
    equal = text.find("=")
    limit = len(text) if equal < 0 else equal
    slash = text.find(DISPLAY_NAME_SEPARATOR, 0, limit)
    return slash if slash >= 0 else None


def _parse_bracket_target(segment: str, pos: int, record: ParsedAttribute) -> None:
    close = segment.find("]", pos)
    if close < 0:
        _fail(ParseStatus.TARGET_SPEC_BAD_TARGET, "missing ']'")

    content = segment[pos + 1 : close].strip()
    if not content:
        _fail(ParseStatus.TARGET_SPEC_NO_TARGETS)

    keyword, colon, target_id = content.partition(":")
    if not colon:
        if not _FREEFORM_TARGET_RE.fullmatch(content):
            _fail(ParseStatus.TARGET_SPEC_NO_COLON, content)
        record.target_specification = content
    else:
        target_type = target_type_by_name(keyword)
        if target_type is None:
            _fail(ParseStatus.TARGET_SPEC_BAD_TARGET, keyword.strip())
        target_id = target_id.strip()
        if not target_id:
            _fail(ParseStatus.TARGET_SPEC_NO_TARGET_ID)
        if not _DIGITS_RE.fullmatch(target_id):
            _fail(ParseStatus.TARGET_SPEC_BAD_TARGET_ID, target_id)
        record.target_type = target_type
        record.target_id = int(target_id)
        record.has_target = True

    if segment[close + 1 :].strip():
        _fail(ParseStatus.TARGET_SPEC_TRAILING_GARBAGE, segment[close + 1 :].strip())


def _parse_address(segment: str, record: ParsedAttribute) -> None:
    segment = segment.strip()
    if not segment:
        return

    bracket = segment.find("[")
    prefix = segment if bracket < 0 else segment[:bracket].strip()

    if not prefix:
        _parse_bracket_target(segment, 0, record)
        return

    if _DIGITS_RE.fullmatch(prefix):
        if bracket >= 0:
            _fail(ParseStatus.TARGET_SPEC_TRAILING_GARBAGE, "target given after an X screen number")
        record.target_type = TargetType.X_SCREEN
        record.target_id = int(prefix)
        record.has_target = True
        return

    host, colon, display = prefix.rpartition(":")
    number = _DIGITS_RE.match(display) if colon else None
    if number is None or target_type_by_name(host) is not None:
        if bracket >= 0:
            _fail(ParseStatus.TARGET_SPEC_TRAILING_GARBAGE, segment[bracket:])
        record.target_specification = segment
        return

    rest = display[number.end() :]
    record.display = prefix
    record.has_x_display = True
    if not rest:
        if bracket >= 0:
            _parse_bracket_target(segment, bracket, record)
        return

    if not rest.startswith("."):
        _fail(ParseStatus.TARGET_SPEC_TRAILING_GARBAGE, rest)
    screen = rest[1:]
    if not _DIGITS_RE.fullmatch(screen):
        _fail(ParseStatus.TARGET_SPEC_BAD_TARGET_ID, f"invalid X screen '{screen}'")
    if bracket >= 0:
        _fail(ParseStatus.TARGET_SPEC_TRAILING_GARBAGE, "target given after an X screen number")
    record.target_type = TargetType.X_SCREEN
    record.target_id = int(screen)
    record.has_target = True


def _resolve_name(
    text: str, pos: int, catalog: AttributeCatalog, record: ParsedAttribute
) -> tuple[int, CatalogEntry]:
    pos = skip_whitespace(text, pos)
    start = pos
    while pos < len(text) and text[pos] not in _NAME_TERMINATORS and not text[pos].isspace():
        pos += 1
    name = text[start:pos]

    if not name:
        _fail(ParseStatus.ATTR_NAME_MISSING)
    if len(name) >= NV_PARSER_MAX_NAME_LEN:
        _fail(ParseStatus.ATTR_NAME_TOO_LONG)

    entry = catalog.lookup(name)
    if entry is None:
        _fail(ParseStatus.UNKNOWN_ATTR_NAME, name)
    record.attr_entry = entry
    return skip_whitespace(text, pos), entry


def _parse_display_devices(text: str, pos: int, entry: CatalogEntry, record: ParsedAttribute) -> int:
    if pos >= len(text) or text[pos] != "[":
        record.assign_all_displays = True
        return pos

    close = text.find("]", pos)
    if close < 0:
        _fail(ParseStatus.BAD_DISPLAY_DEVICE, "missing ']'")
    spec = text[pos + 1 : close].strip()
    if not spec:
        _fail(ParseStatus.BAD_DISPLAY_DEVICE, "empty display device list")

    record.display_device_specification = spec
    record.has_display_device = True

    # hijacking attributes give the bracket their own meaning
    if not entry.flags.hijack_display_device:
        mask = display_device_name_to_mask(spec)
        if mask == INVALID_DISPLAY_DEVICE_MASK:
            _fail(ParseStatus.BAD_DISPLAY_DEVICE, spec)
        record.display_device_mask = expand_display_device_mask_wildcards(mask)

    pos = skip_whitespace(text, close + 1)
    if pos < len(text) and text[pos] != "=":
        _fail(ParseStatus.TRAILING_GARBAGE, text[pos:])
    return pos


def _read_display_mask_value(text: str, pos: int) -> tuple[int, int]:
    hex_match = _HEX_RE.match(text, pos)
    if hex_match:
        pos, mask = hex_match.end(), int(hex_match.group(0), 16)
    elif _DIGITS_RE.match(text, pos):
        pos, mask = read_integer(text, pos)
    else:
        spec = text[pos:].strip()
        pos, mask = len(text), display_device_name_to_mask(spec)

    if not is_valid_display_device_mask(mask):
        _fail(ParseStatus.BAD_DISPLAY_DEVICE, text.strip())
    return pos, expand_display_device_mask_wildcards(mask)


def _read_integer_value(text: str, pos: int, entry: CatalogEntry) -> tuple[int, int]:
    int_flags = entry.int_flags
    if int_flags.is_packed:
        try:
            pos, (high, low) = read_integer_pair(text, pos, ",")
        except MissingSeparatorError as exc:
            raise AttributeParseError(ParseStatus.MISSING_COMMA, str(exc)) from exc
        return pos, (high << 16) | (low & 0xFFFF)
    if int_flags.is_display_mask:
        return _read_display_mask_value(text, pos)
    if int_flags.is_display_id:
        return read_display_id(text, pos)
    return read_integer(text, pos)


def _read_value(text: str, pos: int, entry: CatalogEntry) -> tuple[int, AttributeValue]:
    if entry.type is ValueType.INTEGER:
        pos, number = _read_integer_value(text, pos, entry)
        return pos, AttributeValue(ValueType.INTEGER, number)
    if entry.type is ValueType.FLOAT:
        pos, real = read_float(text, pos)
        return pos, AttributeValue(ValueType.FLOAT, real)
    if entry.type is ValueType.FLOAT_RANGE:
        pos, bounds = read_float_range(text, pos)
        return pos, AttributeValue(ValueType.FLOAT_RANGE, bounds)
    if entry.type is ValueType.SDI_CSC:
        name = text[pos:].strip()
        matrix = get_sdi_csc_matrix(name)
        if matrix is None:
            known = ", ".join(sdi_csc_matrix_names())
            _fail(ParseStatus.TRAILING_GARBAGE, f"unknown CSC matrix '{name}' (expected one of {known})")
        return len(text), AttributeValue(ValueType.SDI_CSC, matrix)
    return len(text), AttributeValue(ValueType.STRING, text[pos:].strip())


def _parse_value(text: str, pos: int, entry: CatalogEntry, record: ParsedAttribute) -> None:
    if pos >= len(text) or text[pos] != "=":
        _fail(ParseStatus.MISSING_EQUAL_SIGN)
    pos = skip_whitespace(text, pos + 1)
    if pos >= len(text):
        _fail(ParseStatus.NO_VALUE)

    try:
        pos, value = _read_value(text, pos, entry)
    except ScanError as exc:
        raise AttributeParseError(ParseStatus.TRAILING_GARBAGE, str(exc)) from exc

    pos = skip_whitespace(text, pos)
    if pos < len(text):
        _fail(ParseStatus.TRAILING_GARBAGE, text[pos:])
    record.set_value(value)


def _parse_into(
    text: str,
    mode: ParserMode,
    catalog: AttributeCatalog,
    record: ParsedAttribute,
) -> None:
    pos = 0
    slash = _address_end(text)
    if slash is not None:
        _parse_address(text[:slash], record)
        pos = slash + 1

    pos, entry = _resolve_name(text, pos, catalog, record)
    pos = _parse_display_devices(text, pos, entry, record)

    if mode is ParserMode.QUERY:
        if pos < len(text):
            _fail(ParseStatus.TRAILING_GARBAGE, text[pos:])
        return
    _parse_value(text, pos, entry, record)


def parse_attribute_string(
    text: str,
    mode: ParserMode = ParserMode.ASSIGNMENT,
    catalog: AttributeCatalog | None = None,
    record: ParsedAttribute | None = None,
) -> ParsedAttribute:
    """Parse ``text`` into a :class:`ParsedAttribute`.

    When ``record`` is given it is cleaned and filled in place, so a caller
    parsing a batch can reuse one object. On failure an
    :class:`AttributeParseError` carrying the status is raised and the record
    is left partially filled; call ``release()`` or ``clean()`` on it.
    """
    if not isinstance(text, str) or not isinstance(mode, ParserMode):
        _fail(ParseStatus.BAD_ARGUMENT)
    if not text.strip():
        _fail(ParseStatus.EMPTY_STRING)

    if record is None:
        record = ParsedAttribute()
    else:
        record.clean()

    try:
        _parse_into(text, mode, catalog if catalog is not None else default_catalog(), record)
    except AttributeParseError as exc:
        LOGGER.debug("Could not parse attribute string %r: %s", text, exc)
        raise
    return record


def parse_status(
    text: str,
    mode: ParserMode = ParserMode.ASSIGNMENT,
    catalog: AttributeCatalog | None = None,
) -> tuple[ParseStatus, ParsedAttribute | None]:
    """Like :func:`parse_attribute_string`, but report failures as a status."""
    try:
        record = parse_attribute_string(text, mode, catalog)
    except AttributeParseError as exc:
        return exc.status, None
    return ParseStatus.SUCCESS, record
