"""Domain-specific errors and parser status codes for ctrlattr."""

from __future__ import annotations

from enum import IntEnum


class ParseStatus(IntEnum):
    SUCCESS = 0
    BAD_ARGUMENT = 1
    EMPTY_STRING = 2
    ATTR_NAME_TOO_LONG = 3
    ATTR_NAME_MISSING = 4
    BAD_DISPLAY_DEVICE = 5
    MISSING_EQUAL_SIGN = 6
    NO_VALUE = 7
    TRAILING_GARBAGE = 8
    UNKNOWN_ATTR_NAME = 9
    MISSING_COMMA = 10
    TARGET_SPEC_NO_COLON = 11
    TARGET_SPEC_BAD_TARGET = 12
    TARGET_SPEC_NO_TARGET_ID = 13
    TARGET_SPEC_BAD_TARGET_ID = 14
    TARGET_SPEC_TRAILING_GARBAGE = 15
    TARGET_SPEC_NO_TARGETS = 16

    @property
    def description(self) -> str:
        return _STATUS_DESCRIPTIONS[self]


_STATUS_DESCRIPTIONS = {
    ParseStatus.SUCCESS: "No error",
    ParseStatus.BAD_ARGUMENT: "Bad argument",
    ParseStatus.EMPTY_STRING: "Empty string",
    ParseStatus.ATTR_NAME_TOO_LONG: "The attribute name is too long",
    ParseStatus.ATTR_NAME_MISSING: "Missing attribute name",
    ParseStatus.BAD_DISPLAY_DEVICE: "Malformed display device identification",
    ParseStatus.MISSING_EQUAL_SIGN: "Missing equal sign after attribute name",
    ParseStatus.NO_VALUE: "No attribute value specified",
    ParseStatus.TRAILING_GARBAGE: "Trailing garbage",
    ParseStatus.UNKNOWN_ATTR_NAME: "Unrecognized attribute name",
    ParseStatus.MISSING_COMMA: "Missing comma in packed integer value",
    ParseStatus.TARGET_SPEC_NO_COLON: "No colon in target specification string",
    ParseStatus.TARGET_SPEC_BAD_TARGET: "Bad target in target specification string",
    ParseStatus.TARGET_SPEC_NO_TARGET_ID: "No target ID in target specification string",
    ParseStatus.TARGET_SPEC_BAD_TARGET_ID: "Bad target ID in target specification string",
    ParseStatus.TARGET_SPEC_TRAILING_GARBAGE: "Trailing garbage after target specification",
    ParseStatus.TARGET_SPEC_NO_TARGETS: "No targets match target specification",
}


def strerror(status: int) -> str:
    """Return the human-readable description for a parser status code."""
    try:
        return ParseStatus(status).description
    except ValueError:
        return "Unknown error"


class CtrlAttrError(Exception):
    """Base error for ctrlattr."""


class ScanError(CtrlAttrError):
    """Base error for the low-level string readers."""


class NoDigitsError(ScanError):
    """Raised when a numeric reader finds no digits at the cursor."""


class ValueRangeError(ScanError):
    """Raised when a number parses but falls outside its allowed range."""


class MissingSeparatorError(ScanError):
    """Raised when a paired reader does not find its separator."""


class AttributeParseError(CtrlAttrError):
    """Raised when an attribute string fails one of the grammar stages."""

    def __init__(self, status: ParseStatus, detail: str | None = None) -> None:
        self.status = status
        self.detail = detail
        message = status.description
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class CatalogValidationError(CtrlAttrError):
    """Raised when a catalog file does not conform to schema or semantics."""


class CatalogLoadError(CtrlAttrError):
    """Raised when reading catalog sources fails."""


class TokenValueError(CtrlAttrError):
    """Raised when a token=value pair string is malformed."""


class TargetResolutionError(CtrlAttrError):
    """Raised when a parsed record cannot be resolved to targets."""
