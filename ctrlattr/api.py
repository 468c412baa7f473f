"""Stable public API for building tooling on top of ctrlattr.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from collections.abc import Iterable

from ctrlattr.core.display_devices import (
    count_number_of_bits,
    display_device_mask_to_name,
    display_device_name_to_mask,
    expand_display_device_mask_wildcards,
)
from ctrlattr.core.errors import (
    AttributeParseError,
    CatalogLoadError,
    CatalogValidationError,
    CtrlAttrError,
    MissingSeparatorError,
    NoDigitsError,
    ParseStatus,
    ScanError,
    TargetResolutionError,
    TokenValueError,
    ValueRangeError,
    strerror,
)
from ctrlattr.core.model import (
    INVALID_DISPLAY_DEVICE_MASK,
    AttributeCatalog,
    AttributeFlags,
    AttributeIntFlags,
    AttributeValue,
    CatalogEntry,
    ParsedAttribute,
    ParsedAttributeList,
    ParserMode,
    ValueType,
)
from ctrlattr.core.parser import parse_attribute_string, parse_status
from ctrlattr.core.service import AttributeService
from ctrlattr.core.targets import TargetType
from ctrlattr.core.token_pairs import parse_token_value_pairs
from ctrlattr.resolvers.base import TargetResolver

__all__ = [
    "CtrlAttrError",
    "AttributeParseError",
    "CatalogLoadError",
    "CatalogValidationError",
    "ScanError",
    "NoDigitsError",
    "ValueRangeError",
    "MissingSeparatorError",
    "TargetResolutionError",
    "TokenValueError",
    "ParseStatus",
    "strerror",
    "INVALID_DISPLAY_DEVICE_MASK",
    "AttributeCatalog",
    "AttributeFlags",
    "AttributeIntFlags",
    "AttributeValue",
    "CatalogEntry",
    "ParsedAttribute",
    "ParsedAttributeList",
    "ParserMode",
    "TargetType",
    "ValueType",
    "TargetResolver",
    "count_number_of_bits",
    "display_device_mask_to_name",
    "display_device_name_to_mask",
    "expand_display_device_mask_wildcards",
    "parse_attribute_string",
    "parse_status",
    "parse_token_value_pairs",
    "Client",
]


class Client:
    """Public client for parsing and resolving attribute strings.

    A `Client` instance wraps catalog loading, attribute string parsing and
    target resolution behind a stable API intended for third-party tools
    (GUI/TUI/services/scripts).
    """

    def __init__(
        self,
        *,
        catalog: AttributeCatalog | None = None,
        resolver: TargetResolver | None = None,
        default_display: str | None = None,
    ) -> None:
        self._service = AttributeService(
            catalog=catalog,
            resolver=resolver,
            default_display=default_display,
        )

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    @property
    def catalog(self) -> AttributeCatalog:
        return self._service.catalog

    def list_attributes(self, value_type: ValueType | None = None) -> list[CatalogEntry]:
        return self._service.list_attributes(value_type)

    def get_attribute(self, name: str) -> CatalogEntry | None:
        return self._service.get_attribute(name)

    def query(self, text: str) -> ParsedAttribute:
        return self._service.parse(text, ParserMode.QUERY)

    def assign(self, text: str) -> ParsedAttribute:
        return self._service.parse(text, ParserMode.ASSIGNMENT)

    def parse_many(
        self,
        texts: Iterable[str],
        *,
        mode: ParserMode = ParserMode.ASSIGNMENT,
    ) -> ParsedAttributeList:
        return self._service.parse_many(texts, mode)

    def resolve(self, record: ParsedAttribute) -> ParsedAttribute:
        return self._service.resolve(record)
