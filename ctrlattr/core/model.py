"""Core data models used across catalog, parser, service, and CLI."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any

from ctrlattr.core.targets import TargetType

INVALID_DISPLAY_DEVICE_MASK = 0xFFFFFFFF


class ValueType(str, Enum):
    INTEGER = "integer"
    FLOAT = "float"
    FLOAT_RANGE = "float_range"
    STRING = "string"
    SDI_CSC = "sdi_csc"


class ParserMode(Enum):
    ASSIGNMENT = 0
    QUERY = 1


@dataclass(frozen=True)
class AttributeFlags:
    is_gui_attribute: bool = False
    is_framelock_attribute: bool = False
    is_sdi_attribute: bool = False
    hijack_display_device: bool = False
    no_config_write: bool = False
    no_query_all: bool = False


@dataclass(frozen=True)
class AttributeIntFlags:
    is_100hz: bool = False
    is_1000hz: bool = False
    is_packed: bool = False
    is_display_mask: bool = False
    is_display_id: bool = False
    no_zero: bool = False
    is_switch_display: bool = False


@dataclass(frozen=True)
class CatalogEntry:
    name: str
    attr: int
    type: ValueType
    flags: AttributeFlags = AttributeFlags()
    int_flags: AttributeIntFlags = AttributeIntFlags()
    desc: str = ""


_FLOAT_ARRAY_LENGTHS = {ValueType.FLOAT_RANGE: 2, ValueType.SDI_CSC: 15}


@dataclass(frozen=True)
class AttributeValue:
    """A parsed value tagged with the value type of its catalog entry.

    ``data`` holds an ``int`` for integer attributes, a ``float`` for float
    attributes, a tuple of floats for ranges and CSC matrices, and a ``str``
    for string attributes. Construction fails if the two disagree.
    """

    type: ValueType
    data: int | float | tuple[float, ...] | str

    def __post_init__(self) -> None:
        data = self.data
        if self.type is ValueType.INTEGER:
            ok = isinstance(data, int) and not isinstance(data, bool)
        elif self.type is ValueType.FLOAT:
            ok = isinstance(data, float)
        elif self.type is ValueType.STRING:
            ok = isinstance(data, str)
        else:
            ok = (
                isinstance(data, tuple)
                and len(data) == _FLOAT_ARRAY_LENGTHS[self.type]
                and all(isinstance(item, float) for item in data)
            )
        if not ok:
            raise TypeError(f"{data!r} is not a valid {self.type.value} value")

    def scaled(self, int_flags: AttributeIntFlags) -> int | float | tuple[float, ...] | str:
        if self.type is ValueType.INTEGER:
            if int_flags.is_1000hz:
                return self.data / 1000.0
            if int_flags.is_100hz:
                return self.data / 100.0
        return self.data


@dataclass
class ParsedAttribute:
    display: str | None = None
    target_specification: str | None = None
    target_type: TargetType | None = None
    target_id: int | None = None
    attr_entry: CatalogEntry | None = None
    value: AttributeValue | None = None
    display_device_specification: str | None = None
    display_device_mask: int = INVALID_DISPLAY_DEVICE_MASK
    has_x_display: bool = False
    has_target: bool = False
    has_display_device: bool = False
    has_value: bool = False
    assign_all_displays: bool = False
    targets: tuple[Any, ...] = ()

    def set_value(self, value: AttributeValue) -> None:
        if self.attr_entry is None:
            raise TypeError("cannot set a value before the attribute is resolved")
        if value.type is not self.attr_entry.type:
            raise TypeError(
                f"{self.attr_entry.name} expects a {self.attr_entry.type.value} value, "
                f"got {value.type.value}"
            )
        self.value = value
        self.has_value = True

    def effective_target(self) -> str | tuple[TargetType, int] | None:
        """Return what a resolver should act on.

        A target specification string wins over the direct type/id pair.
        """
        if self.target_specification is not None:
            return self.target_specification
        if self.has_target and self.target_type is not None and self.target_id is not None:
            return (self.target_type, self.target_id)
        return None

    def clean(self) -> None:
        """Reset every field so the record can be reused for another parse."""
        for item in fields(self):
            setattr(self, item.name, item.default)

    def release(self) -> None:
        """Drop everything the record references. Safe to call repeatedly."""
        self.clean()


@dataclass
class ParsedAttributeList:
    """Caller-owned, insertion-ordered collection of parsed records."""

    items: list[ParsedAttribute] = field(default_factory=list)

    def append(self, record: ParsedAttribute) -> None:
        self.items.append(record)

    def clear(self) -> None:
        for record in self.items:
            record.release()
        self.items.clear()

    def __iter__(self) -> Iterator[ParsedAttribute]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> ParsedAttribute:
        return self.items[index]


class AttributeCatalog:
    """Ordered, read-only table of catalog entries with case-insensitive lookup."""

    def __init__(self, entries: tuple[CatalogEntry, ...]) -> None:
        self._entries = tuple(entries)
        by_name: dict[str, CatalogEntry] = {}
        for entry in self._entries:
            by_name.setdefault(entry.name.casefold(), entry)
        self._by_name = by_name

    def lookup(self, name: str) -> CatalogEntry | None:
        return self._by_name.get(name.casefold())

    def get_attribute_entry(self, attr: int, value_type: ValueType) -> CatalogEntry | None:
        for entry in self._entries:
            if entry.attr == attr and entry.type is value_type:
                return entry
        return None

    def names(self) -> tuple[str, ...]:
        return tuple(entry.name for entry in self._entries)

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.casefold() in self._by_name
