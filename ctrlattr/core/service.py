"""Service layer used by the CLI and the public API."""

from __future__ import annotations

import os
import re
from collections.abc import Iterable

from ctrlattr.core.catalog_loader import default_loaded_catalog
from ctrlattr.core.errors import TargetResolutionError
from ctrlattr.core.model import (
    AttributeCatalog,
    CatalogEntry,
    ParsedAttribute,
    ParsedAttributeList,
    ParserMode,
    ValueType,
)
from ctrlattr.core.parser import parse_attribute_string
from ctrlattr.core.targets import TargetType, standardize_screen_name
from ctrlattr.resolvers.base import TargetResolver

_SCREEN_RE = re.compile(r"[0-9]+")


class AttributeService:
    def __init__(
        self,
        *,
        catalog: AttributeCatalog | None = None,
        resolver: TargetResolver | None = None,
        default_display: str | None = None,
    ) -> None:
        self.load_warnings: tuple[str, ...] = ()
        if catalog is None:
            loaded = default_loaded_catalog()
            catalog = loaded.catalog
            self.load_warnings = loaded.warnings
        self.catalog = catalog
        self.resolver = resolver
        self.default_display = default_display or os.environ.get("DISPLAY") or None

    def list_attributes(self, value_type: ValueType | None = None) -> list[CatalogEntry]:
        return [entry for entry in self.catalog if value_type is None or entry.type is value_type]

    def get_attribute(self, name: str) -> CatalogEntry | None:
        return self.catalog.lookup(name)

    def get_attribute_entry(self, attr: int, value_type: ValueType) -> CatalogEntry | None:
        return self.catalog.get_attribute_entry(attr, value_type)

    def parse(self, text: str, mode: ParserMode = ParserMode.ASSIGNMENT) -> ParsedAttribute:
        record = parse_attribute_string(text, mode, self.catalog)
        if self.default_display and not record.has_x_display:
            self.assign_default_display(record, self.default_display)
        return record

    def parse_many(
        self,
        texts: Iterable[str],
        mode: ParserMode = ParserMode.ASSIGNMENT,
    ) -> ParsedAttributeList:
        """Parse every string in order; the first failure aborts the batch."""
        records = ParsedAttributeList()
        for text in texts:
            records.append(self.parse(text, mode))
        return records

    def resolve(self, record: ParsedAttribute) -> ParsedAttribute:
        if self.resolver is None:
            raise TargetResolutionError("No target resolver configured")
        targets = tuple(self.resolver.resolve(record))
        if not targets:
            where = record.effective_target()
            if isinstance(where, tuple):
                where = f"{where[0].name.lower()}:{where[1]}"
            raise TargetResolutionError(f"No targets match '{where}'" if where else "No targets found")
        record.targets = targets
        return record

    @staticmethod
    def assign_default_display(record: ParsedAttribute, display: str) -> None:
        """Give ``record`` a display name when it has none.

        A ``.screen`` suffix on ``display`` also selects that X screen, unless
        the record already names a target.
        """
        if record.display:
            return
        record.display = display
        record.has_x_display = True

        if record.has_target or record.target_specification is not None:
            return
        colon = display.rfind(":")
        dot = display.find(".", colon) if colon >= 0 else -1
        if dot >= 0 and _SCREEN_RE.fullmatch(display, dot + 1):
            record.target_type = TargetType.X_SCREEN
            record.target_id = int(display[dot + 1 :])
            record.has_target = True

    @staticmethod
    def standardize_screen_name(display: str | None, screen: int) -> str | None:
        return standardize_screen_name(display, screen)
