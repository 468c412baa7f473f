"""Attribute catalog loading and validation for YAML-based catalog files."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from ctrlattr.core.errors import CatalogLoadError, CatalogValidationError
from ctrlattr.core.model import (
    AttributeCatalog,
    AttributeFlags,
    AttributeIntFlags,
    CatalogEntry,
    ValueType,
)

LOGGER = logging.getLogger(__name__)

_FLAG_FIELDS = {
    "gui": "is_gui_attribute",
    "framelock": "is_framelock_attribute",
    "sdi": "is_sdi_attribute",
    "hijack_display_device": "hijack_display_device",
    "no_config_write": "no_config_write",
    "no_query_all": "no_query_all",
}

_INT_FLAG_FIELDS = {
    "100hz": "is_100hz",
    "1000hz": "is_1000hz",
    "packed": "is_packed",
    "display_mask": "is_display_mask",
    "display_id": "is_display_id",
    "no_zero": "no_zero",
    "switch_display": "is_switch_display",
}

# value encodings that are mutually exclusive on one integer attribute
_EXCLUSIVE_INT_FLAGS = frozenset({"100hz", "1000hz", "packed", "display_mask", "display_id"})


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag != "tag:yaml.org,2002:bool"
    ]


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise CatalogValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class LoadedCatalog:
    catalog: AttributeCatalog
    warnings: tuple[str, ...]


def _load_schema_validator() -> Any:
    schema_text = resources.files("ctrlattr.schemas").joinpath("catalog.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _catalog_dirs() -> tuple[Path, Path]:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    xdg_data = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return xdg_config / "ctrlattr/attributes", xdg_data / "ctrlattr/attributes"


def _read_yaml(path: Path | Traversable) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CatalogLoadError(f"Could not read catalog file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise CatalogValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise CatalogValidationError(f"Catalog file {path} must contain a mapping at root")
    return loaded


def _build_entry(doc: dict[str, Any], source: Path | Traversable) -> CatalogEntry:
    value_type = ValueType(doc["type"])
    flag_names = doc.get("flags", [])
    int_flag_names = doc.get("int_flags", [])

    if int_flag_names and value_type is not ValueType.INTEGER:
        raise CatalogValidationError(
            f"{doc['name']} in {source}: int_flags require an integer attribute"
        )
    encodings = _EXCLUSIVE_INT_FLAGS.intersection(int_flag_names)
    if len(encodings) > 1:
        joined = ", ".join(sorted(encodings))
        raise CatalogValidationError(
            f"{doc['name']} in {source}: int_flags {joined} cannot be combined"
        )

    return CatalogEntry(
        name=doc["name"],
        attr=int(doc["attr"]),
        type=value_type,
        flags=AttributeFlags(**{_FLAG_FIELDS[name]: True for name in flag_names}),
        int_flags=AttributeIntFlags(**{_INT_FLAG_FIELDS[name]: True for name in int_flag_names}),
        desc=doc.get("desc", ""),
    )


def _build_entries(doc: dict[str, Any], source: Path | Traversable) -> list[CatalogEntry]:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise CatalogValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    entries: list[CatalogEntry] = []
    seen: set[str] = set()
    for item in doc["attributes"]:
        entry = _build_entry(item, source)
        key = entry.name.casefold()
        if key in seen:
            raise CatalogValidationError(f"Attribute '{entry.name}' is defined twice in {source}")
        seen.add(key)
        entries.append(entry)
    return entries


def _packaged_catalog_path() -> Traversable:
    return resources.files("ctrlattr.catalog").joinpath("attributes.yaml")


def _iter_user_catalog_paths() -> list[Path]:
    paths: list[Path] = []
    for directory in _catalog_dirs():
        if not directory.exists() or not directory.is_dir():
            continue
        paths.extend(sorted(p for p in directory.iterdir() if p.suffix in {".yml", ".yaml"}))
    return paths


def load_catalog() -> LoadedCatalog:
    """Load the packaged catalog and merge user catalog files into it.

    A user entry that reuses a packaged name (compared case-insensitively)
    replaces it in place; new names are appended in file order.
    """
    path = _packaged_catalog_path()
    entries = _build_entries(_read_yaml(path), path)
    positions = {entry.name.casefold(): index for index, entry in enumerate(entries)}
    warnings: list[str] = []

    for path in _iter_user_catalog_paths():
        for entry in _build_entries(_read_yaml(path), path):
            key = entry.name.casefold()
            if key in positions:
                warning = f"User attribute '{entry.name}' from {path} overrides catalog entry"
                LOGGER.warning(warning)
                warnings.append(warning)
                entries[positions[key]] = entry
            else:
                positions[key] = len(entries)
                entries.append(entry)

    return LoadedCatalog(catalog=AttributeCatalog(tuple(entries)), warnings=tuple(warnings))


@lru_cache(maxsize=1)
def default_loaded_catalog() -> LoadedCatalog:
    return load_catalog()


def default_catalog() -> AttributeCatalog:
    """Return the process-wide catalog, loading it on first use."""
    return default_loaded_catalog().catalog
