from __future__ import annotations

from pathlib import Path

import pytest

from ctrlattr.core.catalog_loader import default_loaded_catalog


@pytest.fixture(autouse=True)
def isolated_catalog(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("DISPLAY", raising=False)
    default_loaded_catalog.cache_clear()
    yield
    default_loaded_catalog.cache_clear()
