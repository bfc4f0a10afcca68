# tests/conftest.py

"""Shared pytest fixtures for all ShareBox tests."""

from collections.abc import Generator
from pathlib import Path

import pytest

from sharebox.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_dirs(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Path, None, None]:
    """Point every on-disk location at a per-test temp directory."""
    monkeypatch.setattr(Settings, "DATA_DIR", tmp_path / "data")
    monkeypatch.setattr(Settings, "DB_PATH", tmp_path / "data" / "test.db")
    monkeypatch.setattr(Settings, "EXPORTS_DIR", tmp_path / "exports")
    monkeypatch.setattr(Settings, "LOGS_DIR", tmp_path / "logs")
    yield tmp_path
