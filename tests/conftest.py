# tests/conftest.py

"""Shared pytest fixtures for the storefront test suite."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from src.config.settings import Settings


@pytest.fixture(autouse=True)
def mock_sleep() -> Generator[None, None, None]:
    """Patch time.sleep globally so retry loops run instantly."""
    with patch("time.sleep"):
        yield


@pytest.fixture(autouse=True)
def isolated_paths(tmp_path: Path) -> Generator[None, None, None]:
    """Point every on-disk path at a per-test temp directory."""
    with patch.multiple(
        Settings,
        DATA_DIR=tmp_path,
        STORAGE_PATH=tmp_path / "local_storage.json",
        CATALOG_DB_PATH=tmp_path / "catalog.db",
        LOGS_DIR=tmp_path / "logs",
    ):
        yield
