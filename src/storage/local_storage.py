# src/storage/local_storage.py

"""JSON-file key-value storage, the desktop stand-in for browser localStorage."""

import json
import logging
import os
from pathlib import Path
from typing import Any

from src.config.settings import Settings

logger = logging.getLogger("storefront.storage")


class LocalStorage:
    """String key -> string value store backed by one JSON file.

    Writes go through a temp file and ``os.replace`` so a crash mid-write
    never leaves a truncated file behind.
    """

    def __init__(self, file_path: Path | None = None) -> None:
        self.file_path: Path = file_path or Settings.STORAGE_PATH

    def _read_all(self) -> dict[str, str]:
        """Load the whole mapping. Missing file means empty storage.

        Raises ``ValueError`` when the file exists but is not a JSON object.
        """
        if not self.file_path.exists():
            return {}
        with self.file_path.open("r", encoding="utf-8") as f:
            data: Any = json.load(f)
        if not isinstance(data, dict):
            msg = f"{self.file_path} does not hold a JSON object"
            raise ValueError(msg)
        return {str(k): str(v) for k, v in data.items()}

    def _write_all(self, data: dict[str, str]) -> None:
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.file_path.with_suffix(".json.tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, self.file_path)

    def get_item(self, key: str) -> str | None:
        """Return the stored value for ``key`` or ``None``."""
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value.

        An unreadable storage file is replaced rather than blocking writes.
        """
        try:
            data = self._read_all()
        except ValueError as exc:
            logger.warning(
                "Discarding unreadable storage file %s: %s",
                self.file_path,
                exc,
            )
            data = {}
        data[key] = value
        self._write_all(data)
        logger.debug(
            "Stored key '%s' (%d bytes) in %s",
            key,
            len(value),
            self.file_path,
        )

    def remove_item(self, key: str) -> None:
        """Delete ``key`` if present."""
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)

    def clear(self) -> None:
        """Drop every key."""
        self._write_all({})
