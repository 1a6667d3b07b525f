"""Local filesystem key-value storage."""

import os
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path

from meal_lens.domain.errors import PersistedStateCorruptError
from meal_lens.services.meals import KeyValueStorage

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


@dataclass
class FileKeyValueStorage(KeyValueStorage):
    """Stores each key as ``<directory>/<key>.json``.

    Writes go to a temporary file that atomically replaces the previous
    value, so a crash mid-write leaves the old value intact.
    """

    directory: Path

    def get(self, key: str) -> str | None:
        """Return the stored value for a key."""
        try:
            return self._path(key).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as exc:
            raise PersistedStateCorruptError(
                f"Stored value for {key!r} is not UTF-8"
            ) from exc

    def set(self, key: str, value: str) -> None:
        """Overwrite the value for a key."""
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"
