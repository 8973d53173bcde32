"""Key-value persistence boundary for the language preference.

LanguagePreferenceStore needs exactly three operations on a string store:
get, set and remove. Writes are synchronous so that a successful set()
means the value is persisted.

Components:
    KeyValueStore - Protocol (structural typing)
    MemoryStore - dict-backed store for tests and ephemeral processes
    JsonFileStore - JSON object file with atomic replacement on write

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

__all__ = ["JsonFileStore", "KeyValueStore", "MemoryStore"]

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Protocol for the persistence boundary.

    Implementations may raise OSError from any method. Reads failing this
    way are treated as "no stored value"; failed writes propagate.
    """

    def get(self, key: str) -> str | None:
        """Return the stored value or None if absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``. Returns once persisted."""
        ...

    def remove(self, key: str) -> None:
        """Delete ``key``; no error if absent."""
        ...


class MemoryStore:
    """In-process dict-backed KeyValueStore.

    Example:
        >>> store = MemoryStore({"nsl10n-language": "fr"})
        >>> store.get("nsl10n-language")
        'fr'
    """

    __slots__ = ("_data",)

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        """Initialize with optional pre-existing values."""
        self._data: dict[str, str] = dict(initial or {})

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return f"MemoryStore({self._data!r})"

    def get(self, key: str) -> str | None:
        """Return the stored value or None."""
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value."""
        self._data[key] = value

    def remove(self, key: str) -> None:
        """Delete a key if present."""
        self._data.pop(key, None)


class JsonFileStore:
    """KeyValueStore persisted as one JSON object file.

    Each write rewrites the whole file through a temporary file and
    os.replace(), so readers never observe a partially written document.
    A missing file reads as empty. A file that is not a JSON object is
    logged and treated as empty; the next write replaces it.

    Example:
        >>> store = JsonFileStore(Path.home() / ".config" / "myapp" / "prefs.json")
        >>> store.set("nsl10n-language", "fr")
    """

    __slots__ = ("_path",)

    def __init__(self, path: str | os.PathLike[str]) -> None:
        """Initialize with the path of the JSON file (created on first write)."""
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """Location of the backing file."""
        return self._path

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return f"JsonFileStore({str(self._path)!r})"

    def _read(self) -> dict[str, str]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning("Ignoring unreadable preference file %s: %s", self._path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring preference file %s: not a JSON object", self._path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False, indent=2, sort_keys=True)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> str | None:
        """Return the stored value or None."""
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value and replace the file atomically."""
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        """Delete a key; the file is rewritten only if the key existed."""
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)
