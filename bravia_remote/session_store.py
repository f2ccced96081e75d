"""Persistence of PIN pairing sessions.

Sessions are kept in a key-value storage supplied by the caller, one
namespaced key per television, so pairing survives between client instances.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from .const import STORAGE_KEY_PREFIX
from .models import Session

_LOGGER = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """Durable string key-value storage."""

    def get(self, key: str) -> str | None:
        """Return the value stored under ``key``, or None."""

    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    def delete(self, key: str) -> None:
        """Remove ``key`` if present."""


class MemoryStorage:
    """In-memory storage, lost when the process exits."""

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage:
    """Storage backed by a single JSON object on disk.

    The file is read on every access and replaced atomically on every change.
    A missing file reads as empty. An unreadable file reads as empty and is
    moved aside to ``<name>.corrupt`` before the next change is written.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        """Return the backing file path."""
        return self._path

    @property
    def corrupt_path(self) -> Path:
        """Return where an unreadable file is moved before being replaced."""
        return self._path.with_name(f"{self._path.name}.corrupt")

    def get(self, key: str) -> str | None:
        data = self._load()
        return None if data is None else data.get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load_for_update()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._load_for_update()
        if data.pop(key, None) is not None:
            self._write(data)

    def _load(self) -> dict[str, str] | None:
        """Return the stored mapping, or None if the file is unreadable."""
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            _LOGGER.warning("Ignoring unreadable storage file %s", self._path)
            return None
        if not isinstance(data, dict):
            _LOGGER.warning("Ignoring malformed storage file %s", self._path)
            return None
        return {str(k): str(v) for k, v in data.items()}

    def _load_for_update(self) -> dict[str, str]:
        data = self._load()
        if data is None:
            _LOGGER.warning(
                "Moving unreadable storage file %s to %s", self._path, self.corrupt_path
            )
            os.replace(self._path, self.corrupt_path)
            return {}
        return data

    def _write(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            json.dump(data, tmp, indent=2, sort_keys=True)
        try:
            os.replace(tmp.name, self._path)
        except OSError:
            Path(tmp.name).unlink(missing_ok=True)
            raise


def storage_key(address: str) -> str:
    """Return the namespaced storage key for a television address."""
    return f"{STORAGE_KEY_PREFIX}{address}"


class SessionStore:
    """Loads, saves and clears sessions keyed by television address.

    Writes are last-write-wins. Nothing expires locally: a stale session is
    only discovered when the television rejects it.
    """

    def __init__(self, storage: KeyValueStorage | None = None) -> None:
        """Initialize the store.

        Args:
            storage: Backing storage. Defaults to a fresh ``MemoryStorage``.

        """
        self._storage = storage if storage is not None else MemoryStorage()

    def load(self, address: str) -> Session | None:
        """Return the stored session for ``address``, if any."""
        raw = self._storage.get(storage_key(address))
        if raw is None:
            return None
        try:
            return Session.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError, AttributeError):
            _LOGGER.warning("Discarding corrupt stored session for %s", address)
            return None

    def save(self, address: str, session: Session) -> None:
        """Persist ``session`` for ``address``."""
        self._storage.set(storage_key(address), json.dumps(session.as_dict()))
        _LOGGER.debug("Stored session for %s", address)

    def clear(self, address: str) -> None:
        """Forget the stored session for ``address``."""
        self._storage.delete(storage_key(address))
        _LOGGER.debug("Cleared session for %s", address)
