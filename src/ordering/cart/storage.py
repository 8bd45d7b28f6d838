"""Durable key-value backends for cart state.

Both backends store raw strings under string keys, the way browser local
storage does. ``CartStore`` decides what goes in them.
"""

import os
import tempfile
from pathlib import Path

from ordering.cart.exceptions import PersistenceError

ENTRIES_KEY = "cart.entries"
SELECTION_KEY = "cart.selection"


class MemoryStorage:
    """Process-local storage. State survives store reloads, not restarts."""

    def __init__(self, initial=None):
        self._data = dict(initial or {})

    def get(self, key):
        return self._data.get(key)

    def set(self, key, value):
        self._data[key] = value

    def delete(self, key):
        self._data.pop(key, None)


class JsonFileStorage:
    """One file per key under ``directory``.

    Writes go to a temp file in the same directory and are moved into place
    with ``os.replace``, so a crash mid-write leaves the previous value intact.
    """

    def __init__(self, directory):
        self.directory = Path(directory)

    def _path(self, key):
        return self.directory / f"{key}.json"

    def get(self, key):
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise PersistenceError(key, exc) from exc

    def set(self, key, value):
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_name, self._path(key))
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise PersistenceError(key, exc) from exc

    def delete(self, key):
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as exc:
            raise PersistenceError(key, exc) from exc
