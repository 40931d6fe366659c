"""Durable key/value state that survives between scaffolding runs.

The same class backs two stores:

* the per-project store (``.electrode-scaffold.json`` in the destination
  root), which remembers decisions such as the chosen server framework;
* the user-global answers store, which remembers prompt answers such as the
  author's name so they become defaults next time.

A store is opened once, read once, mutated in memory and flushed once.  The
file may hold several namespaces; only the store's own namespace is touched.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .utils import write_json

logger = logging.getLogger(__name__)


class StateStore:
    """Namespaced JSON key/value store bound to a single file."""

    def __init__(self, path: str | Path, namespace: str) -> None:
        self.path = Path(path)
        self.namespace = namespace
        self._data: dict[str, Any] = {}
        self._dirty = False

    @classmethod
    def open(cls, path: str | Path, namespace: str) -> "StateStore":
        """Create a store and load its current contents from disk."""
        store = cls(path, namespace)
        store._data = store._read_namespace()
        return store

    # -- Access ------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        if self._data.get(key) != value or key not in self._data:
            self._data[key] = value
            self._dirty = True

    # -- Lifecycle ---------------------------------------------------------

    def relocate(self, path: str | Path) -> None:
        """Point the store at a new file and reload from it.

        Used when the destination root moves into a freshly created project
        directory: state must be written next to the relocated project, not
        in the directory the run started from.  Pending unsaved keys are
        carried over.
        """
        pending = self._data if self._dirty else {}
        self.path = Path(path)
        self._data = {**self._read_namespace(), **pending}
        logger.debug("State store relocated to %s", self.path)

    def flush(self) -> Path | None:
        """Write the namespace back to disk if anything changed.

        Returns:
            The written path, or ``None`` when there was nothing to write.
        """
        if not self._dirty:
            return None
        document = self._read_document()
        document[self.namespace] = self._data
        write_json(document, self.path)
        self._dirty = False
        logger.debug("State store flushed to %s", self.path)
        return self.path

    # -- Internal helpers --------------------------------------------------

    def _read_document(self) -> dict[str, Any]:
        if not self.path.is_file():
            return {}
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable state file %s: %s", self.path, exc)
            return {}
        return document if isinstance(document, dict) else {}

    def _read_namespace(self) -> dict[str, Any]:
        section = self._read_document().get(self.namespace, {})
        return dict(section) if isinstance(section, dict) else {}
