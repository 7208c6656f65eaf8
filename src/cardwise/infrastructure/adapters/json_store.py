"""
Key-value store adapters.

JsonFileStore keeps the whole store as one JSON document on disk, the way the
desktop client persists its state. InMemoryStore backs tests and previews.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from cardwise.domain.errors import StoreError
from cardwise.domain.scheduling.ports import KeyValueStore

logger = logging.getLogger(__name__)


class InMemoryStore(KeyValueStore):
    """Dict-backed store. Values are JSON round-tripped so callers never share state."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """
    Store backed by a single JSON object file.

    Every write replaces the file atomically via a temp file and os.replace.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def get(self, key: str) -> Any | None:
        return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Could not read store at {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StoreError(f"Store at {self.path} is not a JSON object")
        return data

    def _dump(self, data: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".cardwise-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, sort_keys=True)
                os.replace(tmp, self.path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StoreError(f"Could not write store at {self.path}: {e}") from e
        logger.debug(f"Wrote {len(data)} keys to {self.path}")
