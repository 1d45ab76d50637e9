"""
PlateWatch Key-Value Storage

Named string entries with browser localStorage semantics: every value is a
serialized string, read and rewritten whole.

- JsonFileStore: one JSON object file on disk (default)
- MemoryStore: in-process dict, for tests and one-shot runs
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional


class MemoryStore:
    """In-memory key-value store"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def set_items(self, values: Dict[str, str]) -> None:
        self._items.update({k: str(v) for k, v in values.items()})

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def remove_items(self, keys: List[str]) -> None:
        for key in keys:
            self._items.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._items.keys())

    def clear(self) -> None:
        self._items.clear()


class JsonFileStore:
    """
    Key-value store backed by a single JSON object file.

    The file maps key -> serialized value string. Every write rewrites the
    whole file through a temp file and os.replace, so readers never see a
    half-written document.
    """

    def __init__(self, storage_path: str = "platewatch/data/platewatch_storage.json"):
        self.storage_path = Path(storage_path)
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        self._items = self._load()

    def _load(self) -> Dict[str, str]:
        """Load the storage file (empty if missing or unreadable)"""
        if not self.storage_path.exists():
            return {}

        try:
            with open(self.storage_path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            print(f"[JsonFileStore] Failed to read {self.storage_path}, starting empty: {e}")
            return {}

        if not isinstance(data, dict):
            print(f"[JsonFileStore] {self.storage_path} is not a JSON object, starting empty")
            return {}

        # Values are always strings, like localStorage
        return {str(k): v if isinstance(v, str) else json.dumps(v) for k, v in data.items()}

    def _flush(self, items: Dict[str, str]) -> None:
        """Write entries to disk atomically"""
        fd, tmp_path = tempfile.mkstemp(
            dir=str(self.storage_path.parent),
            prefix=".platewatch-",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(items, f, indent=2)
            os.replace(tmp_path, self.storage_path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def _commit(self, items: Dict[str, str]) -> None:
        """Persist a new set of entries; memory only changes once the disk write succeeded"""
        self._flush(items)
        self._items = items

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.set_items({key: value})

    def set_items(self, values: Dict[str, str]) -> None:
        """Set several entries in one write"""
        items = dict(self._items)
        items.update({k: str(v) for k, v in values.items()})
        self._commit(items)

    def remove_item(self, key: str) -> None:
        self.remove_items([key])

    def remove_items(self, keys: List[str]) -> None:
        """Remove several entries in one write (all or none)"""
        if not any(key in self._items for key in keys):
            return
        self._commit({k: v for k, v in self._items.items() if k not in keys})

    def keys(self) -> List[str]:
        return list(self._items.keys())

    def clear(self) -> None:
        self._commit({})
