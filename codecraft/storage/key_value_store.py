"""
String key-value stores for saved projects.

The values are JSON text. Two implementations:
- InMemoryKeyValueStore, for tests and for short lived processes.
- JsonFileKeyValueStore, a single JSON document on the local disk. Every change
  rewrites the file atomically (write to a temp file, then rename).

PROMPT> python -m codecraft.storage.key_value_store
"""
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union

logger = logging.getLogger(__name__)

class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> bool:
        ...

    def keys(self) -> List[str]:
        ...

class InMemoryKeyValueStore:
    """Thread-safe dict backed store."""

    def __init__(self) -> None:
        self._items: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise ValueError(f"Expected str value, got {type(value)}")
        with self._lock:
            self._items[key] = value

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._items.pop(key, None) is not None

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._items.keys())

class JsonFileKeyValueStore:
    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"JsonFileKeyValueStore(path={str(self.path)!r})"

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {self.path}, got {type(data).__name__}")
        return data

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(suffix=".tmp", prefix=self.path.stem, dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise ValueError(f"Expected str value, got {type(value)}")
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def delete(self, key: str) -> bool:
        with self._lock:
            data = self._read()
            if key not in data:
                return False
            del data[key]
            self._write(data)
            logger.debug(f"Deleted {key!r} from {self.path}")
            return True

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._read().keys())

if __name__ == "__main__":
    store = JsonFileKeyValueStore(Path(tempfile.gettempdir()) / "codecraft_demo_store.json")
    store.set("greeting", "hello")
    print(store, store.keys(), store.get("greeting"))
    store.delete("greeting")
