# extraction_cache.py
import hashlib
import threading
from collections import OrderedDict
from typing import Protocol

import orjson

from models import EntityBundle, ExtractionOptions


class ExtractionCache(Protocol):
    def get(self, key: str) -> EntityBundle | None: ...

    def put(self, key: str, value: EntityBundle) -> None: ...


def make_cache_key(text: str, options: ExtractionOptions) -> str:
    """SHA-256 of the text plus a hash of the key-sorted options JSON."""
    text_hash = hashlib.sha256(text.encode("utf-8", errors="surrogatepass")).hexdigest()
    options_json = orjson.dumps(options.model_dump(mode="json"), option=orjson.OPT_SORT_KEYS)
    options_hash = hashlib.sha256(options_json).hexdigest()
    return f"{text_hash}_{options_hash}"


class InMemoryCache:
    """
    Unbounded process-lifetime cache.
    Every distinct (text, options) pair stays in memory until the process exits,
    so long-running services should prefer LRUCache.
    """

    def __init__(self):
        self._items: dict[str, EntityBundle] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> EntityBundle | None:
        with self._lock:
            return self._items.get(key)

    def put(self, key: str, value: EntityBundle) -> None:
        with self._lock:
            self._items[key] = value

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class LRUCache:
    def __init__(self, maxsize: int = 256):
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self.maxsize = maxsize
        self._items: OrderedDict[str, EntityBundle] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> EntityBundle | None:
        with self._lock:
            value = self._items.get(key)
            if value is not None:
                self._items.move_to_end(key)
            return value

    def put(self, key: str, value: EntityBundle) -> None:
        with self._lock:
            self._items[key] = value
            self._items.move_to_end(key)
            while len(self._items) > self.maxsize:
                self._items.popitem(last=False)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class NullCache:
    """Never stores anything; used to disable caching."""

    def get(self, key: str) -> EntityBundle | None:
        return None

    def put(self, key: str, value: EntityBundle) -> None:
        return None
