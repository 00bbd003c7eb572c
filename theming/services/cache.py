"""Process-wide memo cache, partitioned by namespace."""
from __future__ import annotations

import threading
from typing import Any, Optional


class NamespacedCache:
    """View on one namespace of a CacheFactory store."""

    def __init__(self, namespace: str, store: dict[str, dict[str, Any]], lock: threading.Lock):
        self.namespace = namespace
        self._store = store
        self._lock = lock

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._store.get(self.namespace, {}).get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._store.setdefault(self.namespace, {})[key] = value

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._store.get(self.namespace, {}).pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._store.pop(self.namespace, None)


class CacheFactory:
    """Hands out namespaced caches sharing one in-memory store."""

    def __init__(self):
        self._store: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def create(self, namespace: str) -> NamespacedCache:
        return NamespacedCache(namespace, self._store, self._lock)

    def clear_all(self) -> None:
        with self._lock:
            self._store.clear()


# Shared by every request handled by this process
cache_factory = CacheFactory()
