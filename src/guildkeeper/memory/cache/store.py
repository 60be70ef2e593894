"""
Two-level keyed store shared by the message and member caches.

Items live under ``container_id -> item_id``: channel -> message for the
message cache and guild -> member for the member cache. Each container owns its
own lock, so a writer bulk-loading one channel never stalls readers of another;
the outer lock is only taken to create a container the first time it is seen.
Values are immutable snapshots, and reads hand back fresh copies made with
:func:`dataclasses.replace`, so nothing a caller does can leak back into the
store.

A missing entry is not an error. ``get`` returns ``None`` and callers fall back
to an authoritative fetch.
"""

from __future__ import annotations

import threading
from collections import defaultdict
from dataclasses import replace
from typing import Dict, Generic, Iterable, List, Protocol, Tuple, TypeVar


class Cacheable(Protocol):
    @property
    def cache_key(self) -> Tuple[int, int]: ...


T = TypeVar("T", bound=Cacheable)


class _Container(Generic[T]):
    __slots__ = ("lock", "items")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.items: Dict[int, T] = {}


class CacheStore(Generic[T]):
    """Concurrent ``container_id -> item_id -> snapshot`` map."""

    def __init__(self, name: str = "cache") -> None:
        self.name = name
        self._containers: Dict[int, _Container[T]] = {}
        self._containers_lock = threading.Lock()

    def _container(self, container_id: int, *, create: bool = False) -> _Container[T] | None:
        container = self._containers.get(container_id)
        if container is None and create:
            with self._containers_lock:
                container = self._containers.setdefault(container_id, _Container())
        return container

    # ------------------------------------------------------------------ #
    # WRITE helpers
    # ------------------------------------------------------------------ #

    def insert(self, item: T) -> None:
        """Upsert ``item`` under its own ``cache_key`` (last writer wins)."""

        container_id, item_id = item.cache_key
        container = self._container(container_id, create=True)
        with container.lock:
            container.items[item_id] = item

    def extend(self, items: Iterable[T]) -> int:
        """
        Upsert many items, taking each container lock once.

        Items are grouped by container before any lock is acquired. Within one
        call a later duplicate key overrides an earlier one, matching repeated
        :meth:`insert` calls. Returns the number of distinct keys written.
        """

        grouped: Dict[int, Dict[int, T]] = defaultdict(dict)
        for item in items:
            container_id, item_id = item.cache_key
            grouped[container_id][item_id] = item

        written = 0
        for container_id, batch in grouped.items():
            container = self._container(container_id, create=True)
            with container.lock:
                container.items.update(batch)
            written += len(batch)
        return written

    def remove(self, container_id: int, item_id: int) -> T | None:
        """Drop one entry, returning it if it was cached."""

        container = self._container(container_id)
        if container is None:
            return None
        with container.lock:
            return container.items.pop(item_id, None)

    def clear(self) -> None:
        with self._containers_lock:
            self._containers = {}

    # ------------------------------------------------------------------ #
    # READ helpers
    # ------------------------------------------------------------------ #

    def get(self, container_id: int, item_id: int) -> T | None:
        """Return a copy of the cached item or ``None``; never fetches."""

        container = self._container(container_id)
        if container is None:
            return None
        with container.lock:
            item = container.items.get(item_id)
        return replace(item) if item is not None else None

    def get_all(self, container_id: int) -> List[T]:
        """Return copies of every item in ``container_id`` (unordered)."""

        container = self._container(container_id)
        if container is None:
            return []
        with container.lock:
            items = list(container.items.values())
        return [replace(item) for item in items]

    def container_ids(self) -> List[int]:
        return list(self._containers.keys())

    def count(self, container_id: int) -> int:
        container = self._container(container_id)
        if container is None:
            return 0
        with container.lock:
            return len(container.items)

    def __len__(self) -> int:
        return sum(self.count(cid) for cid in self.container_ids())


__all__ = ["Cacheable", "CacheStore"]
