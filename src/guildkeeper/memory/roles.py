"""
Membership counters for the rotating thread-invitation roles.

The ledger is a load-balancing hint, not an authoritative roster: counts are
seeded once from the member cache and then nudged by +1/-1 as the bot grants
or removes roles. Each update is atomic on its own; sequences of updates are
not.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Iterable

from .cache.snapshots import CachedMember

logger = logging.getLogger(__name__)


class RoleCountLedger:
    """Thread-safe ``role_id -> member count`` map that never goes negative."""

    def __init__(self) -> None:
        self._counts: Dict[int, int] = {}
        self._lock = threading.Lock()

    def initialize(self, members: Iterable[CachedMember]) -> None:
        """Count every role held by ``members`` into the ledger."""

        total = 0
        with self._lock:
            for member in members:
                total += 1
                for role_id in member.role_ids:
                    self._counts[role_id] = self._counts.get(role_id, 0) + 1
        logger.info("Role count ledger initialized from %d members", total)

    def increment(self, role_id: int) -> int:
        with self._lock:
            count = self._counts.get(role_id, 0) + 1
            self._counts[role_id] = count
            return count

    def decrement(self, role_id: int) -> int:
        """Subtract one from ``role_id``, clamping at zero."""

        with self._lock:
            count = max(self._counts.get(role_id, 0) - 1, 0)
            self._counts[role_id] = count
            return count

    def get(self, role_id: int) -> int:
        with self._lock:
            return self._counts.get(role_id, 0)

    def is_empty(self) -> bool:
        with self._lock:
            return not self._counts

    def snapshot(self) -> Dict[int, int]:
        with self._lock:
            return dict(self._counts)

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()


__all__ = ["RoleCountLedger"]
