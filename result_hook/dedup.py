"""Duplicate suppression for sent screenshots."""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from collections.abc import Callable


class RecentPaths:
    """Small LRU of recently sent paths with an optional expiry window.

    With the defaults (``max_entries=1``, ``window_seconds=None``) only
    an immediate repeat of the last sent path is suppressed.
    """

    def __init__(
        self,
        max_entries: int = 1,
        window_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._max_entries = max(1, max_entries)
        self._window = window_seconds
        self._clock = clock
        # path -> time it was marked
        self._entries: OrderedDict[str, float] = OrderedDict()
        self._lock = threading.Lock()

    def __contains__(self, path: object) -> bool:
        key = str(path)
        with self._lock:
            marked = self._entries.get(key)
            if marked is None:
                return False
            if self._window is not None and self._clock() - marked > self._window:
                del self._entries[key]
                return False
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def mark(self, path: object) -> None:
        """Remember *path* as sent, evicting the oldest entry if full."""
        key = str(path)
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = self._clock()
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)
