"""In-memory TTL cache for resolved driver instructions.

Each entry carries its own TTL. Expired entries are dropped lazily when read
and in bulk by :meth:`InstructionsCache.sweep`, which :class:`CacheSweeper`
runs on a fixed interval from a daemon thread. Lazy expiry on read keeps the
cache correct even when the sweeper is late or not running; the sweep only
bounds memory held by entries that are never read again.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .models import DriverInstructions

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 15 * 60
DEFAULT_SWEEP_INTERVAL_SECONDS = 5 * 60


@dataclass(frozen=True)
class _CacheEntry:
    data: DriverInstructions
    timestamp: float
    ttl: float

    def expired(self, now: float) -> bool:
        return now - self.timestamp > self.ttl


class InstructionsCache:
    """Thread-safe map of canonical driver id to instruction document.

    Keys are lowercased on every operation. ``set`` always replaces the whole
    entry (last write wins).

    Attributes:
        default_ttl: TTL in seconds applied when ``set`` is called without one.
    """

    def __init__(
        self,
        *,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        """
        Initialize the cache.

        Args:
            default_ttl: TTL in seconds for entries stored without an explicit TTL.
            clock: Monotonic time source; injectable for tests.
        """
        if default_ttl <= 0:
            raise ValueError("default_ttl must be positive")
        self.default_ttl = default_ttl
        self._clock = clock or time.monotonic
        self._entries: Dict[str, _CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[DriverInstructions]:
        """Return the cached document for ``key`` or ``None`` if absent or expired."""
        normalized = key.lower()
        with self._lock:
            entry = self._entries.get(normalized)
            if entry is None:
                return None
            if entry.expired(self._clock()):
                del self._entries[normalized]
                return None
            return entry.data

    def set(self, key: str, data: DriverInstructions, ttl: Optional[float] = None) -> None:
        """Store ``data`` under ``key`` with a fresh timestamp.

        Args:
            key: Canonical driver id.
            data: The document to cache.
            ttl: Lifetime in seconds; ``None`` uses :attr:`default_ttl`.
        """
        effective_ttl = self.default_ttl if ttl is None else ttl
        if effective_ttl <= 0:
            raise ValueError("ttl must be positive")
        with self._lock:
            self._entries[key.lower()] = _CacheEntry(data=data, timestamp=self._clock(), ttl=effective_ttl)

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        """Return the number of stored entries, including not-yet-swept expired ones."""
        with self._lock:
            return len(self._entries)

    def sweep(self) -> int:
        """Evict every entry older than its own TTL.

        Returns:
            The number of evicted entries.
        """
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if entry.expired(now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("InstructionsCache.sweep: evicted %d expired entries", len(expired))
        return len(expired)


class CacheSweeper:
    """Daemon thread that calls :meth:`InstructionsCache.sweep` periodically.

    ``start`` is idempotent; ``stop`` signals the thread and joins it.
    """

    def __init__(self, cache: InstructionsCache, *, interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._cache = cache
        self._interval = interval_seconds
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background sweep thread if it is not already running."""
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._sweep_loop, name="instructions-cache-sweeper", daemon=True)
        self._thread.start()

    def _sweep_loop(self) -> None:
        while not self._stop_event.wait(self._interval):
            try:
                self._cache.sweep()
            except Exception as e:  # pragma: no cover - keep the sweeper alive
                logger.error(f"Instructions cache sweep failed: {e}")

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the background thread."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
