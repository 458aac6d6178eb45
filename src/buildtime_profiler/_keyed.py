"""Generic keyed start/stop timers.

Thread-safe for concurrent start()/stop() calls on distinct keys from
multiple builder threads. Reads (entries(), totals) are expected after the
build has finished, but take the same lock so committed spans are visible.

Design by Contract:
- A later start(key) replaces an open span for the same key (last start wins)
- stop(key) without an open span is a logged no-op, never an exception
- A repeated key overwrites its committed span (and size), it is not summed
"""

import threading
from typing import Generic, TypeVar

from loguru import logger

from buildtime_profiler._timespan import Clock, TimeSpan, monotonic_millis

K = TypeVar("K")


class KeyedTimer(Generic[K]):
    """Maps a key to the TimeSpan of its last completed start/stop pair.

    Example:
        timer = KeyedTimer[str]()
        timer.start("compile")
        ...
        timer.stop("compile")
        timer.elapsed("compile")  # -> int milliseconds
    """

    def __init__(self, clock: Clock = monotonic_millis) -> None:
        self._clock = clock
        self._open: dict[K, TimeSpan] = {}
        self._spans: dict[K, TimeSpan] = {}
        self._lock = threading.Lock()

    def start(self, key: K) -> None:
        span = TimeSpan(self._clock).start()
        with self._lock:
            self._open[key] = span

    def stop(self, key: K) -> bool:
        """Close the open span for key and commit it.

        Returns:
            False when no span was open for key (nothing is recorded).
        """
        with self._lock:
            span = self._open.pop(key, None)
            if span is None:
                logger.warning(f"Stop without matching start for {key}")
                return False
            span.stop()
            self._commit(key, span)
            return True

    def _commit(self, key: K, span: TimeSpan) -> None:
        """Store a stopped span; called with the lock held."""
        self._spans[key] = span

    def elapsed(self, key: K) -> int | None:
        with self._lock:
            span = self._spans.get(key)
        return span.elapsed_millis() if span is not None else None

    def is_open(self, key: K) -> bool:
        with self._lock:
            return key in self._open

    def entries(self) -> list[tuple[K, TimeSpan]]:
        """Committed (key, span) pairs in first-commit order."""
        with self._lock:
            return list(self._spans.items())

    def has_events(self) -> bool:
        with self._lock:
            return bool(self._spans)

    def total_elapsed(self) -> int:
        return sum(span.elapsed_millis() for _, span in self.entries())

    def __len__(self) -> int:
        with self._lock:
            return len(self._spans)


class SizeKeyedTimer(KeyedTimer[K]):
    """KeyedTimer that also keeps the byte size supplied at stop time."""

    def __init__(self, clock: Clock = monotonic_millis) -> None:
        super().__init__(clock)
        self._sizes: dict[K, int] = {}

    def stop(self, key: K, size: int = 0) -> bool:  # type: ignore[override]
        assert size >= 0, f"Size must be non-negative: {size}"
        with self._lock:
            span = self._open.pop(key, None)
            if span is None:
                logger.warning(f"Stop without matching start for {key}")
                return False
            span.stop()
            self._commit(key, span)
            self._sizes[key] = size
            return True

    def size(self, key: K) -> int | None:
        with self._lock:
            return self._sizes.get(key)

    def sized_entries(self) -> list[tuple[K, TimeSpan, int]]:
        with self._lock:
            return [(key, span, self._sizes[key]) for key, span in self._spans.items()]

    def total_size(self) -> int:
        with self._lock:
            return sum(self._sizes.values())
