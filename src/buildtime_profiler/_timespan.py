"""Start/stop instant pairs.

Design by Contract:
- stop() MUST follow start(), exactly once (InvalidStateError otherwise)
- Elapsed time MUST be non-negative (crash if negative)
"""

import time
from collections.abc import Callable

Clock = Callable[[], int]


def monotonic_millis() -> int:
    """Default clock: monotonic instant in whole milliseconds."""
    return time.monotonic_ns() // 1_000_000


class InvalidStateError(RuntimeError):
    """A TimeSpan was stopped before start, stopped twice, or read while open."""


class TimeSpan:
    """One timed activity.

    A span is open between start() and stop(); elapsed_millis() is defined
    only once it has been stopped.

    Example:
        span = TimeSpan()
        span.start()
        run_goal()
        span.stop()
        print(f"{span.elapsed_millis()} ms")
    """

    __slots__ = ("_clock", "start_instant", "stop_instant")

    def __init__(self, clock: Clock = monotonic_millis) -> None:
        self._clock = clock
        self.start_instant: int | None = None
        self.stop_instant: int | None = None

    def start(self) -> "TimeSpan":
        self.start_instant = self._clock()
        self.stop_instant = None
        return self

    def stop(self) -> "TimeSpan":
        if self.start_instant is None:
            raise InvalidStateError("TimeSpan stopped before it was started")
        if self.stop_instant is not None:
            raise InvalidStateError("TimeSpan stopped twice")
        self.stop_instant = self._clock()
        assert self.stop_instant >= self.start_instant, (
            f"Elapsed time cannot be negative: {self.stop_instant - self.start_instant} ms. "
            f"Clock went backwards or timing bug."
        )
        return self

    @property
    def is_open(self) -> bool:
        return self.start_instant is not None and self.stop_instant is None

    @property
    def is_stopped(self) -> bool:
        return self.stop_instant is not None

    def elapsed_millis(self) -> int:
        if self.start_instant is None or self.stop_instant is None:
            raise InvalidStateError("TimeSpan has not been stopped")
        return self.stop_instant - self.start_instant

    def __repr__(self) -> str:
        return f"TimeSpan(start={self.start_instant}, stop={self.stop_instant})"
