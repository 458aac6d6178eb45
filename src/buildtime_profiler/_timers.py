"""Span timers and the module/goal aggregate timers.

Span timers (discovery, session, fork) hold a single global TimeSpan.
Aggregate timers are KeyedTimer specializations that derive their keys from
execution events and know how to report and serialize themselves.
"""

import threading
from collections.abc import Iterable
from typing import Any

from beartype import beartype
from loguru import logger

from buildtime_profiler._events import ExecutionEvent
from buildtime_profiler._keyed import KeyedTimer
from buildtime_profiler._lifecycle import DiscoveredPhases
from buildtime_profiler._model import GoalInvocationKey, ModuleKey
from buildtime_profiler._timespan import Clock, TimeSpan, monotonic_millis


def millis_line(millis: int, label: str) -> str:
    """Report line with a right-justified millisecond field."""
    return f"{millis:8d} ms : {label}"


class SpanTimer:
    """Timer for an activity that happens once per build.

    A second start() replaces the span. stop() without a start is a logged
    no-op, as is stopping twice; concurrent stops from builder threads close
    the span exactly once.
    """

    label = "span"

    def __init__(self, clock: Clock = monotonic_millis) -> None:
        self._clock = clock
        self._span: TimeSpan | None = None
        self._lock = threading.Lock()

    def start(self) -> None:
        span = TimeSpan(self._clock).start()
        with self._lock:
            self._span = span

    def stop(self) -> bool:
        with self._lock:
            if self._span is None or not self._span.is_open:
                logger.warning(f"{self.label} timer stopped without being started")
                return False
            self._span.stop()
            return True

    def has_events(self) -> bool:
        return self._span is not None and self._span.is_stopped

    def time(self) -> int:
        """Elapsed milliseconds; 0 while open or never started."""
        if not self.has_events():
            return 0
        return self._span.elapsed_millis()


class DiscoveryTimer(SpanTimer):
    label = "Discovery"

    def discovery_start(self) -> None:
        self.start()

    def discovery_stop(self) -> bool:
        return self.stop()

    def report_lines(self) -> list[str]:
        return [f"Project discovery time: {self.time():8d} ms"]


class SessionTimer(SpanTimer):
    label = "Session"

    def session_start(self) -> None:
        self.start()

    def session_stop(self) -> bool:
        return self.stop()

    def report_lines(self) -> list[str]:
        return [f"Build session time: {self.time():8d} ms"]


class ForkTimer(SpanTimer):
    label = "Fork"

    def report_lines(self) -> list[str]:
        return [f"Time in forks: {self.time():8d} ms"]


def _module_of(event: ExecutionEvent) -> ModuleKey | None:
    if event.project is None:
        logger.warning(f"{event.type.value} event without a project, ignored")
    return event.project


class ModuleTimer(KeyedTimer[ModuleKey]):
    """Wall time per module; one instance for the reactor, one for forks."""

    def __init__(
        self, clock: Clock = monotonic_millis, *, title: str = "Project build time:"
    ) -> None:
        super().__init__(clock)
        self.title = title

    @beartype
    def project_start(self, event: ExecutionEvent) -> bool:
        module = _module_of(event)
        if module is None:
            return False
        self.start(module)
        return True

    @beartype
    def project_stop(self, event: ExecutionEvent) -> bool:
        module = _module_of(event)
        if module is None:
            return False
        return self.stop(module)

    def report_lines(self) -> list[str]:
        lines = [self.title]
        for module, span in self.entries():
            lines.append(millis_line(span.elapsed_millis(), module.id))
        lines.append(f"{self.total_elapsed():8d} ms total")
        return lines

    def to_document(self) -> dict[str, Any]:
        return {
            "projects": {module.id: span.elapsed_millis() for module, span in self.entries()},
            "total-time": self.total_elapsed(),
        }


def _goal_key(event: ExecutionEvent) -> GoalInvocationKey | None:
    if event.project is None or event.mojo is None:
        logger.warning(f"{event.type.value} event without project or goal, ignored")
        return None
    return GoalInvocationKey(event.project, event.mojo.lifecycle_phase, event.mojo.full_id)


class _InvocationTimer(KeyedTimer[GoalInvocationKey]):
    """Goal executions keyed by module, phase and goal id."""

    @beartype
    def mojo_start(self, event: ExecutionEvent) -> bool:
        key = _goal_key(event)
        if key is None:
            return False
        self.start(key)
        return True

    @beartype
    def mojo_stop(self, event: ExecutionEvent) -> bool:
        key = _goal_key(event)
        if key is None:
            return False
        return self.stop(key)


class GoalTimer(_InvocationTimer):
    """Goals invoked directly, outside any lifecycle phase."""

    def report_lines(self) -> list[str]:
        return [millis_line(span.elapsed_millis(), str(key)) for key, span in self.entries()]

    def to_document(self) -> list[dict[str, Any]]:
        return [
            {"project": key.module.id, "goal": key.goal_id, "time": span.elapsed_millis()}
            for key, span in self.entries()
        ]


class PhaseGoalTimer(_InvocationTimer):
    """Goals executed inside a named phase: the primary build aggregation.

    Every goal start feeds its phase into the shared DiscoveredPhases so the
    reports can walk phases in lifecycle order.
    """

    def __init__(self, phases: DiscoveredPhases, clock: Clock = monotonic_millis) -> None:
        super().__init__(clock)
        self.phases = phases
        # Committed spans grouped by phase and by (module, phase); maintained
        # under the timer lock so report queries never scan every entry.
        self._by_phase: dict[str | None, dict[GoalInvocationKey, TimeSpan]] = {}
        self._by_module_phase: dict[
            tuple[ModuleKey, str | None], dict[GoalInvocationKey, TimeSpan]
        ] = {}
        self._modules: dict[ModuleKey, None] = {}

    @beartype
    def mojo_start(self, event: ExecutionEvent) -> bool:
        if event.phase:
            self.phases.add(event.phase)
        return super().mojo_start(event)

    def _commit(self, key: GoalInvocationKey, span: TimeSpan) -> None:
        super()._commit(key, span)
        self._by_phase.setdefault(key.phase, {})[key] = span
        self._by_module_phase.setdefault((key.module, key.phase), {})[key] = span
        self._modules.setdefault(key.module, None)

    def _spans_for(self, phase: str, module: ModuleKey | None = None) -> list[TimeSpan]:
        with self._lock:
            if module is None:
                goals = self._by_phase.get(phase, {})
            else:
                goals = self._by_module_phase.get((module, phase), {})
            return list(goals.values())

    def has_time_for_module_and_phase(self, module: ModuleKey, phase: str) -> bool:
        with self._lock:
            return (module, phase) in self._by_module_phase

    def time_for_module_and_phase(self, module: ModuleKey, phase: str) -> int:
        return sum(span.elapsed_millis() for span in self._spans_for(phase, module))

    def time_for_phase(self, phase: str) -> int:
        return sum(span.elapsed_millis() for span in self._spans_for(phase))

    def goals_in_phase(self, phase: str) -> dict[GoalInvocationKey, TimeSpan]:
        with self._lock:
            return dict(self._by_phase.get(phase, {}))

    def modules(self) -> list[ModuleKey]:
        """Modules with at least one recorded goal, in first-commit order."""
        with self._lock:
            return list(self._modules)

    def to_document(self, phases: Iterable[str] | None = None) -> dict[str, Any]:
        ordered = list(phases) if phases is not None else self.phases.snapshot()
        projects: dict[str, dict[str, int]] = {}
        for module in self.modules():
            projects[module.id] = {
                phase: self.time_for_module_and_phase(module, phase)
                for phase in ordered
                if self.has_time_for_module_and_phase(module, phase)
            }
        return {
            "projects": projects,
            "plugins": {
                phase: [
                    {"project": key.module.id, "plugin": key.goal_id, "time": span.elapsed_millis()}
                    for key, span in self.goals_in_phase(phase).items()
                ]
                for phase in ordered
            },
            "phases": {phase: self.time_for_phase(phase) for phase in ordered},
        }
