"""buildtime-profiler: Wall-clock breakdown of multi-module builds.

Provides:
- BuildTimeProfiler: Routes orchestrator notifications to timers and drives
  the end-of-build report, JSON output and telemetry
- KeyedTimer / SizeKeyedTimer: Thread-safe start/stop timers keyed by value
- PhaseGoalTimer, GoalTimer, ModuleTimer, TransferTimer: Aggregate timers
- order_phases: Canonical lifecycle ordering of discovered phases
- prune_fields: Dotted-path field removal for structured documents

Usage:
    from buildtime_profiler import BuildTimeProfiler, ExecutionEvent, ExecutionEventType

    profiler = BuildTimeProfiler()
    profiler.on_event(ExecutionEvent(ExecutionEventType.PROJECT_DISCOVERY_STARTED))
    ...
    profiler.finish(build_result)
"""

from buildtime_profiler._config import OutputMode, ProfilerConfig
from buildtime_profiler._document import prune_fields, remove_field
from buildtime_profiler._events import (
    Event,
    ExecutionEvent,
    ExecutionEventType,
    RepositoryEvent,
    RepositoryEventType,
)
from buildtime_profiler._keyed import KeyedTimer, SizeKeyedTimer
from buildtime_profiler._lifecycle import CANONICAL_PHASES, DiscoveredPhases, order_phases
from buildtime_profiler._model import (
    Artifact,
    BuildResult,
    GoalInvocationKey,
    Metadata,
    ModuleKey,
    MojoExecution,
    Project,
    TransferKey,
)
from buildtime_profiler._profiler import BuildTimeProfiler
from buildtime_profiler._report import ReportAssembler
from buildtime_profiler._sink import JsonLinesSink, TelemetrySink
from buildtime_profiler._state import BuildTimers
from buildtime_profiler._system import host_inventory
from buildtime_profiler._timers import (
    DiscoveryTimer,
    ForkTimer,
    GoalTimer,
    ModuleTimer,
    PhaseGoalTimer,
    SessionTimer,
)
from buildtime_profiler._timespan import InvalidStateError, TimeSpan, monotonic_millis
from buildtime_profiler._transfer import TransferTimer, transfer_timers

__all__ = [
    "CANONICAL_PHASES",
    "Artifact",
    "BuildResult",
    "BuildTimeProfiler",
    "BuildTimers",
    "DiscoveredPhases",
    "DiscoveryTimer",
    "Event",
    "ExecutionEvent",
    "ExecutionEventType",
    "ForkTimer",
    "GoalInvocationKey",
    "GoalTimer",
    "InvalidStateError",
    "JsonLinesSink",
    "KeyedTimer",
    "Metadata",
    "ModuleKey",
    "ModuleTimer",
    "MojoExecution",
    "OutputMode",
    "PhaseGoalTimer",
    "ProfilerConfig",
    "Project",
    "ReportAssembler",
    "RepositoryEvent",
    "RepositoryEventType",
    "SessionTimer",
    "SizeKeyedTimer",
    "TelemetrySink",
    "TimeSpan",
    "TransferKey",
    "TransferTimer",
    "host_inventory",
    "monotonic_millis",
    "order_phases",
    "prune_fields",
    "remove_field",
    "transfer_timers",
]

__version__ = "0.1.0"
