"""The timers owned by one profiler, created once per build."""

from dataclasses import dataclass, field

from buildtime_profiler._lifecycle import DiscoveredPhases
from buildtime_profiler._timers import (
    DiscoveryTimer,
    ForkTimer,
    GoalTimer,
    ModuleTimer,
    PhaseGoalTimer,
    SessionTimer,
)
from buildtime_profiler._timespan import Clock, monotonic_millis
from buildtime_profiler._transfer import TransferTimer, transfer_timers


@dataclass
class BuildTimers:
    """All mutable profiling state for a single build invocation.

    Shared by the builder threads through the keyed timers' locks; read once
    by the report assembler after the session has ended.
    """

    phases: DiscoveredPhases
    discovery: DiscoveryTimer
    session: SessionTimer
    fork: ForkTimer
    projects: ModuleTimer
    fork_projects: ModuleTimer
    goals: GoalTimer
    mojos: PhaseGoalTimer
    transfers: dict[str, TransferTimer] = field(default_factory=dict)

    @classmethod
    def create(cls, clock: Clock = monotonic_millis) -> "BuildTimers":
        phases = DiscoveredPhases()
        return cls(
            phases=phases,
            discovery=DiscoveryTimer(clock),
            session=SessionTimer(clock),
            fork=ForkTimer(clock),
            projects=ModuleTimer(clock, title="Project build time:"),
            fork_projects=ModuleTimer(clock, title="Forked project build time:"),
            goals=GoalTimer(clock),
            mojos=PhaseGoalTimer(phases, clock),
            transfers=transfer_timers(clock),
        )
