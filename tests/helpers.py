"""Test doubles shared by the test modules."""

from buildtime_profiler import MojoExecution


class FakeClock:
    """Deterministic millisecond clock advanced by hand."""

    def __init__(self, now: int = 1_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, millis: int) -> None:
        self.now += millis


def mojo(goal: str, phase: str | None, plugin: str = "maven-compiler-plugin") -> MojoExecution:
    return MojoExecution(
        "org.apache.maven.plugins",
        plugin,
        "3.11.0",
        goal,
        execution_id=f"default-{goal}",
        lifecycle_phase=phase,
    )
