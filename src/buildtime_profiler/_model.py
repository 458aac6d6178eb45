"""Value types identifying modules, goals and transferred coordinates.

All keys are frozen dataclasses: equality and hashing are by value, so a key
rebuilt from a later event matches the key built from the earlier one.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ModuleKey:
    """Identity of one module of the reactor (group, artifact, version)."""

    group_id: str
    artifact_id: str
    version: str

    @property
    def id(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True)
class MojoExecution:
    """One plugin goal execution as described by the orchestrator.

    ``lifecycle_phase`` is None when the goal was called directly on the
    command line (e.g. ``site:stage``) instead of being bound to a phase.
    """

    group_id: str
    artifact_id: str
    version: str
    goal: str
    execution_id: str = "default-cli"
    lifecycle_phase: str | None = None

    @property
    def full_id(self) -> str:
        return (
            f"{self.group_id}:{self.artifact_id}:{self.version}:"
            f"{self.goal} ({self.execution_id})"
        )


@dataclass(frozen=True)
class GoalInvocationKey:
    """A goal executed for a module, optionally inside a phase."""

    module: ModuleKey
    phase: str | None
    goal_id: str

    def __str__(self) -> str:
        return f"{self.module.id}:{self.goal_id}"


@dataclass(frozen=True)
class Artifact:
    group_id: str
    artifact_id: str
    version: str
    classifier: str = ""
    extension: str = "jar"

    @property
    def id(self) -> str:
        parts = [self.group_id, self.artifact_id, self.version]
        if self.classifier:
            parts.append(self.classifier)
        parts.append(self.extension)
        return ":".join(parts)


@dataclass(frozen=True)
class Metadata:
    group_id: str
    artifact_id: str = ""
    version: str = ""
    type: str = "maven-metadata.xml"

    @property
    def id(self) -> str:
        parts = [p for p in (self.group_id, self.artifact_id, self.version) if p]
        parts.append(self.type)
        return ":".join(parts)


@dataclass(frozen=True)
class TransferKey:
    """Coordinate plus repository; renders as the bare coordinate."""

    coordinate: str
    repository: str | None = None

    def __str__(self) -> str:
        return self.coordinate


@dataclass(frozen=True)
class Project:
    """A reactor project as listed in the final build result."""

    key: ModuleKey
    name: str
    parent: ModuleKey | None = None


@dataclass(frozen=True)
class BuildResult:
    """Final notification of a build session.

    Attributes:
        project: The top-level project the build was started for
        sorted_projects: Reactor projects in topological (build) order
        properties: Build properties; the ``buildtime-profiler-*`` entries
            override the profiler configuration
    """

    project: Project
    sorted_projects: tuple[Project, ...] = ()
    properties: dict[str, str] = field(default_factory=dict)
