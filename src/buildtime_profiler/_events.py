"""Closed set of notifications the profiler consumes.

Every event carries an enum ``type``; the router dispatches on that value
through a lookup table instead of inspecting classes.
"""

from dataclasses import dataclass
from enum import Enum

from buildtime_profiler._model import Artifact, Metadata, ModuleKey, MojoExecution


class ExecutionEventType(Enum):
    PROJECT_DISCOVERY_STARTED = "ProjectDiscoveryStarted"
    SESSION_STARTED = "SessionStarted"
    SESSION_ENDED = "SessionEnded"
    FORK_STARTED = "ForkStarted"
    FORK_SUCCEEDED = "ForkSucceeded"
    FORK_FAILED = "ForkFailed"
    FORKED_PROJECT_STARTED = "ForkedProjectStarted"
    FORKED_PROJECT_SUCCEEDED = "ForkedProjectSucceeded"
    FORKED_PROJECT_FAILED = "ForkedProjectFailed"
    PROJECT_STARTED = "ProjectStarted"
    PROJECT_SUCCEEDED = "ProjectSucceeded"
    PROJECT_FAILED = "ProjectFailed"
    PROJECT_SKIPPED = "ProjectSkipped"
    MOJO_STARTED = "MojoStarted"
    MOJO_SUCCEEDED = "MojoSucceeded"
    MOJO_FAILED = "MojoFailed"
    MOJO_SKIPPED = "MojoSkipped"


class RepositoryEventType(Enum):
    ARTIFACT_DOWNLOADING = "ARTIFACT_DOWNLOADING"
    ARTIFACT_DOWNLOADED = "ARTIFACT_DOWNLOADED"
    ARTIFACT_DEPLOYING = "ARTIFACT_DEPLOYING"
    ARTIFACT_DEPLOYED = "ARTIFACT_DEPLOYED"
    ARTIFACT_INSTALLING = "ARTIFACT_INSTALLING"
    ARTIFACT_INSTALLED = "ARTIFACT_INSTALLED"
    METADATA_DOWNLOADING = "METADATA_DOWNLOADING"
    METADATA_DOWNLOADED = "METADATA_DOWNLOADED"
    METADATA_DEPLOYING = "METADATA_DEPLOYING"
    METADATA_DEPLOYED = "METADATA_DEPLOYED"
    METADATA_INSTALLING = "METADATA_INSTALLING"
    METADATA_INSTALLED = "METADATA_INSTALLED"
    ARTIFACT_RESOLVING = "ARTIFACT_RESOLVING"
    ARTIFACT_RESOLVED = "ARTIFACT_RESOLVED"
    ARTIFACT_DESCRIPTOR_INVALID = "ARTIFACT_DESCRIPTOR_INVALID"
    ARTIFACT_DESCRIPTOR_MISSING = "ARTIFACT_DESCRIPTOR_MISSING"
    METADATA_RESOLVING = "METADATA_RESOLVING"
    METADATA_RESOLVED = "METADATA_RESOLVED"
    METADATA_INVALID = "METADATA_INVALID"


# Resolution and descriptor validation do not move bytes.
IGNORED_REPOSITORY_EVENTS = frozenset(
    {
        RepositoryEventType.ARTIFACT_RESOLVING,
        RepositoryEventType.ARTIFACT_RESOLVED,
        RepositoryEventType.ARTIFACT_DESCRIPTOR_INVALID,
        RepositoryEventType.ARTIFACT_DESCRIPTOR_MISSING,
        RepositoryEventType.METADATA_RESOLVING,
        RepositoryEventType.METADATA_RESOLVED,
        RepositoryEventType.METADATA_INVALID,
    }
)


@dataclass(frozen=True)
class ExecutionEvent:
    """Lifecycle notification for the session, a project or a goal.

    ``project`` is required for project, forked-project and mojo events;
    ``mojo`` is required for mojo events.
    """

    type: ExecutionEventType
    project: ModuleKey | None = None
    mojo: MojoExecution | None = None

    @property
    def phase(self) -> str | None:
        return self.mojo.lifecycle_phase if self.mojo is not None else None


@dataclass(frozen=True)
class RepositoryEvent:
    """Dependency-transfer notification.

    ``size`` is the number of bytes moved, known only on the completing
    (``*ED``) event.
    """

    type: RepositoryEventType
    artifact: Artifact | None = None
    metadata: Metadata | None = None
    repository: str | None = None
    size: int | None = None


Event = ExecutionEvent | RepositoryEvent
