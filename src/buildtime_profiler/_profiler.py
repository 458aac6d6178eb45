"""Event routing and end-of-build driver.

Design by Contract:
- on_event() never raises: profiling is observational and must not fail
  the build it observes
- Handlers are synchronous and may run concurrently on builder threads
- Phases are reordered once, after the build, before any report is built
"""

import json
import threading
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import psutil
from beartype import beartype
from loguru import logger
from pydantic import ValidationError

from buildtime_profiler._config import OutputMode, ProfilerConfig
from buildtime_profiler._document import prune_fields
from buildtime_profiler._events import (
    IGNORED_REPOSITORY_EVENTS,
    ExecutionEvent,
    ExecutionEventType,
    RepositoryEvent,
    RepositoryEventType,
)
from buildtime_profiler._model import BuildResult, ModuleKey, Project
from buildtime_profiler._report import ReportAssembler
from buildtime_profiler._sink import TelemetrySink
from buildtime_profiler._state import BuildTimers
from buildtime_profiler._system import host_inventory
from buildtime_profiler._timespan import Clock, monotonic_millis

Handler = Callable[[Any], object]


class BuildTimeProfiler:
    """Turns orchestrator notifications into a per-module, per-phase breakdown.

    Args:
        config: Output and telemetry settings (default: ProfilerConfig())
        sink: Receives the pruned telemetry document, or None to skip telemetry
        timers: Pre-built state to record into (default: fresh BuildTimers)
        clock: Millisecond clock used when ``timers`` is not given

    Example:
        profiler = BuildTimeProfiler()
        for event in orchestrator_events:
            profiler.on_event(event)
        profiler.finish(build_result)
    """

    def __init__(
        self,
        config: ProfilerConfig | None = None,
        sink: TelemetrySink | None = None,
        timers: BuildTimers | None = None,
        clock: Clock = monotonic_millis,
    ) -> None:
        self.config = config if config is not None else ProfilerConfig()
        self.sink = sink
        self.timers = timers if timers is not None else BuildTimers.create(clock)
        self._ordered = False
        self._order_lock = threading.Lock()
        self._handlers: dict[object, Handler] = self._build_handlers()
        logger.debug("Build time profiler created")

    def _build_handlers(self) -> dict[object, Handler]:
        t = self.timers
        transfers = t.transfers
        handlers: dict[object, Handler] = {
            ExecutionEventType.PROJECT_DISCOVERY_STARTED: lambda e: t.discovery.discovery_start(),
            ExecutionEventType.SESSION_STARTED: self._session_started,
            ExecutionEventType.SESSION_ENDED: lambda e: t.session.session_stop(),
            ExecutionEventType.FORK_STARTED: lambda e: t.fork.start(),
            ExecutionEventType.FORK_SUCCEEDED: lambda e: t.fork.stop(),
            ExecutionEventType.FORK_FAILED: lambda e: t.fork.stop(),
            ExecutionEventType.FORKED_PROJECT_STARTED: t.fork_projects.project_start,
            ExecutionEventType.FORKED_PROJECT_SUCCEEDED: t.fork_projects.project_stop,
            ExecutionEventType.FORKED_PROJECT_FAILED: t.fork_projects.project_stop,
            ExecutionEventType.PROJECT_STARTED: t.projects.project_start,
            ExecutionEventType.PROJECT_SUCCEEDED: t.projects.project_stop,
            ExecutionEventType.PROJECT_FAILED: t.projects.project_stop,
            ExecutionEventType.PROJECT_SKIPPED: t.projects.project_stop,
            ExecutionEventType.MOJO_STARTED: self._mojo_started,
            ExecutionEventType.MOJO_SUCCEEDED: self._mojo_stopped,
            ExecutionEventType.MOJO_FAILED: self._mojo_stopped,
            ExecutionEventType.MOJO_SKIPPED: self._mojo_stopped,
            RepositoryEventType.ARTIFACT_DOWNLOADING: transfers["download"].transfer_start,
            RepositoryEventType.ARTIFACT_DOWNLOADED: transfers["download"].transfer_stop,
            RepositoryEventType.ARTIFACT_DEPLOYING: transfers["deploy"].transfer_start,
            RepositoryEventType.ARTIFACT_DEPLOYED: transfers["deploy"].transfer_stop,
            RepositoryEventType.ARTIFACT_INSTALLING: transfers["install"].transfer_start,
            RepositoryEventType.ARTIFACT_INSTALLED: transfers["install"].transfer_stop,
            RepositoryEventType.METADATA_DOWNLOADING: transfers["metadata-download"].transfer_start,
            RepositoryEventType.METADATA_DOWNLOADED: transfers["metadata-download"].transfer_stop,
            RepositoryEventType.METADATA_DEPLOYING: transfers["metadata-deployment"].transfer_start,
            RepositoryEventType.METADATA_DEPLOYED: transfers["metadata-deployment"].transfer_stop,
            RepositoryEventType.METADATA_INSTALLING: transfers["metadata-install"].transfer_start,
            RepositoryEventType.METADATA_INSTALLED: transfers["metadata-install"].transfer_stop,
        }
        for event_type in IGNORED_REPOSITORY_EVENTS:
            handlers[event_type] = lambda e: None
        return handlers

    def on_event(self, event: object) -> None:
        """Route one notification to its timer(s). Never raises."""
        try:
            event_type = getattr(event, "type", None)
            handler = self._handlers.get(event_type)
            if handler is None:
                logger.debug(f"Unhandled event {type(event).__name__}: {event_type}")
                return
            handler(event)
        except Exception:
            logger.exception(f"Failed to handle event {event!r}")

    def _session_started(self, event: ExecutionEvent) -> None:
        # Module graph resolved: discovery ends where the session begins.
        self.timers.discovery.discovery_stop()
        self.timers.session.session_start()

    def _mojo_started(self, event: ExecutionEvent) -> None:
        if event.phase:
            self.timers.mojos.mojo_start(event)
        else:
            self.timers.goals.mojo_start(event)

    def _mojo_stopped(self, event: ExecutionEvent) -> None:
        if event.phase:
            self.timers.mojos.mojo_stop(event)
        else:
            self.timers.goals.mojo_stop(event)

    def _order_phases(self) -> list[str]:
        with self._order_lock:
            if not self._ordered:
                self.timers.phases.reorder()
                self._ordered = True
        return self.timers.phases.snapshot()

    def report_lines(self, sorted_projects: Sequence[Project] = ()) -> list[str]:
        """Human-readable summary, reactor order taken from sorted_projects."""
        self._order_phases()
        return ReportAssembler(self.timers).lines(sorted_projects)

    def document(self) -> dict[str, Any]:
        """Full structured profiling document (JSON-compatible)."""
        self._order_phases()
        return ReportAssembler(self.timers).document()

    @beartype
    def write_document(self, document: dict[str, Any], path: Path) -> bool:
        """Write the document as JSON, creating parent directories."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w") as f:
                json.dump(document, f, indent=2, default=str)
        except OSError as e:
            logger.error(f"Couldn't save document: {e}")
            return False
        logger.info(f"Build time profile written to {path}")
        return True

    @beartype
    def telemetry_document(
        self,
        result: BuildResult,
        profiling: dict[str, Any],
        ignore_fields: Sequence[str] = (),
    ) -> dict[str, Any]:
        """Wrap a pruned copy of the profiling document with project and host data."""
        try:
            system = host_inventory()
        except (psutil.Error, OSError) as e:
            logger.warning(f"Host inventory unavailable: {e}")
            system = {}
        return {
            "profiling": prune_fields(profiling, ignore_fields),
            "project": _project_document(result.project),
            "system": system,
        }

    def send_telemetry(
        self,
        result: BuildResult,
        profiling: dict[str, Any],
        ignore_fields: Sequence[str] = (),
    ) -> bool:
        if self.sink is None:
            return False
        try:
            document = self.telemetry_document(result, profiling, ignore_fields)
            self.sink.index(document)
        except Exception:
            logger.exception("Error sending build time telemetry")
            return False
        return True

    @beartype
    def finish(self, result: BuildResult) -> dict[str, Any] | None:
        """Produce the end-of-build output and telemetry.

        Returns:
            The full (unpruned) document, or None when nothing was produced.
        """
        try:
            config = self.config.with_properties(result.properties)
        except ValidationError as e:
            logger.error(f"Invalid build time profiler configuration: {e}")
            return None

        try:
            document = self.document()
            if config.output is OutputMode.JSON:
                if not self.write_document(document, config.report_path):
                    return None
            else:
                ReportAssembler(self.timers).log_report(result.sorted_projects)
        except Exception:
            logger.exception("Build time report failed")
            return None

        if config.telemetry:
            self.send_telemetry(result, document, config.ignore_report_fields)
        return document


def _module_document(module: ModuleKey) -> dict[str, str]:
    return {
        "groupId": module.group_id,
        "artifactId": module.artifact_id,
        "version": module.version,
    }


def _project_document(project: Project) -> dict[str, Any]:
    document: dict[str, Any] = {"id": project.key.id, **_module_document(project.key)}
    document["parent"] = _module_document(project.parent) if project.parent is not None else None
    return document
