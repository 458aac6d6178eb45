"""Human-readable summary and structured document assembly.

Both are read-only traversals of BuildTimers, run single-threaded after the
build. A failing section is logged and skipped: the result is an incomplete
report, never an exception reaching the observed build.
"""

from collections.abc import Callable, Sequence
from typing import Any

from loguru import logger

from buildtime_profiler._model import ModuleKey, Project
from buildtime_profiler._state import BuildTimers
from buildtime_profiler._timers import millis_line

SEPARATOR = "-" * 72
TITLE = "--             Build Time Profiler Summary                            --"

TRANSFER_REPORT_ORDER: tuple[str, ...] = (
    "install",
    "download",
    "deploy",
    "metadata-install",
    "metadata-download",
    "metadata-deployment",
)


class ReportAssembler:
    """Builds the text report and the JSON-compatible document.

    Expects the discovered phases to have been reordered already.

    Example:
        timers.phases.reorder()
        assembler = ReportAssembler(timers)
        for line in assembler.lines(result.sorted_projects):
            print(line)
        json.dump(assembler.document(), f)
    """

    def __init__(self, timers: BuildTimers) -> None:
        self.timers = timers

    def lines(self, sorted_projects: Sequence[Project] = ()) -> list[str]:
        sections: list[tuple[str, Callable[[], list[str]]]] = [
            ("discovery", self._discovery_section),
            ("projects", lambda: self._project_section(sorted_projects)),
            ("phases", self._phase_summary_section),
            ("plugins", self._plugins_section),
            ("goals", self._goals_section),
            ("transfers", self._transfer_section),
            ("fork", self._fork_section),
        ]
        lines = [TITLE, SEPARATOR]
        for name, section in sections:
            try:
                lines.extend(section())
            except Exception:
                logger.exception(f"Report section '{name}' failed, skipped")
        return lines

    def log_report(self, sorted_projects: Sequence[Project] = ()) -> None:
        for line in self.lines(sorted_projects):
            logger.info(line)

    def _discovery_section(self) -> list[str]:
        if not self.timers.discovery.has_events():
            return []
        return self.timers.discovery.report_lines() + [SEPARATOR]

    def _reactor_modules(self, sorted_projects: Sequence[Project]) -> list[tuple[str, ModuleKey]]:
        if sorted_projects:
            return [(project.name, project.key) for project in sorted_projects]
        return [(module.id, module) for module in self.timers.mojos.modules()]

    def _project_section(self, sorted_projects: Sequence[Project]) -> list[str]:
        mojos = self.timers.mojos
        if not mojos.has_events():
            return []
        phases = self.timers.phases.snapshot()
        lines = ["Project Build Time (reactor order):", ""]
        for name, module in self._reactor_modules(sorted_projects):
            lines.append(f"{name}:")
            for phase in phases:
                if mojos.has_time_for_module_and_phase(module, phase):
                    millis = mojos.time_for_module_and_phase(module, phase)
                    lines.append("    " + millis_line(millis, phase))
        lines.append(SEPARATOR)
        return lines

    def _phase_summary_section(self) -> list[str]:
        mojos = self.timers.mojos
        if not mojos.has_events():
            return []
        lines = ["Lifecycle Phase summary:", ""]
        for phase in self.timers.phases.snapshot():
            lines.append(millis_line(mojos.time_for_phase(phase), phase))
        lines.append(SEPARATOR)
        return lines

    def _plugins_section(self) -> list[str]:
        mojos = self.timers.mojos
        if not mojos.has_events():
            return []
        lines = ["Plugins in lifecycle Phases:", ""]
        for phase in self.timers.phases.snapshot():
            lines.append(f"{phase}:")
            for key, span in mojos.goals_in_phase(phase).items():
                lines.append(millis_line(span.elapsed_millis(), str(key)))
        lines.append(SEPARATOR)
        return lines

    def _goals_section(self) -> list[str]:
        if not self.timers.goals.has_events():
            return []
        return (
            ["Plugins directly called via goals:", ""]
            + self.timers.goals.report_lines()
            + [SEPARATOR]
        )

    def _transfer_section(self) -> list[str]:
        lines: list[str] = []
        for name in TRANSFER_REPORT_ORDER:
            timer = self.timers.transfers[name]
            if timer.has_events():
                lines.extend(timer.report_lines())
                lines.append(SEPARATOR)
        return lines

    def _fork_section(self) -> list[str]:
        lines: list[str] = []
        if self.timers.fork.has_events():
            lines.extend(self.timers.fork.report_lines())
        if self.timers.fork_projects.has_events():
            lines.extend(self.timers.fork_projects.report_lines())
        if lines:
            lines.append(SEPARATOR)
        return lines

    def document(self) -> dict[str, Any]:
        timers = self.timers
        transfers = timers.transfers
        fields: list[tuple[str, Callable[[], Any]]] = [
            ("discovery-time", timers.discovery.time),
            ("session-time", timers.session.time),
            ("build", lambda: timers.mojos.to_document(timers.phases.snapshot())),
            ("goals", timers.goals.to_document),
            ("install", transfers["install"].to_document),
            ("download", transfers["download"].to_document),
            ("deploy", transfers["deploy"].to_document),
            (
                "metadata",
                lambda: {
                    "install": transfers["metadata-install"].to_document(),
                    "download": transfers["metadata-download"].to_document(),
                    "deployment": transfers["metadata-deployment"].to_document(),
                },
            ),
            ("fork-time", timers.fork.time),
            ("fork-project", timers.fork_projects.to_document),
        ]
        document: dict[str, Any] = {}
        for name, build in fields:
            try:
                document[name] = build()
            except Exception:
                logger.exception(f"Document field '{name}' failed, omitted")
        return document
