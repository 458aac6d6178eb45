"""Profiler configuration."""

from collections.abc import Mapping
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

OUTPUT_PROPERTY = "buildtime-profiler-output"
DIRECTORY_PROPERTY = "buildtime-profiler-directory"

DEFAULT_IGNORE_REPORT_FIELDS: tuple[str, ...] = (
    "download",
    "metadata",
    "build.plugins",
    "build.projects",
    "install",
    "fork-project",
    "fork-time",
    "goals",
)


class OutputMode(str, Enum):
    """Where the end-of-build report goes."""

    STDOUT = "stdout"
    JSON = "json"


class ProfilerConfig(BaseModel):
    """Configuration for the end-of-build output and telemetry.

    Build properties ``buildtime-profiler-output`` and
    ``buildtime-profiler-directory`` override ``output`` and ``directory``.
    The keys are orchestrator-neutral: the Maven extension's
    ``maven-buildtime-profiler-*`` spellings are not read.

    Attributes:
        output: Log the text report (stdout) or write the document as JSON
        directory: Destination directory for the JSON report
        report_file: File name of the JSON report inside ``directory``
        ignore_report_fields: Dotted paths pruned before telemetry is sent
        telemetry: Send the pruned document to the configured sink
    """

    output: OutputMode = Field(default=OutputMode.STDOUT, description="stdout or json")
    directory: Path = Field(default=Path("target"), description="JSON report directory")
    report_file: str = Field(default="report.json", description="JSON report file name")
    ignore_report_fields: tuple[str, ...] = Field(
        default=DEFAULT_IGNORE_REPORT_FIELDS,
        description="Dotted paths removed before telemetry",
    )
    telemetry: bool = Field(default=True, description="Forward the document to the sink")

    @property
    def report_path(self) -> Path:
        return self.directory / self.report_file

    def with_properties(self, properties: Mapping[str, str]) -> "ProfilerConfig":
        """Overlay ``buildtime-profiler-*`` build properties.

        Raises:
            pydantic.ValidationError: If the output property names an unknown mode
        """
        update: dict[str, object] = {}
        if OUTPUT_PROPERTY in properties:
            update["output"] = properties[OUTPUT_PROPERTY].strip().lower()
        if DIRECTORY_PROPERTY in properties:
            update["directory"] = properties[DIRECTORY_PROPERTY]
        if not update:
            return self
        return ProfilerConfig.model_validate({**self.model_dump(), **update})
