"""Artifact and metadata transfer timers (download, deploy, install).

Each timer pairs a *-ING notification with its *-ED counterpart and keeps
the byte size reported on completion. Totals are over distinct keys; a
repeated transfer of the same coordinate overwrites the earlier record.
"""

from collections.abc import Callable
from typing import Any

from beartype import beartype
from loguru import logger

from buildtime_profiler._events import RepositoryEvent
from buildtime_profiler._keyed import SizeKeyedTimer
from buildtime_profiler._model import TransferKey
from buildtime_profiler._timers import millis_line
from buildtime_profiler._timespan import Clock, monotonic_millis

KeyFunction = Callable[[RepositoryEvent], TransferKey | None]


def artifact_key(event: RepositoryEvent) -> TransferKey | None:
    if event.artifact is None:
        return None
    return TransferKey(event.artifact.id, event.repository)


def metadata_key(event: RepositoryEvent) -> TransferKey | None:
    if event.metadata is None:
        return None
    return TransferKey(event.metadata.id, event.repository)


class TransferTimer(SizeKeyedTimer[TransferKey]):
    """Timed, sized transfers of one kind.

    Example:
        downloads = TransferTimer("Download summary:", artifact_key)
        downloads.transfer_start(downloading_event)
        downloads.transfer_stop(downloaded_event)
        for line in downloads.report_lines():
            logger.info(line)
    """

    def __init__(
        self,
        title: str,
        key_function: KeyFunction,
        clock: Clock = monotonic_millis,
    ) -> None:
        super().__init__(clock)
        self.title = title
        self._key_function = key_function

    def _key(self, event: RepositoryEvent) -> TransferKey | None:
        key = self._key_function(event)
        if key is None:
            logger.warning(f"{event.type.value} event without a coordinate, ignored")
        return key

    @beartype
    def transfer_start(self, event: RepositoryEvent) -> bool:
        key = self._key(event)
        if key is None:
            return False
        self.start(key)
        return True

    @beartype
    def transfer_stop(self, event: RepositoryEvent) -> bool:
        key = self._key(event)
        if key is None:
            return False
        return self.stop(key, event.size if event.size is not None else 0)

    def report_lines(self) -> list[str]:
        lines = [self.title]
        total_time = 0
        total_size = 0
        for key, span, size in self.sized_entries():
            total_time += span.elapsed_millis()
            total_size += size
            lines.append(millis_line(span.elapsed_millis(), str(key)))
        lines.append(f"Total: {total_time} ms, {total_size} bytes")
        return lines

    def to_document(self) -> dict[str, Any]:
        items = [
            {
                "artifact": key.coordinate,
                "repository": key.repository,
                "time": span.elapsed_millis(),
                "size": size,
            }
            for key, span, size in self.sized_entries()
        ]
        return {
            "items": items,
            "total-time": sum(item["time"] for item in items),
            "total-size": sum(item["size"] for item in items),
        }


def transfer_timers(clock: Clock = monotonic_millis) -> dict[str, TransferTimer]:
    """The six transfer timers, in report order."""
    return {
        "install": TransferTimer("Installation summary:", artifact_key, clock),
        "download": TransferTimer("Download summary:", artifact_key, clock),
        "deploy": TransferTimer("Deployment summary:", artifact_key, clock),
        "metadata-install": TransferTimer("Metadata installation summary:", metadata_key, clock),
        "metadata-download": TransferTimer("Metadata download summary:", metadata_key, clock),
        "metadata-deployment": TransferTimer("Metadata deployment summary:", metadata_key, clock),
    }
