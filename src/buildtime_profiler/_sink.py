"""Telemetry sinks receiving the pruned profiling document."""

import json
import threading
import time
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from beartype import beartype


@runtime_checkable
class TelemetrySink(Protocol):
    """Destination for one telemetry document per build."""

    def index(self, document: dict[str, Any]) -> None: ...


class JsonLinesSink:
    """Append each document as one JSON line, stamped with ``date`` (epoch ms).

    Thread-safe. The parent directory is created on first write.
    """

    @beartype
    def __init__(self, path: Path) -> None:
        self.path = path
        self._lock = threading.Lock()

    @beartype
    def index(self, document: dict[str, Any]) -> None:
        stamped = {**document, "date": time.time_ns() // 1_000_000}
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a") as f:
                f.write(json.dumps(stamped, default=str) + "\n")
