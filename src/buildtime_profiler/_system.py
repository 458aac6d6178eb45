"""Host inventory attached to telemetry documents.

Read once at report time; this is not sampling during the build.
"""

import os
import platform
import sys
from typing import Any

import psutil
from loguru import logger


def _processor() -> dict[str, Any]:
    processor: dict[str, Any] = {
        "id": platform.processor() or platform.machine(),
        "logicalProcessors": psutil.cpu_count(logical=True),
        "physicalProcessors": psutil.cpu_count(logical=False),
    }
    try:
        frequency = psutil.cpu_freq()
    except (OSError, NotImplementedError) as e:
        logger.debug(f"CPU frequency unavailable: {e}")
        frequency = None
    if frequency is not None:
        processor["frequency"] = frequency.max or frequency.current
    return processor


def host_inventory() -> dict[str, Any]:
    """Memory, processor, OS and runtime description of this host."""
    memory = psutil.virtual_memory()
    process = psutil.Process(os.getpid())
    return {
        "memory": {"total": memory.total, "available": memory.available},
        "processor": _processor(),
        "os": {
            "arch": platform.machine(),
            "name": platform.system(),
            "version": platform.release(),
            "build": platform.version(),
        },
        "runtime": {
            "implementation": platform.python_implementation(),
            "version": platform.python_version(),
            "executable": sys.executable,
            "memory": {"rss": process.memory_info().rss},
        },
    }
