"""Canonical lifecycle ordering for phases discovered during a build.

Builder threads report goal starts for different modules in interleaved
order, so the discovered phase sequence is reordered once after the build
and before any report is produced.
"""

import threading
from collections.abc import Iterable, Sequence

from beartype import beartype

CLEAN_LIFECYCLE: tuple[str, ...] = ("pre-clean", "clean", "post-clean")

DEFAULT_LIFECYCLE: tuple[str, ...] = (
    "validate",
    "initialize",
    "generate-sources",
    "process-sources",
    "generate-resources",
    "process-resources",
    "compile",
    "process-classes",
    "generate-test-sources",
    "process-test-sources",
    "generate-test-resources",
    "process-test-resources",
    "test-compile",
    "process-test-classes",
    "test",
    "prepare-package",
    "package",
    "pre-integration-test",
    "integration-test",
    "post-integration-test",
    "verify",
    "install",
    "deploy",
)

SITE_LIFECYCLE: tuple[str, ...] = ("pre-site", "site", "post-site", "site-deploy")

CANONICAL_PHASES: tuple[str, ...] = CLEAN_LIFECYCLE + DEFAULT_LIFECYCLE + SITE_LIFECYCLE


@beartype
def order_phases(
    discovered: Iterable[str],
    canonical: Sequence[str] = CANONICAL_PHASES,
) -> list[str]:
    """Reorder discovered phases to follow the canonical lifecycle.

    Phases missing from ``canonical`` are kept and appended after the known
    ones in first-seen order. Duplicates collapse to their first occurrence.

    Args:
        discovered: Phase names in arrival order
        canonical: The a-priori lifecycle sequence

    Returns:
        New list; the input is not modified.
    """
    seen: list[str] = []
    for phase in discovered:
        if phase not in seen:
            seen.append(phase)

    present = set(seen)
    known = [phase for phase in canonical if phase in present]
    canonical_set = set(canonical)
    custom = [phase for phase in seen if phase not in canonical_set]
    return known + custom


class DiscoveredPhases:
    """Duplicate-free, thread-safe sequence of phases seen in goal events."""

    def __init__(self, canonical: Sequence[str] = CANONICAL_PHASES) -> None:
        self._canonical = tuple(canonical)
        self._phases: list[str] = []
        self._lock = threading.Lock()

    def add(self, phase: str | None) -> bool:
        """Record a phase; returns True if it was not seen before.

        None and empty names are ignored (goals invoked without a lifecycle).
        """
        if not phase:
            return False
        with self._lock:
            if phase in self._phases:
                return False
            self._phases.append(phase)
            return True

    def reorder(self) -> list[str]:
        with self._lock:
            self._phases = order_phases(self._phases, self._canonical)
            return list(self._phases)

    def snapshot(self) -> list[str]:
        with self._lock:
            return list(self._phases)

    def __contains__(self, phase: object) -> bool:
        with self._lock:
            return phase in self._phases

    def __iter__(self):
        return iter(self.snapshot())

    def __len__(self) -> int:
        with self._lock:
            return len(self._phases)
