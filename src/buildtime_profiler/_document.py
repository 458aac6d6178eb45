"""Dotted-path field pruning for structured report documents."""

import copy
from collections.abc import Iterable
from typing import Any

from beartype import beartype


def remove_field(document: dict[str, Any], path: str) -> dict[str, Any]:
    """Remove the leaf addressed by a dot-separated path, in place.

    A path whose prefix does not resolve to a nested mapping is a no-op. Empty
    segments address empty keys: ``"build."`` names the key ``""`` inside
    ``build``, not ``build`` itself.

    Example:
        remove_field({"build": {"plugins": {}, "phases": {}}}, "build.plugins")
        # -> {"build": {"phases": {}}}
    """
    head, sep, rest = path.partition(".")
    if not sep:
        document.pop(head, None)
    elif isinstance(document.get(head), dict):
        remove_field(document[head], rest)
    return document


@beartype
def prune_fields(document: dict[str, Any], paths: Iterable[str]) -> dict[str, Any]:
    """Return a deep copy of document with every path removed.

    The original document is left untouched so it can still be written to
    disk or reported in full.
    """
    pruned = copy.deepcopy(document)
    for path in paths:
        remove_field(pruned, path)
    return pruned
