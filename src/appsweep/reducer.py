"""Reduction of collected paths to a minimal covering set."""

import os
from collections.abc import Iterable
from pathlib import Path

from appsweep.locations import TRASH_DIRS

WRAPPER_MARKER = "Wrapper"


def standardize_path(path: str | Path) -> str:
    """Expand ~, resolve symlinks and drop trailing separators."""
    resolved = os.path.realpath(os.path.expanduser(str(path)))
    if len(resolved) > 1:
        resolved = resolved.rstrip("/")
    return resolved or "/"


def is_in_trash(path: str | Path) -> bool:
    """Whether a path lies inside a trash directory."""
    return any(part in TRASH_DIRS for part in Path(path).parts)


def seed_path(bundle_path: str | Path) -> Path | None:
    """
    Starting path for a run, derived from the bundle root.

    Bundles in the trash contribute nothing. Wrapped bundles (an .app inside
    a Wrapper directory) are represented by the wrapper's container two
    levels up.
    """
    path = Path(bundle_path)
    if is_in_trash(path):
        return None
    if WRAPPER_MARKER in path.parts:
        return path.parent.parent
    return path


def reduce_paths(paths: Iterable[str | Path]) -> list[str]:
    """
    Standardize, sort and collapse descendants.

    Sorting component-wise puts a directory immediately before its
    descendants (a plain string sort lets "App.plist" fall between "App"
    and "App/Sub"), so one pass against the last kept path removes them.

    Args:
        paths: Collected paths

    Returns:
        Sorted paths with no entry inside another
    """
    ordered = sorted({standardize_path(p) for p in paths}, key=lambda p: p.split("/"))
    kept: list[str] = []
    previous: str | None = None
    for path in ordered:
        if previous is not None and path.startswith(previous.rstrip("/") + "/"):
            continue
        kept.append(path)
        previous = path
    return kept


def suppress_trash_only(paths: list[str]) -> list[str]:
    """Drop the result entirely when its only entry is in the trash."""
    if len(paths) == 1 and is_in_trash(paths[0]):
        return []
    return paths
