"""Name matching and skip logic for leftover discovery.

Both predicates work on normalized names (see models.normalize_name) and do
no I/O beyond the file type check in is_supported_file_type.
"""

import os
import stat
from collections.abc import Container, Iterable
from pathlib import Path

from appsweep.models import AppDescriptor, MatchRule, SkipRule, normalize_name

__all__ = [
    "is_supported_file_type",
    "matches_app",
    "normalize_name",
    "should_skip",
]


def matches_app(name: str, path: Path, app: AppDescriptor, rules: Iterable[MatchRule]) -> bool:
    """
    Decide whether a candidate belongs to the app.

    Rules whose key is contained in the normalized bundle identifier are
    checked first. An exclude keyword ends evaluation with no match; an
    include keyword ends it with a match. Otherwise the name must contain
    one of the app's identifying signals.

    Args:
        name: Normalized candidate name
        path: Full candidate path
        app: Target application
        rules: Match rules to consult

    Returns:
        True if the candidate matches the app
    """
    bundle_key = app.bundle_identifier_key
    bundle_suffix = app.bundle_suffix

    for rule in rules:
        if not rule.applies_to(bundle_key):
            continue
        if any(keyword in name for keyword in rule.exclude):
            return False
        if any(keyword in name for keyword in rule.include):
            return True

    # Empty signals would match every name
    by_identifier = bool(bundle_key) and bundle_key in name
    by_suffix = bool(bundle_suffix) and bundle_suffix in name

    if app.web_app:
        return by_identifier or by_suffix

    name_key = app.name_key
    path_key = app.path_name_key
    return (
        by_identifier
        or by_suffix
        or (len(name_key) > 3 and name_key in name)
        or (len(path_key) > 3 and path_key in name)
    )


def is_supported_file_type(path: Path, extensions: Iterable[str] | None = None) -> bool:
    """
    Check whether a path is a type the matcher may collect.

    Directories are always supported. Files must be regular files or
    symlinks; sockets, pipes and devices are not. When an extension
    allow-list is given, a file's extension must also be on it.

    Args:
        path: Candidate path
        extensions: Optional allow-list (with or without leading dot)

    Returns:
        True if supported
    """
    try:
        mode = os.lstat(path).st_mode
    except (PermissionError, OSError):
        return False

    if stat.S_ISDIR(mode):
        return True
    if stat.S_ISLNK(mode):
        return True
    if not stat.S_ISREG(mode):
        return False

    if extensions is None:
        return True
    allowed = {ext.lower().lstrip(".") for ext in extensions}
    return path.suffix.lower().lstrip(".") in allowed


def should_skip(
    name: str,
    path: Path,
    collected: Container[str],
    skip_rules: Iterable[SkipRule],
    extensions: Iterable[str] | None = None,
) -> bool:
    """
    Decide whether a candidate must be excluded regardless of matching.

    Args:
        name: Normalized candidate name
        path: Full candidate path
        collected: Paths already collected (as strings)
        skip_rules: Reserved prefix rules
        extensions: Optional supported extension allow-list

    Returns:
        True if the candidate should be skipped
    """
    if str(path) in collected:
        return True
    if not is_supported_file_type(path, extensions):
        return True
    return any(rule.blocks(name) for rule in skip_rules)
