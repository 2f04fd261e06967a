"""Standard macOS library locations searched for application leftovers."""

import os
from pathlib import Path

# One-level search roots. Each root's immediate children are candidates.
DEFAULT_SEARCH_ROOTS = [
    "~/Library",
    "~/Library/Application Scripts",
    "~/Library/Application Support",
    "~/Library/Application Support/CrashReporter",
    "~/Library/Caches",
    "~/Library/Containers",
    "~/Library/Cookies",
    "~/Library/Group Containers",
    "~/Library/HTTPStorages",
    "~/Library/Internet Plug-Ins",
    "~/Library/LaunchAgents",
    "~/Library/Logs",
    "~/Library/Logs/DiagnosticReports",
    "~/Library/Preferences",
    "~/Library/Preferences/ByHost",
    "~/Library/Saved Application State",
    "~/Library/WebKit",
    "/Library",
    "/Library/Application Support",
    "/Library/Application Support/CrashReporter",
    "/Library/Caches",
    "/Library/Extensions",
    "/Library/Internet Plug-Ins",
    "/Library/LaunchAgents",
    "/Library/LaunchDaemons",
    "/Library/Logs",
    "/Library/Logs/DiagnosticReports",
    "/Library/Preferences",
    "/Library/PrivilegedHelperTools",
    "/private/var/db/receipts",
    "/Users/Shared",
]

CONTAINERS_DIR = "~/Library/Containers"
GROUP_CONTAINERS_DIR = "~/Library/Group Containers"
CONTAINER_METADATA_FILE = ".com.apple.containermanagerd.metadata.plist"
TRASH_DIRS = (".Trash", ".Trashes")


def expand_path(path: str) -> Path:
    """Expand ~ and environment variables in path."""
    return Path(os.path.expanduser(os.path.expandvars(path)))


def get_search_roots(extra: list[str] | None = None, include_defaults: bool = True) -> list[Path]:
    """
    Get the effective list of search roots.

    Args:
        extra: Additional roots (may contain ~)
        include_defaults: Whether to start from DEFAULT_SEARCH_ROOTS

    Returns:
        Existing directories, de-duplicated, in configured order
    """
    candidates = list(DEFAULT_SEARCH_ROOTS) if include_defaults else []
    candidates.extend(extra or [])

    roots: list[Path] = []
    seen: set[str] = set()
    for candidate in candidates:
        root = expand_path(candidate)
        key = str(root)
        if key in seen:
            continue
        seen.add(key)
        if root.is_dir():
            roots.append(root)
    return roots
