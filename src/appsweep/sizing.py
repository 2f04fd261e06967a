"""Size and icon lookups for discovered paths."""

import os
import stat
from pathlib import Path

from appsweep.models import Icon, IconKind

BLOCK_SIZE = 512


def size_on_disk(path: str | Path, max_depth: int = 64) -> tuple[int, int]:
    """
    Calculate allocated and logical size of a file or directory tree.

    Symlinks are counted themselves and never followed. Unreadable entries
    are skipped.

    Args:
        path: File or directory
        max_depth: Maximum recursion depth

    Returns:
        Tuple of (real_bytes, logical_bytes)
    """
    real = 0
    logical = 0

    try:
        st = os.lstat(path)
    except (PermissionError, OSError):
        return 0, 0

    if not stat.S_ISDIR(st.st_mode):
        return st.st_blocks * BLOCK_SIZE, st.st_size

    def _scan(p: str, depth: int):
        nonlocal real, logical
        if depth > max_depth:
            return
        try:
            with os.scandir(p) as entries:
                for entry in entries:
                    try:
                        entry_stat = entry.stat(follow_symlinks=False)
                        real += entry_stat.st_blocks * BLOCK_SIZE
                        logical += entry_stat.st_size
                        if entry.is_dir(follow_symlinks=False):
                            _scan(entry.path, depth + 1)
                    except (PermissionError, OSError):
                        continue
        except (PermissionError, OSError):
            pass

    _scan(str(path), 0)
    return real, logical


def icon_for(path: str | Path) -> Icon | None:
    """Pick an icon for a path, or None if it no longer exists."""
    p = Path(path)
    try:
        st = os.lstat(p)
    except (PermissionError, OSError):
        return None

    if stat.S_ISLNK(st.st_mode):
        return Icon(kind=IconKind.SYMLINK)
    if stat.S_ISDIR(st.st_mode):
        if p.suffix == ".app":
            return Icon(kind=IconKind.APP)
        if p.parent.name in ("Containers", "Group Containers"):
            return Icon(kind=IconKind.CONTAINER)
        return Icon(kind=IconKind.FOLDER)
    if p.suffix == ".plist":
        return Icon(kind=IconKind.PLIST)
    return Icon(kind=IconKind.FILE)
