"""One-level scanning of search roots for paths belonging to an app."""

import logging
import os
import threading
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable

from appsweep.matching import matches_app, should_skip
from appsweep.models import AppDescriptor, MatchRule, SkipRule, normalize_name

logger = logging.getLogger(__name__)


class PathAccumulator:
    """
    Thread-safe ordered set of collected paths.

    Every read and write goes through one lock so that check-then-insert
    sequences from concurrent scan workers cannot interleave.
    """

    def __init__(self, initial: Iterable[str | Path] = ()):
        self._lock = threading.Lock()
        self._paths: list[str] = []
        self._index: set[str] = set()
        for path in initial:
            self.add(path)

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return str(path) in self._index

    def __len__(self) -> int:
        with self._lock:
            return len(self._paths)

    def add(self, path: str | Path) -> bool:
        """Insert a path. Returns False if it was already present."""
        key = str(path)
        with self._lock:
            return self._insert(key)

    def snapshot(self) -> list[str]:
        """Copy of the collected paths in insertion order."""
        with self._lock:
            return list(self._paths)

    def covers(self, path: str | Path) -> bool:
        """Whether the path or one of its ancestors is already collected."""
        with self._lock:
            return self._covers(str(path))

    def add_if(self, path: str | Path, predicate: Callable[[], bool]) -> bool:
        """
        Insert a path if nothing collected covers it and predicate() holds.

        The coverage check, predicate and insert run under one lock hold.
        """
        key = str(path)
        with self._lock:
            if self._covers(key) or not predicate():
                return False
            return self._insert(key)

    def _insert(self, key: str) -> bool:
        if key in self._index:
            return False
        self._index.add(key)
        self._paths.append(key)
        return True

    def _covers(self, key: str) -> bool:
        for existing in self._paths:
            if key == existing or key.startswith(existing.rstrip("/") + "/"):
                return True
        return False


def list_entries(root: Path) -> list[tuple[Path, str]]:
    """
    List the immediate children of a directory.

    Args:
        root: Directory to list

    Returns:
        List of (full path, normalized name); empty if the root is unreadable
    """
    try:
        with os.scandir(root) as entries:
            return [(Path(entry.path), normalize_name(entry.name)) for entry in entries]
    except (PermissionError, OSError) as e:
        logger.warning("Could not list %s: %s", root, e)
        return []


def scan_directories(
    root: Path,
    app: AppDescriptor,
    accumulator: PathAccumulator,
    rules: list[MatchRule],
    skip_rules: list[SkipRule],
    extensions: list[str] | None = None,
) -> int:
    """
    Collect matching directories directly under root.

    Returns:
        Number of directories added
    """
    added = 0
    for path, name in list_entries(root):
        try:
            if not path.is_dir():
                continue
        except (PermissionError, OSError):
            continue

        if should_skip(name, path, accumulator, skip_rules, extensions):
            continue

        if accumulator.add_if(path, lambda: matches_app(name, path, app, rules)):
            added += 1
    return added


def scan_files(
    root: Path,
    app: AppDescriptor,
    accumulator: PathAccumulator,
    rules: list[MatchRule],
    skip_rules: list[SkipRule],
    extensions: list[str] | None = None,
) -> int:
    """
    Collect matching files directly under root.

    Returns:
        Number of files added
    """
    added = 0
    for path, name in list_entries(root):
        try:
            if not path.exists() or path.is_dir():
                continue
        except (PermissionError, OSError):
            continue

        if should_skip(name, path, accumulator, skip_rules, extensions):
            continue

        if matches_app(name, path, app, rules) and accumulator.add(path):
            added += 1
    return added


def run_phase(
    roots: list[Path],
    worker: Callable[[Path], int],
    max_workers: int = 8,
) -> int:
    """
    Run one worker per root in parallel and wait for all of them.

    A failing worker is logged and contributes nothing.

    Returns:
        Total count reported by the workers
    """
    if not roots:
        return 0

    total = 0
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_root = {executor.submit(worker, root): root for root in roots}

        for future in as_completed(future_to_root):
            root = future_to_root[future]
            try:
                total += future.result()
            except Exception as e:
                logger.warning("Scan of %s failed: %s", root, e)
    return total


class LocationScanner:
    """Two-phase (directories, then files) scanner over a set of roots."""

    def __init__(
        self,
        app: AppDescriptor,
        accumulator: PathAccumulator,
        rules: list[MatchRule],
        skip_rules: list[SkipRule],
        extensions: list[str] | None = None,
        max_workers: int = 8,
    ):
        self.app = app
        self.accumulator = accumulator
        self.rules = rules
        self.skip_rules = skip_rules
        self.extensions = extensions
        self.max_workers = max_workers

    def collect_directories(self, roots: list[Path]) -> int:
        """Directory phase. Returns once every root has been scanned."""
        added = run_phase(
            roots,
            lambda root: scan_directories(
                root, self.app, self.accumulator, self.rules, self.skip_rules, self.extensions
            ),
            self.max_workers,
        )
        logger.debug("Directory phase added %d paths across %d roots", added, len(roots))
        return added

    def collect_files(self, roots: list[Path]) -> int:
        """File phase. Returns once every root has been scanned."""
        added = run_phase(
            roots,
            lambda root: scan_files(
                root, self.app, self.accumulator, self.rules, self.skip_rules, self.extensions
            ),
            self.max_workers,
        )
        logger.debug("File phase added %d paths across %d roots", added, len(roots))
        return added

    def scan(self, roots: list[Path]) -> int:
        """Run the directory phase to completion, then the file phase."""
        return self.collect_directories(roots) + self.collect_files(roots)
