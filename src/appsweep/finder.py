"""Discovery pipeline: scan, resolve, reduce, enrich and deliver."""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Optional

from appsweep.config import SweepConfig, load_config
from appsweep.containers import find_containers
from appsweep.locations import get_search_roots
from appsweep.models import AppDescriptor, DiscoveryResult, FoundPath, Icon, RunMode
from appsweep.overrides import forced_paths
from appsweep.reducer import reduce_paths, seed_path, suppress_trash_only
from appsweep.scanner import LocationScanner, PathAccumulator
from appsweep.sizing import icon_for, size_on_disk
from appsweep.state import AppState

logger = logging.getLogger(__name__)

SizeFn = Callable[[str], tuple[int, int]]
IconFn = Callable[[str], Optional[Icon]]


class AppPathFinder:
    """
    Find every path belonging to one application.

    The pipeline runs in a fixed order: seed with the bundle root, scan all
    roots for directories, scan all roots for files, add containers and
    forced paths, reduce to a covering set, annotate sizes and icons, then
    publish to the state and call the completion callback once.
    """

    def __init__(
        self,
        app: AppDescriptor,
        state: Optional[AppState] = None,
        search_roots: Optional[list[str | Path]] = None,
        run_mode: RunMode = RunMode.INTERACTIVE,
        config: Optional[SweepConfig] = None,
        size_fn: SizeFn = size_on_disk,
        icon_fn: IconFn = icon_for,
        completion: Optional[Callable[[DiscoveryResult], None]] = None,
        containers_dir: Optional[Path] = None,
        group_dir: Optional[Path] = None,
        use_entitlements: bool = True,
    ):
        self.app = app
        self.state = state if state is not None else AppState()
        self.run_mode = run_mode
        self.config = config if config is not None else load_config()
        self.size_fn = size_fn
        self.icon_fn = icon_fn
        self.completion = completion
        self.containers_dir = containers_dir
        self.group_dir = group_dir
        self.use_entitlements = use_entitlements

        if search_roots is None:
            self.search_roots = get_search_roots(self.config.extra_search_roots)
        else:
            self.search_roots = get_search_roots(
                [str(root) for root in search_roots], include_defaults=False
            )

        self.accumulator = PathAccumulator()
        self._completed = False
        self._lock = threading.Lock()

    def find_paths(self) -> "Future[DiscoveryResult]":
        """Run the pipeline on a background thread and return its future."""
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="appsweep-finder")
        future = executor.submit(self.run)
        executor.shutdown(wait=False)
        return future

    def run(self) -> DiscoveryResult:
        """Run the whole pipeline synchronously."""
        started = time.monotonic()

        self._seed()
        self._scan()
        extras = self._extra_paths()

        collected = self.accumulator.snapshot() + [str(p) for p in extras]
        paths = suppress_trash_only(reduce_paths(collected))

        result = DiscoveryResult(app=self.app, items=[self._annotate(p) for p in paths])
        logger.debug(
            "Found %d paths for %s in %.2fs",
            len(result.items),
            self.app.bundle_identifier or self.app.app_name,
            time.monotonic() - started,
        )

        self._deliver(result)
        return result

    def _seed(self) -> None:
        seed = seed_path(self.app.path)
        if seed is not None:
            self.accumulator.add(seed)

    def _scan(self) -> None:
        scanner = LocationScanner(
            self.app,
            self.accumulator,
            rules=self.config.match_rules(),
            skip_rules=self.config.skip_rules(),
            extensions=self.config.supported_extensions,
            max_workers=self.config.max_workers,
        )
        try:
            scanner.collect_directories(self.search_roots)
            scanner.collect_files(self.search_roots)
        except Exception as e:
            logger.warning("Scanning failed for %s: %s", self.app.path, e)

    def _extra_paths(self) -> list[Path]:
        extras: list[Path] = []
        try:
            extras.extend(
                find_containers(
                    self.app,
                    containers_dir=self.containers_dir,
                    group_dir=self.group_dir,
                    use_entitlements=self.use_entitlements,
                )
            )
        except Exception as e:
            logger.warning("Container lookup failed for %s: %s", self.app.path, e)

        try:
            extras.extend(forced_paths(self.app, self.config.match_rules()))
        except Exception as e:
            logger.warning("Forced path lookup failed for %s: %s", self.app.path, e)
        return extras

    def _annotate(self, path: str) -> FoundPath:
        try:
            real, logical = self.size_fn(path)
        except Exception as e:
            logger.warning("Could not size %s: %s", path, e)
            real, logical = 0, 0
        try:
            icon = self.icon_fn(path)
        except Exception as e:
            logger.debug("No icon for %s: %s", path, e)
            icon = None
        return FoundPath(
            path=path,
            real_bytes=real,
            logical_bytes=logical,
            icon=icon,
            is_dir=Path(path).is_dir(),
        )

    def _deliver(self, result: DiscoveryResult) -> None:
        with self._lock:
            if self._completed:
                return
            self._completed = True

        self.state.publish(result, self.run_mode)
        if self.completion is not None:
            try:
                self.completion(result)
            except Exception as e:
                logger.warning("Completion callback failed: %s", e)


def discover(
    app: AppDescriptor,
    search_roots: Optional[list[str | Path]] = None,
    run_mode: RunMode = RunMode.INTERACTIVE,
    state: Optional[AppState] = None,
    **kwargs,
) -> "Future[DiscoveryResult]":
    """
    Start a discovery run in the background.

    Args:
        app: Target application
        search_roots: Roots to scan (default: standard library locations)
        run_mode: Where the result is published
        state: Result sink (a fresh AppState if omitted)
        **kwargs: Passed through to AppPathFinder

    Returns:
        Future resolving to the DiscoveryResult
    """
    finder = AppPathFinder(app, state=state, search_roots=search_roots, run_mode=run_mode, **kwargs)
    return finder.find_paths()
