"""Application state that receives discovery results."""

import threading
from typing import Optional

from appsweep.models import DiscoveryResult, RunMode


class AppState:
    """Sink for discovery results: the current selection and the app store."""

    def __init__(self):
        self._lock = threading.Lock()
        self.app_info: Optional[DiscoveryResult] = None
        self.selected_items: set[str] = set()
        self.app_info_store: list[DiscoveryResult] = []

    def publish(self, result: DiscoveryResult, mode: RunMode) -> None:
        """Route a finished result according to the run mode."""
        with self._lock:
            if mode == RunMode.INTERACTIVE:
                self.app_info = result
                self.selected_items = set(result.paths)
            elif mode == RunMode.BULK_APPEND:
                self.app_info_store.append(result)
