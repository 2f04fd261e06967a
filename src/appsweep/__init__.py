"""appsweep - find every file a macOS application leaves behind."""

from appsweep.finder import AppPathFinder, discover
from appsweep.models import AppDescriptor, DiscoveryResult, RunMode
from appsweep.state import AppState

__version__ = "0.1.0"

__all__ = [
    "AppDescriptor",
    "AppPathFinder",
    "AppState",
    "DiscoveryResult",
    "RunMode",
    "__version__",
    "discover",
]
