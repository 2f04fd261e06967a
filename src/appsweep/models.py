"""Data models for appsweep."""

import plistlib
import re
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

_NON_ALNUM = re.compile(r"[^0-9a-z]")


def normalize_name(value: str) -> str:
    """Lowercase a name and strip everything that is not a letter or digit."""
    return _NON_ALNUM.sub("", value.lower())


class RunMode(str, Enum):
    """Where a discovery result is delivered."""

    INTERACTIVE = "interactive"  # Becomes the selected app and selected paths
    BACKGROUND = "background"  # Computed only, nothing published
    BULK_APPEND = "bulk_append"  # Appended to the app store (reverse search)

    @classmethod
    def from_flags(cls, background_run: bool = False, reverse_addon: bool = False) -> "RunMode":
        """Resolve the legacy boolean flags into a single mode."""
        if reverse_addon:
            return cls.BULK_APPEND
        if background_run:
            return cls.BACKGROUND
        return cls.INTERACTIVE


class IconKind(str, Enum):
    """Coarse icon classification for a discovered path."""

    APP = "app"
    FOLDER = "folder"
    CONTAINER = "container"
    PLIST = "plist"
    SYMLINK = "symlink"
    FILE = "file"


class Icon(BaseModel):
    """Icon handle for a discovered path."""

    model_config = ConfigDict(frozen=True)

    kind: IconKind = Field(..., description="Icon classification")

    @property
    def glyph(self) -> str:
        """Single-character glyph for terminal display."""
        glyphs = {
            IconKind.APP: "◆",
            IconKind.FOLDER: "▸",
            IconKind.CONTAINER: "▣",
            IconKind.PLIST: "≡",
            IconKind.SYMLINK: "↪",
            IconKind.FILE: "·",
        }
        return glyphs[self.kind]


class AppDescriptor(BaseModel):
    """Read-only view of the application a discovery run targets."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(..., description="Bundle root path (e.g. /Applications/Foo.app)")
    bundle_identifier: str = Field(..., description="Reverse-DNS bundle identifier")
    app_name: str = Field(..., description="Display name")
    web_app: bool = Field(False, description="Whether the bundle is a web app wrapper")

    @property
    def bundle_identifier_key(self) -> str:
        """Normalized bundle identifier (com.Foo.Bar -> comfoobar)."""
        return normalize_name(self.bundle_identifier)

    @property
    def bundle_suffix(self) -> str:
        """Last two bundle identifier components joined and normalized."""
        components = [c.lower() for c in self.bundle_identifier.split(".") if c != "-"]
        return normalize_name("".join(components[-2:]))

    @property
    def name_key(self) -> str:
        """Normalized display name."""
        return normalize_name(self.app_name)

    @property
    def path_name_key(self) -> str:
        """Normalized bundle directory name without the .app suffix."""
        return normalize_name(self.path.name.replace(".app", ""))

    @classmethod
    def from_bundle(
        cls,
        bundle_path: Path,
        bundle_identifier: Optional[str] = None,
        app_name: Optional[str] = None,
        web_app: bool = False,
    ) -> "AppDescriptor":
        """
        Build a descriptor from a bundle's Info.plist.

        Explicit arguments win over values read from the bundle. Unreadable
        or missing metadata falls back to the bundle directory name.

        Args:
            bundle_path: Path to the .app bundle
            bundle_identifier: Override for CFBundleIdentifier
            app_name: Override for the display name
            web_app: Whether the bundle is a web app wrapper

        Returns:
            AppDescriptor for the bundle
        """
        info: dict = {}
        info_plist = bundle_path / "Contents" / "Info.plist"
        try:
            with open(info_plist, "rb") as f:
                info = plistlib.load(f)
        except (OSError, plistlib.InvalidFileException, ValueError):
            info = {}

        return cls(
            path=bundle_path,
            bundle_identifier=bundle_identifier or info.get("CFBundleIdentifier", ""),
            app_name=app_name
            or info.get("CFBundleDisplayName")
            or info.get("CFBundleName")
            or bundle_path.name.replace(".app", ""),
            web_app=web_app,
        )


class MatchRule(BaseModel):
    """Per-app override rule keyed by a normalized bundle identifier substring."""

    model_config = ConfigDict(frozen=True)

    bundle_id: str = Field(..., description="Substring of the normalized bundle identifier")
    include: list[str] = Field(default_factory=list, description="Keywords that force a match")
    exclude: list[str] = Field(default_factory=list, description="Keywords that veto a match")
    include_force: Optional[list[str]] = Field(
        None, description="Absolute paths always included when they exist"
    )

    def applies_to(self, bundle_key: str) -> bool:
        """Whether this rule applies to an app with the given normalized bundle id."""
        return self.bundle_id in bundle_key


class SkipRule(BaseModel):
    """Reserved name prefix with an allow-list of exempt prefixes."""

    model_config = ConfigDict(frozen=True)

    skip_prefix: str = Field(..., description="Normalized name prefix that triggers a skip")
    allow_prefixes: list[str] = Field(
        default_factory=list, description="Normalized prefixes exempt from the skip"
    )

    def blocks(self, name: str) -> bool:
        """Whether a normalized name is excluded by this rule."""
        if not name.startswith(self.skip_prefix):
            return False
        return not any(name.startswith(prefix) for prefix in self.allow_prefixes)


class FoundPath(BaseModel):
    """A discovered path annotated with its size and icon."""

    path: str = Field(..., description="Standardized path")
    real_bytes: int = Field(0, description="Allocated size on disk")
    logical_bytes: int = Field(0, description="Logical (apparent) size")
    icon: Optional[Icon] = Field(None, description="Icon handle, if available")
    is_dir: bool = Field(False, description="Whether the path is a directory")

    @property
    def size_human(self) -> str:
        """Human-readable real size (decimal units like macOS)."""
        if self.real_bytes >= 1000**3:
            return f"{self.real_bytes / (1000**3):.1f} GB"
        elif self.real_bytes >= 1000**2:
            return f"{self.real_bytes / (1000**2):.1f} MB"
        elif self.real_bytes >= 1000:
            return f"{self.real_bytes / 1000:.1f} KB"
        else:
            return f"{self.real_bytes} B"


class DiscoveryResult(BaseModel):
    """Minimal covering set of paths belonging to one application."""

    app: AppDescriptor
    items: list[FoundPath] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=datetime.now)

    @property
    def paths(self) -> list[str]:
        """Discovered paths in result order."""
        return [item.path for item in self.items]

    @property
    def total_real_bytes(self) -> int:
        """Total allocated size of all discovered paths."""
        return sum(item.real_bytes for item in self.items)

    @property
    def total_logical_bytes(self) -> int:
        """Total logical size of all discovered paths."""
        return sum(item.logical_bytes for item in self.items)

    @property
    def file_size(self) -> dict[str, int]:
        """Real size keyed by path."""
        return {item.path: item.real_bytes for item in self.items}

    @property
    def file_size_logical(self) -> dict[str, int]:
        """Logical size keyed by path."""
        return {item.path: item.logical_bytes for item in self.items}

    @property
    def file_icon(self) -> dict[str, Optional[Icon]]:
        """Icon keyed by path."""
        return {item.path: item.icon for item in self.items}
