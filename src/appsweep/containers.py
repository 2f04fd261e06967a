"""Sandbox container and app-group container resolution."""

import logging
import plistlib
import re
import subprocess
from pathlib import Path

from appsweep.locations import (
    CONTAINER_METADATA_FILE,
    CONTAINERS_DIR,
    GROUP_CONTAINERS_DIR,
    expand_path,
)
from appsweep.models import AppDescriptor

logger = logging.getLogger(__name__)

UUID_PATTERN = re.compile(
    r"^[0-9A-F]{8}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{12}$", re.IGNORECASE
)
APP_GROUPS_ENTITLEMENT = "com.apple.security.application-groups"


def _read_plist(path: Path) -> dict | None:
    try:
        with open(path, "rb") as f:
            data = plistlib.load(f)
    except FileNotFoundError:
        return None
    except (OSError, plistlib.InvalidFileException, ValueError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return None
    return data if isinstance(data, dict) else None


def read_bundle_identifier(bundle_path: Path) -> str | None:
    """Read CFBundleIdentifier from a bundle's Info.plist."""
    info = _read_plist(bundle_path / "Contents" / "Info.plist")
    if not info:
        return None
    identifier = info.get("CFBundleIdentifier")
    return identifier if isinstance(identifier, str) and identifier else None


def group_container_for(identifier: str, group_dir: Path | None = None) -> Path | None:
    """Get the app-group container registered under an identifier, if any."""
    group_dir = group_dir or expand_path(GROUP_CONTAINERS_DIR)
    candidate = group_dir / identifier
    try:
        if candidate.is_dir():
            return candidate
    except (PermissionError, OSError):
        pass
    return None


def entitlement_group_containers(bundle_path: Path, group_dir: Path | None = None) -> list[Path]:
    """
    Find group containers for the app groups a bundle is entitled to.

    Reads the code signature entitlements via codesign. Unsigned bundles,
    a missing codesign binary or a timeout all yield an empty list.

    Args:
        bundle_path: Path to the .app bundle
        group_dir: Group Containers directory (default: ~/Library/Group Containers)

    Returns:
        Existing group container directories
    """
    try:
        completed = subprocess.run(
            ["/usr/bin/codesign", "-d", "--entitlements", ":-", str(bundle_path)],
            capture_output=True,
            timeout=10,
            shell=False,
            check=False,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        logger.debug("codesign unavailable for %s: %s", bundle_path, e)
        return []

    if completed.returncode != 0 or not completed.stdout.strip():
        return []

    try:
        entitlements = plistlib.loads(completed.stdout)
    except (plistlib.InvalidFileException, ValueError):
        return []

    groups = entitlements.get(APP_GROUPS_ENTITLEMENT, []) if isinstance(entitlements, dict) else []
    containers = []
    for group in groups:
        if not isinstance(group, str):
            continue
        container = group_container_for(group, group_dir)
        if container is not None:
            containers.append(container)
    return containers


def sandbox_containers_for(identifier: str, containers_dir: Path | None = None) -> list[Path]:
    """
    Find UUID-named sandbox containers owned by a bundle identifier.

    Args:
        identifier: Owning bundle identifier to look for
        containers_dir: Containers directory (default: ~/Library/Containers)

    Returns:
        Matching container directories
    """
    containers_dir = containers_dir or expand_path(CONTAINERS_DIR)
    try:
        entries = sorted(p for p in containers_dir.iterdir() if not p.name.startswith("."))
    except FileNotFoundError:
        return []
    except (PermissionError, OSError) as e:
        logger.warning("Could not access containers directory %s: %s", containers_dir, e)
        return []

    found = []
    for directory in entries:
        if not UUID_PATTERN.match(directory.name):
            continue
        metadata = _read_plist(directory / CONTAINER_METADATA_FILE)
        if metadata and metadata.get("MCMMetadataIdentifier") == identifier:
            found.append(directory)
    return found


def find_containers(
    app: AppDescriptor,
    containers_dir: Path | None = None,
    group_dir: Path | None = None,
    use_entitlements: bool = True,
) -> list[Path]:
    """
    Resolve every container directory associated with an app.

    The bundle identifier used for the group container lookup is read from
    the bundle itself rather than taken from the descriptor.

    Args:
        app: Target application
        containers_dir: Sandbox containers directory override
        group_dir: Group containers directory override
        use_entitlements: Also consult code signature app groups

    Returns:
        Container paths (possibly empty)
    """
    containers: list[Path] = []

    identifier = read_bundle_identifier(app.path)
    if identifier is None:
        logger.debug("No bundle identifier found for %s", app.path)
    else:
        group = group_container_for(identifier, group_dir)
        if group is not None:
            containers.append(group)
        else:
            logger.debug("No group container registered for %s", identifier)

    if use_entitlements:
        for group in entitlement_group_containers(app.path, group_dir):
            if group not in containers:
                containers.append(group)

    if app.bundle_identifier:
        containers.extend(sandbox_containers_for(app.bundle_identifier, containers_dir))

    return containers
