"""Tests for container resolution."""

import plistlib
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from appsweep.containers import (
    entitlement_group_containers,
    find_containers,
    group_container_for,
    read_bundle_identifier,
    sandbox_containers_for,
)
from appsweep.models import AppDescriptor

OWN_UUID = "2792352D-95FE-43AE-947D-FF4BF31DE4E6"
OTHER_UUID = "0A1B2C3D-4E5F-6071-8293-A4B5C6D7E8F9"


def write_plist(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        plistlib.dump(data, f)


@pytest.fixture
def bundle(tmp_path):
    bundle = tmp_path / "Applications" / "Bar.app"
    write_plist(bundle / "Contents" / "Info.plist", {"CFBundleIdentifier": "com.foo.bar"})
    return bundle


@pytest.fixture
def containers_dir(tmp_path):
    containers = tmp_path / "Containers"
    metadata = ".com.apple.containermanagerd.metadata.plist"
    write_plist(containers / OWN_UUID / metadata, {"MCMMetadataIdentifier": "com.foo.bar"})
    write_plist(containers / OTHER_UUID / metadata, {"MCMMetadataIdentifier": "com.other.app"})
    # Named containers are found by the scanner, not here
    write_plist(containers / "com.foo.bar" / metadata, {"MCMMetadataIdentifier": "com.foo.bar"})
    return containers


@pytest.fixture
def group_dir(tmp_path):
    group = tmp_path / "Group Containers"
    (group / "com.foo.bar").mkdir(parents=True)
    (group / "group.com.foo.shared").mkdir()
    return group


class TestReadBundleIdentifier:
    def test_reads_identifier(self, bundle):
        assert read_bundle_identifier(bundle) == "com.foo.bar"

    def test_missing_plist(self, tmp_path):
        assert read_bundle_identifier(tmp_path / "None.app") is None

    def test_corrupt_plist(self, tmp_path):
        bundle = tmp_path / "Bad.app"
        (bundle / "Contents").mkdir(parents=True)
        (bundle / "Contents" / "Info.plist").write_bytes(b"\x00garbage")
        assert read_bundle_identifier(bundle) is None

    def test_missing_key(self, tmp_path):
        bundle = tmp_path / "NoId.app"
        write_plist(bundle / "Contents" / "Info.plist", {"CFBundleName": "NoId"})
        assert read_bundle_identifier(bundle) is None


class TestGroupContainerFor:
    def test_existing_group(self, group_dir):
        assert group_container_for("com.foo.bar", group_dir) == group_dir / "com.foo.bar"

    def test_missing_group(self, group_dir):
        assert group_container_for("com.nothing.here", group_dir) is None


class TestSandboxContainersFor:
    def test_matches_owner(self, containers_dir):
        found = sandbox_containers_for("com.foo.bar", containers_dir)
        assert found == [containers_dir / OWN_UUID]

    def test_no_match(self, containers_dir):
        assert sandbox_containers_for("com.nobody", containers_dir) == []

    def test_missing_directory(self, tmp_path):
        assert sandbox_containers_for("com.foo.bar", tmp_path / "missing") == []

    def test_uuid_without_metadata(self, tmp_path):
        containers = tmp_path / "Containers"
        (containers / OWN_UUID).mkdir(parents=True)
        assert sandbox_containers_for("com.foo.bar", containers) == []


class TestEntitlementGroupContainers:
    def test_reads_application_groups(self, bundle, group_dir):
        output = plistlib.dumps(
            {
                "com.apple.security.application-groups": [
                    "group.com.foo.shared",
                    "group.com.foo.missing",
                ]
            }
        )
        completed = MagicMock(returncode=0, stdout=output)
        with patch("appsweep.containers.subprocess.run", return_value=completed):
            found = entitlement_group_containers(bundle, group_dir)

        assert found == [group_dir / "group.com.foo.shared"]

    def test_codesign_missing(self, bundle, group_dir):
        with patch("appsweep.containers.subprocess.run", side_effect=FileNotFoundError()):
            assert entitlement_group_containers(bundle, group_dir) == []

    def test_codesign_timeout(self, bundle, group_dir):
        error = subprocess.TimeoutExpired(cmd="codesign", timeout=10)
        with patch("appsweep.containers.subprocess.run", side_effect=error):
            assert entitlement_group_containers(bundle, group_dir) == []

    def test_unsigned_bundle(self, bundle, group_dir):
        completed = MagicMock(returncode=1, stdout=b"")
        with patch("appsweep.containers.subprocess.run", return_value=completed):
            assert entitlement_group_containers(bundle, group_dir) == []


class TestFindContainers:
    def test_combines_group_and_sandbox(self, bundle, containers_dir, group_dir):
        app = AppDescriptor(path=bundle, bundle_identifier="com.foo.bar", app_name="Bar")
        found = find_containers(
            app, containers_dir=containers_dir, group_dir=group_dir, use_entitlements=False
        )
        assert found == [group_dir / "com.foo.bar", containers_dir / OWN_UUID]

    def test_group_lookup_uses_bundle_metadata(self, bundle, containers_dir, group_dir):
        """The bundle's own identifier is used even if the descriptor disagrees."""
        app = AppDescriptor(path=bundle, bundle_identifier="com.stale.id", app_name="Bar")
        found = find_containers(
            app, containers_dir=containers_dir, group_dir=group_dir, use_entitlements=False
        )
        assert found == [group_dir / "com.foo.bar"]

    def test_bundle_without_metadata(self, tmp_path, containers_dir, group_dir):
        app = AppDescriptor(
            path=tmp_path / "Ghost.app", bundle_identifier="com.foo.bar", app_name="Ghost"
        )
        found = find_containers(
            app, containers_dir=containers_dir, group_dir=group_dir, use_entitlements=False
        )
        assert found == [containers_dir / OWN_UUID]

    def test_entitlement_groups_added_once(self, bundle, containers_dir, group_dir):
        app = AppDescriptor(path=bundle, bundle_identifier="com.foo.bar", app_name="Bar")
        with patch(
            "appsweep.containers.entitlement_group_containers",
            return_value=[group_dir / "com.foo.bar", group_dir / "group.com.foo.shared"],
        ):
            found = find_containers(app, containers_dir=containers_dir, group_dir=group_dir)

        assert found == [
            group_dir / "com.foo.bar",
            group_dir / "group.com.foo.shared",
            containers_dir / OWN_UUID,
        ]
