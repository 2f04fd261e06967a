"""Tests for path reduction."""

from pathlib import Path

from appsweep.reducer import (
    is_in_trash,
    reduce_paths,
    seed_path,
    standardize_path,
    suppress_trash_only,
)


class TestStandardizePath:
    def test_strips_trailing_slash(self):
        assert standardize_path("/Lib/App/") == "/Lib/App"

    def test_root_kept(self):
        assert standardize_path("/") == "/"

    def test_expands_tilde(self):
        assert standardize_path("~/x") == standardize_path(str(Path.home() / "x"))

    def test_resolves_symlinks(self, tmp_path):
        target = tmp_path / "target"
        target.mkdir()
        link = tmp_path / "link"
        link.symlink_to(target)
        assert standardize_path(link) == standardize_path(target)


class TestReducePaths:
    def test_collapses_descendants(self):
        paths = ["/Lib/App", "/Lib/App/Sub", "/Lib/App/Sub/Deep", "/Lib/AppOther"]
        assert reduce_paths(paths) == ["/Lib/App", "/Lib/AppOther"]

    def test_order_independent(self):
        paths = ["/Lib/AppOther", "/Lib/App/Sub/Deep", "/Lib/App", "/Lib/App/Sub"]
        assert reduce_paths(paths) == ["/Lib/App", "/Lib/AppOther"]

    def test_removes_duplicates(self):
        assert reduce_paths(["/Lib/App", "/Lib/App/", "/Lib/App"]) == ["/Lib/App"]

    def test_sibling_with_punctuation_between_parent_and_child(self):
        """'App.plist' sorts between 'App' and 'App/Sub' as plain strings."""
        paths = ["/Lib/App", "/Lib/App.plist", "/Lib/App Data", "/Lib/App/Sub"]
        assert reduce_paths(paths) == ["/Lib/App", "/Lib/App Data", "/Lib/App.plist"]

    def test_no_entry_contains_another(self):
        paths = [
            "/a/b",
            "/a/b/c",
            "/a/bc",
            "/a/b-c/d",
            "/a/b-c",
            "/x",
            "/x/y/z",
            "/a/b.c/d",
        ]
        reduced = reduce_paths(paths)
        for first in reduced:
            for second in reduced:
                if first != second:
                    assert not second.startswith(first + "/")

    def test_empty(self):
        assert reduce_paths([]) == []


class TestTrash:
    def test_is_in_trash(self):
        assert is_in_trash("/Users/me/.Trash/Bar.app")
        assert not is_in_trash("/Applications/Bar.app")
        assert not is_in_trash("/Users/me/.Trashy/Bar.app")

    def test_single_trash_entry_suppressed(self):
        assert suppress_trash_only(["/Users/me/.Trash/Bar.app"]) == []

    def test_trash_entry_with_others_kept(self):
        paths = ["/Users/me/.Trash/Bar.app", "/Users/me/Library/Caches/com.foo.bar"]
        assert suppress_trash_only(paths) == paths

    def test_single_regular_entry_kept(self):
        assert suppress_trash_only(["/Applications/Bar.app"]) == ["/Applications/Bar.app"]


class TestSeedPath:
    def test_regular_bundle(self):
        assert seed_path("/Applications/Bar.app") == Path("/Applications/Bar.app")

    def test_bundle_in_trash(self):
        assert seed_path("/Users/me/.Trash/Bar.app") is None

    def test_wrapped_bundle(self):
        wrapped = "/Applications/Game.app/Wrapper/Game.app"
        assert seed_path(wrapped) == Path("/Applications/Game.app")
