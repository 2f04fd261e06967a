"""Tests for forced includes."""

from pathlib import Path

from appsweep.models import AppDescriptor, MatchRule
from appsweep.overrides import forced_paths
from appsweep.rules import MATCH_RULES, SKIP_RULES, get_match_rules, matching_rules


def make_app(bundle_identifier: str) -> AppDescriptor:
    return AppDescriptor(
        path=Path("/Applications/App.app"), bundle_identifier=bundle_identifier, app_name="App"
    )


class TestForcedPaths:
    def test_existing_paths_included(self, tmp_path):
        present = tmp_path / "present"
        present.mkdir()
        rules = [
            MatchRule(
                bundle_id="comfoobar",
                include_force=[str(present), str(tmp_path / "absent")],
            )
        ]
        assert forced_paths(make_app("com.foo.bar"), rules) == [present]

    def test_rule_for_other_app_ignored(self, tmp_path):
        rules = [MatchRule(bundle_id="comother", include_force=[str(tmp_path)])]
        assert forced_paths(make_app("com.foo.bar"), rules) == []

    def test_rule_without_forced_paths(self):
        rules = [MatchRule(bundle_id="comfoobar", include=["bar"])]
        assert forced_paths(make_app("com.foo.bar"), rules) == []

    def test_duplicates_collapsed(self, tmp_path):
        rules = [
            MatchRule(bundle_id="comfoo", include_force=[str(tmp_path)]),
            MatchRule(bundle_id="foobar", include_force=[str(tmp_path)]),
        ]
        assert forced_paths(make_app("com.foo.bar"), rules) == [tmp_path]

    def test_tilde_expanded(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / ".barrc").write_text("x")
        rules = [MatchRule(bundle_id="comfoobar", include_force=["~/.barrc"])]
        assert forced_paths(make_app("com.foo.bar"), rules) == [tmp_path / ".barrc"]


class TestRuleTables:
    def test_keys_are_normalized(self):
        for rule in MATCH_RULES:
            assert rule.bundle_id == rule.bundle_id.lower()
            assert rule.bundle_id.isalnum()
            for keyword in rule.include + rule.exclude:
                assert keyword.isalnum() and keyword == keyword.lower()

    def test_skip_prefixes_are_normalized(self):
        for rule in SKIP_RULES:
            assert rule.skip_prefix.isalnum()
            for prefix in rule.allow_prefixes:
                assert prefix.startswith(rule.skip_prefix)

    def test_matching_rules_for_xcode(self):
        rules = matching_rules("comappledtxcode")
        assert [r.bundle_id for r in rules] == ["comappledtxcode"]

    def test_get_match_rules_returns_copy(self):
        rules = get_match_rules()
        rules.clear()
        assert len(get_match_rules()) == len(MATCH_RULES)
