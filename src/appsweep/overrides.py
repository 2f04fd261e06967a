"""Forced includes from per-app match rules."""

from pathlib import Path

from appsweep.locations import expand_path
from appsweep.models import AppDescriptor, MatchRule
from appsweep.rules import matching_rules


def forced_paths(app: AppDescriptor, rules: list[MatchRule] | None = None) -> list[Path]:
    """
    Get the forced-include paths of the rules applying to an app.

    Only paths that currently exist are returned.
    """
    found: list[Path] = []
    for rule in matching_rules(app.bundle_identifier_key, rules):
        for raw in rule.include_force or []:
            path = expand_path(raw)
            if path.exists() and path not in found:
                found.append(path)
    return found
