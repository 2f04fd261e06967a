"""User configuration for appsweep."""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from appsweep.locations import expand_path
from appsweep.models import MatchRule, SkipRule
from appsweep.rules import get_match_rules, get_skip_rules

logger = logging.getLogger(__name__)

CONFIG_DIR = expand_path("~/.appsweep")
CONFIG_FILE = CONFIG_DIR / "config.json"


class SweepConfig(BaseModel):
    """Settings layered over the built-in rule tables and search roots."""

    extra_search_roots: list[str] = Field(
        default_factory=list, description="Additional one-level search roots"
    )
    extra_match_rules: list[MatchRule] = Field(
        default_factory=list, description="Match rules appended to the built-in table"
    )
    extra_skip_rules: list[SkipRule] = Field(
        default_factory=list, description="Skip rules appended to the built-in table"
    )
    supported_extensions: Optional[list[str]] = Field(
        None,
        description="File extensions eligible for matching (None allows every regular file)",
    )
    max_workers: int = Field(8, ge=1, description="Parallel scan workers per phase")

    def match_rules(self) -> list[MatchRule]:
        """Built-in match rules followed by configured extras."""
        return get_match_rules() + list(self.extra_match_rules)

    def skip_rules(self) -> list[SkipRule]:
        """Built-in skip rules followed by configured extras."""
        return get_skip_rules() + list(self.extra_skip_rules)


def config_path() -> Path:
    """Location of the config file, honouring APPSWEEP_CONFIG."""
    override = os.environ.get("APPSWEEP_CONFIG")
    if override:
        return expand_path(override)
    return CONFIG_FILE


def load_config(path: Path | None = None) -> SweepConfig:
    """
    Load configuration from disk.

    A missing file yields defaults. An unreadable or invalid file is logged
    and also yields defaults.

    Args:
        path: Config file to read (default: config_path())

    Returns:
        SweepConfig
    """
    path = path or config_path()
    if not path.exists():
        return SweepConfig()

    try:
        with open(path) as f:
            data = json.load(f)
        return SweepConfig.model_validate(data)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Could not read config %s: %s", path, e)
    except ValidationError as e:
        logger.warning("Invalid config %s: %s", path, e.errors()[0].get("msg", e))
    return SweepConfig()


def save_config(config: SweepConfig, path: Path | None = None) -> bool:
    """Save configuration to disk."""
    path = path or config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(config.model_dump(mode="json", exclude_defaults=True), f, indent=2)
        return True
    except OSError as e:
        logger.warning("Could not write config %s: %s", path, e)
        return False
