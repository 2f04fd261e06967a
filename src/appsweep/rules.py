"""Per-app match rules and reserved-prefix skip rules for appsweep.

Keys and keywords are stored in normalized form (lowercase, letters and
digits only) so they compare directly against normalized candidate names.
"""

from appsweep.models import MatchRule, SkipRule

# =============================================================================
# MATCH RULES - app-specific include/exclude keywords and forced paths
# =============================================================================

MATCH_RULES: tuple[MatchRule, ...] = (
    MatchRule(
        bundle_id="comappledtxcode",
        include=["xcode", "simulator", "comappledt", "coresimulator", "ibsupport"],
        exclude=["xcodes", "xcodesapp", "robotsandpencils", "xcodecleaner"],
        include_force=[
            "~/Library/Developer",
            "~/Library/Caches/com.apple.dt.Xcode",
            "/Library/Developer/CoreSimulator",
        ],
    ),
    MatchRule(
        bundle_id="comgooglechrome",
        include=["google", "chrome"],
        exclude=["iterm", "monochrome", "chromefeaturestate", "googledrive", "keystone"],
    ),
    MatchRule(
        bundle_id="commicrosoftedgemac",
        include=["microsoftedge", "edgemac", "edgeupdater"],
        exclude=["vscode", "office", "oneauth", "rdc", "appcenter", "teams"],
    ),
    MatchRule(
        bundle_id="commicrosoftvscode",
        include=["vscode", "visualstudiocode", "code"],
        exclude=["vscodium", "xcode", "microsoftedge", "codeweavers", "qrcode", "unicode"],
        include_force=["~/.vscode"],
    ),
    MatchRule(
        bundle_id="uszoomxos",
        include=["zoom"],
        exclude=["zoomify", "zoomit", "ics"],
        include_force=["~/.zoomus"],
    ),
    MatchRule(
        bundle_id="comtinyspeckslackmacgap",
        include=["slack"],
        exclude=["slackware"],
    ),
    MatchRule(
        bundle_id="combravebrowser",
        include=["brave"],
        exclude=["bravesearch"],
    ),
    MatchRule(
        bundle_id="comspotifyclient",
        include=["spotify"],
        exclude=["spotifyimporter"],
    ),
    MatchRule(
        bundle_id="comlogioptionsplus",
        include=["logi", "logitech", "optionsplus"],
        exclude=["logic", "logisim", "logitune"],
        include_force=["/Library/Application Support/Logitech.localized"],
    ),
    MatchRule(
        bundle_id="comfacebookarchon",
        include=["messenger"],
        exclude=["whatsapp"],
    ),
    MatchRule(
        bundle_id="orgmozillafirefox",
        include=["firefox", "mozilla"],
        exclude=["thunderbird"],
    ),
    MatchRule(
        bundle_id="orgmozillathunderbird",
        include=["thunderbird"],
        exclude=["firefox"],
    ),
    MatchRule(
        bundle_id="comdockerdocker",
        include=["docker"],
        exclude=["dockerdesktopextensions"],
        include_force=["~/.docker"],
    ),
)

# =============================================================================
# SKIP RULES - generic system prefixes that must not match broadly
# =============================================================================

SKIP_RULES: tuple[SkipRule, ...] = (
    SkipRule(
        skip_prefix="comapple",
        allow_prefixes=[
            "comappledt",
            "comapplesafari",
            "comappleconfigurator",
            "comapplelogic",
            "comapplefinalcut",
            "comapplemotionapp",
            "comapplecompressor",
            "comapplemainstage",
            "comappleiwork",
            "comapplegarageband",
            "comappleimovie",
        ],
    ),
    SkipRule(skip_prefix="apple", allow_prefixes=["applemusic"]),
    SkipRule(skip_prefix="temporaryitems", allow_prefixes=[]),
    SkipRule(skip_prefix="dsstore", allow_prefixes=[]),
    SkipRule(skip_prefix="localizedstrings", allow_prefixes=[]),
)


def get_match_rules() -> list[MatchRule]:
    """Get all match rules."""
    return list(MATCH_RULES)


def get_skip_rules() -> list[SkipRule]:
    """Get all skip rules."""
    return list(SKIP_RULES)


def matching_rules(bundle_key: str, rules: list[MatchRule] | None = None) -> list[MatchRule]:
    """Get the rules that apply to a normalized bundle identifier."""
    if rules is None:
        rules = get_match_rules()
    return [rule for rule in rules if rule.applies_to(bundle_key)]
