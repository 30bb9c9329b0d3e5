"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

import re

from spaceops.common.errors import ConfigError

CANONICAL_FIELDS = (
    "platform_property_name",
    "usage_date",
    "start_time",
    "end_time",
    "gross_amount",
    "net_amount",
    "guest_name",
)
SCORING_FACTORS = ("passengers", "walk_minutes", "nearby_companies")


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"Expected a mapping for {ctx}")
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_breakpoints(points, ctx: str) -> None:
    if not isinstance(points, list) or len(points) < 2:
        raise ConfigError(f"{ctx} must list at least two [x, y] breakpoints")
    previous_x = None
    for idx, point in enumerate(points):
        if not isinstance(point, list) or len(point) != 2:
            raise ConfigError(f"{ctx}[{idx}] must be an [x, y] pair")
        if previous_x is not None and point[0] <= previous_x:
            raise ConfigError(f"{ctx} breakpoints must be strictly increasing in x")
        previous_x = point[0]


def validate_ingest_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    required = {"field_patterns", "preview_limit", "fallback_encodings"}
    known = required | {"property_aliases"}
    _assert_required_keys(cfg, required, "ingest config")
    _assert_no_unknown_keys(cfg, known, "ingest config", allow_unknown)

    if not isinstance(cfg["field_patterns"], list) or not cfg["field_patterns"]:
        raise ConfigError("ingest.field_patterns must be a non-empty list")

    seen: list[str] = []
    for idx, entry in enumerate(cfg["field_patterns"]):
        _assert_required_keys(entry, {"field", "patterns"}, f"field_patterns[{idx}]")
        if entry["field"] not in CANONICAL_FIELDS:
            raise ConfigError(f"Unknown canonical field: {entry['field']}")
        if not entry["patterns"]:
            raise ConfigError(f"field_patterns[{idx}].patterns must not be empty")
        for pattern in entry["patterns"]:
            try:
                re.compile(pattern)
            except (re.error, TypeError) as exc:
                raise ConfigError(f"field_patterns[{idx}] has an invalid pattern {pattern!r}: {exc}") from exc
        seen.append(entry["field"])

    dupes = {name for name in seen if seen.count(name) > 1}
    if dupes:
        raise ConfigError(f"Duplicate field_patterns entries: {', '.join(sorted(dupes))}")

    for idx, alias in enumerate(cfg.get("property_aliases") or []):
        _assert_required_keys(alias, {"contains", "name"}, f"property_aliases[{idx}]")

    return cfg


def validate_location_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    required = {
        "reference_dataset",
        "neutral_score",
        "weights",
        "curves",
        "rank_bands",
        "floor_rank",
        "multiplier_spread",
        "companies",
    }
    _assert_required_keys(cfg, required, "location config")
    _assert_no_unknown_keys(cfg, required, "location config", allow_unknown)

    _assert_required_keys(cfg["weights"], set(SCORING_FACTORS), "weights")
    _assert_required_keys(cfg["curves"], set(SCORING_FACTORS), "curves")
    for factor in SCORING_FACTORS:
        _assert_breakpoints(cfg["curves"][factor], f"curves.{factor}")

    bands = cfg["rank_bands"]
    if not isinstance(bands, list) or not bands:
        raise ConfigError("rank_bands must be a non-empty list")
    thresholds = [band[0] for band in bands]
    if thresholds != sorted(thresholds, reverse=True):
        raise ConfigError("rank_bands must be ordered by descending threshold")

    _assert_required_keys(cfg["companies"], {"default", "variation", "districts"}, "companies")
    return cfg
