"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from spaceops.common.errors import ConfigError
from spaceops.common.fs import read_yaml
from spaceops.common.schema import validate_ingest_config, validate_location_config


@dataclass(frozen=True)
class ConfigBundle:
    ingest: dict
    location: dict
    config_dir: Path

    def resolve_path(self, value: str) -> Path:
        """Resolve a config-relative path against the repository root."""
        path = Path(value)
        if path.is_absolute():
            return path
        return self.config_dir.parent / path


def _deep_merge(base: Any, overlay: Any) -> Any:
    # Mappings merge key by key; lists and scalars in the overlay replace the base value.
    if not (isinstance(base, dict) and isinstance(overlay, dict)):
        return overlay
    return {**base, **{key: _deep_merge(base.get(key), value) for key, value in overlay.items()}}


def _read_config_yaml(path: Path) -> Any:
    try:
        return read_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed YAML in {path}: {exc}") from exc


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Missing config file: {path}")
    base = _read_config_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = _read_config_yaml(overlay_path)
    if overlay is None:
        return base
    if not isinstance(overlay, dict):
        raise ConfigError(f"Overlay config must be a mapping: {overlay_path}")
    return _deep_merge(base, overlay)


def load_all_configs(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> ConfigBundle:
    def overlay_for(name: str) -> Path | None:
        if overlay_config_dir is None:
            return None
        return overlay_config_dir / name

    ingest = validate_ingest_config(
        _load_yaml_with_overlay(config_dir / "ingest.yml", overlay_for("ingest.yml")),
        allow_unknown=allow_unknown,
    )
    location = validate_location_config(
        _load_yaml_with_overlay(config_dir / "location.yml", overlay_for("location.yml")),
        allow_unknown=allow_unknown,
    )
    return ConfigBundle(ingest=ingest, location=location, config_dir=config_dir)
