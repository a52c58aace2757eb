"""
YAML → exercise muscle-group table and user settings.

Loads the bundled ``muscle_groups.yaml`` and optionally merges user overrides
from ``~/.lift-analytics/muscle_groups.yaml``.

Usage:
    from lift_analytics.config_loader import load_config, muscle_group_lookup
    cfg = load_config()
    muscle_group_of = muscle_group_lookup(cfg.get("exercises", {}))

If the user override file exists but cannot be parsed, a warning is emitted
and the file is ignored.
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path
from typing import Any, Callable

import yaml

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML mapping; raises on unreadable or malformed files."""
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping")
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path:
    """Return the path to the bundled muscle_groups.yaml (shipped next to this module)."""
    return Path(__file__).parent / "muscle_groups.yaml"


def get_user_yaml_path() -> Path | None:
    """Return ~/.lift-analytics/muscle_groups.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".lift-analytics" / "muscle_groups.yaml"
    return p if p.exists() else None


def load_config(user_path: Path | None = None) -> dict[str, Any]:
    """
    Load and merge configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/lift_analytics/muscle_groups.yaml
    2. User override (``user_path`` or ~/.lift-analytics/muscle_groups.yaml)

    Returns:
        Merged dict with "settings" and "exercises" sections
    """
    config = _load_yaml_file(get_bundled_yaml_path())

    user = user_path if user_path is not None else get_user_yaml_path()
    if user is not None and user.exists():
        try:
            config = _deep_merge(config, _load_yaml_file(user))
        except (OSError, ValueError, yaml.YAMLError) as e:
            warnings.warn(f"Ignoring user config {user}: {e}", stacklevel=2)

    return config


def muscle_group_lookup(exercises: dict[str, Any]) -> Callable[[str], tuple[str, ...]]:
    """
    Build the ``muscle_group_of`` function passed to the aggregator.

    Each exercise entry has a ``primary`` muscle and an optional
    ``secondary`` list.  Unknown exercises map to ("other",).

    Args:
        exercises: The "exercises" section of the config

    Returns:
        exercise_id -> (primary, *secondary)
    """
    table: dict[str, tuple[str, ...]] = {}
    for exercise_id, entry in exercises.items():
        if not isinstance(entry, dict) or not entry.get("primary"):
            continue
        muscles = [str(entry["primary"])]
        for m in entry.get("secondary") or []:
            if str(m) not in muscles:
                muscles.append(str(m))
        table[str(exercise_id)] = tuple(muscles)

    def muscle_group_of(exercise_id: str) -> tuple[str, ...]:
        return table.get(exercise_id, ("other",))

    return muscle_group_of


def default_period_id(config: dict[str, Any]) -> str | None:
    """Stored default period selector from the "settings" section."""
    settings = config.get("settings") or {}
    value = settings.get("default_period")
    return str(value) if value else None
