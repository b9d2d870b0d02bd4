"""Configuration loading and defaults."""

import json
from pathlib import Path

from elevation_profile.models import ChartGeometry

CONFIG_DIR = Path.home() / ".config" / "elevation-profile"
CONFIG_PATH = CONFIG_DIR / "elevation-profile.json"
LOCAL_CONFIG_PATH = Path("elevation-profile.json")

DEFAULTS = {
    "chart_width": 100.0,
    "chart_height": 100.0,
    "chart_label_band": 25.0,
    "map_target": "map",
    "fetch_timeout": None,  # seconds; None waits for as long as the fetch takes
    "user_agent": "elevation-profile",
}


def load_config() -> dict:
    """Load configuration from config files.

    Merges config from global and local files:
    1. ~/.config/elevation-profile/elevation-profile.json (global, loaded first)
    2. ./elevation-profile.json (local, overrides global)

    Returns:
        Dict with merged config values, empty dict if no files exist.
    """
    config = {}
    for config_path in [CONFIG_PATH, LOCAL_CONFIG_PATH]:
        if config_path.exists():
            try:
                with config_path.open() as f:
                    config.update(json.load(f))
            except (json.JSONDecodeError, OSError):
                continue
    return config


def get_setting(key: str, config: dict | None = None):
    """Look up a setting, falling back to DEFAULTS."""
    if config is None:
        config = load_config()
    return config.get(key, DEFAULTS[key])


def chart_geometry_from_config(config: dict | None = None) -> ChartGeometry:
    if config is None:
        config = load_config()
    return ChartGeometry(
        width=float(get_setting("chart_width", config)),
        height=float(get_setting("chart_height", config)),
        label_band=float(get_setting("chart_label_band", config)),
    )
