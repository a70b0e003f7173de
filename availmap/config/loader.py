"""
Configuration loading for availmap.

Handles loading configuration from ~/.availmap/config.json with sensible defaults.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple

logger = logging.getLogger("availmap.config")

DEFAULT_CONFIG: Dict[str, Any] = {
    "database_path": "~/.availmap/schedule.db",

    # The two months users can pick from
    "window": {
        "year": 2025,
        "months": [7, 8],
    },

    # Shared document store
    "store": {
        "poll_interval": 2.0,
        "submit_timeout": 10.0,
    },

    # Display options
    "display": {
        "color_enabled": True,
        "weekday_labels": "en",
    },
}

_SECTIONS = ("window", "store", "display")


def get_config_path() -> Path:
    """Get path to config file."""
    return Path.home() / ".availmap" / "config.json"


def get_database_path(config: Dict[str, Any]) -> Path:
    """Get expanded database path from config."""
    return Path(config["database_path"]).expanduser()


def get_window(config: Dict[str, Any]) -> List[Tuple[int, int]]:
    """Return the configured (year, month) pairs in display order."""
    window = config.get("window") or DEFAULT_CONFIG["window"]
    year = int(window["year"])
    return [(year, int(month)) for month in window["months"]]


def load_config() -> Dict[str, Any]:
    """
    Load configuration from file, merging with defaults.

    Returns a complete configuration with all default values filled in.
    User config overrides defaults where specified.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    config_path = get_config_path()

    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                user_config = json.load(f)

            # Shallow merge nested sections
            for key in _SECTIONS:
                if key in user_config and isinstance(user_config[key], dict):
                    config[key].update(user_config[key])

            # Direct override for simple values
            if 'database_path' in user_config:
                config['database_path'] = user_config['database_path']

        except json.JSONDecodeError as e:
            logger.warning("Could not parse config file %s: %s", config_path, e)
        except OSError as e:
            logger.warning("Error loading config %s: %s", config_path, e)

    return config


def save_config(config: Dict[str, Any]) -> None:
    """Save configuration to file."""
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(config, f, indent=2)
