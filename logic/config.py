"""
Configuration management module.

This module provides utilities for loading, saving, and managing the application
configuration stored in config.json: map geometry, zoom bounds, auth rules,
backend timeout and the treasure seed list.

Infrastructure settings (database URL, session secret) come from the
environment instead; see main.py and database.py.
"""

import json
import os
from typing import Any, Dict

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
CONFIG_PATH = os.getenv("TREASURE_MAP_CONFIG", os.path.join(BASE_DIR, "config.json"))


def load_config(path: str = None) -> Dict[str, Any]:
    """Load configuration from config.json.

    Args:
        path: Optional override of the config file location.

    Returns:
        Configuration dictionary with all required fields ensured.
    """
    try:
        with open(path or CONFIG_PATH, "r", encoding="utf-8") as f:
            config = json.load(f)
    except FileNotFoundError:
        config = get_default_config()

    # Ensure all required fields are present
    config = ensure_config_fields(config)
    return config


def save_config(config: Dict[str, Any], path: str = None):
    """Save configuration to config.json.

    Args:
        config: Configuration dictionary to save.
        path: Optional override of the config file location.
    """
    with open(path or CONFIG_PATH, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2, ensure_ascii=False)


def get_default_config() -> Dict[str, Any]:
    """Get default configuration structure.

    Returns:
        Default configuration dictionary.
    """
    return {
        "map": {
            "image": "/static/map.webp",
            "reference_width": 900,
            "reference_height": 900,
            "zoom": {"min": 0.5, "max": 3.0, "step": 1.2, "initial": 1.0},
        },
        "auth": {"min_password_length": 6},
        "backend": {"timeout_seconds": 10},
        "treasures": [],
    }


def ensure_config_fields(config: Dict[str, Any]) -> Dict[str, Any]:
    """Ensure all required fields are present in the configuration.

    Args:
        config: Configuration dictionary to update.

    Returns:
        Updated configuration dictionary.
    """
    defaults = get_default_config()

    map_config = config.setdefault("map", {})
    for key, value in defaults["map"].items():
        if key != "zoom":
            map_config.setdefault(key, value)

    zoom = map_config.setdefault("zoom", {})
    for key, value in defaults["map"]["zoom"].items():
        zoom.setdefault(key, value)

    config.setdefault("auth", {}).setdefault("min_password_length", 6)
    config.setdefault("backend", {}).setdefault("timeout_seconds", 10)
    config.setdefault("treasures", [])

    for treasure in config["treasures"]:
        ensure_treasure_fields(treasure)

    return config


def ensure_treasure_fields(treasure: Dict[str, Any]):
    """Ensure a seed treasure has all optional fields with appropriate defaults.

    Args:
        treasure: Treasure dictionary to update.
    """
    defaults = {
        "description": "",
        "picture_url": None,
    }

    for key, default in defaults.items():
        treasure.setdefault(key, default)
