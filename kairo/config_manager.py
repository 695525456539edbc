"""Configuration manager for Kairo using TOML files.

Settings live in the ``[analyzer]`` table of ``~/.kairo/config.toml``::

    [analyzer]
    progress_log_interval = 100
    log_level = "INFO"

``KAIRO_LOG_LEVEL`` in the environment overrides ``log_level``.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict

import toml

from .config import BASE_DIR, CONFIG_FILE, DEFAULT_LOG_LEVEL, DEFAULT_PROGRESS_LOG_INTERVAL

logger = logging.getLogger(__name__)

DEFAULT_ANALYZER_CONFIG: Dict[str, Any] = {
    "progress_log_interval": DEFAULT_PROGRESS_LOG_INTERVAL,
    "log_level": DEFAULT_LOG_LEVEL,
}


def load_full_config() -> Dict[str, Any]:
    """Load the entire TOML config (all sections)."""
    if not CONFIG_FILE.exists():
        return {}
    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            return toml.load(f)
    except (OSError, toml.TomlDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", CONFIG_FILE, exc)
        return {}


def load_config() -> Dict[str, Any]:
    """Load analyzer settings from the ``[analyzer]`` table.

    Returns:
        Settings dictionary. Keys missing from the file fall back to
        :data:`DEFAULT_ANALYZER_CONFIG`.
    """
    merged = DEFAULT_ANALYZER_CONFIG.copy()
    section = load_full_config().get("analyzer", {})
    if isinstance(section, dict):
        merged.update(section)
    env_level = os.environ.get("KAIRO_LOG_LEVEL")
    if env_level:
        merged["log_level"] = env_level
    merged["log_level"] = str(merged["log_level"]).upper()
    try:
        interval = int(merged["progress_log_interval"])
    except (TypeError, ValueError):
        logger.warning(
            "Invalid progress_log_interval %r in %s; using %d",
            merged["progress_log_interval"],
            CONFIG_FILE,
            DEFAULT_PROGRESS_LOG_INTERVAL,
        )
        interval = DEFAULT_PROGRESS_LOG_INTERVAL
    merged["progress_log_interval"] = max(interval, 1)
    return merged


def save_config(progress_log_interval: int, log_level: str = DEFAULT_LOG_LEVEL) -> bool:
    """Write analyzer settings, preserving other sections of the file.

    Returns:
        True if saved successfully, False otherwise
    """
    config = load_full_config()
    config["analyzer"] = {
        "progress_log_interval": progress_log_interval,
        "log_level": log_level.upper(),
    }
    BASE_DIR.mkdir(parents=True, exist_ok=True)
    try:
        with open(CONFIG_FILE, "w", encoding="utf-8") as f:
            toml.dump(config, f)
        return True
    except OSError as exc:
        logger.warning("Could not write config %s: %s", CONFIG_FILE, exc)
        return False
