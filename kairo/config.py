"""Configuration paths and analyzer constants for Kairo."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(os.environ.get("KAIRO_HOME", str(Path.home() / ".kairo"))).expanduser()
CONFIG_FILE = BASE_DIR / "config.toml"

# Seeded into every run's object-name registry before any file is read.
STANDARD_OBJECTS = ("Account", "Contact", "Opportunity", "Case", "Lead")

# Apex built-ins never treated as class or sObject instantiations.
BUILTIN_APEX_TYPES = frozenset({
    "String", "Integer", "List", "Set", "Map", "Date",
    "Datetime", "Boolean", "Decimal", "Long", "Double",
})

DEFAULT_PROGRESS_LOG_INTERVAL = 100
DEFAULT_LOG_LEVEL = "WARNING"
