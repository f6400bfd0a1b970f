"""
Persistence for display settings.

Settings live in ``settings.json`` as a flat key/value object under the
``native_db_settings`` key. Loading merges stored values over the defaults
one field at a time, so a missing, unknown or invalid key never prevents the
rest from loading.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .models import DisplaySettings

logger = logging.getLogger("native-catalog")

SETTINGS_FILE = "settings.json"
SETTINGS_KEY = "native_db_settings"


class SettingsStore:
    """Loads and commits ``DisplaySettings`` to local storage.

    Args:
        data_dir: Directory holding ``settings.json``.
    """

    def __init__(self, data_dir: Path):
        self.path = Path(data_dir) / SETTINGS_FILE

    def load(self) -> DisplaySettings:
        """Read stored settings merged over defaults."""
        stored = self._read_storage().get(SETTINGS_KEY)
        if not isinstance(stored, dict):
            if stored is not None:
                logger.warning(f"Ignoring malformed '{SETTINGS_KEY}' entry in {self.path}")
            return DisplaySettings()
        return merge_settings(DisplaySettings(), stored)

    def commit(self, settings: DisplaySettings) -> None:
        """Persist a complete settings record."""
        storage = self._read_storage()
        storage[SETTINGS_KEY] = settings.model_dump(mode="json")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(storage, f, indent=2)
        logger.debug(f"💾 Display settings saved to {self.path}")

    def _read_storage(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Corrupt or unreadable settings file: {self.path} ({e}), using defaults")
            return {}
        return data if isinstance(data, dict) else {}


def merge_settings(base: DisplaySettings, values: dict[str, Any]) -> DisplaySettings:
    """Apply ``values`` over ``base``, skipping unknown keys and invalid values."""
    merged = base.model_dump()
    for key, value in values.items():
        if key not in DisplaySettings.model_fields:
            logger.debug(f"Ignoring unknown setting '{key}'")
            continue
        candidate = {**merged, key: value}
        try:
            DisplaySettings.model_validate(candidate)
        except ValidationError:
            logger.warning(f"Invalid value for setting '{key}': {value!r}, keeping {merged[key]!r}")
            continue
        merged = candidate
    return DisplaySettings.model_validate(merged)


__all__ = [
    "SettingsStore",
    "merge_settings",
    "SETTINGS_KEY",
    "SETTINGS_FILE",
]
