"""
Flag Store — Persistent boolean user choices

Small key -> bool store for choices that must survive restarts
(e.g. "skip this tutorial step").

Design:
- Storage: ~/.stashmark/preferences.json (mutable JSON object)
- Read once on construction, written through on every set
- Missing or unreadable file behaves as empty
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_PREFERENCES_PATH = Path.home() / ".stashmark" / "preferences.json"


class JsonFlagStore:
    """
    Boolean flags backed by a JSON file.

    Any object with the same get_boolean/set_boolean pair can stand in
    for this one (tests use an in-memory dict).
    """

    def __init__(self, storage_path: Optional[Path] = None):
        self.storage_path = Path(storage_path) if storage_path else DEFAULT_PREFERENCES_PATH
        self._data = self._load()

    def _load(self) -> Dict[str, Any]:
        """Load data from storage."""
        try:
            with open(self.storage_path, 'r') as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Ignoring unreadable preferences file %s: %s", self.storage_path, e)
            return {}

        if not isinstance(data, dict):
            return {}
        return data

    def _save(self):
        """Save data to storage."""
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.storage_path, 'w') as f:
            json.dump(self._data, f, indent=2, sort_keys=True)

    def get_boolean(self, key: str, default: bool = False) -> bool:
        """Get a stored flag; non-boolean values read as the default."""
        value = self._data.get(key)
        if isinstance(value, bool):
            return value
        return default

    def set_boolean(self, key: str, value: bool) -> None:
        self._data[key] = bool(value)
        self._save()
