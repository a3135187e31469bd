"""
Preferences — User choice persistence for stashmark

- Flags: boolean choices that persist across sessions
  (tutorial step skips)
"""

from .flags import JsonFlagStore, DEFAULT_PREFERENCES_PATH

__all__ = [
    "JsonFlagStore", "DEFAULT_PREFERENCES_PATH",
]
