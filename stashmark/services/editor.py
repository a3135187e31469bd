"""
Editor Detection — Find the external editor the tutorial can open files in

Detection priority:
1. Config override (editor.command)
2. VISUAL / EDITOR environment variables
3. Known editor commands on PATH
4. None (the tutorial asks the user to pick one)

The onboarding engine only sees two callables:
- resolve_current_editor(): async, re-runs detection
- get_resolved_editor(): returns the last result
"""

import asyncio
import logging
import os
import shlex
import shutil
from dataclasses import dataclass
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)


# Known editor commands and their display names, in preference order
KNOWN_EDITORS: List[Tuple[str, str]] = [
    ("code", "Visual Studio Code"),
    ("code-insiders", "Visual Studio Code (Insiders)"),
    ("cursor", "Cursor"),
    ("subl", "Sublime Text"),
    ("zed", "Zed"),
    ("atom", "Atom"),
    ("mate", "TextMate"),
    ("idea", "IntelliJ IDEA"),
    ("pycharm", "PyCharm"),
]

# Environment variables checked before PATH scanning
EDITOR_ENV_VARS = ("VISUAL", "EDITOR")


@dataclass(frozen=True)
class ExternalEditor:
    """An editor that can be launched."""
    name: str
    path: str


def _display_name(command: str) -> str:
    for known, display in KNOWN_EDITORS:
        if command == known:
            return display
    return command


def _from_command(command: str) -> Optional[ExternalEditor]:
    """Resolve a command line like 'code --wait' to an executable."""
    try:
        parts = shlex.split(command)
    except ValueError:
        return None
    if not parts:
        return None

    path = shutil.which(parts[0])
    if path is None:
        return None

    name = os.path.basename(parts[0])
    return ExternalEditor(name=_display_name(name), path=path)


def detect_editor(override: Optional[str] = None) -> Optional[ExternalEditor]:
    """
    Detect an installed editor.

    Args:
        override: Command from config, takes priority when it resolves

    Returns:
        The first editor found, or None
    """
    # Priority 1: Config override
    if override:
        editor = _from_command(override)
        if editor:
            return editor
        logger.warning("Configured editor %r was not found on PATH", override)

    # Priority 2: Environment variables
    for env_var in EDITOR_ENV_VARS:
        value = os.environ.get(env_var)
        if value:
            editor = _from_command(value)
            if editor:
                return editor

    # Priority 3: Known editors on PATH
    for command, display in KNOWN_EDITORS:
        path = shutil.which(command)
        if path:
            return ExternalEditor(name=display, path=path)

    return None


class EditorResolver:
    """Holds the last detected editor and re-runs detection on request."""

    def __init__(self, override: Optional[str] = None):
        self.override = override
        self._resolved: Optional[ExternalEditor] = None

    async def resolve_current_editor(self) -> None:
        """Re-run detection without blocking the event loop."""
        self._resolved = await asyncio.to_thread(detect_editor, self.override)
        if self._resolved:
            logger.debug("Resolved editor: %s (%s)", self._resolved.name, self._resolved.path)
        else:
            logger.debug("No editor found")

    def get_resolved_editor(self) -> Optional[ExternalEditor]:
        return self._resolved
