"""
Configuration — Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Environment variables
  2. Project config (.stashmark/config.yaml)
  3. User config (~/.stashmark/config.yaml)
  4. Defaults

Skip flags for the tutorial are NOT config: they live in the
preferences store (~/.stashmark/preferences.json).
"""

import logging
import os
import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any

from .presentation.symbols import get_symbols

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class EditorConfig:
    """External editor preferences."""
    command: Optional[str] = None  # None = auto-detect

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.command is not None and not self.command.strip():
            return "Editor command cannot be empty. Unset it to auto-detect."
        return None


@dataclass
class TutorialConfig:
    """Onboarding tutorial settings."""
    enabled: bool = False  # Treat this project as the tutorial repository
    default_branch: Optional[str] = None  # None = detect from git

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.default_branch is not None and not self.default_branch.strip():
            return "Default branch cannot be empty. Unset it to detect from git."
        return None


@dataclass
class LoggingConfig:
    """Log output settings."""
    level: str = "WARNING"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.level.upper() not in LOG_LEVELS:
            return f"Unknown log level '{self.level}'. Valid: {', '.join(LOG_LEVELS)}"
        return None


@dataclass
class DisplayConfig:
    """Display preferences."""
    symbols: str = "auto"  # "unicode" | "ascii" | "auto"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        valid_symbols = ("unicode", "ascii", "auto")
        if self.symbols not in valid_symbols:
            return f"Unknown symbols setting '{self.symbols}'. Valid: {', '.join(valid_symbols)}"
        return None


@dataclass
class Config:
    """Application configuration."""
    editor: EditorConfig = field(default_factory=EditorConfig)
    tutorial: TutorialConfig = field(default_factory=TutorialConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "editor": {
                "command": self.editor.command
            },
            "tutorial": {
                "enabled": self.tutorial.enabled,
                "default_branch": self.tutorial.default_branch
            },
            "logging": {
                "level": self.logging.level
            },
            "display": {
                "symbols": self.display.symbols
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        editor_data = data.get("editor") or {}
        tutorial_data = data.get("tutorial") or {}
        logging_data = data.get("logging") or {}
        display_data = data.get("display") or {}

        return cls(
            editor=EditorConfig(
                command=editor_data.get("command")
            ),
            tutorial=TutorialConfig(
                enabled=bool(tutorial_data.get("enabled", False)),
                default_branch=tutorial_data.get("default_branch")
            ),
            logging=LoggingConfig(
                level=str(logging_data.get("level", "WARNING")).upper()
            ),
            display=DisplayConfig(
                symbols=display_data.get("symbols", "auto")
            )
        )


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      0. Environment (STASHMARK_EDITOR, STASHMARK_LOG_LEVEL)
      1. Project config (.stashmark/config.yaml)
      2. User config (~/.stashmark/config.yaml)
      3. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".stashmark"
    USER_CONFIG_FILE = USER_CONFIG_DIR / "config.yaml"
    PROJECT_CONFIG_DIR = ".stashmark"
    PROJECT_CONFIG_FILE = "config.yaml"

    # Settable keys per section
    SETTINGS = {
        "editor": ("command",),
        "tutorial": ("enabled", "default_branch"),
        "logging": ("level",),
        "display": ("symbols",),
    }

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.PROJECT_CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.USER_CONFIG_FILE

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Ignoring malformed config %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring config %s: expected a mapping", path)
            return {}
        return data

    def load(self) -> Config:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        # Start with defaults
        config_data: Dict[str, Any] = {}

        # Layer 1: User config
        if self.user_config_path.exists():
            config_data = self._merge(config_data, self._read_yaml(self.user_config_path))

        # Layer 2: Project config (higher priority)
        if self.project_config_path.exists():
            config_data = self._merge(config_data, self._read_yaml(self.project_config_path))

        # Layer 3: Environment overrides
        if os.environ.get("STASHMARK_EDITOR"):
            config_data["editor"] = {**(config_data.get("editor") or {}), "command": os.environ["STASHMARK_EDITOR"]}
        if os.environ.get("STASHMARK_LOG_LEVEL"):
            config_data["logging"] = {**(config_data.get("logging") or {}), "level": os.environ["STASHMARK_LOG_LEVEL"]}

        self._config = Config.from_dict(config_data)
        return self._config

    def _write_yaml(self, path: Path, data: Dict[str, Any]):
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w') as f:
            yaml.dump(data, f, default_flow_style=False)

    def set(self, key: str, value: str, scope: str = "project") -> Optional[str]:
        """
        Set a configuration value.

        Only the file for the chosen scope is rewritten, and only with its
        own contents plus the new key. Values from other layers stay where
        they came from.

        Args:
            key: Dot-separated key (e.g., "editor.command")
            value: Value to set
            scope: "project" or "user"

        Returns:
            Error message or None if successful
        """
        parts = key.split(".")
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'editor.command')"

        section, setting = parts

        if section not in self.SETTINGS:
            return f"Unknown section: {section}. Valid: {', '.join(self.SETTINGS)}"

        valid = self.SETTINGS[section]
        if setting not in valid:
            return f"Unknown {section} setting: {setting}. Valid: {', '.join(valid)}"

        if key == "tutorial.enabled":
            parsed: Any = value.lower() in ('true', '1', 'yes')
        elif key == "logging.level":
            parsed = value.upper()
        else:
            parsed = value

        path = self.project_config_path if scope == "project" else self.user_config_path
        data = self._read_yaml(path) if path.exists() else {}

        section_data = data.get(section)
        if not isinstance(section_data, dict):
            section_data = {}
        section_data[setting] = parsed

        error = getattr(Config.from_dict({section: section_data}), section).validate()
        if error:
            return error

        data[section] = section_data
        self._write_yaml(path, data)

        self._config = None
        return None

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value."""
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return None

        section, setting = parts

        if section == "editor":
            if setting == "command":
                return config.editor.command
        elif section == "tutorial":
            if setting == "enabled":
                return str(config.tutorial.enabled).lower()
            elif setting == "default_branch":
                return config.tutorial.default_branch
        elif section == "logging":
            if setting == "level":
                return config.logging.level
        elif section == "display":
            if setting == "symbols":
                return config.display.symbols

        return None

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def display(self) -> str:
        """Format config for display."""
        config = self.load()
        symbols = get_symbols(config.display.symbols)

        editor = config.editor.command or "(auto-detect)"
        default_branch = config.tutorial.default_branch or "(detect from git)"
        tutorial = f"{symbols.check_pass} Enabled" if config.tutorial.enabled else "Disabled"

        lines = [
            "Configuration:",
            "",
            "Editor:",
            f"  Command: {editor}",
            "",
            "Tutorial:",
            f"  Repository: {tutorial}",
            f"  Default branch: {default_branch}",
            "",
            "Logging:",
            f"  Level: {config.logging.level}",
            "",
            "Display:",
            f"  Symbols: {config.display.symbols}",
            "",
            "Config files:",
            f"  User: {self.user_config_path}",
            f"  Project: {self.project_config_path}",
        ]

        return "\n".join(lines)
