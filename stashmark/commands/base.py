"""
BaseCommand — Shared foundation for all CLI commands

Provides access to CLI resources via composition.
Commands receive the CLI instance and access its resources through properties.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..cli import StashmarkCLI


class BaseCommand:
    """
    Base class for CLI commands with access to shared resources.

    Commands don't reinitialize resources; they access them via the CLI instance.
    """

    def __init__(self, cli: 'StashmarkCLI'):
        """
        Initialize command with CLI instance.

        Args:
            cli: The main StashmarkCLI instance holding all resources
        """
        self._cli = cli

    @property
    def project_dir(self):
        """Project root directory."""
        return self._cli.project_dir

    @property
    def git(self):
        """Git runner bound to the project."""
        return self._cli.git

    @property
    def config(self):
        """Loaded configuration."""
        return self._cli.config

    @property
    def config_manager(self):
        return self._cli.config_manager

    @property
    def tutorial(self):
        """Onboarding step engine."""
        return self._cli.tutorial

    @property
    def symbols(self):
        """Symbol set for output."""
        return self._cli.symbols
