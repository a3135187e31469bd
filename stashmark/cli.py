"""
CLI -- Command interface

Holds the shared resources (config, git runner, flag store, editor
resolver, tutorial engine) and delegates to command modules.
Git failures surface here as a single error line and a non-zero exit.
"""

import argparse
import os
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .config import ConfigManager
from .core.logging import configure_logging
from .preferences.flags import JsonFlagStore
from .presentation.symbols import get_symbols, safe_print
from .services.editor import EditorResolver
from .services.git import GitRunner, GitError
from .services.stash import StashError
from .tracking.tutorial import OnboardingStepEngine
from .commands.stash_cmd import StashCommand
from .commands.tutorial_cmd import TutorialCommand
from .commands.config_cmd import ConfigCommand


class StashmarkCLI:
    """Command-line interface for stashmark."""

    def __init__(self, project_dir: Path, preferences_path: Optional[Path] = None):
        self.project_dir = Path(project_dir)

        self.config_manager = ConfigManager(self.project_dir)
        self.config = self.config_manager.load()

        # Initialize symbols based on config
        self.symbols = get_symbols(self.config.display.symbols)

        self.git = GitRunner(self.project_dir)

        # Skip flags persist per user, not per project
        self.flags = JsonFlagStore(preferences_path)
        self.editors = EditorResolver(self.config.editor.command)
        self.tutorial = OnboardingStepEngine(
            resolve_current_editor=self.editors.resolve_current_editor,
            get_resolved_editor=self.editors.get_resolved_editor,
            store=self.flags
        )

        self._stash_cmd = StashCommand(self)
        self._tutorial_cmd = TutorialCommand(self)
        self._config_cmd = ConfigCommand(self)


def main(argv=None):
    """
    Main entry point for the stashmark CLI.

    Uses command registry pattern for modular command handling.
    Parser definitions and dispatch logic are in individual command modules.
    """
    parser = argparse.ArgumentParser(
        prog='stashmark',
        description="stashmark -- tagged stash entries and onboarding progress"
    )

    parser.add_argument(
        '--project', '-p',
        default=os.environ.get("STASHMARK_PROJECT_PATH", "."),
        help='Project directory (default: STASHMARK_PROJECT_PATH or current)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Log git invocations to stderr'
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'stashmark {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    from .commands import register_all, dispatch
    register_all(subparsers)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    cli = StashmarkCLI(Path(args.project))
    configure_logging("DEBUG" if args.verbose else cli.config.logging.level)

    try:
        exit_code = dispatch(args.command, cli, args)
    except (GitError, StashError) as e:
        safe_print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyError as e:
        print(f"Error: {e}")
        parser.print_help()
        return 2

    return exit_code or 0


if __name__ == '__main__':
    sys.exit(main())
