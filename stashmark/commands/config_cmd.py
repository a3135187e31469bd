"""
ConfigCommand — Show and change configuration
"""

from ..commands.base import BaseCommand
from ..presentation.symbols import safe_print


class ConfigCommand(BaseCommand):
    """Command for configuration display and modification."""

    def show_config(self):
        """Show current configuration."""
        safe_print(self.config_manager.display())

    def set_config(self, key: str, value: str, scope: str = "project") -> bool:
        """Set a configuration value. Returns False when it was rejected."""
        symbols = self.symbols
        error = self.config_manager.set(key, value, scope=scope)

        if error:
            safe_print(f"{symbols.check_fail} {error}")
            return False

        safe_print(f"{symbols.check_pass} Set {key} = {value} ({scope})")
        return True


# =============================================================================
# Command Registration (self-registration pattern)
# =============================================================================

COMMAND_NAME = 'config'


def register_parser(subparsers):
    """Register config command parser."""
    p = subparsers.add_parser('config', help='Show or set configuration')
    p.add_argument('--set', nargs=2, metavar=('KEY', 'VALUE'),
                   help='Set a value (e.g. editor.command code)')
    p.add_argument('--user', action='store_true',
                   help='Write to user config instead of project config')
    return p


def handle(cli, args):
    """Handle config command dispatch."""
    if args.set:
        key, value = args.set
        if not cli._config_cmd.set_config(key, value, scope="user" if args.user else "project"):
            return 2
    else:
        cli._config_cmd.show_config()
