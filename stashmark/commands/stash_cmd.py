"""
StashCommand — Save, list and restore stashmark stash entries

Handles stash operations:
- Listing entries stashmark created (others are ignored)
- Stashing working changes tagged with the current branch
- Restoring the newest entry for a branch
- Dropping an entry by SHA or SHA prefix
"""

from typing import Optional

from ..commands.base import BaseCommand
from ..presentation.symbols import safe_print, SHA_DISPLAY_LENGTH
from ..services.snapshot import read_tip, read_working_directory
from ..services.stash import (
    StashEntry, list_owned_entries, create_owned_stash_entry,
    get_last_owned_entry_for_branch, pop_stash_entry, drop_stash_entry,
)
from ..core.state import TipState

# Minimum characters accepted as a SHA prefix
MIN_SHA_PREFIX = 4


class StashCommand(BaseCommand):
    """Command handler for stashmark stash entries."""

    def _current_branch(self):
        """Checked out branch, or None when HEAD is unborn or detached."""
        tip = read_tip(self.git)
        if tip.kind != TipState.VALID:
            return None
        return tip.branch

    def list_entries(self):
        """Print stash entries created by stashmark, newest first."""
        symbols = self.symbols
        entries = list_owned_entries(self.git)

        if not entries:
            print("No stashmark stash entries.")
            return

        print(f"{len(entries)} stash entr{'y' if len(entries) == 1 else 'ies'}:")
        for entry in entries:
            safe_print(f"  {symbols.stash} {entry.stash_sha[:SHA_DISPLAY_LENGTH]}  {entry.branch_name}")

    def save(self):
        """Stash working directory changes for the current branch."""
        symbols = self.symbols
        branch = self._current_branch()

        if branch is None:
            print("Cannot stash: no branch is checked out.")
            return

        if not read_working_directory(self.git).files:
            print("Nothing to stash.")
            return

        previous = get_last_owned_entry_for_branch(self.git, branch.name)
        create_owned_stash_entry(self.git, branch.name, branch.tip.sha)

        # Untracked-only changes are not stashed
        if get_last_owned_entry_for_branch(self.git, branch.name) in (None, previous):
            print("Nothing to stash.")
            return

        safe_print(f"{symbols.check_pass} Stashed changes on {branch.name}")

    def pop(self, branch_name: Optional[str] = None):
        """Restore the newest stash entry for a branch (default: current)."""
        symbols = self.symbols

        if branch_name is None:
            branch = self._current_branch()
            if branch is None:
                print("Cannot restore: no branch is checked out. Use --branch.")
                return
            branch_name = branch.name

        entry = get_last_owned_entry_for_branch(self.git, branch_name)
        if entry is None:
            safe_print(f"No stash entry for {branch_name}.")
            return

        pop_stash_entry(self.git, entry.stash_sha)
        safe_print(
            f"{symbols.check_pass} Restored {entry.stash_sha[:SHA_DISPLAY_LENGTH]} "
            f"{symbols.arrow} {branch_name}"
        )

    def _resolve_entry(self, sha_or_prefix: str) -> Optional[StashEntry]:
        """Find an owned entry by full SHA or unique prefix."""
        query = sha_or_prefix.strip().lower()
        entries = list_owned_entries(self.git)

        for entry in entries:
            if entry.stash_sha == query:
                return entry

        if len(query) < MIN_SHA_PREFIX:
            return None

        matches = [e for e in entries if e.stash_sha.startswith(query)]
        if len(matches) > 1:
            print(f"'{sha_or_prefix}' matches {len(matches)} entries. Use more characters.")
            return None
        return matches[0] if matches else None

    def drop(self, sha_or_prefix: str):
        """Drop a stashmark stash entry."""
        symbols = self.symbols
        entry = self._resolve_entry(sha_or_prefix)

        if entry is None:
            print(f"No stashmark stash entry matches '{sha_or_prefix}'.")
            return

        drop_stash_entry(self.git, entry.stash_sha)
        safe_print(f"{symbols.check_pass} Dropped {entry.stash_sha[:SHA_DISPLAY_LENGTH]} ({entry.branch_name})")


# =============================================================================
# Command Registration (self-registration pattern)
# =============================================================================

COMMAND_NAME = 'stash'


def register_parser(subparsers):
    """Register stash command parser."""
    p = subparsers.add_parser('stash', help='Manage stash entries created by stashmark')
    stash_sub = p.add_subparsers(dest='stash_command')

    stash_sub.add_parser('list', help='List stashmark stash entries')
    stash_sub.add_parser('save', help='Stash changes tagged with the current branch')

    pop = stash_sub.add_parser('pop', help='Restore the newest entry for a branch')
    pop.add_argument('--branch', '-b', help='Branch name (default: current branch)')

    drop = stash_sub.add_parser('drop', help='Drop an entry')
    drop.add_argument('sha', help='Stash SHA or unique prefix')

    return p


def handle(cli, args):
    """Handle stash command dispatch."""
    if args.stash_command == 'list':
        cli._stash_cmd.list_entries()
    elif args.stash_command == 'save':
        cli._stash_cmd.save()
    elif args.stash_command == 'pop':
        cli._stash_cmd.pop(branch_name=args.branch)
    elif args.stash_command == 'drop':
        cli._stash_cmd.drop(args.sha)
    else:
        print("Usage: stashmark stash {list|save|pop|drop}")
