"""
Services — External integration layer for stashmark

Contains integrations with external systems:
- Git: the single place git is invoked
- Stash: marker-tagged stash entries (create, list, pop, drop)
- Snapshot: repository state read from git
- Editor: external editor detection
"""

from .git import GitRunner, GitResult, GitError, FailureKind, classify_failure
from .stash import (
    StashEntry, StashError, STASH_ENTRY_MARKER,
    create_stash_message, parse_stash_line, list_owned_entries,
    create_owned_stash_entry, get_last_owned_entry_for_branch,
    find_stash_ref, pop_stash_entry, drop_stash_entry,
)
from .snapshot import read_repository_state
from .editor import ExternalEditor, EditorResolver, detect_editor

__all__ = [
    # Git
    "GitRunner", "GitResult", "GitError", "FailureKind", "classify_failure",
    # Stash
    "StashEntry", "StashError", "STASH_ENTRY_MARKER",
    "create_stash_message", "parse_stash_line", "list_owned_entries",
    "create_owned_stash_entry", "get_last_owned_entry_for_branch",
    "find_stash_ref", "pop_stash_entry", "drop_stash_entry",
    # Snapshot
    "read_repository_state",
    # Editor
    "ExternalEditor", "EditorResolver", "detect_editor",
]
