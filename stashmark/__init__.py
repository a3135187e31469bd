"""
stashmark — Tagged stash entries and onboarding progress

Marks the stash entries it creates so it can find them again among
everything else in the stash, and tracks a new user's progress through
the onboarding tutorial.

Usage:
    stashmark stash save
    stashmark stash list
    stashmark stash pop --branch feature
    stashmark tutorial status
    stashmark tutorial skip editor
    stashmark config --set editor.command code
"""

__version__ = "0.1.0"

# Core layer (data)
from .core.state import (
    TipState, Commit, Branch, Tip, PullRequestRef, BranchesState,
    WorkingDirectoryStatus, ChangesState, AheadBehind, RepositoryState,
)

# Services layer
from .services.git import GitRunner, GitResult, GitError, FailureKind, classify_failure
from .services.stash import (
    StashEntry, StashError, STASH_ENTRY_MARKER,
    create_stash_message, parse_stash_line, list_owned_entries,
    create_owned_stash_entry, get_last_owned_entry_for_branch,
    pop_stash_entry, drop_stash_entry,
)
from .services.snapshot import read_repository_state
from .services.editor import ExternalEditor, EditorResolver

# Tracking layer
from .tracking.tutorial import TutorialStep, OnboardingStepEngine

# Preferences
from .preferences.flags import JsonFlagStore

# Config (stays at root)
from .config import Config, ConfigManager

__all__ = [
    # Core
    'TipState', 'Commit', 'Branch', 'Tip', 'PullRequestRef', 'BranchesState',
    'WorkingDirectoryStatus', 'ChangesState', 'AheadBehind', 'RepositoryState',
    # Services
    'GitRunner', 'GitResult', 'GitError', 'FailureKind', 'classify_failure',
    'StashEntry', 'StashError', 'STASH_ENTRY_MARKER',
    'create_stash_message', 'parse_stash_line', 'list_owned_entries',
    'create_owned_stash_entry', 'get_last_owned_entry_for_branch',
    'pop_stash_entry', 'drop_stash_entry',
    'read_repository_state',
    'ExternalEditor', 'EditorResolver',
    # Tracking
    'TutorialStep', 'OnboardingStepEngine',
    # Preferences
    'JsonFlagStore',
    # Config
    'Config', 'ConfigManager',
]
