"""
Core — Data shapes and process-wide plumbing

- State: read-only repository snapshot consumed by the tutorial engine
- Logging: handler setup for the stashmark logger
"""

from .state import (
    TipState, Commit, Branch, Tip, PullRequestRef, BranchesState,
    WorkingDirectoryStatus, ChangesState, AheadBehind, RepositoryState,
)
from .logging import configure_logging

__all__ = [
    # State
    "TipState", "Commit", "Branch", "Tip", "PullRequestRef", "BranchesState",
    "WorkingDirectoryStatus", "ChangesState", "AheadBehind", "RepositoryState",
    # Logging
    "configure_logging",
]
