"""
Repository State — Read-only snapshot of what the tutorial cares about

The snapshot is assembled elsewhere (see services/snapshot.py) and only
read by the onboarding engine:
- Tip: what is checked out and whether it is a real branch
- Branches: default branch and current pull request
- Changes: pending working-directory files
- Ahead/behind: divergence from the upstream branch
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class TipState(Enum):
    """What HEAD currently points at."""
    UNKNOWN = "unknown"
    UNBORN = "unborn"
    DETACHED = "detached"
    VALID = "valid"


@dataclass(frozen=True)
class Commit:
    """A commit identifier and its parents."""
    sha: str
    parent_shas: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Branch:
    """A named branch and the commit at its tip."""
    name: str
    tip: Commit


@dataclass(frozen=True)
class Tip:
    """
    The checked out tip.

    Only VALID tips carry a branch. Unborn and detached tips have none.
    """
    kind: TipState
    branch: Optional[Branch] = None


@dataclass(frozen=True)
class PullRequestRef:
    """Reference to an open pull request for the current branch."""
    number: int
    url: str = ""


@dataclass(frozen=True)
class BranchesState:
    tip: Tip
    default_branch: Optional[Branch] = None
    current_pull_request: Optional[PullRequestRef] = None


@dataclass(frozen=True)
class WorkingDirectoryStatus:
    files: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ChangesState:
    working_directory: WorkingDirectoryStatus = field(default_factory=WorkingDirectoryStatus)


@dataclass(frozen=True)
class AheadBehind:
    """Commits the local branch is ahead of / behind its upstream."""
    ahead: int
    behind: int


@dataclass(frozen=True)
class RepositoryState:
    """Everything the onboarding engine reads about a repository."""
    branches_state: BranchesState
    changes_state: ChangesState = field(default_factory=ChangesState)
    ahead_behind: Optional[AheadBehind] = None

    @property
    def current_branch_name(self) -> Optional[str]:
        tip = self.branches_state.tip
        if tip.kind == TipState.VALID and tip.branch is not None:
            return tip.branch.name
        return None
