"""
Repository Snapshot — Build a RepositoryState from git

Reads just enough for the onboarding tutorial:
- HEAD kind (unborn / detached / valid branch) and the tip's parents
- Default branch (override, origin/HEAD, then main/master)
- Pending working-directory files
- Ahead/behind against the upstream, if there is one
"""

import logging
from typing import List, Optional

from ..core.state import (
    AheadBehind, Branch, BranchesState, ChangesState, Commit, PullRequestRef,
    RepositoryState, Tip, TipState, WorkingDirectoryStatus,
)
from .git import GitRunner

logger = logging.getLogger(__name__)

# Local branch names tried when origin/HEAD is not set
FALLBACK_DEFAULT_BRANCHES = ("main", "master")


def _read_commit(git: GitRunner, rev: str) -> Optional[Commit]:
    """Commit and its parents, or None if rev does not resolve."""
    result = git.run(
        ["rev-list", "--parents", "-n", "1", rev, "--"],
        name="getCommit",
        success_exit_codes=(0, 128)
    )
    if result.exit_code != 0:
        return None

    parts = result.stdout.strip().split(" ")
    if not parts or not parts[0]:
        return None
    return Commit(sha=parts[0], parent_shas=tuple(parts[1:]))


def read_tip(git: GitRunner) -> Tip:
    """Determine what HEAD points at."""
    head = git.run(["rev-parse", "--verify", "-q", "HEAD"], name="getTip", success_exit_codes=(0, 1))
    if head.exit_code != 0:
        return Tip(kind=TipState.UNBORN)

    symbolic = git.run(
        ["symbolic-ref", "-q", "--short", "HEAD"],
        name="getCurrentBranch",
        success_exit_codes=(0, 1)
    )
    if symbolic.exit_code != 0:
        return Tip(kind=TipState.DETACHED)

    commit = _read_commit(git, "HEAD")
    if commit is None:
        return Tip(kind=TipState.UNKNOWN)

    return Tip(kind=TipState.VALID, branch=Branch(name=symbolic.stdout.strip(), tip=commit))


def read_default_branch(git: GitRunner, override: Optional[str] = None) -> Optional[Branch]:
    """Find the repository's default branch."""
    candidates: List[str] = []
    if override:
        candidates.append(override)
    else:
        remote_head = git.run(
            ["symbolic-ref", "-q", "--short", "refs/remotes/origin/HEAD"],
            name="getDefaultBranch",
            success_exit_codes=(0, 1, 128)
        )
        if remote_head.exit_code == 0 and remote_head.stdout.strip():
            name = remote_head.stdout.strip()
            candidates.append(name.split("/", 1)[1] if "/" in name else name)
        candidates.extend(FALLBACK_DEFAULT_BRANCHES)

    for name in candidates:
        commit = _read_commit(git, f"refs/heads/{name}")
        if commit is not None:
            return Branch(name=name, tip=commit)

    return None


def read_working_directory(git: GitRunner) -> WorkingDirectoryStatus:
    result = git.run(["status", "--porcelain", "--untracked-files=all"], name="getStatus")
    files = [line[3:] for line in result.stdout.split("\n") if len(line) > 3]
    return WorkingDirectoryStatus(files=tuple(files))


def read_ahead_behind(git: GitRunner) -> Optional[AheadBehind]:
    """Ahead/behind against @{upstream}; None when there is no upstream."""
    result = git.run(
        ["rev-list", "--left-right", "--count", "@{upstream}...HEAD"],
        name="getAheadBehind",
        success_exit_codes=(0, 128)
    )
    if result.exit_code != 0:
        return None

    parts = result.stdout.split()
    if len(parts) != 2:
        return None

    behind, ahead = int(parts[0]), int(parts[1])
    return AheadBehind(ahead=ahead, behind=behind)


def read_repository_state(
    git: GitRunner,
    default_branch: Optional[str] = None,
    current_pull_request: Optional[PullRequestRef] = None
) -> RepositoryState:
    """
    Build a snapshot of the repository.

    Args:
        git: Runner bound to the repository
        default_branch: Override default-branch detection
        current_pull_request: Pull request for the current branch, if known
            (git itself has no notion of pull requests)
    """
    tip = read_tip(git)
    ahead_behind = read_ahead_behind(git) if tip.kind == TipState.VALID else None

    state = RepositoryState(
        branches_state=BranchesState(
            tip=tip,
            default_branch=read_default_branch(git, default_branch),
            current_pull_request=current_pull_request
        ),
        changes_state=ChangesState(working_directory=read_working_directory(git)),
        ahead_behind=ahead_behind
    )

    logger.debug(
        "Snapshot: tip=%s branch=%s files=%d",
        tip.kind.value, state.current_branch_name, len(state.changes_state.working_directory.files),
        extra={"repo": str(git.repo_path)}
    )
    return state
