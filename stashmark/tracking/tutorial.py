"""
Onboarding Tutorial — Which step does the user need to complete next?

The current step is re-derived on every call from:
- whether the repository is the tutorial repository
- a RepositoryState snapshot
- two persisted skip flags (install editor, create pull request)

Checks run in a fixed order and stop at the first one that fails.
Nothing else is stored: the skip flags are the only state, and they are
one-way switches.
"""

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from ..core.state import RepositoryState, TipState

logger = logging.getLogger(__name__)

SKIP_INSTALL_EDITOR_KEY = "tutorial-install-editor-skipped"
SKIP_CREATE_PULL_REQUEST_KEY = "tutorial-skip-create-pull-request"


class TutorialStep(Enum):
    """Tutorial steps, in the order the user completes them."""
    NOT_APPLICABLE = "NotApplicable"
    PICK_EDITOR = "PickEditor"
    CREATE_BRANCH = "CreateBranch"
    EDIT_FILE = "EditFile"
    MAKE_COMMIT = "MakeCommit"
    PUSH_BRANCH = "PushBranch"
    OPEN_PULL_REQUEST = "OpenPullRequest"
    ALL_DONE = "AllDone"

    @property
    def position(self) -> int:
        return list(TutorialStep).index(self)

    def __lt__(self, other):
        if not isinstance(other, TutorialStep):
            return NotImplemented
        return self.position < other.position

    def __le__(self, other):
        if not isinstance(other, TutorialStep):
            return NotImplemented
        return self.position <= other.position

    def __gt__(self, other):
        if not isinstance(other, TutorialStep):
            return NotImplemented
        return self.position > other.position

    def __ge__(self, other):
        if not isinstance(other, TutorialStep):
            return NotImplemented
        return self.position >= other.position


class OnboardingStepEngine:
    """
    Determines which step of the onboarding tutorial comes next.

    Stores only the two skip flags. The resulting step is meant to be
    kept by the caller so the rest of the app can read it.
    """

    def __init__(
        self,
        resolve_current_editor: Callable[[], Awaitable[None]],
        get_resolved_editor: Callable[[], Optional[Any]],
        store
    ):
        """
        Args:
            resolve_current_editor: Re-checks for an editor (async)
            get_resolved_editor: Returns the editor found so far, or None
            store: Flag store with get_boolean(key, default) / set_boolean(key, value)
        """
        self._resolve_current_editor = resolve_current_editor
        self._get_resolved_editor = get_resolved_editor
        self._store = store

        self.install_editor_skipped: bool = store.get_boolean(SKIP_INSTALL_EDITOR_KEY, False)
        self.create_pr_skipped: bool = store.get_boolean(SKIP_CREATE_PULL_REQUEST_KEY, False)

    def skip_install_editor(self) -> None:
        """Call when the user opts to skip the install editor step."""
        self.install_editor_skipped = True
        self._store.set_boolean(SKIP_INSTALL_EDITOR_KEY, self.install_editor_skipped)
        logger.info("Tutorial: install editor step skipped")

    def skip_create_pr(self) -> None:
        """Call when the user opts to skip the create pull request step."""
        self.create_pr_skipped = True
        self._store.set_boolean(SKIP_CREATE_PULL_REQUEST_KEY, self.create_pr_skipped)
        logger.info("Tutorial: create pull request step skipped")

    async def get_current_step(
        self,
        is_tutorial_repo: bool,
        repository_state: RepositoryState
    ) -> TutorialStep:
        """Determine what step the user needs to complete next."""
        if not is_tutorial_repo:
            return TutorialStep.NOT_APPLICABLE
        elif not await self.is_editor_installed():
            return TutorialStep.PICK_EDITOR
        elif not self.is_branch_checked_out(repository_state):
            return TutorialStep.CREATE_BRANCH
        elif not self.has_changed_file(repository_state):
            return TutorialStep.EDIT_FILE
        elif not self.has_multiple_commits(repository_state):
            return TutorialStep.MAKE_COMMIT
        elif not self.commit_pushed(repository_state):
            return TutorialStep.PUSH_BRANCH
        elif not self.pull_request_created(repository_state):
            return TutorialStep.OPEN_PULL_REQUEST
        else:
            return TutorialStep.ALL_DONE

    async def is_editor_installed(self) -> bool:
        if self.install_editor_skipped or self._get_resolved_editor():
            return True

        # No timeout here: the resolver owns cancellation
        await self._resolve_current_editor()
        return bool(self._get_resolved_editor())

    def is_branch_checked_out(self, repository_state: RepositoryState) -> bool:
        """A non-default branch is checked out."""
        branches_state = repository_state.branches_state

        current_branch_name = repository_state.current_branch_name
        default_branch_name = (
            branches_state.default_branch.name
            if branches_state.default_branch is not None
            else None
        )

        return (
            current_branch_name is not None
            and default_branch_name is not None
            and current_branch_name != default_branch_name
        )

    def has_changed_file(self, repository_state: RepositoryState) -> bool:
        if self.has_multiple_commits(repository_state):
            # User has already committed a change
            return True
        return len(repository_state.changes_state.working_directory.files) > 0

    def has_multiple_commits(self, repository_state: RepositoryState) -> bool:
        tip = repository_state.branches_state.tip
        if tip.kind != TipState.VALID or tip.branch is None:
            return False

        # The root commit sometimes lists an empty-string parent
        parents = [sha for sha in tip.branch.tip.parent_shas if sha]
        return len(parents) > 0

    def commit_pushed(self, repository_state: RepositoryState) -> bool:
        ahead_behind = repository_state.ahead_behind
        return ahead_behind is not None and ahead_behind.ahead == 0

    def pull_request_created(self, repository_state: RepositoryState) -> bool:
        if self.create_pr_skipped:
            return True
        return repository_state.branches_state.current_pull_request is not None
