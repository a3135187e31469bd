"""
Tests for OnboardingStepEngine — step precedence and skip flags

These tests validate:
- Each step is reached exactly when all earlier checks pass
- Editor resolution runs only when needed, once per evaluation
- Root commits listing an empty parent count as a single commit
- Skip flags persist, are read at construction, and never revert
- Identical inputs give identical steps
"""

import pytest

from stashmark.core.state import AheadBehind, PullRequestRef, TipState
from stashmark.tracking.tutorial import (
    OnboardingStepEngine, TutorialStep,
    SKIP_INSTALL_EDITOR_KEY, SKIP_CREATE_PULL_REQUEST_KEY,
)
from tests.factories import InMemoryFlagStore, PARENT_SHA, build_state


class FakeEditors:
    """Injected editor capabilities with a call counter."""

    def __init__(self, resolved=None, found_on_resolve=None):
        self.resolved = resolved
        self.found_on_resolve = found_on_resolve
        self.resolve_calls = 0

    async def resolve_current_editor(self):
        self.resolve_calls += 1
        if self.found_on_resolve is not None:
            self.resolved = self.found_on_resolve

    def get_resolved_editor(self):
        return self.resolved


def make_engine(editors=None, store=None):
    editors = editors or FakeEditors(resolved="code")
    store = store if store is not None else InMemoryFlagStore()
    engine = OnboardingStepEngine(
        editors.resolve_current_editor,
        editors.get_resolved_editor,
        store
    )
    return engine, editors, store


# =============================================================================
# Step ordering
# =============================================================================

class TestTutorialStep:

    def test_total_order(self):
        steps = list(TutorialStep)
        assert steps == sorted(steps)
        assert TutorialStep.NOT_APPLICABLE < TutorialStep.PICK_EDITOR < TutorialStep.ALL_DONE
        assert TutorialStep.PUSH_BRANCH >= TutorialStep.MAKE_COMMIT
        assert TutorialStep.EDIT_FILE <= TutorialStep.EDIT_FILE
        assert TutorialStep.OPEN_PULL_REQUEST > TutorialStep.PUSH_BRANCH

    def test_values(self):
        assert TutorialStep.PICK_EDITOR.value == "PickEditor"
        assert TutorialStep("AllDone") is TutorialStep.ALL_DONE


# =============================================================================
# get_current_step precedence
# =============================================================================

@pytest.mark.asyncio
class TestCurrentStep:

    async def test_not_tutorial_repo(self):
        engine, editors, _ = make_engine(FakeEditors())
        step = await engine.get_current_step(False, build_state())
        assert step is TutorialStep.NOT_APPLICABLE
        assert editors.resolve_calls == 0

    async def test_pick_editor_when_none_found(self):
        engine, editors, _ = make_engine(FakeEditors())
        step = await engine.get_current_step(True, build_state())
        assert step is TutorialStep.PICK_EDITOR
        assert editors.resolve_calls == 1

    async def test_resolution_can_find_editor(self):
        engine, editors, _ = make_engine(FakeEditors(found_on_resolve="subl"))
        step = await engine.get_current_step(True, build_state(branch="main"))
        assert step is TutorialStep.CREATE_BRANCH
        assert editors.resolve_calls == 1

    async def test_already_resolved_editor_skips_resolution(self):
        engine, editors, _ = make_engine(FakeEditors(resolved="code"))
        await engine.get_current_step(True, build_state(branch="main"))
        assert editors.resolve_calls == 0

    async def test_skipped_editor_skips_resolution(self):
        engine, editors, _ = make_engine(FakeEditors())
        engine.skip_install_editor()
        step = await engine.get_current_step(True, build_state(branch="main"))
        assert step is TutorialStep.CREATE_BRANCH
        assert editors.resolve_calls == 0

    async def test_create_branch_on_default_branch(self):
        engine, _, _ = make_engine()
        assert await engine.get_current_step(True, build_state(branch="main")) is TutorialStep.CREATE_BRANCH

    async def test_create_branch_without_default_branch(self):
        engine, _, _ = make_engine()
        state = build_state(default_branch=None)
        assert await engine.get_current_step(True, state) is TutorialStep.CREATE_BRANCH

    @pytest.mark.parametrize("kind", [TipState.UNBORN, TipState.DETACHED, TipState.UNKNOWN])
    async def test_create_branch_without_valid_tip(self, kind):
        engine, _, _ = make_engine()
        state = build_state(tip_kind=kind)
        assert await engine.get_current_step(True, state) is TutorialStep.CREATE_BRANCH

    async def test_edit_file(self):
        """Feature branch, one commit, nothing changed."""
        engine, _, _ = make_engine()
        assert await engine.get_current_step(True, build_state()) is TutorialStep.EDIT_FILE

    async def test_make_commit_after_editing(self):
        engine, _, _ = make_engine()
        state = build_state(files=["README.md"])
        assert await engine.get_current_step(True, state) is TutorialStep.MAKE_COMMIT

    async def test_root_commit_with_empty_parents(self):
        """Empty-string parents are not real parents."""
        engine, _, _ = make_engine()
        state = build_state(parent_shas=["", ""])
        assert engine.has_multiple_commits(state) is False
        assert await engine.get_current_step(True, state) is TutorialStep.EDIT_FILE

    async def test_commit_counts_as_changed_file(self):
        """After committing, a clean working directory still passes EditFile."""
        engine, _, _ = make_engine()
        state = build_state(parent_shas=[PARENT_SHA])
        assert engine.has_changed_file(state) is True
        assert await engine.get_current_step(True, state) is TutorialStep.PUSH_BRANCH

    async def test_push_branch_without_upstream(self):
        engine, _, _ = make_engine()
        state = build_state(parent_shas=[PARENT_SHA], ahead_behind=None)
        assert await engine.get_current_step(True, state) is TutorialStep.PUSH_BRANCH

    async def test_push_branch_when_ahead(self):
        engine, _, _ = make_engine()
        state = build_state(parent_shas=[PARENT_SHA], ahead_behind=AheadBehind(ahead=1, behind=0))
        assert await engine.get_current_step(True, state) is TutorialStep.PUSH_BRANCH

    async def test_open_pull_request_when_pushed(self):
        """Being behind does not matter, only ahead == 0."""
        engine, _, _ = make_engine()
        state = build_state(parent_shas=[PARENT_SHA], ahead_behind=AheadBehind(ahead=0, behind=5))
        assert await engine.get_current_step(True, state) is TutorialStep.OPEN_PULL_REQUEST

    async def test_all_done_with_pull_request(self):
        engine, _, _ = make_engine()
        state = build_state(
            parent_shas=[PARENT_SHA],
            ahead_behind=AheadBehind(ahead=0, behind=0),
            pull_request=PullRequestRef(number=1)
        )
        assert await engine.get_current_step(True, state) is TutorialStep.ALL_DONE

    async def test_all_done_with_skipped_pull_request(self):
        engine, _, _ = make_engine()
        engine.skip_create_pr()
        state = build_state(parent_shas=[PARENT_SHA], ahead_behind=AheadBehind(ahead=0, behind=0))
        assert await engine.get_current_step(True, state) is TutorialStep.ALL_DONE

    async def test_same_inputs_same_step(self):
        engine, _, _ = make_engine()
        state = build_state(files=["a.txt"])
        first = await engine.get_current_step(True, state)
        second = await engine.get_current_step(True, state)
        assert first is second is TutorialStep.MAKE_COMMIT


# =============================================================================
# Predicates
# =============================================================================

class TestPredicates:

    @pytest.mark.parametrize("ahead_behind,expected", [
        (AheadBehind(ahead=0, behind=5), True),
        (AheadBehind(ahead=0, behind=0), True),
        (AheadBehind(ahead=1, behind=0), False),
        (None, False),
    ])
    def test_commit_pushed(self, ahead_behind, expected):
        engine, _, _ = make_engine()
        assert engine.commit_pushed(build_state(ahead_behind=ahead_behind)) is expected

    def test_multiple_commits_needs_valid_tip(self):
        engine, _, _ = make_engine()
        state = build_state(tip_kind=TipState.DETACHED, parent_shas=[PARENT_SHA])
        assert engine.has_multiple_commits(state) is False

    def test_mixed_parents(self):
        engine, _, _ = make_engine()
        assert engine.has_multiple_commits(build_state(parent_shas=["", PARENT_SHA])) is True

    def test_branch_checked_out(self):
        engine, _, _ = make_engine()
        assert engine.is_branch_checked_out(build_state(branch="feature")) is True
        assert engine.is_branch_checked_out(build_state(branch="main")) is False


# =============================================================================
# Skip flags
# =============================================================================

class TestSkipFlags:

    def test_default_false(self):
        engine, _, _ = make_engine()
        assert engine.install_editor_skipped is False
        assert engine.create_pr_skipped is False

    def test_read_from_store_at_construction(self):
        store = InMemoryFlagStore({
            SKIP_INSTALL_EDITOR_KEY: True,
            SKIP_CREATE_PULL_REQUEST_KEY: True,
        })
        engine, _, _ = make_engine(store=store)
        assert engine.install_editor_skipped is True
        assert engine.create_pr_skipped is True

    def test_skip_install_editor_persists(self):
        engine, _, store = make_engine()
        engine.skip_install_editor()
        assert engine.install_editor_skipped is True
        assert store.writes == [(SKIP_INSTALL_EDITOR_KEY, True)]

    def test_skip_create_pr_persists(self):
        engine, _, store = make_engine()
        engine.skip_create_pr()
        assert engine.create_pr_skipped is True
        assert store.writes == [(SKIP_CREATE_PULL_REQUEST_KEY, True)]

    def test_skips_survive_a_new_engine(self):
        store = InMemoryFlagStore()
        first, _, _ = make_engine(store=store)
        first.skip_install_editor()
        first.skip_create_pr()

        second, _, _ = make_engine(store=store)
        assert second.install_editor_skipped is True
        assert second.create_pr_skipped is True

    def test_skip_create_pr_is_monotonic(self):
        """Once skipped, every snapshot counts as having a pull request."""
        engine, _, _ = make_engine()
        engine.skip_create_pr()
        engine.skip_create_pr()

        assert engine.pull_request_created(build_state(pull_request=None)) is True
        assert engine.pull_request_created(build_state(pull_request=PullRequestRef(number=3))) is True
        assert engine.create_pr_skipped is True
