"""
Tests for stash tracking against real git repositories

SKIP CONDITIONS:
- Every test here skips if git is not installed (git_repo fixture)
"""

import subprocess

import pytest

from stashmark.services.git import GitRunner
from stashmark.services.stash import (
    list_owned_entries, create_owned_stash_entry,
    get_last_owned_entry_for_branch, pop_stash_entry, drop_stash_entry,
)


def git_out(repo, *args) -> str:
    return subprocess.run(
        ["git", *args], cwd=repo, capture_output=True, text=True, check=True
    ).stdout.strip()


@pytest.fixture
def runner(git_repo):
    return GitRunner(git_repo)


def test_fresh_repository_has_no_entries(runner):
    """No refs/stash yet: git fails, listing returns empty."""
    assert list_owned_entries(runner) == []


def test_create_then_list(git_repo, runner):
    tip = git_out(git_repo, "rev-parse", "HEAD")
    (git_repo / "README.md").write_text("# Changed\n")

    create_owned_stash_entry(runner, "main", tip)

    entries = list_owned_entries(runner)
    assert len(entries) == 1
    assert entries[0].branch_name == "main"
    assert entries[0].stash_sha == git_out(git_repo, "rev-parse", "stash@{0}")
    assert (git_repo / "README.md").read_text() == "# Test\n"


def test_foreign_entries_are_ignored(git_repo, runner):
    tip = git_out(git_repo, "rev-parse", "HEAD")

    (git_repo / "README.md").write_text("# Ours\n")
    create_owned_stash_entry(runner, "main", tip)

    (git_repo / "README.md").write_text("# Theirs\n")
    git_out(git_repo, "stash", "push", "-m", "someone else's work")

    entries = list_owned_entries(runner)
    assert [e.branch_name for e in entries] == ["main"]
    assert entries[0].stash_sha == git_out(git_repo, "rev-parse", "stash@{1}")


def test_pop_restores_changes(git_repo, runner):
    tip = git_out(git_repo, "rev-parse", "HEAD")
    (git_repo / "README.md").write_text("# Changed\n")
    create_owned_stash_entry(runner, "main", tip)

    entry = get_last_owned_entry_for_branch(runner, "main")
    pop_stash_entry(runner, entry.stash_sha)

    assert (git_repo / "README.md").read_text() == "# Changed\n"
    assert list_owned_entries(runner) == []


def test_drop_removes_entry(git_repo, runner):
    tip = git_out(git_repo, "rev-parse", "HEAD")
    (git_repo / "README.md").write_text("# Changed\n")
    create_owned_stash_entry(runner, "main", tip)

    entry = list_owned_entries(runner)[0]
    drop_stash_entry(runner, entry.stash_sha)

    assert list_owned_entries(runner) == []
    assert (git_repo / "README.md").read_text() == "# Test\n"


def test_foreign_entry_with_non_utf8_message(git_repo, runner):
    """A stash subject that is not valid UTF-8 is skipped, not fatal."""
    tip = git_out(git_repo, "rev-parse", "HEAD")

    (git_repo / "README.md").write_text("# Ours\n")
    create_owned_stash_entry(runner, "main", tip)

    (git_repo / "README.md").write_text("# Theirs\n")
    subprocess.run(
        ["git", "stash", "push", "-m", b"caf\xe9 work"],
        cwd=git_repo, capture_output=True, check=True
    )

    entries = list_owned_entries(runner)
    assert [e.branch_name for e in entries] == ["main"]

    pop_stash_entry(runner, entries[0].stash_sha)
    assert (git_repo / "README.md").read_text() == "# Ours\n"
    assert list_owned_entries(runner) == []
