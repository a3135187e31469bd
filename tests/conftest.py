"""
Shared pytest fixtures for the stashmark test suite.

Usage in tests:
    def test_something(fake_git):
        fake_git.on(["log", "-g", "refs/stash"], stdout="...")

    def test_with_real_git(git_repo):
        runner = GitRunner(git_repo)
"""

import subprocess

import pytest

from stashmark.config import ConfigManager
from tests.factories import FakeGit, InMemoryFlagStore


def git_is_available() -> bool:
    """Check if git is installed and working."""
    try:
        result = subprocess.run(
            ["git", "--version"],
            capture_output=True,
            text=True,
            timeout=5
        )
        return result.returncode == 0
    except (subprocess.SubprocessError, FileNotFoundError, OSError):
        return False


@pytest.fixture
def fake_git():
    """Scripted git runner with no responses registered."""
    return FakeGit()


@pytest.fixture
def flag_store():
    """Empty in-memory flag store."""
    return InMemoryFlagStore()


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point the user config at tmp_path and clear env overrides."""
    user_dir = tmp_path / "home" / ".stashmark"
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_DIR", user_dir)
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_FILE", user_dir / "config.yaml")
    monkeypatch.delenv("STASHMARK_EDITOR", raising=False)
    monkeypatch.delenv("STASHMARK_LOG_LEVEL", raising=False)
    return user_dir


@pytest.fixture
def git_repo(tmp_path):
    """Create a temporary git repository with one commit on main."""
    if not git_is_available():
        pytest.skip("Git is not available")

    repo = tmp_path / "repo"
    repo.mkdir()

    def git(*args):
        subprocess.run(["git", *args], cwd=repo, capture_output=True, check=True)

    try:
        git("init")
        git("checkout", "-b", "main")
        git("config", "user.email", "test@test.com")
        git("config", "user.name", "Test User")
        git("config", "commit.gpgsign", "false")

        (repo / "README.md").write_text("# Test\n")
        git("add", ".")
        git("commit", "-m", "Initial commit")
    except subprocess.CalledProcessError:
        pytest.skip("Could not create git repository")

    return repo
