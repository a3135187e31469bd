"""
Git Integration — The single boundary where stashmark talks to git

Every git call goes through GitRunner.run():
- Returns stdout, stderr and exit code for expected exit codes
- Raises GitError for anything else, keeping both streams
- classify_failure() decides whether a failure is a known, benign
  condition (e.g. no stash ref yet) or a real problem
"""

import logging
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass
class GitResult:
    """Outcome of a git invocation that exited with an expected code."""
    stdout: str
    stderr: str
    exit_code: int


class GitError(Exception):
    """git failed to start, or exited with an unexpected code."""

    def __init__(
        self,
        message: str,
        command: Optional[List[str]] = None,
        exit_code: Optional[int] = None,
        stdout: str = "",
        stderr: str = ""
    ):
        super().__init__(message)
        self.message = message
        self.command = command or []
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr

    @classmethod
    def from_result(cls, command: List[str], result: GitResult) -> 'GitError':
        message = (
            result.stderr.strip()
            or result.stdout.strip()
            or f"git {' '.join(command[:1])} exited with code {result.exit_code}"
        )
        return cls(
            message,
            command=command,
            exit_code=result.exit_code,
            stdout=result.stdout,
            stderr=result.stderr
        )


class FailureKind(Enum):
    """How a git failure should be treated by the caller."""
    BENIGN = "benign"
    UNEXPECTED = "unexpected"


def classify_failure(message: str, expected: Iterable[str]) -> FailureKind:
    """
    Classify failure text against known benign diagnostics.

    Matching is by substring: git appends context (paths, hints) to its
    fatal messages, so exact comparison would miss them.
    """
    if any(marker in message for marker in expected):
        return FailureKind.BENIGN
    return FailureKind.UNEXPECTED


class GitRunner:
    """Runs git commands in one repository."""

    def __init__(self, repo_path: Optional[Path] = None, executable: str = "git"):
        """
        Args:
            repo_path: Path to git repository. If None, uses current directory.
            executable: git binary to invoke
        """
        self.repo_path = Path(repo_path) if repo_path else Path.cwd()
        self.executable = executable

    @property
    def is_git_repo(self) -> bool:
        """Check if repo_path is inside a git work tree."""
        try:
            result = self.run(["rev-parse", "--is-inside-work-tree"], name="isGitRepository")
        except GitError:
            return False
        return result.stdout.strip() == "true"

    def run(
        self,
        args: List[str],
        name: Optional[str] = None,
        success_exit_codes: Sequence[int] = (0,)
    ) -> GitResult:
        """
        Run a git command and return its result.

        Args:
            args: Arguments after the git executable
            name: Short label for logs
            success_exit_codes: Exit codes that are not failures

        Raises:
            GitError: git could not be started or exited with another code
        """
        label = name or (args[0] if args else "git")
        logger.debug("git %s: %s", label, " ".join(args), extra={"repo": str(self.repo_path)})

        try:
            proc = subprocess.run(
                [self.executable] + list(args),
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace"
            )
        except OSError as e:
            raise GitError(f"Could not run git: {e}", command=list(args)) from e

        result = GitResult(stdout=proc.stdout, stderr=proc.stderr, exit_code=proc.returncode)

        if result.exit_code not in success_exit_codes:
            logger.debug(
                "git %s exited with %d: %s", label, result.exit_code, result.stderr.strip(),
                extra={"repo": str(self.repo_path)}
            )
            raise GitError.from_result(list(args), result)

        return result
