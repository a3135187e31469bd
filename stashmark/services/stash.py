"""
Stash Tracking — Mark, discover and recover stash entries we created

Stash entries created by stashmark carry a marker message:

    !!Stashmark<branch@tipsha>

Listing reads the stash reflog, keeps only entries whose subject carries
the marker, and reports them newest first (git's own order). A repository
with no stash ref at all is not an error: it simply has no entries.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from .git import GitError, GitRunner, FailureKind, classify_failure

logger = logging.getLogger(__name__)


STASH_ENTRY_MARKER = "!!Stashmark"

# git's fatal message when refs/stash does not exist yet
EXPECTED_MISSING_STASH_MESSAGES = ["fatal: ambiguous argument 'refs/stash'"]

# <stash commit sha>@<reflog subject>
STASH_LINE_FORMAT = "%H@%gs"
STASH_LINE_RE = re.compile(r"^([0-9a-f]{40})@(.+)$")

# <reflog selector>@<stash commit sha>, e.g. stash@{2}@<sha>
STASH_REF_FORMAT = "%gd@%H"

# Tip token accepts upper case too; kept as-is so existing entries keep matching
STASH_MESSAGE_RE = re.compile(
    r"^" + re.escape(STASH_ENTRY_MARKER) + r"<(.+)@([0-9a-zA-Z]{40})>$"
)


class StashError(Exception):
    """A stash operation did not do what was asked."""


@dataclass(frozen=True)
class StashEntry:
    """A stash entry created by stashmark."""
    branch_name: str  # Branch checked out when the entry was created
    stash_sha: str    # Commit object git created for the stash


def create_stash_message(branch_name: str, tip_sha: str) -> str:
    """Build the marker message for a new stash entry."""
    return f"{STASH_ENTRY_MARKER}<{branch_name}@{tip_sha}>"


def extract_branch_from_message(message: str) -> Optional[str]:
    """
    Get the branch name out of a reflog subject, if it carries our marker.

    Subjects look like "On main: !!Stashmark<main@...>"; the marker is the
    second colon-separated segment.
    """
    segments = [s.strip() for s in message.split(":")]
    if len(segments) < 2:
        return None

    match = STASH_MESSAGE_RE.match(segments[1])
    if match is None:
        return None

    branch_name = match.group(1)
    return branch_name if branch_name else None


def parse_stash_line(line: str) -> Optional[StashEntry]:
    """
    Decode one line of `git log -g refs/stash --pretty=%H@%gs`.

    Returns None for malformed lines and for entries we did not create.
    """
    match = STASH_LINE_RE.match(line)
    if match is None:
        return None

    branch_name = extract_branch_from_message(match.group(2))
    if branch_name is None:
        return None

    return StashEntry(branch_name=branch_name, stash_sha=match.group(1))


def _read_stash_log(git: GitRunner, pretty: str, name: str) -> Optional[str]:
    """
    Read the stash reflog in the given format.

    Returns None when the repository has no stash ref. Other git
    failures are raised unchanged.
    """
    try:
        result = git.run(["log", "-g", "refs/stash", f"--pretty={pretty}"], name=name)
    except GitError as e:
        if classify_failure(e.message, EXPECTED_MISSING_STASH_MESSAGES) is FailureKind.UNEXPECTED:
            raise
        logger.debug("No stash ref in repository; treating as empty")
        return None
    return result.stdout


def list_owned_entries(git: GitRunner) -> List[StashEntry]:
    """
    Get the stash entries created by stashmark, newest first.

    Raises:
        GitError: for any git failure other than a missing stash ref
    """
    output = _read_stash_log(git, STASH_LINE_FORMAT, "getStashEntries")
    if output is None:
        return []

    entries = []
    for line in output.split("\n"):
        entry = parse_stash_line(line)
        if entry is not None:
            entries.append(entry)

    return entries


def get_last_owned_entry_for_branch(git: GitRunner, branch_name: str) -> Optional[StashEntry]:
    """Most recent entry stashmark created on the given branch."""
    for entry in list_owned_entries(git):
        if entry.branch_name == branch_name:
            return entry
    return None


def create_owned_stash_entry(git: GitRunner, branch_name: str, tip_sha: str) -> None:
    """
    Stash the working directory changes for the current branch.

    Anything on stderr counts as failure, even with a zero exit code.
    With nothing to stash git exits zero and creates no entry, so callers
    check for pending changes first.

    Raises:
        StashError: git wrote diagnostics; the message is git's stderr
        GitError: git exited with a non-zero code
    """
    message = create_stash_message(branch_name, tip_sha)
    result = git.run(["stash", "push", "-m", message], name="createStashEntry")

    if result.stderr != "":
        raise StashError(result.stderr)

    logger.info("Created stash entry for %s at %s", branch_name, tip_sha[:8])


def find_stash_ref(git: GitRunner, stash_sha: str) -> Optional[str]:
    """Reflog selector (stash@{n}) of the entry with the given SHA."""
    output = _read_stash_log(git, STASH_REF_FORMAT, "getStashRef")
    if output is None:
        return None

    for line in output.split("\n"):
        ref, sep, sha = line.rpartition("@")
        if sep and ref and sha == stash_sha:
            return ref

    return None


def drop_stash_entry(git: GitRunner, stash_sha: str) -> None:
    """Remove a stash entry. Does nothing if it no longer exists."""
    ref = find_stash_ref(git, stash_sha)
    if ref is None:
        logger.debug("Stash entry %s not found; nothing to drop", stash_sha[:8])
        return

    git.run(["stash", "drop", ref], name="dropStashEntry")
    logger.info("Dropped stash entry %s (%s)", ref, stash_sha[:8])


def pop_stash_entry(git: GitRunner, stash_sha: str) -> None:
    """
    Apply a stash entry to the working directory and remove it.

    Raises:
        StashError: no stash entry has that SHA
        GitError: git could not apply the entry (e.g. conflicts)
    """
    ref = find_stash_ref(git, stash_sha)
    if ref is None:
        raise StashError(f"No stash entry found for {stash_sha}")

    git.run(["stash", "pop", "--quiet", ref], name="popStashEntry")
    logger.info("Restored stash entry %s (%s)", ref, stash_sha[:8])
