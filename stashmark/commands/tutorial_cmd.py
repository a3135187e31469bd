"""
TutorialCommand — Show onboarding progress and record skips

The current step comes from OnboardingStepEngine; this module only reads
the repository snapshot and prints the result.
"""

import asyncio
from typing import Optional

from ..commands.base import BaseCommand
from ..core.state import PullRequestRef
from ..presentation.symbols import safe_print
from ..services.snapshot import read_repository_state
from ..tracking.tutorial import TutorialStep

# What to do next for each step
STEP_HINTS = {
    TutorialStep.PICK_EDITOR: "Install an editor, or skip with: stashmark tutorial skip editor",
    TutorialStep.CREATE_BRANCH: "Create and check out a new branch",
    TutorialStep.EDIT_FILE: "Open a file in your editor and change it",
    TutorialStep.MAKE_COMMIT: "Commit your change",
    TutorialStep.PUSH_BRANCH: "Push your branch to the remote",
    TutorialStep.OPEN_PULL_REQUEST: "Open a pull request, or skip with: stashmark tutorial skip pull-request",
    TutorialStep.ALL_DONE: "You're done!",
}

STEP_TITLES = {
    TutorialStep.PICK_EDITOR: "Install an editor",
    TutorialStep.CREATE_BRANCH: "Create a branch",
    TutorialStep.EDIT_FILE: "Edit a file",
    TutorialStep.MAKE_COMMIT: "Make a commit",
    TutorialStep.PUSH_BRANCH: "Push to the remote",
    TutorialStep.OPEN_PULL_REQUEST: "Open a pull request",
}


class TutorialCommand(BaseCommand):
    """Command handler for the onboarding tutorial."""

    def current_step(
        self,
        is_tutorial_repo: bool,
        pull_request: Optional[int] = None
    ) -> TutorialStep:
        """Read the repository and evaluate the current step."""
        pr_ref = PullRequestRef(number=pull_request) if pull_request is not None else None
        state = read_repository_state(
            self.git,
            default_branch=self.config.tutorial.default_branch,
            current_pull_request=pr_ref
        )
        return asyncio.run(self.tutorial.get_current_step(is_tutorial_repo, state))

    def status(self, force_tutorial: bool = False, pull_request: Optional[int] = None):
        """Print tutorial progress."""
        symbols = self.symbols
        is_tutorial_repo = force_tutorial or self.config.tutorial.enabled

        step = self.current_step(is_tutorial_repo, pull_request)

        if step is TutorialStep.NOT_APPLICABLE:
            print("This repository is not the tutorial repository.")
            print("Enable it with: stashmark config --set tutorial.enabled true")
            return

        print("Tutorial progress:")
        for candidate, title in STEP_TITLES.items():
            if candidate < step:
                marker = symbols.step_done
            elif candidate == step:
                marker = symbols.step_current
            else:
                marker = symbols.step_pending
            safe_print(f"  {marker} {title}")

        print()
        safe_print(f"{symbols.arrow} {STEP_HINTS[step]}")

    def skip(self, what: str):
        """Skip the install-editor or pull-request step."""
        symbols = self.symbols

        if what == 'editor':
            self.tutorial.skip_install_editor()
            safe_print(f"{symbols.check_pass} Install editor step skipped.")
        elif what == 'pull-request':
            self.tutorial.skip_create_pr()
            safe_print(f"{symbols.check_pass} Pull request step skipped.")
        else:
            print(f"Unknown step: {what}. Valid: editor, pull-request")


# =============================================================================
# Command Registration (self-registration pattern)
# =============================================================================

COMMAND_NAME = 'tutorial'


def register_parser(subparsers):
    """Register tutorial command parser."""
    p = subparsers.add_parser('tutorial', help='Onboarding tutorial progress')
    tutorial_sub = p.add_subparsers(dest='tutorial_command')

    status = tutorial_sub.add_parser('status', help='Show the current tutorial step')
    status.add_argument('--tutorial', action='store_true',
                        help='Treat this repository as the tutorial repository')
    status.add_argument('--pull-request', type=int, metavar='NUMBER',
                        help='Open pull request number for the current branch')

    skip = tutorial_sub.add_parser('skip', help='Skip a tutorial step')
    skip.add_argument('step', choices=['editor', 'pull-request'])

    return p


def handle(cli, args):
    """Handle tutorial command dispatch."""
    if args.tutorial_command == 'status':
        cli._tutorial_cmd.status(force_tutorial=args.tutorial, pull_request=args.pull_request)
    elif args.tutorial_command == 'skip':
        cli._tutorial_cmd.skip(args.step)
    else:
        print("Usage: stashmark tutorial {status|skip}")
