"""
Tracking — Progress derived from repository state

- Tutorial: onboarding step engine (current step + skip flags)
"""

from .tutorial import (
    TutorialStep, OnboardingStepEngine,
    SKIP_INSTALL_EDITOR_KEY, SKIP_CREATE_PULL_REQUEST_KEY,
)

__all__ = [
    "TutorialStep", "OnboardingStepEngine",
    "SKIP_INSTALL_EDITOR_KEY", "SKIP_CREATE_PULL_REQUEST_KEY",
]
