"""Onboarding wizard that collects a Profile across ordered steps.

No external effects happen here; the Orchestrator submits the finished
Profile to the backend.
"""

from attrangi.onboarding.profile_builder import (
    OnboardingIncomplete,
    OnboardingStep,
    ProfileBuilder,
    ProfileLocked,
)

__all__ = ["OnboardingIncomplete", "OnboardingStep", "ProfileBuilder", "ProfileLocked"]
