"""Step-by-step Profile collection for new sessions."""

import logging
from enum import IntEnum

from attrangi.models.schemas import TOPIC_VOCABULARY, AgeRange, Profile, SupportStyle, UserRole

logger = logging.getLogger(__name__)


class OnboardingStep(IntEnum):
    """Wizard steps in the order they are shown."""

    ABOUT_YOU = 0
    FOCUS_TOPICS = 1
    SUPPORT_STYLE = 2


class OnboardingIncomplete(Exception):
    """Raised when onboarding is completed before a support style is chosen."""

    pass


class ProfileLocked(Exception):
    """Raised when a submitted Profile is edited without a reset."""

    pass


class ProfileBuilder:
    """Accumulates onboarding answers into a Profile.

    The draft is replaced on every answer; once completed the Profile is
    frozen and further edits are refused until reset().
    """

    def __init__(self) -> None:
        self.step: OnboardingStep = OnboardingStep.ABOUT_YOU
        self.profile: Profile = Profile()
        self.completed: bool = False

    def next(self) -> OnboardingStep:
        """Advance one step; no-op on the last step."""
        if self.step < OnboardingStep.SUPPORT_STYLE:
            self.step = OnboardingStep(self.step + 1)
        return self.step

    def back(self) -> OnboardingStep:
        """Retreat one step; no-op on the first step."""
        if self.step > OnboardingStep.ABOUT_YOU:
            self.step = OnboardingStep(self.step - 1)
        return self.step

    def set_name(self, name: str) -> None:
        self._update(name=name)

    def set_age_range(self, age_range: AgeRange | str | None) -> None:
        self._update(age_range=AgeRange(age_range) if age_range else None)

    def set_role(self, role: UserRole | str | None) -> None:
        self._update(role=UserRole(role) if role else None)

    def set_support_style(self, style: SupportStyle | str | None) -> None:
        self._update(support_style=SupportStyle(style) if style else None)

    def toggle_topic(self, topic: str) -> tuple[str, ...]:
        """Flip membership of a topic in the focus set.

        Args:
            topic: A topic from the fixed vocabulary.

        Returns:
            The updated topic selection.

        Raises:
            ValueError: If the topic is not in the vocabulary.
        """
        if topic not in TOPIC_VOCABULARY:
            raise ValueError(f"Unknown topic: {topic!r}")

        topics = self.profile.topic_focus
        if topic in topics:
            topics = tuple(t for t in topics if t != topic)
        else:
            topics = (*topics, topic)
        self._update(topic_focus=topics)
        return topics

    @property
    def can_complete(self) -> bool:
        return self.profile.support_style is not None and not self.completed

    def complete(self) -> Profile:
        """Freeze and return the collected Profile.

        Raises:
            OnboardingIncomplete: If no support style has been chosen.
        """
        if self.profile.support_style is None:
            raise OnboardingIncomplete("Choose a support style before finishing onboarding")
        self.completed = True
        logger.debug("Onboarding completed with support style %s", self.profile.support_style.value)
        return self.profile

    def reset(self) -> None:
        """Start over with an empty Profile at the first step."""
        self.step = OnboardingStep.ABOUT_YOU
        self.profile = Profile()
        self.completed = False

    def _update(self, **changes: object) -> None:
        if self.completed:
            raise ProfileLocked("Profile already submitted; reset to start over")
        self.profile = self.profile.model_copy(update=changes)
