"""Unit tests for the Pydantic data model."""

import itertools

import pytest
import pytest_check as check
from pydantic import ValidationError

from attrangi.models.schemas import (
    PHASE_ORDER,
    AgeRange,
    ChatRequest,
    Message,
    Phase,
    PhaseBlock,
    Profile,
    Role,
    SupportStyle,
)


class TestProfile:
    """Tests for Profile validation and wire form."""

    def test_empty_profile_serializes_unset_fields_as_empty_strings(self) -> None:
        """Unset enum fields travel as empty strings."""
        data = Profile().model_dump(mode="json")

        assert data == {
            "name": "",
            "age_range": "",
            "role": "",
            "topic_focus": [],
            "support_style": "",
        }

    def test_empty_strings_parse_as_unset(self) -> None:
        """Empty wire values load back as None."""
        profile = Profile.model_validate({"age_range": "", "role": "", "support_style": ""})

        check.is_none(profile.age_range)
        check.is_none(profile.role)
        check.is_none(profile.support_style)

    def test_support_style_uses_spaced_wire_values(self) -> None:
        """Multi-word support styles are sent with spaces."""
        profile = Profile(support_style=SupportStyle.HELP_ME_THINK, age_range=AgeRange.OVER_50)
        data = profile.model_dump(mode="json")

        check.equal(data["support_style"], "help me think")
        check.equal(data["age_range"], "50+")

    def test_topics_are_deduplicated_in_selection_order(self) -> None:
        """Repeated topics collapse to their first occurrence."""
        profile = Profile(topic_focus=["health", "myself", "health"])

        assert profile.topic_focus == ("health", "myself")

    def test_rejects_unknown_enum_value(self) -> None:
        """Values outside the fixed buckets are rejected."""
        with pytest.raises(ValidationError):
            Profile(age_range="99+")

    def test_profile_is_frozen(self) -> None:
        """A Profile cannot be edited in place."""
        profile = Profile()

        with pytest.raises(ValidationError):
            profile.name = "Sam"


class TestMessage:
    """Tests for Message invariants and phase ordering."""

    def test_user_message_cannot_carry_blocks(self) -> None:
        """Phase blocks are assistant-only."""
        with pytest.raises(ValidationError, match="Only assistant messages"):
            Message(
                role=Role.USER,
                content="hi",
                blocks=[PhaseBlock(phase=Phase.IMMEDIATE, text="hi")],
            )

    def test_message_without_blocks(self) -> None:
        """Content is the sole render source when blocks are absent."""
        message = Message(role=Role.ASSISTANT, content="plain reply")

        check.is_false(message.has_blocks)
        check.equal(message.ordered_blocks(), [])

    @pytest.mark.parametrize("size", [1, 2, 3])
    def test_presentation_order_ignores_array_order(self, size: int) -> None:
        """Every subset in every order presents as immediate, context, deep."""
        for subset in itertools.combinations(PHASE_ORDER, size):
            for arrangement in itertools.permutations(subset):
                message = Message(
                    role=Role.ASSISTANT,
                    content="x",
                    blocks=[PhaseBlock(phase=p, text=p.value) for p in arrangement],
                )
                ordered = [b.phase for b in message.ordered_blocks()]
                check.equal(ordered, list(subset))

    def test_first_block_per_phase_wins(self) -> None:
        """Duplicate phase tags keep the first block."""
        message = Message(
            role=Role.ASSISTANT,
            content="x",
            blocks=[
                PhaseBlock(phase=Phase.DEEP, text="first"),
                PhaseBlock(phase=Phase.DEEP, text="second"),
            ],
        )

        assert message.phase_map()[Phase.DEEP].text == "first"

    def test_parses_wire_form(self) -> None:
        """Backend JSON with string tags loads into enums."""
        message = Message.model_validate(
            {"role": "assistant", "content": "x", "blocks": [{"text": "x", "phase": "context"}]}
        )

        check.equal(message.role, Role.ASSISTANT)
        check.equal(message.blocks[0].phase, Phase.CONTEXT)


class TestChatRequest:
    """Tests for ChatRequest validation."""

    def test_strips_message(self) -> None:
        """Surrounding whitespace is removed."""
        assert ChatRequest(session_id="s", message="  hi  ").message == "hi"

    def test_rejects_whitespace_only_message(self) -> None:
        """Whitespace-only messages fail min_length after stripping."""
        with pytest.raises(ValidationError):
            ChatRequest(session_id="s", message="   ")
