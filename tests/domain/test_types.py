"""Tests for input kinds and the submission lifecycle."""

from formkit.domain.types import (
    SUBMIT_TRANSITIONS,
    InputKind,
    SubmitPhase,
    is_list_name,
    is_valid_transition,
)


class TestInputKind:
    def test_members(self) -> None:
        assert {k.value for k in InputKind} == {
            "text",
            "digit-code",
            "phone",
            "radio",
            "radio-group",
        }


class TestSubmitPhase:
    def test_transitions(self) -> None:
        assert is_valid_transition("idle", "validating", SUBMIT_TRANSITIONS)
        assert is_valid_transition("validating", "submitting", SUBMIT_TRANSITIONS)
        assert is_valid_transition("validating", "idle", SUBMIT_TRANSITIONS)
        assert is_valid_transition("submitting", "idle", SUBMIT_TRANSITIONS)

    def test_cannot_skip_validation(self) -> None:
        assert not is_valid_transition("idle", "submitting", SUBMIT_TRANSITIONS)
        assert not is_valid_transition(SubmitPhase.SUBMITTING, "validating", SUBMIT_TRANSITIONS)


class TestIsListName:
    def test_list_suffix(self) -> None:
        assert is_list_name("tags[]")

    def test_plain_names(self) -> None:
        assert not is_list_name("tags")
        assert not is_list_name("")
        assert not is_list_name(None)
