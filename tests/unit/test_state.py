"""Unit tests for the chat state reducers."""

from dataclasses import FrozenInstanceError
from datetime import datetime, timezone
from itertools import islice

import pytest

from chatbridge.models.schemas import ChatSuccess, Provider
from chatbridge.ui.state import (
    ERROR_REPLY_PREFIX,
    ChatState,
    ConversationLog,
    Message,
    Theme,
    begin_turn,
    clear_chat,
    complete_turn,
    cycle_theme,
    dismiss_error,
    fail_turn,
    message_ids,
    select_provider,
    set_input,
    toggle_settings,
)

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _message(i: int, role: str = "user") -> Message:
    return Message(id=str(i), role=role, content=f"m{i}", timestamp=NOW)


class TestConversationLog:
    def test_append_preserves_order(self) -> None:
        log = ConversationLog().append(_message(1)).append(_message(2, "assistant"))

        assert [m.id for m in log.all()] == ["1", "2"]
        assert len(log) == 2

    def test_append_returns_new_log(self) -> None:
        empty = ConversationLog()

        empty.append(_message(1))

        assert empty.all() == ()

    def test_clear(self) -> None:
        log = ConversationLog().append(_message(1))

        assert log.clear().all() == ()

    def test_messages_are_immutable(self) -> None:
        with pytest.raises(FrozenInstanceError):
            _message(1).content = "edited"  # type: ignore[misc]


class TestMessageIds:
    def test_ids_are_unique_and_increasing(self) -> None:
        ids = [int(i) for i in islice(message_ids(), 50)]

        assert ids == sorted(set(ids))


class TestBeginTurn:
    def test_accepts_trimmed_input(self) -> None:
        state = set_input(ChatState(), "  What is 2+2?  ")

        next_state, turn = begin_turn(state, "1", NOW)

        assert turn is not None
        assert turn.message == "What is 2+2?"
        assert turn.history == ()
        assert turn.provider == Provider.GEMINI
        assert next_state.is_loading is True
        assert next_state.input == ""
        assert [(m.role, m.content) for m in next_state.messages] == [("user", "What is 2+2?")]

    def test_history_excludes_new_message_and_is_untrimmed(self) -> None:
        log = ConversationLog()
        for i in range(12):
            log = log.append(_message(i, "user" if i % 2 == 0 else "assistant"))
        state = ChatState(log=log, input="next")

        _, turn = begin_turn(state, "99", NOW)

        assert turn is not None
        assert len(turn.history) == 12
        assert turn.history[0].content == "m0"
        assert turn.history[-1].content == "m11"

    def test_clears_previous_error(self) -> None:
        state = ChatState(input="retry", error="old failure")

        next_state, _ = begin_turn(state, "1", NOW)

        assert next_state.error is None

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank_input_is_ignored(self, text: str) -> None:
        state = set_input(ChatState(), text)

        next_state, turn = begin_turn(state, "1", NOW)

        assert turn is None
        assert next_state is state

    def test_pending_turn_is_ignored(self) -> None:
        state, _ = begin_turn(set_input(ChatState(), "first"), "1", NOW)
        state = set_input(state, "second")

        next_state, turn = begin_turn(state, "2", NOW)

        assert turn is None
        assert next_state is state
        assert len(next_state.messages) == 1


class TestResolveTurn:
    def test_complete_turn_appends_reply(self) -> None:
        state, _ = begin_turn(set_input(ChatState(), "hi"), "1", NOW)
        reply_at = datetime(2024, 5, 1, 12, 0, 5, tzinfo=timezone.utc)

        state = complete_turn(state, ChatSuccess(message="hello", timestamp=reply_at), "2")

        assert state.is_loading is False
        assert state.error is None
        assistant = state.messages[-1]
        assert (assistant.id, assistant.role, assistant.content) == ("2", "assistant", "hello")
        assert assistant.timestamp == reply_at

    def test_fail_turn_sets_banner_and_inline_message(self) -> None:
        state, _ = begin_turn(set_input(ChatState(), "hi"), "1", NOW)

        state = fail_turn(state, "API quota exceeded.", "2", NOW)

        assert state.is_loading is False
        assert state.error == "API quota exceeded."
        assert state.messages[-1].role == "assistant"
        assert state.messages[-1].content == f"{ERROR_REPLY_PREFIX}API quota exceeded."


class TestSettingsReducers:
    def test_cycle_theme(self) -> None:
        state = ChatState(theme=Theme.LIGHT)

        themes = []
        for _ in range(3):
            state = cycle_theme(state)
            themes.append(state.theme)

        assert themes == [Theme.DARK, Theme.SYSTEM, Theme.LIGHT]

    def test_select_provider(self) -> None:
        assert select_provider(ChatState(), Provider.OPENAI).provider == Provider.OPENAI

    def test_toggle_settings(self) -> None:
        state = toggle_settings(ChatState())

        assert state.show_settings is True
        assert toggle_settings(state).show_settings is False

    def test_dismiss_error(self) -> None:
        assert dismiss_error(ChatState(error="x")).error is None

    def test_clear_chat_empties_log_and_error(self) -> None:
        state = ChatState(log=ConversationLog().append(_message(1)), error="x")

        state = clear_chat(state)

        assert state.messages == ()
        assert state.error is None
