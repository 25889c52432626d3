"""Client-side chat state and the reducers that move it between turns.

``ChatState`` is a frozen value. Every user action is a function from one
state to the next, so a turn (idle -> pending -> idle) can be exercised
without a browser.
"""

import time
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from chatbridge.models.schemas import ChatSuccess, HistoryTurn, Provider, Role

ERROR_REPLY_PREFIX = "Sorry, I encountered an error: "


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


_THEME_CYCLE = {Theme.LIGHT: Theme.DARK, Theme.DARK: Theme.SYSTEM, Theme.SYSTEM: Theme.LIGHT}


@dataclass(frozen=True)
class Message:
    """A message shown in the conversation."""

    id: str
    role: Role
    content: str
    timestamp: datetime

    def to_turn(self) -> HistoryTurn:
        return HistoryTurn(role=self.role, content=self.content)


@dataclass(frozen=True)
class ConversationLog:
    """Append-only, chronologically ordered conversation."""

    messages: tuple[Message, ...] = ()

    def append(self, message: Message) -> "ConversationLog":
        return ConversationLog(self.messages + (message,))

    def all(self) -> tuple[Message, ...]:
        return self.messages

    def clear(self) -> "ConversationLog":
        return ConversationLog()

    def __len__(self) -> int:
        return len(self.messages)


def message_ids() -> Iterator[str]:
    """Yield unique, strictly increasing ids based on the millisecond clock."""
    last = 0
    while True:
        last = max(int(time.time() * 1000), last + 1)
        yield str(last)


@dataclass(frozen=True)
class PendingTurn:
    """The outbound call a submit produced.

    Attributes:
        message: Trimmed user text.
        history: Conversation before this message, untrimmed.
        provider: Provider selected at submit time.
    """

    message: str
    history: tuple[HistoryTurn, ...]
    provider: Provider


@dataclass(frozen=True)
class ChatState:
    """Everything the chat page renders."""

    log: ConversationLog = field(default_factory=ConversationLog)
    input: str = ""
    is_loading: bool = False
    error: str | None = None
    provider: Provider = Provider.GEMINI
    theme: Theme = Theme.SYSTEM
    show_settings: bool = False

    @property
    def messages(self) -> tuple[Message, ...]:
        return self.log.all()


def set_input(state: ChatState, text: str) -> ChatState:
    return replace(state, input=text)


def select_provider(state: ChatState, provider: Provider) -> ChatState:
    return replace(state, provider=provider)


def cycle_theme(state: ChatState) -> ChatState:
    return replace(state, theme=_THEME_CYCLE[state.theme])


def toggle_settings(state: ChatState) -> ChatState:
    return replace(state, show_settings=not state.show_settings)


def dismiss_error(state: ChatState) -> ChatState:
    return replace(state, error=None)


def clear_chat(state: ChatState) -> ChatState:
    """Empty the conversation and hide the error banner."""
    return replace(state, log=state.log.clear(), error=None)


def begin_turn(
    state: ChatState, message_id: str, now: datetime
) -> tuple[ChatState, PendingTurn | None]:
    """Accept the current input as a user message.

    A blank input or a turn already in flight leaves the state unchanged
    and returns no pending turn.
    """
    text = state.input.strip()
    if not text or state.is_loading:
        return state, None

    turn = PendingTurn(
        message=text,
        history=tuple(m.to_turn() for m in state.messages),
        provider=state.provider,
    )
    user_message = Message(id=message_id, role="user", content=text, timestamp=now)
    next_state = replace(
        state,
        log=state.log.append(user_message),
        input="",
        is_loading=True,
        error=None,
    )
    return next_state, turn


def complete_turn(state: ChatState, result: ChatSuccess, message_id: str) -> ChatState:
    """Record the assistant's reply and return to idle."""
    reply = Message(
        id=message_id,
        role="assistant",
        content=result.message,
        timestamp=result.timestamp,
    )
    return replace(state, log=state.log.append(reply), is_loading=False)


def fail_turn(state: ChatState, error: str, message_id: str, now: datetime) -> ChatState:
    """Show the error in the banner and inline, then return to idle."""
    reply = Message(
        id=message_id,
        role="assistant",
        content=f"{ERROR_REPLY_PREFIX}{error}",
        timestamp=now,
    )
    return replace(state, log=state.log.append(reply), is_loading=False, error=error)
