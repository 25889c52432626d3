"""Request orchestration for the chat page.

Owns the current ``ChatState``, turns a submit into exactly one call to the
chat API and folds the outcome back into the conversation. A submit while a
call is in flight is ignored.
"""

import logging
import os
from collections.abc import Awaitable, Callable, Iterator, Sequence
from datetime import datetime

import httpx

from chatbridge.api.routes import ENDPOINTS, router
from chatbridge.models.schemas import ChatSuccess, HistoryTurn, Provider
from chatbridge.ui.state import (
    ChatState,
    begin_turn,
    complete_turn,
    fail_turn,
    message_ids,
    set_input,
)

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
REQUEST_TIMEOUT = 120.0

SendFn = Callable[[Provider, str, Sequence[HistoryTurn]], Awaitable[ChatSuccess]]


class ChatAPIError(Exception):
    """Raised when the chat API call does not produce a reply."""

    pass


def endpoint_for(provider: Provider) -> str:
    return f"{router.prefix}{ENDPOINTS[provider]}"


def _error_text(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), str) and body["error"]:
        return body["error"]
    return f"HTTP error! status: {response.status_code}"


async def call_chat_api(
    provider: Provider,
    message: str,
    history: Sequence[HistoryTurn],
    base_url: str = API_BASE_URL,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ChatSuccess:
    """POST one chat turn to the provider's endpoint.

    Args:
        provider: Which endpoint to call.
        message: The user's message.
        history: Earlier turns, oldest first.
        base_url: Root URL of the chat API.
        transport: Optional httpx transport (tests use ASGITransport).

    Returns:
        The reply text and server timestamp.

    Raises:
        ChatAPIError: On a non-2xx status, a connection failure or an
            unreadable response body.
    """
    payload = {
        "message": message,
        "history": [turn.model_dump() for turn in history],
    }
    async with httpx.AsyncClient(
        base_url=base_url, timeout=REQUEST_TIMEOUT, transport=transport
    ) as client:
        try:
            response = await client.post(endpoint_for(provider), json=payload)
        except httpx.RequestError as e:
            raise ChatAPIError(f"Connection failed: {e}") from e

    if response.is_error:
        raise ChatAPIError(_error_text(response))

    try:
        return ChatSuccess.model_validate(response.json())
    except ValueError as e:
        raise ChatAPIError(f"Invalid response from server: {e}") from e


class ChatOrchestrator:
    """Drives one conversation through idle and pending turns."""

    def __init__(
        self,
        send: SendFn = call_chat_api,
        state: ChatState | None = None,
        clock: Callable[[], datetime] = lambda: datetime.now().astimezone(),
        ids: Iterator[str] | None = None,
        on_change: Callable[[ChatState], None] | None = None,
    ) -> None:
        self._send = send
        self._state = state or ChatState()
        self._clock = clock
        self._ids = ids or message_ids()
        self._on_change = on_change

    @property
    def state(self) -> ChatState:
        return self._state

    def _update(self, state: ChatState) -> None:
        self._state = state
        if self._on_change is not None:
            self._on_change(state)

    def dispatch(self, reducer: Callable[..., ChatState], *args: object) -> ChatState:
        """Apply a reducer to the current state and publish the result."""
        self._update(reducer(self._state, *args))
        return self._state

    def update_input(self, text: str) -> None:
        """Track the input buffer without notifying; the field already shows it."""
        self._state = set_input(self._state, text)

    async def submit(self, text: str | None = None) -> bool:
        """Send the current input (or ``text``) as a new user message.

        Returns:
            True if a call was made, False if the submit was ignored.
        """
        if text is not None:
            self.update_input(text)

        state, turn = begin_turn(self._state, next(self._ids), self._clock())
        if turn is None:
            return False
        self._update(state)

        try:
            result = await self._send(turn.provider, turn.message, turn.history)
        except ChatAPIError as e:
            logger.warning(f"Error sending message to {turn.provider.value}: {e}")
            self._update(fail_turn(self._state, str(e), next(self._ids), self._clock()))
        except Exception as e:
            logger.exception(f"Unexpected error sending message to {turn.provider.value}")
            error = str(e) or type(e).__name__
            self._update(fail_turn(self._state, error, next(self._ids), self._clock()))
        else:
            self._update(complete_turn(self._state, result, next(self._ids)))
        return True
