"""OpenAI chat completions adapter."""

import logging
from collections.abc import Sequence

from openai import AsyncOpenAI
from openai.types.chat import ChatCompletionMessageParam

from chatbridge.models.schemas import FailureKind, HistoryTurn, Provider
from chatbridge.providers.base import SYSTEM_PROMPT, ChatProvider, trim_history
from chatbridge.providers.normalizer import ErrorRule

logger = logging.getLogger(__name__)

NO_RESPONSE_ERROR = "No response generated"

OPENAI_ERROR_RULES = (
    ErrorRule(("Invalid API key", "Incorrect API key"), 401, FailureKind.UNAUTHORIZED),
    ErrorRule(("quota exceeded", "rate limit"), 429, FailureKind.RATE_LIMITED),
    ErrorRule(("content_policy",), 400, FailureKind.CONTENT_POLICY),
)


def build_messages(
    message: str, history: Sequence[HistoryTurn]
) -> list[ChatCompletionMessageParam]:
    """Build the chat completion message list.

    System prompt first, then the recent history with roles preserved,
    then the new user message.
    """
    messages: list[ChatCompletionMessageParam] = [
        {"role": "system", "content": SYSTEM_PROMPT}
    ]
    for turn in trim_history(history):
        messages.append({"role": turn.role, "content": turn.content})
    messages.append({"role": "user", "content": message})
    return messages


class OpenAIProvider(ChatProvider):
    """Client for OpenAI's chat completions API."""

    provider = Provider.OPENAI
    error_rules = OPENAI_ERROR_RULES

    def _create_client(self) -> AsyncOpenAI:
        # A single attempt per turn; failures go straight back to the user.
        return AsyncOpenAI(
            api_key=self._api_key,
            timeout=self._settings.timeout,
            max_retries=0,
        )

    async def send(self, message: str, history: Sequence[HistoryTurn]) -> str:
        """Request a non-streaming completion and return the first choice.

        Raises:
            openai.OpenAIError: On any SDK or HTTP failure.
            RuntimeError: If the completion carries no text.
        """
        messages = build_messages(message, history)
        logger.debug(
            f"OpenAI request: model={self._settings.openai_model} messages={len(messages)}"
        )

        async with self._create_client() as client:
            completion = await client.chat.completions.create(
                model=self._settings.openai_model,
                messages=messages,
                max_tokens=self._settings.max_tokens,
                temperature=self._settings.temperature,
                stream=False,
            )

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise RuntimeError(NO_RESPONSE_ERROR)
        return content
