"""Google Gemini adapter over the generateContent REST endpoint.

The conversation is flattened into a single prompt string:

    User: first question
    Assistant: first answer
    User: new message
    Assistant:
"""

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from chatbridge.models.schemas import FailureKind, HistoryTurn, Provider
from chatbridge.providers.base import ChatProvider, trim_history
from chatbridge.providers.config import ProviderSettings
from chatbridge.providers.normalizer import ErrorRule

logger = logging.getLogger(__name__)

GEMINI_ERROR_RULES = (
    ErrorRule(
        ("API_KEY_INVALID",),
        401,
        FailureKind.UNAUTHORIZED,
        "Invalid API key. Please check your Gemini API key configuration.",
    ),
    ErrorRule(
        ("QUOTA_EXCEEDED", "RESOURCE_EXHAUSTED"),
        429,
        FailureKind.RATE_LIMITED,
        "API quota exceeded. Please try again later.",
    ),
    ErrorRule(
        ("SAFETY",),
        400,
        FailureKind.CONTENT_POLICY,
        "Content was blocked due to safety concerns. Please rephrase your message.",
    ),
)


CLEAN_FINISH_REASONS = frozenset({"STOP", "MAX_TOKENS"})


class GeminiError(Exception):
    """Raised when the Gemini API rejects a request or blocks a reply."""

    pass


def build_prompt(message: str, history: Sequence[HistoryTurn]) -> str:
    """Render recent history and the new message as one prompt."""
    lines = [
        f"{'User' if turn.role == 'user' else 'Assistant'}: {turn.content}"
        for turn in trim_history(history)
    ]
    context = "\n".join(lines) + "\n" if lines else ""
    return context + f"User: {message}\nAssistant:"


def _describe_http_error(response: httpx.Response) -> str:
    """Format an error response as '[code STATUS] message (REASON, ...)'."""
    try:
        body = response.json()
    except ValueError:
        return f"[{response.status_code}] {response.text[:500]}"

    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, dict):
        error = {}
    status = error.get("status", "")
    message = error.get("message") or response.reason_phrase
    reasons = [
        detail["reason"]
        for detail in error.get("details", [])
        if isinstance(detail, dict) and detail.get("reason")
    ]

    label = f"{response.status_code} {status}".strip()
    text = f"[{label}] {message}"
    if reasons:
        text += f" ({', '.join(reasons)})"
    return text


def extract_text(data: dict[str, Any]) -> str:
    """Pull the reply text out of a generateContent response.

    Raises:
        GeminiError: If the prompt was blocked, or the first candidate has no
            text and stopped for anything other than STOP or MAX_TOKENS.
    """
    block_reason = (data.get("promptFeedback") or {}).get("blockReason")
    if block_reason:
        raise GeminiError(f"Response was blocked due to {block_reason}")

    candidates = data.get("candidates") or []
    if not candidates:
        return ""

    candidate = candidates[0]
    parts = (candidate.get("content") or {}).get("parts") or []
    text = "".join(part.get("text") or "" for part in parts)

    finish_reason = candidate.get("finishReason")
    if not text and finish_reason and finish_reason not in CLEAN_FINISH_REASONS:
        raise GeminiError(f"Candidate was blocked due to {finish_reason}")
    return text


class GeminiProvider(ChatProvider):
    """Client for Gemini's generateContent API."""

    provider = Provider.GEMINI
    error_rules = GEMINI_ERROR_RULES

    def __init__(
        self,
        api_key: str,
        settings: ProviderSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(api_key, settings)
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self._settings.gemini_base_url}/{self._settings.gemini_model}:generateContent"

    async def send(self, message: str, history: Sequence[HistoryTurn]) -> str:
        """Generate a single-turn reply from the flattened prompt.

        Raises:
            GeminiError: On a non-2xx response or a blocked reply.
            httpx.RequestError: If the API cannot be reached.
        """
        prompt = build_prompt(message, history)
        payload = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        logger.debug(f"Gemini request: model={self._settings.gemini_model}")

        async with httpx.AsyncClient(
            timeout=self._settings.timeout, transport=self._transport
        ) as client:
            response = await client.post(
                self.url,
                json=payload,
                headers={"x-goog-api-key": self._api_key},
            )

        if response.is_error:
            raise GeminiError(_describe_http_error(response))

        return extract_text(response.json())
