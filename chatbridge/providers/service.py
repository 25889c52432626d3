"""Chat service bridging the HTTP layer and the provider adapters.

Architecture Decisions:

1. **Stateless calls** - Settings and SDK clients are created per request.
   Credentials exported after startup are honoured and concurrent sessions
   share nothing.

2. **Single interface, two providers** - The routes never touch a vendor
   SDK. They hand a message and history to ``ChatService.send`` and get back
   a ``ChatSuccess`` or ``ChatFailure``.

3. **Errors as values** - Every exception raised by an adapter is logged and
   classified by the normalizer. Nothing upstream escapes this module.

4. **No retries** - One attempt per turn; the user resubmits manually.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from chatbridge.models.schemas import (
    ChatFailure,
    ChatResult,
    ChatSuccess,
    FailureKind,
    HistoryTurn,
    Provider,
)
from chatbridge.providers.base import ChatProvider
from chatbridge.providers.config import (
    API_KEY_ENV_VARS,
    ProviderSettings,
    get_provider_settings,
)
from chatbridge.providers.gemini_provider import GeminiProvider
from chatbridge.providers.normalizer import normalize_error
from chatbridge.providers.openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)

INVALID_MESSAGE_ERROR = "Message is required and must be a string"

PROVIDER_CLASSES: dict[Provider, type[ChatProvider]] = {
    Provider.OPENAI: OpenAIProvider,
    Provider.GEMINI: GeminiProvider,
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ChatService:
    """Send chat turns to the selected provider and normalize the outcome."""

    def __init__(
        self,
        settings_factory: Callable[[], ProviderSettings] = get_provider_settings,
        providers: dict[Provider, type[ChatProvider]] | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the chat service.

        Args:
            settings_factory: Called on every request to resolve configuration.
            providers: Adapter class per provider. Defaults to the built-ins.
            clock: Source of success timestamps.
        """
        self._settings_factory = settings_factory
        self._providers = providers or PROVIDER_CLASSES
        self._clock = clock

    def _create_provider(self, provider: Provider) -> ChatProvider | ChatFailure:
        settings = self._settings_factory()
        api_key = settings.api_key_for(provider)
        if not api_key:
            env_var = API_KEY_ENV_VARS[provider]
            logger.error(f"{provider.label} API key is not configured ({env_var} unset)")
            return ChatFailure(
                error=(
                    f"{provider.label} API key is not configured. "
                    f"Please set {env_var} environment variable."
                ),
                status_code=500,
                kind=FailureKind.UNCONFIGURED,
            )
        return self._providers[provider](api_key, settings)

    async def send(
        self,
        message: object,
        history: Sequence[HistoryTurn],
        provider: Provider,
    ) -> ChatResult:
        """Send one user message to a provider.

        Args:
            message: The user's message. Must be a non-empty string.
            history: Earlier turns, oldest first. Only the tail is forwarded.
            provider: Which upstream to call.

        Returns:
            ChatSuccess with the reply text, or ChatFailure with a status code.
        """
        if not isinstance(message, str) or not message:
            logger.warning(f"Rejected {provider.value} chat request without a message")
            return ChatFailure(
                error=INVALID_MESSAGE_ERROR,
                status_code=400,
                kind=FailureKind.INVALID_INPUT,
            )

        adapter = self._create_provider(provider)
        if isinstance(adapter, ChatFailure):
            return adapter

        try:
            text = await adapter.send(message, history)
        except Exception as e:
            failure = normalize_error(e, adapter.error_rules)
            logger.error(
                f"Error in {provider.label} chat API ({failure.status_code}): {e!r}"
            )
            return failure

        logger.info(f"{provider.label} replied with {len(text)} characters")
        return ChatSuccess(message=text, timestamp=self._clock())


# Module-level singleton instance
_chat_service: ChatService | None = None


def get_chat_service() -> ChatService:
    """Get or create the global chat service.

    Returns:
        The ChatService instance.
    """
    global _chat_service
    if _chat_service is None:
        _chat_service = ChatService()
    return _chat_service
