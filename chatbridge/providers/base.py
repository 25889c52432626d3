"""Common interface for chat providers."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from chatbridge.models.schemas import HistoryTurn, Provider
from chatbridge.providers.config import ProviderSettings
from chatbridge.providers.normalizer import ErrorRule

HISTORY_LIMIT = 10

SYSTEM_PROMPT = (
    "You are a helpful AI assistant. Provide clear, accurate, and helpful "
    "responses to user questions."
)


def trim_history(
    history: Sequence[HistoryTurn], limit: int = HISTORY_LIMIT
) -> list[HistoryTurn]:
    """Keep only the most recent turns, oldest first."""
    if limit <= 0:
        return []
    return list(history[-limit:])


class ChatProvider(ABC):
    """Send one chat turn to an upstream LLM and return the reply text.

    Implementations raise on any failure; the caller classifies the error
    with ``error_rules``.
    """

    provider: Provider
    error_rules: tuple[ErrorRule, ...] = ()

    def __init__(self, api_key: str, settings: ProviderSettings) -> None:
        self._api_key = api_key
        self._settings = settings

    @abstractmethod
    async def send(self, message: str, history: Sequence[HistoryTurn]) -> str:
        """Generate a reply to ``message`` given the earlier ``history``."""
