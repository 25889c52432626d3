"""Provider adapters for the upstream LLM APIs.

Responsibilities:
    - Resolving credentials and model settings per request
    - Translating a message plus history into each provider's request shape
    - Classifying upstream failures into a status code and message

Maintains clean separation from the HTTP layer.
"""

from chatbridge.providers.config import ProviderSettings, get_provider_settings
from chatbridge.providers.service import ChatService, get_chat_service

__all__ = ["ChatService", "ProviderSettings", "get_chat_service", "get_provider_settings"]
