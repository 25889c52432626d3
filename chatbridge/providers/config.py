"""Provider configuration with environment variable loading.

Pydantic-based settings for the OpenAI and Gemini adapters. Settings are
built per request so that credentials set after startup are picked up.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from chatbridge.models.schemas import Provider

# Load environment variables from .env file
load_dotenv()

DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

API_KEY_ENV_VARS: dict[Provider, str] = {
    Provider.OPENAI: "OPENAI_API_KEY",
    Provider.GEMINI: "GEMINI_API_KEY",
}


class ProviderSettings(BaseModel):
    """Configuration shared by the chat provider adapters.

    Attributes:
        openai_api_key: OpenAI credential (empty when unconfigured).
        gemini_api_key: Gemini credential (empty when unconfigured).
        openai_model: Chat completion model identifier.
        gemini_model: generateContent model identifier.
        gemini_base_url: Base URL of the Gemini models REST resource.
        temperature: Sampling temperature for OpenAI completions.
        max_tokens: Token ceiling for OpenAI completions.
        timeout: Seconds to wait for an upstream response.
    """

    openai_api_key: str = Field(
        default_factory=lambda: os.getenv("OPENAI_API_KEY", ""),
        description="API key for OpenAI",
    )
    gemini_api_key: str = Field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY", ""),
        description="API key for Google Gemini",
    )
    openai_model: str = Field(
        default_factory=lambda: os.getenv("OPENAI_MODEL", "gpt-3.5-turbo"),
        description="OpenAI model to use",
    )
    gemini_model: str = Field(
        default_factory=lambda: os.getenv("GEMINI_MODEL", "gemini-1.5-flash"),
        description="Gemini model to use",
    )
    gemini_base_url: str = Field(
        default_factory=lambda: os.getenv("GEMINI_BASE_URL", DEFAULT_GEMINI_BASE_URL),
        description="Gemini models endpoint",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for response generation",
    )
    max_tokens: int = Field(
        default=1000,
        ge=1,
        le=128000,
        description="Maximum tokens in generated response",
    )
    timeout: float = Field(
        default_factory=lambda: float(os.getenv("LLM_TIMEOUT", "60")),
        gt=0,
        description="Upstream request timeout in seconds",
    )

    @field_validator("openai_api_key", "gemini_api_key")
    @classmethod
    def strip_api_key(cls, v: str) -> str:
        """Strip whitespace so a blank key counts as unconfigured."""
        return (v or "").strip()

    @field_validator("gemini_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    def api_key_for(self, provider: Provider) -> str | None:
        """Return the credential for a provider, or None if unset."""
        key = self.openai_api_key if provider is Provider.OPENAI else self.gemini_api_key
        return key or None


def get_provider_settings() -> ProviderSettings:
    """Create provider settings from the current environment.

    Returns:
        A fresh ProviderSettings instance.
    """
    return ProviderSettings()
