from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, field_validator

Role = Literal["user", "assistant"]


class Provider(str, Enum):
    """Upstream LLM providers reachable through the chat API."""

    GEMINI = "gemini"
    OPENAI = "openai"

    @property
    def label(self) -> str:
        return "Gemini" if self is Provider.GEMINI else "OpenAI"


class FailureKind(str, Enum):
    """Classification of a failed chat turn."""

    INVALID_INPUT = "invalid_input"
    UNAUTHORIZED = "unauthorized"
    RATE_LIMITED = "rate_limited"
    CONTENT_POLICY = "content_policy"
    UNCONFIGURED = "unconfigured"
    UPSTREAM_FAILURE = "upstream_failure"


class HistoryTurn(BaseModel):
    """A prior turn of the conversation as sent by the client.

    Attributes:
        role: Who authored the turn (user or assistant).
        content: The turn text.
    """

    role: Role
    content: str


class ChatRequest(BaseModel):
    """Request payload for the chat endpoints.

    Attributes:
        message: The new user message.
        history: Earlier turns, oldest first. Trimmed server-side.
    """

    message: str = Field(..., min_length=1)
    history: list[HistoryTurn] = Field(default_factory=list)

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v: str) -> str:
        """Strip whitespace from message before validation."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("history", mode="before")
    @classmethod
    def default_history(cls, v: list | None) -> list:
        """Treat an explicit null history as empty."""
        return [] if v is None else v


class ChatResponse(BaseModel):
    """Successful chat reply.

    Attributes:
        message: The assistant's reply text.
        timestamp: When the reply was produced (ISO-8601 on the wire).
    """

    message: str
    timestamp: datetime


class ErrorResponse(BaseModel):
    """Error body shared by every non-2xx chat response."""

    error: str


class ChatSuccess(BaseModel):
    """Normalized outcome of a provider call that produced text."""

    message: str
    timestamp: datetime

    def to_response(self) -> ChatResponse:
        return ChatResponse(message=self.message, timestamp=self.timestamp)


class ChatFailure(BaseModel):
    """Normalized outcome of a provider call that failed.

    Attributes:
        error: Human-readable error text shown to the user.
        status_code: HTTP status returned to the client.
        kind: Error category the status was derived from.
    """

    error: str
    status_code: int
    kind: FailureKind = FailureKind.UPSTREAM_FAILURE

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error=self.error)


ChatResult = ChatSuccess | ChatFailure
