"""Pydantic models for API requests, responses and normalized chat results.

Models:
    - HistoryTurn: A prior conversation turn sent by the client
    - ChatRequest: Incoming chat request payload
    - ChatResponse: Successful reply with timestamp
    - ErrorResponse: Error body for every failure status
    - ChatSuccess / ChatFailure: Provider-independent call outcomes
"""

from chatbridge.models.schemas import (
    ChatFailure,
    ChatRequest,
    ChatResponse,
    ChatResult,
    ChatSuccess,
    ErrorResponse,
    FailureKind,
    HistoryTurn,
    Provider,
    Role,
)

__all__ = [
    "ChatFailure",
    "ChatRequest",
    "ChatResponse",
    "ChatResult",
    "ChatSuccess",
    "ErrorResponse",
    "FailureKind",
    "HistoryTurn",
    "Provider",
    "Role",
]
