"""Unit tests for ChatService."""

from collections.abc import Sequence
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from chatbridge.models.schemas import (
    ChatFailure,
    ChatSuccess,
    FailureKind,
    HistoryTurn,
    Provider,
)
from chatbridge.providers.base import ChatProvider
from chatbridge.providers.config import ProviderSettings
from chatbridge.providers.openai_provider import OPENAI_ERROR_RULES
from chatbridge.providers.service import INVALID_MESSAGE_ERROR, ChatService

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class RecordingProvider(ChatProvider):
    """Provider stub that records calls and replays a scripted outcome."""

    provider = Provider.OPENAI
    error_rules = OPENAI_ERROR_RULES
    calls: list[tuple[str, str, list[HistoryTurn]]] = []
    outcome: object = "reply"

    async def send(self, message: str, history: Sequence[HistoryTurn]) -> str:
        RecordingProvider.calls.append((self._api_key, message, list(history)))
        if isinstance(RecordingProvider.outcome, BaseException):
            raise RecordingProvider.outcome
        return RecordingProvider.outcome


@pytest.fixture(autouse=True)
def reset_recording() -> None:
    RecordingProvider.calls = []
    RecordingProvider.outcome = "reply"


def _service(**keys: str) -> ChatService:
    return ChatService(
        settings_factory=lambda: ProviderSettings(**keys),
        providers={Provider.OPENAI: RecordingProvider, Provider.GEMINI: RecordingProvider},
        clock=lambda: FIXED_NOW,
    )


class TestSendValidation:
    @pytest.mark.parametrize("message", ["", None, 42, ["hi"], {"text": "hi"}])
    async def test_invalid_message_rejected_without_call(self, message: object) -> None:
        service = _service(openai_api_key="sk-test")

        result = await service.send(message, [], Provider.OPENAI)

        assert result == ChatFailure(
            error=INVALID_MESSAGE_ERROR, status_code=400, kind=FailureKind.INVALID_INPUT
        )
        assert RecordingProvider.calls == []

    @pytest.mark.parametrize(
        ("provider", "env_var"),
        [(Provider.OPENAI, "OPENAI_API_KEY"), (Provider.GEMINI, "GEMINI_API_KEY")],
    )
    async def test_unconfigured_provider(self, provider: Provider, env_var: str) -> None:
        service = _service()

        result = await service.send("hi", [], provider)

        assert isinstance(result, ChatFailure)
        assert result.status_code == 500
        assert result.kind == FailureKind.UNCONFIGURED
        assert result.error.startswith(f"{provider.label} API key is not configured")
        assert env_var in result.error
        assert RecordingProvider.calls == []

    async def test_only_selected_provider_needs_a_key(self) -> None:
        service = _service(gemini_api_key="g-key")

        gemini = await service.send("hi", [], Provider.GEMINI)
        openai = await service.send("hi", [], Provider.OPENAI)

        assert isinstance(gemini, ChatSuccess)
        assert isinstance(openai, ChatFailure)


class TestSendOutcome:
    async def test_success(self) -> None:
        service = _service(openai_api_key="sk-test")
        history = [HistoryTurn(role="user", content="earlier")]

        result = await service.send("hello?", history, Provider.OPENAI)

        assert result == ChatSuccess(message="reply", timestamp=FIXED_NOW)
        assert RecordingProvider.calls == [("sk-test", "hello?", history)]

    async def test_success_serializes_iso_timestamp(self) -> None:
        RecordingProvider.outcome = "hello"
        result = await _service(openai_api_key="sk-test").send("hi", [], Provider.OPENAI)

        body = result.to_response().model_dump(mode="json")

        assert body["message"] == "hello"
        assert datetime.fromisoformat(body["timestamp"]) == FIXED_NOW

    async def test_provider_error_is_normalized(self) -> None:
        RecordingProvider.outcome = RuntimeError("You hit the rate limit")

        result = await _service(openai_api_key="sk-test").send("hi", [], Provider.OPENAI)

        assert result == ChatFailure(
            error="You hit the rate limit", status_code=429, kind=FailureKind.RATE_LIMITED
        )

    async def test_error_is_logged(self) -> None:
        RecordingProvider.outcome = RuntimeError("boom")

        with patch("chatbridge.providers.service.logger") as mock_logger:
            await _service(openai_api_key="sk-test").send("hi", [], Provider.OPENAI)

        mock_logger.error.assert_called_once()
        assert "boom" in mock_logger.error.call_args.args[0]

    async def test_settings_resolved_per_call(self) -> None:
        settings_factory = MagicMock(return_value=ProviderSettings(openai_api_key="sk"))
        service = ChatService(
            settings_factory=settings_factory,
            providers={Provider.OPENAI: RecordingProvider},
        )

        await service.send("one", [], Provider.OPENAI)
        await service.send("two", [], Provider.OPENAI)

        assert settings_factory.call_count == 2


class TestGetChatService:
    def test_singleton_returns_same_instance(self) -> None:
        import chatbridge.providers.service as service_module

        service_module._chat_service = None

        with patch.object(service_module, "ChatService") as mock_service:
            mock_service.return_value = MagicMock()

            first = service_module.get_chat_service()
            second = service_module.get_chat_service()

            assert first is second
            mock_service.assert_called_once()

        service_module._chat_service = None
