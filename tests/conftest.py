"""Pytest fixtures and shared test configuration.

Fixtures:
    - clean_env: Removes provider credentials from the environment
    - async_client: HTTPX client bound to the FastAPI app
    - history_factory: Builds alternating user/assistant history turns
"""

from collections.abc import AsyncGenerator, Callable, Generator

import pytest
from httpx import ASGITransport, AsyncClient

from chatbridge.api import app
from chatbridge.models.schemas import HistoryTurn

PROVIDER_ENV_VARS = (
    "OPENAI_API_KEY",
    "GEMINI_API_KEY",
    "OPENAI_MODEL",
    "GEMINI_MODEL",
    "GEMINI_BASE_URL",
    "LLM_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test without provider settings from the host."""
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_overrides() -> Generator[None]:
    """Drop dependency overrides installed by a test."""
    yield
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def history_factory() -> Callable[[int], list[HistoryTurn]]:
    """Return a builder for ``n`` numbered turns starting with the user."""

    def build(n: int) -> list[HistoryTurn]:
        return [
            HistoryTurn(role="user" if i % 2 == 0 else "assistant", content=f"turn-{i}")
            for i in range(n)
        ]

    return build
