"""FastAPI application factory and configuration.

Application factory with lifespan management, error handlers and router
registration. CORS headers are set by the chat routes themselves.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from chatbridge.api.routes import ALLOW_ORIGIN
from chatbridge.api.routes import router as chat_router
from chatbridge.providers.service import INVALID_MESSAGE_ERROR

logger = logging.getLogger(__name__)


def _is_message_error(error: dict) -> bool:
    """True when a validation error concerns the message or the whole body."""
    loc = tuple(error.get("loc", ()))
    return error.get("type") == "json_invalid" or loc == ("body",) or "message" in loc


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Answer malformed chat requests with 400 and an ``{error}`` body.

    Args:
        request: The rejected request.
        exc: The validation failure raised by FastAPI.

    Returns:
        JSONResponse with status 400.
    """
    errors = exc.errors()
    if not errors or any(_is_message_error(e) for e in errors):
        detail = INVALID_MESSAGE_ERROR
    else:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ())[1:])
        detail = f"Invalid request field '{field}': {first.get('msg', 'invalid value')}"

    logger.warning(f"Rejected request to {request.url.path}: {detail}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": detail},
        headers=ALLOW_ORIGIN,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    # Startup
    logger.info("Starting chatbridge API...")
    yield
    # Shutdown
    logger.info("Shutting down chatbridge API...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="chatbridge API",
        description=(
            "Chat front-end API forwarding a message and recent conversation "
            "history to OpenAI or Google Gemini, with one response contract "
            "for both providers."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_exception_handler(RequestValidationError, validation_exception_handler)
    application.include_router(chat_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "chatbridge"}

    return application


app = create_app()
