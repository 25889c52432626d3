"""Chat endpoints, one per provider, sharing a single contract.

POST body ``{message, history?}`` answers 200 ``{message, timestamp}`` or
``{error}`` with 400/401/429/500. OPTIONS answers the CORS preflight.
"""

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from chatbridge.models.schemas import (
    ChatFailure,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    Provider,
)
from chatbridge.providers.service import ChatService, get_chat_service

router = APIRouter(prefix="/api", tags=["chat"])

ENDPOINTS: dict[Provider, str] = {
    Provider.GEMINI: "/chat",
    Provider.OPENAI: "/chat-openai",
}

ALLOW_ORIGIN = {"Access-Control-Allow-Origin": "*"}

CORS_HEADERS = {
    **ALLOW_ORIGIN,
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

_ERROR_RESPONSES = {
    code: {"model": ErrorResponse}
    for code in (
        status.HTTP_400_BAD_REQUEST,
        status.HTTP_401_UNAUTHORIZED,
        status.HTTP_429_TOO_MANY_REQUESTS,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
}


def _register(provider: Provider, path: str) -> None:
    async def chat(
        request: ChatRequest,
        response: Response,
        service: ChatService = Depends(get_chat_service),
    ) -> ChatResponse | JSONResponse:
        result = await service.send(request.message, request.history, provider)
        if isinstance(result, ChatFailure):
            return JSONResponse(
                status_code=result.status_code,
                content=result.to_response().model_dump(),
                headers=ALLOW_ORIGIN,
            )
        response.headers.update(ALLOW_ORIGIN)
        return result.to_response()

    async def preflight() -> Response:
        return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)

    chat.__doc__ = f"Send a message to {provider.label} and return its reply."
    router.add_api_route(
        path,
        chat,
        methods=["POST"],
        response_model=ChatResponse,
        responses=_ERROR_RESPONSES,
        name=f"chat_{provider.value}",
    )
    router.add_api_route(
        path,
        preflight,
        methods=["OPTIONS"],
        name=f"chat_{provider.value}_options",
    )


for _provider, _path in ENDPOINTS.items():
    _register(_provider, _path)
