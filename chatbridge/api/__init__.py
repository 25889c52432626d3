"""FastAPI endpoints for chatbridge.

Endpoints:
    - GET /health: Service health status
    - POST /api/chat: Chat turn answered by Gemini
    - POST /api/chat-openai: Chat turn answered by OpenAI
    - OPTIONS on both chat paths: CORS preflight
"""

from chatbridge.api.app import app, create_app

__all__ = ["app", "create_app"]
