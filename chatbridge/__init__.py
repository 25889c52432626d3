"""chatbridge - chat front-end for OpenAI and Google Gemini.

Combines FastAPI for the chat endpoints, httpx and the OpenAI SDK for
upstream calls, NiceGUI for the chat UI, and Pydantic for data validation.

Components:
    - api: HTTP endpoints and CORS handling
    - providers: Provider adapters, configuration and error normalization
    - ui: Conversation state, request orchestration and the chat page
    - models: Request/response schemas
"""

__version__ = "0.1.0"
