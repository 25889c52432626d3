"""Test package for chatbridge.

Structure:
    - unit/: Individual function and class tests
    - integration/: Requests through the FastAPI app and full chat turns

Upstream providers are never called; the OpenAI SDK is patched and the
Gemini REST API is served by an httpx mock transport.
"""
