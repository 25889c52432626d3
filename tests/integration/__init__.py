"""Integration tests for components working together as a system.

Coverage:
    - Chat endpoints with real HTTP requests over ASGITransport
    - Request validation, CORS preflight and error status mapping
    - Full chat turn from the orchestrator to a stubbed provider
"""
