"""Unit tests for individual components in isolation.

Coverage:
    - providers/: Settings, adapters, error normalization and the service
    - ui/: Conversation state reducers and request orchestration
"""
