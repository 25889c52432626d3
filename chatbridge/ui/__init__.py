"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Conversation state and the reducers for each user action
    - One outbound chat API call per submitted message
    - Message list, typing indicator and error banner
    - Provider selection and light/dark/system theme

Rendering holds no business logic. Every state change goes through a reducer.
"""
