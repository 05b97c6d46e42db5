"""Integration tests for components working together as a system.

No mocks for core functionality - the real BackendGateway talks to the
in-memory reference backend over httpx ASGITransport.

Coverage:
    - Reference backend endpoints with real HTTP requests
    - Onboarding, chat, resume and summary through the Orchestrator
"""
