"""Reference backend implementing the client's HTTP contract in memory.

For local development and integration tests only; it produces canned,
phase-structured echoes rather than generated replies.

Endpoints:
    - GET /health: Service health status
    - GET /history/{session_id}: Stored conversation
    - POST /profile: Onboarding profile
    - POST /chat: Message exchange
    - POST /summary: Session summary
"""

from attrangi.api.app import create_app

__all__ = ["create_app"]
