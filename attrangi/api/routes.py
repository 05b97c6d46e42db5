"""Backend contract endpoints."""

import logging

from fastapi import APIRouter, Request

from attrangi.api.memory import InMemoryBackend
from attrangi.models.schemas import (
    ChatReply,
    ChatRequest,
    HistoryResponse,
    ProfileRequest,
    SessionSummary,
    SummaryRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["conversation"])


def _backend(request: Request) -> InMemoryBackend:
    return request.app.state.backend


@router.get("/history/{session_id}", response_model=HistoryResponse)
async def get_history(session_id: str, request: Request) -> HistoryResponse:
    """Return the stored conversation; empty for unknown sessions."""
    return HistoryResponse(conversation=_backend(request).history(session_id))


@router.post("/profile")
async def save_profile(body: ProfileRequest, request: Request) -> dict[str, str]:
    """Store the onboarding profile for a session."""
    _backend(request).save_profile(body.session_id, body.profile)
    logger.info(f"Saved profile for session {body.session_id}")
    return {"status": "ok"}


@router.post("/chat", response_model=ChatReply, response_model_exclude_none=True)
async def chat(body: ChatRequest, request: Request) -> ChatReply:
    """Record the user message and answer with a phased reply.

    Raises:
        422: Empty or whitespace-only message.
    """
    return _backend(request).reply(body.session_id, body.message)


@router.post("/summary", response_model=None)
async def summary(body: SummaryRequest, request: Request) -> SessionSummary | dict[str, str]:
    """Summarize a session, or report an error if there is nothing to summarize."""
    result = _backend(request).summarize(body.session_id)
    if result is None:
        return {"error": "No conversation to summarize yet"}
    return result
