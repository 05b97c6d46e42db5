"""Backend Gateway: async httpx client for the conversational backend.

Endpoints (JSON bodies, base URL from configuration):
    - GET  /history/{session_id} -> {"conversation": Message[]}
    - POST /profile {session_id, profile} -> opaque ack
    - POST /chat {session_id, message} -> {reply, blocks?, expression?}
    - POST /summary {session_id} -> summary object or preformatted report

Every method raises NetworkFailure or MalformedResponse; none of them decide
how a failure degrades. That policy lives in the Orchestrator.
"""

import json
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from attrangi.config import ClientConfig, get_client_config
from attrangi.gateway.errors import MalformedResponse, NetworkFailure
from attrangi.models.schemas import (
    ChatReply,
    ChatRequest,
    HistoryResponse,
    Message,
    Profile,
    ProfileRequest,
    SessionSummary,
    SummaryRequest,
)

logger = logging.getLogger(__name__)


def parse_summary(payload: Any) -> SessionSummary | str:
    """Interpret a summary payload.

    The backend answers either with a summary object, the same object
    JSON-encoded as a string, or a preformatted plain-text report.

    Args:
        payload: Decoded JSON body of POST /summary.

    Returns:
        A SessionSummary, or the report text for plain-text reports.

    Raises:
        MalformedResponse: If the payload is none of the accepted shapes.
    """
    if isinstance(payload, str):
        text = payload.strip()
        if not text:
            raise MalformedResponse("Empty summary report")
        if not text.startswith("{"):
            return text
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedResponse(f"Summary is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise MalformedResponse(f"Unexpected summary payload type: {type(payload).__name__}")

    if "error" in payload and "title" not in payload:
        raise MalformedResponse(f"Backend could not summarize: {payload['error']}")

    try:
        return SessionSummary.model_validate(payload)
    except ValidationError as e:
        raise MalformedResponse(f"Summary has unexpected shape: {e}") from e


class BackendGateway:
    """Client for the backend HTTP contract.

    A fresh AsyncClient is opened per call, so the gateway holds no
    connection state between requests.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            config: Optional client configuration.
                    Loads from environment if not provided.
            transport: Optional httpx transport, e.g. ASGITransport in tests.
        """
        self._config = config or get_client_config()
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._config.api_base_url

    async def _request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> Any:
        """Send one request and return the decoded JSON body.

        Raises:
            NetworkFailure: On connection errors and non-2xx responses.
            MalformedResponse: If the body is not JSON.
        """
        async with httpx.AsyncClient(
            base_url=self._config.api_base_url,
            timeout=self._config.request_timeout,
            transport=self._transport,
        ) as client:
            try:
                response = await client.request(method, path, json=payload)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise NetworkFailure(f"{method} {path} returned HTTP {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise NetworkFailure(f"{method} {path} failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponse(f"{method} {path} returned a non-JSON body") from e

    async def fetch_history(self, session_id: str) -> list[Message]:
        """Fetch the stored conversation for a session.

        Returns:
            Messages oldest first; empty for unknown sessions.
        """
        data = await self._request("GET", f"/history/{session_id}")
        try:
            history = HistoryResponse.model_validate(data)
        except ValidationError as e:
            raise MalformedResponse(f"History has unexpected shape: {e}") from e
        logger.debug(f"Fetched {len(history.conversation)} messages for session {session_id}")
        return history.conversation

    async def submit_profile(self, session_id: str, profile: Profile) -> None:
        """Send the onboarding Profile. The acknowledgement body is ignored."""
        body = ProfileRequest(session_id=session_id, profile=profile)
        await self._request("POST", "/profile", body.model_dump(mode="json"))
        logger.debug(f"Submitted profile for session {session_id}")

    async def exchange(self, session_id: str, message: str) -> ChatReply:
        """Send a user message and return the assistant reply."""
        body = ChatRequest(session_id=session_id, message=message)
        data = await self._request("POST", "/chat", body.model_dump(mode="json"))
        try:
            return ChatReply.model_validate(data)
        except ValidationError as e:
            raise MalformedResponse(f"Chat reply has unexpected shape: {e}") from e

    async def fetch_summary(self, session_id: str) -> SessionSummary | str:
        """Ask the backend to summarize a session."""
        body = SummaryRequest(session_id=session_id)
        data = await self._request("POST", "/summary", body.model_dump(mode="json"))
        return parse_summary(data)


# Module-level singleton instance
_backend_gateway: BackendGateway | None = None


def get_backend_gateway() -> BackendGateway:
    """Get or create the global backend gateway.

    Returns:
        The BackendGateway instance.
    """
    global _backend_gateway
    if _backend_gateway is None:
        _backend_gateway = BackendGateway()
    return _backend_gateway
