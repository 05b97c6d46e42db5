"""HTTP client for the conversational backend.

Wraps the four backend calls (history, profile, chat, summary) and maps
transport and payload problems onto a small error taxonomy. Callers decide
how each failure degrades.
"""

from attrangi.gateway.client import BackendGateway, get_backend_gateway
from attrangi.gateway.errors import GatewayError, MalformedResponse, NetworkFailure

__all__ = [
    "BackendGateway",
    "GatewayError",
    "MalformedResponse",
    "NetworkFailure",
    "get_backend_gateway",
]
