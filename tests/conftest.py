"""Pytest fixtures and shared test configuration.

Fixtures:
    - storage: Dict-backed key-value store
    - session_store: SessionStore with predictable identifiers
    - scheduler: Virtual-clock timer scheduler
    - gateway: AsyncMock standing in for the backend
    - orchestrator: Orchestrator wired to the fixtures above
    - reference_backend / live_gateway: In-memory backend behind a real gateway
"""

import itertools
import random
from datetime import date
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport

from attrangi.api.app import create_app
from attrangi.api.memory import InMemoryBackend
from attrangi.config import ClientConfig
from attrangi.gateway.client import BackendGateway
from attrangi.models.schemas import ChatReply, Phase, PhaseBlock, SessionSummary
from attrangi.orchestrator.controller import Orchestrator
from attrangi.reveal.timers import VirtualScheduler
from attrangi.session.storage import MappingStore
from attrangi.session.store import SessionStore

TODAY = date(2026, 3, 7)


@pytest.fixture
def client_config() -> ClientConfig:
    """Return configuration pointing at the in-process test host."""
    return ClientConfig(api_base_url="http://test", request_timeout=5)


@pytest.fixture
def storage() -> MappingStore:
    """Return an empty dict-backed store."""
    return MappingStore({})


@pytest.fixture
def session_store(storage: MappingStore) -> SessionStore:
    """Return a SessionStore issuing session-1, session-2, ... in order."""
    counter = itertools.count(1)
    return SessionStore(
        storage,
        id_factory=lambda: f"session-{next(counter)}",
        today=lambda: TODAY,
    )


@pytest.fixture
def scheduler() -> VirtualScheduler:
    """Return a scheduler whose clock only moves when advanced."""
    return VirtualScheduler()


@pytest.fixture
def phased_reply() -> ChatReply:
    """Return a reply carrying all three phases."""
    return ChatReply(
        reply="I hear you. That sounds heavy. What matters most here?",
        blocks=[
            PhaseBlock(phase=Phase.IMMEDIATE, text="I hear you."),
            PhaseBlock(phase=Phase.CONTEXT, text="That sounds heavy."),
            PhaseBlock(phase=Phase.DEEP, text="What matters most here?"),
        ],
        expression="THOUGHTFUL",
    )


@pytest.fixture
def gateway(phased_reply: ChatReply) -> AsyncMock:
    """Return a backend double with empty history and a phased reply."""
    mock = AsyncMock(spec=BackendGateway)
    mock.fetch_history.return_value = []
    mock.submit_profile.return_value = None
    mock.exchange.return_value = phased_reply
    mock.fetch_summary.return_value = SessionSummary(
        title="A heavy week",
        themes=["work"],
        emotional_journey="From tired to hopeful.",
        key_insight="Rest is allowed.",
        suggestions=["Take a walk."],
    )
    return mock


@pytest.fixture
def orchestrator(gateway: AsyncMock, session_store: SessionStore) -> Orchestrator:
    """Return an Orchestrator with a seeded random source."""
    return Orchestrator(gateway, session_store, rng=random.Random(7))


@pytest.fixture
def reference_backend() -> InMemoryBackend:
    """Return an empty in-memory backend store."""
    return InMemoryBackend()


@pytest.fixture
def live_gateway(client_config: ClientConfig, reference_backend: InMemoryBackend) -> BackendGateway:
    """Return a real gateway talking to the reference backend in-process."""
    transport = ASGITransport(app=create_app(reference_backend))
    return BackendGateway(client_config, transport=transport)
