"""Unit tests for individual components in isolation.

Coverage:
    - models/: Pydantic validation and serialization
    - onboarding/: Wizard steps and profile edits
    - session/: Identifier lifecycle and session list persistence
    - reveal/: Phase gating, character streams, timer teardown
    - orchestrator/: Mode switching, sends, failures, stale replies
    - gateway/: HTTP error mapping and payload parsing

The backend is replaced by AsyncMock or httpx.MockTransport. Timers run on
a VirtualScheduler so timing assertions are exact.
"""
