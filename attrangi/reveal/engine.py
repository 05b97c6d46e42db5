"""Reveal state machine for a single assistant message.

Only the newest assistant reply animates. Its immediate phase shows at once,
the context and deep phases are gated behind delays that depend on which
phases are present:

    delay(context) = 600ms if an immediate phase exists, else 0ms
    delay(deep)    = delay(context) + (800ms if a context phase exists, else 200ms)

Once visible, context and deep text is typed out by a CharacterStream.
Visibility only moves forward: P1_ONLY -> P1_P2 -> P1_P2_P3.
"""

import logging
from collections.abc import Callable
from enum import IntEnum
from typing import NamedTuple

from attrangi.models.schemas import Message, Phase, PhaseBlock, Role
from attrangi.reveal.stream import CONTEXT_TICK_MS, DEEP_START_DELAY_MS, DEEP_TICK_MS, CharacterStream
from attrangi.reveal.timers import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

IMMEDIATE_LEAD_MS = 600
CONTEXT_LEAD_MS = 800
NO_CONTEXT_LEAD_MS = 200


class RevealState(IntEnum):
    """Which phase gates are open."""

    P1_ONLY = 1
    P1_P2 = 2
    P1_P2_P3 = 3


class RevealDelays(NamedTuple):
    context_ms: int
    deep_ms: int


def compute_delays(has_immediate: bool, has_context: bool) -> RevealDelays:
    """Delays before the context and deep gates open, in milliseconds."""
    context_ms = IMMEDIATE_LEAD_MS if has_immediate else 0
    deep_ms = context_ms + (CONTEXT_LEAD_MS if has_context else NO_CONTEXT_LEAD_MS)
    return RevealDelays(context_ms, deep_ms)


_GATE_FOR_PHASE = {
    Phase.IMMEDIATE: RevealState.P1_ONLY,
    Phase.CONTEXT: RevealState.P1_P2,
    Phase.DEEP: RevealState.P1_P2_P3,
}

_STREAM_TIMING = {
    Phase.CONTEXT: (CONTEXT_TICK_MS, 0),
    Phase.DEEP: (DEEP_TICK_MS, DEEP_START_DELAY_MS),
}


class MessageReveal:
    """Owns the transient reveal state of one rendered assistant message.

    The instance is mounted on creation. Every timer it arms is tracked and
    cancelled on teardown() or when the message is replaced, so no visibility
    flip or stream emission happens for a message that is no longer shown.

    Args:
        message: The message being rendered.
        is_latest: Whether it is the most recently received message.
        scheduler: Timer source.
        on_change: Called after every visibility flip and stream emission.
    """

    def __init__(
        self,
        message: Message,
        is_latest: bool,
        scheduler: Scheduler,
        on_change: Callable[["MessageReveal"], None] | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._on_change = on_change
        self._handles: list[TimerHandle] = []
        self._streams: dict[Phase, CharacterStream] = {}
        self.message = message
        self.is_latest = is_latest
        self.state = RevealState.P1_ONLY
        self.delays: RevealDelays | None = None
        self.mounted = False
        self._mount()

    @property
    def animates(self) -> bool:
        return self.message.role is Role.ASSISTANT and self.is_latest and self.message.has_blocks

    @property
    def complete(self) -> bool:
        """All present phases visible and every stream finished."""
        return self.state is RevealState.P1_P2_P3 and all(s.done for s in self._streams.values())

    def is_visible(self, phase: Phase) -> bool:
        return phase in self.message.phase_map() and self.state >= _GATE_FOR_PHASE[phase]

    def visible_blocks(self) -> list[PhaseBlock]:
        """Present and visible blocks in presentation order."""
        return [b for b in self.message.ordered_blocks() if self.is_visible(b.phase)]

    def displayed_text(self, phase: Phase) -> str:
        """Text currently shown for a phase; empty while gated."""
        if not self.is_visible(phase):
            return ""
        stream = self._streams.get(phase)
        if stream is not None:
            return stream.displayed
        return self.message.phase_map()[phase].text

    def is_streaming(self, phase: Phase) -> bool:
        return phase in self._streams

    def update(self, message: Message, is_latest: bool) -> None:
        """Re-render for a new message or latest flag; no-op if neither changed."""
        if message == self.message and is_latest == self.is_latest and self.mounted:
            return
        self.teardown()
        self.message = message
        self.is_latest = is_latest
        self._mount()
        self._notify()

    def teardown(self) -> None:
        """Cancel every pending timer owned by this render."""
        for handle in self._handles:
            handle.cancel()
        self._handles.clear()
        for stream in self._streams.values():
            stream.cancel()
        self._streams.clear()
        self.mounted = False

    def _mount(self) -> None:
        self.mounted = True
        self.delays = None
        if not self.animates:
            self.state = RevealState.P1_P2_P3
            return

        self.state = RevealState.P1_ONLY
        present = self.message.phase_map()
        self.delays = compute_delays(Phase.IMMEDIATE in present, Phase.CONTEXT in present)
        self._handles.append(
            self._scheduler.schedule(self.delays.context_ms, lambda: self._open(RevealState.P1_P2))
        )
        self._handles.append(
            self._scheduler.schedule(self.delays.deep_ms, lambda: self._open(RevealState.P1_P2_P3))
        )
        logger.debug(f"Armed reveal gates at {self.delays.context_ms}ms and {self.delays.deep_ms}ms")

    def _open(self, target: RevealState) -> None:
        if not self.mounted or target <= self.state:
            return
        self.state = target
        for phase, (tick_ms, start_delay_ms) in _STREAM_TIMING.items():
            if _GATE_FOR_PHASE[phase] == target and phase in self.message.phase_map():
                self._start_stream(phase, tick_ms, start_delay_ms)
        self._notify()

    def _start_stream(self, phase: Phase, tick_ms: int, start_delay_ms: int) -> None:
        stream = CharacterStream(
            self._scheduler,
            self.message.phase_map()[phase].text,
            tick_ms,
            on_emit=lambda _prefix: self._notify(),
            start_delay_ms=start_delay_ms,
        )
        self._streams[phase] = stream
        stream.start()

    def _notify(self) -> None:
        if self._on_change is not None and self.mounted:
            self._on_change(self)
