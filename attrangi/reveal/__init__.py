"""Phased reveal of assistant replies.

Turns one assistant Message, decomposed into immediate/context/deep phases,
into a timed sequence of visibility flips with simulated typing for the
newest reply. Historical replies render in full with no timers.

Responsibilities:
    - Timer scheduling behind a cancellable-handle interface
    - Phase gating delays derived from which phases are present
    - Character-by-character streaming of the context and deep phases
    - Teardown of every pending timer on unmount or message replacement
"""

from attrangi.reveal.engine import MessageReveal, RevealDelays, RevealState, compute_delays
from attrangi.reveal.stream import CharacterStream
from attrangi.reveal.timers import AsyncioScheduler, Scheduler, TimerHandle, VirtualScheduler

__all__ = [
    "AsyncioScheduler",
    "CharacterStream",
    "MessageReveal",
    "RevealDelays",
    "RevealState",
    "Scheduler",
    "TimerHandle",
    "VirtualScheduler",
    "compute_delays",
]
