"""Simulated typing: reveal a string one character per tick."""

from collections.abc import Callable

from attrangi.reveal.timers import Scheduler, TimerHandle

CONTEXT_TICK_MS = 15
DEEP_TICK_MS = 25
DEEP_START_DELAY_MS = 0


class CharacterStream:
    """Emits growing prefixes of a text until the full text is shown.

    On start the empty prefix is emitted, then each tick adds one character,
    so a text of length N completes after exactly N ticks.

    Args:
        scheduler: Timer source.
        text: Text to reveal.
        tick_ms: Milliseconds per character.
        on_emit: Called with each emitted prefix.
        start_delay_ms: Extra wait before the first emission.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        text: str,
        tick_ms: int,
        on_emit: Callable[[str], None] | None = None,
        start_delay_ms: int = 0,
    ) -> None:
        self._scheduler = scheduler
        self.text = text
        self.tick_ms = tick_ms
        self.start_delay_ms = start_delay_ms
        self._on_emit = on_emit
        self._handle: TimerHandle | None = None
        self._cursor = 0
        self.displayed = ""
        self.ticks = 0
        self.started = False

    @property
    def done(self) -> bool:
        return self.started and self._cursor >= len(self.text)

    def start(self) -> None:
        """(Re)start from the empty prefix, cancelling any pending tick."""
        self.cancel()
        self._cursor = 0
        self.ticks = 0
        self.displayed = ""
        self.started = False
        if self.start_delay_ms > 0:
            self._handle = self._scheduler.schedule(self.start_delay_ms, self._begin)
        else:
            self._begin()

    def update(self, text: str, tick_ms: int) -> None:
        """Restart only if the text or the tick speed changed."""
        if text == self.text and tick_ms == self.tick_ms:
            return
        self.text = text
        self.tick_ms = tick_ms
        self.start()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _begin(self) -> None:
        self._handle = None
        self.started = True
        self._emit()
        if self._cursor < len(self.text):
            self._handle = self._scheduler.schedule(self.tick_ms, self._tick)

    def _tick(self) -> None:
        self._handle = None
        self._cursor += 1
        self.ticks += 1
        self._emit()
        if self._cursor < len(self.text):
            self._handle = self._scheduler.schedule(self.tick_ms, self._tick)

    def _emit(self) -> None:
        self.displayed = self.text[: self._cursor]
        if self._on_emit is not None:
            self._on_emit(self.displayed)
