"""Elapsed call duration timer."""
import asyncio
import logging
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

TickListener = Callable[[str], None]


def format_elapsed(seconds: int) -> str:
    """Format seconds as MM:SS, or HH:MM:SS from one hour on."""
    hours, remainder = divmod(max(0, seconds), 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


class ElapsedTimer:
    """Counts call seconds on the running event loop and publishes them."""

    def __init__(self, interval: float = 1.0):
        self.interval = interval
        self.elapsed_seconds = 0
        self._task: Optional[asyncio.Task] = None
        self._listeners: List[TickListener] = []

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def formatted(self) -> str:
        return format_elapsed(self.elapsed_seconds)

    def subscribe(self, listener: TickListener) -> Callable[[], None]:
        """Register a listener for formatted ticks. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def start(self) -> None:
        """Restart counting from zero. Must be called on the event loop."""
        self._cancel()
        self.elapsed_seconds = 0
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.debug("[TIMER] Started")

    def stop(self) -> None:
        """Stop counting and reset. Safe to call when not running."""
        was_running = self.running
        self._cancel()
        self.elapsed_seconds = 0
        if was_running:
            logger.debug("[TIMER] Stopped")

    def tick(self) -> str:
        """Advance by one second and publish the formatted value."""
        self.elapsed_seconds += 1
        formatted = self.formatted
        for listener in list(self._listeners):
            try:
                listener(formatted)
            except Exception:
                logger.exception("[TIMER] Tick listener failed")
        return formatted

    def _cancel(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.tick()
