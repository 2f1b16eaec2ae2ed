"""Long-press gesture controller."""
import asyncio
import logging
from typing import Optional, Set

from callgesture.services.call_session.manager import CallSessionManager
from callgesture.services.call_session.models import CallSession, Peer
from callgesture.services.call_session.states import CallState
from callgesture.services.geometry.models import Point, Rect, ScreenBounds
from callgesture.services.geometry.path import PathCalculator
from callgesture.services.gesture.models import DragState

logger = logging.getLogger(__name__)


class GestureController:
    """
    Binds long-press events on a friend card to the call lifecycle.

    Handlers never raise: unexpected errors are logged and the active session
    is torn down.
    """

    def __init__(
        self,
        manager: CallSessionManager,
        path_calculator: PathCalculator,
        lock_threshold: float = 0.9,
    ):
        self.manager = manager
        self.path_calculator = path_calculator
        self.lock_threshold = lock_threshold
        self.drag: Optional[DragState] = None
        self._background: Set[asyncio.Task] = set()

    async def on_gesture_start(
        self,
        position: Point,
        screen_bounds: ScreenBounds,
        peer: Peer,
        card_rect: Optional[Rect] = None,
    ) -> Optional[CallSession]:
        """
        Long press began on a card.

        Direction and target are computed here once and kept for the whole
        gesture. Resolves when the call attempt settles (connected, ended or
        superseded by a newer gesture).
        """
        try:
            self.manager.presenter.capture_card_rect(card_rect)
            direction = self.path_calculator.determine_direction(position, screen_bounds)
            target = self.path_calculator.calculate_end_position(
                position, screen_bounds, direction
            )
            self.drag = DragState(origin=position, direction=direction, target_point=target)
            logger.info(
                f"[GESTURE] Long press started at ({position.x:.0f}, {position.y:.0f}) "
                f"for {peer.id or '<empty>'}, swipe {direction.value}"
            )
            return await self.manager.start_call(peer)
        except Exception:
            logger.error("[GESTURE] Gesture start failed", exc_info=True)
            await self._abort()
            return None

    def on_gesture_move(self, position: Point) -> Optional[float]:
        """Pointer moved. Returns the drag progress, or None when ignored."""
        drag = self.drag
        if drag is None or not drag.pressed or self.manager.state != CallState.CONNECTED:
            return None

        try:
            drag.progress = drag.progress_at(position)
            self.manager.presenter.rebuild()

            if drag.progress > self.lock_threshold:
                drag.pressed = False
                logger.info(f"[GESTURE] Lock threshold crossed at {drag.progress:.2f}")
                self.manager.lock()
        except Exception:
            logger.error("[GESTURE] Gesture move failed", exc_info=True)
            self._abort_in_background()
        return drag.progress

    async def on_gesture_end(self) -> None:
        """Long press released."""
        drag = self.drag
        if drag is not None:
            drag.pressed = False

        if self.manager.state == CallState.LOCKED:
            logger.debug("[GESTURE] Released while locked, call continues")
            return

        if drag is not None:
            drag.progress = 0.0
        try:
            await self.manager.release()
        except Exception:
            logger.error("[GESTURE] Gesture end failed", exc_info=True)
            await self._abort()

    async def _abort(self) -> None:
        try:
            await self.manager.abort()
        except Exception:
            logger.error("[GESTURE] Abort failed", exc_info=True)

    def _abort_in_background(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        task = loop.create_task(self._abort())
        self._background.add(task)
        task.add_done_callback(self._background.discard)
