"""Call overlay presenter."""
import asyncio
import logging
from typing import Optional

from callgesture.services.geometry.models import Rect
from callgesture.services.presentation.base import PresentationSurface

logger = logging.getLogger(__name__)


class OverlayPresenter:
    """
    Owns overlay and call-controls visibility on top of a presentation surface.

    Controls hide themselves ``auto_hide_seconds`` after the last explicit
    show or user interaction. Only one auto-hide deadline is ever armed.
    """

    def __init__(self, surface: PresentationSurface, auto_hide_seconds: float = 3.0):
        self.surface = surface
        self.auto_hide_seconds = auto_hide_seconds
        self.visible = False
        self.controls_visible = False
        self.card_rect: Optional[Rect] = None
        self._hide_handle: Optional[asyncio.TimerHandle] = None

    def capture_card_rect(self, rect: Optional[Rect]) -> None:
        """Remember where the card sat so the overlay can grow out of it."""
        self.card_rect = rect

    def show(self) -> None:
        """Show (or replace) the overlay with controls visible."""
        self.surface.show_overlay()
        self.visible = True
        self.controls_visible = True
        self._arm_auto_hide()
        logger.debug("[OVERLAY] Overlay shown")

    def hide(self) -> None:
        """Remove the overlay and drop the pending auto-hide."""
        self._cancel_auto_hide()
        self.controls_visible = False
        if not self.visible:
            return
        self.surface.remove_overlay()
        self.visible = False
        logger.debug("[OVERLAY] Overlay removed")

    def rebuild(self) -> None:
        if self.visible:
            self.surface.rebuild_overlay()

    def show_controls(self) -> None:
        self.controls_visible = True
        self._arm_auto_hide()
        self.rebuild()

    def hide_controls(self) -> None:
        self._cancel_auto_hide()
        self.controls_visible = False
        self.rebuild()

    def toggle_controls(self) -> None:
        if self.controls_visible:
            self.hide_controls()
        else:
            self.show_controls()

    def register_interaction(self) -> None:
        """User touched a control: keep controls up for another full period."""
        self.show_controls()

    # Observer hooks

    def on_state_changed(self, session, old_state, new_state) -> None:
        self.rebuild()

    def on_tick(self, formatted: str) -> None:
        self.rebuild()

    def _arm_auto_hide(self) -> None:
        self._cancel_auto_hide()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("[OVERLAY] No running loop, controls auto-hide not armed")
            return
        self._hide_handle = loop.call_later(self.auto_hide_seconds, self._auto_hide)

    def _cancel_auto_hide(self) -> None:
        if self._hide_handle is not None:
            self._hide_handle.cancel()
            self._hide_handle = None

    def _auto_hide(self) -> None:
        self._hide_handle = None
        self.controls_visible = False
        self.rebuild()
