"""Startup and shutdown of the call gesture core inside a host app."""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from callgesture.core.config import Settings, settings
from callgesture.core.dependencies import (
    get_call_controls,
    get_call_session_manager,
    get_gesture_controller,
    get_invitation_transport,
)
from callgesture.core.logging import setup_logging
from callgesture.services.call_session.controls import CallControls
from callgesture.services.call_session.manager import CallSessionManager
from callgesture.services.gesture.controller import GestureController
from callgesture.services.invitation.base import IdentityProvider, InvitationTransport
from callgesture.services.media.base import MediaTransport
from callgesture.services.presentation.base import FeedbackSurface, PresentationSurface

logger = logging.getLogger(__name__)


class CallGestureApp:
    """The wired components a host UI binds its card events and buttons to."""

    def __init__(
        self,
        manager: CallSessionManager,
        controller: GestureController,
        controls: CallControls,
    ):
        self.manager = manager
        self.controller = controller
        self.controls = controls

    async def shutdown(self) -> None:
        """End any active call and release the invitation transport."""
        await self.manager.force_reset()
        self.manager.timer.stop()
        self.manager.presenter.hide()
        await self.manager.invitation_sender.aclose()
        logger.info("[CALL SESSION] Call gesture core shut down")


@asynccontextmanager
async def lifespan(
    surface: PresentationSurface,
    feedback: FeedbackSurface,
    media: MediaTransport,
    identity_provider: IdentityProvider,
    invitation_transport: Optional[InvitationTransport] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    config: Settings = settings,
    configure_logging: bool = True,
) -> AsyncIterator[CallGestureApp]:
    """
    Build the call gesture core for the lifetime of the host app.

    Args:
        surface: Renders the call overlay
        feedback: Haptics and transient messages
        media: Real-time media engine
        identity_provider: Source of the signed-in user
        invitation_transport: Replaces the HTTP invitation transport
        http_client: HTTP client owned by the host, shared with the transport
        config: Settings to build from
        configure_logging: Set to False when the host configures logging itself
    """
    # Startup
    if configure_logging:
        setup_logging(config.log_level)
    transport = invitation_transport or get_invitation_transport(
        identity_provider, config, client=http_client
    )
    manager = get_call_session_manager(
        surface=surface,
        feedback=feedback,
        media=media,
        identity_provider=identity_provider,
        invitation_transport=transport,
        config=config,
    )
    app = CallGestureApp(
        manager=manager,
        controller=get_gesture_controller(manager, config),
        controls=get_call_controls(manager),
    )
    try:
        yield app
    finally:
        # Shutdown
        await app.shutdown()
