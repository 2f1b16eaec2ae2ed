"""Wiring of the call gesture components."""
from typing import Optional

import httpx

from callgesture.core.config import Settings, settings
from callgesture.services.call_session.controls import CallControls
from callgesture.services.call_session.manager import CallSessionManager
from callgesture.services.geometry.path import PathCalculator
from callgesture.services.gesture.controller import GestureController
from callgesture.services.invitation.base import IdentityProvider, InvitationTransport
from callgesture.services.invitation.http_transport import HttpInvitationTransport
from callgesture.services.invitation.sender import InvitationSender
from callgesture.services.media.base import ChannelOptions, MediaTransport
from callgesture.services.presentation.base import FeedbackSurface, PresentationSurface
from callgesture.services.presentation.overlay import OverlayPresenter
from callgesture.services.timer.elapsed import ElapsedTimer


def get_invitation_transport(
    identity_provider: IdentityProvider,
    config: Settings = settings,
    client: Optional[httpx.AsyncClient] = None,
) -> InvitationTransport:
    """
    Get the HTTP invitation transport for the configured backend.

    Pass ``client`` to share an HTTP client owned by the host; otherwise the
    transport owns its client and closes it in ``aclose()``.
    """
    return HttpInvitationTransport(
        base_url=config.invitation_backend_url,
        identity_provider=identity_provider,
        timeout=config.invitation_timeout_seconds,
        client=client,
    )


def get_call_session_manager(
    surface: PresentationSurface,
    feedback: FeedbackSurface,
    media: MediaTransport,
    identity_provider: IdentityProvider,
    invitation_transport: Optional[InvitationTransport] = None,
    timer: Optional[ElapsedTimer] = None,
    config: Settings = settings,
) -> CallSessionManager:
    """Build a call session manager with its presenter and timer subscribed."""
    transport = invitation_transport or get_invitation_transport(identity_provider, config)
    presenter = OverlayPresenter(surface, auto_hide_seconds=config.controls_auto_hide_seconds)
    timer = timer or ElapsedTimer(interval=config.elapsed_timer_interval_seconds)

    manager = CallSessionManager(
        invitation_sender=InvitationSender(transport),
        media=media,
        identity_provider=identity_provider,
        presenter=presenter,
        feedback=feedback,
        timer=timer,
        join_options=ChannelOptions(
            audio=config.join_with_audio, video=config.join_with_video
        ),
        withdraw_abandoned_invitations=config.withdraw_abandoned_invitations,
    )
    manager.subscribe(presenter.on_state_changed)
    timer.subscribe(presenter.on_tick)
    return manager


def get_gesture_controller(
    manager: CallSessionManager, config: Settings = settings
) -> GestureController:
    """Get a gesture controller bound to ``manager``."""
    return GestureController(
        manager=manager,
        path_calculator=PathCalculator(path_length=config.swipe_path_length),
        lock_threshold=config.lock_threshold,
    )


def get_call_controls(manager: CallSessionManager) -> CallControls:
    """Get in-call controls bound to ``manager``."""
    return CallControls(manager)
