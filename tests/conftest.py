"""Shared test fixtures and fakes."""
import asyncio
from typing import Callable, List, Optional, Tuple

import pytest

from callgesture.core.config import Settings
from callgesture.core.dependencies import (
    get_call_controls,
    get_call_session_manager,
    get_gesture_controller,
)
from callgesture.services.call_session.models import Peer
from callgesture.services.geometry.models import Point, ScreenBounds
from callgesture.services.invitation.base import Identity, IdentityProvider, InvitationTransport
from callgesture.services.media.base import ChannelInfo, ChannelOptions, MediaTransport
from callgesture.services.presentation.base import FeedbackSurface, PresentationSurface
from callgesture.services.timer.elapsed import ElapsedTimer


# Up and down leave the same room; up wins the tie
SCREEN = ScreenBounds(width=400, height=800)
ORIGIN = Point(x=100, y=400)
PEER = Peer(id="friend-42", display_name="Duck")


class FakeIdentityProvider(IdentityProvider):
    """Identity provider returning a fixed user."""

    def __init__(self, identity: Optional[Identity] = None):
        self.identity = identity

    def current_user(self) -> Optional[Identity]:
        return self.identity


class FakeInvitationTransport(InvitationTransport):
    """Records invitations; with ``hold`` set, each call waits on its own future."""

    def __init__(self):
        self.calls: List[Tuple[str, str, str]] = []
        self.withdrawals: List[Tuple[str, str, str]] = []
        self.result = True
        self.error: Optional[Exception] = None
        self.hold = False
        self.pending: List[asyncio.Future] = []

    async def send_room_invitation(self, channel_id, receiver_id, sender_id) -> bool:
        self.calls.append((channel_id, receiver_id, sender_id))
        if self.error is not None:
            raise self.error
        if self.hold:
            future = asyncio.get_running_loop().create_future()
            self.pending.append(future)
            return await future
        return self.result

    async def withdraw_invitation(self, channel_id, receiver_id, sender_id) -> bool:
        self.withdrawals.append((channel_id, receiver_id, sender_id))
        return True


class FakeMediaTransport(MediaTransport):
    """In-memory media engine with controllable results."""

    def __init__(self):
        self.join_calls: List[Tuple[str, str, ChannelOptions]] = []
        self.join_result = True
        self.join_error: Optional[Exception] = None
        self.hold_join = False
        self.pending_joins: List[asyncio.Future] = []
        self.leave_calls = 0
        self.leave_error: Optional[Exception] = None
        self.audio_mutes: List[bool] = []
        self.video_mutes: List[bool] = []
        self.mute_result = True
        self.hold_mute = False
        self.pending_mutes: List[asyncio.Future] = []
        self.camera_switches = 0
        self.switch_result = True
        self.channel_info_error: Optional[Exception] = None
        self.current_channel: Optional[str] = None

    async def join_channel(self, channel_id, receiver_id, options) -> bool:
        self.join_calls.append((channel_id, receiver_id, options))
        if self.join_error is not None:
            raise self.join_error
        if self.hold_join:
            future = asyncio.get_running_loop().create_future()
            self.pending_joins.append(future)
            joined = await future
        else:
            joined = self.join_result
        if joined:
            self.current_channel = channel_id
        return joined

    async def leave_channel(self) -> None:
        self.leave_calls += 1
        if self.leave_error is not None:
            raise self.leave_error
        self.current_channel = None

    async def mute_local_audio(self, muted: bool) -> bool:
        self.audio_mutes.append(muted)
        if self.hold_mute:
            future = asyncio.get_running_loop().create_future()
            self.pending_mutes.append(future)
            return await future
        return self.mute_result

    async def mute_local_video(self, muted: bool) -> bool:
        self.video_mutes.append(muted)
        return self.mute_result

    async def switch_camera(self) -> bool:
        self.camera_switches += 1
        return self.switch_result

    async def get_current_channel_info(self) -> Optional[ChannelInfo]:
        if self.channel_info_error is not None:
            raise self.channel_info_error
        if self.current_channel is None:
            return None
        return ChannelInfo(channel=self.current_channel)


class RecordingSurface(PresentationSurface):
    """Presentation surface that counts calls."""

    def __init__(self):
        self.shown = False
        self.show_calls = 0
        self.remove_calls = 0
        self.rebuild_calls = 0

    def show_overlay(self) -> None:
        self.show_calls += 1
        self.shown = True

    def remove_overlay(self) -> None:
        self.remove_calls += 1
        self.shown = False

    def rebuild_overlay(self) -> None:
        self.rebuild_calls += 1


class RecordingFeedback(FeedbackSurface):
    """Feedback surface that records vibrations and messages."""

    def __init__(self):
        self.vibrations = 0
        self.messages: List[str] = []

    def vibrate(self) -> None:
        self.vibrations += 1

    def show_transient_message(self, text: str) -> None:
        self.messages.append(text)


class SpyTimer(ElapsedTimer):
    """Elapsed timer that counts start and stop calls."""

    def __init__(self, interval: float = 3600.0):
        super().__init__(interval=interval)
        self.start_calls = 0
        self.stop_calls = 0

    def start(self) -> None:
        self.start_calls += 1
        super().start()

    def stop(self) -> None:
        self.stop_calls += 1
        super().stop()


@pytest.fixture
def test_settings():
    """Settings for testing."""
    return Settings(
        invitation_backend_url="http://backend.test",
        invitation_timeout_seconds=1.0,
        lock_threshold=0.9,
        swipe_path_length=150.0,
        controls_auto_hide_seconds=3.0,
        elapsed_timer_interval_seconds=3600.0,
        join_with_audio=True,
        join_with_video=True,
        withdraw_abandoned_invitations=False,
    )


@pytest.fixture
def identity_provider():
    return FakeIdentityProvider(Identity(uid="caller-1", display_name="Me", token="id-token"))


@pytest.fixture
def invitation_transport():
    return FakeInvitationTransport()


@pytest.fixture
def media_transport():
    return FakeMediaTransport()


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def feedback():
    return RecordingFeedback()


@pytest.fixture
def timer():
    return SpyTimer()


@pytest.fixture
async def manager(
    surface, feedback, media_transport, identity_provider, invitation_transport, timer, test_settings
):
    """Call session manager wired with fakes."""
    manager = get_call_session_manager(
        surface=surface,
        feedback=feedback,
        media=media_transport,
        identity_provider=identity_provider,
        invitation_transport=invitation_transport,
        timer=timer,
        config=test_settings,
    )
    yield manager

    # Cancel anything still scheduled on the test loop
    manager.timer.stop()
    manager.presenter.hide_controls()


@pytest.fixture
def controller(manager, test_settings):
    return get_gesture_controller(manager, test_settings)


@pytest.fixture
def controls(manager):
    return get_call_controls(manager)


@pytest.fixture
def wait_until() -> Callable:
    """Yield to the event loop until ``predicate`` holds."""

    async def _wait_until(predicate: Callable[[], bool], attempts: int = 100) -> None:
        for _ in range(attempts):
            if predicate():
                return
            await asyncio.sleep(0)
        raise AssertionError("Condition not reached")

    return _wait_until


@pytest.fixture
async def connected(controller):
    """Controller with a connected call to PEER."""
    session = await controller.on_gesture_start(ORIGIN, SCREEN, PEER)
    assert session is not None
    return controller
