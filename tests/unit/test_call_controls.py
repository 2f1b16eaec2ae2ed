"""Unit tests for in-call controls."""
import asyncio

import pytest

from callgesture.services.call_session.constants import (
    CAMERA_SWITCH_FAILED_MESSAGE,
    MICROPHONE_MUTED_MESSAGE,
    MICROPHONE_ON_MESSAGE,
    SPEAKER_OFF_MESSAGE,
    VIDEO_OFF_MESSAGE,
)
from callgesture.services.call_session.models import Peer


PEER = Peer(id="friend-42")


class TestCallControls:
    """Test microphone, video, speaker and camera controls."""

    @pytest.mark.asyncio
    async def test_refused_without_call(self, controls, media_transport):
        """Test controls do nothing outside an active call."""
        assert await controls.toggle_microphone() is False
        assert await controls.toggle_video() is False
        assert await controls.toggle_speaker() is False
        assert await controls.switch_camera() is False

        assert media_transport.audio_mutes == []
        assert media_transport.video_mutes == []
        assert media_transport.camera_switches == 0

    @pytest.mark.asyncio
    async def test_toggle_microphone(self, controls, manager, media_transport, feedback):
        """Test muting and unmuting the microphone."""
        await manager.start_call(PEER)

        assert await controls.toggle_microphone() is True
        assert controls.mic_on is False
        assert await controls.toggle_microphone() is True
        assert controls.mic_on is True

        assert media_transport.audio_mutes == [True, False]
        assert feedback.messages == [MICROPHONE_MUTED_MESSAGE, MICROPHONE_ON_MESSAGE]

    @pytest.mark.asyncio
    async def test_failed_toggle_keeps_flag(self, controls, manager, media_transport):
        """Test the flag only flips when the transport confirms."""
        await manager.start_call(PEER)
        media_transport.mute_result = False

        assert await controls.toggle_video() is False
        assert controls.video_on is True

    @pytest.mark.asyncio
    async def test_toggle_video(self, controls, manager, media_transport, feedback):
        await manager.start_call(PEER)

        assert await controls.toggle_video() is True

        assert controls.video_on is False
        assert media_transport.video_mutes == [True]
        assert feedback.messages == [VIDEO_OFF_MESSAGE]

    @pytest.mark.asyncio
    async def test_toggle_speaker(self, controls, manager, feedback):
        await manager.start_call(PEER)

        assert await controls.toggle_speaker() is True

        assert controls.speaker_on is False
        assert feedback.messages == [SPEAKER_OFF_MESSAGE]

    @pytest.mark.asyncio
    async def test_switch_camera_failure(self, controls, manager, media_transport, feedback):
        """Test a failed camera switch is reported."""
        await manager.start_call(PEER)
        media_transport.switch_result = False

        assert await controls.switch_camera() is False
        assert media_transport.camera_switches == 1
        assert feedback.messages == [CAMERA_SWITCH_FAILED_MESSAGE]

    @pytest.mark.asyncio
    async def test_allowed_while_locked(self, controls, manager, media_transport):
        """Test controls keep working on a locked call."""
        await manager.start_call(PEER)
        manager.lock()

        assert await controls.switch_camera() is True
        assert media_transport.camera_switches == 1

    @pytest.mark.asyncio
    async def test_interaction_keeps_controls_visible(self, controls, manager):
        """Test using a control re-arms the auto-hide."""
        await manager.start_call(PEER)
        presenter = manager.presenter
        presenter.hide_controls()

        await controls.toggle_speaker()

        assert presenter.controls_visible is True
        assert presenter._hide_handle is not None

    @pytest.mark.asyncio
    async def test_flags_reset_for_new_call(self, controls, manager):
        """Test a new call starts with the configured defaults."""
        await manager.start_call(PEER)
        await controls.toggle_microphone()
        await controls.toggle_speaker()

        await manager.start_call(PEER)

        assert controls.mic_on is True
        assert controls.speaker_on is True

    @pytest.mark.asyncio
    async def test_late_mute_after_new_call_is_discarded(
        self, controls, manager, media_transport, feedback, wait_until
    ):
        """Test a mute that completes after the call was replaced changes nothing."""
        await manager.start_call(PEER)
        media_transport.hold_mute = True
        task = asyncio.create_task(controls.toggle_microphone())
        await wait_until(lambda: media_transport.pending_mutes)

        await manager.end_call()
        await manager.start_call(Peer(id="friend-43"))
        assert controls.mic_on is True

        media_transport.pending_mutes[0].set_result(True)

        assert await task is False
        assert controls.mic_on is True
        assert feedback.messages == []

    @pytest.mark.asyncio
    async def test_late_mute_after_end_is_discarded(
        self, controls, manager, media_transport, feedback, wait_until
    ):
        """Test a mute that completes after the call ended is not surfaced."""
        await manager.start_call(PEER)
        media_transport.hold_mute = True
        task = asyncio.create_task(controls.toggle_microphone())
        await wait_until(lambda: media_transport.pending_mutes)

        await manager.end_call()
        media_transport.pending_mutes[0].set_result(True)

        assert await task is False
        assert controls.mic_on is True
        assert feedback.messages == []
