"""In-call controls: microphone, video, speaker and camera."""
import logging

from callgesture.services.call_session.constants import (
    CAMERA_SWITCH_FAILED_MESSAGE,
    MICROPHONE_MUTED_MESSAGE,
    MICROPHONE_ON_MESSAGE,
    SPEAKER_OFF_MESSAGE,
    SPEAKER_ON_MESSAGE,
    VIDEO_OFF_MESSAGE,
    VIDEO_ON_MESSAGE,
)
from callgesture.services.call_session.manager import CallSessionManager
from callgesture.services.call_session.models import CallSession
from callgesture.services.call_session.states import CallState

logger = logging.getLogger(__name__)

CONTROLLABLE_STATES = (CallState.CONNECTED, CallState.LOCKED)


class CallControls:
    """Toggles for the active call.

    Local flags only flip when the media transport confirms the change.
    Every control counts as an interaction and keeps the controls visible.
    """

    def __init__(self, manager: CallSessionManager):
        self.manager = manager
        self.mic_on = manager.join_options.audio
        self.video_on = manager.join_options.video
        self.speaker_on = True
        self._session_id = None
        manager.subscribe(self._on_state_changed)

    def _on_state_changed(
        self, session: CallSession, old_state: CallState, new_state: CallState
    ) -> None:
        if new_state == CallState.INVITING and session.id != self._session_id:
            self._session_id = session.id
            self.mic_on = self.manager.join_options.audio
            self.video_on = self.manager.join_options.video
            self.speaker_on = True

    def _can_control(self, action: str) -> bool:
        state = self.manager.state
        if state not in CONTROLLABLE_STATES:
            logger.info(f"[CALL CONTROLS] Cannot {action} - not in an active call ({state.value})")
            return False
        self.manager.presenter.register_interaction()
        return True

    def _is_stale(self, session: CallSession, action: str) -> bool:
        # The call ended or was replaced while the media engine was busy
        if self.manager.is_current(session):
            return False
        logger.debug(f"[CALL CONTROLS] Discarding stale {action} result for {session.id}")
        return True

    async def toggle_microphone(self) -> bool:
        if not self._can_control("toggle microphone"):
            return False

        session = self.manager.session
        new_mic_on = not self.mic_on
        try:
            success = await self.manager.media.mute_local_audio(not new_mic_on)
        except Exception as e:
            logger.warning(f"[CALL CONTROLS] Error toggling microphone: {type(e).__name__}: {str(e)}")
            success = False

        if self._is_stale(session, "toggle microphone"):
            return False

        if success:
            self.mic_on = new_mic_on
        self.manager.feedback.show_transient_message(
            MICROPHONE_ON_MESSAGE if self.mic_on else MICROPHONE_MUTED_MESSAGE
        )
        self.manager.presenter.rebuild()
        return bool(success)

    async def toggle_video(self) -> bool:
        if not self._can_control("toggle video"):
            return False

        session = self.manager.session
        new_video_on = not self.video_on
        try:
            success = await self.manager.media.mute_local_video(not new_video_on)
        except Exception as e:
            logger.warning(f"[CALL CONTROLS] Error toggling video: {type(e).__name__}: {str(e)}")
            success = False

        if self._is_stale(session, "toggle video"):
            return False

        if success:
            self.video_on = new_video_on
        self.manager.feedback.show_transient_message(
            VIDEO_ON_MESSAGE if self.video_on else VIDEO_OFF_MESSAGE
        )
        self.manager.presenter.rebuild()
        return bool(success)

    async def toggle_speaker(self) -> bool:
        # Routing is handled by the OS; the flag drives the UI only
        if not self._can_control("toggle speaker"):
            return False

        self.speaker_on = not self.speaker_on
        self.manager.feedback.show_transient_message(
            SPEAKER_ON_MESSAGE if self.speaker_on else SPEAKER_OFF_MESSAGE
        )
        self.manager.presenter.rebuild()
        return True

    async def switch_camera(self) -> bool:
        if not self._can_control("switch camera"):
            return False

        session = self.manager.session
        try:
            success = await self.manager.media.switch_camera()
        except Exception as e:
            logger.warning(f"[CALL CONTROLS] Error switching camera: {type(e).__name__}: {str(e)}")
            success = False

        if self._is_stale(session, "switch camera"):
            return False

        if not success:
            self.manager.feedback.show_transient_message(CAMERA_SWITCH_FAILED_MESSAGE)
        return bool(success)
