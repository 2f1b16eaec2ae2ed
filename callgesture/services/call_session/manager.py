"""Call session manager."""
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from callgesture.services.call_session.constants import (
    CALL_LOCKED_MESSAGE,
    INVITATION_FAILED_MESSAGE,
    JOIN_FAILED_MESSAGE,
)
from callgesture.services.call_session.models import CallSession, Peer
from callgesture.services.call_session.states import CallState, EndReason
from callgesture.services.call_session.transitions import apply_transition
from callgesture.services.invitation.base import IdentityProvider
from callgesture.services.invitation.sender import InvitationSender
from callgesture.services.media.base import ChannelOptions, MediaTransport
from callgesture.services.presentation.base import FeedbackSurface
from callgesture.services.presentation.overlay import OverlayPresenter
from callgesture.services.timer.elapsed import ElapsedTimer

logger = logging.getLogger(__name__)

StateListener = Callable[[CallSession, CallState, CallState], None]

# States in which the peer may still be holding an unanswered invitation
PENDING_INVITATION_STATES = (CallState.INVITING, CallState.CONNECTING)


class CallSessionManager:
    """Owns the active call session and drives it through its lifecycle.

    Async completions (invitation delivery, media join) are applied only while
    the session they were started for is still the current generation; any
    later completion is discarded.
    """

    def __init__(
        self,
        invitation_sender: InvitationSender,
        media: MediaTransport,
        identity_provider: IdentityProvider,
        presenter: OverlayPresenter,
        feedback: FeedbackSurface,
        timer: ElapsedTimer,
        join_options: Optional[ChannelOptions] = None,
        withdraw_abandoned_invitations: bool = False,
    ):
        self.invitation_sender = invitation_sender
        self.media = media
        self.identity_provider = identity_provider
        self.presenter = presenter
        self.feedback = feedback
        self.timer = timer
        self.join_options = join_options or ChannelOptions()
        self.withdraw_abandoned_invitations = withdraw_abandoned_invitations
        self._session: Optional[CallSession] = None
        self._generation = 0
        self._listeners: List[StateListener] = []

    @property
    def session(self) -> Optional[CallSession]:
        """Most recent session, including an ended one."""
        return self._session

    @property
    def state(self) -> CallState:
        if self._session is None:
            return CallState.IDLE
        return self._session.state

    @property
    def is_active(self) -> bool:
        return self._session is not None and self._session.is_active

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state-change listener. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def is_current(self, session: CallSession) -> bool:
        """True while ``session`` is the live, active generation."""
        return (
            self._session is session
            and session.generation == self._generation
            and session.is_active
        )

    async def start_call(self, peer: Peer) -> CallSession:
        """
        Begin a new call attempt to ``peer``.

        A session that is still active is force-reset first. Returns the new
        session in whatever state the attempt reached.
        """
        while self.is_active:
            await self.force_reset()

        self._generation += 1
        session = CallSession(
            id=self.invitation_sender.generate_session_id(),
            peer=peer,
            generation=self._generation,
        )
        self._session = session
        self._set_state(session, CallState.INVITING)

        sender = self.identity_provider.current_user()
        if sender is None or not peer.id.strip():
            logger.warning(
                f"[CALL SESSION] Session {session.id} cannot invite - "
                f"{'not signed in' if sender is None else 'empty peer id'}"
            )
            await self._teardown(session, EndReason.PRECONDITION_FAILED)
            return session

        session.invitation_sent = True
        success = await self.invitation_sender.send_invitation(session.id, sender, peer.id)

        if not self.is_current(session):
            logger.debug(f"[CALL SESSION] Discarding stale invitation result for {session.id}")
            return session

        if not success:
            self._notify_user(INVITATION_FAILED_MESSAGE)
            await self._teardown(session, EndReason.INVITATION_FAILED)
            return session

        self._set_state(session, CallState.CONNECTING)
        self.presenter.show()
        await self._join(session)
        return session

    def lock(self) -> bool:
        """Turn a connected call into a persistent one."""
        session = self._session
        if session is None or session.state != CallState.CONNECTED:
            return False

        self._set_state(session, CallState.LOCKED)
        self.feedback.vibrate()
        self._notify_user(CALL_LOCKED_MESSAGE)
        return True

    async def release(self) -> bool:
        """Gesture let go without locking: end any unlocked active call."""
        session = self._session
        if session is None or not session.is_active:
            return False
        if session.state == CallState.LOCKED:
            logger.debug(f"[CALL SESSION] Release ignored, session {session.id} is locked")
            return False

        await self._teardown(session, EndReason.RELEASED)
        return True

    async def end_call(self) -> bool:
        """Explicit end from the call controls."""
        session = self._session
        if session is None or session.state not in (CallState.CONNECTED, CallState.LOCKED):
            return False

        await self._teardown(session, EndReason.ENDED_BY_USER)
        return True

    async def force_reset(self) -> bool:
        """Discard the active session so a fresh one can start."""
        session = self._session
        if session is None or not session.is_active:
            return False

        previous = session.state
        await self._teardown(session, EndReason.FORCE_RESET)

        if previous in PENDING_INVITATION_STATES and session.invitation_sent:
            logger.warning(
                f"[CALL SESSION] Abandoned invitation on channel {session.id} "
                f"to {session.peer.id}"
            )
            if self.withdraw_abandoned_invitations:
                await self.invitation_sender.withdraw_invitation(
                    session.id, self.identity_provider.current_user(), session.peer.id
                )
        return True

    async def abort(self) -> bool:
        """Tear down after an unexpected error."""
        session = self._session
        if session is None or not session.is_active:
            return False

        await self._teardown(session, EndReason.ERROR)
        return True

    async def _join(self, session: CallSession) -> None:
        try:
            joined = await self.media.join_channel(
                session.id, session.peer.id, self.join_options
            )
        except Exception as e:
            logger.warning(
                f"[CALL SESSION] Media join raised for {session.id}: "
                f"{type(e).__name__}: {str(e)}"
            )
            joined = False

        if not self.is_current(session):
            logger.debug(f"[CALL SESSION] Discarding stale join result for {session.id}")
            if joined:
                await self._leave_orphaned_channel(session)
            return

        if not joined:
            logger.warning(f"[CALL SESSION] Failed to join channel {session.id}")
            self._notify_user(JOIN_FAILED_MESSAGE)
            await self._teardown(session, EndReason.JOIN_FAILED)
            return

        session.media_joined = True
        session.started_at = datetime.now(timezone.utc)
        self._set_state(session, CallState.CONNECTED)
        self.timer.start()
        self.presenter.show()
        await self._log_channel_info(session)

    async def _leave_orphaned_channel(self, session: CallSession) -> None:
        # A newer session owns the media engine once it is active
        if self.is_active:
            return
        logger.info(f"[CALL SESSION] Leaving channel {session.id} joined after teardown")
        await self._leave_channel(session)

    async def _teardown(self, session: CallSession, reason: EndReason) -> None:
        """End ``session``. Local cleanup always completes before leaving media."""
        self._generation += 1
        session.end_reason = reason
        session.ended_at = datetime.now(timezone.utc)
        self._set_state(session, CallState.ENDED)

        self.timer.stop()
        try:
            self.presenter.hide()
        except Exception:
            logger.error(
                f"[CALL SESSION] Failed to remove overlay for {session.id}", exc_info=True
            )

        if session.media_joined:
            await self._leave_channel(session)

        logger.info(f"[CALL SESSION] Session {session.id} ended ({reason.value})")

    async def _leave_channel(self, session: CallSession) -> None:
        try:
            await self.media.leave_channel()
        except Exception:
            logger.error(
                f"[CALL SESSION] Leaving channel {session.id} failed", exc_info=True
            )

    async def _log_channel_info(self, session: CallSession) -> None:
        try:
            info = await self.media.get_current_channel_info()
        except Exception as e:
            logger.warning(
                f"[CALL SESSION] Could not read channel info: {type(e).__name__}: {str(e)}"
            )
            return
        if info is not None:
            logger.info(f"[CALL SESSION] Session {session.id} connected on {info.channel}")

    def _set_state(self, session: CallSession, new_state: CallState) -> None:
        old_state = apply_transition(session, new_state)
        for listener in list(self._listeners):
            try:
                listener(session, old_state, new_state)
            except Exception:
                logger.error("[CALL SESSION] State listener failed", exc_info=True)

    def _notify_user(self, text: str) -> None:
        try:
            self.feedback.show_transient_message(text)
        except Exception:
            logger.error("[CALL SESSION] Failed to show message", exc_info=True)
