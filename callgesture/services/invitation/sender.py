"""Call invitation sender."""
import logging
import secrets
import time
from typing import Optional

from callgesture.services.invitation.base import Identity, InvitationTransport

logger = logging.getLogger(__name__)


class InvitationSender:
    """Generates session ids and delivers call invitations to a peer."""

    def __init__(self, transport: InvitationTransport):
        self.transport = transport

    @staticmethod
    def generate_session_id() -> str:
        """Build a channel id from the wall clock and a random suffix."""
        timestamp = int(time.time() * 1000)
        return f"channel_{timestamp}_{secrets.token_hex(4)}"

    async def send_invitation(
        self,
        session_id: str,
        sender: Optional[Identity],
        receiver_id: Optional[str],
    ) -> bool:
        """
        Dispatch exactly one invitation for ``session_id``.

        Args:
            session_id: Channel the peer is invited to
            sender: Signed-in user, None when signed out
            receiver_id: Peer to invite

        Returns:
            True if the transport accepted the invitation
        """
        if sender is None:
            logger.warning("[INVITATION] Cannot send invitation - not signed in")
            return False

        if not receiver_id or not receiver_id.strip():
            logger.warning("[INVITATION] Cannot send invitation - no receiver id")
            return False

        logger.info(
            f"[INVITATION] Sending call invitation to {receiver_id} with channel {session_id}"
        )
        try:
            success = await self.transport.send_room_invitation(
                channel_id=session_id,
                receiver_id=receiver_id,
                sender_id=sender.uid,
            )
        except Exception as e:
            logger.warning(
                f"[INVITATION] Transport error for channel {session_id}: "
                f"{type(e).__name__}: {str(e)}"
            )
            return False

        logger.info(f"[INVITATION] Invitation for channel {session_id} sent: {success}")
        return bool(success)

    async def withdraw_invitation(
        self, session_id: str, sender: Optional[Identity], receiver_id: str
    ) -> bool:
        """Best-effort withdrawal of a previously sent invitation."""
        if sender is None or not receiver_id:
            return False
        try:
            withdrawn = await self.transport.withdraw_invitation(
                channel_id=session_id,
                receiver_id=receiver_id,
                sender_id=sender.uid,
            )
        except Exception as e:
            logger.warning(
                f"[INVITATION] Withdrawal failed for channel {session_id}: "
                f"{type(e).__name__}: {str(e)}"
            )
            return False

        logger.info(f"[INVITATION] Invitation for channel {session_id} withdrawn: {withdrawn}")
        return bool(withdrawn)

    async def aclose(self) -> None:
        await self.transport.aclose()
