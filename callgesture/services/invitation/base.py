"""Invitation transport and identity interfaces."""
from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel


class Identity(BaseModel):
    """Authenticated user of this device."""

    uid: str
    display_name: Optional[str] = None
    token: Optional[str] = None


class IdentityProvider(ABC):
    """Abstract source of the signed-in user."""

    @abstractmethod
    def current_user(self) -> Optional[Identity]:
        """Return the signed-in user, or None when nobody is signed in."""
        pass


class InvitationTransport(ABC):
    """Abstract base class for call invitation delivery."""

    @abstractmethod
    async def send_room_invitation(
        self, channel_id: str, receiver_id: str, sender_id: str
    ) -> bool:
        """Hand an invitation to the delivery service.

        True means accepted for delivery, not received by the peer.
        """
        pass

    async def withdraw_invitation(
        self, channel_id: str, receiver_id: str, sender_id: str
    ) -> bool:
        """Tell the peer an invitation is no longer valid.

        Transports that cannot withdraw keep this default.
        """
        return False

    async def aclose(self) -> None:
        """Release network resources. Nothing to release by default."""
        pass
