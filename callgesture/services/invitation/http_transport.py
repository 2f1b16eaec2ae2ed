"""
Invitation transport backed by the notification backend's HTTP API.

The backend fans the invitation out as a push notification; this client only
needs to know whether the request was accepted.
"""
import logging
import time
from typing import Any, Dict, Optional

import httpx

from callgesture.core.exceptions import InvitationTransportError
from callgesture.services.invitation.base import IdentityProvider, InvitationTransport

logger = logging.getLogger(__name__)

INVITATION_PATH = "/room-invitation"
WITHDRAW_PATH = "/room-invitation/withdraw"


class HttpInvitationTransport(InvitationTransport):
    """Posts invitations to the backend with the user's bearer token."""

    def __init__(
        self,
        base_url: str,
        identity_provider: IdentityProvider,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.identity_provider = identity_provider
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def send_room_invitation(
        self, channel_id: str, receiver_id: str, sender_id: str
    ) -> bool:
        payload = {
            "channel_id": channel_id,
            "receiver_uid": receiver_id,
            "sender_uid": sender_id,
            "timestamp": int(time.time() * 1000),
        }
        try:
            await self._post(INVITATION_PATH, payload)
        except InvitationTransportError as e:
            logger.warning(f"[INVITATION] Room invitation failed: {e}")
            return False
        return True

    async def withdraw_invitation(
        self, channel_id: str, receiver_id: str, sender_id: str
    ) -> bool:
        payload = {
            "channel_id": channel_id,
            "receiver_uid": receiver_id,
            "sender_uid": sender_id,
        }
        try:
            await self._post(WITHDRAW_PATH, payload)
        except InvitationTransportError as e:
            logger.warning(f"[INVITATION] Invitation withdrawal failed: {e}")
            return False
        return True

    async def aclose(self) -> None:
        """Close the HTTP client unless the host supplied it."""
        if self._owns_client:
            await self._client.aclose()

    async def _post(self, path: str, payload: Dict[str, Any]) -> Any:
        identity = self.identity_provider.current_user()
        token = identity.token if identity else None
        if not token:
            raise InvitationTransportError("Authentication token not available")

        try:
            response = await self._client.post(
                f"{self.base_url}{path}",
                json=payload,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as exc:
            raise InvitationTransportError(f"Network error calling {path}: {exc}") from exc

        if response.status_code != 200:
            raise InvitationTransportError(
                f"{path} returned {response.status_code}: {response.text[:200]}"
            )

        logger.debug(f"[INVITATION] Backend accepted {path}: {response.text[:200]}")
        return response
