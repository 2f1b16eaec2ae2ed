"""Call session models."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from callgesture.services.call_session.states import ACTIVE_STATES, CallState, EndReason


class Peer(BaseModel):
    """The friend being called."""

    id: str
    display_name: Optional[str] = None


class CallSession(BaseModel):
    """One attempt to establish a call, from invitation to termination."""

    id: str
    peer: Peer
    generation: int
    state: CallState = CallState.IDLE
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    end_reason: Optional[EndReason] = None
    invitation_sent: bool = False
    media_joined: bool = False

    @property
    def is_active(self) -> bool:
        return self.state in ACTIVE_STATES
