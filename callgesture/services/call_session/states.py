"""Call lifecycle enumerations."""
from enum import Enum


class CallState(str, Enum):
    """Lifecycle of one call attempt."""

    IDLE = "idle"  # No call attempt yet
    INVITING = "inviting"  # Invitation handed to the transport
    CONNECTING = "connecting"  # Joining the media channel
    CONNECTED = "connected"  # In the channel, gesture still held
    LOCKED = "locked"  # Persistent full-screen call
    ENDED = "ended"  # Terminal

    def __str__(self) -> str:
        """Return the string value of the state."""
        return self.value


class EndReason(str, Enum):
    """Why a session reached ENDED."""

    RELEASED = "released"
    ENDED_BY_USER = "ended_by_user"
    FORCE_RESET = "force_reset"
    INVITATION_FAILED = "invitation_failed"
    JOIN_FAILED = "join_failed"
    PRECONDITION_FAILED = "precondition_failed"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


ACTIVE_STATES = frozenset(
    {CallState.INVITING, CallState.CONNECTING, CallState.CONNECTED, CallState.LOCKED}
)
