"""Allowed call state transitions."""
import logging
from typing import Dict, FrozenSet

from callgesture.core.exceptions import InvalidTransitionError
from callgesture.services.call_session.models import CallSession
from callgesture.services.call_session.states import CallState

logger = logging.getLogger(__name__)

# Forward-only; ENDED is reachable from every non-idle state.
ALLOWED_TRANSITIONS: Dict[CallState, FrozenSet[CallState]] = {
    CallState.IDLE: frozenset({CallState.INVITING}),
    CallState.INVITING: frozenset({CallState.CONNECTING, CallState.ENDED}),
    CallState.CONNECTING: frozenset({CallState.CONNECTED, CallState.ENDED}),
    CallState.CONNECTED: frozenset({CallState.LOCKED, CallState.ENDED}),
    CallState.LOCKED: frozenset({CallState.ENDED}),
    CallState.ENDED: frozenset(),
}


def is_transition_allowed(old_state: CallState, new_state: CallState) -> bool:
    return new_state in ALLOWED_TRANSITIONS.get(old_state, frozenset())


def apply_transition(session: CallSession, new_state: CallState) -> CallState:
    """
    Move ``session`` to ``new_state``.

    Returns:
        The previous state

    Raises:
        InvalidTransitionError: if the table does not allow the move
    """
    old_state = session.state
    if not is_transition_allowed(old_state, new_state):
        raise InvalidTransitionError(old_state, new_state)
    session.state = new_state
    logger.info(
        f"[STATE TRANSITION] Session {session.id}: {old_state.value} -> {new_state.value}"
    )
    return old_state
