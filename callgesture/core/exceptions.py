"""
Custom exceptions for the call gesture core.
"""


class CallGestureError(Exception):
    """Base class for errors raised inside the call gesture core."""


class InvalidTransitionError(CallGestureError):
    """A state change was requested that the transition table does not allow."""

    def __init__(self, old_state, new_state):
        self.old_state = old_state
        self.new_state = new_state
        super().__init__(f"Transition {old_state} -> {new_state} is not allowed")


class InvitationTransportError(CallGestureError):
    """The invitation backend could not be reached or rejected the request."""
