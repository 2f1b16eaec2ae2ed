"""Presentation and feedback surface interfaces."""
from abc import ABC, abstractmethod


class PresentationSurface(ABC):
    """Renders the call overlay. All methods are idempotent."""

    @abstractmethod
    def show_overlay(self) -> None:
        """Insert the overlay, replacing one that is already shown."""
        pass

    @abstractmethod
    def remove_overlay(self) -> None:
        """Remove the overlay; no-op when none is shown."""
        pass

    @abstractmethod
    def rebuild_overlay(self) -> None:
        """Redraw the overlay from current state."""
        pass


class FeedbackSurface(ABC):
    """Fire-and-forget haptics and transient messages."""

    @abstractmethod
    def vibrate(self) -> None:
        pass

    @abstractmethod
    def show_transient_message(self, text: str) -> None:
        pass
