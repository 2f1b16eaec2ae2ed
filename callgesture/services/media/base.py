"""Media transport interface."""
from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel


class ChannelOptions(BaseModel):
    """Which local tracks to publish when joining a channel."""

    audio: bool = True
    video: bool = True


class ChannelInfo(BaseModel):
    """Channel the media engine is currently in."""

    channel: str
    token: Optional[str] = None


class MediaTransport(ABC):
    """Abstract base class for the real-time audio/video engine.

    Every method may fail; failures are reported with False or by raising.
    """

    @abstractmethod
    async def join_channel(
        self, channel_id: str, receiver_id: str, options: ChannelOptions
    ) -> bool:
        """Join the call channel shared with ``receiver_id``."""
        pass

    @abstractmethod
    async def leave_channel(self) -> None:
        """Leave the current channel."""
        pass

    @abstractmethod
    async def mute_local_audio(self, muted: bool) -> bool:
        """Mute or unmute the microphone."""
        pass

    @abstractmethod
    async def mute_local_video(self, muted: bool) -> bool:
        """Stop or resume publishing the camera."""
        pass

    @abstractmethod
    async def switch_camera(self) -> bool:
        """Flip between front and back camera."""
        pass

    @abstractmethod
    async def get_current_channel_info(self) -> Optional[ChannelInfo]:
        """Return the joined channel, or None when not in a channel."""
        pass
