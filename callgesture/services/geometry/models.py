"""Geometry models shared by the gesture and overlay layers."""
from enum import Enum

from pydantic import BaseModel, ConfigDict


class Direction(str, Enum):
    """Direction the user has to drag to lock a call."""

    RIGHT = "right"
    LEFT = "left"
    UP = "up"
    DOWN = "down"

    def __str__(self) -> str:
        """Return the string value of the direction."""
        return self.value


class Point(BaseModel):
    """Screen position in logical pixels."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float

    def __sub__(self, other: "Point") -> "Point":
        return Point(x=self.x - other.x, y=self.y - other.y)

    def dot(self, other: "Point") -> float:
        return self.x * other.x + self.y * other.y


class ScreenBounds(BaseModel):
    """Size of the screen the gesture happens on."""

    model_config = ConfigDict(frozen=True)

    width: float
    height: float


class Rect(BaseModel):
    """Rectangle on screen, used to remember where the card was."""

    model_config = ConfigDict(frozen=True)

    left: float
    top: float
    width: float
    height: float
