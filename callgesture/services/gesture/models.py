"""Drag state for one lock gesture."""
from pydantic import BaseModel, Field

from callgesture.services.geometry.models import Direction, Point


class DragState(BaseModel):
    """Geometry of the active gesture.

    ``origin``, ``direction`` and ``target_point`` are fixed when the gesture
    starts; only ``progress`` and ``pressed`` change afterwards.
    """

    origin: Point = Field(frozen=True)
    direction: Direction = Field(frozen=True)
    target_point: Point = Field(frozen=True)
    progress: float = 0.0
    pressed: bool = True

    def progress_at(self, position: Point) -> float:
        """Projection of the drag onto the swipe path, clamped to [0, 1]."""
        path = self.target_point - self.origin
        length_squared = path.dot(path)
        if length_squared == 0:
            return 0.0

        progress = (position - self.origin).dot(path) / length_squared
        return max(0.0, min(1.0, progress))
