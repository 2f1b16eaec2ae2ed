"""Swipe path geometry for the lock gesture."""
from typing import Dict

from callgesture.services.geometry.models import Direction, Point, ScreenBounds


# Tie-break order when two edges leave the same room
DIRECTION_PREFERENCE = [Direction.RIGHT, Direction.LEFT, Direction.UP, Direction.DOWN]


class PathCalculator:
    """Computes the direction and end point of the lock swipe.

    Both operations are pure: the result depends only on the arguments and
    the configured path length.
    """

    def __init__(self, path_length: float = 150.0):
        if path_length <= 0:
            raise ValueError("path_length must be positive")
        self.path_length = path_length

    @staticmethod
    def available_room(origin: Point, screen_bounds: ScreenBounds) -> Dict[Direction, float]:
        """Distance from the origin to each screen edge."""
        return {
            Direction.RIGHT: screen_bounds.width - origin.x,
            Direction.LEFT: origin.x,
            Direction.UP: origin.y,
            Direction.DOWN: screen_bounds.height - origin.y,
        }

    def determine_direction(self, origin: Point, screen_bounds: ScreenBounds) -> Direction:
        """Pick the direction with the most room between the origin and the edge."""
        room = self.available_room(origin, screen_bounds)
        best = DIRECTION_PREFERENCE[0]
        for direction in DIRECTION_PREFERENCE[1:]:
            if room[direction] > room[best]:
                best = direction
        return best

    def calculate_end_position(
        self, origin: Point, screen_bounds: ScreenBounds, direction: Direction
    ) -> Point:
        """
        Return the point the drag has to reach for the gesture to complete.

        The point lies ``path_length`` away from the origin in ``direction``,
        clamped to the screen so it is always reachable.
        """
        x, y = origin.x, origin.y
        if direction == Direction.RIGHT:
            x += self.path_length
        elif direction == Direction.LEFT:
            x -= self.path_length
        elif direction == Direction.UP:
            y -= self.path_length
        elif direction == Direction.DOWN:
            y += self.path_length

        x = max(0.0, min(screen_bounds.width, x))
        y = max(0.0, min(screen_bounds.height, y))
        return Point(x=x, y=y)
