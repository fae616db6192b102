"""Geometry data structures for coordinate and viewport representation."""
from dataclasses import dataclass


@dataclass
class Vec2:
    """2D vector for coordinate pairs.

    Used for any x/y coordinate pair across different spaces:
    - Screen pixels (pointer positions)
    - Plane coordinates (layer positions)
    - Deltas in either space
    """
    x: float
    y: float

    def __iter__(self):
        """Allow tuple unpacking: x, y = vec2"""
        return iter((self.x, self.y))

    def __add__(self, other: 'Vec2') -> 'Vec2':
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Vec2') -> 'Vec2':
        return Vec2(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class ViewBox:
    """Visible window over the infinite plane: origin (x, y) and size (w, h).

    Frozen so a box handed out by the viewport can never be mutated in place.
    """
    x: float
    y: float
    w: float
    h: float

    def __post_init__(self):
        if not self.w > 0 or not self.h > 0:
            raise ValueError(f"ViewBox size must be positive, got w={self.w}, h={self.h}")

    @property
    def origin(self) -> Vec2:
        return Vec2(self.x, self.y)

    def to_dict(self) -> dict:
        return {'x': self.x, 'y': self.y, 'w': self.w, 'h': self.h}

    @classmethod
    def from_dict(cls, data: dict) -> 'ViewBox':
        """Build from a {x, y, w, h} mapping

        Raises:
            ValueError: If a key is missing or a value is not numeric
        """
        try:
            return cls(float(data['x']), float(data['y']), float(data['w']), float(data['h']))
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid viewBox {data!r}: {e}") from e


@dataclass(frozen=True)
class CanvasRect:
    """Screen rectangle occupied by the drawing surface (pixels)."""
    left: float
    top: float
    width: float
    height: float

    def __post_init__(self):
        if not self.width > 0 or not self.height > 0:
            raise ValueError(f"CanvasRect size must be positive, got {self.width}x{self.height}")
