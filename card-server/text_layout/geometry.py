"""
Collision shapes that laid-out rules text must stay clear of.

Coordinates are in text box space: (0, 0) is the top-left corner of the
rules text box, y grows downward.
"""

import math
from typing import Any, Dict, NamedTuple, Union


class Rect(NamedTuple):
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def intersects_rect(self, other: 'Rect') -> bool:
        # Touching edges do not count as overlap
        return (self.left < other.right and other.left < self.right and
                self.top < other.bottom and other.top < self.bottom)

    def to_dict(self) -> Dict[str, Any]:
        return {'shape': 'rect', 'x': self.left, 'y': self.top,
                'width': self.width, 'height': self.height}


class Circle(NamedTuple):
    x: float
    y: float
    radius: float

    def intersects_rect(self, rect: Rect) -> bool:
        """True when the rectangle's interior reaches inside the circle."""
        nearest_x = min(max(self.x, rect.left), rect.right)
        nearest_y = min(max(self.y, rect.top), rect.bottom)
        return math.hypot(self.x - nearest_x, self.y - nearest_y) < self.radius

    def to_dict(self) -> Dict[str, Any]:
        return {'shape': 'circle', 'x': self.x, 'y': self.y, 'radius': self.radius}


CollisionShape = Union[Rect, Circle]


def rect_from_box(x: float, y: float, width: float, height: float) -> Rect:
    return Rect(float(x), float(y), float(x) + float(width), float(y) + float(height))


def shape_from_dict(data: Dict[str, Any]) -> CollisionShape:
    """
    Build a collision shape from its JSON form.

    Supported:
        {'shape': 'circle', 'x': cx, 'y': cy, 'radius': r}
        {'shape': 'rect', 'x': left, 'y': top, 'width': w, 'height': h}
    """
    if isinstance(data, (Rect, Circle)):
        return data
    if not isinstance(data, dict):
        raise ValueError(f"Collision shape must be an object, got {data!r}")

    kind = str(data.get('shape', '')).lower()
    try:
        if kind == 'circle':
            radius = float(data.get('radius', data.get('r')))
            if radius <= 0:
                raise ValueError(f"Circle radius must be positive: {radius}")
            return Circle(float(data['x']), float(data['y']), radius)
        if kind in ('rect', 'rectangle'):
            return rect_from_box(data['x'], data['y'], data['width'], data['height'])
    except (KeyError, TypeError) as e:
        raise ValueError(f"Incomplete collision shape {data!r}: {e}") from e
    raise ValueError(f"Unknown collision shape: {kind!r}")
