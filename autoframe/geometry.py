from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Size:
    width: float
    height: float

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def aspect_ratio(self) -> float:
        if self.height <= 0:
            return 1.0
        return self.width / self.height


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def padded(self, pad_x: float, pad_y: float) -> "Rect":
        return Rect(self.x - pad_x, self.y - pad_y, self.width + pad_x * 2, self.height + pad_y * 2)

    def contains(self, other: "Rect") -> bool:
        return (
            other.x >= self.x
            and other.y >= self.y
            and other.right <= self.right
            and other.bottom <= self.bottom
        )


def full_rect(size: Size) -> Rect:
    return Rect(0.0, 0.0, size.width, size.height)


def rect_centered_at(center: Point, width: float, height: float) -> Rect:
    return Rect(center.x - width / 2, center.y - height / 2, width, height)


def clamp_rect(rect: Rect, bounds: Size) -> Rect:
    """Shift ``rect`` inside ``bounds``, shrinking it first if it is larger."""
    width = min(rect.width, bounds.width)
    height = min(rect.height, bounds.height)
    x = min(max(rect.x, 0.0), bounds.width - width)
    y = min(max(rect.y, 0.0), bounds.height - height)
    return Rect(x, y, width, height)


def intersection(a: Rect, b: Rect) -> Optional[Rect]:
    x = max(a.x, b.x)
    y = max(a.y, b.y)
    width = min(a.right, b.right) - x
    height = min(a.bottom, b.bottom) - y
    if width <= 0 or height <= 0:
        return None
    return Rect(x, y, width, height)


def same_size(a: Rect, b: Rect, epsilon: float) -> bool:
    return abs(a.width - b.width) <= epsilon and abs(a.height - b.height) <= epsilon


def rects_close(a: Rect, b: Rect, epsilon: float) -> bool:
    return (
        abs(a.x - b.x) <= epsilon
        and abs(a.y - b.y) <= epsilon
        and same_size(a, b, epsilon)
    )


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def lerp_rect(start: Rect, end: Rect, t: float) -> Rect:
    return Rect(
        lerp(start.x, end.x, t),
        lerp(start.y, end.y, t),
        lerp(start.width, end.width, t),
        lerp(start.height, end.height, t),
    )
