"""Geometry primitives and helpers for layout calculations.

All values are PDF points with the origin at the bottom-left corner of a
page, so ``Rect.y`` is the bottom edge and ``Rect.top`` the upper one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..exceptions import GeometryError


POINTS_PER_INCH = 72.0
CSS_PIXELS_PER_INCH = 96.0

PAGE_SIZES = {
    "letter": (612.0, 792.0),
    "a4": (595.28, 841.89),
    "legal": (612.0, 1008.0),
    "tabloid": (792.0, 1224.0),
}


@dataclass(slots=True)
class Point:
    x: float
    y: float


@dataclass(slots=True)
class Size:
    width: float
    height: float

    @classmethod
    def from_tuple(cls, value: Iterable[float]) -> "Size":
        width, height = value
        return cls(float(width), float(height))

    @classmethod
    def named(cls, name: str) -> "Size":
        """Return the size of a named paper format (``letter``, ``a4``...)."""
        try:
            return cls.from_tuple(PAGE_SIZES[name.lower()])
        except KeyError:
            raise GeometryError(
                "Unknown page size", f"{name!r} (expected one of {', '.join(PAGE_SIZES)})"
            ) from None


@dataclass(slots=True)
class Rect:
    """Axis aligned rectangle.

    Dimensions are stored as given. Zero or negative sizes are legal input
    (absolutely positioned content is placed literally) and are reported by
    the layout validator rather than corrected here.
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y

    @property
    def top(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def intersects(self, other: "Rect") -> bool:
        """Check if this rectangle shares a region of positive area with another."""
        return self.intersection(other) is not None

    def intersection(self, other: "Rect") -> Optional["Rect"]:
        """Return the overlapping region, or None when the rectangles only touch or are apart."""
        left = max(self.left, other.left)
        right = min(self.right, other.right)
        bottom = max(self.bottom, other.bottom)
        top = min(self.top, other.top)
        if right <= left or top <= bottom:
            return None
        return Rect(x=left, y=bottom, width=right - left, height=top - bottom)

    def union(self, other: "Rect") -> "Rect":
        """Calculate the bounding rectangle that contains both rectangles.

        Args:
            other: Another Rect object

        Returns:
            New Rect that contains both rectangles
        """
        left = min(self.left, other.left)
        right = max(self.right, other.right)
        bottom = min(self.bottom, other.bottom)
        top = max(self.top, other.top)
        return Rect(x=left, y=bottom, width=right - left, height=top - bottom)


@dataclass(slots=True)
class Margins:
    top: float = 0.0
    bottom: float = 0.0
    left: float = 0.0
    right: float = 0.0

    @classmethod
    def uniform(cls, value: float) -> "Margins":
        return cls(value, value, value, value)


def content_rect(page_size: Size, margins: Margins) -> Rect:
    """Printable area of a page inside its margins."""
    return Rect(
        x=margins.left,
        y=margins.bottom,
        width=page_size.width - margins.left - margins.right,
        height=page_size.height - margins.top - margins.bottom,
    )


def points_to_px(value: float | None) -> float:
    if value is None:
        return 0.0
    return float(value) * CSS_PIXELS_PER_INCH / POINTS_PER_INCH


def px_to_points(value: float | None, dpi: float = CSS_PIXELS_PER_INCH) -> float:
    if value is None:
        return 0.0
    return float(value) * POINTS_PER_INCH / dpi
