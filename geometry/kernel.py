from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


# Room frame: origin at the bottom-left corner, x to the right, y upward.
# All coordinates are furniture centers, in feet.


@dataclass(frozen=True)
class Footprint:
    id: str
    x: float
    y: float
    width: float
    length: float

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        return bounds(self)

    def area(self) -> float:
        return area(self)


def rotated_dimensions(length: float, width: float, rotation: int) -> Tuple[float, float]:
    """Return ``(width, length)`` as laid out in the room for ``rotation``.

    ``width`` is the x extent and ``length`` the y extent; a quarter turn
    swaps them.
    """
    if int(rotation) % 180 == 90:
        return float(length), float(width)
    return float(width), float(length)


def make_footprint(
    furniture_id: str,
    x: float,
    y: float,
    dimensions: Tuple[float, ...],
    rotation: int = 0,
) -> Footprint:
    """Build a footprint from catalog dimensions ``(Length, Width, Height)``."""
    length, width = float(dimensions[0]), float(dimensions[1])
    w, l = rotated_dimensions(length, width, rotation)
    return Footprint(furniture_id, float(x), float(y), w, l)


def bounds(fp: Footprint) -> Tuple[float, float, float, float]:
    """Return ``(left, right, top, bottom)`` with ``top`` the larger y."""
    half_w = fp.width / 2.0
    half_l = fp.length / 2.0
    return fp.x - half_w, fp.x + half_w, fp.y + half_l, fp.y - half_l


def overlaps(a: Footprint, b: Footprint) -> bool:
    """Strict axis-aligned overlap; rectangles that only touch do not overlap."""
    a_left, a_right, a_top, a_bottom = bounds(a)
    b_left, b_right, b_top, b_bottom = bounds(b)
    return not (
        a_right <= b_left
        or b_right <= a_left
        or a_top <= b_bottom
        or b_top <= a_bottom
    )


def area(fp: Footprint) -> float:
    return fp.width * fp.length


def clamp(center: float, half_extent: float, room_extent: float) -> float:
    """Clamp ``center`` so ``[center - half_extent, center + half_extent]`` fits in the room.

    Flush placement (an edge on the wall) is valid. When the item is wider
    than the room the range is empty and the center is pinned to the room
    midpoint; use :func:`fits` to detect that case.
    """
    lo = half_extent
    hi = room_extent - half_extent
    if lo > hi:
        return room_extent / 2.0
    return max(lo, min(center, hi))


def fits(half_extent: float, room_extent: float) -> bool:
    return 2.0 * half_extent <= room_extent


def within_room(fp: Footprint, room_width: float, room_length: float, tol: float = 1e-6) -> bool:
    left, right, top, bottom = bounds(fp)
    return left >= -tol and bottom >= -tol and right <= room_width + tol and top <= room_length + tol


def footprint_for(placement, item) -> Footprint:
    """Footprint of ``placement`` using the catalog dimensions of ``item``."""
    furniture_id = getattr(placement, "furniture_id", None) or getattr(placement, "furnitureId")
    return make_footprint(furniture_id, placement.x, placement.y, item.dimensions, placement.rotation)
