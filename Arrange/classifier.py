from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from Arrange.constants import (
    LARGE_MIN_LENGTH,
    LARGE_MIN_WIDTH,
    LARGE_MIN_AREA,
    MEDIUM_MIN_AREA,
    MEDIUM_MIN_LENGTH,
    MEDIUM_MIN_WIDTH,
    SMALL_MIN_AREA,
    ACCENT_WALL_DISTANCE,
)


@dataclass(frozen=True)
class Classification:
    category: str  # large | medium | small | accent
    priority: int  # 1 is placed first
    wall_distance: float
    area: float


def classify_footprint(length: float, width: float) -> Classification:
    """Bucket a furniture footprint by size; the first matching rule wins.

    1. length > 5 or width > 3 or area > 15  -> large,  priority 1, on the wall (beds, sofas)
    2. area > 6 or (length > 2 and width > 1.5) -> medium, priority 2, on the wall (dressers, desks)
    3. area > 2                              -> small,  priority 3, on the wall (nightstands, chairs)
    4. otherwise                             -> accent, priority 4, 1 ft off the wall (lamps, plants)

    The comparisons are strict, so a value sitting exactly on a threshold
    falls through to the next rule.
    """
    length = float(length)
    width = float(width)
    area = length * width
    if length > LARGE_MIN_LENGTH or width > LARGE_MIN_WIDTH or area > LARGE_MIN_AREA:
        return Classification("large", 1, 0.0, area)
    if area > MEDIUM_MIN_AREA or (length > MEDIUM_MIN_LENGTH and width > MEDIUM_MIN_WIDTH):
        return Classification("medium", 2, 0.0, area)
    if area > SMALL_MIN_AREA:
        return Classification("small", 3, 0.0, area)
    return Classification("accent", 4, ACCENT_WALL_DISTANCE, area)


def classify_item(item) -> Classification:
    """Classify a catalog item from its ``(Length, Width, Height)`` dimensions; height is ignored."""
    dims: Tuple[float, ...] = tuple(item.dimensions)
    return classify_footprint(dims[0], dims[1])
