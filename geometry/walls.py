from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

# Candidate walls in preference order; ties on span keep this order.
WALL_ORDER = ("back", "right", "left", "front")


@dataclass(frozen=True)
class WallAnchor:
    name: str
    orientation: str  # "horizontal" or "vertical"
    span: float
    required: float
    x: float
    y: float

    @property
    def qualifies(self) -> bool:
        return self.span >= self.required


def candidate_walls(
    length: float,
    width: float,
    room_width: float,
    room_length: float,
    inset: float = 0.0,
) -> List[WallAnchor]:
    """Return the four wall anchors for a ``length`` x ``width`` footprint.

    Each anchor puts the furniture's far edge on the wall (plus ``inset``)
    with the center half the perpendicular dimension inward. Horizontal walls
    need ``width`` to fit along the room width, vertical walls need
    ``length`` to fit along the room length.
    """
    return [
        WallAnchor("back", "horizontal", room_width, width,
                   room_width / 2.0, room_length - length / 2.0 - inset),
        WallAnchor("right", "vertical", room_length, length,
                   room_width - width / 2.0 - inset, room_length / 2.0),
        WallAnchor("left", "vertical", room_length, length,
                   width / 2.0 + inset, room_length / 2.0),
        WallAnchor("front", "horizontal", room_width, width,
                   room_width / 2.0, length / 2.0 + inset),
    ]


def select_wall(
    length: float,
    width: float,
    room_width: float,
    room_length: float,
    inset: float = 0.0,
) -> WallAnchor:
    """Pick the wall a footprint should stand against.

    The back wall wins whenever it qualifies; otherwise the qualifying wall
    with the longest span; if nothing qualifies the back wall is returned
    anyway and the caller can spot the out-of-bounds result later.
    """
    walls = candidate_walls(length, width, room_width, room_length, inset)
    back = walls[0]
    if back.qualifies:
        return back
    best: Optional[WallAnchor] = None
    for wall in walls[1:]:
        if wall.qualifies and (best is None or wall.span > best.span):
            best = wall
    return best or back


def anchor_on_wall(
    name: str,
    length: float,
    width: float,
    room_width: float,
    room_length: float,
    inset: float = 0.0,
) -> WallAnchor:
    for wall in candidate_walls(length, width, room_width, room_length, inset):
        if wall.name == name:
            return wall
    raise ValueError(f"Unknown wall '{name}'; expected one of {', '.join(WALL_ORDER)}")
