"""Rule-based furniture placement used when no layout proposer is available.

The planner is deterministic: the same room and catalog always produce the
same placements. Items are visited once, largest first, and each one is
pushed around a fixed perturbation sequence until it stops colliding with
what is already placed (or the attempts run out).
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple, Union

from Arrange.classifier import classify_item
from Arrange.constants import (
    BED_CATEGORY,
    COLLISION_DIAGONAL_Y_STEP,
    COLLISION_SHIFT_STEP,
    DRESSER_CATEGORY,
    ROW_SPACING,
    UTILIZATION_OPTIMAL_MAX,
    UTILIZATION_OPTIMAL_MIN,
    WALL_MARGIN,
)
from Arrange.diagnostics import COLLISION_EXHAUSTED, GEOMETRIC_ANOMALY, ContractViolation, Diagnostics
from Arrange.params import ArrangeConfig, ArrangementProposal, FurnitureItem, RawPlacement, Room, UtilizationAnalysis
from evaluation.symmetry import is_first_of_pair, normalize_family_id
from geometry.kernel import clamp, fits, rotated_dimensions
from geometry.walls import anchor_on_wall, select_wall

log = logging.getLogger(__name__)

# A zone coordinate is either a fraction of the room extent or a side keyword
# meaning "1 ft in from that side wall".
ZoneX = Union[float, str]
Zone = Tuple[ZoneX, float]

PAIR_ZONES: Dict[str, Dict[str, Tuple[Zone, Zone]]] = {
    "bedroom": {
        "nightstand": (("left", 0.5), ("right", 0.5)),
        "side-table": (("left", 0.5), ("right", 0.5)),
        "accent-chair": ((0.25, 0.25), (0.75, 0.25)),
        "table-lamp": (("left", 0.7), ("right", 0.7)),
        "floor-lamp": (("left", 0.7), ("right", 0.7)),
    },
    "living-room": {
        "accent-chair": ((0.25, 0.6), (0.75, 0.6)),
        "side-table": ((0.2, 0.4), (0.8, 0.4)),
        "end-table": ((0.2, 0.4), (0.8, 0.4)),
        "table-lamp": ((0.25, 0.75), (0.75, 0.75)),
    },
}
DEFAULT_PAIR_ZONE: Tuple[Zone, Zone] = ((0.25, 0.6), (0.75, 0.6))

SINGLE_ZONES: Dict[str, Zone] = {
    "accent-chair": (0.75, 0.25),
    "side-table": ("right", 0.5),
    "end-table": ("right", 0.5),
    "table-lamp": (0.8, 0.7),
    "floor-lamp": (0.8, 0.7),
    "nightstand": ("right", 0.5),
}

# Categories that stand against a wall; "best" defers to the wall selector.
WALL_CATEGORIES: Dict[str, str] = {
    "sofa": "best",
    "bookshelf": "best",
    "bookcase": "best",
    "desk": "best",
    "tv-stand": "front",
}


def _zone_position(zone: Zone, width: float, room: Room) -> Tuple[float, float]:
    zx, zy = zone
    if zx == "left":
        x = width / 2.0 + WALL_MARGIN
    elif zx == "right":
        x = room.width - width / 2.0 - WALL_MARGIN
    else:
        x = room.width * float(zx)
    return x, room.length * zy


def _families(items: Sequence[FurnitureItem]) -> Dict[str, List[str]]:
    families: Dict[str, List[str]] = {}
    for item in items:
        families.setdefault(normalize_family_id(item.id), []).append(item.id)
    return families


def _initial_position(
    item: FurnitureItem,
    index: int,
    width: float,
    length: float,
    room: Room,
    pair: Optional[List[str]],
) -> Tuple[float, float, str]:
    category = item.category
    if category == BED_CATEGORY:
        wall = anchor_on_wall("left", length, width, room.width, room.length)
        return wall.x, wall.y, "Bed placed against wall for stability and space efficiency"
    if category == DRESSER_CATEGORY:
        wall = anchor_on_wall("right", length, width, room.width, room.length, inset=WALL_MARGIN)
        return wall.x, length / 2.0 + WALL_MARGIN, "Dresser placed on opposite wall with clear access"

    if pair is not None:
        zones = PAIR_ZONES.get(room.type, {}).get(category, DEFAULT_PAIR_ZONE)
        first = is_first_of_pair(item.id) or (not any(is_first_of_pair(p) for p in pair) and pair[0] == item.id)
        x, y = _zone_position(zones[0] if first else zones[1], width, room)
        side = "First" if first else "Second"
        return x, y, f"{side} {category or 'item'} positioned for symmetrical layout"

    if category in WALL_CATEGORIES:
        inset = classify_item(item).wall_distance
        target = WALL_CATEGORIES[category]
        if target == "best":
            wall = select_wall(length, width, room.width, room.length, inset=inset)
        else:
            wall = anchor_on_wall(target, length, width, room.width, room.length, inset=inset)
        return wall.x, wall.y, f"{category} placed against the {wall.name} wall"

    if category in SINGLE_ZONES:
        x, y = _zone_position(SINGLE_ZONES[category], width, room)
        return x, y, f"{category} positioned in its usual zone"

    x = width / 2.0 + WALL_MARGIN + index * ROW_SPACING
    y = length / 2.0 + WALL_MARGIN
    return x, y, f"{category or 'item'} positioned along bottom wall"


def _collides(
    x: float, y: float, width: float, length: float,
    placed: Sequence[Tuple[float, float, float, float]], clearance: float,
) -> bool:
    for px, py, pw, pl in placed:
        if abs(x - px) < (width + pw) / 2.0 + clearance and abs(y - py) < (length + pl) / 2.0 + clearance:
            return True
    return False


def plan_fallback(
    room: Room,
    furniture: Sequence[FurnitureItem],
    config: Optional[ArrangeConfig] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> ArrangementProposal:
    """Place every catalog item without a generative step.

    Returns a proposal shaped like an external proposer's, so the
    post-processor does not care where placements came from.
    """
    if room is None or furniture is None:
        raise ContractViolation("Fallback planning needs a room and a furniture list")
    config = config or ArrangeConfig()
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    families = _families(furniture)
    order = sorted(range(len(furniture)), key=lambda i: classify_item(furniture[i]).priority)
    placed: List[Tuple[float, float, float, float]] = []
    results: Dict[int, RawPlacement] = {}

    for index in order:
        item = furniture[index]
        width, length = rotated_dimensions(item.length, item.width, 0)
        members = families.get(normalize_family_id(item.id), [])
        pair = members if len(members) == 2 else None

        x, y, reasoning = _initial_position(item, index, width, length, room, pair)

        for axis, half, extent in (("x", width / 2.0, room.width), ("y", length / 2.0, room.length)):
            if not fits(half, extent):
                diagnostics.add(
                    GEOMETRIC_ANOMALY,
                    f"{item.display_name} is larger than the room along {axis}; pinned to the room midpoint",
                    item.id,
                    axis=axis,
                )
        base_x = clamp(x, width / 2.0, room.width)
        x, y = base_x, clamp(y, length / 2.0, room.length)

        attempts = 0
        while attempts < config.max_attempts:
            if not _collides(x, y, width, length, placed, config.min_clearance):
                break
            attempts += 1
            if attempts <= 3:
                x = x + COLLISION_SHIFT_STEP
            elif attempts <= 6:
                x = base_x
                y = y + COLLISION_SHIFT_STEP
            else:
                x = base_x - COLLISION_SHIFT_STEP
                y = y + COLLISION_DIAGONAL_Y_STEP
            x = clamp(x, width / 2.0, room.width)
            y = clamp(y, length / 2.0, room.length)

        if _collides(x, y, width, length, placed, config.min_clearance):
            diagnostics.add(
                COLLISION_EXHAUSTED,
                f"{item.display_name} still collides after {attempts} attempts; keeping ({x:.2f}, {y:.2f})",
                item.id,
                attempts=attempts,
            )
            log.info("Collision retries exhausted for %s", item.id)

        placed.append((x, y, width, length))
        partner = next((m for m in pair if m != item.id), None) if pair else None
        results[index] = RawPlacement(
            furnitureId=item.id,
            x=x,
            y=y,
            rotation=0,
            reasoning=reasoning,
            isSymmetrical=pair is not None,
            symmetryPartner=partner or "",
        )

    total_area = sum(item.length * item.width for item in furniture)
    room_area = room.area
    pct = total_area / room_area * 100.0
    analysis = UtilizationAnalysis(
        totalFurnitureArea=total_area,
        roomArea=room_area,
        utilizationPercentage=pct,
        isOptimal=UTILIZATION_OPTIMAL_MIN <= pct <= UTILIZATION_OPTIMAL_MAX,
    )
    log.info("Fallback placed %s items, utilization %.1f%%", len(results), pct)

    return ArrangementProposal(
        strategy="Smart room-aware arrangement with symmetrical placement",
        reasoning=(
            "Room-type specific placement with wall anchoring, spacing and "
            "symmetrical arrangements where applicable"
        ),
        placements=[results[i] for i in range(len(furniture))],
        skippedFurniture=[],
        spaceUtilizationAnalysis=analysis,
    )
