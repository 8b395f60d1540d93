"""Geometry validators for finalized furniture layouts.

These checks mirror what a reviewer looks for on a floor plan: furniture
inside the walls, no two pieces occupying the same floor area unless one is
drawn on top of the other, enough space to walk between pieces, and doors
and windows left clear. The functions return human readable strings
describing any issues that are found.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from Arrange.params import FinalPlacement, Fixture, FurnitureItem, LayoutResult, Room
from geometry.kernel import Footprint, bounds, footprint_for, overlaps, within_room

log = logging.getLogger(__name__)


def _footprints(
    placements: Sequence[FinalPlacement], catalog: Mapping[str, FurnitureItem]
) -> List[Tuple[FinalPlacement, Footprint]]:
    pairs = []
    for p in placements:
        item = catalog.get(p.furnitureId)
        if item is None:
            log.debug("Skipping %s: not in catalog", p.furnitureId)
            continue
        pairs.append((p, footprint_for(p, item)))
    return pairs


def _label(catalog: Mapping[str, FurnitureItem], furniture_id: str) -> str:
    item = catalog.get(furniture_id)
    return item.display_name if item else furniture_id


def check_bounds(
    placements: Sequence[FinalPlacement], catalog: Mapping[str, FurnitureItem], room: Room
) -> List[str]:
    """Check that every piece lies within the room walls.

    Args:
        placements: Finalized placements.
        catalog: Furniture items keyed by id.
        room: The room the placements belong to.

    Returns:
        List of issues describing boundary violations.
    """
    issues: List[str] = []
    for p, fp in _footprints(placements, catalog):
        if not within_room(fp, room.width, room.length):
            left, right, top, bottom = fp.bounds
            issues.append(
                f"{_label(catalog, p.furnitureId)} at ({p.x:.2f}, {p.y:.2f}) spans "
                f"x {left:.2f}..{right:.2f}, y {bottom:.2f}..{top:.2f} outside "
                f"{room.width:g}x{room.length:g} room"
            )
    return issues


def check_overlaps(
    placements: Sequence[FinalPlacement],
    catalog: Mapping[str, FurnitureItem],
    allow_layered: bool = True,
) -> List[str]:
    """Check for overlapping furniture.

    Args:
        placements: Finalized placements.
        catalog: Furniture items keyed by id.
        allow_layered: Ignore overlaps where the two pieces sit on different
            layers (a lamp on a rug). ``False`` reports every overlap.

    Returns:
        List of issues describing overlaps.
    """
    issues: List[str] = []
    pairs = _footprints(placements, catalog)
    for i, (p1, fp1) in enumerate(pairs):
        for p2, fp2 in pairs[i + 1 :]:
            if not overlaps(fp1, fp2):
                continue
            if allow_layered and p1.layerOrder != p2.layerOrder:
                continue
            issues.append(
                f"{_label(catalog, p1.furnitureId)} overlaps with {_label(catalog, p2.furnitureId)}"
            )
    return issues


def _gap(a: Footprint, b: Footprint) -> float:
    """Return the clear distance between two rectangles (0 when they touch or overlap)."""
    a_left, a_right, a_top, a_bottom = bounds(a)
    b_left, b_right, b_top, b_bottom = bounds(b)
    dx = max(0.0, b_left - a_right, a_left - b_right)
    dy = max(0.0, b_bottom - a_top, a_bottom - b_top)
    return max(dx, dy)


def check_clearance(
    placements: Sequence[FinalPlacement],
    catalog: Mapping[str, FurnitureItem],
    min_clearance: float,
) -> List[str]:
    """Check that non-overlapping pieces leave at least ``min_clearance`` between them.

    Overlapping pieces are left to :func:`check_overlaps`. A ``min_clearance``
    of ``0`` skips the check.
    """
    issues: List[str] = []
    if min_clearance <= 0:
        return issues
    pairs = _footprints(placements, catalog)
    for i, (p1, fp1) in enumerate(pairs):
        for p2, fp2 in pairs[i + 1 :]:
            if overlaps(fp1, fp2):
                continue
            gap = _gap(fp1, fp2)
            if gap < min_clearance - 1e-9:
                issues.append(
                    f"{_label(catalog, p1.furnitureId)} is {gap:.2f} ft from "
                    f"{_label(catalog, p2.furnitureId)} (needs {min_clearance:.2f} ft)"
                )
    return issues


def fixture_zone(fixture: Fixture, room: Room) -> Optional[Footprint]:
    """Return the floor area in front of ``fixture`` that must stay clear.

    The zone spans the fixture's width along its wall and reaches
    ``clearanceRequired`` feet into the room. Fixtures without a clearance
    requirement have no zone.
    """
    depth = fixture.clearance
    if depth <= 0:
        return None
    pos = fixture.position
    span = fixture.dimensions.width
    wall = pos.wall
    if wall in ("north", "top"):
        return Footprint(fixture.id, pos.x, room.length - depth / 2.0, span, depth)
    if wall in ("south", "bottom"):
        return Footprint(fixture.id, pos.x, depth / 2.0, span, depth)
    if wall in ("east", "right"):
        return Footprint(fixture.id, room.width - depth / 2.0, pos.y, depth, span)
    return Footprint(fixture.id, depth / 2.0, pos.y, depth, span)


def check_fixture_clearance(
    placements: Sequence[FinalPlacement], catalog: Mapping[str, FurnitureItem], room: Room
) -> List[str]:
    """Check that furniture does not block doors, windows or a fireplace."""
    issues: List[str] = []
    zones = [(fx, fixture_zone(fx, room)) for fx in room.fixtures]
    zones = [(fx, zone) for fx, zone in zones if zone is not None]
    if not zones:
        return issues
    for p, fp in _footprints(placements, catalog):
        for fx, zone in zones:
            if overlaps(fp, zone):
                issues.append(
                    f"{_label(catalog, p.furnitureId)} blocks {fx.type} {fx.id} "
                    f"({fx.clearance:g} ft clearance)"
                )
    return issues


def validate_layout(
    result: LayoutResult,
    furniture: Sequence[FurnitureItem],
    room: Room,
    min_clearance: float = 0,
    check_fixtures: bool = True,
) -> List[str]:
    """Validate layout geometry.

    Args:
        result: Finalized layout.
        furniture: Catalog used to produce ``result``.
        room: The room the layout belongs to.
        min_clearance: Required spacing between pieces. ``0`` skips the check.
        check_fixtures: Also check door and window clearance zones.

    Returns:
        A list of issues. Empty if layout passes validation.
    """
    catalog: Dict[str, FurnitureItem] = {}
    for item in furniture:
        catalog.setdefault(item.id, item)
    placements = list(result.placements)
    issues: List[str] = []
    issues.extend(check_bounds(placements, catalog, room))
    issues.extend(check_overlaps(placements, catalog))
    if min_clearance > 0:
        issues.extend(check_clearance(placements, catalog, min_clearance))
    if check_fixtures:
        issues.extend(check_fixture_clearance(placements, catalog, room))
    return issues
