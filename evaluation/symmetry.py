"""Mirror-symmetric placement of paired furniture (nightstands, side tables, lamps).

Pairs are found from a naming convention on catalog ids (``nightstand-1`` /
``nightstand-2``) restricted to categories that are expected to come in
matching pairs. Each pair is rewritten to share a Y coordinate and sit at
mirrored X positions.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from Arrange.constants import (
    BED_CATEGORY,
    SYMMETRY_CATEGORIES,
    SYMMETRY_EXCLUDED_CATEGORIES,
    SYMMETRY_EXCLUDED_NAME_HINTS,
    SYMMETRY_MARGIN,
    SYMMETRY_NAME_HINTS,
)
from Arrange.diagnostics import BED_POSITION, SYMMETRY_ENFORCED, SYMMETRY_OBSERVED, Diagnostics
from Arrange.placement import Placement

log = logging.getLogger(__name__)

_FAMILY_SUFFIX = re.compile(r"-(?:[12]|left|right|chair[12]|table[12]|lamp[12])$", re.IGNORECASE)
_FIRST_SUFFIX = re.compile(r"-(?:1|left|chair1|table1|lamp1)$", re.IGNORECASE)
_REWRITE_MARKER = re.compile(r" - (?:SYMMETRICAL (?:LEFT|RIGHT)|BED AGAINST \w+ WALL) at \([^)]*\)$")


def normalize_family_id(furniture_id: str) -> str:
    """Strip one trailing positional suffix so both halves of a pair share an id."""
    return _FAMILY_SUFFIX.sub("", furniture_id or "")


def is_first_of_pair(furniture_id: str) -> bool:
    return bool(_FIRST_SUFFIX.search(furniture_id or ""))


def _name(item) -> str:
    return (getattr(item, "name", "") or "").lower()


def is_symmetry_excluded(item) -> bool:
    name = _name(item)
    return item.category in SYMMETRY_EXCLUDED_CATEGORIES or any(h in name for h in SYMMETRY_EXCLUDED_NAME_HINTS)


def is_symmetry_eligible(item) -> bool:
    if is_symmetry_excluded(item):
        return False
    name = _name(item)
    return item.category in SYMMETRY_CATEGORIES or any(h in name for h in SYMMETRY_NAME_HINTS)


def is_nightstand(item) -> bool:
    return item.category == "nightstand" or "nightstand" in _name(item)


@dataclass
class SymmetryGroup:
    family: str
    members: Tuple[Placement, Placement]
    nightstand: bool


def find_bed(placements: Sequence[Placement], catalog: Mapping[str, object]) -> Optional[Placement]:
    """Return the bed placement: category ``bed-frame`` first, else a name containing "bed"."""
    for p in placements:
        if catalog[p.furniture_id].category == BED_CATEGORY:
            return p
    for p in placements:
        item = catalog[p.furniture_id]
        if "bed" in _name(item) and not is_symmetry_eligible(item):
            return p
    return None


def preferred_bed_position(
    bed_width: float, bed_length: float, room_width: float, room_length: float
) -> Tuple[float, float, str]:
    """Headboard flush against the longer wall, centered along it."""
    if room_width >= room_length:
        return room_width / 2.0, room_length - bed_length / 2.0, "back"
    return bed_width / 2.0, room_length / 2.0, "left"


def find_symmetry_groups(placements: Sequence[Placement], catalog: Mapping[str, object]) -> List[SymmetryGroup]:
    families: Dict[str, List[Placement]] = {}
    for p in placements:
        item = catalog[p.furniture_id]
        if not is_symmetry_eligible(item):
            continue
        families.setdefault(normalize_family_id(p.furniture_id), []).append(p)
    groups: List[SymmetryGroup] = []
    for family, members in families.items():
        if len(members) != 2:
            continue
        first, second = members
        nightstand = is_nightstand(catalog[first.furniture_id]) or is_nightstand(catalog[second.furniture_id])
        groups.append(SymmetryGroup(family, (first, second), nightstand))
    return groups


def _rewrite_text(p: Placement, item, label: str, x: float, y: float) -> str:
    text = p.text or ""
    marker = _REWRITE_MARKER.search(text)
    # Text from an earlier pass keeps everything before its marker
    prefix = text[: marker.start()] if marker else text.split(" -")[0]
    prefix = prefix.strip()
    prefix = prefix or item.display_name
    return f"{prefix} - {label} at ({x:.1f}, {y:.1f})"


def _apply_bed_rule(placements, catalog, room, config, diagnostics: Diagnostics) -> Optional[Placement]:
    bed = find_bed(placements, catalog)
    if bed is None:
        return None
    fp = bed.footprint(catalog[bed.furniture_id])
    x, y, wall = preferred_bed_position(fp.width, fp.length, room.width, room.length)
    applied = bool(config.correct_bed_placement)
    diagnostics.add(
        BED_POSITION,
        f"Bed preferred against {wall} wall at ({x:.2f}, {y:.2f})"
        + ("" if applied else f"; kept proposed ({bed.x:.2f}, {bed.y:.2f})"),
        bed.furniture_id,
        wall=wall,
        preferred={"x": x, "y": y},
        current={"x": bed.x, "y": bed.y},
        applied=applied,
    )
    if applied:
        bed.x, bed.y = x, y
        bed.text = _rewrite_text(bed, catalog[bed.furniture_id], f"BED AGAINST {wall.upper()} WALL", x, y)
    return bed


def enforce_symmetry(
    placements: List[Placement],
    catalog: Mapping[str, object],
    room,
    config,
    diagnostics: Optional[Diagnostics] = None,
) -> List[Placement]:
    """Rewrite symmetrical pairs in place and return ``placements``.

    Nightstands go flush against the side walls at the bed's Y (room center
    Y without a bed). Other eligible pairs sit 1 ft in from the side walls at
    ``max(room center Y, mean Y)``. The item that is further left keeps the
    left slot.

    With ``config.enforce_nightstand_symmetry`` off, a nightstand pair next
    to a bed keeps its proposed coordinates and the computed targets are only
    reported as a ``symmetry_observed`` diagnostic.
    """
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    bed = _apply_bed_rule(placements, catalog, room, config, diagnostics)

    center_y = room.length / 2.0
    for group in find_symmetry_groups(placements, catalog):
        a, b = group.members
        left, right = (a, b) if a.x < b.x else (b, a)
        left_item = catalog[left.furniture_id]
        right_item = catalog[right.furniture_id]
        left_w = left.footprint(left_item).width
        right_w = right.footprint(right_item).width

        if group.nightstand:
            inset = 0.0
            if bed is not None:
                y = bed.y
                apply = bool(config.enforce_nightstand_symmetry)
            else:
                y = center_y
                apply = True
        else:
            inset = SYMMETRY_MARGIN
            y = max(center_y, (a.y + b.y) / 2.0)
            apply = True

        left_x = left_w / 2.0 + inset
        right_x = room.width - right_w / 2.0 - inset
        if left_x > right_x:
            # Pair wider than the room: keep the slots ordered so reruns do not swap them.
            left_x, right_x = right_x, left_x

        for p, partner in ((a, b), (b, a)):
            p.is_symmetrical = True
            p.symmetry_partner = partner.furniture_id

        targets = {
            left.furniture_id: {"x": left_x, "y": y},
            right.furniture_id: {"x": right_x, "y": y},
        }
        if not apply:
            diagnostics.add(
                SYMMETRY_OBSERVED,
                f"Kept proposed nightstand positions for '{group.family}' beside the bed",
                left.furniture_id,
                family=group.family,
                targets=targets,
            )
            log.debug("Symmetry for %s observed only: %s", group.family, targets)
            continue

        left.x, left.y = left_x, y
        right.x, right.y = right_x, y
        left.text = _rewrite_text(left, left_item, "SYMMETRICAL LEFT", left_x, y)
        right.text = _rewrite_text(right, right_item, "SYMMETRICAL RIGHT", right_x, y)
        diagnostics.add(
            SYMMETRY_ENFORCED,
            f"Mirrored '{group.family}' at y={y:.2f}",
            left.furniture_id,
            family=group.family,
            targets=targets,
        )
        log.debug("Symmetry for %s enforced: %s", group.family, targets)
    return placements
