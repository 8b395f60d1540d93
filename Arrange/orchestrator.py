"""Turn raw furniture placements into a finalized, render-ready layout.

``process`` is the post-processing step: symmetry, then layering, then
utilization and bounds reporting. ``arrange_room`` puts a layout proposer
(or the fallback planner) in front of it.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from Arrange.diagnostics import (
    DANGLING_REFERENCE,
    INVALID_PLACEMENT,
    LAYER_STACK,
    OUT_OF_BOUNDS,
    PROPOSER_FAILED,
    ROTATION_NORMALIZED,
    ContractViolation,
    Diagnostics,
)
from Arrange.fallback import plan_fallback
from Arrange.params import (
    ArrangeConfig,
    ArrangementProposal,
    FinalPlacement,
    FurnitureItem,
    LayoutResult,
    RawPlacement,
    Room,
)
from Arrange.placement import Placement
from evaluation.layering import assign_layers
from evaluation.symmetry import enforce_symmetry
from geometry.kernel import within_room

log = logging.getLogger(__name__)

Proposer = Callable[[Room, List[FurnitureItem]], Union[ArrangementProposal, Sequence[Any], None]]


def _coerce_room(room: Any) -> Room:
    if isinstance(room, Room):
        return room
    try:
        return Room.model_validate(room)
    except ValidationError as exc:
        raise ContractViolation(f"Invalid room: {exc}") from exc


def _coerce_catalog(furniture_items: Sequence[Any]) -> Tuple[List[FurnitureItem], Dict[str, FurnitureItem]]:
    items: List[FurnitureItem] = []
    for entry in furniture_items:
        if isinstance(entry, FurnitureItem):
            items.append(entry)
            continue
        try:
            items.append(FurnitureItem.model_validate(entry))
        except ValidationError as exc:
            raise ContractViolation(f"Invalid furniture item: {exc}") from exc
    catalog: Dict[str, FurnitureItem] = {}
    for item in items:
        if item.id in catalog:
            log.warning("Duplicate furniture id %s in catalog; keeping the first entry", item.id)
            continue
        catalog[item.id] = item
    return items, catalog


def _raw_rotation(entry: Any) -> Any:
    if isinstance(entry, Mapping):
        if "rotation" in entry:
            return entry["rotation"]
        position = entry.get("position")
        if isinstance(position, Mapping):
            return position.get("rotation")
    return None


def _working_copies(
    raw_placements: Sequence[Any],
    catalog: Mapping[str, FurnitureItem],
    diagnostics: Diagnostics,
) -> List[Tuple[int, Placement]]:
    working: List[Tuple[int, Placement]] = []
    for index, entry in enumerate(raw_placements):
        if isinstance(entry, (FinalPlacement, RawPlacement)):
            entry = entry.model_dump()
        try:
            raw = RawPlacement.model_validate(entry)
        except (ValidationError, TypeError, ValueError) as exc:
            diagnostics.add(INVALID_PLACEMENT, f"Dropped malformed placement #{index}: {exc}", index=index)
            log.debug("Dropped malformed placement #%s", index)
            continue
        if raw.furnitureId not in catalog:
            diagnostics.add(
                DANGLING_REFERENCE,
                f"Placement #{index} references unknown furniture '{raw.furnitureId}'",
                raw.furnitureId,
                index=index,
            )
            log.debug("Dropped dangling placement %s", raw.furnitureId)
            continue

        original = _raw_rotation(entry)
        if original is not None and float(original) != float(raw.rotation):
            diagnostics.add(
                ROTATION_NORMALIZED,
                f"Rotation {original} snapped to {raw.rotation}",
                raw.furnitureId,
                original=original,
                rotation=raw.rotation,
            )

        # Finalized placements carry their text as placementText
        text = raw.reasoning or (entry.get("placementText", "") if isinstance(entry, Mapping) else "")
        working.append(
            (
                index,
                Placement(
                    furniture_id=raw.furnitureId,
                    x=raw.x,
                    y=raw.y,
                    rotation=raw.rotation,
                    text=text or "",
                    is_symmetrical=bool(raw.isSymmetrical),
                    symmetry_partner=raw.symmetryPartner or None,
                ),
            )
        )
    return working


def _canonical(
    working: Sequence[Tuple[int, Placement]], order: Mapping[str, int]
) -> List[Tuple[int, Placement]]:
    """Sort by catalog position, then coordinates, so input order does not leak into results."""
    return sorted(working, key=lambda e: (order[e[1].furniture_id], e[1].x, e[1].y, e[0]))


def process(
    room: Any,
    furniture_items: Optional[Sequence[Any]],
    raw_placements: Optional[Sequence[Any]],
    config: Optional[ArrangeConfig] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> LayoutResult:
    """Finalize ``raw_placements`` for ``room``.

    Raises ``ContractViolation`` when the room, the catalog or the placement
    list is missing, or when the room or a catalog entry is malformed. Every
    other problem is reported through ``LayoutResult.diagnostics``.
    """
    if room is None:
        raise ContractViolation("A room is required")
    if furniture_items is None:
        raise ContractViolation("A furniture list is required")
    if raw_placements is None:
        raise ContractViolation("A placement list is required")

    room = _coerce_room(room)
    items, catalog = _coerce_catalog(furniture_items)
    config = config or ArrangeConfig()
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    order = {item_id: i for i, item_id in enumerate(catalog)}

    working = _canonical(_working_copies(raw_placements, catalog, diagnostics), order)
    enforce_symmetry([p for _, p in working], catalog, room, config, diagnostics)
    working = _canonical(working, order)
    placements = [p for _, p in working]

    footprints = [p.footprint(catalog[p.furniture_id]) for p in placements]
    assignments = assign_layers(footprints)
    for assignment in assignments:
        if assignment.layer_order > 0:
            fp = assignment.footprint
            diagnostics.add(
                LAYER_STACK,
                f"{catalog[fp.id].display_name} renders above overlapping furniture (layer {assignment.layer_order})",
                fp.id,
                layer=assignment.layer_order,
                cluster=assignment.cluster,
            )

    out_of_bounds: List[str] = []
    for fp in footprints:
        if not within_room(fp, room.width, room.length):
            out_of_bounds.append(fp.id)
            diagnostics.add(
                OUT_OF_BOUNDS,
                f"{catalog[fp.id].display_name} extends past the room walls",
                fp.id,
                bounds=list(fp.bounds),
            )

    total_area = sum(fp.area() for fp in footprints)
    utilization = total_area / room.area

    finals: List[FinalPlacement] = []
    for assignment in assignments:
        p = placements[assignment.index]
        item = catalog[p.furniture_id]
        finals.append(
            FinalPlacement(
                furnitureId=p.furniture_id,
                x=p.x,
                y=p.y,
                z=0.0,
                rotation=p.rotation,
                layerOrder=assignment.layer_order,
                placementText=p.text or f"{item.display_name} at ({p.x:.1f}, {p.y:.1f})",
                isSymmetrical=p.is_symmetrical,
                symmetryPartner=p.symmetry_partner,
            )
        )

    log.info(
        "Processed %s placements (%s dropped), utilization %.1f%%, %s out of bounds",
        len(finals),
        len(raw_placements) - len(finals),
        utilization * 100.0,
        len(out_of_bounds),
    )
    return LayoutResult(
        placements=finals,
        spaceUtilization=utilization,
        outOfBounds=out_of_bounds,
        diagnostics=diagnostics.to_list(),
    )


def _proposal_placements(proposal: Any) -> List[Any]:
    if proposal is None:
        return []
    if isinstance(proposal, ArrangementProposal):
        return list(proposal.placements)
    if isinstance(proposal, Mapping):
        return list(proposal.get("placements") or [])
    return list(proposal)


def arrange_room(
    room: Any,
    furniture_items: Optional[Sequence[Any]],
    proposer: Optional[Proposer] = None,
    config: Optional[ArrangeConfig] = None,
) -> Tuple[LayoutResult, bool]:
    """Propose placements for ``room`` and finalize them.

    The fallback planner is used when ``proposer`` is missing, raises, or
    proposes nothing. Returns the layout and whether the fallback was used.
    """
    if room is None:
        raise ContractViolation("A room is required")
    if furniture_items is None:
        raise ContractViolation("A furniture list is required")
    room = _coerce_room(room)
    items, _ = _coerce_catalog(furniture_items)
    config = config or ArrangeConfig()
    diagnostics = Diagnostics()

    placements: List[Any] = []
    if proposer is not None:
        try:
            placements = _proposal_placements(proposer(room, items))
        except Exception as exc:
            log.warning("Layout proposer failed: %s", exc)
            diagnostics.add(PROPOSER_FAILED, f"Layout proposer failed: {exc}", error=type(exc).__name__)
        else:
            if not placements:
                diagnostics.add(PROPOSER_FAILED, "Layout proposer returned no placements")

    used_fallback = not placements
    if used_fallback:
        placements = list(plan_fallback(room, items, config, diagnostics).placements)
    return process(room, items, placements, config, diagnostics), used_fallback
