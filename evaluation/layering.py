"""Render-order assignment for overlapping furniture footprints.

Larger pieces (rugs, beds) go underneath smaller ones (lamps, decor) that sit
on or next to them. Layer 0 paints first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from geometry.kernel import Footprint, area, overlaps

log = logging.getLogger(__name__)


@dataclass
class LayerAssignment:
    footprint: Footprint
    index: int
    layer_order: int = 0
    cluster: Optional[int] = None


def assign_layers(footprints: Sequence[Footprint]) -> List[LayerAssignment]:
    """Assign a layer order inside each overlap cluster.

    Items are visited in input order. Each unassigned item seeds a cluster
    with every later unassigned item that overlaps the seed itself. This is a
    single hop, not a transitive closure: in a chain A-B-C where only
    neighbours overlap, C is not pulled into A's cluster. Each cluster is
    sorted by area, largest first (stable on ties), and an item's layer is
    its rank in that order.

    Returns the assignments sorted by ``(layer_order, index)``.
    """
    entries = [LayerAssignment(fp, i) for i, fp in enumerate(footprints)]
    cluster_id = 0
    for seed in entries:
        if seed.cluster is not None:
            continue
        group = [seed]
        for other in entries[seed.index + 1 :]:
            if other.cluster is None and overlaps(seed.footprint, other.footprint):
                group.append(other)
        group.sort(key=lambda e: area(e.footprint), reverse=True)
        for rank, member in enumerate(group):
            member.layer_order = rank
            member.cluster = cluster_id
        if len(group) > 1:
            log.debug(
                "Overlap cluster %s: %s",
                cluster_id,
                ", ".join(f"{m.footprint.id}@{m.layer_order}" for m in group),
            )
        cluster_id += 1
    return sorted(entries, key=lambda e: (e.layer_order, e.index))


def stacked(assignments: Sequence[LayerAssignment]) -> List[LayerAssignment]:
    """Return the assignments that render on top of something (layer > 0)."""
    return [a for a in assignments if a.layer_order > 0]
