from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from geometry.kernel import Footprint, footprint_for


@dataclass
class Placement:
    """Working copy of one placement, mutated while a layout is post-processed."""

    furniture_id: str
    x: float
    y: float
    z: float = 0.0
    rotation: int = 0
    text: str = ""
    is_symmetrical: bool = False
    symmetry_partner: Optional[str] = None

    def footprint(self, item) -> Footprint:
        return footprint_for(self, item)
