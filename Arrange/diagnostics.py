"""Errors and the structured trace returned alongside layout results.

Only a structurally missing input is an exception. Everything else that goes
wrong while placing furniture is recorded as a :class:`Diagnostic` so callers
can inspect what happened without scraping logs.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterator, List, Optional

DANGLING_REFERENCE = "dangling_reference"
INVALID_PLACEMENT = "invalid_placement"
ROTATION_NORMALIZED = "rotation_normalized"
GEOMETRIC_ANOMALY = "geometric_anomaly"
COLLISION_EXHAUSTED = "collision_exhausted"
SYMMETRY_ENFORCED = "symmetry_enforced"
SYMMETRY_OBSERVED = "symmetry_observed"
BED_POSITION = "bed_position"
OUT_OF_BOUNDS = "out_of_bounds"
LAYER_STACK = "layer_stack"
PROPOSER_FAILED = "proposer_failed"


class ContractViolation(ValueError):
    """Raised when a required input (room, catalog, placements) is missing or malformed."""


@dataclass
class Diagnostic:
    kind: str
    message: str
    furniture_id: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class Diagnostics:
    def __init__(self) -> None:
        self._items: List[Diagnostic] = []

    def add(self, kind: str, message: str, furniture_id: Optional[str] = None, **data: Any) -> Diagnostic:
        diag = Diagnostic(kind, message, furniture_id, dict(data))
        self._items.append(diag)
        return diag

    def of_kind(self, kind: str) -> List[Diagnostic]:
        return [d for d in self._items if d.kind == kind]

    def to_list(self) -> List[Dict[str, Any]]:
        return [d.to_dict() for d in self._items]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)
