"""Arrange and evaluate furniture for a room from JSON inputs.

This script runs the post-processing pipeline on proposed placements (or the
fallback planner when none are given), renders an SVG for visual inspection,
validates the geometry of the result and scores it.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from Arrange.orchestrator import arrange_room
from Arrange.params import ArrangeConfig, FurnitureItem, Room
from evaluation.scoring import score_layout
from evaluation.validators import check_bounds, validate_layout
from render.render_svg import render_layout_svg


class BoundaryViolationError(RuntimeError):
    """Raised when furniture falls outside the room walls."""


log = logging.getLogger(__name__)


def _load_json(path: str):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def main(argv=None) -> None:
    ap = argparse.ArgumentParser(description=__doc__)
    ap.add_argument("--room", required=True, help="Path to room JSON")
    ap.add_argument("--furniture", required=True, help="Path to furniture list JSON")
    ap.add_argument("--placements", help="Path to proposed placements JSON (fallback planner when omitted)")
    ap.add_argument("--svg_out", default="layout.svg", help="Path to write SVG rendering")
    ap.add_argument("--json-report", help="Path to write the layout, issues and score as JSON")
    ap.add_argument(
        "--min_clearance",
        type=float,
        default=0.0,
        help="Minimum clearance required between pieces during validation",
    )
    ap.add_argument("--enforce-nightstand-symmetry", action="store_true")
    ap.add_argument("--correct-bed-placement", action="store_true")
    ap.add_argument(
        "--strict",
        action="store_true",
        help="Exit with a non-zero status if any validation issues are found",
    )
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        room = Room.model_validate(_load_json(args.room))
        furniture = [FurnitureItem.model_validate(f) for f in _load_json(args.furniture)]
        placements = _load_json(args.placements) if args.placements else None
    except (OSError, json.JSONDecodeError) as exc:
        log.error("Failed to read inputs: %s", exc)
        sys.exit(1)
    if isinstance(placements, dict):
        placements = placements.get("placements") or []

    config = ArrangeConfig.from_env().model_copy(
        update={
            k: True
            for k, flag in (
                ("enforce_nightstand_symmetry", args.enforce_nightstand_symmetry),
                ("correct_bed_placement", args.correct_bed_placement),
            )
            if flag
        }
    )
    proposer = (lambda _room, _items: placements) if placements is not None else None
    result, used_fallback = arrange_room(room, furniture, proposer=proposer, config=config)
    if used_fallback:
        log.info("No usable placements; used the fallback planner")

    render_layout_svg(result, room, furniture, args.svg_out)
    log.info("Rendered layout SVG to %s", Path(args.svg_out).resolve())

    catalog = {item.id: item for item in furniture}
    bounds_issues = check_bounds(result.placements, catalog, room)
    issues = [
        msg
        for msg in validate_layout(result, furniture, room, min_clearance=args.min_clearance)
        if msg not in bounds_issues
    ]
    all_issues = bounds_issues + issues
    evaluation = score_layout(result, furniture, room, min_clearance=args.min_clearance)
    log.info("Score %s (%s)", evaluation["score"], "passed" if evaluation["passed"] else "failed")

    if args.json_report:
        report = {
            "layout": result.model_dump(),
            "usedFallback": used_fallback,
            "issues": all_issues,
            "evaluation": evaluation,
        }
        with open(args.json_report, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2)

    if all_issues:
        log_func = log.error if args.strict else log.warning
        for msg in all_issues:
            log_func(msg)
        if args.strict:
            if bounds_issues:
                raise BoundaryViolationError("; ".join(all_issues))
            raise RuntimeError("; ".join(all_issues))
    else:
        log.info("No issues detected")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI entry point
        log.error("%s", exc)
        sys.exit(1)
