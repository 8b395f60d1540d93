from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from Arrange.params import FurnitureItem, LayoutResult, Room
from evaluation.validators import validate_layout

PASSING_SCORE = 70


def _utilization_points(utilization: float) -> tuple:
    # (points, feedback, suggestion)
    if 0.15 < utilization <= 0.35:
        return 25, "Excellent space utilization - room feels balanced", None
    if 0.10 < utilization <= 0.50:
        return 20, "Good space utilization", None
    if utilization <= 0.10:
        return 10, None, "Consider adding more furniture for better room balance"
    return 15, None, "Room might feel a bit crowded - consider fewer pieces"


def score_layout(
    result: LayoutResult,
    furniture: Sequence[FurnitureItem],
    room: Room,
    preferences: Optional[Mapping[str, Any]] = None,
    min_clearance: float = 0,
) -> Dict[str, Any]:
    """Heuristic design score (0-100) with feedback, suggestions and issues.

    Points: 30 for a furnished room, up to 25 for space utilization, 20 for
    staying within ``preferences['budget']`` (when given), up to 15 for
    traffic flow and 10 for style coherence. Each geometry issue reported by
    :func:`validate_layout` costs 5 points, at most 30. ``passed`` means a
    score of at least 70.
    """
    preferences = preferences or {}
    feedback: List[str] = []
    suggestions: List[str] = []
    issues: List[str] = []

    placements = list(result.placements)
    if not placements:
        issues.append("No furniture arranged - room is empty")
        return {
            "score": 0,
            "feedback": feedback,
            "suggestions": ["Add furniture to the room"],
            "issues": issues,
            "passed": False,
        }

    score = 30
    feedback.append("Furniture selected for the room type")

    points, good, hint = _utilization_points(result.spaceUtilization)
    score += points
    if good:
        feedback.append(good)
    if hint:
        suggestions.append(hint)

    catalog = {item.id: item for item in furniture}
    placed = [catalog[p.furnitureId] for p in placements if p.furnitureId in catalog]
    budget = preferences.get("budget")
    total_price = sum(item.price for item in placed)
    if budget is None or total_price <= float(budget):
        score += 20
        feedback.append("Budget considerations met")
    else:
        score += 5
        issues.append(f"Total price {total_price:.2f} exceeds budget {float(budget):.2f}")

    geometry_issues = validate_layout(result, furniture, room, min_clearance=min_clearance)
    if len(placements) >= 3:
        score += 15
        feedback.append("Good traffic flow with multiple furniture pieces")
    elif len(placements) >= 2:
        score += 10
        feedback.append("Adequate furniture for the space")
    else:
        score += 5
        suggestions.append("Consider adding more furniture for better room balance")
    if geometry_issues:
        issues.extend(geometry_issues)
        score -= min(30, 5 * len(geometry_issues))

    style = (preferences.get("style") or room.style or "").lower()
    if not style:
        score += 10
    else:
        matching = [item for item in placed if style in (t.lower() for t in item.style_tags)]
        if placed and len(matching) * 2 >= len(placed):
            score += 10
            feedback.append(f"Style preferences ({style}) well incorporated")
        else:
            score += 5
            suggestions.append(f"Few pieces are tagged '{style}'; consider a more consistent style")

    if result.outOfBounds:
        suggestions.append("Move furniture that extends past the walls back into the room")

    score = max(0, min(100, score))
    return {
        "score": score,
        "feedback": feedback,
        "suggestions": suggestions,
        "issues": issues,
        "passed": score >= PASSING_SCORE,
    }
