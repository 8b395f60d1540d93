import pytest

from Arrange.params import FinalPlacement, FurnitureItem, LayoutResult, Room
from Arrange.room_defaults import default_room
from evaluation.scoring import score_layout
from evaluation.validators import (
    check_bounds,
    check_clearance,
    check_fixture_clearance,
    check_overlaps,
    fixture_zone,
    validate_layout,
)

ITEMS = [
    FurnitureItem(id="bed", name="Bed", category="bed-frame", dimensions=(5, 4, 2), price=800, style_tags=["modern"]),
    FurnitureItem(id="desk", name="Desk", category="desk", dimensions=(2, 2, 2.5), price=200, style_tags=["modern"]),
    FurnitureItem(id="lamp", name="Lamp", category="floor-lamp", dimensions=(1, 1, 5), price=50),
]
CATALOG = {i.id: i for i in ITEMS}
ROOM = Room(dimensions={"width": 10, "length": 10})


def _p(fid, x, y, layer=0):
    return FinalPlacement(furnitureId=fid, x=x, y=y, layerOrder=layer)


def _result(placements, utilization=0.25):
    return LayoutResult(placements=placements, spaceUtilization=utilization)


def test_bounds():
    assert check_bounds([_p("bed", 2, 2.5)], CATALOG, ROOM) == []
    issues = check_bounds([_p("bed", 1, 2.5)], CATALOG, ROOM)
    assert len(issues) == 1 and issues[0].startswith("Bed")


def test_overlaps_ignore_layered_pairs_by_default():
    same_layer = [_p("bed", 2, 2.5), _p("lamp", 2, 2.5)]
    assert len(check_overlaps(same_layer, CATALOG)) == 1
    layered = [_p("bed", 2, 2.5), _p("lamp", 2, 2.5, layer=1)]
    assert check_overlaps(layered, CATALOG) == []
    assert len(check_overlaps(layered, CATALOG, allow_layered=False)) == 1


def test_clearance():
    # bed spans x 0..4, desk spans x 4.5..6.5
    placements = [_p("bed", 2, 2.5), _p("desk", 5.5, 2)]
    assert check_clearance(placements, CATALOG, 0.25) == []
    issues = check_clearance(placements, CATALOG, 1.0)
    assert len(issues) == 1 and "0.50 ft" in issues[0]
    assert check_clearance(placements, CATALOG, 0) == []


def test_fixture_clearance_with_default_bedroom():
    room = default_room("bedroom")
    door = next(f for f in room.fixtures if f.type == "door")
    zone = fixture_zone(door, room)
    assert zone.bounds == (pytest.approx(0.75), pytest.approx(3.25), pytest.approx(2.5), 0.0)
    issues = check_fixture_clearance([_p("desk", 2, 1.5)], CATALOG, room)
    assert issues and "door" in issues[0]
    assert check_fixture_clearance([_p("desk", 6, 5)], CATALOG, room) == []


def test_validate_layout_aggregates():
    result = _result([_p("bed", 1, 2.5), _p("desk", 1.5, 2)])
    issues = validate_layout(result, ITEMS, ROOM)
    assert any("outside" in i for i in issues)
    assert any("overlaps" in i for i in issues)


def test_score_clean_layout_passes():
    result = _result([_p("bed", 2, 2.5), _p("desk", 6, 6), _p("lamp", 9, 9)])
    evaluation = score_layout(result, ITEMS, ROOM)
    assert evaluation["score"] == 100
    assert evaluation["passed"]
    assert evaluation["issues"] == []


def test_score_penalizes_budget_and_geometry():
    result = _result([_p("bed", 2, 2.5), _p("desk", 6, 6), _p("lamp", 9, 9)])
    evaluation = score_layout(result, ITEMS, ROOM, preferences={"budget": 500})
    assert evaluation["score"] == 85
    assert any("budget" in i for i in evaluation["issues"])

    overlapping = _result([_p("bed", 2, 2.5), _p("desk", 2, 2.5), _p("lamp", 9, 9)])
    evaluation = score_layout(overlapping, ITEMS, ROOM)
    assert evaluation["score"] == 95
    assert evaluation["issues"]


def test_empty_layout_scores_zero():
    evaluation = score_layout(_result([], 0.0), ITEMS, ROOM)
    assert evaluation == {
        "score": 0,
        "feedback": [],
        "suggestions": ["Add furniture to the room"],
        "issues": ["No furniture arranged - room is empty"],
        "passed": False,
    }
