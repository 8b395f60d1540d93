import pytest

from Arrange.diagnostics import COLLISION_EXHAUSTED, GEOMETRIC_ANOMALY, ContractViolation, Diagnostics
from Arrange.fallback import plan_fallback
from Arrange.params import ArrangeConfig, FurnitureItem, Room
from geometry.kernel import make_footprint, within_room


def _room(width, length, room_type="bedroom"):
    return Room(type=room_type, dimensions={"width": width, "length": length})


def _item(fid, category, dims, name=""):
    return FurnitureItem(id=fid, name=name, category=category, dimensions=dims)


BEDROOM_SET = [
    _item("bed", "bed-frame", (6.5, 5.0, 2.0), "Queen Bed"),
    _item("nightstand-1", "nightstand", (1.5, 1.3, 2.0), "Nightstand"),
    _item("nightstand-2", "nightstand", (1.5, 1.3, 2.0), "Nightstand"),
    _item("dresser", "dresser", (2.0, 4.0, 3.0), "Dresser"),
    _item("floor-lamp", "floor-lamp", (1.0, 1.0, 5.0), "Floor Lamp"),
    _item("armchair", "accent-chair", (2.5, 2.5, 3.0), "Armchair"),
]


def _clear(a, b, clearance):
    return (
        abs(a.x - b.x) >= (a.width + b.width) / 2.0 + clearance - 1e-9
        or abs(a.y - b.y) >= (a.length + b.length) / 2.0 + clearance - 1e-9
    )


def test_crowded_room_ends_clear_or_flagged():
    room = _room(10, 10)
    diags = Diagnostics()
    proposal = plan_fallback(room, BEDROOM_SET, diagnostics=diags)
    assert [p.furnitureId for p in proposal.placements] == [i.id for i in BEDROOM_SET]

    catalog = {i.id: i for i in BEDROOM_SET}
    fps = [make_footprint(p.furnitureId, p.x, p.y, catalog[p.furnitureId].dimensions) for p in proposal.placements]
    flagged = {d.furniture_id for d in diags.of_kind(COLLISION_EXHAUSTED)}
    for fp in fps:
        assert within_room(fp, 10, 10)
    for i, a in enumerate(fps):
        for b in fps[i + 1 :]:
            assert _clear(a, b, 0.25) or a.id in flagged or b.id in flagged


def test_bed_and_dresser_on_opposite_walls():
    proposal = plan_fallback(_room(12, 10), BEDROOM_SET[:1] + BEDROOM_SET[3:4])
    bed, dresser = proposal.placements
    assert (bed.x, bed.y) == (2.5, 5.0)
    assert (dresser.x, dresser.y) == (9.0, 2.0)
    assert bed.rotation == 0


def test_pair_metadata_and_utilization():
    proposal = plan_fallback(_room(10, 10), BEDROOM_SET)
    by_id = {p.furnitureId: p for p in proposal.placements}
    assert by_id["nightstand-1"].isSymmetrical
    assert by_id["nightstand-1"].symmetryPartner == "nightstand-2"
    assert by_id["nightstand-2"].symmetryPartner == "nightstand-1"
    assert not by_id["bed"].isSymmetrical
    analysis = proposal.spaceUtilizationAnalysis
    assert analysis.roomArea == 100
    assert analysis.utilizationPercentage == pytest.approx(51.65)
    assert not analysis.isOptimal
    assert proposal.skippedFurniture == []


def test_planner_is_deterministic():
    first = plan_fallback(_room(10, 10), BEDROOM_SET)
    second = plan_fallback(_room(10, 10), BEDROOM_SET)
    assert first.model_dump() == second.model_dump()


def test_living_room_chair_pair_zones():
    chairs = [
        _item("chair-1", "accent-chair", (2.5, 2.5, 3.0)),
        _item("chair-2", "accent-chair", (2.5, 2.5, 3.0)),
    ]
    proposal = plan_fallback(_room(16, 12, "living-room"), chairs)
    first, second = proposal.placements
    assert (first.x, first.y) == (4.0, pytest.approx(7.2))
    assert (second.x, second.y) == (12.0, pytest.approx(7.2))


def test_unknown_category_goes_to_bottom_row():
    proposal = plan_fallback(_room(10, 10), [_item("plant", "plant", (1.0, 1.0, 3.0))])
    p = proposal.placements[0]
    assert (p.x, p.y) == (1.5, 1.5)


def test_item_larger_than_room_is_pinned_and_reported():
    diags = Diagnostics()
    sofa = _item("sofa", "sofa", (3.0, 7.0, 3.0))
    proposal = plan_fallback(_room(4, 4), [sofa], diagnostics=diags)
    assert proposal.placements[0].x == 2.0
    anomalies = diags.of_kind(GEOMETRIC_ANOMALY)
    assert [d.data["axis"] for d in anomalies] == ["x"]


def test_zero_attempts_still_flags_collisions():
    items = [_item("box-a", "crate", (2.0, 2.0, 1.0)), _item("box-b", "crate", (2.0, 2.0, 1.0))]
    diags = Diagnostics()
    # same bottom-row slot would need retries; none allowed
    plan_fallback(_room(4, 4), items, ArrangeConfig(max_attempts=0), diags)
    assert diags.of_kind(COLLISION_EXHAUSTED)


def test_missing_inputs():
    with pytest.raises(ContractViolation):
        plan_fallback(None, BEDROOM_SET)
    with pytest.raises(ContractViolation):
        plan_fallback(_room(10, 10), None)
