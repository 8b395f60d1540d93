import pytest

from geometry.walls import anchor_on_wall, candidate_walls, select_wall


def test_back_wall_preferred_when_it_fits():
    wall = select_wall(3.0, 7.0, 12.0, 10.0)
    assert wall.name == "back"
    assert wall.x == 6.0
    assert wall.y == 8.5  # far edge flush with y = 10


def test_longest_qualifying_wall_when_back_is_too_short():
    # 14 ft wide sofa does not fit along a 12 ft back wall, but its 3 ft depth
    # fits along the 16 ft side walls
    wall = select_wall(3.0, 14.0, 12.0, 16.0)
    assert wall.name == "right"
    assert wall.x == 12.0 - 7.0
    assert wall.y == 8.0


def test_nothing_fits_falls_back_to_back_wall():
    wall = select_wall(20.0, 20.0, 10.0, 10.0)
    assert wall.name == "back"
    assert not wall.qualifies


def test_anchors_are_flush_and_inset():
    walls = {w.name: w for w in candidate_walls(2.0, 4.0, 12.0, 10.0)}
    assert (walls["left"].x, walls["left"].y) == (2.0, 5.0)
    assert (walls["right"].x, walls["right"].y) == (10.0, 5.0)
    assert (walls["front"].x, walls["front"].y) == (6.0, 1.0)
    inset = anchor_on_wall("front", 2.0, 4.0, 12.0, 10.0, inset=1.0)
    assert inset.y == 2.0


def test_unknown_wall_name():
    with pytest.raises(ValueError):
        anchor_on_wall("ceiling", 1.0, 1.0, 10.0, 10.0)
