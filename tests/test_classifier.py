import pytest

from Arrange.classifier import classify_footprint, classify_item
from Arrange.params import FurnitureItem


@pytest.mark.parametrize(
    "length, width, category, priority",
    [
        (6.5, 5.0, "large", 1),  # bed
        (3.0, 3.5, "large", 1),  # width over 3
        (4.5, 3.4, "large", 1),
        (4.0, 3.0, "medium", 2),  # area 12, width exactly 3
        (2.5, 1.6, "medium", 2),  # both over the pair thresholds
        (2.0, 1.4, "small", 3),  # area 2.8
        (1.5, 1.5, "small", 3),  # area 2.25
        (1.5, 1.3, "accent", 4),  # area 1.95 is not over 2
        (1.0, 1.0, "accent", 4),
    ],
)
def test_rules_in_order(length, width, category, priority):
    result = classify_footprint(length, width)
    assert result.category == category
    assert result.priority == priority


def test_thresholds_are_strict():
    # length exactly 5 with a small footprint is not large
    assert classify_footprint(5.0, 1.0).category == "small"
    # area exactly 15 with neither dimension over its limit
    assert classify_footprint(5.0, 3.0).category == "medium"
    # area exactly 6 and width exactly 1.5
    assert classify_footprint(4.0, 1.5).category == "small"
    # area exactly 2
    assert classify_footprint(2.0, 1.0).category == "accent"


def test_accent_items_keep_off_the_wall():
    assert classify_footprint(0.8, 0.8).wall_distance == 1.0
    assert classify_footprint(6.0, 4.0).wall_distance == 0.0


def test_classify_item_ignores_height():
    item = FurnitureItem(id="lamp", name="Floor Lamp", category="floor-lamp", dimensions=(1.0, 1.0, 6.0))
    assert classify_item(item).category == "accent"
    assert classify_item(item).area == pytest.approx(1.0)
