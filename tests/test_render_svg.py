import base64
import xml.etree.ElementTree as ET

from Arrange.orchestrator import process
from Arrange.params import FurnitureItem
from Arrange.room_defaults import default_room
from render.render_svg import render_layout_svg, svg_to_data_url

SVG = "{http://www.w3.org/2000/svg}"

FURNITURE = [
    FurnitureItem(id="rug", name="Area Rug", category="rug", dimensions=(8, 5, 0.1)),
    FurnitureItem(id="lamp", name="Floor Lamp", category="floor-lamp", dimensions=(1, 1, 5)),
    FurnitureItem(id="dresser", name="Dresser", category="dresser", dimensions=(2, 4, 3)),
]
PLACEMENTS = [
    {"furnitureId": "lamp", "x": 6, "y": 4},
    {"furnitureId": "rug", "x": 6, "y": 4},
    {"furnitureId": "dresser", "x": 9, "y": 1.5},
]


def _render(tmp_path, scale=40):
    room = default_room("bedroom")
    result = process(room, FURNITURE, PLACEMENTS)
    svg_path = tmp_path / "layout.svg"
    markup = render_layout_svg(result, room, FURNITURE, str(svg_path), scale=scale)
    return room, result, svg_path, markup


def test_room_outline_matches_dimensions(tmp_path):
    room, _, svg_path, _ = _render(tmp_path, scale=40)
    root = ET.parse(svg_path).getroot()
    outline = next(r for r in root.iter(f"{SVG}rect") if r.get("id") == "room")
    assert float(outline.get("width")) == room.width * 40
    assert float(outline.get("height")) == room.length * 40


def test_furniture_drawn_in_layer_order_with_badges(tmp_path):
    _, result, svg_path, _ = _render(tmp_path)
    root = ET.parse(svg_path).getroot()
    ids = [r.get("id") for r in root.iter(f"{SVG}rect") if (r.get("id") or "").startswith("furniture-")]
    assert ids.index("furniture-rug") < ids.index("furniture-lamp")
    badges = [c for c in root.iter(f"{SVG}circle") if c.get("class") == "layer-badge"]
    stacked = [p for p in result.placements if p.layerOrder > 0]
    assert len(badges) == len(stacked) >= 1


def test_y_axis_is_flipped(tmp_path):
    room, _, svg_path, _ = _render(tmp_path, scale=10)
    root = ET.parse(svg_path).getroot()
    dresser = next(r for r in root.iter(f"{SVG}rect") if r.get("id") == "furniture-dresser")
    # dresser spans y 0.5..2.5 in the room, near the front wall at the bottom of the drawing
    pad = 10
    assert float(dresser.get("y")) == pad + (room.length - 2.5) * 10
    assert float(dresser.get("x")) == pad + 7 * 10


def test_fixtures_are_drawn(tmp_path):
    room, _, svg_path, _ = _render(tmp_path)
    root = ET.parse(svg_path).getroot()
    lines = {l.get("id") for l in root.iter(f"{SVG}line")}
    for fx in room.fixtures:
        assert f"fixture-{fx.id}" in lines


def test_data_url_round_trip(tmp_path):
    _, _, svg_path, markup = _render(tmp_path)
    url = svg_to_data_url(markup)
    assert url.startswith("data:image/svg+xml;base64,")
    assert base64.b64decode(url.split(",", 1)[1]).decode("utf-8") == markup
    assert svg_to_data_url(str(svg_path)).startswith("data:image/svg+xml;base64,")
