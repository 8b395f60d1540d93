import base64
import logging
import re
from typing import Dict, Optional, Sequence

import svgwrite

from Arrange.constants import SVG_SCALE_DEFAULT
from Arrange.params import FurnitureItem, LayoutResult, Room
from geometry.kernel import footprint_for

log = logging.getLogger(__name__)

COLOR_SCHEMES: Dict[str, Dict[str, str]] = {
    "default": {
        "sofa": "#FF6B6B",
        "coffee-table": "#4ECDC4",
        "tv-stand": "#45B7D1",
        "dining-table": "#96CEB4",
        "bed-frame": "#FFEAA7",
        "dresser": "#DDA0DD",
        "nightstand": "#98D8C8",
        "floor-lamp": "#F7DC6F",
        "accent-chair": "#85C1E9",
        "side-table": "#F8C471",
        "bookshelf": "#F1948A",
    },
    "monochrome": {
        "sofa": "#666666",
        "coffee-table": "#888888",
        "tv-stand": "#555555",
        "dining-table": "#777777",
        "bed-frame": "#999999",
        "dresser": "#666666",
        "nightstand": "#888888",
        "floor-lamp": "#555555",
        "accent-chair": "#777777",
        "side-table": "#999999",
        "bookshelf": "#666666",
    },
    "pastel": {
        "sofa": "#FFB6C1",
        "coffee-table": "#B6E5D8",
        "tv-stand": "#A8D8EA",
        "dining-table": "#C8E6C9",
        "bed-frame": "#FFF9C4",
        "dresser": "#E1BEE7",
        "nightstand": "#B2DFDB",
        "floor-lamp": "#FFF59D",
        "accent-chair": "#BBDEFB",
        "side-table": "#FFCC80",
        "bookshelf": "#F8BBD9",
    },
    "bold": {
        "sofa": "#E91E63",
        "coffee-table": "#00BCD4",
        "tv-stand": "#2196F3",
        "dining-table": "#4CAF50",
        "bed-frame": "#FF9800",
        "dresser": "#9C27B0",
        "nightstand": "#009688",
        "floor-lamp": "#FFC107",
        "accent-chair": "#3F51B5",
        "side-table": "#FF5722",
        "bookshelf": "#E91E63",
    },
}

# Cycled for categories without a scheme color
FALLBACK_PALETTE = ("#B0BEC5", "#A1887F", "#90A4AE", "#BCAAA4", "#80CBC4", "#CE93D8")

_ID_UNSAFE = re.compile(r"[^A-Za-z0-9_.-]")


def _svg_id(prefix: str, value: str) -> str:
    return f"{prefix}-{_ID_UNSAFE.sub('_', value)}"


FIXTURE_COLORS = {
    "window": "#4FC3F7",
    "door": "#8D6E63",
    "closet-door": "#A1887F",
    "french-door": "#6D4C41",
    "fireplace": "#E64A19",
}


def render_layout_svg(
    result: LayoutResult,
    room: Room,
    furniture: Sequence[FurnitureItem],
    svg_path: Optional[str] = None,
    scale: float = SVG_SCALE_DEFAULT,
    color_scheme: str = "default",
    title: Optional[str] = None,
    wall_ft: float = 0.25,
) -> str:
    """Render a top-down furniture plan and return the SVG markup.

    - Room frame is y-up; the drawing flips it so the back wall is on top.
    - Furniture is drawn in ascending ``layerOrder`` so stacked pieces paint last.
    - Pieces above layer 0 get a drop shadow and a small layer badge.
    - Fixtures are drawn as thick segments on their walls.
    - Adds a scale bar and a title line below the room.

    Writes the SVG to ``svg_path`` when one is given.
    """
    pad = scale * 1.0
    room_w = room.width * scale
    room_l = room.length * scale
    footer = scale * 2.5
    dwg = svgwrite.Drawing(
        svg_path or "layout.svg",
        profile="full",
        size=(room_w + 2 * pad, room_l + 2 * pad + footer),
    )

    def px(x: float) -> float:
        return pad + x * scale

    def py(y: float) -> float:
        return pad + (room.length - y) * scale

    stroke_color = "#222"
    text_color = "#000"
    font_main = "Arial"
    font_size_label = max(9, int(scale * 0.3))
    font_size_sub = max(8, int(scale * 0.25))

    dwg.add(dwg.rect(insert=(0, 0), size=(room_w + 2 * pad, room_l + 2 * pad + footer), fill="#FAFAFA"))

    # Floor and walls
    dwg.add(
        dwg.rect(
            insert=(pad, pad),
            size=(room_w, room_l),
            fill="#FFFFFF",
            stroke=stroke_color,
            stroke_width=max(1.0, wall_ft * scale),
            id="room",
        )
    )

    for fx in room.fixtures:
        half = fx.dimensions.width / 2.0
        pos = fx.position
        wall = pos.wall
        if wall in ("north", "top"):
            start, end = (px(pos.x - half), py(room.length)), (px(pos.x + half), py(room.length))
        elif wall in ("south", "bottom"):
            start, end = (px(pos.x - half), py(0)), (px(pos.x + half), py(0))
        elif wall in ("east", "right"):
            start, end = (px(room.width), py(pos.y - half)), (px(room.width), py(pos.y + half))
        else:
            start, end = (px(0), py(pos.y - half)), (px(0), py(pos.y + half))
        dwg.add(
            dwg.line(
                start=start,
                end=end,
                stroke=FIXTURE_COLORS.get(fx.type, stroke_color),
                stroke_width=max(2.0, wall_ft * scale * 2),
                id=_svg_id("fixture", fx.id),
            )
        )

    catalog = {}
    for item in furniture:
        catalog.setdefault(item.id, item)
    colors = COLOR_SCHEMES.get(color_scheme, COLOR_SCHEMES["default"])

    ordered = sorted(enumerate(result.placements), key=lambda e: (e[1].layerOrder, e[0]))
    for index, p in ordered:
        item = catalog.get(p.furnitureId)
        if item is None:
            log.warning("Not drawing %s: missing from catalog", p.furnitureId)
            continue
        fp = footprint_for(p, item)
        left, right, top, bottom = fp.bounds
        x0, y0 = px(left), py(top)
        w, h = fp.width * scale, fp.length * scale
        fill = colors.get(item.category) or FALLBACK_PALETTE[index % len(FALLBACK_PALETTE)]

        if p.layerOrder > 0:
            offset = max(2.0, scale * 0.08)
            dwg.add(
                dwg.rect(
                    insert=(x0 + offset, y0 + offset),
                    size=(w, h),
                    fill="#000000",
                    fill_opacity=0.25,
                    stroke="none",
                )
            )
        dwg.add(
            dwg.rect(
                insert=(x0, y0),
                size=(w, h),
                fill=fill,
                stroke=stroke_color,
                stroke_width=1,
                id=_svg_id("furniture", p.furnitureId),
                class_="furniture",
            )
        )
        dwg.add(
            dwg.text(
                item.display_name,
                insert=(px(p.x), py(p.y)),
                text_anchor="middle",
                font_size=font_size_label,
                font_family=font_main,
                fill=text_color,
            )
        )
        if p.layerOrder > 0:
            radius = max(6.0, scale * 0.2)
            bx, by = x0 + w - radius, y0 + radius
            dwg.add(dwg.circle(center=(bx, by), r=radius, fill="#333333", class_="layer-badge"))
            dwg.add(
                dwg.text(
                    str(p.layerOrder),
                    insert=(bx, by + radius * 0.4),
                    text_anchor="middle",
                    font_size=max(7, int(radius * 1.2)),
                    font_family=font_main,
                    fill="#FFFFFF",
                )
            )

    # Scale bar
    bar_len_ft = max(1, min(10, int(room.width // 2)))
    bar_len_px = bar_len_ft * scale
    base_y = pad + room_l + scale * 0.9
    dwg.add(dwg.line(start=(pad, base_y), end=(pad + bar_len_px, base_y), stroke=stroke_color, stroke_width=2))
    for i in range(0, bar_len_ft + 1):
        x = pad + i * scale
        dwg.add(dwg.line(start=(x, base_y - 4), end=(x, base_y + 4), stroke=stroke_color, stroke_width=1))
    dwg.add(
        dwg.text(
            f"0   {bar_len_ft} ft",
            insert=(pad + bar_len_px / 2, base_y + 14),
            text_anchor="middle",
            font_size=font_size_sub,
            fill=text_color,
        )
    )

    title = title or f"{room.type} {room.width:g}' x {room.length:g}'"
    dwg.add(dwg.text(title, insert=(pad, base_y + scale * 1.2), font_size=font_size_label, fill=text_color))

    if svg_path:
        dwg.save()
        log.debug("Wrote %s", svg_path)
    return dwg.tostring()


def svg_to_data_url(svg: str) -> str:
    """Encode SVG markup (or the contents of an ``.svg`` file path) as a data URL."""
    if not svg.lstrip().startswith("<"):
        with open(svg, "rb") as f:
            data = f.read()
    else:
        data = svg.encode("utf-8")
    b64 = base64.b64encode(data).decode("utf-8")
    return f"data:image/svg+xml;base64,{b64}"
