"""
Border resolution: one native stroke when all sides agree, per-side otherwise.
"""

from typing import List, Optional

from .model import (
    Border,
    BorderSide,
    CompositeBorder,
    Fill,
    Geometry,
    ShapeItem,
    StyleSnapshot,
    UniformBorder,
)
from .units import parse_color, parse_px, px_to_inch

# CSS border-style -> PowerPoint preset dash
DASH_STYLES = {
    "solid": "solid",
    "dashed": "dash",
    "dotted": "sysDot",
    "double": "solid",
}

_INVISIBLE_STYLES = ("none", "hidden")


def _side(style: StyleSnapshot, name: str):
    width = parse_px(getattr(style, "border_%s_width" % name))
    line_style = getattr(style, "border_%s_style" % name) or "none"
    color = parse_color(getattr(style, "border_%s_color" % name))
    if line_style in _INVISIBLE_STYLES:
        width = 0.0
    return width, color.hex, line_style


def resolve_border(style: StyleSnapshot, scale: float) -> Optional[Border]:
    """Return a UniformBorder, a CompositeBorder, or None when no side is visible."""
    sides = {name: _side(style, name) for name in ("top", "right", "bottom", "left")}
    visible = [s for s in sides.values() if s[0] > 0 and s[1]]
    if not visible:
        return None

    first = sides["top"]
    if all(s == first for s in sides.values()):
        width, color, line_style = first
        return UniformBorder(
            width_inches=px_to_inch(width, scale),
            width_px=width,
            color=color,
            dash_style=DASH_STYLES.get(line_style, "solid"),
        )

    def side(name):
        width, color, _ = sides[name]
        if not color:
            width = 0.0
        return BorderSide(width_px=width, color=color)

    return CompositeBorder(top=side("top"), right=side("right"), bottom=side("bottom"), left=side("left"))


def composite_border_items(border: CompositeBorder, geometry: Geometry, scale: float,
                           z_index: int, dom_order: int) -> List[ShapeItem]:
    """Four thin rectangles hugging the edges of a square-cornered box."""
    x, y, w, h = geometry.x, geometry.y, geometry.w, geometry.h
    items = []
    for name, side in border.sides():
        if side.width_px <= 0 or not side.color:
            continue
        thickness = px_to_inch(side.width_px, scale)
        if name == "top":
            edge = Geometry(x, y, w, thickness)
        elif name == "right":
            edge = Geometry(x + w - thickness, y, thickness, h)
        elif name == "bottom":
            edge = Geometry(x, y + h - thickness, w, thickness)
        else:
            edge = Geometry(x, y, thickness, h)
        items.append(ShapeItem(
            z_index=z_index + 1,
            dom_order=dom_order,
            geometry=edge,
            kind="rect",
            fill=Fill(side.color),
        ))
    return items
