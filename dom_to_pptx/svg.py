"""
SVG documents for effects PowerPoint shapes cannot express natively.

Each builder returns self-contained markup at pixel size; the render backend
turns it into a PNG payload.
"""

import math
from typing import Optional, Tuple

from lxml import etree

from .geometry import is_circle
from .model import CompositeBorder, GradientDescriptor, TextNode, VisualNode

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

# computed properties copied onto each element of an inline <svg>
INLINE_PROPERTIES = (
    ("stroke_width", "stroke-width"),
    ("stroke_linecap", "stroke-linecap"),
    ("stroke_linejoin", "stroke-linejoin"),
    ("opacity", "opacity"),
    ("font_family", "font-family"),
    ("font_size", "font-size"),
    ("font_weight", "font-weight"),
)


def _num(value: float) -> str:
    return "%g" % round(value, 3)


def _svg_root(width: float, height: float):
    return etree.Element(
        "{%s}svg" % SVG_NS,
        nsmap={None: SVG_NS},
        width=_num(width),
        height=_num(height),
        viewBox="0 0 %s %s" % (_num(width), _num(height)),
    )


def _sub(parent, tag: str, **attrs):
    return etree.SubElement(parent, "{%s}%s" % (SVG_NS, tag), {k.replace("_", "-"): v for k, v in attrs.items()})


def _to_string(root) -> str:
    return etree.tostring(root, encoding="unicode")


def _shape(parent, x: float, y: float, w: float, h: float, radius: float, **attrs):
    if is_circle(radius, w, h):
        return _sub(parent, "ellipse", cx=_num(x + w / 2), cy=_num(y + h / 2),
                    rx=_num(w / 2), ry=_num(h / 2), **attrs)
    return _sub(parent, "rect", x=_num(x), y=_num(y), width=_num(w), height=_num(h),
                rx=_num(radius), ry=_num(radius), **attrs)


def gradient_svg(width: float, height: float, gradient: GradientDescriptor, radius: float = 0.0,
                 stroke: Optional[Tuple[str, float]] = None) -> str:
    """Rectangle (or ellipse) filled with a linear gradient, optionally stroked."""
    root = _svg_root(width, height)
    defs = _sub(root, "defs")
    grad = _sub(
        defs, "linearGradient", id="grad",
        x1="%s%%" % _num(gradient.start[0]), y1="%s%%" % _num(gradient.start[1]),
        x2="%s%%" % _num(gradient.end[0]), y2="%s%%" % _num(gradient.end[1]),
    )
    for stop in gradient.stops:
        _sub(grad, "stop", offset="%s%%" % _num(stop.offset),
             stop_color="#%s" % (stop.color or "000000"), stop_opacity=_num(stop.alpha))

    attrs = {"fill": "url(#grad)"}
    inset = 0.0
    if stroke:
        color, stroke_width = stroke
        attrs["stroke"] = "#%s" % color
        attrs["stroke_width"] = _num(stroke_width)
        # keep the stroke inside the element box
        inset = stroke_width / 2
    _shape(root, inset, inset, width - inset * 2, height - inset * 2, max(radius - inset, 0), **attrs)
    return _to_string(root)


def blurred_svg(width: float, height: float, color: str, radius: float, blur_px: float):
    """
    Gaussian-blurred filled shape.

    Returns (markup, padding_px); the canvas grows by 3x the blur on each side
    so the soft edge is not clipped.
    """
    padding = blur_px * 3
    full_w = width + padding * 2
    full_h = height + padding * 2
    root = _svg_root(full_w, full_h)
    defs = _sub(root, "defs")
    blur_filter = _sub(defs, "filter", id="f1", x="-50%", y="-50%", width="200%", height="200%")
    gaussian = etree.SubElement(blur_filter, "{%s}feGaussianBlur" % SVG_NS)
    gaussian.set("in", "SourceGraphic")
    gaussian.set("stdDeviation", _num(blur_px))
    _shape(root, padding, padding, width, height, radius, fill="#%s" % color, filter="url(#f1)")
    return _to_string(root), padding


def _arc_point(cx: float, cy: float, r: float, degrees: float):
    rad = math.radians(degrees)
    return cx + r * math.cos(rad), cy + r * math.sin(rad)


def _side_path(name: str, width: float, height: float, radius: float, stroke: float) -> str:
    d = stroke / 2
    r = max(min(radius, min(width, height) / 2) - d, 0)
    left, top, right, bottom = d, d, width - d, height - d
    # corner arc centers
    tl = (left + r, top + r)
    tr = (right - r, top + r)
    br = (right - r, bottom - r)
    bl = (left + r, bottom - r)
    # each side owns the half of the two corner arcs adjacent to it
    if name == "top":
        start, mid_a, mid_b, end = _arc_point(*tl, r, 225), (left + r, top), (right - r, top), _arc_point(*tr, r, 315)
    elif name == "right":
        start, mid_a, mid_b, end = _arc_point(*tr, r, 315), (right, top + r), (right, bottom - r), _arc_point(*br, r, 45)
    elif name == "bottom":
        start, mid_a, mid_b, end = _arc_point(*br, r, 45), (right - r, bottom), (left + r, bottom), _arc_point(*bl, r, 135)
    else:
        start, mid_a, mid_b, end = _arc_point(*bl, r, 135), (left, bottom - r), (left, top + r), _arc_point(*tl, r, 225)
    arc = "A %s %s 0 0 1 " % (_num(r), _num(r))
    return "M %s %s %s%s %s L %s %s %s%s %s" % (
        _num(start[0]), _num(start[1]),
        arc, _num(mid_a[0]), _num(mid_a[1]),
        _num(mid_b[0]), _num(mid_b[1]),
        arc, _num(end[0]), _num(end[1]),
    )


def composite_border_svg(width: float, height: float, radius: float, border: CompositeBorder) -> Optional[str]:
    """One overlay with each visible side stroked along the rounded outline."""
    root = _svg_root(width, height)
    drawn = False
    for name, side in border.sides():
        if side.width_px <= 0 or not side.color:
            continue
        _sub(root, "path", d=_side_path(name, width, height, radius, side.width_px), fill="none",
             stroke="#%s" % side.color, stroke_width=_num(side.width_px), stroke_linecap="butt")
        drawn = True
    if not drawn:
        return None
    return _to_string(root)


def _inline_style(node: VisualNode) -> str:
    style = node.style
    declarations = []
    for value, name in ((style.fill, "fill"), (style.stroke, "stroke")):
        if value and value != "none":
            declarations.append("%s: %s" % (name, value))
    for attr, name in INLINE_PROPERTIES:
        value = getattr(style, attr)
        if value and value != "auto":
            declarations.append("%s: %s" % (name, value))
    return "; ".join(declarations)


def _copy_element(node: VisualNode, parent=None):
    local = node.local_name or node.tag.lower()
    if parent is None:
        element = etree.Element("{%s}%s" % (SVG_NS, local), nsmap={None: SVG_NS, "xlink": XLINK_NS})
    else:
        element = etree.SubElement(parent, "{%s}%s" % (SVG_NS, local))
    for key, value in node.attributes.items():
        if key in ("style", "xmlns") or key.startswith("xmlns:"):
            continue
        try:
            if key.startswith("xlink:"):
                element.set("{%s}%s" % (XLINK_NS, key[6:]), value)
            elif ":" not in key:
                element.set(key, value)
        except ValueError:
            # framework attributes such as @click are not valid XML names
            continue
    if node.style.fill == "none":
        element.set("fill", "none")
    if node.style.stroke == "none":
        element.set("stroke", "none")
    inline = _inline_style(node)
    if inline:
        element.set("style", inline)

    last = None
    for child in node.children:
        if isinstance(child, TextNode):
            if last is None:
                element.text = (element.text or "") + child.text
            else:
                last.tail = (last.tail or "") + child.text
        else:
            last = _copy_element(child, element)
    return element


def svg_document(node: VisualNode, width: float, height: float) -> str:
    """Serialize an inline <svg> subtree with its computed styles inlined."""
    root = _copy_element(node)
    root.set("width", _num(width))
    root.set("height", _num(height))
    return _to_string(root)
