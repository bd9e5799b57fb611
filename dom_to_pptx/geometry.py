"""
Geometry mapping: viewport pixels to slide inches.
"""

import math
from dataclasses import dataclass
from typing import Optional

from .model import Box, Geometry, VisualNode
from .units import PX_TO_INCH

# PowerPoint 16:9 layout
SLIDE_WIDTH_INCHES = 10.0
SLIDE_HEIGHT_INCHES = 5.625


@dataclass(frozen=True)
class LayoutConfig:
    """Per-slide transform from the root's pixel box onto the fixed canvas."""
    root_x: float
    root_y: float
    scale: float
    offset_x: float
    offset_y: float

    @classmethod
    def for_root(cls, root_box: Box, target_width: float = SLIDE_WIDTH_INCHES,
                 target_height: float = SLIDE_HEIGHT_INCHES) -> "LayoutConfig":
        content_w = root_box.width * PX_TO_INCH
        content_h = root_box.height * PX_TO_INCH
        if content_w <= 0 or content_h <= 0:
            raise ValueError("root box has no area: %r" % (root_box,))
        scale = min(target_width / content_w, target_height / content_h)
        return cls(
            root_x=root_box.left,
            root_y=root_box.top,
            scale=scale,
            offset_x=(target_width - content_w * scale) / 2,
            offset_y=(target_height - content_h * scale) / 2,
        )


def parse_rotation(transform: Optional[str]) -> int:
    """
    Rotation in whole degrees from a computed `matrix(a, b, c, d, e, f)` transform.

    Anything malformed yields 0.
    """
    if not transform or transform == "none" or "(" not in transform:
        return 0
    inner = transform.split("(", 1)[1].split(")", 1)[0]
    values = inner.split(",")
    if len(values) < 4:
        return 0
    try:
        a = float(values[0])
        b = float(values[1])
    except ValueError:
        return 0
    return int(round(math.degrees(math.atan2(b, a))))


def map_geometry(node: VisualNode, config: LayoutConfig) -> Geometry:
    # Scale around the element center so the rotation pivot stays put
    width = node.layout_width * PX_TO_INCH * config.scale
    height = node.layout_height * PX_TO_INCH * config.scale
    center_x, center_y = node.box.center
    x = config.offset_x + (center_x - config.root_x) * PX_TO_INCH * config.scale - width / 2
    y = config.offset_y + (center_y - config.root_y) * PX_TO_INCH * config.scale - height / 2
    return Geometry(x, y, width, height, parse_rotation(node.style.transform))


def is_circle(radius: float, width: float, height: float) -> bool:
    """A square-ish box whose radius reaches half its side renders as an ellipse."""
    return radius >= min(width, height) / 2 - 1 and abs(width - height) < 2


def shape_kind(radius: float, width: float, height: float):
    """
    Choose rect / roundRect / ellipse for a box and return (kind, radius fraction).

    The fraction is relative to half the smaller side, clamped to [0, 1].
    """
    if is_circle(radius, width, height):
        return "ellipse", 0.0
    if radius > 0:
        half = min(width, height) / 2
        fraction = min(1.0, radius / half) if half > 0 else 0.0
        return "roundRect", max(0.0, fraction)
    return "rect", 0.0
