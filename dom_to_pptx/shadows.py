"""
box-shadow conversion.

PowerPoint describes outer shadows by direction and distance, so the CSS
x/y offsets are converted to polar form.
"""

import math
import re
from typing import Optional

from .gradients import split_top_level
from .model import ShadowDescriptor
from .units import parse_color, px_to_pt

_COLOR_RE = re.compile(r"rgba?\([^)]*\)|#[0-9a-fA-F]{3,8}\b")
_LENGTH_RE = re.compile(r"^-?[\d.]+(px)?$")


def parse_box_shadow(shadow_str: Optional[str], scale: float) -> Optional[ShadowDescriptor]:
    """
    Convert the first visible outer shadow of a box-shadow value.

    Inset and fully transparent entries are skipped; returns None when
    nothing usable remains.
    """
    if not shadow_str or shadow_str == "none":
        return None
    for entry in split_top_level(shadow_str):
        if re.search(r"\binset\b", entry):
            continue
        color_match = _COLOR_RE.search(entry)
        color = parse_color(color_match.group(0) if color_match else "rgb(0, 0, 0)")
        if color.hex is None:
            continue
        rest = _COLOR_RE.sub(" ", entry).split()
        lengths = [float(token.rstrip("px")) for token in rest if _LENGTH_RE.match(token)]
        if len(lengths) < 2:
            continue
        x, y = lengths[0], lengths[1]
        blur = lengths[2] if len(lengths) > 2 else 0.0
        distance = math.sqrt(x * x + y * y)
        angle = math.degrees(math.atan2(y, x))
        if angle < 0:
            angle += 360
        return ShadowDescriptor(
            angle=angle,
            distance_pt=px_to_pt(distance, scale),
            blur_pt=px_to_pt(blur, scale),
            color=color.hex,
            opacity=color.opacity,
        )
    return None
