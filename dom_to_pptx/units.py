"""
Color and unit primitives.

CSS pixels are 1/96 inch; PowerPoint points are 1/72 inch, so 1px = 0.75pt.
"""

import re
from typing import List, Optional

from .model import Color, StyleSnapshot

PPI = 96
PX_TO_INCH = 1 / PPI

# 1 CSS px = 0.75 pt
PX_TO_PT = 0.75

TRANSPARENT = Color(None, 0)

_NUMBER_RE = re.compile(r"-?[\d.]+")
_BLUR_RE = re.compile(r"blur\(([\d.]+)px\)")


def px_to_inch(px: float, scale: float = 1.0) -> float:
    """Convert CSS pixels to inches, applying the slide scale."""
    return px * PX_TO_INCH * scale


def px_to_pt(px: float, scale: float = 1.0) -> float:
    """Convert CSS pixels to PowerPoint points."""
    return px * PX_TO_PT * scale


def parse_px(value) -> float:
    """Read the leading number of a CSS length ("12.5px" -> 12.5); 0 when absent."""
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    match = _NUMBER_RE.match(value.strip())
    if not match:
        return 0.0
    try:
        return float(match.group(0))
    except ValueError:
        return 0.0


def parse_color(color_str: Optional[str]) -> Color:
    """
    Parse a CSS color into an uppercase hex string and an opacity.

    Fully transparent or unrecognized colors come back as Color(None, 0).
    """
    if not color_str:
        return TRANSPARENT
    value = color_str.strip()
    if value == "transparent":
        return TRANSPARENT

    if value.startswith("#"):
        digits = value[1:]
        if not re.fullmatch(r"[0-9a-fA-F]+", digits) or len(digits) not in (3, 4, 6, 8):
            return TRANSPARENT
        if len(digits) in (3, 4):
            digits = "".join(c + c for c in digits)
        opacity = 1.0
        if len(digits) == 8:
            opacity = int(digits[6:], 16) / 255
            digits = digits[:6]
        if opacity == 0:
            return TRANSPARENT
        return Color(digits.upper(), round(opacity, 4))

    if not value.startswith(("rgb(", "rgba(")):
        return TRANSPARENT
    numbers = _NUMBER_RE.findall(value)
    if len(numbers) < 3:
        return TRANSPARENT
    try:
        r, g, b = (max(0, min(255, int(float(n)))) for n in numbers[:3])
        alpha = float(numbers[3]) if len(numbers) > 3 else 1.0
    except ValueError:
        return TRANSPARENT
    if "%" in value.split(",")[-1] and len(numbers) > 3:
        alpha /= 100
    if alpha <= 0:
        return TRANSPARENT
    return Color("%02X%02X%02X" % (r, g, b), min(alpha, 1.0))


def padding_insets(style: StyleSnapshot, scale: float) -> List[float]:
    """Padding as [top, right, bottom, left] insets in inches."""
    return [
        px_to_inch(parse_px(style.padding_top), scale),
        px_to_inch(parse_px(style.padding_right), scale),
        px_to_inch(parse_px(style.padding_bottom), scale),
        px_to_inch(parse_px(style.padding_left), scale),
    ]


def soft_edge_radius(filter_str: Optional[str]) -> Optional[float]:
    """Blur radius in px from a `filter: blur(Npx)` value, else None."""
    if not filter_str or filter_str == "none":
        return None
    match = _BLUR_RE.search(filter_str)
    if match:
        radius = float(match.group(1))
        return radius if radius > 0 else None
    return None


def first_font_family(font_family: Optional[str]) -> Optional[str]:
    if not font_family:
        return None
    name = font_family.split(",")[0].strip().strip("'\"")
    return name or None
