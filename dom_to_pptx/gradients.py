"""
CSS linear-gradient parsing.

Only `linear-gradient()` is understood; other gradient functions are treated
as "no gradient" and the element falls back to its background color.
"""

import math
import re
from typing import List, Optional, Tuple

from .model import Color, GradientDescriptor, GradientStop
from .units import parse_color

# Axis endpoints as (x%, y%) pairs for the direction keywords
DIRECTIONS = {
    "to right": ((0.0, 0.0), (100.0, 0.0)),
    "to left": ((100.0, 0.0), (0.0, 0.0)),
    "to top": ((0.0, 100.0), (0.0, 0.0)),
    "to bottom": ((0.0, 0.0), (0.0, 100.0)),
    "to top right": ((0.0, 100.0), (100.0, 0.0)),
    "to right top": ((0.0, 100.0), (100.0, 0.0)),
    "to top left": ((100.0, 100.0), (0.0, 0.0)),
    "to left top": ((100.0, 100.0), (0.0, 0.0)),
    "to bottom right": ((0.0, 0.0), (100.0, 100.0)),
    "to right bottom": ((0.0, 0.0), (100.0, 100.0)),
    "to bottom left": ((100.0, 0.0), (0.0, 100.0)),
    "to left bottom": ((100.0, 0.0), (0.0, 100.0)),
}
DEFAULT_AXIS = DIRECTIONS["to bottom"]

_ANGLE_RE = re.compile(r"^(-?[\d.]+)(deg|turn|rad)$")
_LENGTH_RE = re.compile(r"^(-?\d+(?:\.\d+)?)(%|px)?$")
_HEX_RE = re.compile(r"#(?:[0-9a-fA-F]{3}){1,2}\b")
_RGB_RE = re.compile(r"rgba?\([^)]*\)")


def split_top_level(value: str, sep: str = ",") -> List[str]:
    """Split on `sep` outside parentheses, so rgba(...) stays intact."""
    parts = []
    depth = 0
    current = ""
    for char in value:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char == sep and depth == 0:
            parts.append(current.strip())
            current = ""
            continue
        current += char
    if current.strip():
        parts.append(current.strip())
    return parts


def _function_body(value: str, name: str) -> Optional[str]:
    start = value.find(name + "(")
    while start > 0 and value[start - 1] not in " ,":
        # skip repeating-linear-gradient( and similar prefixed names
        start = value.find(name + "(", start + 1)
    if start == -1:
        return None
    depth = 0
    body_start = start + len(name) + 1
    for i in range(body_start, len(value)):
        if value[i] == "(":
            depth += 1
        elif value[i] == ")":
            if depth == 0:
                return value[body_start:i]
            depth -= 1
    return None


def _angle_axis(degrees: float) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    # CSS angles: 0deg points up, growing clockwise
    rad = math.radians(degrees)
    dx = math.sin(rad) * 50
    dy = -math.cos(rad) * 50
    start = (round(50 - dx, 4), round(50 - dy, 4))
    end = (round(50 + dx, 4), round(50 + dy, 4))
    return start, end


def _parse_direction(term: str):
    term = " ".join(term.lower().split())
    if term in DIRECTIONS:
        return DIRECTIONS[term]
    match = _ANGLE_RE.match(term)
    if not match:
        return None
    amount = float(match.group(1))
    unit = match.group(2)
    if unit == "turn":
        amount *= 360
    elif unit == "rad":
        amount = math.degrees(amount)
    return _angle_axis(amount)


def _split_stop(part: str) -> Tuple[str, List[str]]:
    """Separate a color stop into its color and its position terms."""
    part = part.strip()
    if not part:
        return part, []
    if "(" in part.split()[0]:
        depth = 0
        for i, char in enumerate(part):
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
                if depth == 0:
                    return part[:i + 1], [t for t in split_top_level(part[i + 1:], " ") if t]
        return part, []
    color, _, rest = part.partition(" ")
    return color, [t for t in split_top_level(rest, " ") if t]


def _position(term: str, line_px: Optional[float]) -> Optional[float]:
    """Stop position as a percentage of the gradient line, None when unknown."""
    match = _LENGTH_RE.match(term)
    if not match:
        # calc() and other lengths we cannot resolve
        return None
    amount, unit = float(match.group(1)), match.group(2)
    if unit == "%":
        return amount
    if amount == 0:
        return 0.0
    if unit == "px" and line_px:
        return amount / line_px * 100
    return None


def gradient_line_length(start, end, width: float, height: float) -> float:
    """Length in px of the axis between two (x%, y%) endpoints on a box."""
    dx = (end[0] - start[0]) / 100 * width
    dy = (end[1] - start[1]) / 100 * height
    return math.hypot(dx, dy)


def parse_linear_gradient(value: Optional[str], width: Optional[float] = None,
                          height: Optional[float] = None) -> Optional[GradientDescriptor]:
    """
    Parse the first linear-gradient() in a background-image value.

    Pixel stop positions need the element size (width, height) to become
    percentages; without it they are distributed like stops without a
    position. A stop with two positions becomes two stops of the same color.
    Returns None when there is no linear gradient or it has no stops.
    """
    if not value or "linear-gradient" not in value:
        return None
    body = _function_body(value, "linear-gradient")
    if body is None:
        return None
    parts = split_top_level(body)
    if not parts:
        return None

    axis = _parse_direction(parts[0])
    if axis is not None:
        parts = parts[1:]
    else:
        axis = DEFAULT_AXIS
    if not parts:
        return None

    line_px = None
    if width and height:
        line_px = gradient_line_length(axis[0], axis[1], width, height) or None

    entries = []
    for part in parts:
        color_str, terms = _split_stop(part)
        color = parse_color(color_str)
        positions = [_position(term, line_px) for term in terms[:2]] or [None]
        for position in positions:
            entries.append((color, position))

    stops = []
    count = len(entries)
    for idx, (color, position) in enumerate(entries):
        if position is None:
            position = round(idx / (count - 1) * 100) if count > 1 else 0
        stops.append(GradientStop(float(position), color.hex, color.opacity if color.hex else 0.0))
    return GradientDescriptor(start=axis[0], end=axis[1], stops=tuple(stops))


def gradient_fallback_color(value: Optional[str]) -> Optional[Color]:
    """First resolvable stop color of a gradient, used when text is filled with it."""
    if not value:
        return None
    descriptor = parse_linear_gradient(value)
    if descriptor is not None:
        for stop in descriptor.stops:
            if stop.color:
                return Color(stop.color, stop.alpha)
    # radial/conic gradients: take the first literal color
    match = _HEX_RE.search(value) or _RGB_RE.search(value)
    if match:
        color = parse_color(match.group(0))
        if color.hex:
            return color
    return None
