"""
Text run assembly: mixed inline content to styled runs plus paragraph alignment.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .gradients import gradient_fallback_color
from .model import StyleSnapshot, TextBody, TextNode, TextRun, VisualNode
from .units import first_font_family, padding_insets, parse_color, parse_px, px_to_inch, px_to_pt

INLINE_TAGS = ("SPAN", "B", "STRONG", "EM", "I", "A", "SMALL", "U", "SUB", "SUP", "CODE", "MARK", "BR")

# replaced elements painted as their own pictures, never flattened into runs
GRAPHIC_TAGS = ("IMG", "SVG")

BULLET = "• "

_LINE_BREAKS_RE = re.compile(r"[\n\r\t]+")
_SPACES_RE = re.compile(r"\s{2,}")


@dataclass(frozen=True)
class AssembledText:
    body: TextBody
    # extra room to the left for a list bullet, in inches
    bullet_shift: float = 0.0


def _is_inline(node: VisualNode) -> bool:
    return "inline" in node.style.display or node.tag in INLINE_TAGS


def flow_text(node: VisualNode) -> str:
    """Text content of a node, leaving out embedded images and vector graphics."""
    parts = []
    for child in node.children:
        if isinstance(child, TextNode):
            parts.append(child.text)
        elif child.tag not in GRAPHIC_TAGS:
            parts.append(flow_text(child))
    return "".join(parts)


def embedded_graphics(node: VisualNode) -> List[VisualNode]:
    """<img> and <svg> elements inside a text container, in document order."""
    found = []
    for child in node.element_children:
        if child.tag in GRAPHIC_TAGS:
            found.append(child)
        else:
            found.extend(embedded_graphics(child))
    return found


def _has_own_paint(node: VisualNode) -> bool:
    if parse_color(node.style.background_color).hex:
        return True
    if "gradient" in node.style.background_image and node.style.background_clip != "text":
        return True
    for side in ("top", "right", "bottom", "left"):
        width = parse_px(getattr(node.style, "border_%s_width" % side))
        line_style = getattr(node.style, "border_%s_style" % side)
        if width > 0 and line_style not in ("none", "hidden") \
                and parse_color(getattr(node.style, "border_%s_color" % side)).hex:
            return True
    return False


def is_text_container(node: VisualNode) -> bool:
    """
    True when the node's content can be flattened into runs of one text box.

    Inline children that paint their own background or border must stay
    separate shapes, so their presence disqualifies the node.
    """
    if not flow_text(node).strip():
        return False
    children = node.element_children
    if not children:
        return True
    if not all(_is_inline(child) for child in children):
        return False
    return not any(_has_own_paint(child) for child in children)


def sanitize_whitespace(text: str) -> str:
    return _SPACES_RE.sub(" ", _LINE_BREAKS_RE.sub(" ", text))


def apply_text_transform(text: str, transform: Optional[str]) -> str:
    if transform == "uppercase":
        return text.upper()
    if transform == "lowercase":
        return text.lower()
    if transform == "capitalize":
        return re.sub(r"\b(\w)", lambda m: m.group(1).upper(), text)
    return text


def text_color(style: StyleSnapshot) -> str:
    color = parse_color(style.color)
    # transparent text painted by a background gradient (background-clip: text)
    if color.opacity == 0 and style.background_clip == "text":
        fallback = gradient_fallback_color(style.background_image)
        if fallback is not None:
            color = fallback
    return color.hex or "000000"


def run_style(style: StyleSnapshot, scale: float, text: str) -> TextRun:
    weight = style.font_weight
    if weight == "bold":
        weight = "700"
    return TextRun(
        text=text,
        color=text_color(style),
        font_family=first_font_family(style.font_family),
        font_size_pt=px_to_pt(parse_px(style.font_size), scale),
        bold=int(parse_px(weight)) >= 600,
        italic=style.font_style == "italic",
        underline="underline" in style.text_decoration,
    )


def _runs(node: VisualNode, scale: float) -> List[TextRun]:
    pieces = []
    for child in node.children:
        if isinstance(child, TextNode):
            text, style = child.text, node.style
        else:
            if child.tag == "BR":
                pieces.append(("\n", child.style))
                continue
            if child.tag in GRAPHIC_TAGS:
                continue
            text, style = flow_text(child), child.style
        text = apply_text_transform(sanitize_whitespace(text), style.text_transform)
        pieces.append((text, style))

    # trim the outer edges and collapse spaces across run boundaries
    non_empty = [i for i, (text, _) in enumerate(pieces) if text.strip()]
    if not non_empty:
        return []
    first, last = non_empty[0], non_empty[-1]
    runs = []
    previous = ""
    for i, (text, style) in enumerate(pieces):
        if i < first or i > last:
            continue
        if i == first:
            text = text.lstrip()
        if i == last:
            text = text.rstrip()
        if previous.endswith((" ", "\n")):
            text = text.lstrip(" ")
        if not text:
            continue
        runs.append(run_style(style, scale, text))
        previous = text
    return runs


def _alignment(style: StyleSnapshot) -> str:
    align = style.text_align or "left"
    if align in ("start", "-webkit-left"):
        align = "left"
    elif align in ("end", "-webkit-right"):
        align = "right"
    elif align == "-webkit-center":
        align = "center"
    if _flex_centering(style)[0]:
        align = "center"
    return align


def _flex_centering(style: StyleSnapshot) -> Tuple[bool, bool]:
    """(horizontal, vertical) centering from flex alignment; a column swaps the axes."""
    is_flex = "flex" in style.display
    main = is_flex and style.justify_content == "center"
    cross = style.align_items == "center"
    if is_flex and style.flex_direction.startswith("column"):
        return cross, main
    return main, cross


def assemble_text(node: VisualNode, scale: float) -> Optional[AssembledText]:
    """Build the text body of a text container, or None when no text survives."""
    style = node.style
    runs = _runs(node, scale)
    if not runs:
        return None

    bullet_shift = 0.0
    if style.display == "list-item":
        font_px = parse_px(style.font_size) or 16
        bullet_shift = px_to_inch(font_px, scale) * 1.5
        bullet = TextRun(
            text=BULLET,
            color=parse_color(style.color).hex or "000000",
            font_size_pt=px_to_pt(parse_px(style.font_size), scale),
        )
        runs.insert(0, bullet)

    align = _alignment(style)
    valign = "top"
    if _flex_centering(style)[1]:
        valign = "middle"
    pad_top = parse_px(style.padding_top)
    pad_bottom = parse_px(style.padding_bottom)
    if abs(pad_top - pad_bottom) < 2 and parse_color(style.background_color).hex:
        valign = "middle"

    insets = padding_insets(style, scale)
    if align == "center" and valign == "middle":
        # centering already compensates for symmetric padding
        insets = [0.0, 0.0, 0.0, 0.0]

    body = TextBody(runs=tuple(runs), align=align, valign=valign, insets=tuple(insets))
    return AssembledText(body=body, bullet_shift=bullet_shift)
