"""
Presentation file writer: ordered render items to a python-pptx deck.

python-pptx has no API for fill transparency or outer shadows, so those are
written as DrawingML elements directly.
"""

import io
import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.dml import MSO_LINE_DASH_STYLE
from pptx.enum.shapes import MSO_SHAPE
from pptx.enum.text import MSO_ANCHOR, MSO_AUTO_SIZE, PP_ALIGN
from pptx.oxml.ns import qn
from pptx.oxml.xmlchemy import OxmlElement
from pptx.util import Inches, Pt

from .geometry import SLIDE_HEIGHT_INCHES, SLIDE_WIDTH_INCHES
from .model import Fill, ImageItem, RenderItem, ShadowDescriptor, ShapeItem, TextBody, TextItem, TextRun
from .units import parse_color

logger = logging.getLogger(__name__)

SHAPE_TYPES = {
    "rect": MSO_SHAPE.RECTANGLE,
    "roundRect": MSO_SHAPE.ROUNDED_RECTANGLE,
    "ellipse": MSO_SHAPE.OVAL,
}

ALIGNMENT_MAP = {
    "left": PP_ALIGN.LEFT,
    "center": PP_ALIGN.CENTER,
    "right": PP_ALIGN.RIGHT,
    "justify": PP_ALIGN.JUSTIFY,
}

ANCHOR_MAP = {
    "top": MSO_ANCHOR.TOP,
    "middle": MSO_ANCHOR.MIDDLE,
    "bottom": MSO_ANCHOR.BOTTOM,
}

DASH_MAP = {
    "solid": MSO_LINE_DASH_STYLE.SOLID,
    "dash": MSO_LINE_DASH_STYLE.DASH,
    "sysDot": MSO_LINE_DASH_STYLE.ROUND_DOT,
}

# blank slide layout of the default template
BLANK_LAYOUT = 6


def _set_alpha(sp_pr, alpha: float) -> None:
    """Add <a:alpha> to the solid fill color; 100000 is opaque."""
    if alpha >= 1:
        return
    solid_fill = sp_pr.find(qn("a:solidFill"))
    if solid_fill is None:
        return
    srgb = solid_fill.find(qn("a:srgbClr"))
    if srgb is None:
        return
    alpha_el = OxmlElement("a:alpha")
    alpha_el.set("val", str(int(round(max(alpha, 0) * 100000))))
    srgb.append(alpha_el)


def _apply_shadow(shape, shadow: ShadowDescriptor) -> None:
    sp_pr = shape._element.spPr
    effect_lst = OxmlElement("a:effectLst")
    outer = OxmlElement("a:outerShdw")
    outer.set("blurRad", str(int(Pt(shadow.blur_pt))))
    outer.set("dist", str(int(Pt(shadow.distance_pt))))
    # direction in 60000ths of a degree, 0 = right, clockwise
    outer.set("dir", str(int(round(shadow.angle * 60000)) % 21600000))
    outer.set("algn", "ctr")
    outer.set("rotWithShape", "0")
    color = OxmlElement("a:srgbClr")
    color.set("val", shadow.color)
    alpha = OxmlElement("a:alpha")
    alpha.set("val", str(int(round(shadow.opacity * 100000))))
    color.append(alpha)
    outer.append(color)
    effect_lst.append(outer)
    # effectLst must follow a:ln in spPr
    ln = sp_pr.find(qn("a:ln"))
    if ln is not None:
        ln.addnext(effect_lst)
    else:
        sp_pr.append(effect_lst)


def _apply_fill(shape, fill: Optional[Fill]) -> None:
    if fill is None:
        shape.fill.background()
        return
    shape.fill.solid()
    shape.fill.fore_color.rgb = RGBColor.from_string(fill.color)
    _set_alpha(shape._element.spPr, fill.alpha)


def _style_run(font, spec: TextRun) -> None:
    if spec.font_size_pt:
        font.size = Pt(spec.font_size_pt)
    if spec.font_family:
        font.name = spec.font_family
    font.bold = spec.bold
    font.italic = spec.italic
    font.underline = spec.underline
    font.color.rgb = RGBColor.from_string(spec.color)


def _fill_text_frame(text_frame, body: TextBody) -> None:
    text_frame.word_wrap = True
    text_frame.auto_size = MSO_AUTO_SIZE.NONE
    top, right, bottom, left = body.insets
    text_frame.margin_top = Inches(top)
    text_frame.margin_right = Inches(right)
    text_frame.margin_bottom = Inches(bottom)
    text_frame.margin_left = Inches(left)
    text_frame.vertical_anchor = ANCHOR_MAP.get(body.valign, MSO_ANCHOR.TOP)

    paragraph = text_frame.paragraphs[0]
    paragraph.alignment = ALIGNMENT_MAP.get(body.align, PP_ALIGN.LEFT)
    for spec in body.runs:
        for i, line in enumerate(spec.text.split("\n")):
            if i:
                paragraph.add_line_break()
            if not line:
                continue
            run = paragraph.add_run()
            run.text = line
            _style_run(run.font, spec)


class PresentationWriter:
    """Builds a 16:9 deck, one slide per call to add_slide()."""

    def __init__(self, width: float = SLIDE_WIDTH_INCHES, height: float = SLIDE_HEIGHT_INCHES):
        self.prs = Presentation()
        self.prs.slide_width = Inches(width)
        self.prs.slide_height = Inches(height)

    def add_slide(self, items: Iterable[RenderItem], background_color: Optional[str] = None):
        slide = self.prs.slides.add_slide(self.prs.slide_layouts[BLANK_LAYOUT])
        if background_color:
            color = parse_color(background_color)
            if color.hex:
                slide.background.fill.solid()
                slide.background.fill.fore_color.rgb = RGBColor.from_string(color.hex)
            else:
                logger.warning("Ignoring unparseable background color %r", background_color)

        for item in items:
            if isinstance(item, ShapeItem):
                self.add_shape(slide, item)
            elif isinstance(item, ImageItem):
                self.add_image(slide, item)
            elif isinstance(item, TextItem):
                self.add_text(slide, item)
            else:
                raise TypeError("unknown render item: %r" % (item,))
        return slide

    def add_shape(self, slide, item: ShapeItem):
        g = item.geometry
        shape = slide.shapes.add_shape(
            SHAPE_TYPES.get(item.kind, MSO_SHAPE.RECTANGLE),
            Inches(g.x), Inches(g.y), Inches(g.w), Inches(g.h),
        )
        if item.kind == "roundRect":
            # adjustment is the radius as a fraction of the shorter side
            shape.adjustments[0] = item.radius_fraction * 0.5
        _apply_fill(shape, item.fill)

        if item.border is not None:
            shape.line.color.rgb = RGBColor.from_string(item.border.color)
            shape.line.width = Inches(item.border.width_inches)
            shape.line.dash_style = DASH_MAP.get(item.border.dash_style, MSO_LINE_DASH_STYLE.SOLID)
        else:
            shape.line.fill.background()

        if item.shadow is not None:
            _apply_shadow(shape, item.shadow)
        else:
            shape.shadow.inherit = False

        if g.rotation:
            shape.rotation = g.rotation
        if item.text is not None:
            _fill_text_frame(shape.text_frame, item.text)
        return shape

    def add_image(self, slide, item: ImageItem):
        g = item.geometry
        picture = slide.shapes.add_picture(
            io.BytesIO(item.payload), Inches(g.x), Inches(g.y), width=Inches(g.w), height=Inches(g.h))
        if g.rotation:
            picture.rotation = g.rotation
        return picture

    def add_text(self, slide, item: TextItem):
        g = item.geometry
        textbox = slide.shapes.add_textbox(Inches(g.x), Inches(g.y), Inches(g.w), Inches(g.h))
        if g.rotation:
            textbox.rotation = g.rotation
        _fill_text_frame(textbox.text_frame, item.text)
        return textbox

    def save(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        self.prs.save(str(path))
        return path
