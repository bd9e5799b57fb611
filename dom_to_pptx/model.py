"""
Data model shared by the layout source, the mapping engine and the writer.

Everything here is a frozen dataclass: values are built once per slide during
the traversal and are never mutated afterwards.
"""

from dataclasses import dataclass, field, fields
from typing import Dict, List, Optional, Tuple, Union


@dataclass(frozen=True)
class Box:
    """Bounding box in viewport pixels."""
    left: float = 0.0
    top: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def center(self) -> Tuple[float, float]:
        return (self.left + self.width / 2, self.top + self.height / 2)

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0


@dataclass(frozen=True)
class StyleSnapshot:
    """
    The computed-style properties the engine reads, as the browser serializes them.

    Field names are the snake_case form of the CSS property names. Values are
    kept as strings so that parsing stays in one place (units, colors, shadows).
    """
    display: str = "block"
    visibility: str = "visible"
    opacity: str = "1"
    z_index: str = "auto"
    transform: str = "none"
    overflow: str = "visible"
    background_color: str = "rgba(0, 0, 0, 0)"
    background_image: str = "none"
    background_clip: str = "border-box"
    border_top_width: str = "0px"
    border_right_width: str = "0px"
    border_bottom_width: str = "0px"
    border_left_width: str = "0px"
    border_top_color: str = "rgb(0, 0, 0)"
    border_right_color: str = "rgb(0, 0, 0)"
    border_bottom_color: str = "rgb(0, 0, 0)"
    border_left_color: str = "rgb(0, 0, 0)"
    border_top_style: str = "none"
    border_right_style: str = "none"
    border_bottom_style: str = "none"
    border_left_style: str = "none"
    border_radius: str = "0px"
    box_shadow: str = "none"
    filter: str = "none"
    color: str = "rgb(0, 0, 0)"
    font_family: str = "Arial"
    font_size: str = "16px"
    font_weight: str = "400"
    font_style: str = "normal"
    text_decoration: str = "none"
    text_transform: str = "none"
    text_align: str = "start"
    align_items: str = "normal"
    justify_content: str = "normal"
    flex_direction: str = "row"
    padding_top: str = "0px"
    padding_right: str = "0px"
    padding_bottom: str = "0px"
    padding_left: str = "0px"
    object_fit: str = "fill"
    # SVG presentation properties, only meaningful inside an <svg> subtree
    fill: str = ""
    stroke: str = ""
    stroke_width: str = ""
    stroke_linecap: str = ""
    stroke_linejoin: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, str]]) -> "StyleSnapshot":
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        return cls(**{k: str(v) for k, v in data.items() if k in known and v is not None})


@dataclass(frozen=True)
class TextNode:
    text: str


@dataclass(frozen=True)
class VisualNode:
    """One rendered element with its resolved box, style and children."""
    tag: str
    dom_index: int = 0
    box: Box = field(default_factory=Box)
    offset_width: float = 0.0
    offset_height: float = 0.0
    style: StyleSnapshot = field(default_factory=StyleSnapshot)
    attributes: Dict[str, str] = field(default_factory=dict)
    # case-preserving local name, needed for SVG elements such as linearGradient
    local_name: str = ""
    children: Tuple[Union["VisualNode", TextNode], ...] = ()

    @property
    def element_children(self) -> List["VisualNode"]:
        return [c for c in self.children if isinstance(c, VisualNode)]

    @property
    def text_content(self) -> str:
        parts = []
        for child in self.children:
            parts.append(child.text if isinstance(child, TextNode) else child.text_content)
        return "".join(parts)

    @property
    def layout_width(self) -> float:
        """Offset (layout) width, falling back to the bounding box."""
        return self.offset_width or self.box.width

    @property
    def layout_height(self) -> float:
        return self.offset_height or self.box.height

    @classmethod
    def from_dict(cls, data: dict) -> "VisualNode":
        """Build a node tree from the JSON snapshot produced by the layout source."""
        children = []
        for child in data.get("children") or []:
            if "text" in child and "tag" not in child:
                children.append(TextNode(child["text"]))
            else:
                children.append(cls.from_dict(child))
        box = data.get("box") or {}
        return cls(
            tag=str(data.get("tag", "")).upper(),
            dom_index=int(data.get("index", 0)),
            box=Box(
                float(box.get("left", 0)),
                float(box.get("top", 0)),
                float(box.get("width", 0)),
                float(box.get("height", 0)),
            ),
            offset_width=float(data.get("offsetWidth") or 0),
            offset_height=float(data.get("offsetHeight") or 0),
            style=StyleSnapshot.from_dict(data.get("style")),
            attributes=dict(data.get("attributes") or {}),
            local_name=str(data.get("localName") or ""),
            children=tuple(children),
        )


@dataclass(frozen=True)
class Geometry:
    """Position and size in inches, plus rotation in degrees."""
    x: float
    y: float
    w: float
    h: float
    rotation: int = 0

    def expanded(self, pad: float) -> "Geometry":
        return Geometry(self.x - pad, self.y - pad, self.w + pad * 2, self.h + pad * 2, self.rotation)


@dataclass(frozen=True)
class Color:
    hex: Optional[str]
    opacity: float


@dataclass(frozen=True)
class Fill:
    color: str
    alpha: float = 1.0


@dataclass(frozen=True)
class UniformBorder:
    width_inches: float
    width_px: float
    color: str
    dash_style: str = "solid"


@dataclass(frozen=True)
class BorderSide:
    width_px: float
    color: Optional[str]


@dataclass(frozen=True)
class CompositeBorder:
    top: BorderSide
    right: BorderSide
    bottom: BorderSide
    left: BorderSide

    def sides(self):
        return (("top", self.top), ("right", self.right), ("bottom", self.bottom), ("left", self.left))


Border = Union[UniformBorder, CompositeBorder]


@dataclass(frozen=True)
class ShadowDescriptor:
    """Outer shadow in polar form; distance and blur are in points."""
    angle: float
    distance_pt: float
    blur_pt: float
    color: str
    opacity: float


@dataclass(frozen=True)
class GradientStop:
    offset: float
    color: Optional[str]
    alpha: float = 1.0


@dataclass(frozen=True)
class GradientDescriptor:
    """Linear gradient axis as (x%, y%) endpoints plus stops in source order."""
    start: Tuple[float, float]
    end: Tuple[float, float]
    stops: Tuple[GradientStop, ...]


@dataclass(frozen=True)
class TextRun:
    text: str
    color: str = "000000"
    font_family: Optional[str] = None
    font_size_pt: Optional[float] = None
    bold: bool = False
    italic: bool = False
    underline: bool = False


@dataclass(frozen=True)
class TextBody:
    runs: Tuple[TextRun, ...]
    align: str = "left"
    valign: str = "top"
    insets: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class ShapeItem:
    z_index: int
    dom_order: int
    geometry: Geometry
    kind: str = "rect"
    fill: Optional[Fill] = None
    border: Optional[UniformBorder] = None
    shadow: Optional[ShadowDescriptor] = None
    radius_fraction: float = 0.0
    text: Optional[TextBody] = None


@dataclass(frozen=True)
class ImageItem:
    z_index: int
    dom_order: int
    geometry: Geometry
    payload: bytes = b""


@dataclass(frozen=True)
class TextItem:
    z_index: int
    dom_order: int
    geometry: Geometry
    text: TextBody = field(default_factory=lambda: TextBody(()))


RenderItem = Union[ShapeItem, ImageItem, TextItem]
