"""
Node classification: decide how one visual node is drawn and whether its
children still need to be visited.
"""

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from .borders import composite_border_items, resolve_border
from .geometry import LayoutConfig, map_geometry, shape_kind
from .gradients import parse_linear_gradient
from .imaging import MaskSpec, RenderBackend, border_radius_px, effective_radius
from .model import (
    CompositeBorder,
    Fill,
    ImageItem,
    RenderItem,
    ShapeItem,
    TextItem,
    UniformBorder,
    VisualNode,
)
from .shadows import parse_box_shadow
from .svg import blurred_svg, composite_border_svg, gradient_svg, svg_document
from .text import assemble_text, embedded_graphics, is_text_container
from .units import parse_color, px_to_inch, soft_edge_radius

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Classification:
    items: Tuple[RenderItem, ...] = ()
    stop_recursion: bool = False
    # pictures inside consumed text that the walk must still visit
    embedded: Tuple[VisualNode, ...] = ()


SKIP = Classification()
SKIP_SUBTREE = Classification(stop_recursion=True)


def parse_z_index(value: Optional[str]) -> int:
    """`auto` (and anything unparseable) stacks at 0."""
    if not value or value == "auto":
        return 0
    try:
        return int(float(value))
    except ValueError:
        return 0


def _opacity(value: Optional[str]) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 1.0


def is_hidden(node: VisualNode) -> bool:
    style = node.style
    return style.display == "none" or style.visibility in ("hidden", "collapse") or _opacity(style.opacity) == 0


def _is_image_wrapper(node: VisualNode) -> bool:
    """A box whose <img> child covers it completely; the image paints instead."""
    for child in node.element_children:
        if child.tag != "IMG":
            continue
        if child.layout_width >= node.layout_width - 2 and child.layout_height >= node.layout_height - 2:
            return True
    return False


async def _vector_graphic(node, geometry, z_index, dom_order, backend) -> Classification:
    width, height = node.box.width or 300, node.box.height or 150
    payload = await backend.rasterize_svg(svg_document(node, width, height), width, height)
    items = ()
    if payload:
        items = (ImageItem(z_index, dom_order, geometry, payload),)
    return Classification(items, stop_recursion=True)


async def _raster_image(node, parent, geometry, z_index, dom_order, backend) -> Classification:
    src = node.attributes.get("currentSrc") or node.attributes.get("src")
    if not src:
        logger.debug("Skipping <img> without a source")
        return SKIP_SUBTREE
    spec = MaskSpec.build(node.layout_width, node.layout_height, effective_radius(node, parent),
                          node.style.object_fit)
    payload = await backend.mask_image(src, spec)
    items = ()
    if payload:
        items = (ImageItem(z_index, dom_order, geometry, payload),)
    return Classification(items, stop_recursion=True)


async def classify(node: VisualNode, parent: Optional[VisualNode], config: LayoutConfig,
                   dom_order: int, backend: RenderBackend) -> Classification:
    """
    Produce the render items for one node.

    Hidden nodes stop the walk when their whole subtree is invisible
    (display:none, opacity:0); visibility:hidden children may still show.
    """
    style = node.style
    if style.display == "none" or _opacity(style.opacity) == 0:
        return SKIP_SUBTREE
    if is_hidden(node):
        return SKIP
    if node.box.is_empty:
        return SKIP

    z_index = parse_z_index(style.z_index)
    geometry = map_geometry(node, config)
    width_px = node.layout_width
    height_px = node.layout_height

    if node.tag == "SVG":
        return await _vector_graphic(node, geometry, z_index, dom_order, backend)
    if node.tag == "IMG":
        return await _raster_image(node, parent, geometry, z_index, dom_order, backend)

    element_opacity = _opacity(style.opacity)
    background = parse_color(style.background_color)
    clip_text = style.background_clip == "text"
    image_wrapper = _is_image_wrapper(node)
    gradient = None
    if not clip_text and not image_wrapper:
        gradient = parse_linear_gradient(style.background_image, width_px, height_px)

    border = resolve_border(style, config.scale)
    uniform_border = border if isinstance(border, UniformBorder) else None
    composite_border = border if isinstance(border, CompositeBorder) else None
    shadow = parse_box_shadow(style.box_shadow, config.scale)
    radius = border_radius_px(style.border_radius, width_px, height_px)
    soft_edge = soft_edge_radius(style.filter)

    text = None
    if is_text_container(node):
        text = assemble_text(node, config.scale)
        if text is not None and text.bullet_shift:
            shift = text.bullet_shift
            geometry = replace(geometry, x=geometry.x - shift, w=geometry.w + shift)

    items: List[RenderItem] = []

    if gradient is not None or (soft_edge and background.hex and not image_wrapper):
        pad = 0.0
        if soft_edge and background.hex and gradient is None:
            markup, pad_px = blurred_svg(width_px, height_px, background.hex, radius, soft_edge)
            pad = px_to_inch(pad_px, config.scale)
            payload = await backend.rasterize_svg(markup, width_px + pad_px * 2, height_px + pad_px * 2)
        else:
            stroke = (uniform_border.color, uniform_border.width_px) if uniform_border else None
            payload = await backend.rasterize_svg(
                gradient_svg(width_px, height_px, gradient, radius, stroke), width_px, height_px)
        if payload:
            items.append(ImageItem(z_index, dom_order, geometry.expanded(pad), payload))
        if text is not None:
            items.append(TextItem(z_index + 1, dom_order, geometry, text.body))
        if composite_border is not None:
            items.extend(await _composite_border(
                composite_border, geometry, radius, width_px, height_px, config, z_index, dom_order, backend))
        return _content(items, node, text)

    has_fill = bool(background.hex) and not image_wrapper
    if not (has_fill or border is not None or shadow is not None):
        if text is not None:
            items.append(TextItem(z_index, dom_order, geometry, text.body))
        return _content(items, node, text)

    kind, fraction = shape_kind(radius, width_px, height_px)
    fill = None
    if has_fill:
        fill = Fill(background.hex, element_opacity * background.opacity)
    items.append(ShapeItem(
        z_index=z_index,
        dom_order=dom_order,
        geometry=geometry,
        kind=kind,
        fill=fill,
        border=uniform_border,
        shadow=shadow,
        radius_fraction=fraction,
        text=text.body if text is not None else None,
    ))
    if composite_border is not None:
        items.extend(await _composite_border(
            composite_border, geometry, radius, width_px, height_px, config, z_index, dom_order, backend))
    return _content(items, node, text)


async def _composite_border(border, geometry, radius, width_px, height_px, config, z_index, dom_order, backend):
    """Edge rectangles for square, unrotated boxes; otherwise one vector overlay."""
    if radius <= 0 and not geometry.rotation:
        return composite_border_items(border, geometry, config.scale, z_index, dom_order)
    markup = composite_border_svg(width_px, height_px, radius, border)
    if markup is None:
        return []
    payload = await backend.rasterize_svg(markup, width_px, height_px)
    if not payload:
        return []
    return [ImageItem(z_index + 1, dom_order, geometry, payload)]


def _content(items, node: VisualNode, text) -> Classification:
    if text is None:
        return Classification(tuple(items))
    return Classification(tuple(items), stop_recursion=True, embedded=tuple(embedded_graphics(node)))
