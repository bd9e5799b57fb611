from __future__ import annotations

import asyncio
from typing import Optional

from dom_to_pptx.geometry import LayoutConfig
from dom_to_pptx.imaging import MaskSpec
from dom_to_pptx.model import Box, StyleSnapshot, TextNode, VisualNode

# 960x540 px maps onto the 10 x 5.625 in canvas at scale 1
ROOT_BOX = Box(0, 0, 960, 540)
CONFIG = LayoutConfig.for_root(ROOT_BOX)

PNG = b"\x89PNG-fake"


def node(tag="DIV", box=(0, 0, 100, 50), children=(), attributes=None, **style) -> VisualNode:
    return VisualNode(
        tag=tag,
        box=Box(*box),
        style=StyleSnapshot(**style),
        attributes=dict(attributes or {}),
        children=tuple(TextNode(c) if isinstance(c, str) else c for c in children),
    )


def border(width="2px", color="rgb(255, 0, 0)", line_style="solid", sides=("top", "right", "bottom", "left")):
    style = {}
    for side in sides:
        style["border_%s_width" % side] = width
        style["border_%s_color" % side] = color
        style["border_%s_style" % side] = line_style
    return style


class FakeBackend:
    """Records rasterization requests and answers with a fixed payload."""

    def __init__(self, payload: Optional[bytes] = PNG):
        self.payload = payload
        self.svgs = []
        self.images = []

    async def rasterize_svg(self, markup: str, width: float, height: float):
        self.svgs.append((markup, width, height))
        return self.payload

    async def mask_image(self, src: str, spec: MaskSpec):
        self.images.append((src, spec))
        return self.payload


def run(coro):
    return asyncio.run(coro)
