"""
Corner-mask image pipeline and the rendering backend.

The engine only builds markup and mask parameters; a RenderBackend turns them
into PNG bytes. The Playwright backend draws into an off-screen canvas and
clips rounded corners with a "destination-in" composite, which avoids the
halo a plain clip path leaves around anti-aliased edges.
"""

import base64
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from .geometry import is_circle
from .model import VisualNode
from .units import parse_px

logger = logging.getLogger(__name__)

# supersampling applied to masked images and rasterized vectors
DEFAULT_RASTER_SCALE = 3


@dataclass(frozen=True)
class MaskSpec:
    """Everything the backend needs to clip one image."""
    width: float
    height: float
    radius: float = 0.0
    ellipse: bool = False
    object_fit: str = "fill"

    @classmethod
    def build(cls, width: float, height: float, radius: float, object_fit: str = "fill") -> "MaskSpec":
        radius = max(0.0, min(radius, min(width, height) / 2))
        return cls(
            width=width,
            height=height,
            radius=radius,
            ellipse=radius > 0 and is_circle(radius, width, height),
            object_fit=object_fit or "fill",
        )


def border_radius_px(value: Optional[str], width: float, height: float) -> float:
    """Computed border-radius in px; percentages resolve against the smaller side."""
    if not value:
        return 0.0
    first = value.split()[0].split("/")[0]
    if first.endswith("%"):
        return parse_px(first) / 100 * min(width, height)
    return parse_px(first)


def effective_radius(node: VisualNode, parent: Optional[VisualNode]) -> float:
    """
    Corner radius to mask an image with.

    Uses the image's own radius, or the radius of a clipping parent that the
    image fills edge to edge.
    """
    radius = border_radius_px(node.style.border_radius, node.layout_width, node.layout_height)
    if radius > 0 or parent is None:
        return radius
    if parent.style.overflow == "visible":
        return 0.0
    fills_parent = (node.layout_width >= parent.layout_width - 2
                    and node.layout_height >= parent.layout_height - 2)
    if not fills_parent:
        return 0.0
    return border_radius_px(parent.style.border_radius, parent.layout_width, parent.layout_height)


class RenderBackend(Protocol):
    async def rasterize_svg(self, markup: str, width: float, height: float) -> Optional[bytes]:
        ...

    async def mask_image(self, src: str, spec: MaskSpec) -> Optional[bytes]:
        ...


def decode_data_url(data_url: Optional[str]) -> Optional[bytes]:
    if not data_url or not data_url.startswith("data:") or "," not in data_url:
        return None
    header, encoded = data_url.split(",", 1)
    if ";base64" not in header:
        return None
    try:
        return base64.b64decode(encoded)
    except ValueError:
        return None


RASTERIZE_SVG_JS = """
async ({markup, width, height, scale}) => {
    const url = 'data:image/svg+xml;charset=utf-8,' + encodeURIComponent(markup);
    try {
        const img = new Image();
        await new Promise((resolve, reject) => {
            img.onload = resolve;
            img.onerror = reject;
            setTimeout(reject, 10000);
            img.src = url;
        });
        const canvas = document.createElement('canvas');
        canvas.width = Math.max(1, Math.ceil(width * scale));
        canvas.height = Math.max(1, Math.ceil(height * scale));
        const ctx = canvas.getContext('2d');
        ctx.scale(scale, scale);
        ctx.drawImage(img, 0, 0, width, height);
        return canvas.toDataURL('image/png');
    } catch (e) {
        return null;
    }
}
"""

MASK_IMAGE_JS = """
async ({src, width, height, radius, ellipse, objectFit, scale}) => {
    try {
        const img = new Image();
        img.crossOrigin = 'Anonymous';
        await new Promise((resolve, reject) => {
            img.onload = resolve;
            img.onerror = reject;
            setTimeout(reject, 10000);
            img.src = src;
        });
        const canvas = document.createElement('canvas');
        canvas.width = Math.max(1, Math.ceil(width * scale));
        canvas.height = Math.max(1, Math.ceil(height * scale));
        const ctx = canvas.getContext('2d');
        ctx.scale(scale, scale);

        const iw = img.naturalWidth || width;
        const ih = img.naturalHeight || height;
        let sx = 0, sy = 0, sw = iw, sh = ih;
        let dx = 0, dy = 0, dw = width, dh = height;
        if (objectFit === 'cover') {
            const ratio = Math.max(width / iw, height / ih);
            sw = width / ratio;
            sh = height / ratio;
            sx = (iw - sw) / 2;
            sy = (ih - sh) / 2;
        } else if (objectFit === 'contain') {
            const ratio = Math.min(width / iw, height / ih);
            dw = iw * ratio;
            dh = ih * ratio;
            dx = (width - dw) / 2;
            dy = (height - dh) / 2;
        }
        ctx.drawImage(img, sx, sy, sw, sh, dx, dy, dw, dh);

        if (radius > 0) {
            ctx.globalCompositeOperation = 'destination-in';
            ctx.beginPath();
            if (ellipse) {
                ctx.ellipse(width / 2, height / 2, width / 2, height / 2, 0, 0, Math.PI * 2);
            } else {
                ctx.moveTo(radius, 0);
                ctx.arcTo(width, 0, width, height, radius);
                ctx.arcTo(width, height, 0, height, radius);
                ctx.arcTo(0, height, 0, 0, radius);
                ctx.arcTo(0, 0, width, 0, radius);
                ctx.closePath();
            }
            ctx.fill();
        }
        return canvas.toDataURL('image/png');
    } catch (e) {
        // blocked (CORS-tainted) or undecodable images
        return null;
    }
}
"""


class PlaywrightRenderBackend:
    """Rasterizes inside the same Chromium page that produced the layout."""

    def __init__(self, page: Page, raster_scale: int = DEFAULT_RASTER_SCALE):
        self.page = page
        self.raster_scale = raster_scale

    async def rasterize_svg(self, markup: str, width: float, height: float) -> Optional[bytes]:
        try:
            data_url = await self.page.evaluate(RASTERIZE_SVG_JS, {
                "markup": markup,
                "width": width,
                "height": height,
                "scale": self.raster_scale,
            })
        except PlaywrightError as e:
            logger.warning("SVG rasterization failed: %s", e)
            return None
        payload = decode_data_url(data_url)
        if payload is None:
            logger.warning("SVG rasterization produced no image (%sx%s)", width, height)
        return payload

    async def mask_image(self, src: str, spec: MaskSpec) -> Optional[bytes]:
        try:
            data_url = await self.page.evaluate(MASK_IMAGE_JS, {
                "src": src,
                "width": spec.width,
                "height": spec.height,
                "radius": spec.radius,
                "ellipse": spec.ellipse,
                "objectFit": spec.object_fit,
                "scale": self.raster_scale,
            })
        except PlaywrightError as e:
            logger.warning("Could not process image %s: %s", src[:80], e)
            return None
        payload = decode_data_url(data_url)
        if payload is None:
            logger.warning("Image could not be loaded or was blocked: %s", src[:80])
        return payload
