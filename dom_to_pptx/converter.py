"""
Conversion driver: rendered DOM roots in, one .pptx slide per root out.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from .classifier import SKIP, classify
from .config import ExportOptions, SlideSource, load_slides
from .errors import RootNotFoundError
from .geometry import LayoutConfig
from .imaging import PlaywrightRenderBackend, RenderBackend
from .layout_source import PlaywrightLayoutSource
from .model import RenderItem, VisualNode
from .render_queue import RenderQueue
from .writer import PresentationWriter

logger = logging.getLogger(__name__)


async def process_slide(root: VisualNode, backend: RenderBackend) -> List[RenderItem]:
    """
    Walk one root depth-first in document order and return its paint-ordered items.

    Failures inside a single node are logged and that node contributes nothing;
    the walk always completes.
    """
    config = LayoutConfig.for_root(root.box)
    queue = RenderQueue()
    dom_order = 0

    async def collect(node: VisualNode, parent: Optional[VisualNode]) -> None:
        nonlocal dom_order
        order = dom_order
        dom_order += 1
        try:
            result = await classify(node, parent, config, order, backend)
        except Exception:
            logger.warning("Could not convert <%s> (node %s), skipping it", node.tag.lower(),
                           node.dom_index, exc_info=True)
            result = SKIP
        queue.extend(result.items)
        if result.stop_recursion:
            for graphic in result.embedded:
                await collect(graphic, node)
            return
        for child in node.element_children:
            await collect(child, node)

    await collect(root, None)
    return queue.ordered()


async def _export(slides: Sequence[SlideSource], options: ExportOptions, writer: PresentationWriter) -> int:
    count = 0
    async with async_playwright() as p:
        browser = await p.chromium.launch()
        try:
            page = await browser.new_page(
                viewport={"width": options.viewport_width, "height": options.viewport_height},
                device_scale_factor=options.device_scale_factor,
            )
            source = PlaywrightLayoutSource(page, options)
            backend = PlaywrightRenderBackend(page, options.raster_scale)
            for idx, slide in enumerate(slides, 1):
                logger.info("[%d/%d] %s", idx, len(slides), slide.id or "slide_%d" % idx)
                await source.load(slide.html)
                for selector in slide.selectors:
                    try:
                        root = await source.snapshot(selector)
                    except (RootNotFoundError, PlaywrightError) as e:
                        logger.warning("Element not found, skipping slide: %s (%s)", selector, e)
                        continue
                    if root.box.is_empty:
                        logger.warning("Root %s has no area, skipping slide", selector)
                        continue
                    items = await process_slide(root, backend)
                    writer.add_slide(items, options.background_color)
                    count += 1
        finally:
            await browser.close()
    return count


async def export_to_pptx(slides: Union[SlideSource, Sequence[SlideSource]],
                         options: Optional[ExportOptions] = None) -> Path:
    """
    Convert one or more slide sources into a single presentation file.

    Every resolvable root becomes one slide, in input order.
    """
    options = options or ExportOptions()
    if isinstance(slides, SlideSource):
        slides = [slides]
    writer = PresentationWriter()
    count = await _export(slides, options, writer)
    if count == 0:
        logger.warning("No slides were produced")
    path = writer.save(options.file_name)
    logger.info("Created: %s (%d slides)", path, count)
    return path


async def convert_json_to_pptx(json_path: Union[str, Path], output_path: Union[str, Path],
                               background_color: Optional[str] = None) -> Path:
    """Read slide sources from a JSON file and write them to output_path."""
    slides = load_slides(json_path)
    logger.info("Processing %d slides...", len(slides))
    options = ExportOptions(file_name=str(output_path), background_color=background_color)
    return await export_to_pptx(slides, options)
