"""
Layout/style source backed by headless Chromium.

The page lays the HTML out; a single evaluate() call then snapshots a root
element's subtree (boxes, computed styles, attributes and text nodes) into
JSON that becomes a VisualNode tree.
"""

import logging
from dataclasses import fields
from typing import Optional

from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .config import ExportOptions
from .errors import RootNotFoundError
from .model import StyleSnapshot, VisualNode

logger = logging.getLogger(__name__)

DISABLE_ANIMATIONS_CSS = """<style>
      *, *::before, *::after {
        animation-duration: 0s !important;
        animation-delay: 0s !important;
        transition-duration: 0s !important;
        transition-delay: 0s !important;
      }
    </style>"""

# (snapshot field, CSS property) pairs read from getComputedStyle
STYLE_PROPERTIES = [(f.name, f.name.replace("_", "-")) for f in fields(StyleSnapshot)]

WAIT_FOR_IMAGES_JS = """
async () => {
    const images = Array.from(document.querySelectorAll('img'));
    await Promise.all(images.map(img => {
        if (img.complete) return Promise.resolve();
        return new Promise((resolve) => {
            img.onload = resolve;
            img.onerror = resolve; // Resolve even on error to not block
            setTimeout(resolve, 5000);
        });
    }));
}
"""

SNAPSHOT_JS = """
({selector, properties}) => {
    const root = document.querySelector(selector);
    if (!root) return null;
    const SKIPPED = new Set(['SCRIPT', 'STYLE', 'TEMPLATE', 'NOSCRIPT', 'HEAD', 'META', 'LINK', 'TITLE']);
    let counter = 0;

    const snap = (el) => {
        const index = counter++;
        const cs = window.getComputedStyle(el);
        const style = {};
        for (const [key, prop] of properties) {
            style[key] = cs.getPropertyValue(prop);
        }
        // gradient text is usually declared with the prefixed property
        if (style.background_clip !== 'text') {
            const prefixed = cs.getPropertyValue('-webkit-background-clip');
            if (prefixed === 'text') style.background_clip = 'text';
        }

        const attributes = {};
        for (const attr of el.attributes) attributes[attr.name] = attr.value;
        if (el.tagName === 'IMG' && el.currentSrc) attributes.currentSrc = el.currentSrc;

        const children = [];
        for (const child of el.childNodes) {
            if (child.nodeType === Node.TEXT_NODE) {
                children.push({ text: child.nodeValue });
            } else if (child.nodeType === Node.ELEMENT_NODE && !SKIPPED.has(child.tagName.toUpperCase())) {
                children.push(snap(child));
            }
        }

        const rect = el.getBoundingClientRect();
        return {
            tag: el.tagName,
            localName: el.localName,
            index: index,
            box: { left: rect.left, top: rect.top, width: rect.width, height: rect.height },
            offsetWidth: el.offsetWidth || 0,
            offsetHeight: el.offsetHeight || 0,
            style: style,
            attributes: attributes,
            children: children
        };
    };
    return snap(root);
}
"""


def disable_animations(html_content: str) -> str:
    """Inject a stylesheet that freezes animations so boxes are final."""
    if "</head>" in html_content:
        return html_content.replace("</head>", DISABLE_ANIMATIONS_CSS + "</head>", 1)
    if "<head>" in html_content:
        # Has head tag but no closing tag (malformed but handle it)
        return html_content.replace("<head>", "<head>" + DISABLE_ANIMATIONS_CSS, 1)
    if "<body>" in html_content:
        return html_content.replace("<body>", "<body>" + DISABLE_ANIMATIONS_CSS, 1)
    return DISABLE_ANIMATIONS_CSS + html_content


class PlaywrightLayoutSource:
    """Loads HTML into a page and snapshots root subtrees from it."""

    def __init__(self, page: Page, options: Optional[ExportOptions] = None):
        self.page = page
        self.options = options or ExportOptions()
        self._loaded_html = None

    async def load(self, html_content: str) -> None:
        if html_content == self._loaded_html:
            return
        await self.page.set_content(disable_animations(html_content))
        try:
            await self.page.wait_for_load_state("networkidle", timeout=self.options.load_timeout_ms)
        except PlaywrightTimeoutError:
            logger.debug("networkidle not reached within %sms, continuing", self.options.load_timeout_ms)
        await self.page.evaluate(WAIT_FOR_IMAGES_JS)
        if self.options.settle_ms:
            await self.page.wait_for_timeout(self.options.settle_ms)
        self._loaded_html = html_content

    async def snapshot(self, selector: str) -> VisualNode:
        data = await self.page.evaluate(SNAPSHOT_JS, {"selector": selector, "properties": STYLE_PROPERTIES})
        if data is None:
            raise RootNotFoundError(selector)
        return VisualNode.from_dict(data)
