"""
Export options and slide input loading.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from .errors import SlideInputError

# Browser viewport used to lay out the HTML (1920x1080 - 16:9)
VIEWPORT_WIDTH_PX = 1920
VIEWPORT_HEIGHT_PX = 1080


@dataclass
class ExportOptions:
    file_name: str = "export.pptx"
    # forced slide background, any CSS color
    background_color: Optional[str] = None
    viewport_width: int = VIEWPORT_WIDTH_PX
    viewport_height: int = VIEWPORT_HEIGHT_PX
    device_scale_factor: float = 1
    load_timeout_ms: int = 10000
    # extra wait after load so late layout settles
    settle_ms: int = 500
    raster_scale: int = 3


@dataclass
class SlideSource:
    """One HTML document and the root element(s) that become slides."""
    html: str
    selectors: List[str] = field(default_factory=lambda: ["body"])
    id: Optional[str] = None


def _parse_slide(obj, idx: int, issues: List[str]) -> Optional[SlideSource]:
    where = f"slides[{idx}]"
    if not isinstance(obj, dict):
        issues.append(f"{where} must be an object")
        return None
    html = obj.get("html")
    if not isinstance(html, str) or not html.strip():
        issues.append(f"{where}.html is required and must be a non-empty string")
        return None

    selectors = obj.get("selectors")
    if selectors is None:
        selector = obj.get("selector", "body")
        selectors = [selector]
    if not isinstance(selectors, list) or not selectors or not all(isinstance(s, str) and s for s in selectors):
        issues.append(f"{where}.selectors must be a non-empty list of strings")
        return None
    return SlideSource(html=html, selectors=list(selectors), id=str(obj.get("id") or f"slide_{idx + 1}"))


def parse_slides(payload) -> List[SlideSource]:
    """Validate decoded JSON: a list of slide objects or a single one."""
    if isinstance(payload, dict):
        payload = [payload]
    if not isinstance(payload, list):
        raise SlideInputError(["top level must be a list of slide objects"])
    issues: List[str] = []
    slides = [_parse_slide(obj, idx, issues) for idx, obj in enumerate(payload)]
    if issues:
        raise SlideInputError(issues)
    if not slides:
        raise SlideInputError(["no slides given"])
    return slides


def load_slides(path: Union[str, Path]) -> List[SlideSource]:
    with open(path, "r", encoding="utf-8") as f:
        try:
            payload = json.load(f)
        except json.JSONDecodeError as e:
            raise SlideInputError([f"invalid JSON: {e}"]) from e
    return parse_slides(payload)
