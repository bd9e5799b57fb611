"""Convert rendered HTML/DOM subtrees into editable PowerPoint slides."""

from .config import ExportOptions, SlideSource, load_slides
from .converter import convert_json_to_pptx, export_to_pptx, process_slide
from .errors import ConversionError, RootNotFoundError, SlideInputError
from .geometry import LayoutConfig
from .model import ImageItem, ShapeItem, TextItem, VisualNode
from .writer import PresentationWriter

__version__ = "0.1.0"

__all__ = [
    "ConversionError",
    "ExportOptions",
    "ImageItem",
    "LayoutConfig",
    "PresentationWriter",
    "RootNotFoundError",
    "ShapeItem",
    "SlideInputError",
    "SlideSource",
    "TextItem",
    "VisualNode",
    "convert_json_to_pptx",
    "export_to_pptx",
    "load_slides",
    "process_slide",
]
