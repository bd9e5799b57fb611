"""Exceptions raised by the converter's outer layers."""

from typing import List


class ConversionError(Exception):
    """Base class for converter errors."""


class SlideInputError(ConversionError, ValueError):
    """Raised when the slide input file is malformed."""

    def __init__(self, issues: List[str]):
        self.issues = [str(i).strip() for i in issues if str(i).strip()]
        if not self.issues:
            self.issues = ["Invalid slide input"]
        super().__init__(self._format())

    def _format(self) -> str:
        lines = ["Slide input validation failed:"]
        for issue in self.issues:
            lines.append(f"- {issue}")
        return "\n".join(lines)


class RootNotFoundError(ConversionError, LookupError):
    """Raised when a slide root selector matches nothing in the page."""

    def __init__(self, selector: str):
        self.selector = selector
        super().__init__(f"Element not found: {selector}")
