"""Error taxonomy for site builds.

Fatal errors abort the whole run. Per-page errors are recorded by the
pipeline and the page is skipped.
"""

from pathlib import Path


class SiteError(Exception):
    """Base class for all sitetree errors."""


class FatalIOError(SiteError):
    """Configuration, content root, template or output root is unusable."""


class ConfigError(FatalIOError, ValueError):
    """Configuration is missing required keys or is otherwise invalid."""


class PageError(SiteError):
    """Failure confined to a single page."""

    def __init__(self, message: str, source_path: Path | None = None) -> None:
        super().__init__(message)
        self.source_path = source_path

    def __str__(self) -> str:
        message = super().__str__()
        if self.source_path is None:
            return message
        return f"{self.source_path}: {message}"


class ConversionError(PageError):
    """Markdown conversion failed."""


class TemplatingError(PageError):
    """Template parsing or application failed."""


class StructuralError(PageError):
    """Two content files resolve to the same output path."""
