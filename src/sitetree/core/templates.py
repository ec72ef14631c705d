"""Page templates.

Two ways of wrapping a rendered page body: a Jinja2 template parsed once
at startup, or a plain header/footer pair spliced around the body.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, TemplateError, TemplateNotFound

from sitetree.errors import FatalIOError, TemplatingError

logger = logging.getLogger(__name__)

BASE_PATH_MARKER = "{{BASE_PATH}}"


@dataclass(frozen=True)
class PageContext:
    """Values available to a template for one page."""

    base_path: str
    title: str
    navigation: str
    content: str
    meta: dict[str, str] = field(default_factory=dict)
    source_path: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_path": self.base_path,
            "title": self.title,
            "navigation": self.navigation,
            "content": self.content,
            "meta": dict(self.meta),
            "source_path": self.source_path,
        }


class PageTemplate(Protocol):
    """Anything that can turn a PageContext into a finished page."""

    def apply(self, context: PageContext) -> str: ...


class JinjaPageTemplate:
    """Jinja2 page template.

    Templates may include or extend sibling files from their own
    directory. Undefined variables are errors, not empty strings.
    """

    def __init__(self, template: Template, path: Path) -> None:
        self._template = template
        self._path = path

    @classmethod
    def parse(cls, path: Path) -> "JinjaPageTemplate":
        """Load and compile a template file.

        Args:
            path: Template file

        Returns:
            Parsed template

        Raises:
            FatalIOError: If the template file cannot be read
            TemplatingError: If the template has a syntax error
        """
        if not path.is_file():
            raise FatalIOError(f"Template file not found: {path}")

        env = Environment(
            loader=FileSystemLoader(path.parent),
            autoescape=False,  # navigation and content are already HTML
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )
        try:
            template = env.get_template(path.name)
        except TemplateNotFound as e:
            raise FatalIOError(f"Cannot read template {path}: {e}") from e
        except TemplateError as e:
            raise TemplatingError(f"Invalid template: {e}", path) from e

        logger.info(f"Loaded template {path}")
        return cls(template, path)

    def apply(self, context: PageContext) -> str:
        """Render the template with a page context.

        Raises:
            TemplatingError: On undefined variables or runtime template errors
        """
        try:
            return self._template.render(**context.to_dict())
        except (TemplateError, TypeError, ValueError) as e:
            raise TemplatingError(f"Template error: {e}", self._path) from e


class HeaderFooterTemplate:
    """Header + navigation + body + footer concatenation.

    The header may reference BASE_PATH_MARKER, which is replaced with the
    page's climb prefix so stylesheet links resolve from any depth.
    """

    def __init__(self, header: str, footer: str) -> None:
        self._header = header
        self._footer = footer

    @classmethod
    def parse(cls, header_path: Path, footer_path: Path) -> "HeaderFooterTemplate":
        """Read header and footer files.

        Raises:
            FatalIOError: If either file cannot be read
        """
        return cls(
            _read_text(header_path, "header"),
            _read_text(footer_path, "footer"),
        )

    def apply(self, context: PageContext) -> str:
        header = self._header.replace(BASE_PATH_MARKER, context.base_path)
        nav = '<aside class="aside">\n  <nav class="nav">\n' + context.navigation + "  </nav>\n</aside>\n"
        return (
            header
            + "\n"
            + nav
            + '\n<main class="main">\n'
            + context.content
            + "\n</main>\n"
            + self._footer
        )


def _read_text(path: Path, label: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise FatalIOError(f"Cannot read {label} file {path}: {e}") from e
