"""Markdown to HTML conversion.

Wraps mistune with the GitHub-flavoured plugins. Raw HTML in sources is
passed through untouched.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

import mistune

from sitetree.errors import ConversionError

logger = logging.getLogger(__name__)

GFM_PLUGINS = ["strikethrough", "table", "task_lists", "url"]

FRONT_MATTER_PATTERN = re.compile(
    r"\A\s*---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL,
)


@dataclass
class SourceDocument:
    """Markdown source split into front matter and body."""

    body: str
    meta: dict[str, str] = field(default_factory=dict)


def split_front_matter(text: str) -> SourceDocument:
    """Separate a leading '---' block of 'key: value' lines from the body.

    Lines without a colon are ignored. Text without a front matter block
    is returned unchanged with empty meta.

    Args:
        text: Raw Markdown source

    Returns:
        SourceDocument with body and parsed meta
    """
    match = FRONT_MATTER_PATTERN.match(text)
    if match is None:
        return SourceDocument(body=text)

    meta: dict[str, str] = {}
    for line in match.group(1).splitlines():
        key, sep, value = line.partition(":")
        if not sep or not key.strip():
            continue
        meta[key.strip()] = value.strip()
    return SourceDocument(body=text[match.end():], meta=meta)


class MarkdownRenderer:
    """Convert Markdown text to HTML."""

    def __init__(self, plugins: list[str] | None = None) -> None:
        """Initialize the mistune parser.

        Args:
            plugins: mistune plugin names (default: GFM_PLUGINS)
        """
        self._markdown = mistune.create_markdown(
            escape=False,
            plugins=list(GFM_PLUGINS if plugins is None else plugins),
        )

    def render(self, markdown_text: str, source_path: Path | None = None) -> str:
        """Convert Markdown text to HTML.

        Args:
            markdown_text: Markdown source text
            source_path: Source file, used in error messages

        Returns:
            HTML string

        Raises:
            ConversionError: If mistune fails on the input
        """
        logger.debug(f"Converting {len(markdown_text)} characters of markdown")
        try:
            html = self._markdown(markdown_text)
        except Exception as e:
            raise ConversionError(f"Markdown conversion failed: {e}", source_path) from e
        if not isinstance(html, str):
            raise ConversionError("Markdown conversion produced no HTML", source_path)
        logger.debug(f"Converted to {len(html)} characters of HTML")
        return html
