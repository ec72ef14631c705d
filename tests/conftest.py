"""Shared test fixtures."""

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

PAGE_TEMPLATE = (
    "<html><head><title>{{ title }}</title>"
    '<link rel="stylesheet" href="{{ base_path }}assets/style.css"></head>\n'
    "<body>\n<nav>{{ navigation }}</nav>\n<main>{{ content }}</main>\n</body></html>\n"
)


@pytest.fixture(autouse=True)
def reset_root_logging() -> Iterator[None]:
    """Drop handlers installed by CLI invocations after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def write_files() -> Callable[[Path, dict[str, str]], Path]:
    """Return a helper that writes a {relative path: text} mapping under a root."""

    def _write(root: Path, files: dict[str, str]) -> Path:
        for relative, text in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        root.mkdir(parents=True, exist_ok=True)
        return root

    return _write


@pytest.fixture
def template_file(tmp_path: Path) -> Path:
    """Jinja2 page template in a theme directory."""
    theme_dir = tmp_path / "theme"
    theme_dir.mkdir()
    path = theme_dir / "page.html"
    path.write_text(PAGE_TEMPLATE, encoding="utf-8")
    return path
