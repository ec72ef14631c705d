"""Render pipeline.

Walks the content tree and writes one output page per content file. Every
page gets the full-site navigation computed relative to its own depth.

A conversion or template failure skips only that page. A failure to read
a source file or to create an output directory aborts the run.
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from sitetree.core.navigation import NavigationRenderer
from sitetree.core.paths import OUTPUT_EXTENSION, SOURCE_EXTENSION, climb_prefix, strip_extension, target_path
from sitetree.core.renderer import MarkdownRenderer, split_front_matter
from sitetree.core.templates import PageContext, PageTemplate
from sitetree.core.tree import ContentNode, find_collisions
from sitetree.core.types import TargetPath
from sitetree.errors import ConversionError, FatalIOError, StructuralError, TemplatingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Collaborators:
    """External services used while rendering pages."""

    converter: MarkdownRenderer
    template: PageTemplate
    source_ext: str = SOURCE_EXTENSION
    output_ext: str = OUTPUT_EXTENSION


@dataclass(frozen=True)
class SkippedPage:
    """Page left out of the output, with the reason."""

    source: str
    reason: str


@dataclass
class BuildReport:
    """Outcome of a pipeline run."""

    written: list[TargetPath] = field(default_factory=list)
    skipped: list[SkippedPage] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.skipped

    def summary(self) -> str:
        """Human-readable summary of the run."""
        lines = [f"{len(self.written)} page(s) written"]
        if self.skipped:
            lines[0] += f", {len(self.skipped)} skipped:"
            lines.extend(f"  - {page.source}: {page.reason}" for page in self.skipped)
        return "\n".join(lines)


def prepare_output_root(output_root: Path) -> None:
    """Delete and recreate the output root.

    Raises:
        FatalIOError: If the directory cannot be removed or created
    """
    try:
        if output_root.exists():
            logger.info(f"Removing previous output {output_root}")
            shutil.rmtree(output_root)
        output_root.mkdir(parents=True)
    except OSError as e:
        raise FatalIOError(f"Cannot prepare output directory {output_root}: {e}") from e


class SitePipeline:
    """Renders every page of a content tree into the output root."""

    def __init__(
        self,
        root: ContentNode,
        content_root: Path,
        output_root: Path,
        collaborators: Collaborators,
    ) -> None:
        """Initialize pipeline.

        Args:
            root: Content tree built from content_root
            content_root: Directory holding the source pages
            output_root: Directory receiving the rendered site
            collaborators: Converter and template used for each page
        """
        self._root = root
        self._content_root = content_root
        self._output_root = output_root
        self._collaborators = collaborators
        self._navigation = NavigationRenderer(
            root,
            source_ext=collaborators.source_ext,
            output_ext=collaborators.output_ext,
        )

    def render(self) -> BuildReport:
        """Render all pages.

        Returns:
            BuildReport listing written and skipped pages

        Raises:
            FatalIOError: If a source cannot be read or an output directory
                cannot be created
        """
        report = BuildReport()
        blocked = self._blocked_sources(report)
        self._render_node(self._root, report, blocked)
        return report

    def _blocked_sources(self, report: BuildReport) -> set[str]:
        blocked: set[str] = set()
        collisions = find_collisions(
            self._root,
            self._collaborators.source_ext,
            self._collaborators.output_ext,
        )
        for collision in collisions:
            error = StructuralError(
                f"output {collision.target} already produced by {collision.first}",
                Path(collision.second),
            )
            logger.warning(f"Skipping {collision.second}: {error.args[0]}")
            report.skipped.append(SkippedPage(source=collision.second, reason=str(error.args[0])))
            blocked.add(collision.second)
        return blocked

    def _render_node(self, node: ContentNode, report: BuildReport, blocked: set[str]) -> None:
        output_dir = self._output_root / node.relative_path
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FatalIOError(f"Cannot create output directory {output_dir}: {e}") from e
        logger.info(f"Entering {node.relative_path or '.'}")

        url_prefix = climb_prefix(node.relative_path)
        for name in node.files:
            source = node.file_path(name)
            if source in blocked:
                continue
            try:
                target = self._render_page(node, name, url_prefix)
            except (ConversionError, TemplatingError) as e:
                logger.warning(f"Skipping {source}: {e.args[0]}")
                report.skipped.append(SkippedPage(source=source, reason=str(e.args[0])))
                continue
            report.written.append(target)

        for child in node.children:
            self._render_node(child, report, blocked)

    def _render_page(self, node: ContentNode, name: str, url_prefix: str) -> TargetPath:
        collaborators = self._collaborators
        source_path = self._content_root / node.relative_path / name
        target = target_path(node.relative_path, name, collaborators.source_ext, collaborators.output_ext)

        navigation = self._navigation.render(url_prefix, target)
        raw = _read_source(source_path)

        meta: dict[str, str] = {}
        if name.endswith(collaborators.source_ext):
            document = split_front_matter(raw)
            meta = document.meta
            content = collaborators.converter.render(document.body, source_path)
        else:
            content = raw

        context = PageContext(
            base_path=url_prefix,
            title=strip_extension(name),
            navigation=navigation,
            content=content,
            meta=meta,
            source_path=node.file_path(name),
        )
        page = collaborators.template.apply(context)

        output_path = self._output_root / target
        try:
            output_path.write_text(page, encoding="utf-8")
        except OSError as e:
            raise FatalIOError(f"Cannot write {output_path}: {e}") from e
        logger.info(f"Created {output_path}")
        return target


def render_site(
    root: ContentNode,
    content_root: Path,
    output_root: Path,
    collaborators: Collaborators,
) -> BuildReport:
    """Render a content tree into an existing output root."""
    return SitePipeline(root, content_root, output_root, collaborators).render()


def _read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise FatalIOError(f"Could not read file: {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ConversionError(f"Source is not valid UTF-8: {e}", path) from e

