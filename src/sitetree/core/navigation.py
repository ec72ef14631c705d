"""Navigation menu for rendered pages.

Builds the site-wide navigation relative to one page. Navigation always
starts at the content root; the page only decides the href prefix and
which entry is highlighted.
"""

from dataclasses import dataclass, field
from html import escape

from sitetree.core.paths import OUTPUT_EXTENSION, SOURCE_EXTENSION, normalize_target, strip_extension, target_path
from sitetree.core.tree import ContentNode
from sitetree.core.types import TargetPath

NAV_LIST_OPEN = '<ul class="nav-list">\n'
NAV_LIST_CLOSE = "</ul>\n"


@dataclass
class NavItem:
    """Link or section heading in the navigation menu.

    Sections have no href and carry their directory's entries as children.
    """

    title: str
    href: str | None = None
    target: TargetPath | None = None
    active: bool = False
    children: list["NavItem"] = field(default_factory=list)

    @property
    def is_section(self) -> bool:
        return self.href is None


def is_collapsible(node: ContentNode) -> bool:
    """Check whether a directory is shown as a single link.

    A directory collapses when it holds exactly one file and nothing
    below it holds any.
    """
    return len(node.files) == 1 and node.descendant_file_count() == 0


def build_navigation(
    root: ContentNode,
    url_prefix: str,
    active_target: str,
    *,
    source_ext: str = SOURCE_EXTENSION,
    output_ext: str = OUTPUT_EXTENSION,
) -> list[NavItem]:
    """Build navigation items for the whole tree.

    Args:
        root: Content tree root
        url_prefix: Climb prefix of the page being rendered (e.g., "../")
        active_target: TargetPath of the page being rendered

    Returns:
        Top-level NavItems in menu order
    """
    builder = _NavBuilder(url_prefix, normalize_target(active_target), source_ext, output_ext)
    return builder.build(root)


def render_navigation(
    root: ContentNode,
    url_prefix: str,
    active_target: str,
    *,
    source_ext: str = SOURCE_EXTENSION,
    output_ext: str = OUTPUT_EXTENSION,
) -> str:
    """Render the navigation menu as nested HTML lists.

    Args:
        root: Content tree root
        url_prefix: Climb prefix of the page being rendered
        active_target: TargetPath of the page being rendered

    Returns:
        HTML markup starting with the root list
    """
    items = build_navigation(
        root,
        url_prefix,
        active_target,
        source_ext=source_ext,
        output_ext=output_ext,
    )
    return render_items(items)


def render_items(items: list[NavItem]) -> str:
    """Render NavItems as a nested <ul> list."""
    parts = [NAV_LIST_OPEN]
    for item in items:
        title = escape(item.title)
        if item.is_section:
            parts.append(f"  <li><strong>{title}</strong>\n")
            parts.append(render_items(item.children))
            parts.append("  </li>\n")
        else:
            class_attr = ' class="active"' if item.active else ""
            parts.append(f'  <li><a href="{escape(item.href or "")}"{class_attr}>{title}</a></li>\n')
    parts.append(NAV_LIST_CLOSE)
    return "".join(parts)


class NavigationRenderer:
    """Renders navigation markup with per-page memoization.

    Output is identical to render_navigation(); repeated calls with the
    same prefix and active target reuse the earlier markup.
    """

    def __init__(
        self,
        root: ContentNode,
        *,
        source_ext: str = SOURCE_EXTENSION,
        output_ext: str = OUTPUT_EXTENSION,
    ) -> None:
        self._root = root
        self._source_ext = source_ext
        self._output_ext = output_ext
        self._cache: dict[tuple[str, TargetPath], str] = {}

    @property
    def root(self) -> ContentNode:
        return self._root

    def render(self, url_prefix: str, active_target: str) -> str:
        key = (url_prefix, normalize_target(active_target))
        markup = self._cache.get(key)
        if markup is None:
            markup = render_navigation(
                self._root,
                url_prefix,
                key[1],
                source_ext=self._source_ext,
                output_ext=self._output_ext,
            )
            self._cache[key] = markup
        return markup


class _NavBuilder:
    """Single traversal state.

    Targets already linked are not linked again, so a file that collides
    with an earlier one never shows up (or shows as active) twice.
    """

    def __init__(
        self,
        url_prefix: str,
        active_target: TargetPath,
        source_ext: str,
        output_ext: str,
    ) -> None:
        self._url_prefix = url_prefix
        self._active_target = active_target
        self._source_ext = source_ext
        self._output_ext = output_ext
        self._seen: set[TargetPath] = set()

    def build(self, node: ContentNode) -> list[NavItem]:
        items: list[NavItem] = []
        for name in node.files:
            link = self._link(node, name, strip_extension(name))
            if link is not None:
                items.append(link)

        for child in node.children:
            if is_collapsible(child):
                link = self._link(child, child.files[0], child.name)
                if link is not None:
                    items.append(link)
            else:
                items.append(NavItem(title=child.name, children=self.build(child)))
        return items

    def _link(self, node: ContentNode, name: str, title: str) -> NavItem | None:
        target = target_path(node.relative_path, name, self._source_ext, self._output_ext)
        if target in self._seen:
            return None
        self._seen.add(target)
        return NavItem(
            title=title,
            href=self._url_prefix + target,
            target=target,
            active=target == self._active_target,
        )
