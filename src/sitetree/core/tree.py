"""Content tree discovery.

Scans a content root into an immutable tree of directories and eligible
content files. Ordering is by plain string comparison so repeated scans
of unchanged input produce identical trees (and identical navigation).
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from sitetree.core.paths import (
    OUTPUT_EXTENSION,
    SOURCE_EXTENSION,
    join_path,
    target_path,
)
from sitetree.core.types import TargetPath
from sitetree.errors import FatalIOError

logger = logging.getLogger(__name__)

CONTENT_ONLY: tuple[str, ...] = (SOURCE_EXTENSION,)
CONTENT_AND_PASSTHROUGH: tuple[str, ...] = (SOURCE_EXTENSION, ".htm")


@dataclass(frozen=True)
class ContentNode:
    """Directory in the content tree.

    The root has an empty relative_path. files and children are sorted.
    """

    relative_path: str
    name: str
    files: tuple[str, ...] = ()
    children: tuple["ContentNode", ...] = ()

    @property
    def is_root(self) -> bool:
        return self.relative_path == ""

    def file_path(self, name: str) -> str:
        """Content-root-relative path of one of this node's files."""
        return join_path(self.relative_path, name)

    def iter_nodes(self) -> Iterator["ContentNode"]:
        """Yield this node and all descendants, depth-first pre-order."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def iter_files(self) -> Iterator[tuple["ContentNode", str]]:
        """Yield (node, filename) for every file in walk order."""
        for node in self.iter_nodes():
            for name in node.files:
                yield node, name

    def descendant_file_count(self) -> int:
        """Number of files below this node, excluding its own files."""
        return sum(len(child.files) + child.descendant_file_count() for child in self.children)


@dataclass(frozen=True)
class Collision:
    """Two content files that resolve to the same output path."""

    target: TargetPath
    first: str
    second: str


class TreeBuilder:
    """Builds ContentNode trees from a content directory.

    Only regular files whose extension is in accepted_extensions are kept.
    Entries whose name starts with a dot are ignored.
    """

    def __init__(self, accepted_extensions: Iterable[str] = CONTENT_ONLY) -> None:
        """Initialize builder.

        Args:
            accepted_extensions: File extensions to keep, with leading dot
        """
        self._accepted = frozenset(accepted_extensions)

    @property
    def accepted_extensions(self) -> frozenset[str]:
        return self._accepted

    def accepts(self, name: str) -> bool:
        """Check whether a filename is eligible content."""
        return PurePosixPath(name).suffix in self._accepted

    def build(self, root: Path) -> ContentNode:
        """Scan a content root.

        Args:
            root: Content root directory

        Returns:
            Root ContentNode

        Raises:
            FatalIOError: If the root or any subdirectory cannot be read
        """
        if not root.is_dir():
            raise FatalIOError(f"Content root is not a directory: {root}")
        return self._build_node(root, "")

    def _build_node(self, directory: Path, relative_path: str) -> ContentNode:
        try:
            entries = list(directory.iterdir())
        except OSError as e:
            raise FatalIOError(f"Cannot read directory {directory}: {e}") from e

        files: list[str] = []
        children: list[ContentNode] = []
        for entry in entries:
            if entry.name.startswith("."):
                continue
            if entry.is_dir():
                children.append(self._build_node(entry, join_path(relative_path, entry.name)))
            elif entry.is_file() and self.accepts(entry.name):
                files.append(entry.name)

        files.sort()
        children.sort(key=lambda child: child.name)
        logger.debug(f"Scanned '{relative_path or '.'}': {len(files)} files, {len(children)} directories")
        return ContentNode(
            relative_path=relative_path,
            name=directory.name,
            files=tuple(files),
            children=tuple(children),
        )


def build_tree(root: Path, accepted_extensions: Iterable[str] = CONTENT_ONLY) -> ContentNode:
    """Scan a content root with the given accepted extensions."""
    return TreeBuilder(accepted_extensions).build(root)


def find_collisions(
    root: ContentNode,
    source_ext: str = SOURCE_EXTENSION,
    output_ext: str = OUTPUT_EXTENSION,
) -> list[Collision]:
    """Find content files that map to an already claimed output path.

    The first file in walk order owns the target; each later file is
    reported against it.

    Args:
        root: Content tree root
        source_ext: Extension rewritten on output
        output_ext: Replacement extension

    Returns:
        One Collision per file that would overwrite an earlier one
    """
    owners: dict[TargetPath, str] = {}
    collisions: list[Collision] = []
    for node, name in root.iter_files():
        target = target_path(node.relative_path, name, source_ext, output_ext)
        source = node.file_path(name)
        owner = owners.get(target)
        if owner is None:
            owners[target] = source
        else:
            collisions.append(Collision(target=target, first=owner, second=source))
    return collisions
