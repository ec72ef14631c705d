"""Mapping of content paths to output paths.

Pure functions shared by the tree builder, the navigation renderer and
the render pipeline. Relative paths are forward-slash strings with the
content root represented by the empty string.
"""

from pathlib import PurePosixPath

from sitetree.core.types import TargetPath

SOURCE_EXTENSION = ".md"
OUTPUT_EXTENSION = ".html"
UP_SEGMENT = "../"


def map_target(
    name: str,
    source_ext: str = SOURCE_EXTENSION,
    output_ext: str = OUTPUT_EXTENSION,
) -> str:
    """Map a content filename (or path) to its output filename.

    Args:
        name: Filename or relative path of a content file
        source_ext: Extension rewritten on output (e.g., ".md")
        output_ext: Replacement extension (e.g., ".html")

    Returns:
        Name with source_ext replaced by output_ext, otherwise unchanged
    """
    if name.endswith(source_ext) and len(name) > len(source_ext):
        return name[: -len(source_ext)] + output_ext
    return name


def split_path(relative_path: str) -> list[str]:
    """Split a relative path into its segments.

    The root ("" or ".") has no segments.
    """
    normalized = relative_path.replace("\\", "/")
    return [part for part in normalized.split("/") if part and part != "."]


def join_path(*parts: str) -> str:
    """Join path fragments with forward slashes, dropping empty segments."""
    segments: list[str] = []
    for part in parts:
        segments.extend(split_path(part))
    return "/".join(segments)


def climb_prefix(relative_path: str) -> str:
    """Build the prefix that climbs from a directory back to the output root.

    Args:
        relative_path: Directory path relative to the root (e.g., "Guide/sub")

    Returns:
        One "../" per path segment, "" for the root
    """
    return UP_SEGMENT * len(split_path(relative_path))


def target_path(
    relative_path: str,
    name: str,
    source_ext: str = SOURCE_EXTENSION,
    output_ext: str = OUTPUT_EXTENSION,
) -> TargetPath:
    """Output-relative path of a content file.

    Args:
        relative_path: Directory of the file relative to the content root
        name: Content filename inside that directory

    Returns:
        Forward-slash joined TargetPath
    """
    return TargetPath(join_path(relative_path, map_target(name, source_ext, output_ext)))


def normalize_target(path: str) -> TargetPath:
    """Normalize a user-supplied path for TargetPath comparison."""
    return TargetPath(join_path(path))


def strip_extension(name: str) -> str:
    """Return the filename without its final extension."""
    return PurePosixPath(name).stem
