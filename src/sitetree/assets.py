"""Static asset copying.

Copies a theme's assets directory into the generated site unchanged.
"""

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def copy_tree(source_dir: Path, dest_dir: Path) -> bool:
    """Recursively copy a directory, overwriting existing files.

    Copy failures are logged and reported as False; they never abort a build.

    Args:
        source_dir: Directory to copy
        dest_dir: Destination directory (created if missing)

    Returns:
        True if files were copied, False if source_dir does not exist
        or the copy failed
    """
    if not source_dir.is_dir():
        logger.warning(f"No assets folder found at {source_dir} (skipping copy)")
        return False

    logger.info(f"Copying assets from {source_dir} to {dest_dir}")
    try:
        shutil.copytree(source_dir, dest_dir, dirs_exist_ok=True)
    except (OSError, shutil.Error) as e:
        logger.error(f"Error copying assets from {source_dir}: {e}")
        return False
    return True
