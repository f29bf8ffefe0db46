"""
Mirror a template directory tree into a new location.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Tuple

from ..errors import FilesystemError

logger = logging.getLogger(__name__)

# Build output (.next, dist), version control (.git), scratch space (temp) and the dependency cache.
EXCLUDED_DIRECTORIES = frozenset({".next", ".git", "temp", "dist", "node_modules"})


@dataclass
class CloneStats:
    """
    Counts of what a clone produced.

    Attributes:
        directories_created: Directories made under the destination, root included.
        files_copied: Regular files copied byte for byte.
        symlinks_created: Links recreated as links (never followed).
        skipped: Source directories left out because of the exclusion set.
    """
    directories_created: int = 0
    files_copied: int = 0
    symlinks_created: int = 0
    skipped: List[Path] = field(default_factory=list)


def clone_tree(
    source_root: Path | str,
    dest_root: Path | str,
    *,
    excluded: Iterable[str] = EXCLUDED_DIRECTORIES,
) -> CloneStats:
    """
    Copy source_root into dest_root, leaving out excluded directory names at any depth.

    The walk uses an explicit stack of (source, destination) directory pairs.
    Symbolic links are recreated with their original target rather than
    traversed, so link cycles are never entered. A destination nested inside
    the source is not copied into itself.

    Raises:
        FilesystemError: On the first failing filesystem operation. Anything
            already copied stays in place.
    """
    source = Path(source_root).expanduser().resolve()
    dest = Path(dest_root).expanduser().absolute()
    excluded_names = frozenset(excluded)
    dest_guard = dest.resolve()
    stats = CloneStats()

    if not source.is_dir():
        raise FilesystemError(f"Template directory not found: {source}")

    logger.info("Cloning %s -> %s", source, dest)
    try:
        dest.mkdir(parents=True)
        stats.directories_created += 1
        stack: List[Tuple[Path, Path]] = [(source, dest)]
        while stack:
            src_dir, dst_dir = stack.pop()
            with os.scandir(src_dir) as entries:
                for entry in entries:
                    src_path = Path(entry.path)
                    dst_path = dst_dir / entry.name
                    if entry.name in excluded_names and entry.is_dir():
                        stats.skipped.append(src_path)
                        continue
                    if entry.is_symlink():
                        os.symlink(os.readlink(src_path), dst_path, target_is_directory=entry.is_dir())
                        stats.symlinks_created += 1
                    elif entry.is_dir(follow_symlinks=False):
                        if src_path == dest_guard:
                            stats.skipped.append(src_path)
                            continue
                        dst_path.mkdir()
                        stats.directories_created += 1
                        stack.append((src_path, dst_path))
                    else:
                        shutil.copy2(src_path, dst_path, follow_symlinks=False)
                        stats.files_copied += 1
    except OSError as exc:
        raise FilesystemError(f"Failed to clone {source} into {dest}: {exc}") from exc

    logger.info(
        "Cloned %d files and %d directories (%d excluded)",
        stats.files_copied,
        stats.directories_created,
        len(stats.skipped),
    )
    return stats
