"""
Filesystem helpers shared across scaffold steps.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock

logger = logging.getLogger(__name__)


def _ensure_parent(target: Path) -> None:
    """Ensure the parent directory for target exists."""
    if target.parent and not target.parent.exists():
        target.parent.mkdir(parents=True, exist_ok=True)


def is_relative_to(path: Path, base: Path) -> bool:
    """Return True if path is under base."""
    try:
        path.relative_to(base)
    except ValueError:
        return False
    return True


def safe_unlink(path: Path | str, *, base_dir: Path | str) -> bool:
    """
    Delete a file that lives inside base_dir.

    Returns False when the target is outside base_dir or already gone. Any other
    OSError propagates to the caller.
    """
    target = Path(path).expanduser().absolute()
    base = Path(base_dir).expanduser().absolute()
    if not is_relative_to(target, base):
        logger.warning("Refusing to delete %s (outside %s)", target, base)
        return False
    try:
        target.unlink()
    except FileNotFoundError:
        return False
    logger.debug("Deleted %s", target)
    return True


@contextmanager
def file_lock(path: Path | str):
    """Context manager for a filesystem lock file alongside the target."""
    target = Path(path).expanduser().resolve()
    lock_path = target.with_suffix(f"{target.suffix}.lock")
    _ensure_parent(lock_path)
    try:
        with FileLock(str(lock_path)):
            yield
    finally:
        try:
            os.unlink(lock_path)
        except OSError:
            pass


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


_DEFAULT_FILE_MODE = 0o666 & ~_current_umask()


def _target_mode(target: Path) -> int:
    """Mode the written file should end up with: the replaced file's, or the umask default."""
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        return _DEFAULT_FILE_MODE


def _atomic_write(target: Path, payload: bytes) -> None:
    """Write bytes atomically by staging a temp file and renaming."""
    _ensure_parent(target)
    mode = _target_mode(target)
    fd, tmp_path = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, target)
    finally:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass


def write_bytes_file(path: Path | str, payload: bytes, *, lock: bool = True) -> Path:
    """
    Write raw bytes to a file, creating parent directories as needed.
    """
    target = Path(path).expanduser().resolve()
    if lock:
        with file_lock(target):
            _atomic_write(target, payload)
    else:
        _atomic_write(target, payload)
    return target


def write_text_file(path: Path | str, content: str, encoding: str = "utf-8", *, lock: bool = True) -> Path:
    """
    Write text to a file, creating parent directories as needed.
    """
    return write_bytes_file(path, content.encode(encoding), lock=lock)
