"""
Install the customer logo into a project's public-assets directory.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from ..errors import FilesystemError, ValidationError
from ..util import safe_unlink, write_bytes_file

logger = logging.getLogger(__name__)

DEFAULT_LOGO_STEM = "customer-logo"
ALLOWED_LOGO_EXTENSIONS = (".png", ".svg", ".jpg", ".jpeg")


def validate_logo_filename(filename: str) -> str:
    """
    Return the lower-cased extension of filename if it is an accepted image format.

    Raises:
        ValidationError: If the extension is missing or not in the allow-list.
    """
    ext = Path(filename or "").suffix.lower()
    if ext not in ALLOWED_LOGO_EXTENSIONS:
        raise ValidationError("Logo must be PNG, SVG, or JPG.")
    return ext


def remove_existing_assets(public_dir: Path, stem: str = DEFAULT_LOGO_STEM) -> List[Path]:
    """Delete every entry named ``<stem>.*`` in public_dir and return what was removed."""
    prefix = f"{stem}."
    removed: List[Path] = []
    for entry in sorted(public_dir.iterdir()):
        if entry.name.startswith(prefix) and safe_unlink(entry, base_dir=public_dir):
            removed.append(entry)
    return removed


def install_branding(
    public_dir: Path | str,
    logo_bytes: bytes,
    original_filename: str,
    *,
    stem: str = DEFAULT_LOGO_STEM,
) -> Path:
    """
    Replace any existing branding asset in public_dir with the supplied logo.

    The extension is checked before anything on disk changes. Older assets
    sharing the stem are removed whatever their extension, so exactly one
    remains afterwards.

    Args:
        public_dir: The project's public-assets directory.
        logo_bytes: Raw logo content.
        original_filename: Name the logo was uploaded with; supplies the extension.
        stem: File stem of the branding asset.

    Returns:
        Path of the installed asset.
    """
    ext = validate_logo_filename(original_filename)
    public = Path(public_dir)
    target = public / f"{stem}{ext}"
    try:
        public.mkdir(parents=True, exist_ok=True)
        removed = remove_existing_assets(public, stem)
        for path in removed:
            logger.info("Removed previous branding asset %s", path.name)
        write_bytes_file(target, logo_bytes)
    except OSError as exc:
        raise FilesystemError(f"Failed to install logo into {public}: {exc}") from exc
    logger.info("Installed logo at %s", target)
    return target
