"""
Derive the destination directory for a new customer project.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ..errors import AlreadyExists, ValidationError
from ..util import customer_slug

logger = logging.getLogger(__name__)

_SEPARATORS = {"/", "\\", os.sep} | ({os.altsep} if os.altsep else set())


def project_directory_name(customer_name: str, prefix: str) -> str:
    """Return the leaf name of the project directory for customer_name."""
    slug = customer_slug(customer_name)
    if not slug:
        raise ValidationError("Customer name must contain at least one visible character.")
    if slug in {".", ".."} or any(sep in slug for sep in _SEPARATORS):
        raise ValidationError("Customer name must not contain path separators or be '.' or '..'.")
    return f"{prefix}{slug}"


def plan_destination(customer_name: str, template_root: Path, prefix: str) -> Path:
    """
    Compute the sibling directory of template_root that will hold the new project.

    Raises:
        ValidationError: If the name would place the project anywhere but
            next to template_root.
        AlreadyExists: If any filesystem entry, including a dangling symlink,
            already occupies the computed path.
    """
    root = Path(template_root).expanduser().resolve()
    destination = root.parent / project_directory_name(customer_name, prefix)
    if destination.parent != root.parent or destination.name in {".", ".."}:
        raise ValidationError(f"Customer name {customer_name!r} does not give a sibling directory name.")
    if destination.exists() or destination.is_symlink():
        raise AlreadyExists(destination)
    logger.debug("Planned destination %s for %r", destination, customer_name)
    return destination
