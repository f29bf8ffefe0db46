"""
Persist the customer branding record inside a project.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ..config import CustomerConfig
from ..errors import FilesystemError
from ..util import write_text_file

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("src") / "data" / "customer.json"


def render_customer_config(config: CustomerConfig) -> str:
    """Serialise the record with two-space indentation."""
    return json.dumps(config.to_payload(), indent=2, ensure_ascii=False) + "\n"


def write_customer_config(
    project_root: Path | str,
    config: CustomerConfig,
    relative_path: Path | str = DEFAULT_CONFIG_PATH,
) -> Path:
    """
    Overwrite the customer record at relative_path under project_root.

    Earlier content is replaced wholesale, never merged.
    """
    target = Path(project_root) / relative_path
    try:
        write_text_file(target, render_customer_config(config))
    except OSError as exc:
        raise FilesystemError(f"Failed to write {target}: {exc}") from exc
    logger.info("Wrote customer configuration to %s", target)
    return target
