"""
Shared utility helpers for filesystem writes and naming.
"""

from .filesystem import safe_unlink, write_bytes_file, write_text_file
from .text import customer_slug

__all__ = [
    "safe_unlink",
    "write_bytes_file",
    "write_text_file",
    "customer_slug",
]
