"""
Scaffolding toolkit for customer-branded copies of the portfolio template.
"""

from importlib import metadata as _metadata

try:
    __version__ = _metadata.version("portfolio-setup")
except _metadata.PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = ["__version__"]
