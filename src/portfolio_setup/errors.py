"""
Error types raised while scaffolding a customer project.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(RuntimeError):
    """Base class for every failure the scaffold pipeline reports."""


class ValidationError(ScaffoldError):
    """Raised when a submission is missing fields or carries disallowed values."""


class AlreadyExists(ScaffoldError):
    """Raised when the destination directory is already occupied."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__(f"Project already exists: {self.path.name}")


class FilesystemError(ScaffoldError):
    """Raised when a copy, write, or delete fails part-way through the pipeline."""


class InstallationError(ScaffoldError):
    """Background dependency installation failed. Logged, never raised to callers."""
