"""
Sequence the clone-and-brand steps for one customer submission.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from ..config import CustomerConfig, CustomerSubmission, ScaffoldSettings, get_settings
from .branding import install_branding, validate_logo_filename
from .cloner import CloneStats, clone_tree
from .customer_config import write_customer_config
from .installer import InstallHandle, trigger_install
from .planner import plan_destination

logger = logging.getLogger(__name__)


class PipelineStage(str, Enum):
    IDLE = "idle"
    PATH_PLANNED = "path_planned"
    CLONED = "cloned"
    BRANDED = "branded"
    CONFIG_WRITTEN = "config_written"
    INSTALL_TRIGGERED = "install_triggered"
    DONE = "done"
    FAILED = "failed"


@dataclass
class BrandingResult:
    """Files written by the branding step and the record they produced."""
    logo_path: Path
    config_path: Path
    config: CustomerConfig


@dataclass
class ScaffoldReport:
    """
    Stores what happened while scaffolding one customer project.

    Attributes:
        customer_name: Name from the submission.
        stage: Last stage reached, or FAILED.
        destination: Root of the new project once planned.
        clone_stats: Copy counts once the clone finished.
        logo_path: Installed branding asset.
        config_path: Written customer record.
        install: Handle of the background installation, if one was started.
        failure: Error text when stage is FAILED.
    """
    customer_name: str
    stage: PipelineStage = PipelineStage.IDLE
    destination: Optional[Path] = None
    clone_stats: Optional[CloneStats] = None
    logo_path: Optional[Path] = None
    config_path: Optional[Path] = None
    install: Optional[InstallHandle] = None
    failure: Optional[str] = None

    def advance(self, stage: PipelineStage) -> None:
        logger.debug("%s: %s -> %s", self.customer_name, self.stage.value, stage.value)
        self.stage = stage

    def fail(self, exc: BaseException) -> None:
        logger.debug("%s: failed during %s", self.customer_name, self.stage.value)
        self.failure = str(exc)
        self.stage = PipelineStage.FAILED

    @property
    def message(self) -> str:
        if self.stage is PipelineStage.FAILED:
            return self.failure or "Scaffolding failed."
        if self.install is not None:
            return f"Project created successfully at {self.destination}. Installation running in background."
        return f"Project created successfully at {self.destination}. Dependency installation skipped."

    def summary_rows(self) -> Iterable[tuple[str, str]]:
        yield ("Customer", self.customer_name)
        yield ("Destination", str(self.destination) if self.destination else "-")
        yield ("Stage", self.stage.value)
        if self.clone_stats is not None:
            yield ("Files copied", str(self.clone_stats.files_copied))
            yield ("Directories created", str(self.clone_stats.directories_created))
            yield ("Directories excluded", str(len(self.clone_stats.skipped)))
        yield ("Logo", self.logo_path.name if self.logo_path else "-")
        yield ("Customer config", str(self.config_path) if self.config_path else "-")
        if self.install is None:
            install_state = "skipped"
        elif self.install.error:
            install_state = "failed"
        elif self.install.finished:
            install_state = "completed"
        else:
            install_state = "running"
        yield ("Dependency install", install_state)
        if self.install is not None:
            yield ("Install log", str(self.install.log_path))

    def to_response(self) -> Dict[str, Any]:
        """Body returned to the setup form on success."""
        return {"success": True, "message": self.message, "path": str(self.destination)}


def apply_branding(
    project_root: Path,
    logo_bytes: bytes,
    logo_filename: str,
    website_url: str,
    default_lang: Optional[str] = None,
    *,
    settings: ScaffoldSettings,
    report: Optional[ScaffoldReport] = None,
) -> BrandingResult:
    """
    Install the logo and then write the customer record pointing at it.

    Shared by the full pipeline and the in-place ``brand`` command. When a
    report is given it advances through BRANDED and CONFIG_WRITTEN as each
    file lands.
    """
    logo_path = install_branding(
        settings.public_path(project_root),
        logo_bytes,
        logo_filename,
        stem=settings.logo_stem,
    )
    if report is not None:
        report.logo_path = logo_path
        report.advance(PipelineStage.BRANDED)

    config = CustomerConfig.for_logo(logo_path, website_url, default_lang)
    config_path = write_customer_config(project_root, config, settings.customer_config_path)
    if report is not None:
        report.config_path = config_path
        report.advance(PipelineStage.CONFIG_WRITTEN)
    return BrandingResult(logo_path=logo_path, config_path=config_path, config=config)


def run_scaffold(
    submission: CustomerSubmission,
    settings: Optional[ScaffoldSettings] = None,
    *,
    report: Optional[ScaffoldReport] = None,
) -> ScaffoldReport:
    """
    Clone the template for a customer, brand it, and start dependency installation.

    Validation and the destination check happen before anything is written. A
    failure later on leaves whatever was already created in place; the report
    passed in (if any) records the stage it happened in.

    Args:
        submission: The validated customer request.
        settings: Scaffold settings; defaults to the environment-derived ones.
        report: Optional report to fill in, so callers can inspect it after a failure.

    Returns:
        The completed ScaffoldReport. Installation may still be running.
    """
    settings = settings or get_settings()
    report = report or ScaffoldReport(customer_name=submission.customer_name)

    try:
        validate_logo_filename(submission.logo_filename)
        report.destination = plan_destination(
            submission.customer_name,
            settings.template_root,
            settings.project_prefix,
        )
        report.advance(PipelineStage.PATH_PLANNED)

        report.clone_stats = clone_tree(settings.template_root, report.destination)
        report.advance(PipelineStage.CLONED)

        apply_branding(
            report.destination,
            submission.logo_bytes,
            submission.logo_filename,
            submission.website_url,
            submission.default_lang,
            settings=settings,
            report=report,
        )

        if settings.install_enabled:
            report.install = trigger_install(
                report.destination,
                settings.install_command,
                label=submission.customer_name,
            )
            report.advance(PipelineStage.INSTALL_TRIGGERED)
        else:
            logger.info("Dependency installation disabled; skipping for %s", submission.customer_name)
    except Exception as exc:
        report.fail(exc)
        raise

    report.advance(PipelineStage.DONE)
    logger.info("Scaffolded %s at %s", submission.customer_name, report.destination)
    return report
