"""
Command line interface for the portfolio scaffolder.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import (
    DEFAULT_LANGUAGE,
    ConfigError,
    CustomerSubmission,
    ScaffoldSettings,
    get_settings,
    load_settings,
)
from .errors import ScaffoldError
from .scaffold import ScaffoldReport, apply_branding, run_scaffold

console = Console()
err_console = Console(stderr=True)
app = typer.Typer(help="Create customer-branded copies of the portfolio template.")
logger = logging.getLogger(__name__)

LOG_LEVELS = ["critical", "error", "warning", "info", "debug"]
INSTALL_WAIT_SECONDS = 1800


def _configure_logging(level_name: str) -> None:
    env_override = os.getenv("PORTFOLIO_LOG_LEVEL")
    level_str = (env_override or level_name or "info").upper()
    if level_str not in {lvl.upper() for lvl in LOG_LEVELS}:
        level_str = "INFO"
    logging.basicConfig(
        level=getattr(logging, level_str, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.debug("Logging configured at %s", level_str)


def _resolve_config_path(value: Optional[Path]) -> Optional[Path]:
    """Ensure an optional settings path exists and return it absolute."""
    if value is None:
        return None
    resolved = value.expanduser().resolve()
    if not resolved.is_file():
        raise typer.BadParameter(f"No settings file found at {resolved}")
    return resolved


def _load_settings_or_exit(config: Optional[Path], **overrides) -> ScaffoldSettings:
    try:
        if config is not None:
            return load_settings(config, **overrides)
        settings = get_settings()
        updates = {key: value for key, value in overrides.items() if value is not None}
        return ScaffoldSettings.model_validate({**settings.model_dump(), **updates}) if updates else settings
    except ConfigError as exc:
        err_console.print(f"[bold red]Configuration error:[/] {exc}")
        raise typer.Exit(code=1) from exc


def _fail(message: str, exc: Optional[BaseException] = None) -> NoReturn:
    err_console.print(f"[bold red]Error:[/] {message}")
    raise typer.Exit(code=1) from exc


def _read_logo_or_exit(logo_path: Path) -> bytes:
    try:
        return logo_path.expanduser().read_bytes()
    except OSError as exc:
        _fail(f"Cannot read logo {logo_path}: {exc}", exc)


def _print_report(report: ScaffoldReport) -> None:
    table = Table(title="Scaffold Summary")
    table.add_column("Key")
    table.add_column("Value", overflow="fold")
    for key, value in report.summary_rows():
        table.add_row(key, value)
    console.print(table)


@app.callback(invoke_without_command=True)
def _root_command(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show portfolio-setup version and exit.",
        is_flag=True,
    ),
    log_level: str = typer.Option(
        "info",
        "--log-level",
        help="Logging level (critical, error, warning, info, debug).",
        show_default=True,
        case_sensitive=False,
    ),
) -> None:
    """
    Configure logging and show a hint when no subcommand is selected.
    """
    _configure_logging(log_level)

    if version:
        console.print(f"[bold green]portfolio-setup[/] {__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(
            "Run [cyan]portfolio-setup create NAME URL LOGO[/] to scaffold a customer project, "
            "or [cyan]portfolio-setup serve[/] for the setup form.",
        )


@app.command()
def brand(
    logo_path: Optional[Path] = typer.Argument(None, help="Logo image (png, svg, jpg, jpeg)."),
    website_url: Optional[str] = typer.Argument(None, help="Customer website URL."),
    project_root: Optional[Path] = typer.Option(
        None,
        "--project-root",
        "-p",
        help="Project to brand in place (defaults to the configured template root).",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Optional TOML settings file.",
        callback=_resolve_config_path,
    ),
) -> None:
    """
    Replace the logo and customer record of an existing project without cloning it.
    """
    if logo_path is None or not (website_url or "").strip():
        _fail("Usage: portfolio-setup brand <logo_path> <website_url>")

    settings = _load_settings_or_exit(config, template_root=project_root)
    logo_bytes = _read_logo_or_exit(logo_path)
    try:
        result = apply_branding(
            settings.template_root,
            logo_bytes,
            logo_path.name,
            website_url.strip(),
            settings=settings,
        )
    except ScaffoldError as exc:
        _fail(str(exc), exc)

    console.print(f"Successfully copied logo to: {result.logo_path}")
    console.print(f"Successfully updated configuration: {result.config_path}")


@app.command()
def create(
    customer_name: str = typer.Argument(..., help="Customer name; becomes part of the directory name."),
    website_url: str = typer.Argument(..., help="Customer website URL."),
    logo_path: Path = typer.Argument(..., help="Logo image (png, svg, jpg, jpeg)."),
    lang: str = typer.Option(
        DEFAULT_LANGUAGE,
        "--lang",
        "-l",
        help="Default language of the new project (de, en).",
        show_default=True,
    ),
    template_root: Optional[Path] = typer.Option(
        None,
        "--template-root",
        "-t",
        help="Template project to clone (defaults to PORTFOLIO_TEMPLATE_ROOT or the working directory).",
    ),
    install: bool = typer.Option(
        True,
        "--install/--no-install",
        help="Start dependency installation in the new project.",
    ),
    wait: bool = typer.Option(
        False,
        "--wait",
        help="Block until dependency installation finishes and report its outcome.",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Optional TOML settings file.",
        callback=_resolve_config_path,
    ),
) -> None:
    """
    Clone the template for a customer, install the logo and customer record, and start installation.
    """
    settings = _load_settings_or_exit(
        config,
        template_root=template_root,
        install_enabled=None if install else False,
    )
    logo_bytes = _read_logo_or_exit(logo_path)
    report = ScaffoldReport(customer_name=customer_name)
    try:
        submission = CustomerSubmission.build(
            customer_name=customer_name,
            website_url=website_url,
            default_lang=lang.lower(),
            logo_bytes=logo_bytes,
            logo_filename=logo_path.name,
        )
        run_scaffold(submission, settings, report=report)
    except ScaffoldError as exc:
        _print_report(report)
        _fail(str(exc), exc)

    if wait and report.install is not None:
        console.print("[yellow]Waiting for dependency installation...[/]")
        if not report.install.wait(INSTALL_WAIT_SECONDS):
            console.print("[bold yellow]Installation still running; stopped waiting.[/]")

    _print_report(report)
    console.print(f"[bold green]{report.message}[/]")
    if wait and report.install is not None and report.install.error:
        _fail(f"Dependency installation failed: {report.install.error}")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind."),
    port: int = typer.Option(8000, "--port", help="Port for the setup server."),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Optional TOML settings file.",
        callback=_resolve_config_path,
    ),
) -> None:
    """
    Serve the setup form and submission endpoint.
    """
    import uvicorn

    from .web import create_app

    settings = _load_settings_or_exit(config)
    logger.info("Serving setup form for template %s", settings.template_root)
    uvicorn.run(create_app(settings), host=host, port=port)


def main() -> None:
    """
    Entry-point used by the console script defined in pyproject.toml.
    """
    app()
