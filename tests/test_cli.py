import json
import subprocess
import sys
import time
from pathlib import Path

import pytest
from typer.testing import CliRunner

from portfolio_setup import cli
from portfolio_setup.config import ScaffoldSettings


@pytest.fixture(autouse=True)
def _fixed_settings(settings: ScaffoldSettings, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "get_settings", lambda: settings)


def test_version_flag(runner: CliRunner) -> None:
    result = runner.invoke(cli.app, ["--version"])

    assert result.exit_code == 0
    assert "portfolio-setup" in result.output


def test_brand_updates_project_in_place(runner: CliRunner, template_project: Path, logo_file: Path) -> None:
    result = runner.invoke(
        cli.app,
        ["brand", str(logo_file), "https://acme.example", "--project-root", str(template_project)],
    )

    assert result.exit_code == 0, result.output
    public_dir = template_project / "public"
    assert sorted(p.name for p in public_dir.glob("customer-logo.*")) == ["customer-logo.png"]
    record = json.loads((template_project / "src" / "data" / "customer.json").read_text(encoding="utf-8"))
    assert record == {"logoPath": "/customer-logo.png", "websiteUrl": "https://acme.example"}
    assert not (template_project.parent / "uvp-portfolio-acme-corp").exists()


def test_brand_defaults_to_configured_template_root(runner: CliRunner, template_project: Path, logo_file: Path) -> None:
    result = runner.invoke(cli.app, ["brand", str(logo_file), "https://acme.example"])

    assert result.exit_code == 0, result.output
    assert (template_project / "public" / "customer-logo.png").exists()


def test_brand_without_arguments_exits_with_usage(runner: CliRunner) -> None:
    result = runner.invoke(cli.app, ["brand"])

    assert result.exit_code == 1
    assert "Usage" in result.output


def test_brand_rejects_gif(runner: CliRunner, template_project: Path, tmp_path: Path) -> None:
    gif = tmp_path / "artwork.gif"
    gif.write_bytes(b"GIF89a")

    result = runner.invoke(
        cli.app,
        ["brand", str(gif), "https://acme.example", "--project-root", str(template_project)],
    )

    assert result.exit_code == 1
    assert "Logo must be PNG" in result.output
    assert (template_project / "public" / "customer-logo.svg").exists()


def test_brand_with_unreadable_logo_exits_non_zero(runner: CliRunner, template_project: Path, tmp_path: Path) -> None:
    result = runner.invoke(
        cli.app,
        ["brand", str(tmp_path / "missing.png"), "https://acme.example", "--project-root", str(template_project)],
    )

    assert result.exit_code == 1
    assert "Cannot read logo" in result.output


def test_create_scaffolds_sibling_project(runner: CliRunner, template_project: Path, logo_file: Path) -> None:
    result = runner.invoke(
        cli.app,
        ["create", "Acme Corp", "https://acme.example", str(logo_file), "--lang", "en", "--no-install"],
    )

    assert result.exit_code == 0, result.output
    destination = template_project.parent / "uvp-portfolio-acme-corp"
    record = json.loads((destination / "src" / "data" / "customer.json").read_text(encoding="utf-8"))
    assert record["defaultLang"] == "en"
    assert "Scaffold Summary" in result.output


def test_create_can_wait_for_installation(runner: CliRunner, template_project: Path, logo_file: Path) -> None:
    result = runner.invoke(
        cli.app,
        ["create", "Acme Corp", "https://acme.example", str(logo_file), "--wait"],
    )

    assert result.exit_code == 0, result.output
    assert "completed" in result.output


def test_create_reports_existing_project(runner: CliRunner, template_project: Path, logo_file: Path) -> None:
    (template_project.parent / "uvp-portfolio-acme-corp").mkdir()

    result = runner.invoke(
        cli.app,
        ["create", "Acme Corp", "https://acme.example", str(logo_file), "--no-install"],
    )

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_create_rejects_unknown_language(runner: CliRunner, template_project: Path, logo_file: Path) -> None:
    result = runner.invoke(
        cli.app,
        ["create", "Acme Corp", "https://acme.example", str(logo_file), "--lang", "fr", "--no-install"],
    )

    assert result.exit_code == 1
    assert not (template_project.parent / "uvp-portfolio-acme-corp").exists()


def test_install_outlives_the_create_command(template_project: Path, logo_file: Path, tmp_path: Path) -> None:
    script = (
        "import pathlib, time\n"
        "time.sleep(1.5)\n"
        "for i in range(2000): print('added package', i, flush=True)\n"
        "pathlib.Path('installed.txt').write_text('ok')\n"
    )
    settings_file = tmp_path / "portfolio.toml"
    settings_file.write_text(
        f"template_root = {json.dumps(str(template_project))}\n"
        f"install_command = {json.dumps([sys.executable, '-c', script])}\n",
        encoding="utf-8",
    )

    completed = subprocess.run(
        [sys.executable, "-m", "portfolio_setup", "create", "Acme Corp", "https://acme.example", str(logo_file),
         "--config", str(settings_file)],
        cwd=tmp_path,
        capture_output=True,
        text=True,
        timeout=60,
    )

    assert completed.returncode == 0, completed.stderr
    marker = template_project.parent / "uvp-portfolio-acme-corp" / "installed.txt"
    deadline = time.monotonic() + 30
    while not marker.exists() and time.monotonic() < deadline:
        time.sleep(0.2)
    assert marker.read_text() == "ok"
