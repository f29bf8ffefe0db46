import json
import sys
from pathlib import Path
from typing import Dict

import pytest
from typer.testing import CliRunner

from portfolio_setup.config import ScaffoldSettings

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-png-payload"
SVG_BYTES = b'<svg xmlns="http://www.w3.org/2000/svg"/>'


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def template_project(tmp_path: Path) -> Path:
    """
    Build a miniature copy of the web template inside tmp_path/workspace.
    """
    root = tmp_path / "workspace" / "uvp-portfolio-temp"
    files: Dict[str, bytes] = {
        "package.json": b'{"name": "uvp-portfolio-temp"}\n',
        "public/customer-logo.svg": SVG_BYTES,
        "public/favicon.ico": b"\x00\x01icon",
        "src/app/page.tsx": b"export default function Page() { return null; }\n",
        "src/data/customer.json": json.dumps({"logoPath": "/customer-logo.svg", "websiteUrl": "https://old.example"}).encode(),
        "src/components/Header.tsx": b"export const Header = () => null;\n",
        "src/components/temp/draft.tsx": b"draft",
        ".git/HEAD": b"ref: refs/heads/main\n",
        "node_modules/react/index.js": b"module.exports = {};\n",
        ".next/cache/build.txt": b"cached",
        "dist/bundle.js": b"bundle",
        "temp/scratch.txt": b"scratch",
        "src/lib/dist/out.js": b"nested build output",
    }
    for relative, payload in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(payload)
    return root


@pytest.fixture
def settings(template_project: Path) -> ScaffoldSettings:
    """Settings pointing at the template with a harmless install command."""
    return ScaffoldSettings(
        template_root=template_project,
        install_command=[sys.executable, "-c", "print('installed')"],
    )


@pytest.fixture
def logo_file(tmp_path: Path) -> Path:
    path = tmp_path / "uploads" / "logo.png"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(PNG_BYTES)
    return path


def snapshot(root: Path) -> Dict[str, bytes]:
    """Map every path under root to its bytes (directories map to b"")."""
    result: Dict[str, bytes] = {}
    for path in sorted(root.rglob("*")):
        key = path.relative_to(root).as_posix()
        result[key] = b"" if path.is_dir() else path.read_bytes()
    return result
