import json
import os
import stat
from pathlib import Path

import pytest

from portfolio_setup.config import CustomerConfig
from portfolio_setup.scaffold.customer_config import write_customer_config


def test_record_is_written_with_two_space_indent(tmp_path: Path) -> None:
    config = CustomerConfig.for_logo(Path("public/customer-logo.png"), "https://acme.example", "en")

    target = write_customer_config(tmp_path, config)

    text = target.read_text(encoding="utf-8")
    assert target == tmp_path / "src" / "data" / "customer.json"
    assert text == (
        "{\n"
        '  "logoPath": "/customer-logo.png",\n'
        '  "websiteUrl": "https://acme.example",\n'
        '  "defaultLang": "en"\n'
        "}\n"
    )


def test_record_replaces_previous_content_without_merging(template_project: Path) -> None:
    target = template_project / "src" / "data" / "customer.json"
    target.write_text(json.dumps({"logoPath": "/old.svg", "extra": True}), encoding="utf-8")

    write_customer_config(template_project, CustomerConfig.for_logo(Path("customer-logo.svg"), "https://new.example"))

    assert json.loads(target.read_text(encoding="utf-8")) == {
        "logoPath": "/customer-logo.svg",
        "websiteUrl": "https://new.example",
    }
    assert not list(target.parent.glob("*.lock"))


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_rewrite_keeps_the_existing_file_mode(template_project: Path) -> None:
    existing = template_project / "src" / "data" / "customer.json"
    existing.chmod(0o644)
    config = CustomerConfig.for_logo(Path("public/customer-logo.png"), "https://acme.example")

    target = write_customer_config(template_project, config)

    assert stat.S_IMODE(target.stat().st_mode) == 0o644
