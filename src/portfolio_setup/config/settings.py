"""
Settings loading from the environment and a project-level .env file.
"""

from __future__ import annotations

import os
import shlex
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv
from pydantic import ValidationError as PydanticValidationError

from .models import ConfigError, ScaffoldSettings

_ENV_FIELDS = {
    "PORTFOLIO_TEMPLATE_ROOT": "template_root",
    "PORTFOLIO_PROJECT_PREFIX": "project_prefix",
    "PORTFOLIO_INSTALL_COMMAND": "install_command",
    "PORTFOLIO_INSTALL_ENABLED": "install_enabled",
}


def _load_dotenv() -> None:
    cwd_env = Path.cwd() / ".env"
    if cwd_env.exists():
        load_dotenv(dotenv_path=cwd_env, override=True)


_load_dotenv()


def settings_from_env() -> ScaffoldSettings:
    """
    Build ScaffoldSettings from PORTFOLIO_* environment variables.

    Unset variables fall back to the model defaults.
    """
    values: Dict[str, Any] = {}
    for env_name, field_name in _ENV_FIELDS.items():
        raw = os.getenv(env_name)
        if raw is None or not raw.strip():
            continue
        if field_name == "install_command":
            values[field_name] = shlex.split(raw)
        else:
            values[field_name] = raw.strip()
    try:
        return ScaffoldSettings.model_validate(values)
    except PydanticValidationError as exc:
        raise ConfigError(str(exc)) from exc


@lru_cache(maxsize=1)
def get_settings() -> ScaffoldSettings:
    """
    Load settings from environment/.env exactly once.
    """
    return settings_from_env()
