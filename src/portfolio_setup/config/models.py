"""
Pydantic models for customer submissions, the persisted customer record, and scaffold settings.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError

SUPPORTED_LANGUAGES = ("de", "en")
DEFAULT_LANGUAGE = "de"

Language = Literal["de", "en"]


class ConfigError(RuntimeError):
    """Raised when settings files cannot be loaded or validated."""


def _first_error_message(exc: PydanticValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = error.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


class CustomerSubmission(BaseModel):
    """
    One scaffold request as submitted by the setup form or the CLI.

    Attributes:
        customer_name: Display name of the customer, used to derive the target directory.
        website_url: Customer website; only checked for presence.
        default_lang: Default UI language of the generated project.
        logo_bytes: Raw bytes of the uploaded logo.
        logo_filename: Original logo file name; its extension decides the asset name.
    """
    model_config = ConfigDict(frozen=True)

    customer_name: str
    website_url: str
    default_lang: Language = DEFAULT_LANGUAGE
    logo_bytes: bytes = Field(repr=False)
    logo_filename: str

    @field_validator("customer_name", "website_url", "logo_filename")
    @classmethod
    def _require_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @property
    def logo_extension(self) -> str:
        return Path(self.logo_filename).suffix.lower()

    @classmethod
    def build(cls, **values: Any) -> "CustomerSubmission":
        """
        Construct a submission, reporting bad input as the scaffold ValidationError.
        """
        try:
            return cls(**values)
        except PydanticValidationError as exc:
            raise ValidationError(_first_error_message(exc)) from exc


class CustomerConfig(BaseModel):
    """
    Branding record stored at ``src/data/customer.json`` inside a project.
    """
    model_config = ConfigDict(populate_by_name=True)

    logo_path: str = Field(alias="logoPath")
    website_url: str = Field(alias="websiteUrl")
    default_lang: Optional[Language] = Field(default=None, alias="defaultLang")

    @classmethod
    def for_logo(cls, installed_logo: Path, website_url: str, default_lang: Optional[str] = None) -> "CustomerConfig":
        """Build the record so logoPath names the file that was actually written."""
        return cls(logo_path=f"/{installed_logo.name}", website_url=website_url, default_lang=default_lang)

    def to_payload(self) -> Dict[str, str]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ScaffoldSettings(BaseModel):
    """
    Where the template lives and how copies of it are named, branded, and installed.

    Attributes:
        template_root: Project that gets cloned (defaults to the working directory).
        project_prefix: Prefix of every generated directory name.
        public_dir: Public-assets directory, relative to a project root.
        customer_config_path: Location of the customer record, relative to a project root.
        logo_stem: File stem shared by every installed branding asset.
        install_command: Dependency installation command run inside a new project.
        install_enabled: Set to False to skip the installation step entirely.
    """
    model_config = ConfigDict(extra="forbid")

    template_root: Path = Field(default_factory=Path.cwd)
    project_prefix: str = "uvp-portfolio-"
    public_dir: str = "public"
    customer_config_path: str = "src/data/customer.json"
    logo_stem: str = "customer-logo"
    install_command: List[str] = Field(default_factory=lambda: ["npm", "install"])
    install_enabled: bool = True

    @field_validator("template_root")
    @classmethod
    def _absolute_root(cls, value: Path) -> Path:
        return Path(value).expanduser().resolve()

    @field_validator("install_command")
    @classmethod
    def _non_empty_command(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("install_command must name a program")
        return value

    def public_path(self, project_root: Path) -> Path:
        return project_root / self.public_dir

    def customer_config_file(self, project_root: Path) -> Path:
        return project_root / self.customer_config_path


def load_settings(path: Path | str, **overrides: Any) -> ScaffoldSettings:
    """
    Load scaffold settings from a TOML file.

    Args:
        path: Path to the TOML settings file.
        overrides: Values that replace whatever the file declares.

    Returns:
        A validated ScaffoldSettings object.

    Raises:
        ConfigError: If the file is missing, unreadable, or invalid.
    """
    settings_path = Path(path).expanduser().resolve()
    if not settings_path.exists():
        raise ConfigError(f"Settings file not found: {settings_path}")

    try:
        with settings_path.open("rb") as handle:
            raw_data: Dict[str, Any] = tomllib.load(handle)
    except OSError as exc:
        raise ConfigError(f"Unable to read settings file: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in settings file: {exc}") from exc

    root = raw_data.get("template_root")
    if root is not None and not Path(root).expanduser().is_absolute():
        raw_data["template_root"] = settings_path.parent / root

    raw_data.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return ScaffoldSettings.model_validate(raw_data)
    except PydanticValidationError as exc:
        raise ConfigError(str(exc)) from exc
