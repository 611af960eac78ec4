"""Configuration management."""

import os
from pathlib import Path
from typing import Mapping, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError, field_validator

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "config.yaml"

# Environment variable -> config field
ENV_OVERRIDES = {
    "GOOGLE_SHEET_ID": "spreadsheet_id",
    "GOOGLE_SHEET_NAME": "sheet_name",
    "GOOGLE_SERVICE_ACCOUNT_EMAIL": "service_account_email",
    "GOOGLE_PRIVATE_KEY": "private_key",
    "LOG_LEVEL": "log_level",
    "PORT": "port",
}


class ConfigError(Exception):
    """Raised when the configuration cannot be loaded."""


class Config(BaseModel):
    """Application configuration."""

    spreadsheet_id: Optional[str] = None
    sheet_name: str = "Sheet1"
    service_account_email: Optional[str] = None
    private_key: Optional[str] = None
    credentials_dir: Path = Path(__file__).parent.parent / "config"
    log_level: str = "INFO"
    port: int = 3000
    fetch_timeout: float = 10.0

    @field_validator("private_key")
    @classmethod
    def unescape_newlines(cls, value: Optional[str]) -> Optional[str]:
        # Keys pasted into env files usually carry literal "\n" sequences
        if value is None:
            return None
        return value.replace("\\n", "\n")

    @property
    def sheet_configured(self) -> bool:
        return bool(self.spreadsheet_id)

    @property
    def uses_service_account(self) -> bool:
        return bool(self.service_account_email and self.private_key)

    @property
    def sheet_url(self) -> Optional[str]:
        if not self.spreadsheet_id:
            return None
        return f"https://docs.google.com/spreadsheets/d/{self.spreadsheet_id}"


def load_config(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Config:
    """Load configuration from an optional YAML file and the environment.

    Values from the environment win over the YAML file. When ``environ`` is
    not given, a ``.env`` file is loaded first and ``os.environ`` is used.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    data: dict = {}
    if config_path.exists():
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid config file {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")

    if environ is None:
        load_dotenv()
        environ = os.environ

    for env_name, field in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value:
            data[field] = value

    try:
        return Config(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
