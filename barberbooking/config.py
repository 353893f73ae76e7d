"""
Configuration management using Pydantic models loaded from YAML.
"""

import os
from pathlib import Path
from typing import Mapping, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.timeconv import MINUTES_PER_DAY


class BusinessHoursConfig(BaseModel):
    """Opening hours and slot spacing, in minutes."""
    start_minutes: int = 540  # 09:00
    end_minutes: int = 1080  # 18:00
    buffer_minutes: int = 15
    default_slot_minutes: int = 30
    default_booking_minutes: int = 45

    @field_validator("start_minutes", "end_minutes")
    @classmethod
    def validate_minute_of_day(cls, v: int) -> int:
        """Validate the offset lies within a single day."""
        if not 0 <= v <= MINUTES_PER_DAY:
            raise ValueError(f"Minute offset must be between 0 and {MINUTES_PER_DAY}, got {v}")
        return v

    @field_validator("buffer_minutes")
    @classmethod
    def validate_buffer(cls, value: int) -> int:
        if value < 0:
            raise ValueError("buffer_minutes must not be negative")
        return value

    @field_validator("default_slot_minutes", "default_booking_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure durations are positive."""
        if value <= 0:
            raise ValueError("durations must be greater than zero")
        return value

    @model_validator(mode="after")
    def validate_hours_order(self) -> "BusinessHoursConfig":
        """Ensure the shop opens before it closes."""
        if self.end_minutes <= self.start_minutes:
            raise ValueError("end_minutes must be later than start_minutes")
        return self


class StoreConfig(BaseModel):
    """Document store connection settings."""
    uri: str = "mongodb://localhost:27017"
    database: str = "distrito-barbearia"
    collection: str = "appointments"
    timeout_ms: int = 5000


class SmtpConfig(BaseModel):
    """Outgoing mail settings (Gmail by default)."""
    host: str = "smtp.gmail.com"
    port: int = 465
    username: str = ""
    password: str = ""
    sender: str = ""

    def is_configured(self) -> bool:
        return bool(self.username and self.password)

    def get_sender(self) -> str:
        """Sender address, falling back to the login user."""
        return self.sender or self.username


class AppConfig(BaseModel):
    """Application configuration."""
    shop_name: str = "Distrito Barbearia"
    timezone: str = "America/Sao_Paulo"
    business_hours: BusinessHoursConfig = Field(default_factory=BusinessHoursConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    smtp: SmtpConfig = Field(default_factory=SmtpConfig)
    catalog_dir: Optional[Path] = None
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    def with_env_overrides(self, environ: Mapping[str, str] | None = None) -> "AppConfig":
        """
        Return a copy with secrets taken from the environment when present.

        Recognised variables: ``MONGODB_URI``, ``GMAIL_USER``, ``GMAIL_APP_PASSWORD``.
        """
        env = os.environ if environ is None else environ
        store = self.store
        smtp = self.smtp

        if env.get("MONGODB_URI"):
            store = store.model_copy(update={"uri": env["MONGODB_URI"]})

        smtp_updates = {}
        if env.get("GMAIL_USER"):
            smtp_updates["username"] = env["GMAIL_USER"]
        if env.get("GMAIL_APP_PASSWORD"):
            smtp_updates["password"] = env["GMAIL_APP_PASSWORD"]
        if smtp_updates:
            smtp = smtp.model_copy(update=smtp_updates)

        return self.model_copy(update={"store": store, "smtp": smtp})


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
