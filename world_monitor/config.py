"""Configuration management for the world monitor."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, ValidationInfo, field_validator

from .errors import ConfigError
from .fetcher import DEFAULT_STATUS_URL, DEFAULT_USER_AGENT
from .models import Mode


# Environment variable for each config field.
ENV_VARS: Dict[str, str] = {
    "bot_token": "TELEGRAM_BOT_TOKEN",
    "chat_id": "TELEGRAM_CHAT_ID",
    "client_id": "TELEGRAM_CLIENT_ID",
    "mention_id": "TELEGRAM_MENTION_ID",
    "check_interval_minutes": "CHECK_INTERVAL",
    "dev_mode": "DEV_MODE",
    "world_name": "WORLD_NAME",
    "status_url": "STATUS_URL",
    "fetch_timeout_seconds": "FETCH_TIMEOUT",
    "user_agent": "USER_AGENT",
    "log_level": "LOG_LEVEL",
}

REQUIRED_FIELDS = ("bot_token", "chat_id", "client_id")


class MonitorConfig(BaseModel):
    """Settings read once at startup and fixed afterwards."""

    # Telegram settings
    bot_token: Optional[str] = Field(default=None, description="Telegram bot token")
    chat_id: Optional[str] = Field(default=None, description="Chat that receives notifications")
    client_id: Optional[int] = Field(default=None, description="Numeric user id of the bot account")
    mention_id: Optional[int] = Field(default=None, description="User id to mention in alerts")

    # Monitoring settings
    check_interval_minutes: float = Field(default=5, description="Minutes between status checks")
    dev_mode: bool = Field(default=False, description="Notify on every check")
    world_name: str = Field(default="Behemoth", description="World to watch")

    # Fetch settings
    status_url: str = Field(default=DEFAULT_STATUS_URL, description="World status page URL")
    fetch_timeout_seconds: float = Field(default=10.0, description="HTTP timeout for the status page")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="User-Agent sent to the status page")

    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("check_interval_minutes", "fetch_timeout_seconds")
    @classmethod
    def _positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("must be greater than zero")
        return value

    @field_validator("world_name")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("bot_token", "chat_id", "client_id", "mention_id", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Any, info: ValidationInfo) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        # YAML reads numeric chat ids as ints.
        if info.field_name == "chat_id" and isinstance(value, int):
            return str(value)
        return value

    @property
    def mode(self) -> Mode:
        return Mode.DEV if self.dev_mode else Mode.STANDARD

    @property
    def check_interval_seconds(self) -> float:
        return self.check_interval_minutes * 60


def load_environment(env_file: Path = Path(".env")) -> None:
    """Load KEY=VALUE lines from a .env file without overriding existing variables."""
    if not env_file.exists():
        return
    with open(env_file) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith('#') and '=' in line:
                key, value = line.split('=', 1)
                os.environ.setdefault(key.strip(), value.strip().strip('"\''))


def load_config(
    config_path: Optional[str] = None,
    *,
    overrides: Optional[Dict[str, Any]] = None,
    require_chat: bool = True,
) -> MonitorConfig:
    """Load configuration from an optional YAML file, .env and environment variables.

    Args:
        config_path: YAML file path (default: WORLD_MONITOR_CONFIG or config/world_monitor.yaml)
        overrides: Values that take precedence over every other source (CLI flags)
        require_chat: Whether the Telegram identifiers must be present

    Raises:
        ConfigError: if a required value is missing or a value is invalid
    """
    load_environment()

    if config_path is None:
        config_path = os.getenv("WORLD_MONITOR_CONFIG", "config/world_monitor.yaml")

    config_data: Dict[str, Any] = {}

    if os.path.exists(config_path):
        with open(config_path, 'r') as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")
        config_data.update(loaded)

    for key, env_name in ENV_VARS.items():
        value = os.getenv(env_name)
        # Blank values fall back to the file or the default.
        if value is None or not value.strip():
            continue
        if key == "dev_mode":
            value = value.strip().lower() in ("true", "1", "yes", "on")
        config_data[key] = value

    for key, value in (overrides or {}).items():
        if value is not None:
            config_data[key] = value

    try:
        config = MonitorConfig(**config_data)
    except ValidationError as e:
        problems = [
            f"{ENV_VARS.get(str(err['loc'][0]), err['loc'][0])}: {err['msg']}"
            for err in e.errors()
        ]
        raise ConfigError("Invalid configuration: " + "; ".join(problems)) from e

    if require_chat:
        missing = [ENV_VARS[key] for key in REQUIRED_FIELDS if getattr(config, key) in (None, "")]
        if missing:
            raise ConfigError(
                "Missing required environment variables: " + ", ".join(missing),
                missing=missing,
            )

    return config
