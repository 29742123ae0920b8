"""
Configuration loader module.

Loads application configuration from YAML files and environment variables.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("config/config.yaml")


@dataclass
class PathsConfig:
    """File path configuration."""

    data_dir: str = "data"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "text"  # "text" or "json"
    file: str | None = None


@dataclass
class ServerConfig:
    """HTTP server configuration."""

    host: str = "127.0.0.1"
    port: int = 5001
    debug: bool = False
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])


@dataclass
class BookingsConfig:
    """Booking listing configuration."""

    default_page_size: int = 10
    max_page_size: int = 100


@dataclass
class NotificationsConfig:
    """Notification composition configuration."""

    enabled: bool = True
    business_name: str = "Life Care Home Nursing"
    admin_email: str = "admin@lifecarenursing.in"
    from_email: str = "no-reply@lifecarenursing.in"
    outbox_file: str = "outbox.jsonl"


@dataclass
class RateLimitSettings:
    """Rate limit configuration (requests per minute)."""

    enabled: bool = True
    default_rpm: int = 60
    booking_rpm: int = 10
    api_rpm: int = 30


@dataclass
class AppConfig:
    """
    Main application configuration.

    Aggregates all configuration sections into a single object.
    """

    paths: PathsConfig = field(default_factory=PathsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    bookings: BookingsConfig = field(default_factory=BookingsConfig)
    notifications: NotificationsConfig = field(default_factory=NotificationsConfig)
    rate_limit: RateLimitSettings = field(default_factory=RateLimitSettings)


def load_env(env_file: Path = Path(".env")) -> None:
    """
    Load environment variables from .env file.

    Args:
        env_file: Path to .env file.
    """
    if env_file.exists():
        load_dotenv(env_file)
        logger.debug(f"Loaded environment from: {env_file}")
    else:
        logger.debug(f"No .env file found at: {env_file}")


def load_config(config_file: Path | None = None) -> AppConfig:
    """
    Load application configuration from YAML file.

    The file path can be overridden with LIFECARE_CONFIG. Environment
    overrides are applied after the file is parsed.

    Args:
        config_file: Path to configuration YAML file.

    Returns:
        AppConfig: Loaded configuration object.

    Raises:
        yaml.YAMLError: If config file is invalid.
    """
    if config_file is None:
        config_file = Path(os.environ.get("LIFECARE_CONFIG", DEFAULT_CONFIG_FILE))

    if not config_file.exists():
        logger.debug(f"Config file not found: {config_file}. Using defaults.")
        config = AppConfig()
    else:
        with open(config_file, encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
        config = _parse_config(raw_config or {})
        logger.info(f"Loaded configuration from: {config_file}")

    _apply_env_overrides(config)
    return config


def _parse_config(raw: dict[str, Any]) -> AppConfig:
    """
    Parse raw YAML dict into AppConfig dataclass.

    Args:
        raw: Raw dictionary from YAML file.

    Returns:
        AppConfig: Parsed configuration object.
    """
    paths_raw = raw.get("paths", {})
    paths = PathsConfig(
        data_dir=paths_raw.get("data_dir", "data"),
    )

    logging_raw = raw.get("logging", {})
    logging_config = LoggingConfig(
        level=logging_raw.get("level", "INFO"),
        format=logging_raw.get("format", "text"),
        file=logging_raw.get("file"),
    )

    server_raw = raw.get("server", {})
    server = ServerConfig(
        host=server_raw.get("host", "127.0.0.1"),
        port=int(server_raw.get("port", 5001)),
        debug=bool(server_raw.get("debug", False)),
        cors_origins=list(server_raw.get("cors_origins", ["http://localhost:3000"])),
    )

    bookings_raw = raw.get("bookings", {})
    bookings = BookingsConfig(
        default_page_size=int(bookings_raw.get("default_page_size", 10)),
        max_page_size=int(bookings_raw.get("max_page_size", 100)),
    )

    notifications_raw = raw.get("notifications", {})
    defaults = NotificationsConfig()
    notifications = NotificationsConfig(
        enabled=bool(notifications_raw.get("enabled", True)),
        business_name=notifications_raw.get("business_name", defaults.business_name),
        admin_email=notifications_raw.get("admin_email", defaults.admin_email),
        from_email=notifications_raw.get("from_email", defaults.from_email),
        outbox_file=notifications_raw.get("outbox_file", defaults.outbox_file),
    )

    rate_raw = raw.get("rate_limit", {})
    rate_limit = RateLimitSettings(
        enabled=bool(rate_raw.get("enabled", True)),
        default_rpm=int(rate_raw.get("default_rpm", 60)),
        booking_rpm=int(rate_raw.get("booking_rpm", 10)),
        api_rpm=int(rate_raw.get("api_rpm", 30)),
    )

    return AppConfig(
        paths=paths,
        logging=logging_config,
        server=server,
        bookings=bookings,
        notifications=notifications,
        rate_limit=rate_limit,
    )


def _apply_env_overrides(config: AppConfig) -> None:
    """Apply environment variable overrides in place."""
    data_dir = get_env_var("LIFECARE_DATA_DIR")
    if data_dir:
        config.paths.data_dir = data_dir

    admin_email = get_env_var("ADMIN_EMAIL")
    if admin_email:
        config.notifications.admin_email = admin_email

    log_level = get_env_var("LOG_LEVEL")
    if log_level:
        config.logging.level = log_level

    log_format = get_env_var("LOG_FORMAT")
    if log_format:
        config.logging.format = log_format


def get_env_var(key: str, default: str | None = None) -> str | None:
    """
    Get an environment variable with optional default.

    Args:
        key: Environment variable name.
        default: Default value if not set.

    Returns:
        Environment variable value or default.
    """
    return os.environ.get(key, default)
