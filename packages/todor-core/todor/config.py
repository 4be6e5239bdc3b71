"""
Todor Configuration

Loads settings from ~/.todor/config.yaml with environment variable overrides.
Supports both PostgreSQL and SQLite database configurations.
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional
import os
import logging

import yaml

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".todor"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

DEFAULT_SQLITE_PATH = "~/.todor/todor.db"
DEFAULT_TEXT_WIDTH = 32


@dataclass
class DatabaseConfig:
    """Database configuration settings."""

    type: str = "sqlite"  # "sqlite" or "postgres"
    sqlite_path: str = DEFAULT_SQLITE_PATH
    postgres_url: Optional[str] = None


@dataclass
class DisplayConfig:
    """Table rendering settings."""

    text_width: int = DEFAULT_TEXT_WIDTH


@dataclass
class TodorConfig:
    """
    Complete todor configuration.

    Loaded from ~/.todor/config.yaml with environment variable overrides.
    """

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    def to_dict(self) -> dict:
        """Convert to dictionary for display (masks secrets)."""
        result = asdict(self)

        if result.get("database", {}).get("postgres_url"):
            url = result["database"]["postgres_url"]
            result["database"]["postgres_url"] = url[:30] + "..." if len(url) > 30 else "***"

        return result


def parse_database_url(url: str) -> DatabaseConfig:
    """
    Turn a DATABASE_URL into a DatabaseConfig.

    Accepts sqlite:///path, sqlite://path, sqlite:path, and
    postgres:// or postgresql:// URLs.

    Raises:
        ValueError: For any other scheme
    """
    if url.startswith(("postgres://", "postgresql://")):
        return DatabaseConfig(type="postgres", postgres_url=url)

    if url.startswith("sqlite:"):
        path = url[len("sqlite:"):]
        if path.startswith("//"):
            path = path[2:]
        path = path.split("?", 1)[0]
        return DatabaseConfig(type="sqlite", sqlite_path=path or DEFAULT_SQLITE_PATH)

    raise ValueError(f"Unsupported database URL: {url.split(':', 1)[0]}://...")


def _parse_database_config(data: dict) -> DatabaseConfig:
    """Parse database configuration from YAML data."""
    db_data = data.get("database", {}) or {}

    db_type = db_data.get("type", "sqlite")

    sqlite_config = db_data.get("sqlite", {}) or {}
    sqlite_path = sqlite_config.get("path", DEFAULT_SQLITE_PATH)

    postgres_config = db_data.get("postgres", {}) or {}
    postgres_url = postgres_config.get("url")

    # Check for URL from environment variable reference
    url_env = postgres_config.get("url_env")
    if url_env and not postgres_url:
        postgres_url = os.environ.get(url_env)

    return DatabaseConfig(
        type=db_type,
        sqlite_path=sqlite_path,
        postgres_url=postgres_url,
    )


def _parse_display_config(data: dict) -> DisplayConfig:
    """Parse display configuration from YAML data."""
    display_data = data.get("display", {}) or {}

    text_width = display_data.get("text_width", DEFAULT_TEXT_WIDTH)
    if not isinstance(text_width, int) or text_width <= 0:
        logger.warning(f"Ignoring invalid display.text_width: {text_width!r}")
        text_width = DEFAULT_TEXT_WIDTH

    return DisplayConfig(text_width=text_width)


def load_config(config_path: Optional[Path] = None) -> TodorConfig:
    """
    Load configuration from file with environment variable overrides.

    Args:
        config_path: Optional path to config file. Defaults to ~/.todor/config.yaml

    Returns:
        TodorConfig instance
    """
    config_file = config_path or CONFIG_FILE
    config = TodorConfig()

    if config_file.exists():
        try:
            with open(config_file, 'r') as f:
                data = yaml.safe_load(f) or {}

            config.database = _parse_database_config(data)
            config.display = _parse_display_config(data)

        except yaml.YAMLError as e:
            logger.warning(f"Could not parse config file at {config_file}: {e}")
        except OSError as e:
            logger.warning(f"Could not read config file at {config_file}: {e}")

    # Environment variable overrides
    url = os.environ.get("TODOR_DATABASE_URL") or os.environ.get("DATABASE_URL")
    if url:
        config.database = parse_database_url(url)

    if os.environ.get("TODOR_TEXT_WIDTH"):
        try:
            config.display.text_width = int(os.environ["TODOR_TEXT_WIDTH"])
        except ValueError:
            logger.warning(f"Ignoring invalid TODOR_TEXT_WIDTH: {os.environ['TODOR_TEXT_WIDTH']!r}")

    return config


def save_config(config: TodorConfig, config_path: Optional[Path] = None) -> None:
    """
    Save configuration to file.

    Args:
        config: TodorConfig instance to save
        config_path: Optional path to config file. Defaults to ~/.todor/config.yaml
    """
    config_file = config_path or CONFIG_FILE

    config_file.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "database": {
            "type": config.database.type,
        },
        "display": {
            "text_width": config.display.text_width,
        },
    }

    if config.database.type == "sqlite":
        data["database"]["sqlite"] = {"path": config.database.sqlite_path}
    elif config.database.postgres_url:
        data["database"]["postgres"] = {"url": config.database.postgres_url}

    with open(config_file, 'w') as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    # Secure permissions (readable only by owner)
    config_file.chmod(0o600)

    logger.info(f"Configuration saved to {config_file}")
