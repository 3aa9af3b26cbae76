"""Configuration management using Pydantic BaseSettings with JSON file support."""
import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import dotenv_values
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


def flatten_json_config(config: dict[str, Any]) -> dict[str, Any]:
    """Flatten nested JSON config into flat key-value pairs.

    Supports nested structures like:
    {
        "redis": {"redis_host": "localhost", "redis_port": 6379},
        "analytics": {"analytics_day_window": 14}
    }

    Becomes:
    {"redis_host": "localhost", "redis_port": 6379, "analytics_day_window": 14}

    Keys starting with "_" (like "_comment") are skipped.
    """
    result = {}

    for key, value in config.items():
        if key.startswith("_"):
            continue

        if isinstance(value, dict):
            result.update(flatten_json_config(value))
        else:
            result[key] = value

    return result


def load_json_config(config_file: Optional[str] = None) -> dict[str, Any]:
    """Load configuration from a JSON file.

    Args:
        config_file: Path to JSON config file. If None, checks CONFIG_FILE env var.

    Returns:
        Dictionary of configuration values (flattened), or empty dict if no file found.
    """
    file_path = config_file or os.getenv("CONFIG_FILE")

    if not file_path:
        return {}

    path = Path(file_path)
    if not path.exists():
        logger.warning(f"Config file not found: {file_path}")
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            config = json.load(f)
            logger.info(f"Loaded configuration from: {file_path}")
            return flatten_json_config(config)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in config file {file_path}: {e}")
        return {}
    except OSError as e:
        logger.error(f"Error reading config file {file_path}: {e}")
        return {}


class Settings(BaseSettings):
    """Application configuration with JSON file and environment variable support.

    Configuration priority (highest to lowest):
    1. Environment variables, including those in the .env file
    2. JSON config file (specified via CONFIG_FILE env var)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Redis Configuration
    redis_host: str = "redis"
    redis_port: int = 6379
    redis_password: str = ""
    redis_db: int = 0

    # Server Configuration
    server_port: int = 8080
    log_level: str = "INFO"

    # Timezone used to decide "today" for analytics and as the default
    # recurrence timezone when a venue has none
    venue_timezone: str = "America/New_York"

    # Analytics Configuration
    analytics_day_window: int = 14  # most recent day keys read per collection
    recent_days_window: int = 7
    reviews_recent_days: int = 30
    top_vibe_tags_limit: int = 4

    # Event Configuration
    default_occurrences: int = 10
    max_occurrences: int = 50

    def __init__(self, **kwargs):
        """Initialize settings from JSON file and environment variables.

        Priority: env vars (.env included) > JSON config > defaults
        """
        json_config = load_json_config()

        # Environment variables must win over the JSON file, so JSON values
        # are only used for fields with no matching env var.
        env_keys = {k.lower() for k in os.environ}
        env_file = kwargs.get("_env_file", type(self).model_config.get("env_file"))
        if env_file and Path(env_file).is_file():
            env_keys |= {k.lower() for k in dotenv_values(env_file)}
        json_config = {k: v for k, v in json_config.items() if k.lower() not in env_keys}

        super().__init__(**{**json_config, **kwargs})

    @property
    def redis_address(self) -> str:
        """Get Redis connection address in host:port format."""
        return f"{self.redis_host}:{self.redis_port}"
