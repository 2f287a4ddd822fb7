"""Configuration for the Anthropic bridge."""

import os
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlsplit

from dotenv import dotenv_values, load_dotenv
from loguru import logger
from pydantic import BaseModel, ConfigDict


API_KEY_ENV = "OPENROUTER_API_KEY"
DEFAULT_ENV_FILE = ".env"
DEFAULT_LOG_FILE = "/tmp/anthropic-bridge.log"


class Config:
    """Static application metadata."""

    API_VERSION = "v1"
    APP_TITLE = "Anthropic Bridge"
    APP_DESCRIPTION = "Anthropic Messages API translated to OpenAI chat completions."
    SERVICE_NAME = "Smart Router"
    PROVIDER_NAME = "OpenRouter"
    HEALTH_MODE = "anthropic-to-openai-translator"
    STATUS_MODE = "format-translator-only"


class Settings(BaseModel):
    """Process-wide settings, built once at startup and read-only afterwards."""

    model_config = ConfigDict(frozen=True)

    api_key: Optional[str] = None
    upstream_url: str = "https://openrouter.ai/api/v1/chat/completions"
    service_name: str = Config.SERVICE_NAME
    provider_name: str = Config.PROVIDER_NAME
    host: str = "0.0.0.0"
    port: int = 3000
    log_file: Optional[str] = DEFAULT_LOG_FILE
    log_level: str = "INFO"
    referer: str = "https://claude-code.local"
    title: str = "Claude Code Smart Router"

    @property
    def upstream_host(self) -> str:
        return urlsplit(self.upstream_url).hostname or ""


def load_env(env_file: Union[str, Path]) -> None:
    """Populate the credential from a key=value file unless already exported.

    Entries already present in the process environment are never
    overridden.
    """
    if os.getenv(API_KEY_ENV):
        logger.info("Using {} from environment", API_KEY_ENV)
        return

    path = Path(env_file)
    logger.info("Loading environment from: {}", path)
    if not path.is_file():
        logger.warning("Environment file not found: {}", path)
        logger.warning("Please create {} with {}", path, API_KEY_ENV)
        return

    values = dotenv_values(path)
    load_dotenv(path, override=False)
    keys_loaded = sum(1 for key, value in values.items() if "API_KEY" in key and value)
    logger.info("Loaded {} API keys from {}", keys_loaded, path)


def load_settings(env_file: Optional[Union[str, Path]] = None) -> Settings:
    """Load the env file once and build the immutable settings."""
    if env_file is None:
        env_file = os.getenv("BRIDGE_ENV_FILE", DEFAULT_ENV_FILE)
    load_env(env_file)

    overrides = {
        "host": os.getenv("BRIDGE_HOST"),
        "port": os.getenv("BRIDGE_PORT"),
        "log_file": os.getenv("BRIDGE_LOG_FILE"),
        "log_level": os.getenv("LOGURU_LEVEL"),
        "upstream_url": os.getenv("OPENROUTER_URL"),
    }
    return Settings(
        api_key=os.getenv(API_KEY_ENV) or None,
        **{key: value for key, value in overrides.items() if value},
    )
