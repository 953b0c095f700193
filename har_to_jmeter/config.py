"""
Runtime configuration resolved from the environment.
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from .errors import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _get_float_env(key: str) -> Optional[float]:
    value = _get_env(key)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigurationError(f"Environment variable {key} must be numeric") from exc


def _get_bool_env(key: str, default: bool = False) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Environment variable {key} must be a boolean")


class Settings(BaseModel):
    """Read-only settings for one invocation."""

    model_config = ConfigDict(frozen=True)

    openai_api_key: Optional[str] = None
    google_ai_api_key: Optional[str] = None
    request_timeout: Optional[float] = None
    expose_stack_traces: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, load_dotenv_file: bool = True) -> "Settings":
        """
        Build settings from environment variables (and a .env file if present).

        Raises:
            ConfigurationError: If a numeric or boolean variable cannot be parsed
        """
        if load_dotenv_file:
            load_dotenv()

        return cls(
            openai_api_key=_get_env("OPENAI_API_KEY"),
            google_ai_api_key=_get_env("GOOGLE_AI_API_KEY"),
            request_timeout=_get_float_env("LLM_REQUEST_TIMEOUT"),
            expose_stack_traces=_get_bool_env("EXPOSE_STACK_TRACES"),
            log_level=(_get_env("LOG_LEVEL", "INFO") or "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    """Install the root handler used by the entry points."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )
