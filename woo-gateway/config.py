"""
Process-wide configuration, read once from the environment at startup.
A .env file next to the working directory is honoured via python-dotenv.
"""

from __future__ import annotations

import logging
import os
import sys

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from credentials import Credentials
from errors import ConfigurationError

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_LOG_LEVEL = "INFO"


class GatewayConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    defaults: Credentials = Field(default_factory=Credentials)
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = DEFAULT_LOG_LEVEL


def _env(name: str) -> str | None:
    # empty variables count as unset
    return os.getenv(name, "") or None


def load_config() -> GatewayConfig:
    load_dotenv()

    raw_timeout = os.getenv("WOO_GATEWAY_TIMEOUT", "") or str(DEFAULT_TIMEOUT_SECONDS)
    try:
        timeout = float(raw_timeout)
    except ValueError:
        raise ConfigurationError(f"WOO_GATEWAY_TIMEOUT must be a number of seconds, got {raw_timeout!r}")
    if timeout <= 0:
        raise ConfigurationError(f"WOO_GATEWAY_TIMEOUT must be positive, got {raw_timeout!r}")

    return GatewayConfig(
        defaults=Credentials(
            site_url=_env("WORDPRESS_SITE_URL"),
            username=_env("WORDPRESS_USERNAME"),
            password=_env("WORDPRESS_PASSWORD"),
            consumer_key=_env("WOOCOMMERCE_CONSUMER_KEY"),
            consumer_secret=_env("WOOCOMMERCE_CONSUMER_SECRET"),
        ),
        timeout=timeout,
        log_level=(os.getenv("WOO_GATEWAY_LOG_LEVEL", "") or DEFAULT_LOG_LEVEL).upper(),
    )


def configure_logging(config: GatewayConfig) -> None:
    # stdout carries protocol traffic, so logs always go to stderr
    level = logging.getLevelName(config.log_level)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
