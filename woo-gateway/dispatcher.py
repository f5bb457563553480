"""
Request dispatcher.
Turns one (method, params) pair into exactly one logical backend operation:
classify, resolve credentials, build the client, validate, execute.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from config import GatewayConfig
from credentials import resolve_credentials
from errors import GatewayError, MethodNotFoundError, ValidationError
from http_client import build_client
from method_registry import ApiKind, classify
from operations import OPERATIONS, execute, validate

logger = logging.getLogger(__name__)


def handle_request(method: str, params: Optional[dict], config: GatewayConfig) -> Any:
    """
    Run `method` against the backend and return its decoded JSON payload.
    Raises a GatewayError subclass on any failure; nothing is retried.
    """
    try:
        kind = classify(method)
        op = OPERATIONS.get(method)
        if kind is ApiKind.UNKNOWN or op is None:
            raise MethodNotFoundError(method)
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise ValidationError(f"params must be an object for {method}")

        creds = resolve_credentials(params, config.defaults)
        client = build_client(creds, kind, method, timeout=config.timeout)
        try:
            validate(op, params)
            logger.info(f"Dispatching {method} ({kind.value})")
            return execute(op, client, params)
        finally:
            client.close()
    except GatewayError as e:
        logger.error(f"Error processing method '{method}': {e.message}")
        raise
