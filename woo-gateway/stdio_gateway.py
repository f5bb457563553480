#!/usr/bin/env python3
"""
Line-delimited JSON-RPC 2.0 over stdin/stdout.
One request per line, answered in order with one response line. Logs go to
stderr so stdout only ever carries protocol traffic.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Optional, TextIO

from config import GatewayConfig, configure_logging, load_config
from dispatcher import handle_request
from errors import INTERNAL_ERROR, INVALID_REQUEST, PARSE_ERROR, ConfigurationError, GatewayError

SERVER_NAME = "woocommerce-mcp-server"
SERVER_VERSION = "0.1.0"
PROTOCOL_VERSION = "1.0.1"

logger = logging.getLogger("woo-gateway")


def _error(req_id: Any, code: int, message: str, data: Any = None) -> dict:
    error = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": "2.0", "id": req_id, "error": error}


def _is_request(payload: Any) -> bool:
    if not isinstance(payload, dict) or payload.get("jsonrpc") != "2.0":
        return False
    if not isinstance(payload.get("method"), str) or "id" not in payload:
        return False
    req_id = payload["id"]
    return req_id is None or (isinstance(req_id, (str, int, float)) and not isinstance(req_id, bool))


def initialize_result() -> dict:
    return {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {"tools": {}},
        "serverInfo": {
            "name": SERVER_NAME,
            "version": SERVER_VERSION,
            "description": "WooCommerce MCP server",
        },
    }


def process_line(line: str, config: GatewayConfig) -> Optional[dict]:
    """Handle one input line and return the response object (None for blank lines)."""
    if not line.strip():
        return None

    try:
        payload = json.loads(line)
    except json.JSONDecodeError as e:
        return _error(None, PARSE_ERROR, "Parse error", str(e))

    if not _is_request(payload):
        return _error(None, INVALID_REQUEST, "Invalid Request",
                      "Received data is not a valid JSON-RPC 2.0 request object.")

    req_id = payload["id"]
    method = payload["method"]
    if method == "initialize":
        return {"jsonrpc": "2.0", "id": req_id, "result": initialize_result()}

    try:
        result = handle_request(method, payload.get("params") or {}, config)
    except GatewayError as e:
        return {"jsonrpc": "2.0", "id": req_id, "error": e.to_error_object()}
    except Exception as e:
        logger.exception(f"[Error for Request ID: {req_id}] unexpected failure in {method}")
        return _error(req_id, INTERNAL_ERROR, "Internal error", str(e))

    return {"jsonrpc": "2.0", "id": req_id, "result": result}


def write_response(response: dict, stream: TextIO) -> None:
    try:
        text = json.dumps(response)
    except (TypeError, ValueError) as e:
        logger.error(f"Failed to serialize JSON-RPC response: {e}")
        text = json.dumps(_error(response.get("id"), INTERNAL_ERROR, "Failed to serialize server response"))
    stream.write(text + "\n")
    stream.flush()


def serve(config: GatewayConfig, stdin: TextIO = sys.stdin, stdout: TextIO = sys.stdout) -> None:
    logger.info("WooCommerce gateway started. Listening on stdin...")
    try:
        for line in stdin:
            response = process_line(line, config)
            if response is not None:
                write_response(response, stdout)
    except KeyboardInterrupt:
        logger.info("Received interrupt. Shutting down...")
        return
    logger.info("Stdin closed. WooCommerce gateway shutting down.")


def main() -> None:
    try:
        config = load_config()
    except ConfigurationError as e:
        logging.basicConfig(stream=sys.stderr)
        logger.critical(f"Invalid configuration: {e.message}")
        sys.exit(1)
    configure_logging(config)
    serve(config)


if __name__ == "__main__":
    main()
