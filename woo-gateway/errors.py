"""
Error taxonomy for the gateway.
Every failure raised by the dispatcher is a GatewayError subclass carrying a
JSON-RPC error code, a human readable message and optional detail.
"""

from __future__ import annotations

from typing import Any, Optional

# JSON-RPC 2.0 codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
SERVER_ERROR = -32000


class GatewayError(Exception):
    code = SERVER_ERROR
    kind = "gateway_error"

    def __init__(self, message: str, data: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.data = data

    def to_error_object(self) -> dict[str, Any]:
        data = {"kind": self.kind}
        if self.data:
            data.update(self.data)
        return {"code": self.code, "message": self.message, "data": data}


class ConfigurationError(GatewayError):
    kind = "configuration_error"


class CredentialError(GatewayError):
    kind = "credential_error"


class ValidationError(GatewayError):
    code = INVALID_PARAMS
    kind = "validation_error"


class MethodNotFoundError(GatewayError):
    code = METHOD_NOT_FOUND
    kind = "method_not_found"

    def __init__(self, method: str):
        super().__init__(f"Unknown or unsupported method: {method}")
        self.method = method


class BackendHttpError(GatewayError):
    """The backend answered with a non-success status."""

    kind = "backend_http_error"

    def __init__(self, status: int, detail: str, body: Any = None):
        super().__init__(f"API Error ({status}): {detail}", {"status": status, "body": body})
        self.status = status
        self.detail = detail
        self.body = body


class TransportError(GatewayError):
    """No response was received (network, timeout or request setup)."""

    kind = "transport_error"

    def __init__(self, detail: str):
        super().__init__(f"API Network/Setup Error: {detail}")
        self.detail = detail
