"""
HTTP client factory.
Builds a request-scoped client for one API root with the right authentication,
and maps every failure onto the gateway error taxonomy.
"""

from __future__ import annotations

import base64
import logging
from typing import Any, Dict, Optional

import requests

from credentials import Credentials
from errors import BackendHttpError, CredentialError, TransportError
from method_registry import ApiKind

CONTENT_API_ROOT = "/wp-json/wp/v2"
COMMERCE_API_ROOT = "/wp-json/wc/v3"

logger = logging.getLogger(__name__)


def _scalar(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def _flatten(key: str, value: Any, query: Dict[str, Any]) -> None:
    # PHP reads include[]=1&include[]=2 as a list and attribute[pa_color]=red as a map
    if value is None:
        return
    if isinstance(value, dict):
        for sub, item in value.items():
            _flatten(f"{key}[{sub}]", item, query)
    elif isinstance(value, (list, tuple)):
        if any(isinstance(item, (dict, list, tuple)) for item in value):
            for index, item in enumerate(value):
                _flatten(f"{key}[{index}]", item, query)
        else:
            query[f"{key}[]"] = [_scalar(item) for item in value if item is not None]
    else:
        query[key] = _scalar(value)


def _encode_query(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    query: Dict[str, Any] = {}
    for key, value in (params or {}).items():
        _flatten(key, value, query)
    return query


def _error_detail(resp: requests.Response) -> tuple[str, Any]:
    """Returns (message, decoded body) for a failed response."""
    try:
        body = resp.json()
    except ValueError:
        body = resp.text or None

    # WordPress errors look like {"code": "...", "message": "...", "data": {...}}
    if isinstance(body, dict) and isinstance(body.get("message"), str) and isinstance(body.get("code", ""), str):
        return body["message"], body
    if isinstance(body, str) and body:
        return body, body
    return resp.reason or "Failed request", body


class ApiClient:
    def __init__(
        self,
        base_url: str,
        headers: Optional[Dict[str, str]] = None,
        auth_params: Optional[Dict[str, str]] = None,
        timeout: float = 30.0,
    ):
        self.base_url = base_url
        self.headers = {"Content-Type": "application/json", **(headers or {})}
        self.auth_params = dict(auth_params or {})
        self.timeout = timeout
        self.session = requests.Session()

    def request(self, verb: str, path: str, params: Optional[dict] = None, json_body: Any = None) -> Any:
        url = f"{self.base_url}{path}"
        query = _encode_query({**(params or {}), **self.auth_params})
        logger.debug(f"{verb} {url}")
        try:
            resp = self.session.request(
                verb,
                url,
                params=query,
                json=json_body,
                headers=self.headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(str(e)) from e

        if not resp.ok:
            detail, body = _error_detail(resp)
            logger.debug(f"Backend error body for {verb} {url}: {body!r}")
            raise BackendHttpError(resp.status_code, detail, body)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return resp.text

    def get(self, path: str, params: Optional[dict] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, body: Any = None, params: Optional[dict] = None) -> Any:
        return self.request("POST", path, params=params, json_body=body)

    def put(self, path: str, body: Any = None, params: Optional[dict] = None) -> Any:
        return self.request("PUT", path, params=params, json_body=body)

    def delete(self, path: str, params: Optional[dict] = None) -> Any:
        return self.request("DELETE", path, params=params)

    def close(self) -> None:
        self.session.close()


def build_client(creds: Credentials, kind: ApiKind, method: str, timeout: float = 30.0) -> ApiClient:
    """Create a client for `method`, failing fast when its credentials are incomplete."""
    if kind is ApiKind.CONTENT:
        if not creds.username or not creds.password:
            raise CredentialError(
                f"WordPress username and password are required for method '{method}' but not provided."
            )
        token = base64.b64encode(f"{creds.username}:{creds.password}".encode("utf-8")).decode("ascii")
        return ApiClient(
            f"{creds.site_url}{CONTENT_API_ROOT}",
            headers={"Authorization": f"Basic {token}"},
            timeout=timeout,
        )

    if kind is ApiKind.COMMERCE:
        if not creds.consumer_key or not creds.consumer_secret:
            raise CredentialError(
                f"WooCommerce Consumer Key and Secret are required for method '{method}' but not provided."
            )
        return ApiClient(
            f"{creds.site_url}{COMMERCE_API_ROOT}",
            auth_params={"consumer_key": creds.consumer_key, "consumer_secret": creds.consumer_secret},
            timeout=timeout,
        )

    raise ValueError(f"No API root for method kind {kind!r}")
