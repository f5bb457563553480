from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from errors import ConfigurationError

# request parameter name -> Credentials field
REQUEST_FIELDS = {
    "siteUrl": "site_url",
    "username": "username",
    "password": "password",
    "consumerKey": "consumer_key",
    "consumerSecret": "consumer_secret",
}


class Credentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    site_url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    consumer_key: Optional[str] = None
    consumer_secret: Optional[str] = None


def _pick(*candidates: Any) -> Optional[str]:
    for value in candidates:
        if isinstance(value, str) and value:
            return value
    return None


def resolve_credentials(params: dict, defaults: Credentials) -> Credentials:
    """
    Merge per-request credential overrides over the process defaults.
    A request value wins when it is a non-empty string; the site URL is
    mandatory and loses one trailing slash.
    """
    merged = {
        field: _pick(params.get(param), getattr(defaults, field))
        for param, field in REQUEST_FIELDS.items()
    }
    if not merged["site_url"]:
        raise ConfigurationError(
            "WordPress site URL not provided (or is empty) in environment variables or request parameters"
        )
    site_url = merged["site_url"]
    merged["site_url"] = site_url[:-1] if site_url.endswith("/") else site_url
    if not merged["site_url"]:
        raise ConfigurationError(f"Invalid WordPress site URL: {params.get('siteUrl') or defaults.site_url!r}")
    return Credentials(**merged)
