# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_okta

"""
Endpoint derivation and callback URL resolution.
"""

from urllib.parse import urlparse

import httpx

from coreason_okta.config import OktaStrategyConfig
from coreason_okta.exceptions import ConfigurationError, UrlParseError
from coreason_okta.models_internal import OktaEndpoints


def _origin(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def resolve_endpoints(config: OktaStrategyConfig) -> OktaEndpoints:
    """
    Derives the Okta URLs from the configured root. Pure, no I/O.

    Issuer-rooted mode (issuer set) uses `{issuer}/v1/...`. Domain-rooted mode
    (only okta_domain set) uses `{okta_domain}/oauth2/{authorization_server_id}/v1/...`.
    The Authentication API URL is only derived for the custom login form; it lives
    on the tenant domain, or on the issuer's origin when no domain is configured.

    Args:
        config: The strategy configuration.

    Returns:
        OktaEndpoints: The derived URLs.

    Raises:
        ConfigurationError: If neither issuer nor okta_domain is configured.
    """
    if config.issuer:
        mode = "issuer"
        root = config.issuer
    elif config.okta_domain:
        mode = "domain"
        root = f"{config.okta_domain}/oauth2/{config.authorization_server_id}"
    else:
        raise ConfigurationError("Okta configuration requires either 'issuer' or 'okta_domain'.")

    authentication_api_url = ""
    if config.with_custom_login_form:
        tenant = config.okta_domain or _origin(root)
        authentication_api_url = f"{tenant}/api/v1/authn"

    return OktaEndpoints(
        mode=mode,
        authorization_url=f"{root}/v1/authorize",
        token_url=f"{root}/v1/token",
        userinfo_url=f"{root}/v1/userinfo",
        authentication_api_url=authentication_api_url,
    )


def get_callback_url_from(callback_url: str, current_url: str | httpx.URL) -> httpx.URL:
    """
    Resolves the configured callback against the URL of the current request.

    - An absolute http(s) callback is returned unchanged.
    - A callback starting with "/" is joined to the current request's origin.
    - Anything else is treated as a bare host and gets the current request's scheme.

    Raises:
        UrlParseError: If either URL cannot be parsed.
    """
    try:
        current = httpx.URL(str(current_url))
        if callback_url.startswith(("http:", "https:")):
            return httpx.URL(callback_url)
        if callback_url.startswith("/"):
            return current.join(callback_url)
        return httpx.URL(f"{current.scheme}://{callback_url}")
    except httpx.InvalidURL as e:
        raise UrlParseError(f"Invalid callback URL {callback_url!r}: {e}") from e
