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
Configuration for the coreason-okta package.
"""

from urllib.parse import urlparse

from pydantic import Field, SecretStr, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class OktaStrategyConfig(BaseSettings):
    """
    Configuration settings for the Okta strategy.

    Either `issuer` or `okta_domain` must be set; the strategy raises
    ConfigurationError at construction otherwise.

    Attributes:
        okta_domain (str | None): The Okta tenant (e.g. dev-123.okta.com). Normalized to https://host.
        issuer (str | None): The authorization server issuer (e.g. https://dev-123.okta.com/oauth2/default).
        authorization_server_id (str): Authorization server used when only the domain is configured.
        client_id (str): The OIDC Client ID.
        client_secret (SecretStr): The OIDC Client secret.
        callback_url (str): Absolute URL, absolute path or bare host of the OAuth2 callback.
        scope (str): Space-delimited scopes requested on the authorization redirect.
        with_custom_login_form (bool): Exchange form credentials for an Okta session token before redirecting.
        debug (bool): Emit verbose strategy debug logs.
        http_timeout (float): Timeout in seconds for every call to Okta.
        pii_salt (SecretStr): Salt for anonymizing PII in logs/traces.
    """

    model_config = SettingsConfigDict(
        env_prefix="COREASON_OKTA_",
        case_sensitive=False,
        frozen=True,
    )

    # unsafe_local_dev is declared first so the URL validators can read it
    unsafe_local_dev: bool = False
    okta_domain: str | None = None
    issuer: str | None = None
    authorization_server_id: str = "default"
    client_id: str
    client_secret: SecretStr
    callback_url: str
    scope: str = "openid profile email"
    with_custom_login_form: bool = False
    debug: bool = False
    http_timeout: float = Field(default=10.0, gt=0, description="Timeout in seconds for all Okta network operations.")
    pii_salt: SecretStr = SecretStr("coreason-unsafe-default-salt")

    @field_validator("okta_domain")
    @classmethod
    def normalize_domain(cls, v: str | None) -> str | None:
        """
        Ensures the domain is an origin (scheme and host, no path or trailing slash).

        Args:
            v: The domain string to normalize.

        Returns:
            The normalized origin, or None.
        """
        if v is None:
            return None
        v = v.strip()
        if not v:
            return None
        if "://" not in v:
            v = f"https://{v}"

        parsed = urlparse(v)
        if not parsed.netloc:
            raise ValueError(f"Invalid Okta domain: {v!r}")
        return f"{parsed.scheme}://{parsed.netloc.lower()}"

    @field_validator("issuer")
    @classmethod
    def normalize_issuer(cls, v: str | None) -> str | None:
        """Strips surrounding whitespace and trailing slashes from the issuer."""
        if v is None:
            return None
        v = v.strip().rstrip("/")
        if not v:
            return None
        if "://" not in v:
            raise ValueError(f"Issuer must be an absolute URL, got {v!r}")
        return v

    @field_validator("okta_domain", "issuer", mode="after")
    @classmethod
    def validate_https(cls, v: str | None, info: ValidationInfo) -> str | None:
        """
        Ensures that Okta roots use HTTPS, unless strictly opted out for local dev.
        """
        if v and v.startswith("http://") and not info.data.get("unsafe_local_dev", False):
            raise ValueError("HTTPS is required for production. Set 'unsafe_local_dev=True' only for local testing.")
        return v

    @field_validator("scope")
    @classmethod
    def normalize_scope(cls, v: str) -> str:
        scope = " ".join(v.split())
        if not scope:
            raise ValueError("Scope must not be empty.")
        return scope
