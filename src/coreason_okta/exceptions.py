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
Custom exceptions for the coreason-okta package.
"""

import json
from collections.abc import Mapping

import httpx

MISSING_CREDENTIALS_MESSAGE = "Bad request, missing email and password."


class CoreasonOktaError(Exception):
    """Base exception for all coreason-okta errors."""


class ConfigurationError(CoreasonOktaError):
    """Raised when the strategy cannot derive its Okta endpoints (no issuer or domain)."""


class ValidationError(CoreasonOktaError):
    """
    Raised when the custom login form is submitted without an email or password.

    Hosts should translate it to the HTTP response returned by `to_response()`.
    """

    status_code = 400

    def __init__(self, message: str = MISSING_CREDENTIALS_MESSAGE) -> None:
        super().__init__(message)
        self.message = message

    @property
    def headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json; charset=utf-8"}

    def to_response(self) -> httpx.Response:
        """Builds the 400 JSON response for this error."""
        body = json.dumps({"message": self.message}, separators=(",", ":")).encode("utf-8")
        return httpx.Response(self.status_code, headers=self.headers, content=body)


class RemoteAuthError(CoreasonOktaError):
    """
    Raised when Okta answers with a non-success status.
    The response body is preserved verbatim as the message.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(CoreasonOktaError):
    """Raised when an Okta response does not have the expected JSON shape."""


class OversizedResponseError(CoreasonOktaError):
    """Raised when an HTTP response is too large."""


class OAuth2CallbackError(CoreasonOktaError):
    """Raised when the authorization callback is invalid (error param, missing code, state mismatch)."""


class UrlParseError(CoreasonOktaError, ValueError):
    """Raised when a callback URL cannot be parsed."""


class AuthorizationRedirect(Exception):  # noqa: N818
    """
    Signals that the user agent must be redirected to the authorization endpoint.

    This is control flow rather than a failure, so it does not derive from CoreasonOktaError.

    Attributes:
        location (str): The authorization URL, including the query string.
        headers (dict[str, str]): Headers to send with the redirect (Location, Set-Cookie).
    """

    status_code = 302

    def __init__(self, location: str, headers: Mapping[str, str] | None = None) -> None:
        super().__init__(location)
        self.location = location
        self.headers = {"Location": location, **(headers or {})}

    def to_response(self) -> httpx.Response:
        return httpx.Response(self.status_code, headers=self.headers)
