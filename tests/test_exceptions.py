# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_okta

import json

from coreason_okta.exceptions import (
    AuthorizationRedirect,
    ConfigurationError,
    CoreasonOktaError,
    MalformedResponseError,
    OAuth2CallbackError,
    OversizedResponseError,
    RemoteAuthError,
    UrlParseError,
    ValidationError,
)


def test_exception_hierarchy() -> None:
    """Test that all custom errors inherit from CoreasonOktaError."""
    for error in (
        ConfigurationError,
        ValidationError,
        RemoteAuthError,
        MalformedResponseError,
        OversizedResponseError,
        OAuth2CallbackError,
        UrlParseError,
    ):
        assert issubclass(error, CoreasonOktaError)


def test_redirect_is_not_an_error() -> None:
    assert not issubclass(AuthorizationRedirect, CoreasonOktaError)


def test_validation_error_response() -> None:
    err = ValidationError()
    assert str(err) == "Bad request, missing email and password."
    assert err.status_code == 400

    response = err.to_response()
    assert response.status_code == 400
    assert response.headers["content-type"] == "application/json; charset=utf-8"
    assert response.content == b'{"message":"Bad request, missing email and password."}'
    assert json.loads(response.content)["message"] == err.message


def test_remote_auth_error_keeps_body() -> None:
    err = RemoteAuthError('{"errorSummary":"bad creds"}', status_code=401)
    assert str(err) == '{"errorSummary":"bad creds"}'
    assert err.status_code == 401
    assert RemoteAuthError("x").status_code is None


def test_authorization_redirect_response() -> None:
    redirect = AuthorizationRedirect("https://idp.test/authorize?x=1", headers={"Set-Cookie": "s=1"})
    response = redirect.to_response()
    assert response.status_code == 302
    assert response.headers["location"] == "https://idp.test/authorize?x=1"
    assert response.headers["set-cookie"] == "s=1"
