# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_okta

import httpx
import pytest

from conftest import make_config
from coreason_okta.endpoints import get_callback_url_from, resolve_endpoints
from coreason_okta.exceptions import ConfigurationError, UrlParseError
from coreason_okta.strategy import OktaStrategy


async def _verify(params: object) -> object:
    return params


def test_issuer_rooted_endpoints() -> None:
    endpoints = resolve_endpoints(make_config(okta_domain=None))
    assert endpoints.mode == "issuer"
    assert endpoints.authorization_url == "https://dev-1.okta.com/oauth2/default/v1/authorize"
    assert endpoints.token_url == "https://dev-1.okta.com/oauth2/default/v1/token"
    assert endpoints.userinfo_url == "https://dev-1.okta.com/oauth2/default/v1/userinfo"
    assert endpoints.authentication_api_url == ""


def test_domain_rooted_endpoints() -> None:
    endpoints = resolve_endpoints(make_config(issuer=None, okta_domain="acme.okta.com"))
    assert endpoints.mode == "domain"
    assert endpoints.authorization_url == "https://acme.okta.com/oauth2/default/v1/authorize"
    assert endpoints.token_url == "https://acme.okta.com/oauth2/default/v1/token"
    assert endpoints.userinfo_url == "https://acme.okta.com/oauth2/default/v1/userinfo"


def test_domain_rooted_with_custom_authorization_server() -> None:
    endpoints = resolve_endpoints(
        make_config(issuer=None, okta_domain="acme.okta.com", authorization_server_id="aus123")
    )
    assert endpoints.authorization_url == "https://acme.okta.com/oauth2/aus123/v1/authorize"


def test_issuer_wins_over_domain_for_oauth2_urls() -> None:
    endpoints = resolve_endpoints(
        make_config(issuer="https://login.acme.com/oauth2/aus9", okta_domain="acme.okta.com")
    )
    assert endpoints.mode == "issuer"
    assert endpoints.authorization_url == "https://login.acme.com/oauth2/aus9/v1/authorize"


def test_authentication_api_only_with_custom_login_form() -> None:
    assert resolve_endpoints(make_config()).authentication_api_url == ""

    endpoints = resolve_endpoints(make_config(with_custom_login_form=True))
    assert endpoints.authentication_api_url == "https://dev-1.okta.com/api/v1/authn"


def test_authentication_api_falls_back_to_issuer_origin() -> None:
    endpoints = resolve_endpoints(
        make_config(issuer="https://login.acme.com/oauth2/default", okta_domain=None, with_custom_login_form=True)
    )
    assert endpoints.authentication_api_url == "https://login.acme.com/api/v1/authn"


def test_missing_root_raises_configuration_error() -> None:
    config = make_config(issuer=None, okta_domain=None)
    with pytest.raises(ConfigurationError, match="issuer"):
        resolve_endpoints(config)

    with pytest.raises(ConfigurationError):
        OktaStrategy(config, _verify)


def test_callback_relative_path_uses_request_origin() -> None:
    url = get_callback_url_from("/auth/okta/callback", "https://app.example.com/login?next=/home")
    assert str(url) == "https://app.example.com/auth/okta/callback"


def test_callback_absolute_is_returned_unchanged() -> None:
    callback = "https://auth.example.org/okta/callback"
    for current in ("https://app.example.com/login", "http://localhost:3000/", "https://other.test/a/b?c=d"):
        assert str(get_callback_url_from(callback, current)) == callback
        assert str(get_callback_url_from(callback, httpx.URL(current))) == callback


def test_callback_bare_host_takes_request_scheme() -> None:
    assert str(get_callback_url_from("app.example.com/cb", "http://localhost:3000/login")) == (
        "http://app.example.com/cb"
    )
    assert str(get_callback_url_from("app.example.com/cb", "https://x.test/")) == "https://app.example.com/cb"


def test_callback_invalid_url_raises() -> None:
    with pytest.raises(UrlParseError):
        get_callback_url_from("app.example.com:notaport/cb", "https://app.example.com/login")


def test_url_parse_error_is_value_error() -> None:
    assert issubclass(UrlParseError, ValueError)
