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
from collections.abc import AsyncGenerator, Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest
import pytest_asyncio

from coreason_okta.config import OktaStrategyConfig
from coreason_okta.models import VerifyParams
from coreason_okta.strategy import OktaStrategy

Handler = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]

ISSUER = "https://dev-1.okta.com/oauth2/default"
OKTA_DOMAIN = "https://dev-1.okta.com"
APP_ORIGIN = "https://app.example.com"
CALLBACK_PATH = "/auth/okta/callback"


def json_response(status_code: int, data: Any) -> Handler:
    """Handler returning a fresh JSON response on every call."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=data)

    return handler


def text_response(status_code: int, text: str) -> Handler:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, text=text)

    return handler


class FakeOkta:
    """Routes requests by (method, path) and records them."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, handler: Handler) -> None:
        self.routes[(method, path)] = handler

    def calls_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, text=f"No route for {request.method} {request.url.path}")
        result = handler(request)
        if isinstance(result, httpx.Response):
            return result
        return await result


@dataclass
class FakeRequest:
    """Minimal inbound request satisfying IncomingRequest."""

    url: str
    headers: dict[str, str] = field(default_factory=dict)
    form_data: dict[str, Any] = field(default_factory=dict)
    form_calls: int = 0

    async def form(self) -> dict[str, Any]:
        self.form_calls += 1
        return self.form_data


def cookie_from(set_cookie: str) -> str:
    """Turns a Set-Cookie value into the Cookie header a browser would send back."""
    return set_cookie.split(";", 1)[0]


def make_config(**overrides: Any) -> OktaStrategyConfig:
    values: dict[str, Any] = {
        "issuer": ISSUER,
        "okta_domain": OKTA_DOMAIN,
        "client_id": "client-123",
        "client_secret": "secret-456",
        "callback_url": CALLBACK_PATH,
    }
    values.update(overrides)
    return OktaStrategyConfig(**values)


async def verify_profile(params: VerifyParams[Any]) -> dict[str, Any]:
    """Verify callback returning a plain dict user."""
    return {"id": params.profile.id, "access_token": params.tokens.access_token.get_secret_value()}


@pytest.fixture
def fake_okta() -> FakeOkta:
    return FakeOkta()


@pytest_asyncio.fixture
async def http_client(fake_okta: FakeOkta) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_okta)) as client:
        yield client


@pytest.fixture
def custom_form_strategy(http_client: httpx.AsyncClient) -> OktaStrategy[dict[str, Any]]:
    return OktaStrategy(make_config(with_custom_login_form=True), verify_profile, client=http_client)


@pytest.fixture
def hosted_strategy(http_client: httpx.AsyncClient) -> OktaStrategy[dict[str, Any]]:
    return OktaStrategy(make_config(), verify_profile, client=http_client)


def body_json(request: httpx.Request) -> Any:
    return json.loads(request.content)
