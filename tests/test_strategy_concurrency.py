# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_okta

import asyncio
import json
from typing import Any

import httpx
import pytest

from conftest import APP_ORIGIN, FakeOkta, FakeRequest
from coreason_okta.exceptions import AuthorizationRedirect
from coreason_okta.session import MemorySessionStore
from coreason_okta.strategy import OktaStrategy

DELAYS = {"slow@b.com": 0.05, "fast@b.com": 0.0}


async def authn_per_user(request: httpx.Request) -> httpx.Response:
    """Answers each user with a distinct token; the first caller finishes last."""
    username = json.loads(request.content)["username"]
    await asyncio.sleep(DELAYS[username])
    return httpx.Response(200, json={"sessionToken": f"token-for-{username}"})


@pytest.mark.asyncio
async def test_concurrent_logins_do_not_share_session_tokens(
    fake_okta: FakeOkta, custom_form_strategy: OktaStrategy[Any]
) -> None:
    fake_okta.add("POST", "/api/v1/authn", authn_per_user)
    store = MemorySessionStore()

    async def login(email: str) -> str:
        request = FakeRequest(url=f"{APP_ORIGIN}/login", form_data={"email": email, "password": "pw"})
        with pytest.raises(AuthorizationRedirect) as exc:
            await custom_form_strategy.authenticate(request, store)
        return httpx.URL(exc.value.location).params["sessionToken"]

    slow, fast = await asyncio.gather(login("slow@b.com"), login("fast@b.com"))

    assert slow == "token-for-slow@b.com"
    assert fast == "token-for-fast@b.com"


@pytest.mark.asyncio
async def test_many_concurrent_logins(fake_okta: FakeOkta, custom_form_strategy: OktaStrategy[Any]) -> None:
    async def echo(request: httpx.Request) -> httpx.Response:
        username = json.loads(request.content)["username"]
        # Later users answer sooner to force interleaving
        await asyncio.sleep(0.001 * (20 - int(username.split("@")[0][4:])))
        return httpx.Response(200, json={"sessionToken": f"t-{username}"})

    fake_okta.add("POST", "/api/v1/authn", echo)
    store = MemorySessionStore()

    async def login(index: int) -> tuple[str, str]:
        email = f"user{index}@b.com"
        request = FakeRequest(url=f"{APP_ORIGIN}/login", form_data={"email": email, "password": "pw"})
        try:
            await custom_form_strategy.authenticate(request, store)
        except AuthorizationRedirect as redirect:
            return email, httpx.URL(redirect.location).params["sessionToken"]
        raise AssertionError("expected a redirect")

    results = await asyncio.gather(*(login(i) for i in range(20)))

    for email, token in results:
        assert token == f"t-{email}"
