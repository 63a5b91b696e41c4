import asyncio
import os
import sys

# Add src to path for running directly
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "../src")))

from typing import Any

import httpx

from coreason_okta import (
    AuthorizationRedirect,
    MemorySessionStore,
    OktaStrategy,
    OktaStrategyConfig,
    ValidationError,
    VerifyParams,
)


def fake_okta(request: httpx.Request) -> httpx.Response:
    """Stands in for an Okta tenant so the example runs offline."""
    if request.url.path == "/api/v1/authn":
        return httpx.Response(200, json={"status": "SUCCESS", "sessionToken": "20111xyz"})
    if request.url.path.endswith("/v1/token"):
        return httpx.Response(200, json={"access_token": "at-demo", "token_type": "Bearer", "expires_in": 3600})
    if request.url.path.endswith("/v1/userinfo"):
        return httpx.Response(200, json={"sub": "00u1demo", "preferred_username": "alice@example.com"})
    return httpx.Response(404)


class DemoRequest:
    def __init__(self, url: str, cookie: str | None = None, form: dict[str, str] | None = None) -> None:
        self.url = url
        self.headers = {"cookie": cookie} if cookie else {}
        self._form = form or {}

    async def form(self) -> dict[str, str]:
        return self._form


async def verify(params: VerifyParams[Any]) -> dict[str, Any]:
    return {"id": params.profile.id, "name": params.profile.display_name}


async def main() -> None:
    """
    Walks through the custom login form flow:
    form POST -> session token exchange -> redirect to Okta -> callback -> user.
    """
    config = OktaStrategyConfig(
        okta_domain="dev-000000.okta.com",
        client_id="demo-client",
        client_secret="demo-secret",
        callback_url="/auth/okta/callback",
        with_custom_login_form=True,
        debug=True,
    )
    store = MemorySessionStore()

    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_okta)) as client:
        strategy: OktaStrategy[dict[str, Any]] = OktaStrategy(config, verify, client=client)

        try:
            await strategy.authenticate(DemoRequest("https://app.example.com/login"), store)
        except ValidationError as e:
            print(f">>> Empty form rejected: {e.to_response().status_code} {e.message}")

        login = DemoRequest("https://app.example.com/login", form={"email": "alice@example.com", "password": "pw"})
        try:
            user = await strategy.authenticate(login, store)
        except AuthorizationRedirect as redirect:
            print(f">>> Redirect to Okta: {redirect.location}")
            state = httpx.URL(redirect.location).params["state"]
            cookie = redirect.headers["Set-Cookie"].split(";", 1)[0]
        else:
            print(f">>> Already authenticated: {user}")
            return

        callback = DemoRequest(f"https://app.example.com/auth/okta/callback?code=demo&state={state}", cookie=cookie)
        user = await strategy.authenticate(callback, store)
        print(f">>> Authenticated: {user}")


if __name__ == "__main__":
    asyncio.run(main())
