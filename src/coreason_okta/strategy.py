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
OktaStrategy component: the Okta authentication strategy plugged into the host.
"""

from typing import Any, Generic, TypeVar

import httpx
from opentelemetry import trace
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.trace import Status, StatusCode
from pydantic import SecretStr

from coreason_okta.config import OktaStrategyConfig
from coreason_okta.credentials import exchange_credentials
from coreason_okta.endpoints import get_callback_url_from, resolve_endpoints
from coreason_okta.exceptions import AuthorizationRedirect, ValidationError
from coreason_okta.models import AuthenticateOptions, AuthorizationContext, OktaProfile
from coreason_okta.oauth2 import OAuth2Flow
from coreason_okta.profile import fetch_user_profile
from coreason_okta.protocols import IncomingRequest, VerifyCallback
from coreason_okta.session import SessionStoreProtocol
from coreason_okta.utils.logger import debug_log, logger

UserT = TypeVar("UserT")

tracer = trace.get_tracer(__name__)


class OktaStrategy(Generic[UserT]):
    """
    Okta OIDC strategy.

    Delegates the authorization-code flow to OAuth2Flow and supplies the Okta
    specific hooks: authorization parameters (scope, sessionToken) and the
    userinfo profile mapping. With `with_custom_login_form`, the login form's
    email and password are first exchanged for a one-time session token that
    is threaded into the authorization redirect of the same call.

    Attributes:
        name (str): The strategy name ("okta").
        config (OktaStrategyConfig): The configuration.
        endpoints (OktaEndpoints): The URLs derived from the configuration.
    """

    name = "okta"

    def __init__(
        self,
        config: OktaStrategyConfig,
        verify: VerifyCallback[UserT],
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the OktaStrategy.

        Args:
            config: The configuration object.
            verify: Converts VerifyParams (tokens and OktaProfile) into the application's user.
            client: External async client (optional). If not provided, one is created with
                `config.http_timeout`.

        Raises:
            ConfigurationError: If neither issuer nor okta_domain is configured.
        """
        self.config = config
        self.endpoints = resolve_endpoints(config)
        self._internal_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(timeout=config.http_timeout)

        HTTPXClientInstrumentor().instrument_client(self._client)

        self._flow: OAuth2Flow[UserT] = OAuth2Flow(
            authorization_url=self.endpoints.authorization_url,
            token_url=self.endpoints.token_url,
            client_id=config.client_id,
            client_secret=config.client_secret,
            callback_url=config.callback_url,
            verify=verify,
            client=self._client,
            debug=config.debug,
        )
        self._debug(
            f"Okta strategy configured ({self.endpoints.mode}-rooted): "
            f"authorize={self.endpoints.authorization_url} custom_login_form={config.with_custom_login_form}"
        )

    async def __aenter__(self) -> "OktaStrategy[UserT]":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Closes the HTTP client if this strategy created it."""
        if self._internal_client:
            await self._client.aclose()

    def _debug(self, message: str) -> None:
        debug_log(self.config.debug, message)

    async def authenticate(
        self,
        request: IncomingRequest,
        session_store: SessionStoreProtocol,
        options: AuthenticateOptions | None = None,
    ) -> UserT:
        """
        Authenticates the request.

        Without the custom login form this is exactly the OAuth2 flow. With it, a user
        already in the session is returned as is; otherwise, unless the request is the
        OAuth2 callback, the form's email and password are exchanged for a session token
        before the flow builds the authorization redirect.

        Emits an OpenTelemetry span `okta.authenticate`.

        Args:
            request: The inbound request.
            session_store: The host's session storage.
            options: Host options (session key). Defaults to AuthenticateOptions().

        Returns:
            The authenticated user.

        Raises:
            ValidationError: If the login form lacks email or password (HTTP 400).
            AuthorizationRedirect: When the user agent must be sent to Okta.
            RemoteAuthError: If Okta rejects the credentials or the code.
            MalformedResponseError: If an Okta response has an unexpected shape.
            OAuth2CallbackError: If the callback is invalid.
            httpx.HTTPError: For transport failures.
        """
        options = options or AuthenticateOptions()

        with tracer.start_as_current_span(
            "okta.authenticate", record_exception=False, set_status_on_exception=False
        ) as span:
            span.set_attribute("okta.custom_login_form", self.config.with_custom_login_form)
            try:
                if not self.config.with_custom_login_form:
                    return await self._flow.authenticate(
                        request, session_store, options, self, AuthorizationContext()
                    )

                session = await session_store.get_session(request.headers.get("cookie"))
                user = session.get(options.session_key)
                if user is not None:
                    self._debug("User already present in session; skipping Okta")
                    span.set_status(Status(StatusCode.OK))
                    return user  # type: ignore[no-any-return]

                url = httpx.URL(str(request.url))
                callback = self.get_callback_url_from(url)
                context = AuthorizationContext()

                if url.path != callback.path:
                    form = await request.form()
                    email = form.get("email")
                    password = form.get("password")
                    if not email or not password:
                        logger.warning("Login form submitted without email or password")
                        raise ValidationError()

                    session_token = await exchange_credentials(
                        self._client,
                        self.endpoints.authentication_api_url,
                        str(email),
                        str(password),
                        self.config.pii_salt,
                    )
                    context = AuthorizationContext(session_token=SecretStr(session_token))

                result = await self._flow.authenticate(request, session_store, options, self, context)
                span.set_status(Status(StatusCode.OK))
                return result
            except AuthorizationRedirect:
                span.add_event("authorization_redirect")
                raise
            except Exception as e:
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise

    def get_callback_url_from(self, current_url: str | httpx.URL) -> httpx.URL:
        """Resolves the configured callback URL against the current request URL."""
        return get_callback_url_from(self.config.callback_url, current_url)

    def authorization_params(self, context: AuthorizationContext | None = None) -> dict[str, str]:
        """
        Query parameters added to the authorization redirect.

        Args:
            context: The per-call context holding the session token, if any.

        Returns:
            dict[str, str]: `scope` and `sessionToken` (empty when no credentials were exchanged).
        """
        session_token = context.session_token.get_secret_value() if context is not None else ""
        return {"scope": self.config.scope, "sessionToken": session_token}

    async def fetch_user_profile(self, access_token: str) -> OktaProfile:
        """Loads and normalizes the Okta userinfo for the access token."""
        profile = await fetch_user_profile(self._client, self.endpoints.userinfo_url, access_token)
        self._debug(f"Loaded Okta profile (display name present: {profile.display_name is not None})")
        return profile
