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
Generic OAuth2 authorization-code flow that provider strategies compose with.
"""

from typing import Any, Generic, TypeVar

import httpx
from authlib.common.security import generate_token
from authlib.oauth2.rfc6749.parameters import prepare_grant_uri, prepare_token_request
from pydantic import SecretStr
from pydantic import ValidationError as PydanticValidationError

from coreason_okta.endpoints import get_callback_url_from
from coreason_okta.exceptions import (
    AuthorizationRedirect,
    MalformedResponseError,
    OAuth2CallbackError,
    RemoteAuthError,
)
from coreason_okta.models import AuthenticateOptions, AuthorizationContext, OAuth2Tokens, VerifyParams
from coreason_okta.models_internal import TokenEndpointResponse
from coreason_okta.protocols import IncomingRequest, OAuth2ProviderHooks, VerifyCallback
from coreason_okta.session import SessionStoreProtocol
from coreason_okta.transport import safe_fetch
from coreason_okta.utils.logger import debug_log, logger

UserT = TypeVar("UserT")

STATE_SESSION_KEY = "oauth2:state"


class OAuth2Flow(Generic[UserT]):
    """
    Authorization-code flow: redirect to the authorization endpoint, then exchange
    the returned code for tokens, load the profile and hand both to `verify`.

    The flow keeps no per-request state; everything request-specific travels in
    the session, the request and the AuthorizationContext argument.

    Attributes:
        authorization_url (str): The authorization endpoint.
        token_url (str): The token endpoint.
        client_id (str): The OAuth2 client ID.
        callback_url (str): The configured redirect URI (absolute, path or bare host).
        debug (bool): Emits flow debug messages when set.
    """

    def __init__(
        self,
        authorization_url: str,
        token_url: str,
        client_id: str,
        client_secret: SecretStr,
        callback_url: str,
        verify: VerifyCallback[UserT],
        client: httpx.AsyncClient,
        debug: bool = False,
    ) -> None:
        self.authorization_url = authorization_url
        self.token_url = token_url
        self.client_id = client_id
        self.client_secret = client_secret
        self.callback_url = callback_url
        self.verify = verify
        self.client = client
        self.debug = debug

    async def authenticate(
        self,
        request: IncomingRequest,
        session_store: SessionStoreProtocol,
        options: AuthenticateOptions,
        hooks: OAuth2ProviderHooks[Any],
        context: AuthorizationContext,
    ) -> UserT:
        """
        Runs one step of the flow for the given request.

        Returns:
            The user produced by the verify callback, or the one already in the session.

        Raises:
            AuthorizationRedirect: When the request is not the callback; the host must redirect.
            OAuth2CallbackError: If the callback carries an error, no code, or a mismatched state.
            RemoteAuthError: If the token endpoint rejects the code.
            MalformedResponseError: If the token response has no access token.
        """
        session = await session_store.get_session(request.headers.get("cookie"))

        user = session.get(options.session_key)
        if user is not None:
            return user  # type: ignore[no-any-return]

        url = httpx.URL(str(request.url))
        callback = get_callback_url_from(self.callback_url, url)

        if url.path != callback.path:
            state = generate_token(32)
            session.set(STATE_SESSION_KEY, state)
            params = dict(hooks.authorization_params(context))
            scope = params.pop("scope", None)
            location = prepare_grant_uri(
                self.authorization_url,
                self.client_id,
                "code",
                redirect_uri=str(callback),
                scope=scope,
                state=state,
                **params,
            )
            cookie = await session_store.commit_session(session)
            debug_log(self.debug, f"Redirecting to authorization endpoint {self.authorization_url}")
            raise AuthorizationRedirect(location, headers={"Set-Cookie": cookie})

        error = url.params.get("error")
        if error:
            description = url.params.get("error_description", "")
            raise OAuth2CallbackError(f"Authorization failed: {error} {description}".strip())

        code = url.params.get("code")
        if not code:
            raise OAuth2CallbackError("Missing code.")

        expected_state = session.get(STATE_SESSION_KEY)
        if not expected_state or url.params.get("state") != expected_state:
            raise OAuth2CallbackError("State doesn't match.")

        # The state is single use.
        session.unset(STATE_SESSION_KEY)
        await session_store.commit_session(session)

        tokens = await self.fetch_tokens(code, str(callback))
        profile = await hooks.fetch_user_profile(tokens.access_token.get_secret_value())
        return await self.verify(VerifyParams(tokens=tokens, profile=profile, context=context, request=request))

    async def fetch_tokens(self, code: str, redirect_uri: str) -> OAuth2Tokens:
        """
        Exchanges an authorization code at the token endpoint.

        Args:
            code: The authorization code from the callback.
            redirect_uri: The redirect URI used on the authorization request.

        Returns:
            OAuth2Tokens: The issued tokens.

        Raises:
            RemoteAuthError: If the token endpoint answers with a non-success status.
            MalformedResponseError: If the body is not a token response.
        """
        body = prepare_token_request(
            "authorization_code",
            redirect_uri=redirect_uri,
            code=code,
            client_id=self.client_id,
            client_secret=self.client_secret.get_secret_value(),
        )
        response = await safe_fetch(
            self.client,
            "POST",
            self.token_url,
            content=body,
            headers={"Content-Type": "application/x-www-form-urlencoded", "Accept": "application/json"},
        )
        if not response.is_success:
            logger.warning(f"Token endpoint returned status {response.status_code}")
            raise RemoteAuthError(response.text, status_code=response.status_code)

        data = response.json()
        if not isinstance(data, dict):
            raise MalformedResponseError("Token response is not a JSON object.")
        try:
            parsed = TokenEndpointResponse.model_validate(data)
        except PydanticValidationError as e:
            raise MalformedResponseError(f"Invalid token response: {e}") from e

        known = set(TokenEndpointResponse.model_fields)
        return OAuth2Tokens(
            access_token=SecretStr(parsed.access_token),
            refresh_token=SecretStr(parsed.refresh_token) if parsed.refresh_token else None,
            id_token=parsed.id_token,
            token_type=parsed.token_type,
            expires_in=parsed.expires_in,
            scope=parsed.scope,
            extra_params={k: v for k, v in data.items() if k not in known},
        )
