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
Exchange of form credentials for a one-time Okta session token (Authentication API).
"""

import httpx
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
from pydantic import SecretStr
from pydantic import ValidationError as PydanticValidationError

from coreason_okta.exceptions import MalformedResponseError, RemoteAuthError
from coreason_okta.models_internal import AuthnResponse
from coreason_okta.transport import safe_fetch
from coreason_okta.utils.logger import anonymize, logger

tracer = trace.get_tracer(__name__)


async def exchange_credentials(
    client: httpx.AsyncClient,
    authn_url: str,
    email: str,
    password: str,
    pii_salt: SecretStr,
) -> str:
    """
    POSTs the credentials to `/api/v1/authn` and returns the session token.

    One attempt only, bounded by the client's timeout.

    Emits an OpenTelemetry span `okta.exchange_credentials` with the anonymized username.

    Args:
        client: The async HTTP client to use.
        authn_url: The Authentication API URL.
        email: The username submitted in the login form.
        password: The password submitted in the login form.
        pii_salt: Salt used to anonymize the username in logs and spans.

    Returns:
        str: The one-time session token.

    Raises:
        RemoteAuthError: If Okta answers with a non-success status; the body is the message.
        MalformedResponseError: If the success body has no `sessionToken`.
        OversizedResponseError: If the response body is too large.
        httpx.HTTPError: For transport failures.
    """
    user_hash = anonymize(email, pii_salt)
    with tracer.start_as_current_span("okta.exchange_credentials") as span:
        span.set_attribute("enduser.id", user_hash)

        response = await safe_fetch(
            client,
            "POST",
            authn_url,
            json={"username": email, "password": password},
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )
        span.set_attribute("http.response.status_code", response.status_code)

        if not response.is_success:
            logger.warning(f"Okta rejected credentials for user {user_hash} (status {response.status_code})")
            span.set_status(Status(StatusCode.ERROR, f"authn returned {response.status_code}"))
            raise RemoteAuthError(response.text, status_code=response.status_code)

        data = response.json()
        if not isinstance(data, dict):
            span.set_status(Status(StatusCode.ERROR, "authn body is not an object"))
            raise MalformedResponseError("Authentication API response is not a JSON object.")

        try:
            authn = AuthnResponse.model_validate(data)
        except PydanticValidationError as e:
            # Factor challenges (MFA_REQUIRED, ...) come back without a session token
            status = data.get("status", "unknown")
            span.set_status(Status(StatusCode.ERROR, "missing sessionToken"))
            raise MalformedResponseError(
                f"Authentication API response (status {status}) does not contain a sessionToken."
            ) from e

        logger.info(f"Obtained Okta session token for user {user_hash}")
        span.set_status(Status(StatusCode.OK))
        return authn.session_token
