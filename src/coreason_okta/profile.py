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
Mapping of Okta userinfo claims to the normalized OktaProfile.
"""

from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from coreason_okta.exceptions import MalformedResponseError, RemoteAuthError
from coreason_okta.models import OktaProfile, OktaProfileName
from coreason_okta.models_internal import OktaUserInfo
from coreason_okta.transport import safe_fetch
from coreason_okta.utils.logger import logger


def map_user_info(claims: dict[str, Any]) -> OktaProfile:
    """
    Transform raw userinfo claims into an OktaProfile.

    `display_name` is the `name` claim, falling back to `preferred_username`.
    Every claim except `sub` is optional.

    Args:
        claims: The decoded userinfo JSON object.

    Returns:
        OktaProfile: The normalized profile. The original claims are kept in `raw`.

    Raises:
        MalformedResponseError: If `sub` is missing or claims have unexpected types.
    """
    try:
        info = OktaUserInfo.model_validate(claims)
    except PydanticValidationError as e:
        raise MalformedResponseError(f"Invalid userinfo response: {e}") from e

    return OktaProfile(
        id=info.sub,
        display_name=info.name if info.name is not None else info.preferred_username,
        name=OktaProfileName(
            family_name=info.family_name,
            given_name=info.given_name,
            middle_name=info.middle_name,
        ),
        email=info.email,
        raw=dict(claims),
    )


async def fetch_user_profile(client: httpx.AsyncClient, userinfo_url: str, access_token: str) -> OktaProfile:
    """
    Fetches `/v1/userinfo` with the access token and normalizes the result.

    Raises:
        RemoteAuthError: If Okta answers with a non-success status.
        MalformedResponseError: If the body is not a JSON object with a `sub` claim.
        httpx.HTTPError: For transport failures.
    """
    response = await safe_fetch(
        client,
        "GET",
        userinfo_url,
        headers={"Authorization": f"Bearer {access_token}", "Accept": "application/json"},
    )
    if not response.is_success:
        logger.warning(f"Okta userinfo request failed with status {response.status_code}")
        raise RemoteAuthError(response.text, status_code=response.status_code)

    claims = response.json()
    if not isinstance(claims, dict):
        raise MalformedResponseError("Userinfo response is not a JSON object.")

    return map_user_info(claims)
