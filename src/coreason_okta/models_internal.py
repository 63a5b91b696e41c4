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
Internal data models for the coreason-okta package.
These are not exposed in the public API.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class OktaEndpoints(BaseModel):
    """
    URLs derived once from the strategy configuration.
    """

    model_config = ConfigDict(frozen=True)

    mode: Literal["issuer", "domain"] = Field(..., description="Which configuration root the OAuth2 URLs came from.")
    authorization_url: str
    token_url: str
    userinfo_url: str
    authentication_api_url: str = Field(default="", description="Empty unless the custom login form is enabled.")


class AuthnResponse(BaseModel):
    """
    Success body of POST /api/v1/authn. Only the session token is consumed.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    session_token: str = Field(..., alias="sessionToken", min_length=1)
    status: str | None = None


class OktaUserInfo(BaseModel):
    """
    Claims returned by Okta's /v1/userinfo endpoint.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    sub: str = Field(..., min_length=1)
    name: str | None = None
    preferred_username: str | None = None
    nickname: str | None = None
    given_name: str | None = None
    middle_name: str | None = None
    family_name: str | None = None
    profile: str | None = None
    zoneinfo: str | None = None
    locale: str | None = None
    updated_at: Any = None
    email: str | None = None
    email_verified: bool | None = None


class TokenEndpointResponse(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    access_token: str = Field(..., min_length=1)
    token_type: str = "Bearer"
    refresh_token: str | None = None
    id_token: str | None = None
    expires_in: int | None = None
    scope: str | None = None
