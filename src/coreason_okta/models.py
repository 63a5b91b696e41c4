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
Data models for the coreason-okta package.
"""

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, SecretStr
from pydantic.alias_generators import to_camel

ProfileT = TypeVar("ProfileT")


class OktaProfileName(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    family_name: str | None = None
    given_name: str | None = None
    middle_name: str | None = None


class OktaProfile(BaseModel):
    """
    Normalized user profile built from Okta's userinfo response.

    Dump with `model_dump(by_alias=True)` to get the camelCase shape
    (`displayName`, `name.familyName`, ...).
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "provider": "okta",
                "id": "00u1abcd",
                "displayName": "Alice Smith",
                "name": {"familyName": "Smith", "givenName": "Alice", "middleName": None},
                "email": "alice@coreason.ai",
            }
        },
    )

    provider: Literal["okta"] = "okta"
    id: str = Field(..., description="The immutable Okta subject ID ('sub').")
    display_name: str | None = Field(default=None, description="The 'name' claim, or 'preferred_username'.")
    name: OktaProfileName = Field(default_factory=OktaProfileName)
    email: str | None = None
    raw: dict[str, Any] = Field(default_factory=dict, repr=False, exclude=True)


class AuthenticateOptions(BaseModel):
    """
    Options passed by the host on every authenticate() call.

    Attributes:
        name (str): The strategy name the host registered.
        session_key (str): Session key under which the host persists the authenticated user.
    """

    model_config = ConfigDict(frozen=True)

    name: str = "okta"
    session_key: str = "user"


class AuthorizationContext(BaseModel):
    """
    Per-call values threaded from the credential exchange to the authorization redirect.

    A fresh instance is built for every authenticate() call; it is never stored on the strategy.
    """

    model_config = ConfigDict(frozen=True)

    session_token: SecretStr = SecretStr("")


class OAuth2Tokens(BaseModel):
    """
    Tokens returned by the token endpoint.

    Attributes:
        access_token (SecretStr): The access token.
        refresh_token (SecretStr | None): The refresh token, if issued.
        id_token (str | None): The ID token, if issued.
        token_type (str): The token type (e.g. "Bearer").
        expires_in (int | None): Lifetime of the access token in seconds.
        scope (str | None): Granted scopes.
        extra_params (dict[str, Any]): Any other fields returned by the token endpoint.
    """

    model_config = ConfigDict(frozen=True)

    access_token: SecretStr
    refresh_token: SecretStr | None = None
    id_token: str | None = None
    token_type: str = "Bearer"
    expires_in: int | None = None
    scope: str | None = None
    extra_params: dict[str, Any] = Field(default_factory=dict)


class VerifyParams(BaseModel, Generic[ProfileT]):
    """Arguments handed to the application's verify callback."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    tokens: OAuth2Tokens
    profile: ProfileT
    context: AuthorizationContext
    request: Any = Field(default=None, repr=False)
