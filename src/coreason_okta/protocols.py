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
Interfaces between the strategy and its host application.
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol, TypeVar

from coreason_okta.models import AuthorizationContext, VerifyParams

ProfileT_co = TypeVar("ProfileT_co", covariant=True)
UserT = TypeVar("UserT")


class HeadersProtocol(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...


class IncomingRequest(Protocol):
    """
    The parts of an inbound HTTP request the strategy reads.
    Starlette's `Request` satisfies this protocol.
    """

    @property
    def url(self) -> Any:
        """The full request URL; anything whose str() is an absolute URL."""
        ...

    @property
    def headers(self) -> HeadersProtocol: ...

    async def form(self) -> Mapping[str, Any]:
        """The parsed form body."""
        ...


class OAuth2ProviderHooks(Protocol[ProfileT_co]):
    """Provider-specific pieces plugged into the generic authorization-code flow."""

    def authorization_params(self, context: AuthorizationContext | None = None) -> dict[str, str]:
        """Extra query parameters for the authorization redirect."""
        ...

    async def fetch_user_profile(self, access_token: str) -> ProfileT_co:
        """Loads the user's profile once the code has been exchanged."""
        ...


VerifyCallback = Callable[[VerifyParams[Any]], Awaitable[UserT]]
