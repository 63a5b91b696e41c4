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
Okta OIDC authentication strategy with optional custom login form (session token exchange).
"""

__version__ = "0.1.0"
__author__ = "Gowtham A Rao"
__email__ = "gowtham.rao@coreason.ai"

from .config import OktaStrategyConfig
from .exceptions import (
    AuthorizationRedirect,
    ConfigurationError,
    CoreasonOktaError,
    MalformedResponseError,
    OAuth2CallbackError,
    RemoteAuthError,
    UrlParseError,
    ValidationError,
)
from .models import AuthenticateOptions, AuthorizationContext, OAuth2Tokens, OktaProfile, VerifyParams
from .oauth2 import OAuth2Flow
from .session import MemorySessionStore, Session
from .strategy import OktaStrategy

__all__ = [
    "AuthenticateOptions",
    "AuthorizationContext",
    "AuthorizationRedirect",
    "ConfigurationError",
    "CoreasonOktaError",
    "MalformedResponseError",
    "MemorySessionStore",
    "OAuth2CallbackError",
    "OAuth2Flow",
    "OAuth2Tokens",
    "OktaProfile",
    "OktaStrategy",
    "OktaStrategyConfig",
    "RemoteAuthError",
    "Session",
    "UrlParseError",
    "ValidationError",
    "VerifyParams",
]
