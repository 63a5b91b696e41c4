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
Cookie-backed session storage used by the authentication flow.
"""

import secrets
from http.cookies import CookieError, SimpleCookie
from typing import Any, Protocol

from coreason_okta.utils.logger import logger


class Session:
    """
    Key/value data attached to one browser session.

    Attributes:
        id (str): The session identifier stored in the cookie.
    """

    def __init__(self, session_id: str, data: dict[str, Any] | None = None) -> None:
        self.id = session_id
        self._data: dict[str, Any] = dict(data or {})

    @property
    def data(self) -> dict[str, Any]:
        return dict(self._data)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def has(self, key: str) -> bool:
        return key in self._data

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def unset(self, key: str) -> None:
        self._data.pop(key, None)


class SessionStoreProtocol(Protocol):
    """Protocol for the host's session storage."""

    async def get_session(self, cookie_header: str | None) -> Session:
        """Loads the session referenced by the Cookie header, or a new empty one."""
        ...

    async def commit_session(self, session: Session) -> str:
        """Persists the session and returns the Set-Cookie header value."""
        ...

    async def destroy_session(self, session: Session) -> str:
        """Deletes the session and returns a Set-Cookie header value that expires the cookie."""
        ...


class MemorySessionStore:
    """
    In-memory implementation of SessionStoreProtocol.
    Data lives in this process only. Not suitable for distributed systems.
    """

    def __init__(self, cookie_name: str = "__session", secure: bool = True) -> None:
        self.cookie_name = cookie_name
        self.secure = secure
        self._sessions: dict[str, dict[str, Any]] = {}

    def _read_session_id(self, cookie_header: str | None) -> str | None:
        if not cookie_header:
            return None
        cookie: SimpleCookie = SimpleCookie()
        try:
            cookie.load(cookie_header)
        except CookieError:
            logger.debug("Ignoring unparsable Cookie header")
            return None
        morsel = cookie.get(self.cookie_name)
        return morsel.value if morsel else None

    def _serialize(self, value: str, max_age: int | None = None) -> str:
        parts = [f"{self.cookie_name}={value}", "Path=/", "HttpOnly", "SameSite=Lax"]
        if self.secure:
            parts.append("Secure")
        if max_age is not None:
            parts.append(f"Max-Age={max_age}")
        return "; ".join(parts)

    async def get_session(self, cookie_header: str | None) -> Session:
        session_id = self._read_session_id(cookie_header)
        if session_id and session_id in self._sessions:
            return Session(session_id, self._sessions[session_id])
        return Session(secrets.token_urlsafe(32))

    async def commit_session(self, session: Session) -> str:
        self._sessions[session.id] = session.data
        return self._serialize(session.id)

    async def destroy_session(self, session: Session) -> str:
        self._sessions.pop(session.id, None)
        return self._serialize("", max_age=0)
