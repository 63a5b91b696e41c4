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
Bounded HTTP helpers shared by every call to Okta.
"""

import json
from dataclasses import dataclass
from typing import Any

import httpx

from coreason_okta.exceptions import MalformedResponseError, OversizedResponseError

MAX_RESPONSE_BYTES = 1_000_000


@dataclass(frozen=True)
class FetchedResponse:
    status_code: int
    content: bytes

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """
        Parses the body as JSON.

        Raises:
            MalformedResponseError: If the body is not valid JSON.
        """
        try:
            return json.loads(self.content)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedResponseError(f"Expected a JSON body, got: {self.text[:200]!r}") from e


async def safe_fetch(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    max_bytes: int = MAX_RESPONSE_BYTES,
    **kwargs: Any,
) -> FetchedResponse:
    """
    Performs one request and reads the body with a size cap, whatever the status code.

    Args:
        client: The async HTTP client to use.
        method: The HTTP method.
        url: The target URL.
        max_bytes: Maximum accepted body size.
        **kwargs: Passed through to `client.stream` (headers, json, content, ...).

    Returns:
        FetchedResponse: The status code and raw body.

    Raises:
        OversizedResponseError: If the declared or actual body exceeds `max_bytes`.
        httpx.HTTPError: For transport failures (timeouts, connection errors).
    """
    async with client.stream(method, url, **kwargs) as response:
        content_length = response.headers.get("Content-Length")
        if content_length:
            try:
                if int(content_length) > max_bytes:
                    raise OversizedResponseError(f"Response from {url} too large")
            except ValueError:
                pass

        content = bytearray()
        async for chunk in response.aiter_bytes():
            content.extend(chunk)
            if len(content) > max_bytes:
                raise OversizedResponseError(f"Response from {url} too large")

        return FetchedResponse(status_code=response.status_code, content=bytes(content))
