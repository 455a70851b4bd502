#!/usr/bin/env python3
"""HTTP transport for the MaaS360 REST API.

This module provides the one piece of shared infrastructure the resource
clients need: an aiohttp session with a fixed timeout, the MaaS360
authorization header, and the translation of HTTP/transport outcomes into
typed exceptions.

Design Philosophy:
    The transport knows HOW to talk to MaaS360, but not WHAT to fetch.
    URLs are built by the resource clients, which also own the decoding
    of each response envelope. Every call performs exactly one request:
    no retry, no backoff, no caching.

Usage:
    async with MaaS360Transport(timeout=30) as transport:
        data = await transport.get(url, token=token)
"""
import asyncio
import json
import logging
from typing import Any, Optional, Union
from urllib.parse import urlsplit

import aiohttp

from .endpoints import CONTENT_TYPE_JSON, maas_token_header
from .exceptions import (
    ConnectionError,
    DecodeError,
    TimeoutError,
    TransportError,
    UnexpectedStatusError,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class MaaS360Transport:
    """Async HTTP transport shared by all MaaS360 resource clients.

    Must be used as an async context manager so the underlying session is
    opened once and closed on exit:

        async with MaaS360Transport() as transport:
            client = DeviceClient(transport)

    One transport may serve any number of concurrent callers; each call
    carries its own token and parameters.

    Attributes:
        timeout: Total per-request timeout in seconds
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        max_connections: int = 100,
        max_connections_per_host: int = 10,
    ):
        self.timeout = timeout
        self.max_connections = max_connections
        self.max_connections_per_host = max_connections_per_host
        self._session: Optional[aiohttp.ClientSession] = None

    # ----------------------------------------
    # Context Manager Protocol
    # ----------------------------------------

    async def __aenter__(self) -> "MaaS360Transport":
        """Enter async context: create the HTTP session."""
        if self._session:
            raise RuntimeError("MaaS360Transport session is already open")
        self._session = aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(
                limit=self.max_connections,
                limit_per_host=self.max_connections_per_host,
                keepalive_timeout=90,
            ),
            timeout=aiohttp.ClientTimeout(total=self.timeout),
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context: close the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    # ----------------------------------------
    # Requests
    # ----------------------------------------

    @staticmethod
    def build_headers(
        token: Optional[str] = None,
        content_type: str = CONTENT_TYPE_JSON,
    ) -> dict[str, str]:
        """Headers sent with every request; Authorization only when a token is given."""
        headers = {
            "Accept": CONTENT_TYPE_JSON,
            "Content-Type": content_type,
        }
        if token:
            headers["Authorization"] = maas_token_header(token)
        return headers

    async def request(
        self,
        method: str,
        url: str,
        *,
        token: Optional[str] = None,
        json_body: Optional[dict] = None,
        content_type: str = CONTENT_TYPE_JSON,
    ) -> dict[str, Any]:
        """Perform a single HTTP request and return the decoded JSON object.

        Args:
            method: HTTP method (GET or POST)
            url: Fully built request URL, query string included
            token: MaaS360 bearer token (omitted for authentication calls)
            json_body: Request body, JSON-encoded when given
            content_type: Value of the Content-Type header

        Returns:
            The response body as a dict ({} for an empty body)

        Raises:
            UnexpectedStatusError: If the status is not 200
            DecodeError: If the body is not a JSON object
            ConnectionError: If connection to the server fails
            TimeoutError: If the request times out
            TransportError: For any other client-side network failure
            RuntimeError: If called outside of the async context manager
        """
        if not self._session:
            raise RuntimeError(
                "MaaS360Transport must be used as async context manager: "
                "async with MaaS360Transport() as transport:"
            )

        endpoint = urlsplit(url).path
        headers = self.build_headers(token, content_type)
        data = json.dumps(json_body) if json_body is not None else None

        logger.debug(f"{method} {endpoint}")

        try:
            async with self._session.request(
                method=method,
                url=url,
                headers=headers,
                data=data,
            ) as response:
                body = await response.read()

                if response.status != 200:
                    raise UnexpectedStatusError(
                        response.status,
                        reason=response.reason,
                        endpoint=endpoint,
                        method=method,
                        response_body=body.decode("utf-8", errors="replace"),
                    )

        # ServerTimeoutError is also a ClientConnectionError; match timeouts first
        except asyncio.TimeoutError as e:
            raise TimeoutError(
                f"Request to {endpoint} timed out",
                timeout_seconds=self.timeout,
                cause=e,
            )

        except aiohttp.ClientConnectionError as e:
            host = urlsplit(url).netloc
            raise ConnectionError(
                f"Failed to connect to {host}",
                host=host,
                cause=e,
            )

        except aiohttp.ClientError as e:
            raise TransportError(
                f"Network error during {method} {endpoint}: {e}",
                cause=e,
            )

        return self.decode_body(body, endpoint)

    @staticmethod
    def decode_body(body: Union[str, bytes], endpoint: Optional[str] = None) -> dict[str, Any]:
        """Parse a UTF-8 response body that must hold a JSON object."""
        if isinstance(body, bytes):
            try:
                body = body.decode("utf-8")
            except UnicodeDecodeError as e:
                raise DecodeError(
                    f"Response body is not valid UTF-8: {e}",
                    endpoint=endpoint,
                    response_body=body.decode("utf-8", errors="replace"),
                    cause=e,
                )
        if not body or not body.strip():
            return {}
        try:
            parsed = json.loads(body)
        except ValueError as e:
            raise DecodeError(
                f"Error decoding response JSON: {e}",
                endpoint=endpoint,
                response_body=body,
                cause=e,
            )
        if not isinstance(parsed, dict):
            raise DecodeError(
                f"Expected a JSON object, got {type(parsed).__name__}",
                endpoint=endpoint,
                response_body=body,
            )
        return parsed

    async def get(
        self,
        url: str,
        *,
        token: Optional[str] = None,
        content_type: str = CONTENT_TYPE_JSON,
    ) -> dict[str, Any]:
        """Make a GET request."""
        return await self.request("GET", url, token=token, content_type=content_type)

    async def post(
        self,
        url: str,
        *,
        token: Optional[str] = None,
        json_body: Optional[dict] = None,
        content_type: str = CONTENT_TYPE_JSON,
    ) -> dict[str, Any]:
        """Make a POST request."""
        return await self.request(
            "POST",
            url,
            token=token,
            json_body=json_body,
            content_type=content_type,
        )
