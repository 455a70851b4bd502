#!/usr/bin/env python3
"""Token authentication for the MaaS360 REST API.

This module exchanges administrator credentials for a MaaS360 access
token and refresh token. Two flows share one request shape:

    - password flow:  POST {base}/auth-apis/auth/2.0/authenticate/customer/{billingId}
    - refresh flow:   POST {base}/auth-apis/auth/2.0/refreshToken/customer/{billingId}

A password takes precedence when both are supplied. Tokens are not cached
and expiry is not tracked: callers authenticate again when a token stops
working.

Security Notes:
    - Credentials should be provided via environment variables (or .env)
    - Tokens are never logged; token_id (SHA-256 prefix) is used instead

Example:
    >>> credentials = Credentials.from_env()
    >>> async with MaaS360Transport() as transport:
    ...     tokens = await TokenProvider(transport).authenticate(credentials)
"""
import hashlib
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .client import MaaS360Transport
from .endpoints import APP_VERSION, PLATFORM_ID, build_url, get_service_url
from .exceptions import (
    ConfigurationError,
    DecodeError,
    IncompleteAuthResponseError,
    MissingCredentialError,
    RemoteAuthError,
)
from .models import section, status_value

load_dotenv()

logger = logging.getLogger(__name__)

AUTHENTICATE_PATH = "/auth-apis/auth/2.0/authenticate/customer/{billing_id}"
REFRESH_TOKEN_PATH = "/auth-apis/auth/2.0/refreshToken/customer/{billing_id}"

REQUIRED_ENV_VARS = {
    "billing_id": "MAAS360_BILLING_ID",
    "app_id": "MAAS360_APP_ID",
    "access_key": "MAAS360_ACCESS_KEY",
    "username": "MAAS360_USERNAME",
}


@dataclass
class Credentials:
    """Administrator credentials for one MaaS360 customer.

    Exactly one of password or refresh_token is needed; if both are set the
    password flow is used.

    Attributes:
        billing_id: Customer billing ID (also selects the service instance)
        app_id: Application ID registered for API access
        access_key: Application access key
        username: Administrator username
        password: Administrator password
        refresh_token: Refresh token from an earlier authentication
    """
    billing_id: str
    app_id: str
    access_key: str
    username: str
    password: Optional[str] = None
    refresh_token: Optional[str] = None
    platform_id: str = PLATFORM_ID
    app_version: str = APP_VERSION

    @classmethod
    def from_env(cls) -> "Credentials":
        """Build credentials from MAAS360_* environment variables.

        Raises:
            ConfigurationError: If a required variable is missing.
        """
        values = {attr: os.getenv(env) for attr, env in REQUIRED_ENV_VARS.items()}
        missing = [REQUIRED_ENV_VARS[attr] for attr, value in values.items() if not value]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}",
                missing_keys=missing,
            )
        return cls(
            password=os.getenv("MAAS360_PASSWORD") or None,
            refresh_token=os.getenv("MAAS360_REFRESH_TOKEN") or None,
            **values,
        )

    @property
    def uses_password(self) -> bool:
        return bool(self.password)

    def to_api(self) -> dict:
        """Wrap the credentials in the vendor's authRequest envelope."""
        auth = {
            "billingID": self.billing_id,
            "platformID": self.platform_id,
            "appVersion": self.app_version,
            "appID": self.app_id,
            "appAccessKey": self.access_key,
            "userName": self.username,
        }
        if self.password:
            auth["password"] = self.password
        elif self.refresh_token:
            auth["refreshToken"] = self.refresh_token
        return {"authRequest": {"maaS360AdminAuth": auth}}

    def __repr__(self) -> str:
        return (
            f"Credentials(billing_id={self.billing_id!r}, app_id={self.app_id!r}, "
            f"username={self.username!r}, password={'***' if self.password else None}, "
            f"refresh_token={'***' if self.refresh_token else None})"
        )


@dataclass(frozen=True)
class AuthTokens:
    """Access and refresh token pair returned by a successful authentication.

    Attributes:
        access_token: Token presented as ``MaaS token="..."`` on every call
        refresh_token: Token accepted by the refresh flow
    """
    access_token: str
    refresh_token: str

    @property
    def token_id(self) -> str:
        """Safe identifier for logging (SHA-256 hash, first 8 chars)."""
        return hashlib.sha256(self.access_token.encode()).hexdigest()[:8]

    def __repr__(self) -> str:
        return f"AuthTokens(token_id={self.token_id!r})"


class TokenProvider:
    """Obtain MaaS360 tokens through the shared transport.

    Attributes:
        transport: MaaS360Transport used for the POST
    """

    def __init__(self, transport: MaaS360Transport):
        self.transport = transport

    async def authenticate(self, credentials: Credentials) -> AuthTokens:
        """Exchange credentials (or a refresh token) for a token pair.

        Args:
            credentials: Credentials carrying a password or a refresh token

        Returns:
            AuthTokens with both tokens non-empty

        Raises:
            MissingCredentialError: If neither password nor refresh token is set
            InvalidIdentifierError: If the billing ID selects no instance
            RemoteAuthError: If the response envelope has a non-zero errorCode
            IncompleteAuthResponseError: If a token is missing from the response
            UnexpectedStatusError, DecodeError, TransportError: From the transport
        """
        if not credentials.password and not credentials.refresh_token:
            raise MissingCredentialError()

        service_url = get_service_url(credentials.billing_id)
        path = AUTHENTICATE_PATH if credentials.uses_password else REFRESH_TOKEN_PATH
        url = build_url(service_url, path.format(billing_id=credentials.billing_id))

        flow = "password" if credentials.uses_password else "refresh token"
        logger.debug(f"Authenticating billing ID {credentials.billing_id} via {flow}")

        data = await self.transport.post(url, json_body=credentials.to_api())
        if "authResponse" not in data:
            raise DecodeError("Response has no authResponse envelope", endpoint=url)
        response = section(data, "authResponse", url)

        error_code = status_value(response.get("errorCode"), "errorCode", url)
        if error_code != 0:
            error_desc = response.get("errorDesc") or ""
            logger.warning(f"MaaS360 rejected authentication (code {error_code}): {error_desc}")
            raise RemoteAuthError(error_code, error_desc)

        access_token = response.get("authToken") or ""
        refresh_token = response.get("refreshToken") or ""
        if not access_token:
            raise IncompleteAuthResponseError("auth token")
        if not refresh_token:
            raise IncompleteAuthResponseError("refresh token")

        tokens = AuthTokens(access_token=access_token, refresh_token=refresh_token)
        logger.info(f"Token issued (id={tokens.token_id}) for billing ID {credentials.billing_id}")
        return tokens
