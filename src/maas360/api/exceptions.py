#!/usr/bin/env python3
"""Exception Hierarchy for the MaaS360 REST API client.

This module provides a structured exception hierarchy for every failure the
client can surface: caller mistakes, authentication problems, HTTP and
transport failures, malformed responses and vendor business-level errors.

Design Principles:
    - All exceptions inherit from MaaS360Error base class
    - Exceptions preserve context (original error, timestamps, details)
    - Validation errors are raised before any network access
    - Nothing is retried here; every error reaches the immediate caller

Exception Hierarchy:
    MaaS360Error (base)
    ├── ConfigurationError
    ├── InvalidArgumentError
    │   ├── InvalidIdentifierError
    │   └── MissingActionParametersError
    ├── AuthenticationError
    │   ├── MissingCredentialError
    │   ├── IncompleteAuthResponseError
    │   └── RemoteAuthError
    ├── APIError
    │   ├── UnexpectedStatusError
    │   └── NotFoundError
    ├── RemoteActionFailedError
    ├── ActionNotFoundError
    ├── TransportError
    │   ├── ConnectionError
    │   └── TimeoutError
    └── DecodeError
"""
from datetime import datetime, timezone
from typing import Any, Optional

MAX_BODY_LENGTH = 500

# ============================================
# Base Exception
# ============================================

class MaaS360Error(Exception):
    """Base exception for all MaaS360 client errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "REMOTE_AUTH_ERROR")
        details: Additional context as a dictionary
        timestamp: When the error occurred
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.upper()
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)
        self.cause = cause

        if cause:
            self.__cause__ = cause

    def __str__(self) -> str:
        parts = [f"[{self.code}]", self.message]
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"({detail_str})")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"details={self.details!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
        }


def _truncate(body: Optional[str]) -> Optional[str]:
    if body and len(body) > MAX_BODY_LENGTH:
        return body[:MAX_BODY_LENGTH]
    return body


# ============================================
# Configuration Errors
# ============================================

class ConfigurationError(MaaS360Error):
    """Raised when configuration is missing or invalid."""

    def __init__(
        self,
        message: str,
        missing_keys: Optional[list[str]] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if missing_keys:
            details["missing_keys"] = missing_keys
        super().__init__(
            message,
            code="CONFIGURATION_ERROR",
            details=details,
            **kwargs,
        )
        self.missing_keys = missing_keys or []


# ============================================
# Caller Input Errors
# ============================================

class InvalidArgumentError(MaaS360Error):
    """Raised when a caller-supplied input violates a precondition.

    Always raised before any request is sent.

    Attributes:
        field: Name of the offending argument
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        kwargs.setdefault("code", "INVALID_ARGUMENT")
        super().__init__(message, details=details, **kwargs)
        self.field = field


class InvalidIdentifierError(InvalidArgumentError):
    """Raised when a billing ID is empty or has an unknown leading digit."""

    def __init__(self, billing_id: str, **kwargs):
        if billing_id:
            message = f"Invalid billing ID: {billing_id}"
        else:
            message = "Billing ID cannot be empty"
        super().__init__(
            message,
            field="billing_id",
            code="INVALID_IDENTIFIER",
            **kwargs,
        )
        self.billing_id = billing_id


class MissingActionParametersError(InvalidArgumentError):
    """Raised when an action that needs additional parameters gets none."""

    def __init__(self, action_id: str, **kwargs):
        super().__init__(
            f"additionalParams must not be empty for action {action_id}",
            field="additional_params",
            code="MISSING_ACTION_PARAMETERS",
            **kwargs,
        )
        self.action_id = action_id


# ============================================
# Authentication Errors
# ============================================

class AuthenticationError(MaaS360Error):
    """Base class for authentication-related errors."""


class MissingCredentialError(AuthenticationError):
    """Raised when neither a password nor a refresh token is supplied."""

    def __init__(
        self,
        message: str = "Either password or refresh token must be provided",
        **kwargs,
    ):
        super().__init__(message, code="MISSING_CREDENTIAL", **kwargs)


class IncompleteAuthResponseError(AuthenticationError):
    """Raised when a successful auth response lacks one of the tokens."""

    def __init__(self, missing: str, **kwargs):
        details = kwargs.pop("details", {})
        details["missing"] = missing
        super().__init__(
            f"Failed to retrieve MaaS360 {missing}",
            code="INCOMPLETE_AUTH_RESPONSE",
            details=details,
            **kwargs,
        )
        self.missing = missing


class RemoteAuthError(AuthenticationError):
    """Raised when the auth envelope carries a non-zero error code.

    Attributes:
        error_code: Vendor error code from authResponse.errorCode
        error_desc: Vendor description from authResponse.errorDesc
    """

    def __init__(self, error_code: int, error_desc: str = "", **kwargs):
        details = kwargs.pop("details", {})
        details["error_code"] = error_code
        super().__init__(
            f"Error from MaaS360: {error_desc} (code: {error_code})",
            code="REMOTE_AUTH_ERROR",
            details=details,
            **kwargs,
        )
        self.error_code = error_code
        self.error_desc = error_desc


# ============================================
# API Errors
# ============================================

class APIError(MaaS360Error):
    """Base class for HTTP-level API errors.

    Attributes:
        status_code: HTTP status code (0 when no response applies)
        endpoint: API path that was called
        response_body: Raw response body (truncated)
        method: HTTP method
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        endpoint: Optional[str] = None,
        response_body: Optional[str] = None,
        method: str = "GET",
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        details["status_code"] = status_code
        if endpoint:
            details["endpoint"] = endpoint
        if method:
            details["method"] = method
        response_body = _truncate(response_body)
        if response_body:
            details["response_body"] = response_body

        kwargs.setdefault("code", f"API_ERROR_{status_code}")

        super().__init__(message, details=details, **kwargs)
        self.status_code = status_code
        self.endpoint = endpoint
        self.response_body = response_body
        self.method = method


class UnexpectedStatusError(APIError):
    """Raised when the server answers with anything other than HTTP 200."""

    def __init__(self, status_code: int, reason: Optional[str] = None, **kwargs):
        status = f"{status_code} {reason}" if reason else str(status_code)
        super().__init__(
            f"Unexpected HTTP status: {status}",
            status_code=status_code,
            code="UNEXPECTED_STATUS",
            **kwargs,
        )


class NotFoundError(APIError):
    """Raised when a search or lookup yields no records."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        **kwargs,
    ):
        message = f"No {resource_type} found"
        if resource_id:
            message = f"{resource_type} '{resource_id}' not found"

        kwargs.setdefault("status_code", 200)
        details = kwargs.pop("details", {})
        details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id

        super().__init__(message, code="NOT_FOUND", details=details, **kwargs)
        self.resource_type = resource_type
        self.resource_id = resource_id


# ============================================
# Action Errors
# ============================================

class RemoteActionFailedError(MaaS360Error):
    """Raised when an action response reports a non-zero actionStatus.

    Attributes:
        action_status: Vendor status value
        description: Vendor description of the failure
        device_id: Device the action targeted
    """

    def __init__(
        self,
        action: str,
        action_status: int,
        description: str = "",
        device_id: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        details["action"] = action
        details["action_status"] = action_status
        if device_id:
            details["device_id"] = device_id
        super().__init__(
            f"{action} failed: {description}",
            code="REMOTE_ACTION_FAILED",
            details=details,
            **kwargs,
        )
        self.action = action
        self.action_status = action_status
        self.description = description
        self.device_id = device_id


class ActionNotFoundError(MaaS360Error):
    """Raised when the device action catalog has no matching entry."""

    def __init__(self, action: str, device_id: Optional[str] = None, by: str = "ID", **kwargs):
        details = kwargs.pop("details", {})
        details["action"] = action
        if device_id:
            details["device_id"] = device_id
        super().__init__(
            f"Action with {by} {action} not found",
            code="ACTION_NOT_FOUND",
            details=details,
            **kwargs,
        )
        self.action = action
        self.device_id = device_id


# ============================================
# Transport Errors
# ============================================

class TransportError(MaaS360Error):
    """Base class for network-level failures (no HTTP response)."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("code", "TRANSPORT_ERROR")
        super().__init__(message, **kwargs)


class ConnectionError(TransportError):
    """Raised when connection to the server fails."""

    def __init__(
        self,
        message: str = "Failed to connect to server",
        host: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if host:
            details["host"] = host
        super().__init__(
            message,
            code="CONNECTION_ERROR",
            details=details,
            **kwargs,
        )


class TimeoutError(TransportError):
    """Raised when a request exceeds the transport timeout."""

    def __init__(
        self,
        message: str = "Request timed out",
        timeout_seconds: Optional[float] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if timeout_seconds:
            details["timeout_seconds"] = timeout_seconds
        super().__init__(
            message,
            code="TIMEOUT_ERROR",
            details=details,
            **kwargs,
        )


# ============================================
# Decode Errors
# ============================================

class DecodeError(MaaS360Error):
    """Raised when a response body does not match the expected JSON shape."""

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        response_body: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if endpoint:
            details["endpoint"] = endpoint
        response_body = _truncate(response_body)
        if response_body:
            details["response_body"] = response_body
        super().__init__(
            message,
            code="DECODE_ERROR",
            details=details,
            **kwargs,
        )
        self.endpoint = endpoint
        self.response_body = response_body


__all__ = [
    "MaaS360Error",
    "ConfigurationError",
    "InvalidArgumentError",
    "InvalidIdentifierError",
    "MissingActionParametersError",
    "AuthenticationError",
    "MissingCredentialError",
    "IncompleteAuthResponseError",
    "RemoteAuthError",
    "APIError",
    "UnexpectedStatusError",
    "NotFoundError",
    "RemoteActionFailedError",
    "ActionNotFoundError",
    "TransportError",
    "ConnectionError",
    "TimeoutError",
    "DecodeError",
]
