"""MaaS360 API modules.

This package provides a thin async client for the IBM MaaS360 REST API:
authentication, device lookup and inventory, remote device actions and
application search.

Classes:
    MaaS360Transport: Shared aiohttp session, headers and error mapping
    TokenProvider: Password and refresh-token authentication
    DeviceClient: Device lookup, search and inventories (read operations)
    DeviceActionManager: Remote device actions (write operations)
    ApplicationClient: App catalog and installed-app search
    MaaS360Client: Facade bound to one customer's credentials
    ConsolePresenter: Human-readable console summaries

Exceptions:
    MaaS360Error: Base exception for all MaaS360 errors
    InvalidArgumentError: Caller input rejected before any request
    AuthenticationError: Authentication failures
    APIError: Non-200 responses and empty searches
    TransportError: Network connectivity issues
    DecodeError: Response body has an unexpected shape
"""
from .applications import ApplicationClient
from .auth import AuthTokens, Credentials, TokenProvider
from .client import DEFAULT_TIMEOUT, MaaS360Transport
from .device_actions import (
    ACTION_EXPIRY_SECONDS,
    CUSTOM_COMMANDS_ACTION,
    PARAMETERIZED_ACTIONS,
    SCHEDULE_OS_UPDATE_ACTION,
    DeviceActionManager,
)
from .devices import DeviceClient
from .endpoints import (
    M1,
    M2,
    M3,
    M4,
    M6,
    SERVICE_URLS,
    basic_auth,
    build_url,
    get_service_url,
)
from .exceptions import (
    ActionNotFoundError,
    APIError,
    AuthenticationError,
    ConfigurationError,
    ConnectionError,
    DecodeError,
    IncompleteAuthResponseError,
    InvalidArgumentError,
    InvalidIdentifierError,
    MaaS360Error,
    MissingActionParametersError,
    MissingCredentialError,
    NotFoundError,
    RemoteActionFailedError,
    RemoteAuthError,
    TimeoutError,
    TransportError,
    UnexpectedStatusError,
)
from .flexible import FlexibleInt, flexible_int, flexible_str
from .maas360_client import MaaS360Client, timeout_from_env
from .models import (
    ActionResult,
    CatalogApp,
    CustomAttribute,
    Device,
    DeviceAction,
    DeviceActionCatalog,
    DeviceAttribute,
    DeviceDetails,
    DeviceIdentity,
    HardwareInventory,
    InstalledApp,
    NetworkInformation,
    SearchPage,
    Software,
    SoftwareInventory,
)
from .presenter import ConsolePresenter

__all__ = [
    # Client
    "MaaS360Transport",
    "DEFAULT_TIMEOUT",
    "MaaS360Client",
    "timeout_from_env",
    # Auth
    "Credentials",
    "AuthTokens",
    "TokenProvider",
    # Endpoints
    "M1",
    "M2",
    "M3",
    "M4",
    "M6",
    "SERVICE_URLS",
    "get_service_url",
    "build_url",
    "basic_auth",
    # Resource clients
    "DeviceClient",
    "DeviceActionManager",
    "ApplicationClient",
    "ACTION_EXPIRY_SECONDS",
    "CUSTOM_COMMANDS_ACTION",
    "SCHEDULE_OS_UPDATE_ACTION",
    "PARAMETERIZED_ACTIONS",
    # Records
    "FlexibleInt",
    "flexible_int",
    "flexible_str",
    "Device",
    "DeviceDetails",
    "DeviceAttribute",
    "CustomAttribute",
    "DeviceIdentity",
    "HardwareInventory",
    "Software",
    "SoftwareInventory",
    "NetworkInformation",
    "DeviceAction",
    "DeviceActionCatalog",
    "ActionResult",
    "CatalogApp",
    "InstalledApp",
    "SearchPage",
    # Presentation
    "ConsolePresenter",
    # Exceptions
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
