#!/usr/bin/env python3
"""High-level MaaS360 client.

MaaS360Client composes the transport, the token provider and the resource
clients behind one object that remembers the billing ID, the service URL
and the current token pair. It adds no behaviour of its own: every method
delegates to exactly one resource-client call.

Features:
    - Async context manager that owns the transport when none is injected
    - authenticate() stores the token pair for later calls
    - Explicit token override on every call for callers that manage tokens

Example:
    async with MaaS360Client(Credentials.from_env()) as client:
        await client.authenticate()
        devices = await client.search_devices({"platformName": "Android"})
"""
import logging
import os
from datetime import datetime
from typing import Mapping, Optional

from .applications import ApplicationClient
from .auth import AuthTokens, Credentials, TokenProvider
from .client import DEFAULT_TIMEOUT, MaaS360Transport
from .device_actions import DEFAULT_REQUESTER_WORKFLOW, DeviceActionManager
from .devices import DeviceClient
from .endpoints import basic_auth, get_service_url
from .exceptions import ConfigurationError, MissingCredentialError
from .models import (
    ActionResult,
    CatalogApp,
    Device,
    DeviceActionCatalog,
    DeviceAttribute,
    DeviceDetails,
    DeviceIdentity,
    HardwareInventory,
    InstalledApp,
    SearchPage,
    SoftwareInventory,
)

logger = logging.getLogger(__name__)


def timeout_from_env(default: float = DEFAULT_TIMEOUT) -> float:
    """Read MAAS360_TIMEOUT (seconds), falling back to default.

    Raises:
        ConfigurationError: If the variable is set but not a positive number
    """
    raw = os.getenv("MAAS360_TIMEOUT")
    if not raw:
        return default
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigurationError(
            f"MAAS360_TIMEOUT must be a number of seconds, got {raw!r}",
            missing_keys=["MAAS360_TIMEOUT"],
        ) from None
    if timeout <= 0:
        raise ConfigurationError(
            f"MAAS360_TIMEOUT must be positive, got {raw!r}",
            missing_keys=["MAAS360_TIMEOUT"],
        )
    return timeout


class MaaS360Client:
    """One-stop client bound to a single MaaS360 customer.

    Attributes:
        credentials: Credentials used by authenticate()
        service_url: Base URL resolved from the billing ID
        tokens: Token pair from the last successful authenticate()
    """

    def __init__(
        self,
        credentials: Credentials,
        transport: Optional[MaaS360Transport] = None,
        timeout: Optional[float] = None,
        requester_workflow: str = DEFAULT_REQUESTER_WORKFLOW,
    ):
        self.credentials = credentials
        self.service_url = get_service_url(credentials.billing_id)
        self.tokens: Optional[AuthTokens] = None

        self._owns_transport = transport is None
        self.transport = transport or MaaS360Transport(
            timeout=timeout if timeout is not None else DEFAULT_TIMEOUT
        )

        self.token_provider = TokenProvider(self.transport)
        self.devices = DeviceClient(self.transport)
        self.actions = DeviceActionManager(self.transport, requester_workflow=requester_workflow)
        self.applications = ApplicationClient(self.transport)

    @property
    def billing_id(self) -> str:
        return self.credentials.billing_id

    # ----------------------------------------
    # Context Manager Protocol
    # ----------------------------------------

    async def __aenter__(self) -> "MaaS360Client":
        if self._owns_transport:
            await self.transport.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._owns_transport:
            await self.transport.__aexit__(exc_type, exc_val, exc_tb)

    # ----------------------------------------
    # Authentication
    # ----------------------------------------

    async def authenticate(self) -> AuthTokens:
        """Authenticate with the stored credentials and keep the token pair."""
        self.tokens = await self.token_provider.authenticate(self.credentials)
        return self.tokens

    def basic_auth(self) -> str:
        """Basic-Auth header value for the stored username and password."""
        return basic_auth(self.credentials.username, self.credentials.password or "")

    def _token(self, token: Optional[str]) -> str:
        if token:
            return token
        if self.tokens is None:
            raise MissingCredentialError("Not authenticated: call authenticate() first")
        return self.tokens.access_token

    # ----------------------------------------
    # Devices
    # ----------------------------------------

    async def get_device(self, device_id: str, token: Optional[str] = None) -> DeviceDetails:
        return await self.devices.get_device(
            self.billing_id, device_id, self._token(token), service_url=self.service_url
        )

    async def search_devices(
        self,
        filters: Optional[Mapping[str, str]] = None,
        token: Optional[str] = None,
    ) -> list[Device]:
        return await self.devices.search_devices(
            self.billing_id, self._token(token), filters, service_url=self.service_url
        )

    async def search_devices_page(
        self,
        filters: Optional[Mapping[str, str]] = None,
        token: Optional[str] = None,
    ) -> SearchPage[Device]:
        return await self.devices.search_devices_page(
            self.billing_id, self._token(token), filters, service_url=self.service_url
        )

    async def get_device_identity(self, device_id: str, token: Optional[str] = None) -> DeviceIdentity:
        return await self.devices.get_device_identity(
            self.billing_id, device_id, self._token(token), service_url=self.service_url
        )

    async def get_hardware_inventory(
        self, device_id: str, token: Optional[str] = None
    ) -> HardwareInventory:
        return await self.devices.get_hardware_inventory(
            self.billing_id, device_id, self._token(token), service_url=self.service_url
        )

    async def get_software_installed(
        self, device_id: str, token: Optional[str] = None
    ) -> SoftwareInventory:
        return await self.devices.get_software_installed(
            self.billing_id, device_id, self._token(token), service_url=self.service_url
        )

    async def get_network_info(
        self, device_id: str, token: Optional[str] = None
    ) -> list[DeviceAttribute]:
        return await self.devices.get_network_info(
            self.billing_id, device_id, self._token(token), service_url=self.service_url
        )

    # ----------------------------------------
    # Device Actions
    # ----------------------------------------

    async def get_device_actions(
        self, device_id: str, token: Optional[str] = None
    ) -> DeviceActionCatalog:
        return await self.actions.get_device_actions(
            self.billing_id, device_id, self._token(token), service_url=self.service_url
        )

    async def perform_device_action(
        self,
        device_id: str,
        action_id: str,
        additional_params: Optional[Mapping[str, str]] = None,
        token: Optional[str] = None,
    ) -> ActionResult:
        return await self.actions.perform_device_action(
            self.billing_id,
            device_id,
            action_id,
            additional_params,
            self._token(token),
            service_url=self.service_url,
        )

    async def perform_action_by_name(
        self,
        device_id: str,
        action_name: str,
        additional_params: Optional[Mapping[str, str]] = None,
        token: Optional[str] = None,
    ) -> ActionResult:
        return await self.actions.perform_action_by_name(
            self.billing_id,
            device_id,
            action_name,
            additional_params,
            self._token(token),
            service_url=self.service_url,
        )

    async def invoke_action(
        self,
        device_id: str,
        action_id: str,
        action_name: str,
        additional_params: Optional[Mapping[str, str]] = None,
        token: Optional[str] = None,
    ) -> ActionResult:
        return await self.actions.invoke_action(
            self.billing_id,
            device_id,
            action_id,
            action_name,
            self._token(token),
            additional_params=additional_params,
            service_url=self.service_url,
        )

    async def send_message(
        self,
        device_id: str,
        subject: str,
        message: str,
        token: Optional[str] = None,
    ) -> ActionResult:
        return await self.actions.send_message(
            self.billing_id,
            device_id,
            subject,
            message,
            self._token(token),
            service_url=self.service_url,
        )

    async def lock_device(self, device_id: str, token: Optional[str] = None) -> ActionResult:
        return await self.actions.lock_device(
            self.billing_id, device_id, self._token(token), service_url=self.service_url
        )

    async def hide_device(self, device_id: str, token: Optional[str] = None) -> ActionResult:
        return await self.actions.hide_device(
            self.billing_id, device_id, self._token(token), service_url=self.service_url
        )

    async def update_os(
        self,
        device_id: str,
        os_version: str,
        target_local_time: datetime,
        token: Optional[str] = None,
    ) -> ActionResult:
        return await self.actions.update_os(
            self.billing_id,
            device_id,
            os_version,
            target_local_time,
            self._token(token),
            service_url=self.service_url,
        )

    # ----------------------------------------
    # Applications
    # ----------------------------------------

    async def search_catalog(
        self, filters: Mapping[str, str], token: Optional[str] = None
    ) -> list[CatalogApp]:
        return await self.applications.search_catalog(
            self.billing_id, self._token(token), filters, service_url=self.service_url
        )

    async def search_catalog_page(
        self, filters: Mapping[str, str], token: Optional[str] = None
    ) -> SearchPage[CatalogApp]:
        return await self.applications.search_catalog_page(
            self.billing_id, self._token(token), filters, service_url=self.service_url
        )

    async def search_installed_apps(
        self, filters: Mapping[str, str], token: Optional[str] = None
    ) -> list[InstalledApp]:
        return await self.applications.search_installed_apps(
            self.billing_id, self._token(token), filters, service_url=self.service_url
        )

    async def search_installed_apps_page(
        self, filters: Mapping[str, str], token: Optional[str] = None
    ) -> SearchPage[InstalledApp]:
        return await self.applications.search_installed_apps_page(
            self.billing_id, self._token(token), filters, service_url=self.service_url
        )
