"""Human-readable console output for MaaS360 records.

The resource clients never print. The CLI hands their results to a
ConsolePresenter, which writes one summary per call to its stream.
"""
import sys
from datetime import datetime
from typing import Any, Iterable, Optional, TextIO

from .auth import AuthTokens
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
    SoftwareInventory,
)

VENDOR_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"
RFC1123_FORMAT = "%a, %d %b %Y %H:%M:%S UTC"


def mask_token(token: str, visible: int = 4) -> str:
    """Show only the last few characters of a token."""
    if not token:
        return ""
    if len(token) <= visible:
        return "*" * len(token)
    return "*" * (len(token) - visible) + token[-visible:]


def format_attribute_value(value: Any, parse_times: bool = False) -> str:
    """Render one attribute value the way the console summaries show it.

    Floats get two decimals, booleans are lowercase, missing values are
    ``<nil>``. With parse_times, vendor timestamps become RFC 1123 dates.
    """
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return f"{value:.2f}"
    if isinstance(value, str) and parse_times:
        try:
            return datetime.strptime(value, VENDOR_TIME_FORMAT).strftime(RFC1123_FORMAT)
        except ValueError:
            return value
    return str(value)


class ConsolePresenter:
    """Write summaries of MaaS360 results to a text stream.

    Attributes:
        stream: Destination for output (stdout unless injected)
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout

    def _line(self, text: str = "") -> None:
        print(text, file=self.stream)

    def _attributes(self, attributes: Iterable[DeviceAttribute], parse_times: bool = False) -> None:
        for attr in attributes:
            self._line(f" {attr.key}: {format_attribute_value(attr.value, parse_times)}")

    # ----------------------------------------
    # Authentication
    # ----------------------------------------

    def show_tokens(self, tokens: AuthTokens, reveal: bool = False) -> None:
        access = tokens.access_token if reveal else mask_token(tokens.access_token)
        refresh = tokens.refresh_token if reveal else mask_token(tokens.refresh_token)
        self._line(f"Auth Token: {access}")
        self._line(f"Refresh Token: {refresh}")

    def show_basic_auth(self, header: str) -> None:
        self._line(f"Basic Auth: {header}" if header else "Basic Auth: <unavailable>")

    # ----------------------------------------
    # Devices
    # ----------------------------------------

    def show_devices(self, devices: list[Device]) -> None:
        self._line(f"Found {len(devices)} devices")
        for device in devices:
            self._line(
                f"Device Name: {device.device_name}, CSN: {device.maas360_device_id or ''}, "
                f"Status: {device.device_status}"
            )

    def show_device(self, device: DeviceDetails) -> None:
        self._line(f"Device ID: {device.maas360_device_id or ''}")
        self._line(f" Name: {device.device_name}")
        self._line(f" Owner: {device.device_owner}")
        self._line(f" Username: {device.username}")
        self._line(f" Platform: {device.platform_name}")
        self._line(f" Model: {device.manufacturer} {device.model}".rstrip())
        self._line(f" OS: {device.os_name}")
        self._line(f" Status: {device.device_status}")
        self._line(f" Last Reported: {device.last_reported}")

    def show_identity(self, device_id: str, identity: DeviceIdentity) -> None:
        self._line(f"Device Attributes for Device ID {device_id}:")
        self._line(f" Ownership: {identity.ownership}")
        self._line(f" Office: {identity.office}")
        self._line(f" Department: {identity.department}")
        self._line(f" Vendor: {identity.vendor}")
        self._line(f" PO Number: {identity.po_number}")
        self._line(f" Purchase Type: {identity.purchase_type}")
        self._line(f" Purchase Date: {identity.purchase_date}")
        self._line(f" Purchase Price: {identity.purchase_price}")
        self._line(f" Warranty Number: {identity.warranty_number}")
        self._line(f" Warranty Expiration Date: {identity.warranty_expiration_date}")
        self._line(f" Warranty Type: {identity.warranty_type}")
        self._line(f" Custom Asset Number: {identity.custom_asset_number}")
        self._line(f" Owner: {identity.owner}")
        self._line(" Custom Attributes:")
        for attr in identity.custom_attributes:
            self._line(f" - {attr.name}: {format_attribute_value(attr.value)}")

    def show_hardware(self, device_id: str, inventory: HardwareInventory) -> None:
        self._line(f"Hardware Inventory for Device ID {device_id}:")
        self._attributes(inventory.attributes, parse_times=True)

    def show_software(self, device_id: str, inventory: SoftwareInventory) -> None:
        self._line(f"Software Installed for Device ID {device_id}:")
        self._line(f"Last Data Refresh Time: {inventory.last_data_refresh_date}")
        for software in inventory.software:
            self._line(f"Software Name: {software.name}")
            self._attributes(software.attributes)

    def show_network(self, device_id: str, attributes: list[DeviceAttribute]) -> None:
        self._line(f"Network Info for Device ID {device_id}:")
        self._attributes(attributes)

    # ----------------------------------------
    # Actions
    # ----------------------------------------

    def show_actions(self, catalog: DeviceActionCatalog) -> None:
        self._line(f"Available actions for Device ID {catalog.device_id}:")
        self._line(f"{'ID':<32} {'Name':<32} {'Type':<12}")
        self._line("-" * 78)
        for action in sorted(catalog.actions, key=lambda a: a.action_order):
            self._line(f"{action.action_id:<32} {action.action_name:<32} {action.action_type:<12}")

    def show_action_result(self, action: str, result: ActionResult) -> None:
        line = f"{action} accepted for device {result.maas360_device_id or ''}"
        if result.description:
            line = f"{line}: {result.description}"
        self._line(line)

    # ----------------------------------------
    # Applications
    # ----------------------------------------

    def show_catalog_apps(self, apps: list[CatalogApp]) -> None:
        self._line(f"Found {len(apps)} apps")
        for app in apps:
            self._line(
                f"App Name: {app.app_name}, App ID: {app.app_id}, Platform: {app.platform}, "
                f"Category: {app.category}, Uploaded By: {app.uploaded_by}"
            )

    def show_installed_apps(self, apps: list[InstalledApp]) -> None:
        self._line(f"Found {len(apps)} installed apps")
        for app in apps:
            self._line(
                f"App Name: {app.app_name}, App ID: {app.app_id}, Platform: {app.platform}, "
                f"Device Count: {app.device_count}"
            )
