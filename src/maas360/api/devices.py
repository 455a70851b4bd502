#!/usr/bin/env python3
"""Device lookup, search and inventory for MaaS360.

This module provides the DeviceClient class for the read side of the
device APIs. Each method builds one URL, performs one GET through the
shared MaaS360Transport and decodes one response envelope.

API Details:
    - Device core:        /device-apis/devices/1.0/core/{billingId}?deviceId=
    - Device search:      /device-apis/devices/2.0/search/customer/{billingId}?<filters>
    - Identity:           /device-apis/devices/1.0/identity/{billingId}?deviceId=
    - Hardware inventory: /device-apis/devices/1.0/hardwareInventory/{billingId}?deviceId=
    - Software installed: /device-apis/devices/1.0/softwareInstalled/{billingId}?deviceId=
    - Network info:       /device-apis/devices/1.0/mdNetworkInformation/{billingId}?deviceId=

Search filters understood by the vendor include deviceStatus, partialDeviceName,
partialUsername, partialPhoneNumber, udid, imeiMeid, wifiMacAddress,
platformName, maas360DeviceId, email, plcCompliance, ruleCompliance,
appCompliance, pswdCompliance, pageSize and pageNumber.

Example:
    async with MaaS360Transport() as transport:
        devices = DeviceClient(transport)
        found = await devices.search_devices("1234567", token, {"platformName": "iOS"})
"""
import logging
from typing import Mapping, Optional

from .client import MaaS360Transport
from .endpoints import CONTENT_TYPE_FORM, build_url, require, resolve_service_url
from .exceptions import NotFoundError
from .models import (
    Device,
    DeviceAttribute,
    DeviceDetails,
    DeviceIdentity,
    HardwareInventory,
    NetworkInformation,
    SearchPage,
    SoftwareInventory,
    one_or_many,
    section,
)

logger = logging.getLogger(__name__)


class DeviceClient:
    """Read device records and inventories.

    Attributes:
        transport: MaaS360Transport used for every request
    """

    CORE_PATH = "/device-apis/devices/1.0/core/{billing_id}"
    SEARCH_PATH = "/device-apis/devices/2.0/search/customer/{billing_id}"
    IDENTITY_PATH = "/device-apis/devices/1.0/identity/{billing_id}"
    HARDWARE_PATH = "/device-apis/devices/1.0/hardwareInventory/{billing_id}"
    SOFTWARE_PATH = "/device-apis/devices/1.0/softwareInstalled/{billing_id}"
    NETWORK_PATH = "/device-apis/devices/1.0/mdNetworkInformation/{billing_id}"

    def __init__(self, transport: MaaS360Transport):
        self.transport = transport

    async def _get_for_device(
        self,
        path: str,
        billing_id: str,
        device_id: str,
        token: str,
        service_url: Optional[str],
        content_type: str = CONTENT_TYPE_FORM,
    ) -> tuple[dict, str]:
        """GET a per-device endpoint and return (body, url)."""
        base = resolve_service_url(billing_id, service_url)
        require(device_id=device_id, token=token)
        url = build_url(base, path.format(billing_id=billing_id), {"deviceId": device_id})
        data = await self.transport.get(url, token=token, content_type=content_type)
        return data, url

    # ----------------------------------------
    # Lookup
    # ----------------------------------------

    async def get_device(
        self,
        billing_id: str,
        device_id: str,
        token: str,
        *,
        service_url: Optional[str] = None,
    ) -> DeviceDetails:
        """Fetch the core attributes of one device.

        Returns whatever the vendor sent, even if most fields are empty.
        """
        data, url = await self._get_for_device(
            self.CORE_PATH, billing_id, device_id, token, service_url
        )
        return DeviceDetails.from_api(section(data, "device", url))

    async def search_devices_page(
        self,
        billing_id: str,
        token: str,
        filters: Optional[Mapping[str, str]] = None,
        *,
        service_url: Optional[str] = None,
    ) -> SearchPage[Device]:
        """Search devices and return one page with the vendor's paging fields.

        Raises:
            NotFoundError: If the page holds no devices
        """
        base = resolve_service_url(billing_id, service_url)
        require(token=token)
        url = build_url(base, self.SEARCH_PATH.format(billing_id=billing_id), filters)

        data = await self.transport.get(url, token=token)
        wrapper = section(data, "devices", url)
        devices = [Device.from_api(raw) for raw in one_or_many(wrapper.get("device"), "device", url)]

        if not devices:
            raise NotFoundError("devices", endpoint=url, method="GET")

        logger.debug(f"Device search returned {len(devices)} device(s)")
        return SearchPage.from_api(wrapper, devices)

    async def search_devices(
        self,
        billing_id: str,
        token: str,
        filters: Optional[Mapping[str, str]] = None,
        *,
        service_url: Optional[str] = None,
    ) -> list[Device]:
        """Search devices; results keep the vendor's order.

        Args:
            billing_id: Customer billing ID
            token: MaaS360 access token
            filters: Optional query filters (see module docstring)
            service_url: Service base URL, resolved from billing_id if omitted

        Raises:
            NotFoundError: If no device matches
        """
        page = await self.search_devices_page(
            billing_id, token, filters, service_url=service_url
        )
        return page.items

    # ----------------------------------------
    # Attributes and Inventory
    # ----------------------------------------

    async def get_device_identity(
        self,
        billing_id: str,
        device_id: str,
        token: str,
        *,
        service_url: Optional[str] = None,
    ) -> DeviceIdentity:
        """Fetch ownership, purchase, warranty and custom attributes of a device."""
        data, url = await self._get_for_device(
            self.IDENTITY_PATH, billing_id, device_id, token, service_url
        )
        return DeviceIdentity.from_api(section(data, "deviceIdentity", url), url)

    async def get_hardware_inventory(
        self,
        billing_id: str,
        device_id: str,
        token: str,
        *,
        service_url: Optional[str] = None,
    ) -> HardwareInventory:
        """Fetch the hardware attributes of a device."""
        data, url = await self._get_for_device(
            self.HARDWARE_PATH, billing_id, device_id, token, service_url
        )
        return HardwareInventory.from_api(section(data, "deviceHardware", url), url)

    async def get_software_installed(
        self,
        billing_id: str,
        device_id: str,
        token: str,
        *,
        service_url: Optional[str] = None,
    ) -> SoftwareInventory:
        """Fetch the software installed on a device."""
        data, url = await self._get_for_device(
            self.SOFTWARE_PATH, billing_id, device_id, token, service_url
        )
        return SoftwareInventory.from_api(section(data, "deviceSoftwares", url), url)

    async def get_network_info(
        self,
        billing_id: str,
        device_id: str,
        token: str,
        *,
        service_url: Optional[str] = None,
    ) -> list[DeviceAttribute]:
        """Fetch the network attributes of a device."""
        data, url = await self._get_for_device(
            self.NETWORK_PATH, billing_id, device_id, token, service_url
        )
        info = NetworkInformation.from_api(section(data, "networkInformation", url), url)
        return info.attributes
