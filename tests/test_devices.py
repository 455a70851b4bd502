#!/usr/bin/env python3
"""Unit tests for Device lookup, search and inventory.

Tests cover:
    - URL and header contract for every read endpoint
    - Search result normalization (single object or list)
    - NotFound on empty searches, plain return on empty details
    - Argument validation before network access
"""
import sys
from unittest.mock import AsyncMock, MagicMock

import pytest

sys.path.insert(0, str(__file__).rsplit("/tests", 1)[0])
from src.maas360.api.client import MaaS360Transport
from src.maas360.api.devices import DeviceClient
from src.maas360.api.endpoints import CONTENT_TYPE_FORM
from src.maas360.api.exceptions import (
    DecodeError,
    InvalidArgumentError,
    InvalidIdentifierError,
    NotFoundError,
)

BASE = "https://services.fiberlink.com"
BILLING_ID = "123456"
TOKEN = "access_token_value"


@pytest.fixture
def transport():
    return MagicMock(spec=MaaS360Transport)


@pytest.fixture
def client(transport):
    return DeviceClient(transport)


def sample_device(device_id="ANDROID0001", name="Pixel 8"):
    return {
        "maas360DeviceID": device_id,
        "deviceName": name,
        "deviceStatus": "Active",
        "platformName": "Android",
        "username": "jdoe",
        "imeiEsn": 351756051523999,
        "phoneNumber": "",
        "sourceID": "1",
        "lastReportedInEpochms": "1700000000000",
        "installedDateInEpochms": "",
        "isSupervisedDevice": "false",
        "testDevice": True,
    }


# ============================================
# Device Lookup Tests
# ============================================

class TestGetDevice:
    """Test the core device endpoint."""

    @pytest.mark.asyncio
    async def test_builds_url_and_decodes(self, client, transport):
        transport.get = AsyncMock(return_value={
            "device": {
                "maas360DeviceID": "ANDROID0001",
                "deviceName": "Pixel 8",
                "model": "Pixel",
                "lastReportedInEpochms": 1700000000000,
            }
        })

        device = await client.get_device(BILLING_ID, "ANDROID0001", TOKEN)

        transport.get.assert_awaited_once_with(
            f"{BASE}/device-apis/devices/1.0/core/{BILLING_ID}?deviceId=ANDROID0001",
            token=TOKEN,
            content_type=CONTENT_TYPE_FORM,
        )
        assert device.maas360_device_id == "ANDROID0001"
        assert device.model == "Pixel"
        assert int(device.last_reported_in_epochms) == 1700000000000

    @pytest.mark.asyncio
    async def test_empty_details_are_returned(self, client, transport):
        """Detail endpoints never raise NotFound."""
        transport.get = AsyncMock(return_value={})

        device = await client.get_device(BILLING_ID, "ANDROID0001", TOKEN)

        assert device.maas360_device_id is None
        assert device.device_name == ""

    @pytest.mark.asyncio
    async def test_uses_given_service_url(self, client, transport):
        transport.get = AsyncMock(return_value={"device": {}})

        await client.get_device(BILLING_ID, "D1", TOKEN, service_url="https://example.test")

        assert transport.get.call_args.args[0].startswith("https://example.test/")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "billing_id,device_id,token,error",
        [
            ("", "D1", TOKEN, InvalidIdentifierError),
            ("9001", "D1", TOKEN, InvalidIdentifierError),
            (BILLING_ID, "", TOKEN, InvalidArgumentError),
            (BILLING_ID, "D1", "", InvalidArgumentError),
        ],
    )
    async def test_validation_before_network(
        self, client, transport, billing_id, device_id, token, error
    ):
        transport.get = AsyncMock()

        with pytest.raises(error):
            await client.get_device(billing_id, device_id, token)

        transport.get.assert_not_called()


# ============================================
# Device Search Tests
# ============================================

class TestSearchDevices:
    """Test the device search endpoint."""

    @pytest.mark.asyncio
    async def test_list_in_vendor_order(self, client, transport):
        transport.get = AsyncMock(return_value={
            "devices": {
                "device": [sample_device("B", "second"), sample_device("A", "first")],
                "count": 2,
                "pageSize": 50,
                "pageNumber": 1,
            }
        })

        devices = await client.search_devices(
            BILLING_ID, TOKEN, {"platformName": "Android", "deviceStatus": "Active"}
        )

        assert [d.maas360_device_id for d in devices] == ["B", "A"]
        url = transport.get.call_args.args[0]
        assert url == (
            f"{BASE}/device-apis/devices/2.0/search/customer/{BILLING_ID}"
            "?deviceStatus=Active&platformName=Android"
        )
        assert transport.get.call_args.kwargs["token"] == TOKEN

    @pytest.mark.asyncio
    async def test_single_object_is_normalized(self, client, transport):
        """The vendor sends a bare object when exactly one device matches."""
        transport.get = AsyncMock(return_value={
            "devices": {"device": sample_device(), "count": 1}
        })

        devices = await client.search_devices(BILLING_ID, TOKEN)

        assert len(devices) == 1
        assert devices[0].device_name == "Pixel 8"

    @pytest.mark.asyncio
    async def test_flexible_fields(self, client, transport):
        transport.get = AsyncMock(return_value={"devices": {"device": [sample_device()]}})

        device = (await client.search_devices(BILLING_ID, TOKEN))[0]

        assert device.imei_esn == "351756051523999"
        assert device.phone_number is None
        assert device.source_id == 1
        assert device.last_reported_in_epochms.is_set
        assert not device.installed_date_in_epochms.is_set
        assert device.is_supervised_device is False
        assert device.test_device is True
        assert device.raw_data["username"] == "jdoe"

    @pytest.mark.asyncio
    async def test_no_filters_builds_bare_url(self, client, transport):
        transport.get = AsyncMock(return_value={"devices": {"device": [sample_device()]}})

        await client.search_devices(BILLING_ID, TOKEN)

        assert transport.get.call_args.args[0].endswith(f"/customer/{BILLING_ID}")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [{"devices": {"device": []}}, {"devices": {}}, {"devices": ""}, {}],
    )
    async def test_empty_result_raises_not_found(self, client, transport, body):
        transport.get = AsyncMock(return_value=body)

        with pytest.raises(NotFoundError):
            await client.search_devices(BILLING_ID, TOKEN, {"udid": "nope"})

    @pytest.mark.asyncio
    async def test_unexpected_device_shape(self, client, transport):
        transport.get = AsyncMock(return_value={"devices": {"device": "oops"}})

        with pytest.raises(DecodeError):
            await client.search_devices(BILLING_ID, TOKEN)

    @pytest.mark.asyncio
    async def test_page_metadata(self, client, transport):
        transport.get = AsyncMock(return_value={
            "devices": {
                "device": [sample_device()],
                "count": "120",
                "pageSize": "50",
                "pageNumber": "1",
            }
        })

        page = await client.search_devices_page(BILLING_ID, TOKEN, {"pageNumber": "1"})

        assert page.count == 120
        assert page.page_size == 50
        assert page.page_number == 1
        assert page.has_more


# ============================================
# Inventory Tests
# ============================================

class TestInventory:
    """Test identity, hardware, software and network endpoints."""

    @pytest.mark.asyncio
    async def test_identity(self, client, transport):
        transport.get = AsyncMock(return_value={
            "deviceIdentity": {
                "maas360DeviceID": "D1",
                "ownership": "Corporate Owned",
                "department": "Sales",
                "customAttributes": {
                    "customAttribute": [
                        {"customAttributeName": "CostCenter", "customAttributeValue": "42"},
                        {"customAttributeName": "Site", "customAttributeValue": "Austin"},
                    ]
                },
            }
        })

        identity = await client.get_device_identity(BILLING_ID, "D1", TOKEN)

        assert transport.get.call_args.args[0] == (
            f"{BASE}/device-apis/devices/1.0/identity/{BILLING_ID}?deviceId=D1"
        )
        assert identity.ownership == "Corporate Owned"
        assert [a.name for a in identity.custom_attributes] == ["CostCenter", "Site"]

    @pytest.mark.asyncio
    async def test_hardware_inventory(self, client, transport):
        transport.get = AsyncMock(return_value={
            "deviceHardware": {
                "maas360DeviceId": "D1",
                "deviceAttributes": {
                    "deviceAttribute": [
                        {"key": "Battery Level", "type": "float", "value": 87.5},
                        {"key": "Last Boot", "type": "date", "value": "2024-01-31T22:00:00"},
                    ]
                },
            }
        })

        inventory = await client.get_hardware_inventory(BILLING_ID, "D1", TOKEN)

        assert "/hardwareInventory/123456?deviceId=D1" in transport.get.call_args.args[0]
        assert inventory.maas360_device_id == "D1"
        assert inventory.attributes[0].key == "Battery Level"
        assert inventory.attributes[0].value == 87.5

    @pytest.mark.asyncio
    async def test_software_installed(self, client, transport):
        transport.get = AsyncMock(return_value={
            "deviceSoftwares": {
                "maas360DeviceID": "D1",
                "lastSoftwareDataRefreshDate": "2024-01-31",
                "deviceSw": [
                    {
                        "swName": "Slack",
                        "swAttrs": [{"key": "Version", "type": "string", "value": "4.1"}],
                    },
                    {"swName": "Zoom", "swAttrs": {"key": "Version", "value": "5.0"}},
                ],
            }
        })

        inventory = await client.get_software_installed(BILLING_ID, "D1", TOKEN)

        assert "/softwareInstalled/123456?deviceId=D1" in transport.get.call_args.args[0]
        assert inventory.last_data_refresh_date == "2024-01-31"
        assert [s.name for s in inventory.software] == ["Slack", "Zoom"]
        assert inventory.software[1].attributes[0].value == "5.0"

    @pytest.mark.asyncio
    async def test_empty_software_is_returned(self, client, transport):
        transport.get = AsyncMock(return_value={"deviceSoftwares": {}})

        inventory = await client.get_software_installed(BILLING_ID, "D1", TOKEN)

        assert inventory.software == []

    @pytest.mark.asyncio
    async def test_network_info(self, client, transport):
        transport.get = AsyncMock(return_value={
            "networkInformation": {
                "maas360DeviceID": "D1",
                "deviceAttributes": {
                    "deviceAttribute": [
                        {"key": "Carrier", "type": "string", "value": "Verizon"},
                        {"key": "Roaming", "type": "boolean", "value": False},
                    ]
                },
            }
        })

        attributes = await client.get_network_info(BILLING_ID, "D1", TOKEN)

        assert "/mdNetworkInformation/123456?deviceId=D1" in transport.get.call_args.args[0]
        assert [(a.key, a.value) for a in attributes] == [("Carrier", "Verizon"), ("Roaming", False)]


# ============================================
# Run tests
# ============================================

if __name__ == "__main__":
    pytest.main([__file__, "-v"])
