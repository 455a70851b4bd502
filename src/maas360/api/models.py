"""Response records for the MaaS360 REST API.

These are plain data structures built fresh from one decoded response and
never mutated afterwards. Each record class knows how to read its own
vendor envelope via ``from_api``; the raw dictionary is kept in
``raw_data`` so callers can reach fields this module does not map.

Vendor quirks handled here:
    - numeric fields sent as a number, a digit string or "" (FlexibleInt)
    - identifier fields sent as a string or a number (flexible_str)
    - collection members sent as a single object instead of a list
"""
from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

from .exceptions import ActionNotFoundError, DecodeError
from .flexible import FlexibleInt, flexible_int, flexible_str

T = TypeVar("T")


# ============================================
# Decoding helpers
# ============================================

def section(data: Any, key: str, endpoint: Optional[str] = None) -> dict[str, Any]:
    """Return ``data[key]`` as a dict; a missing key yields {}.

    Raises:
        DecodeError: If data or the member is not a JSON object.
    """
    if not isinstance(data, dict):
        raise DecodeError(
            f"Expected a JSON object around '{key}'",
            endpoint=endpoint,
        )
    value = data.get(key)
    if value is None or value == "":
        return {}
    if not isinstance(value, dict):
        raise DecodeError(
            f"Expected '{key}' to be an object, got {type(value).__name__}",
            endpoint=endpoint,
        )
    return value


def one_or_many(value: Any, key: str, endpoint: Optional[str] = None) -> list[dict[str, Any]]:
    """Normalize a member that may be a single object or a list of objects."""
    if value is None or value == "":
        return []
    if isinstance(value, dict):
        return [value]
    if isinstance(value, list) and all(isinstance(item, dict) for item in value):
        return value
    raise DecodeError(
        f"Cannot decode '{key}' as an object or a list of objects",
        endpoint=endpoint,
    )


def status_value(raw: Any, key: str, endpoint: Optional[str] = None) -> int:
    """Decode a vendor status or error code; only null or "" mean 0.

    Raises:
        DecodeError: If the value is present but not an integer.
    """
    if raw is None or raw == "":
        return 0
    value = FlexibleInt.from_json(raw)
    if not value.is_set:
        raise DecodeError(
            f"Cannot decode '{key}' as an integer: {raw!r}",
            endpoint=endpoint,
        )
    return value.value


def _str(raw: dict[str, Any], key: str) -> str:
    value = raw.get(key)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _bool(raw: dict[str, Any], key: str) -> bool:
    value = raw.get(key)
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return bool(value)


# ============================================
# Devices
# ============================================

@dataclass
class Device:
    """A device record as returned by the device search API."""

    maas360_device_id: Optional[str] = None
    device_name: str = ""
    device_status: str = ""
    device_type: str = ""
    device_owner: str = ""
    username: str = ""
    user_domain: str = ""
    email_address: str = ""
    phone_number: Optional[str] = None
    platform_name: str = ""
    platform_serial_number: str = ""
    manufacturer: str = ""
    model_id: str = ""
    os_name: str = ""
    os_version: Optional[str] = None
    os_service_pack: str = ""
    udid: str = ""
    imei_esn: Optional[str] = None
    wifi_mac_address: str = ""
    custom_asset_number: str = ""
    ownership: str = ""
    enrollment_mode: str = ""
    source_id: int = 0

    # Compliance
    app_compliance_state: str = ""
    passcode_compliance: str = ""
    policy_compliance_state: str = ""
    rule_compliance_state: str = ""
    encryption_status: str = ""
    jailbreak_status: str = ""
    selective_wipe_status: str = ""
    mdm_policy: str = ""
    maas360_managed_status: str = ""

    # Mailbox
    mailbox_device_id: Optional[str] = None
    mailbox_managed: str = ""
    mailbox_last_reported: str = ""
    mailbox_last_reported_in_epochms: FlexibleInt = field(default_factory=FlexibleInt)
    mdm_mailbox_device_id: str = ""
    unified_traveler_device_id: Optional[str] = None

    # Timestamps
    installed_date: str = ""
    installed_date_in_epochms: FlexibleInt = field(default_factory=FlexibleInt)
    last_reported: str = ""
    last_reported_in_epochms: FlexibleInt = field(default_factory=FlexibleInt)
    first_registered_in_epochms: FlexibleInt = field(default_factory=FlexibleInt)
    last_registered_in_epochms: FlexibleInt = field(default_factory=FlexibleInt)
    last_mdm_registered_in_epochms: FlexibleInt = field(default_factory=FlexibleInt)

    is_supervised_device: bool = False
    test_device: bool = False

    raw_data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> "Device":
        return cls(
            maas360_device_id=flexible_str(raw.get("maas360DeviceID")),
            device_name=_str(raw, "deviceName"),
            device_status=_str(raw, "deviceStatus"),
            device_type=_str(raw, "deviceType"),
            device_owner=_str(raw, "deviceOwner"),
            username=_str(raw, "username"),
            user_domain=_str(raw, "userDomain"),
            email_address=_str(raw, "emailAddress"),
            phone_number=flexible_str(raw.get("phoneNumber")),
            platform_name=_str(raw, "platformName"),
            platform_serial_number=_str(raw, "platformSerialNumber"),
            manufacturer=_str(raw, "manufacturer"),
            model_id=_str(raw, "modelId"),
            os_name=_str(raw, "osName"),
            os_version=flexible_str(raw.get("osVersion")),
            os_service_pack=_str(raw, "osServicePack"),
            udid=_str(raw, "udid"),
            imei_esn=flexible_str(raw.get("imeiEsn")),
            wifi_mac_address=_str(raw, "wifiMacAddress"),
            custom_asset_number=_str(raw, "customAssetNumber"),
            ownership=_str(raw, "ownership"),
            enrollment_mode=_str(raw, "enrollmentMode"),
            source_id=flexible_int(raw.get("sourceID")),
            app_compliance_state=_str(raw, "appComplianceState"),
            passcode_compliance=_str(raw, "passcodeCompliance"),
            policy_compliance_state=_str(raw, "policyComplianceState"),
            rule_compliance_state=_str(raw, "ruleComplianceState"),
            encryption_status=_str(raw, "encryptionStatus"),
            jailbreak_status=_str(raw, "jailbreakStatus"),
            selective_wipe_status=_str(raw, "selectiveWipeStatus"),
            mdm_policy=_str(raw, "mdmPolicy"),
            maas360_managed_status=_str(raw, "maas360ManagedStatus"),
            mailbox_device_id=flexible_str(raw.get("mailboxDeviceId")),
            mailbox_managed=_str(raw, "mailboxManaged"),
            mailbox_last_reported=_str(raw, "mailboxLastReported"),
            mailbox_last_reported_in_epochms=FlexibleInt.from_json(
                raw.get("mailboxLastReportedInEpochms")
            ),
            mdm_mailbox_device_id=_str(raw, "mdmMailboxDeviceId"),
            unified_traveler_device_id=flexible_str(raw.get("unifiedTravelerDeviceId")),
            installed_date=_str(raw, "installedDate"),
            installed_date_in_epochms=FlexibleInt.from_json(raw.get("installedDateInEpochms")),
            last_reported=_str(raw, "lastReported"),
            last_reported_in_epochms=FlexibleInt.from_json(raw.get("lastReportedInEpochms")),
            first_registered_in_epochms=FlexibleInt.from_json(
                raw.get("firstRegisteredInEpochms")
            ),
            last_registered_in_epochms=FlexibleInt.from_json(
                raw.get("lastRegisteredInEpochms")
            ),
            last_mdm_registered_in_epochms=FlexibleInt.from_json(
                raw.get("lastMdmRegisteredInEpochms")
            ),
            is_supervised_device=_bool(raw, "isSupervisedDevice"),
            test_device=_bool(raw, "testDevice"),
            raw_data=raw,
        )


@dataclass
class DeviceDetails:
    """Core attributes of a single device (device-apis core endpoint)."""

    maas360_device_id: Optional[str] = None
    device_name: str = ""
    custom_asset_number: str = ""
    ownership: str = ""
    device_owner: str = ""
    username: str = ""
    email_address: str = ""
    platform_name: str = ""
    source_id: int = 0
    device_type: str = ""
    manufacturer: str = ""
    model: str = ""
    os_name: str = ""
    os_service_pack: str = ""
    imei_esn: Optional[str] = None
    installed_date: str = ""
    installed_date_in_epochms: FlexibleInt = field(default_factory=FlexibleInt)
    last_reported: str = ""
    last_reported_in_epochms: FlexibleInt = field(default_factory=FlexibleInt)
    device_status: str = ""
    maas360_managed_status: str = ""
    udid: str = ""
    wifi_mac_address: str = ""
    mailbox_device_id: Optional[str] = None
    mailbox_last_reported: str = ""
    mailbox_last_reported_in_epochms: FlexibleInt = field(default_factory=FlexibleInt)
    mailbox_managed: str = ""
    is_supervised_device: bool = False
    test_device: bool = False
    unified_traveler_device_id: Optional[str] = None
    raw_data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> "DeviceDetails":
        return cls(
            maas360_device_id=flexible_str(raw.get("maas360DeviceID")),
            device_name=_str(raw, "deviceName"),
            custom_asset_number=_str(raw, "customAssetNumber"),
            ownership=_str(raw, "ownership"),
            device_owner=_str(raw, "deviceOwner"),
            username=_str(raw, "username"),
            email_address=_str(raw, "emailAddress"),
            platform_name=_str(raw, "platformName"),
            source_id=flexible_int(raw.get("sourceID")),
            device_type=_str(raw, "deviceType"),
            manufacturer=_str(raw, "manufacturer"),
            model=_str(raw, "model"),
            os_name=_str(raw, "osName"),
            os_service_pack=_str(raw, "osServicePack"),
            imei_esn=flexible_str(raw.get("imeiEsn")),
            installed_date=_str(raw, "installedDate"),
            installed_date_in_epochms=FlexibleInt.from_json(raw.get("installedDateInEpochms")),
            last_reported=_str(raw, "lastReported"),
            last_reported_in_epochms=FlexibleInt.from_json(raw.get("lastReportedInEpochms")),
            device_status=_str(raw, "deviceStatus"),
            maas360_managed_status=_str(raw, "maas360ManagedStatus"),
            udid=_str(raw, "udid"),
            wifi_mac_address=_str(raw, "wifiMacAddress"),
            mailbox_device_id=flexible_str(raw.get("mailboxDeviceId")),
            mailbox_last_reported=_str(raw, "mailboxLastReported"),
            mailbox_last_reported_in_epochms=FlexibleInt.from_json(
                raw.get("mailboxLastReportedInEpochms")
            ),
            mailbox_managed=_str(raw, "mailboxManaged"),
            is_supervised_device=_bool(raw, "isSupervisedDevice"),
            test_device=_bool(raw, "testDevice"),
            unified_traveler_device_id=flexible_str(raw.get("unifiedTravelerDeviceId")),
            raw_data=raw,
        )


# ============================================
# Attributes and Inventory
# ============================================

@dataclass
class DeviceAttribute:
    """A key/type/value triple; value is whatever JSON type the vendor sent."""

    key: str
    type: str = ""
    value: Any = None

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> "DeviceAttribute":
        return cls(key=_str(raw, "key"), type=_str(raw, "type"), value=raw.get("value"))


def _attributes(container: dict[str, Any], key: str, endpoint: Optional[str]) -> list[DeviceAttribute]:
    return [
        DeviceAttribute.from_api(item)
        for item in one_or_many(container.get(key), key, endpoint)
    ]


@dataclass
class CustomAttribute:
    """A customer-defined attribute attached to a device identity."""

    name: str
    value: Any = None


@dataclass
class DeviceIdentity:
    """Asset-management attributes of a device (device-apis identity endpoint)."""

    maas360_device_id: Optional[str] = None
    custom_asset_number: str = ""
    owner: str = ""
    ownership: str = ""
    vendor: str = ""
    po_number: str = ""
    purchase_type: str = ""
    purchase_date: str = ""
    purchase_price: str = ""
    warranty_number: str = ""
    warranty_expiration_date: str = ""
    warranty_type: str = ""
    office: str = ""
    department: str = ""
    custom_attributes: list[CustomAttribute] = field(default_factory=list)
    raw_data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, raw: dict[str, Any], endpoint: Optional[str] = None) -> "DeviceIdentity":
        wrapper = section(raw, "customAttributes", endpoint)
        custom = [
            CustomAttribute(
                name=_str(item, "customAttributeName"),
                value=item.get("customAttributeValue"),
            )
            for item in one_or_many(wrapper.get("customAttribute"), "customAttribute", endpoint)
        ]
        return cls(
            maas360_device_id=flexible_str(raw.get("maas360DeviceID")),
            custom_asset_number=_str(raw, "customAssetNumber"),
            owner=_str(raw, "owner"),
            ownership=_str(raw, "ownership"),
            vendor=_str(raw, "vendor"),
            po_number=_str(raw, "poNumber"),
            purchase_type=_str(raw, "purchaseType"),
            purchase_date=_str(raw, "purchaseDate"),
            purchase_price=_str(raw, "purchasePrice"),
            warranty_number=_str(raw, "warrantyNumber"),
            warranty_expiration_date=_str(raw, "warrantyExpirationDate"),
            warranty_type=_str(raw, "warrantyType"),
            office=_str(raw, "office"),
            department=_str(raw, "department"),
            custom_attributes=custom,
            raw_data=raw,
        )


@dataclass
class HardwareInventory:
    """Hardware attributes reported for one device."""

    maas360_device_id: Optional[str] = None
    attributes: list[DeviceAttribute] = field(default_factory=list)

    @classmethod
    def from_api(cls, raw: dict[str, Any], endpoint: Optional[str] = None) -> "HardwareInventory":
        wrapper = section(raw, "deviceAttributes", endpoint)
        return cls(
            maas360_device_id=flexible_str(raw.get("maas360DeviceId")),
            attributes=_attributes(wrapper, "deviceAttribute", endpoint),
        )


@dataclass
class Software:
    """One installed software package and its attributes."""

    name: str
    attributes: list[DeviceAttribute] = field(default_factory=list)


@dataclass
class SoftwareInventory:
    """Software installed on one device."""

    maas360_device_id: Optional[str] = None
    last_data_refresh_date: str = ""
    software: list[Software] = field(default_factory=list)

    @classmethod
    def from_api(cls, raw: dict[str, Any], endpoint: Optional[str] = None) -> "SoftwareInventory":
        software = [
            Software(name=_str(item, "swName"), attributes=_attributes(item, "swAttrs", endpoint))
            for item in one_or_many(raw.get("deviceSw"), "deviceSw", endpoint)
        ]
        return cls(
            maas360_device_id=flexible_str(raw.get("maas360DeviceID")),
            last_data_refresh_date=_str(raw, "lastSoftwareDataRefreshDate"),
            software=software,
        )


@dataclass
class NetworkInformation:
    """Network attributes (carrier, IP, roaming, ...) of one device."""

    maas360_device_id: Optional[str] = None
    attributes: list[DeviceAttribute] = field(default_factory=list)

    @classmethod
    def from_api(cls, raw: dict[str, Any], endpoint: Optional[str] = None) -> "NetworkInformation":
        wrapper = section(raw, "deviceAttributes", endpoint)
        return cls(
            maas360_device_id=flexible_str(raw.get("maas360DeviceID")),
            attributes=_attributes(wrapper, "deviceAttribute", endpoint),
        )


# ============================================
# Actions
# ============================================

@dataclass
class DeviceAction:
    """An action the vendor reports as available for a device."""

    action_id: str
    action_name: str
    action_order: int = 0
    action_type: str = ""

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> "DeviceAction":
        return cls(
            action_id=_str(raw, "actionId"),
            action_name=_str(raw, "actionName"),
            action_order=flexible_int(raw.get("actionOrder")),
            action_type=_str(raw, "actionType"),
        )


@dataclass
class DeviceActionCatalog:
    """The list of actions available for one device."""

    device_id: str
    actions: list[DeviceAction] = field(default_factory=list)

    @classmethod
    def from_api(
        cls,
        data: dict[str, Any],
        device_id: str,
        endpoint: Optional[str] = None,
    ) -> "DeviceActionCatalog":
        wrapper = section(data, "deviceActions", endpoint)
        actions = [
            DeviceAction.from_api(item)
            for item in one_or_many(wrapper.get("deviceAction"), "deviceAction", endpoint)
        ]
        return cls(device_id=device_id, actions=actions)

    def get_action_by_id(self, action_id: str) -> DeviceAction:
        for action in self.actions:
            if action.action_id == action_id:
                return action
        raise ActionNotFoundError(action_id, device_id=self.device_id, by="ID")

    def get_action_by_name(self, action_name: str) -> DeviceAction:
        for action in self.actions:
            if action.action_name == action_name:
                return action
        raise ActionNotFoundError(action_name, device_id=self.device_id, by="name")

    def __len__(self) -> int:
        return len(self.actions)


@dataclass
class ActionResult:
    """Outcome of an action-style call (lock, hide, message, invoke).

    A missing or empty actionStatus is reported as 0: the vendor omits it on
    some successful responses. Any other non-integer status raises DecodeError.
    """

    maas360_device_id: Optional[str] = None
    action_status: int = 0
    action_id: Optional[str] = None
    description: str = ""
    raw_data: dict[str, Any] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.action_status == 0

    @classmethod
    def from_api(cls, data: dict[str, Any], endpoint: Optional[str] = None) -> "ActionResult":
        raw = section(data, "actionResponse", endpoint) if "actionResponse" in data else data
        device_id = raw.get("maas360DeviceID", raw.get("maas360DeviceId"))
        action_id = raw.get("actionID", raw.get("actionId"))
        return cls(
            maas360_device_id=flexible_str(device_id),
            action_status=status_value(raw.get("actionStatus"), "actionStatus", endpoint),
            action_id=flexible_str(action_id),
            description=_str(raw, "description"),
            raw_data=raw,
        )


# ============================================
# Applications
# ============================================

@dataclass
class CatalogApp:
    """An application in the customer's app catalog."""

    app_id: str
    app_name: str = ""
    app_type: int = 0
    platform: str = ""
    category: str = ""
    status: str = ""
    app_full_version: str = ""
    app_version_state: int = 0
    enterprise_rating: str = ""
    file_name: str = ""
    file_size: str = ""
    device_type: int = 0
    instant_update: int = 0
    upload_date: str = ""
    uploaded_by: str = ""
    last_updated: str = ""
    last_updated_by: str = ""
    group_name: str = ""
    group_id: int = 0
    ss_id: int = 0
    vpp_codes: str = ""
    app_icon_url: str = ""
    app_icon_full_url: str = ""
    raw_data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> "CatalogApp":
        return cls(
            app_id=_str(raw, "appId"),
            app_name=_str(raw, "appName"),
            app_type=flexible_int(raw.get("appType")),
            platform=_str(raw, "platform"),
            category=_str(raw, "category"),
            status=_str(raw, "status"),
            app_full_version=_str(raw, "appFullVersion"),
            app_version_state=flexible_int(raw.get("appVersionState")),
            enterprise_rating=_str(raw, "enterpriseRating"),
            file_name=_str(raw, "fileName"),
            file_size=_str(raw, "fileSize"),
            device_type=flexible_int(raw.get("deviceType")),
            instant_update=flexible_int(raw.get("instantUpdate")),
            upload_date=_str(raw, "uploadDate"),
            uploaded_by=_str(raw, "uploadedBy"),
            last_updated=_str(raw, "lastUpdated"),
            last_updated_by=_str(raw, "lastUpdatedBy"),
            group_name=_str(raw, "groupName"),
            group_id=flexible_int(raw.get("groupId")),
            ss_id=flexible_int(raw.get("ssId")),
            vpp_codes=_str(raw, "vppCodes"),
            app_icon_url=_str(raw, "appIconURL"),
            app_icon_full_url=_str(raw, "appIconFullURL"),
            raw_data=raw,
        )


@dataclass
class InstalledApp:
    """An application installed somewhere in the device fleet."""

    app_id: str
    app_name: str = ""
    platform: str = ""
    device_count: int = 0
    major_versions: int = 0
    raw_data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> "InstalledApp":
        return cls(
            app_id=_str(raw, "appID"),
            app_name=_str(raw, "appName"),
            platform=_str(raw, "platform"),
            device_count=flexible_int(raw.get("deviceCount")),
            major_versions=flexible_int(raw.get("majorVersions")),
            raw_data=raw,
        )


@dataclass
class SearchPage(Generic[T]):
    """One page of search results plus the vendor's paging fields.

    The client never pages on its own; request the next page by calling
    the search again with ``pageNumber`` incremented.
    """

    items: list[T] = field(default_factory=list)
    count: int = 0
    page_size: int = 0
    page_number: int = 0

    @classmethod
    def from_api(cls, wrapper: dict[str, Any], items: list[T]) -> "SearchPage[T]":
        return cls(
            items=items,
            count=flexible_int(wrapper.get("count")),
            page_size=flexible_int(wrapper.get("pageSize")),
            page_number=flexible_int(wrapper.get("pageNumber")),
        )

    @property
    def has_more(self) -> bool:
        """True when the reported total exceeds the records seen so far."""
        if not self.page_size or not self.page_number:
            return False
        return self.count > self.page_size * self.page_number
