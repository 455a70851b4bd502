#!/usr/bin/env python3
"""Remote device actions for MaaS360.

This module provides the DeviceActionManager class for the write side of
the device APIs: the generic action catalog plus the dedicated lock, hide
and send-message endpoints, and OS-update scheduling built on top of the
catalog.

Action dispatch is a two-step protocol:
    1. GET  /device-apis/devices/1.0/deviceActions/{billingId}?deviceId=
       returns the actions available for the device
    2. POST /action-apis/actions/1.0/customer/{billingId}/action/{actionId}/device/{deviceId}
       with {name, expiryDate, requesterWorkflow, additionalParams?}

``invoke_action`` skips step 1 when the caller already knows the action's
canonical name.

Example:
    async with MaaS360Transport() as transport:
        actions = DeviceActionManager(transport)
        await actions.perform_device_action("1234567", device_id, "MDM_LOCATE", None, token)
"""
import logging
import time
from datetime import datetime
from typing import Mapping, Optional

from .client import MaaS360Transport
from .endpoints import CONTENT_TYPE_FORM, build_url, require, resolve_service_url
from .exceptions import (
    DecodeError,
    InvalidArgumentError,
    MissingActionParametersError,
    RemoteActionFailedError,
)
from .models import ActionResult, DeviceActionCatalog

logger = logging.getLogger(__name__)

CUSTOM_COMMANDS_ACTION = "ANDROID_CUSTOM_CMDS"
SCHEDULE_OS_UPDATE_ACTION = "MDM_SCHEDULE_OS_UPDATE"

# Actions the vendor rejects without additionalParams
PARAMETERIZED_ACTIONS = frozenset({CUSTOM_COMMANDS_ACTION, SCHEDULE_OS_UPDATE_ACTION})

ACTION_EXPIRY_SECONDS = 300
DEFAULT_REQUESTER_WORKFLOW = "TEST"

OS_UPDATE_ACTION_TYPE = "OS Enforcement"
TARGET_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"


class DeviceActionManager:
    """Perform remote actions on MaaS360 devices.

    Attributes:
        transport: MaaS360Transport used for every request
        requester_workflow: Value sent as requesterWorkflow on invocations
    """

    ACTIONS_PATH = "/device-apis/devices/1.0/deviceActions/{billing_id}"
    INVOKE_PATH = "/action-apis/actions/1.0/customer/{billing_id}/action/{action_id}/device/{device_id}"
    SEND_MESSAGE_PATH = "/device-apis/devices/1.0/sendMessage/{billing_id}"
    LOCK_PATH = "/device-apis/devices/1.0/lockDevice/{billing_id}"
    HIDE_PATH = "/device-apis/devices/1.0/hideDevice/{billing_id}"

    def __init__(
        self,
        transport: MaaS360Transport,
        requester_workflow: str = DEFAULT_REQUESTER_WORKFLOW,
    ):
        self.transport = transport
        self.requester_workflow = requester_workflow

    # ----------------------------------------
    # Action Catalog
    # ----------------------------------------

    async def get_device_actions(
        self,
        billing_id: str,
        device_id: str,
        token: str,
        *,
        service_url: Optional[str] = None,
    ) -> DeviceActionCatalog:
        """List the actions available for a device."""
        base = resolve_service_url(billing_id, service_url)
        require(device_id=device_id, token=token)
        url = build_url(
            base,
            self.ACTIONS_PATH.format(billing_id=billing_id),
            {"deviceId": device_id},
        )
        data = await self.transport.get(url, token=token, content_type=CONTENT_TYPE_FORM)
        return DeviceActionCatalog.from_api(data, device_id, url)

    async def perform_device_action(
        self,
        billing_id: str,
        device_id: str,
        action_id: str,
        additional_params: Optional[Mapping[str, str]],
        token: str,
        *,
        service_url: Optional[str] = None,
    ) -> ActionResult:
        """Look up an action in the device's catalog and invoke it.

        The catalog lookup always happens first; parameter validation for
        actions that need additionalParams happens after it and before the
        invocation request.

        Args:
            billing_id: Customer billing ID
            device_id: MaaS360 device ID
            action_id: Action identifier from the catalog (e.g. "MDM_LOCATE")
            additional_params: Action payload; required for custom commands
                and scheduled OS updates
            token: MaaS360 access token
            service_url: Service base URL, resolved from billing_id if omitted

        Raises:
            ActionNotFoundError: If the device does not offer action_id
            MissingActionParametersError: If a parameterized action has no payload
            RemoteActionFailedError: If the vendor reports a non-zero actionStatus
        """
        base = resolve_service_url(billing_id, service_url)
        require(device_id=device_id, action_id=action_id, token=token)

        catalog = await self.get_device_actions(billing_id, device_id, token, service_url=base)
        action = catalog.get_action_by_id(action_id)

        if action.action_id in PARAMETERIZED_ACTIONS and not additional_params:
            raise MissingActionParametersError(action.action_id)

        logger.info(f"Performing action {action.action_name} on device {device_id}")
        return await self.invoke_action(
            billing_id,
            device_id,
            action.action_id,
            action.action_name,
            token,
            additional_params=additional_params,
            service_url=base,
        )

    async def perform_action_by_name(
        self,
        billing_id: str,
        device_id: str,
        action_name: str,
        additional_params: Optional[Mapping[str, str]],
        token: str,
        *,
        service_url: Optional[str] = None,
    ) -> ActionResult:
        """Like perform_device_action, but match the catalog by action name."""
        base = resolve_service_url(billing_id, service_url)
        require(device_id=device_id, action_name=action_name, token=token)

        catalog = await self.get_device_actions(billing_id, device_id, token, service_url=base)
        action = catalog.get_action_by_name(action_name)

        if action.action_id in PARAMETERIZED_ACTIONS and not additional_params:
            raise MissingActionParametersError(action.action_id)

        return await self.invoke_action(
            billing_id,
            device_id,
            action.action_id,
            action.action_name,
            token,
            additional_params=additional_params,
            service_url=base,
        )

    async def invoke_action(
        self,
        billing_id: str,
        device_id: str,
        action_id: str,
        action_name: str,
        token: str,
        *,
        additional_params: Optional[Mapping[str, str]] = None,
        service_url: Optional[str] = None,
    ) -> ActionResult:
        """Invoke an action directly, without consulting the catalog.

        The invocation expires five minutes after it is sent.
        """
        base = resolve_service_url(billing_id, service_url)
        require(device_id=device_id, action_id=action_id, action_name=action_name, token=token)
        if action_id in PARAMETERIZED_ACTIONS and not additional_params:
            raise MissingActionParametersError(action_id)

        body = {
            "name": action_name,
            "expiryDate": int(time.time()) + ACTION_EXPIRY_SECONDS,
            "requesterWorkflow": self.requester_workflow,
        }
        if additional_params:
            body["additionalParams"] = dict(additional_params)

        url = build_url(
            base,
            self.INVOKE_PATH.format(
                billing_id=billing_id,
                action_id=action_id,
                device_id=device_id,
            ),
        )
        data = await self.transport.post(url, token=token, json_body=body)
        result = ActionResult.from_api(data, url)
        self._check_result(action_name, device_id, result)

        logger.info(f"Action {action_name} accepted for device {device_id}")
        return result

    # ----------------------------------------
    # Dedicated Action Endpoints
    # ----------------------------------------

    async def _post_device_action(
        self,
        action: str,
        path: str,
        billing_id: str,
        device_id: str,
        token: str,
        service_url: Optional[str],
        extra_params: Optional[dict[str, str]] = None,
        require_device_id: bool = False,
    ) -> ActionResult:
        base = resolve_service_url(billing_id, service_url)
        require(device_id=device_id, token=token)
        params = {"deviceId": device_id, **(extra_params or {})}
        url = build_url(base, path.format(billing_id=billing_id), params)

        data = await self.transport.post(url, token=token, content_type=CONTENT_TYPE_FORM)
        result = ActionResult.from_api(data, url)
        if require_device_id and not result.maas360_device_id:
            raise DecodeError(f"No device ID returned in {action.lower()} response", endpoint=url)
        self._check_result(action, device_id, result)
        return result

    async def send_message(
        self,
        billing_id: str,
        device_id: str,
        subject: str,
        message: str,
        token: str,
        *,
        service_url: Optional[str] = None,
    ) -> ActionResult:
        """Send a message to the device user.

        Subject and message are sent as given; empty values are left for the
        vendor to accept or reject.

        Raises:
            DecodeError: If the response does not name the device
            RemoteActionFailedError: If the vendor reports a non-zero actionStatus
        """
        result = await self._post_device_action(
            "Send message",
            self.SEND_MESSAGE_PATH,
            billing_id,
            device_id,
            token,
            service_url,
            {"messageTitle": subject, "message": message},
            require_device_id=True,
        )

        logger.info(f"Message sent to device {result.maas360_device_id}: {result.description}")
        return result

    async def lock_device(
        self,
        billing_id: str,
        device_id: str,
        token: str,
        *,
        service_url: Optional[str] = None,
    ) -> ActionResult:
        """Schedule a device lock."""
        result = await self._post_device_action(
            "Lock device", self.LOCK_PATH, billing_id, device_id, token, service_url
        )
        logger.info(f"Device {device_id} lock scheduled successfully")
        return result

    async def hide_device(
        self,
        billing_id: str,
        device_id: str,
        token: str,
        *,
        service_url: Optional[str] = None,
    ) -> ActionResult:
        """Hide a device from the portal's device views."""
        result = await self._post_device_action(
            "Hide device", self.HIDE_PATH, billing_id, device_id, token, service_url
        )
        logger.info(f"Device {device_id} hidden successfully")
        return result

    # ----------------------------------------
    # OS Update Scheduling
    # ----------------------------------------

    async def update_os(
        self,
        billing_id: str,
        device_id: str,
        os_version: str,
        target_local_time: Optional[datetime],
        token: str,
        *,
        service_url: Optional[str] = None,
    ) -> ActionResult:
        """Schedule an OS update to os_version at the device's local time.

        Raises:
            InvalidArgumentError: If os_version or target_local_time is missing
        """
        base = resolve_service_url(billing_id, service_url)
        require(device_id=device_id, os_version=os_version, token=token)
        if target_local_time is None:
            raise InvalidArgumentError("target_local_time must be set", field="target_local_time")

        additional_params = {
            "productVersion": os_version,
            "osUpdateActionType": OS_UPDATE_ACTION_TYPE,
            "targetLocalTime": target_local_time.strftime(TARGET_TIME_FORMAT),
            "detailsURL": f"{base}/emc/?#",
        }
        return await self.perform_device_action(
            billing_id,
            device_id,
            SCHEDULE_OS_UPDATE_ACTION,
            additional_params,
            token,
            service_url=base,
        )

    @staticmethod
    def _check_result(action: str, device_id: str, result: ActionResult) -> None:
        if not result.succeeded:
            logger.warning(
                f"{action} failed for device {device_id} "
                f"(status {result.action_status}): {result.description}"
            )
            raise RemoteActionFailedError(
                action,
                result.action_status,
                result.description,
                device_id=device_id,
            )
