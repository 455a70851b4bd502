#!/usr/bin/env python3
"""Application catalog and installed-application search for MaaS360.

Both searches share one contract: the caller must supply a non-empty set
of filters, the filters go out as URL query parameters, and a page with no
records is a NotFoundError. Paging is left to the caller: repeat the call
with ``pageNumber`` incremented to fetch more.

API Details:
    - Catalog:   GET /application-apis/applications/2.0/search/customer/{billingId}?<filters>
                 -> {"apps": {"app": [...], "count", "pageSize", "pageNumber"}}
    - Installed: GET /application-apis/installedApps/1.0/search/{billingId}?<filters>
                 -> {"installedApps": {"app": [...], "count", "pageSize", "pageNumber"}}

Example:
    async with MaaS360Transport() as transport:
        apps = ApplicationClient(transport)
        found = await apps.search_catalog("1234567", token, {"appId": "com.example.app"})
"""
import logging
from typing import Callable, Mapping, Optional, TypeVar

from .client import MaaS360Transport
from .endpoints import build_url, require, resolve_service_url
from .exceptions import InvalidArgumentError, NotFoundError
from .models import CatalogApp, InstalledApp, SearchPage, one_or_many, section

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ApplicationClient:
    """Search the app catalog and the apps installed across the fleet.

    Attributes:
        transport: MaaS360Transport used for every request
    """

    CATALOG_PATH = "/application-apis/applications/2.0/search/customer/{billing_id}"
    INSTALLED_PATH = "/application-apis/installedApps/1.0/search/{billing_id}"

    def __init__(self, transport: MaaS360Transport):
        self.transport = transport

    async def _search(
        self,
        path: str,
        envelope: str,
        resource_type: str,
        decode: Callable[[dict], T],
        billing_id: str,
        token: str,
        filters: Optional[Mapping[str, str]],
        service_url: Optional[str],
    ) -> SearchPage[T]:
        base = resolve_service_url(billing_id, service_url)
        require(token=token)
        if not filters:
            raise InvalidArgumentError("filters must not be empty", field="filters")

        url = build_url(base, path.format(billing_id=billing_id), filters)
        data = await self.transport.get(url, token=token)

        wrapper = section(data, envelope, url)
        items = [decode(raw) for raw in one_or_many(wrapper.get("app"), "app", url)]
        if not items:
            raise NotFoundError(resource_type, endpoint=url, method="GET")

        logger.debug(f"{resource_type} search returned {len(items)} record(s)")
        return SearchPage.from_api(wrapper, items)

    # ----------------------------------------
    # App Catalog
    # ----------------------------------------

    async def search_catalog_page(
        self,
        billing_id: str,
        token: str,
        filters: Optional[Mapping[str, str]],
        *,
        service_url: Optional[str] = None,
    ) -> SearchPage[CatalogApp]:
        """Search the app catalog; filters must include appId.

        Raises:
            InvalidArgumentError: If filters are empty or lack appId
            NotFoundError: If no app matches
        """
        if filters and not filters.get("appId"):
            raise InvalidArgumentError("appId filter is required", field="appId")
        return await self._search(
            self.CATALOG_PATH,
            "apps",
            "apps",
            CatalogApp.from_api,
            billing_id,
            token,
            filters,
            service_url,
        )

    async def search_catalog(
        self,
        billing_id: str,
        token: str,
        filters: Optional[Mapping[str, str]],
        *,
        service_url: Optional[str] = None,
    ) -> list[CatalogApp]:
        """Return the catalog apps matching filters, in vendor order."""
        page = await self.search_catalog_page(
            billing_id, token, filters, service_url=service_url
        )
        return page.items

    # ----------------------------------------
    # Installed Apps
    # ----------------------------------------

    async def search_installed_apps_page(
        self,
        billing_id: str,
        token: str,
        filters: Optional[Mapping[str, str]],
        *,
        service_url: Optional[str] = None,
    ) -> SearchPage[InstalledApp]:
        """Search applications installed on managed devices."""
        return await self._search(
            self.INSTALLED_PATH,
            "installedApps",
            "installed apps",
            InstalledApp.from_api,
            billing_id,
            token,
            filters,
            service_url,
        )

    async def search_installed_apps(
        self,
        billing_id: str,
        token: str,
        filters: Optional[Mapping[str, str]],
        *,
        service_url: Optional[str] = None,
    ) -> list[InstalledApp]:
        page = await self.search_installed_apps_page(
            billing_id, token, filters, service_url=service_url
        )
        return page.items
