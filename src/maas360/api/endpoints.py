"""Service endpoint resolution and request-building helpers.

A MaaS360 customer lives on one of five fixed service instances. The
instance is chosen by the first digit of the billing ID; everything else
in this module is string plumbing shared by the resource clients.
"""
import base64
from typing import Mapping, Optional
from urllib.parse import urlencode

from .exceptions import InvalidArgumentError, InvalidIdentifierError

M1 = "https://services.fiberlink.com"
M2 = "https://services.m2.maas360.com"
M3 = "https://services.m3.maas360.com"
M4 = "https://services.m4.maas360.com"
M6 = "https://services.m6.maas360.com"

SERVICE_URLS = {
    "1": M1,
    "2": M2,
    "3": M3,
    "4": M4,
    "6": M6,
}

# Values the vendor expects in every credential envelope
PLATFORM_ID = "3"
APP_VERSION = "1.0"

CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_FORM = "application/x-www-form-urlencoded"
MAAS_TOKEN_TEMPLATE = 'MaaS token="{token}"'


def get_service_url(billing_id: str) -> str:
    """Return the service base URL for a billing ID.

    Raises:
        InvalidIdentifierError: If billing_id is empty or its first
            character is not one of 1, 2, 3, 4, 6.
    """
    if not billing_id:
        raise InvalidIdentifierError(billing_id)
    try:
        return SERVICE_URLS[billing_id[0]]
    except KeyError:
        raise InvalidIdentifierError(billing_id) from None


def build_url(
    service_url: str,
    path: str,
    params: Optional[Mapping[str, str]] = None,
) -> str:
    """Join a service URL, a path and URL-encoded query parameters.

    Parameters are encoded in sorted key order so the same mapping always
    produces the same URL.
    """
    url = f"{service_url}{path}"
    if params:
        url = f"{url}?{urlencode(sorted(params.items()))}"
    return url


def maas_token_header(token: str) -> str:
    """Build the Authorization header value for a MaaS360 bearer token."""
    return MAAS_TOKEN_TEMPLATE.format(token=token)


def basic_auth(username: str, password: str) -> str:
    """Return a Basic-Auth header value, or "" if either part is empty."""
    if not username or not password:
        return ""
    encoded = base64.b64encode(f"{username}:{password}".encode()).decode()
    return f"Basic {encoded}"


def require(**values: Optional[str]) -> None:
    """Raise InvalidArgumentError for the first empty keyword argument."""
    for name, value in values.items():
        if not value:
            raise InvalidArgumentError(f"{name} must not be empty", field=name)


def resolve_service_url(billing_id: str, service_url: Optional[str] = None) -> str:
    """Use a service URL the caller already holds, or resolve it from billing_id."""
    if not billing_id:
        raise InvalidIdentifierError(billing_id)
    return service_url or get_service_url(billing_id)
