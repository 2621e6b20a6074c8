"""IP Resolution Utilities.

Fetches the caller's public IPv4/IPv6 address from an HTTP lookup service.
A service either answers with the bare address (``Raw``) or with a JSON
document the address is extracted from by a dotted key path (``JSON``).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from ipaddress import IPv4Address, IPv6Address
from typing import Any, Callable, Optional, TypeVar

import requests

logger = logging.getLogger(__name__)

DEFAULT_IPV4_URL = "https://ip.cancom.io"
DEFAULT_IPV6_URL = "https://ipv6.cancom.io"

# Request timeout in seconds
DEFAULT_TIMEOUT = 15

AddressT = TypeVar("AddressT", IPv4Address, IPv6Address)


# =============================================================================
# Errors
# =============================================================================


class IPResolverError(Exception):
    """Resolving the public IP address failed"""


class IPResolverRequestError(IPResolverError):
    """Error while sending the HTTP request"""


class InvalidIPFormatError(IPResolverError):
    """Resolved value is not an address of the requested family"""

    def __init__(self, value: str):
        super().__init__(f"Invalid IP address format: {value!r}")
        self.value = value


class JSONParseError(IPResolverError):
    """Error while extracting the address from a JSON response"""


class EmptyPathError(JSONParseError):
    def __init__(self) -> None:
        super().__init__("JSON path was empty")


class PathNotFoundError(JSONParseError):
    def __init__(self, path: str, segment: str):
        super().__init__(f"JSON path {path} not found at {segment}")
        self.path = path
        self.segment = segment


class NotAStringError(JSONParseError):
    def __init__(self, value: Any):
        super().__init__(f"JSON value is not a string: {value!r}")
        self.value = value


# =============================================================================
# Configuration
# =============================================================================


@dataclass
class IPResolver:
    """Lookup service for one address family"""

    url: str

    # Dotted key path into a JSON response; None for a raw body
    json_path: Optional[str] = None

    @property
    def is_json(self) -> bool:
        return self.json_path is not None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IPResolver:
        """
        Parse ``{"url": ..., "type": "Raw" | {"JSON": "<path>"}}``.

        Raises:
            ValueError: unknown resolver type
        """
        resolver_type = data.get("type", "Raw")
        if resolver_type == "Raw":
            return cls(url=str(data["url"]))
        if isinstance(resolver_type, dict) and list(resolver_type) == ["JSON"]:
            return cls(url=str(data["url"]), json_path=str(resolver_type["JSON"]))
        raise ValueError(f"unknown resolver type: {resolver_type!r}")

    def to_dict(self) -> dict[str, Any]:
        resolver_type: Any = "Raw" if self.json_path is None else {"JSON": self.json_path}
        return {"url": self.url, "type": resolver_type}


@dataclass
class ResolverConfig:
    """Lookup services for both address families"""

    ipv4: IPResolver = field(default_factory=lambda: IPResolver(DEFAULT_IPV4_URL))
    ipv6: IPResolver = field(default_factory=lambda: IPResolver(DEFAULT_IPV6_URL))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResolverConfig:
        return cls(
            ipv4=IPResolver.from_dict(data["ipv4"]),
            ipv6=IPResolver.from_dict(data["ipv6"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"ipv4": self.ipv4.to_dict(), "ipv6": self.ipv6.to_dict()}


# =============================================================================
# Resolution
# =============================================================================


def parse_json_response(response: str, path: str) -> str:
    """
    Extract a string from a JSON document by a dotted key path.

    Args:
        response: JSON document
        path: Object keys separated by dots (e.g. "data.ip")

    Returns:
        The string found at ``path``

    Raises:
        EmptyPathError: path is empty
        JSONParseError: response is not valid JSON
        PathNotFoundError: a path segment is missing
        NotAStringError: the value at ``path`` is not a string
    """
    if not path:
        raise EmptyPathError()

    try:
        current: Any = json.loads(response)
    except json.JSONDecodeError as e:
        raise JSONParseError(f"Could not parse JSON response: {e}") from e

    for segment in path.split("."):
        if not isinstance(current, dict) or segment not in current:
            raise PathNotFoundError(path, segment)
        current = current[segment]

    if not isinstance(current, str):
        raise NotAStringError(current)

    return current


def resolve_ip(
    resolver: IPResolver,
    parse: Callable[[str], AddressT],
    session: Optional[requests.Session] = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> AddressT:
    """
    Resolve the public address with a single HTTP request.

    Args:
        resolver: Lookup service
        parse: Address class of the requested family
        session: Optional requests session
        timeout: Request timeout in seconds

    Raises:
        IPResolverError: request, extraction or address parsing failed
    """
    logger.debug(f"Resolving {parse.__name__} using resolver: {resolver}")
    http: Any = session if session is not None else requests

    try:
        response = http.get(resolver.url, timeout=timeout)
        body = response.text.strip()
    except requests.RequestException as e:
        raise IPResolverRequestError(f"Error while sending HTTP request: {e}") from e

    value = body if resolver.json_path is None else parse_json_response(body, resolver.json_path)

    try:
        address = parse(value)
    except ValueError as e:
        raise InvalidIPFormatError(value) from e

    if getattr(address, "scope_id", None) is not None:
        raise InvalidIPFormatError(value)
    return address


def resolve_ipv4(
    resolver: IPResolver, session: Optional[requests.Session] = None
) -> IPv4Address:
    return resolve_ip(resolver, IPv4Address, session)


def resolve_ipv6(
    resolver: IPResolver, session: Optional[requests.Session] = None
) -> IPv6Address:
    return resolve_ip(resolver, IPv6Address, session)
