"""
Automatic Records

Builds A/AAAA records whose value is the caller's current public address,
and compares them against what a provider currently serves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from ipaddress import IPv4Address, IPv6Address
from typing import Any, Iterable, Optional, Union

import requests

from .dns.records import AAAAValue, AValue, Record
from .utils.ip import IPResolverError, ResolverConfig, resolve_ipv4, resolve_ipv6

logger = logging.getLogger(__name__)


class ResolveType(str, Enum):
    """Address family an automatic record is resolved for"""

    IPV4 = "IPv4"
    IPV6 = "IPv6"


@dataclass
class AutomaticRecordConfig:
    """Record whose value is resolved at run time"""

    domain: str
    resolve_type: ResolveType
    ttl: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AutomaticRecordConfig:
        ttl = data.get("ttl")
        return cls(
            domain=str(data["domain"]),
            resolve_type=ResolveType(data["resolve_type"]),
            ttl=int(ttl) if ttl is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "domain": self.domain,
            "resolve_type": self.resolve_type.value,
        }
        if self.ttl is not None:
            data["ttl"] = self.ttl
        return data


class AddressResolutionError(Exception):
    """Neither the IPv4 nor the IPv6 address could be resolved"""

    def __init__(self, ipv4_error: IPResolverError, ipv6_error: IPResolverError):
        super().__init__(
            f"Failed to resolve IPv4 and IPv6 addresses: {ipv4_error}; {ipv6_error}"
        )
        self.ipv4_error = ipv4_error
        self.ipv6_error = ipv6_error


@dataclass
class ResolvedAddresses:
    """Outcome of resolving both address families; at least one is set"""

    ipv4: Optional[IPv4Address] = None
    ipv6: Optional[IPv6Address] = None
    ipv4_error: Optional[IPResolverError] = None
    ipv6_error: Optional[IPResolverError] = None

    def for_type(
        self, resolve_type: ResolveType
    ) -> Optional[Union[IPv4Address, IPv6Address]]:
        if resolve_type == ResolveType.IPV4:
            return self.ipv4
        return self.ipv6


def _wrap_address(
    domain: str, address: Union[IPv4Address, IPv6Address], ttl: Optional[int]
) -> Record:
    if isinstance(address, IPv4Address):
        return Record(domain=domain, value=AValue(address), ttl=ttl)
    return Record(domain=domain, value=AAAAValue(address), ttl=ttl)


def resolve_automatic_record(
    resolve_type: ResolveType,
    domain: str,
    ttl: Optional[int],
    resolver_config: ResolverConfig,
    session: Optional[requests.Session] = None,
) -> Record:
    """
    Resolve one automatic record.

    Raises:
        IPResolverError: propagated unchanged from the resolver
    """
    address: Union[IPv4Address, IPv6Address]
    if resolve_type == ResolveType.IPV4:
        address = resolve_ipv4(resolver_config.ipv4, session)
    else:
        address = resolve_ipv6(resolver_config.ipv6, session)

    return _wrap_address(domain, address, ttl)


def resolve_addresses(
    resolver_config: ResolverConfig, session: Optional[requests.Session] = None
) -> ResolvedAddresses:
    """
    Resolve IPv4 and IPv6 one after the other.

    A single failing family is logged and the other one is used.

    Raises:
        AddressResolutionError: both families failed
    """
    result = ResolvedAddresses()

    try:
        result.ipv4 = resolve_ipv4(resolver_config.ipv4, session)
    except IPResolverError as e:
        result.ipv4_error = e

    try:
        result.ipv6 = resolve_ipv6(resolver_config.ipv6, session)
    except IPResolverError as e:
        result.ipv6_error = e

    if result.ipv4_error is not None and result.ipv6_error is not None:
        raise AddressResolutionError(result.ipv4_error, result.ipv6_error)

    if result.ipv4 is not None:
        logger.info(f"Successfully resolved IPv4 address: {result.ipv4}")
    else:
        logger.warning(
            f"Failed to resolve IPv4 address: {result.ipv4_error}. "
            "Still proceeding with IPv6 address update."
        )

    if result.ipv6 is not None:
        logger.info(f"Successfully resolved IPv6 address: {result.ipv6}")
    else:
        logger.warning(
            f"Failed to resolve IPv6 address: {result.ipv6_error}. "
            "Still proceeding with IPv4 address update."
        )

    return result


def build_automatic_records(
    record_configs: Iterable[AutomaticRecordConfig], addresses: ResolvedAddresses
) -> list[Record]:
    """Build records from already resolved addresses, skipping failed families"""
    records = []
    for config in record_configs:
        address = addresses.for_type(config.resolve_type)
        if address is None:
            logger.warning(
                f"Skipping {config.domain}: no {config.resolve_type.value} address"
            )
            continue
        records.append(_wrap_address(config.domain, address, config.ttl))
    return records


# =============================================================================
# Drift detection
# =============================================================================


@dataclass
class RecordChange:
    """Difference between a desired record and what the provider serves"""

    desired: Record
    current: list[Record]

    @property
    def action(self) -> str:
        return "update" if self.current else "create"


def find_changes(desired: Iterable[Record], current: Iterable[Record]) -> list[RecordChange]:
    """
    Compare desired records with the provider's current ones.

    A desired record is up to date when the provider serves a record with the
    same domain and value. A desired TTL of None matches any TTL, and a
    current TTL of None (unknown) matches any desired TTL.
    """
    current = list(current)
    changes = []

    for record in desired:
        same_type = [
            existing
            for existing in current
            if existing.domain == record.domain
            and existing.record_type == record.record_type
        ]
        up_to_date = any(
            existing.value == record.value
            and (record.ttl is None or existing.ttl is None or existing.ttl == record.ttl)
            for existing in same_type
        )
        if not up_to_date:
            changes.append(RecordChange(desired=record, current=same_type))

    return changes
