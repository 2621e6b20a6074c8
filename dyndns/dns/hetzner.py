"""
Hetzner DNS Provider Implementation

Uses the Hetzner DNS Console API (dns.hetzner.com) to read DNS records.
Records are listed per zone id, so the zone name is resolved to its opaque
id through the zones endpoint first.
"""

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Optional

from .base import (
    DNSProvider,
    DNSProviderConfig,
    Feature,
    decode_optional_u32,
    decode_str,
)
from .errors import DomainNotFoundError, ProviderDecodeError
from .records import Record, RecordType, parse_record_value

logger = logging.getLogger(__name__)

HETZNER_API_BASE = "https://dns.hetzner.com/api/v1"


@dataclass
class HetznerConfig(DNSProviderConfig):
    """Hetzner DNS-specific configuration"""

    kind: ClassVar[str] = "hetzner"

    @classmethod
    def default(cls) -> "HetznerConfig":
        return cls(name="Hetzner1", api_key="your_api_key", api_base_url=HETZNER_API_BASE)


@dataclass
class HetznerRecord:
    """Record as returned by the Hetzner DNS API"""

    type: RecordType
    id: str
    created: str
    modified: str
    zone_id: str
    name: str
    value: str
    ttl: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HetznerRecord":
        try:
            return cls(
                type=RecordType(decode_str(data, "type")),
                id=decode_str(data, "id"),
                created=decode_str(data, "created"),
                modified=decode_str(data, "modified"),
                zone_id=decode_str(data, "zone_id"),
                name=decode_str(data, "name"),
                value=decode_str(data, "value"),
                ttl=decode_optional_u32(data, "ttl"),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ProviderDecodeError(f"Malformed Hetzner record {data!r}: {e}") from e

    def to_record(self) -> Record:
        return Record(
            domain=self.name,
            value=parse_record_value(self.type, self.value),
            ttl=self.ttl,
        )


def parse_records_response(data: Any) -> list[HetznerRecord]:
    """Decode ``{"records": [record, ...]}``"""
    if not isinstance(data, dict) or not isinstance(data.get("records"), list):
        raise ProviderDecodeError("Hetzner response has no 'records' list")

    return [HetznerRecord.from_dict(item) for item in data["records"]]


class HetznerProvider(DNSProvider):
    """
    Hetzner DNS provider implementation.

    Authenticates with the Auth-API-Token header.
    """

    provider_name = "Hetzner"
    supported_features = frozenset({Feature.GET_RECORDS, Feature.GET_ALL_RECORDS})

    def _auth_headers(self) -> dict[str, str]:
        return {"Auth-API-Token": self.config.api_key}

    def get_zone_id(self, domain: str) -> str:
        """
        Find the zone id for a domain.

        The zone name must match the domain exactly.

        Raises:
            DomainNotFoundError: no zone carries this name
        """
        data = self._api_request("GET", "/zones")

        zones = data.get("zones") if isinstance(data, dict) else None
        for zone in zones if isinstance(zones, list) else []:
            if not isinstance(zone, dict):
                continue
            zone_name = zone.get("name")
            zone_id = zone.get("id")
            if isinstance(zone_name, str) and isinstance(zone_id, str):
                if zone_name == domain:
                    self.logger.debug(f"Resolved zone {domain} -> {zone_id}")
                    return zone_id

        raise DomainNotFoundError(domain, self.name)

    def get_all_records(self, domain: str) -> list[Record]:
        zone_id = self.get_zone_id(domain)

        data = self._api_request("GET", "/records", params={"zone_id": zone_id})
        records = [api_record.to_record() for api_record in parse_records_response(data)]

        self.logger.debug(f"Fetched {len(records)} records for {domain}")
        return records
