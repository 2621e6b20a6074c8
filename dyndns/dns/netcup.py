"""
Netcup DNS Provider Implementation

The Netcup CCP webservice transmits MX and SRV priorities in a dedicated
field instead of inside the record content. The record model and its
conversion are implemented; fetching records from the API is not yet.
"""

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Optional

from .base import (
    DNSProvider,
    DNSProviderConfig,
    config_str,
    decode_optional_bool,
    decode_optional_str,
    decode_str,
)
from .errors import (
    InvalidMxFormatError,
    InvalidMxPriorityError,
    InvalidSrvFormatError,
    InvalidSrvValueError,
    ProviderDecodeError,
    UnimplementedError,
)
from .records import (
    MXValue,
    Record,
    RecordType,
    RecordValue,
    parse_record_value,
    parse_srv,
    parse_uint,
)

logger = logging.getLogger(__name__)

NETCUP_API_BASE = "https://ccp.netcup.net/run/webservice/servers/endpoint.php"


@dataclass
class NetcupConfig(DNSProviderConfig):
    """Netcup-specific configuration"""

    # Netcup customer number
    customer_number: int = 0

    # API password (in addition to the API key)
    api_password: str = ""

    kind: ClassVar[str] = "netcup"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NetcupConfig":
        return cls(
            name=config_str(data, "name"),
            api_key=config_str(data, "api_key"),
            api_base_url=config_str(data, "api_base_url").rstrip("/"),
            timeout=int(data.get("timeout", 30)),
            customer_number=int(data["customer_number"]),
            api_password=config_str(data, "api_password"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "customer_number": self.customer_number,
            "api_password": self.api_password,
        }

    @classmethod
    def default(cls) -> "NetcupConfig":
        return cls(
            name="Netcup1",
            api_key="your_api_key",
            api_base_url=NETCUP_API_BASE,
            customer_number=0,
            api_password="your_api_password",
        )


@dataclass
class NetcupRecord:
    """Record as returned by the Netcup webservice"""

    hostname: str
    type: RecordType
    destination: str
    id: Optional[str] = None
    priority: Optional[str] = None
    deleterecord: Optional[bool] = None
    state: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NetcupRecord":
        try:
            return cls(
                hostname=decode_str(data, "hostname"),
                type=RecordType(decode_str(data, "type")),
                destination=decode_str(data, "destination"),
                id=decode_optional_str(data, "id"),
                priority=decode_optional_str(data, "priority"),
                deleterecord=decode_optional_bool(data, "deleterecord"),
                state=decode_optional_str(data, "state"),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ProviderDecodeError(f"Malformed Netcup record {data!r}: {e}") from e

    def _parse_value(self) -> RecordValue:
        if self.type == RecordType.MX:
            if self.priority is None:
                raise InvalidMxFormatError("MX record missing priority")
            try:
                priority = parse_uint(self.priority, 16)
            except ValueError as e:
                raise InvalidMxPriorityError(self.priority) from e
            return MXValue(priority=priority, target=self.destination)

        if self.type == RecordType.SRV:
            if self.priority is None:
                raise InvalidSrvFormatError("SRV record missing priority")
            try:
                priority = parse_uint(self.priority, 16)
            except ValueError as e:
                raise InvalidSrvValueError(self.priority) from e
            return parse_srv(self.destination, priority=priority)

        return parse_record_value(self.type, self.destination)

    def to_record(self) -> Record:
        # The webservice reports TTL per zone, not per record
        return Record(domain=self.hostname, value=self._parse_value(), ttl=None)


def parse_records_response(data: Any) -> list[NetcupRecord]:
    """Decode ``{"records": [record, ...]}``"""
    if not isinstance(data, dict) or not isinstance(data.get("records"), list):
        raise ProviderDecodeError("Netcup response has no 'records' list")

    return [NetcupRecord.from_dict(item) for item in data["records"]]


class NetcupProvider(DNSProvider):
    """
    Netcup DNS provider.

    Not backed by an integration yet: every operation raises
    UnimplementedError and no feature is reported as supported.
    """

    provider_name = "Netcup"
    supported_features = frozenset()

    def get_all_records(self, domain: str) -> list[Record]:
        raise UnimplementedError(self.name, "get_all_records")
