"""
Nitrado DNS Provider Implementation

Uses the Nitrado REST API (bearer token) to read DNS records.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

from .base import DNSProvider, DNSProviderConfig, Feature, decode_str
from .errors import ProviderDecodeError, UnsupportedRecordTypeError
from .records import Record, RecordType, parse_record_value

logger = logging.getLogger(__name__)

NITRADO_API_BASE = "https://api.nitrado.net"


@dataclass
class NitradoConfig(DNSProviderConfig):
    """Nitrado-specific configuration"""

    kind: ClassVar[str] = "nitrado"

    @classmethod
    def default(cls) -> "NitradoConfig":
        return cls(name="Nitrado", api_key="your_api_key", api_base_url=NITRADO_API_BASE)


class RecordMode(str, Enum):
    """Whether Nitrado manages the record itself"""

    AUTO = "auto"
    MANUAL = "manual"


@dataclass
class NitradoRecord:
    """Record as returned by the Nitrado API"""

    type: RecordType
    content: str
    name: str
    mode: RecordMode

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NitradoRecord":
        try:
            return cls(
                type=RecordType(decode_str(data, "type")),
                content=decode_str(data, "content"),
                name=decode_str(data, "name"),
                mode=RecordMode(decode_str(data, "mode")),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ProviderDecodeError(f"Malformed Nitrado record {data!r}: {e}") from e

    def to_record(self) -> Record:
        """
        Convert into the canonical record.

        NS and SOA records are managed by Nitrado and not supported. The API
        does not report TTLs, so ttl is always None.
        """
        if self.type in (RecordType.NS, RecordType.SOA):
            raise UnsupportedRecordTypeError(self.type, NitradoProvider.provider_name)

        return Record(
            domain=self.name,
            value=parse_record_value(self.type, self.content),
            ttl=None,
        )


def parse_records_response(data: Any) -> list[NitradoRecord]:
    """Decode ``{"status": ..., "message": [record, ...]}``"""
    if not isinstance(data, dict) or not isinstance(data.get("message"), list):
        raise ProviderDecodeError("Nitrado response has no 'message' record list")
    if "status" not in data:
        raise ProviderDecodeError("Nitrado response has no 'status'")

    return [NitradoRecord.from_dict(item) for item in data["message"]]


class NitradoProvider(DNSProvider):
    """Nitrado DNS provider implementation"""

    provider_name = "Nitrado"
    supported_features = frozenset({Feature.GET_RECORDS, Feature.GET_ALL_RECORDS})

    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.config.api_key}"}

    def get_all_records(self, domain: str) -> list[Record]:
        data = self._api_request("GET", f"/domain/{domain}/records")
        records = [api_record.to_record() for api_record in parse_records_response(data)]

        self.logger.debug(f"Fetched {len(records)} records for {domain}")
        return records
