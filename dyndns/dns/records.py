"""
DNS Record Model

Canonical, provider-independent representation of DNS records.

Providers transmit the record type and its content as separate fields, and
most of them squeeze multi-field values (MX, SRV, TLSA, CAA) into a single
whitespace-separated string. parse_record_value() turns such a pair into one
of the typed value classes below; every value class renders back to the same
content string through its ``content`` property.
"""

import ipaddress
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, ClassVar, Optional, Union

from .errors import (
    InvalidCaaFlagError,
    InvalidCaaFormatError,
    InvalidIpError,
    InvalidMxFormatError,
    InvalidMxPriorityError,
    InvalidSrvFormatError,
    InvalidSrvValueError,
    InvalidTlsaFormatError,
    InvalidTlsaValueError,
)


class RecordType(str, Enum):
    """Supported DNS record types"""

    A = "A"
    AAAA = "AAAA"
    CNAME = "CNAME"
    TXT = "TXT"
    SPF = "SPF"
    NS = "NS"
    SOA = "SOA"
    MX = "MX"
    SRV = "SRV"
    TLSA = "TLSA"
    CAA = "CAA"


# =============================================================================
# Record values
# =============================================================================


@dataclass(frozen=True)
class AValue:
    address: ipaddress.IPv4Address

    record_type: ClassVar[RecordType] = RecordType.A

    @property
    def content(self) -> str:
        return str(self.address)


@dataclass(frozen=True)
class AAAAValue:
    address: ipaddress.IPv6Address

    record_type: ClassVar[RecordType] = RecordType.AAAA

    @property
    def content(self) -> str:
        return str(self.address)


@dataclass(frozen=True)
class CNAMEValue:
    target: str

    record_type: ClassVar[RecordType] = RecordType.CNAME

    @property
    def content(self) -> str:
        return self.target


@dataclass(frozen=True)
class TXTValue:
    text: str

    record_type: ClassVar[RecordType] = RecordType.TXT

    @property
    def content(self) -> str:
        return self.text


@dataclass(frozen=True)
class SPFValue:
    text: str

    record_type: ClassVar[RecordType] = RecordType.SPF

    @property
    def content(self) -> str:
        return self.text


@dataclass(frozen=True)
class NSValue:
    nameserver: str

    record_type: ClassVar[RecordType] = RecordType.NS

    @property
    def content(self) -> str:
        return self.nameserver


@dataclass(frozen=True)
class SOAValue:
    raw: str

    record_type: ClassVar[RecordType] = RecordType.SOA

    @property
    def content(self) -> str:
        return self.raw


@dataclass(frozen=True)
class MXValue:
    priority: int
    target: str

    record_type: ClassVar[RecordType] = RecordType.MX

    @property
    def content(self) -> str:
        return f"{self.priority} {self.target}"


@dataclass(frozen=True)
class SRVValue:
    priority: int
    weight: int
    port: int
    target: str

    record_type: ClassVar[RecordType] = RecordType.SRV

    @property
    def content(self) -> str:
        return f"{self.priority} {self.weight} {self.port} {self.target}"


@dataclass(frozen=True)
class TLSAValue:
    usage: int
    selector: int
    matching_type: int
    cert_data: str

    record_type: ClassVar[RecordType] = RecordType.TLSA

    @property
    def content(self) -> str:
        return f"{self.usage} {self.selector} {self.matching_type} {self.cert_data}"


@dataclass(frozen=True)
class CAAValue:
    flag: int
    tag: str
    value: str

    record_type: ClassVar[RecordType] = RecordType.CAA

    @property
    def content(self) -> str:
        return f"{self.flag} {self.tag} {self.value}"


RecordValue = Union[
    AValue,
    AAAAValue,
    CNAMEValue,
    TXTValue,
    SPFValue,
    NSValue,
    SOAValue,
    MXValue,
    SRVValue,
    TLSAValue,
    CAAValue,
]


@dataclass(frozen=True)
class Record:
    """
    Canonical DNS record.

    Attributes:
        domain: Hostname as returned/accepted by the provider (absolute or
            relative to the zone)
        value: Typed record value
        ttl: TTL in seconds, None when the provider does not report it
    """

    domain: str
    value: RecordValue
    ttl: Optional[int] = None

    @property
    def record_type(self) -> RecordType:
        return self.value.record_type

    def to_dict(self) -> dict[str, Any]:
        return {
            "domain": self.domain,
            "type": self.record_type.value,
            "content": self.value.content,
            "ttl": self.ttl,
        }


# =============================================================================
# Content parsing
# =============================================================================

_UINT_PATTERN = re.compile(r"\+?[0-9]+")


def parse_uint(token: str, bits: int) -> int:
    """
    Parse an unsigned integer that must fit into ``bits`` bits.

    Raises:
        ValueError: token is not a plain decimal or is out of range
    """
    if not _UINT_PATTERN.fullmatch(token):
        raise ValueError(f"invalid digit found in {token!r}")
    value = int(token)
    if value >= 1 << bits:
        raise ValueError(f"number too large to fit in u{bits}: {token!r}")
    return value


def _parse_ipv4(content: str) -> AValue:
    try:
        return AValue(ipaddress.IPv4Address(content))
    except ValueError as e:
        raise InvalidIpError(content) from e


def _parse_ipv6(content: str) -> AAAAValue:
    try:
        address = ipaddress.IPv6Address(content)
    except ValueError as e:
        raise InvalidIpError(content) from e

    # Zone ids ("fe80::1%eth0") are not valid record content
    if address.scope_id is not None:
        raise InvalidIpError(content)
    return AAAAValue(address)


def parse_mx(content: str) -> MXValue:
    parts = content.split()
    if len(parts) != 2:
        raise InvalidMxFormatError(content)

    try:
        priority = parse_uint(parts[0], 16)
    except ValueError as e:
        raise InvalidMxPriorityError(content) from e

    return MXValue(priority=priority, target=parts[1])


def parse_srv(content: str, priority: Optional[int] = None) -> SRVValue:
    """
    Parse SRV content.

    With ``priority`` given, content is ``weight port target`` (priority was
    transmitted separately), otherwise ``priority weight port target``.
    """
    parts = content.split()
    expected = 4 if priority is None else 3
    if len(parts) != expected:
        raise InvalidSrvFormatError(content)

    try:
        numbers = [parse_uint(part, 16) for part in parts[:-1]]
    except ValueError as e:
        raise InvalidSrvValueError(content) from e

    if priority is not None:
        numbers.insert(0, priority)

    return SRVValue(
        priority=numbers[0], weight=numbers[1], port=numbers[2], target=parts[-1]
    )


def parse_tlsa(content: str) -> TLSAValue:
    parts = content.split()
    if len(parts) != 4:
        raise InvalidTlsaFormatError(content)

    try:
        usage, selector, matching_type = (parse_uint(p, 16) for p in parts[:3])
    except ValueError as e:
        raise InvalidTlsaValueError(content) from e

    return TLSAValue(
        usage=usage, selector=selector, matching_type=matching_type, cert_data=parts[3]
    )


def parse_caa(content: str) -> CAAValue:
    parts = content.split()
    if len(parts) != 3:
        raise InvalidCaaFormatError(content)

    try:
        flag = parse_uint(parts[0], 8)
    except ValueError as e:
        raise InvalidCaaFlagError(content) from e

    return CAAValue(flag=flag, tag=parts[1], value=parts[2])


_PARSERS: dict[RecordType, Callable[[str], RecordValue]] = {
    RecordType.A: _parse_ipv4,
    RecordType.AAAA: _parse_ipv6,
    RecordType.CNAME: CNAMEValue,
    RecordType.TXT: TXTValue,
    RecordType.SPF: SPFValue,
    RecordType.NS: NSValue,
    RecordType.SOA: SOAValue,
    RecordType.MX: parse_mx,
    RecordType.SRV: parse_srv,
    RecordType.TLSA: parse_tlsa,
    RecordType.CAA: parse_caa,
}


def parse_record_value(record_type: RecordType, content: str) -> RecordValue:
    """
    Convert a wire-level (type, content) pair into a typed record value.

    Args:
        record_type: Declared record type
        content: Record content as transmitted by the provider

    Returns:
        Typed RecordValue

    Raises:
        RecordConversionError: content does not match the declared type
    """
    return _PARSERS[record_type](content)
