"""Tests for automatic record resolution and drift detection."""

import logging
from ipaddress import IPv4Address, IPv6Address

import pytest
import requests

from dyndns.auto import (
    AddressResolutionError,
    AutomaticRecordConfig,
    ResolvedAddresses,
    ResolveType,
    build_automatic_records,
    find_changes,
    resolve_addresses,
    resolve_automatic_record,
)
from dyndns.dns.records import AAAAValue, AValue, MXValue, Record, TXTValue
from dyndns.utils.ip import (
    InvalidIPFormatError,
    IPResolver,
    IPResolverRequestError,
    ResolverConfig,
)

from .conftest import FakeResponse, FakeSession

IPV4_URL = "https://ip.example.test"
IPV6_URL = "https://ipv6.example.test"


@pytest.fixture
def resolver_config() -> ResolverConfig:
    return ResolverConfig(ipv4=IPResolver(IPV4_URL), ipv6=IPResolver(IPV6_URL))


def session_for(ipv4=None, ipv6=None) -> FakeSession:
    routes = {}
    if ipv4 is not None:
        routes[IPV4_URL] = ipv4
    if ipv6 is not None:
        routes[IPV6_URL] = ipv6
    return FakeSession(routes)


class TestResolveAutomaticRecord:
    def test_ipv4(self, resolver_config: ResolverConfig) -> None:
        session = session_for(ipv4=FakeResponse(200, "203.0.113.7\n"))
        record = resolve_automatic_record(
            ResolveType.IPV4, "home.example.com", 300, resolver_config, session
        )
        assert record == Record(
            domain="home.example.com", value=AValue(IPv4Address("203.0.113.7")), ttl=300
        )

    def test_ipv6(self, resolver_config: ResolverConfig) -> None:
        session = session_for(ipv6=FakeResponse(200, "2001:db8::7"))
        record = resolve_automatic_record(
            ResolveType.IPV6, "home.example.com", None, resolver_config, session
        )
        assert record.value == AAAAValue(IPv6Address("2001:db8::7"))
        assert record.ttl is None
        assert [call["url"] for call in session.calls] == [IPV6_URL]

    def test_error_propagates(self, resolver_config: ResolverConfig) -> None:
        session = session_for(ipv4=FakeResponse(200, "not an address"))
        with pytest.raises(InvalidIPFormatError):
            resolve_automatic_record(
                ResolveType.IPV4, "home.example.com", None, resolver_config, session
            )


class TestResolveAddresses:
    def test_both_families(self, resolver_config: ResolverConfig) -> None:
        session = session_for(
            ipv4=FakeResponse(200, "203.0.113.7"), ipv6=FakeResponse(200, "2001:db8::7")
        )
        addresses = resolve_addresses(resolver_config, session)

        assert addresses.ipv4 == IPv4Address("203.0.113.7")
        assert addresses.ipv6 == IPv6Address("2001:db8::7")
        assert addresses.ipv4_error is None
        assert addresses.ipv6_error is None

    def test_ipv6_failure_proceeds_with_ipv4(
        self, resolver_config: ResolverConfig, caplog: pytest.LogCaptureFixture
    ) -> None:
        session = session_for(
            ipv4=FakeResponse(200, "203.0.113.7"),
            ipv6=requests.ConnectionError("network unreachable"),
        )
        with caplog.at_level(logging.INFO, logger="dyndns.auto"):
            addresses = resolve_addresses(resolver_config, session)

        assert addresses.ipv4 == IPv4Address("203.0.113.7")
        assert addresses.ipv6 is None
        assert isinstance(addresses.ipv6_error, IPResolverRequestError)

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "IPv6" in warnings[0].getMessage()

    def test_both_failing(self, resolver_config: ResolverConfig) -> None:
        session = session_for(
            ipv4=FakeResponse(200, "garbage"),
            ipv6=requests.ConnectionError("network unreachable"),
        )
        with pytest.raises(AddressResolutionError) as exc_info:
            resolve_addresses(resolver_config, session)

        assert isinstance(exc_info.value.ipv4_error, InvalidIPFormatError)
        assert isinstance(exc_info.value.ipv6_error, IPResolverRequestError)


class TestBuildAutomaticRecords:
    configs = [
        AutomaticRecordConfig("home.example.com", ResolveType.IPV4, ttl=60),
        AutomaticRecordConfig("home.example.com", ResolveType.IPV6),
    ]

    def test_builds_both(self) -> None:
        addresses = ResolvedAddresses(
            ipv4=IPv4Address("203.0.113.7"), ipv6=IPv6Address("2001:db8::7")
        )
        assert build_automatic_records(self.configs, addresses) == [
            Record("home.example.com", AValue(IPv4Address("203.0.113.7")), 60),
            Record("home.example.com", AAAAValue(IPv6Address("2001:db8::7")), None),
        ]

    def test_skips_missing_family(self) -> None:
        addresses = ResolvedAddresses(ipv4=IPv4Address("203.0.113.7"))
        records = build_automatic_records(self.configs, addresses)
        assert [r.value for r in records] == [AValue(IPv4Address("203.0.113.7"))]

    def test_config_from_dict(self) -> None:
        config = AutomaticRecordConfig.from_dict(
            {"domain": "home.example.com", "resolve_type": "IPv6", "ttl": "120"}
        )
        assert config == AutomaticRecordConfig("home.example.com", ResolveType.IPV6, 120)
        assert config.to_dict() == {
            "domain": "home.example.com",
            "resolve_type": "IPv6",
            "ttl": 120,
        }

    def test_config_rejects_unknown_family(self) -> None:
        with pytest.raises(ValueError):
            AutomaticRecordConfig.from_dict({"domain": "x", "resolve_type": "IPv5"})


class TestFindChanges:
    a_old = Record("home.example.com", AValue(IPv4Address("198.51.100.1")), None)
    a_new = Record("home.example.com", AValue(IPv4Address("203.0.113.7")), 300)

    def test_up_to_date(self) -> None:
        current = [Record("home.example.com", AValue(IPv4Address("203.0.113.7")), 300)]
        assert find_changes([self.a_new], current) == []

    def test_unknown_ttl_matches(self) -> None:
        current = [Record("home.example.com", AValue(IPv4Address("203.0.113.7")), None)]
        assert find_changes([self.a_new], current) == []

    def test_ttl_differs(self) -> None:
        current = [Record("home.example.com", AValue(IPv4Address("203.0.113.7")), 3600)]
        changes = find_changes([self.a_new], current)
        assert len(changes) == 1
        assert changes[0].action == "update"

    def test_value_differs(self) -> None:
        changes = find_changes([self.a_new], [self.a_old])
        assert len(changes) == 1
        assert changes[0].desired == self.a_new
        assert changes[0].current == [self.a_old]
        assert changes[0].action == "update"

    def test_missing_record(self) -> None:
        current = [
            Record("home.example.com", TXTValue("hello")),
            Record("other.example.com", AValue(IPv4Address("203.0.113.7"))),
        ]
        changes = find_changes([self.a_new], current)
        assert len(changes) == 1
        assert changes[0].current == []
        assert changes[0].action == "create"

    def test_one_matching_record_among_many(self) -> None:
        desired = Record("example.com", MXValue(10, "mail.example.com"))
        current = [
            Record("example.com", MXValue(20, "backup.example.com"), 3600),
            Record("example.com", MXValue(10, "mail.example.com"), 3600),
        ]
        assert find_changes([desired], current) == []
