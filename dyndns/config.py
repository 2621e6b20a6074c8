"""
Configuration loading.

A configuration directory holds one YAML file per concern:

    <config_dir>/resolver.yaml        IP lookup services
    <config_dir>/providers/<kind>.yaml provider credentials (nitrado, hetzner, netcup)
    <config_dir>/dns/*.yaml           records to keep up to date, per provider
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .auto import AutomaticRecordConfig
from .dns.base import DNSProviderConfig
from .dns.hetzner import HetznerConfig
from .dns.netcup import NetcupConfig
from .dns.nitrado import NitradoConfig
from .dns.records import Record, RecordType, RecordValue, parse_record_value
from .dns.registry import available_kinds, get_config_class
from .utils.ip import ResolverConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = "config"
YAML_SUFFIXES = (".yaml", ".yml")


class ConfigError(Exception):
    """Configuration file is missing required data or cannot be parsed"""


def config_dir_from_env() -> Path:
    return Path(os.environ.get("DYNDNS_CONFIG_DIR", DEFAULT_CONFIG_DIR))


@dataclass
class ManualRecordConfig:
    """Record with a statically configured value"""

    domain: str
    value: RecordValue
    ttl: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ManualRecordConfig:
        ttl = data.get("ttl")
        record_type = RecordType(str(data["type"]).upper())
        return cls(
            domain=str(data["domain"]),
            value=parse_record_value(record_type, str(data["value"])),
            ttl=int(ttl) if ttl is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "domain": self.domain,
            "type": self.value.record_type.value,
            "value": self.value.content,
        }
        if self.ttl is not None:
            data["ttl"] = self.ttl
        return data

    def to_record(self) -> Record:
        return Record(domain=self.domain, value=self.value, ttl=self.ttl)


RecordConfig = Union[ManualRecordConfig, AutomaticRecordConfig]


def record_config_from_dict(data: dict[str, Any]) -> RecordConfig:
    """Parse ``{"manual": {...}}`` or ``{"automatic": {...}}``"""
    if not isinstance(data, dict) or len(data) != 1:
        raise ValueError(f"record must have exactly one of 'manual'/'automatic': {data!r}")

    mode, body = next(iter(data.items()))
    if mode == "manual":
        return ManualRecordConfig.from_dict(body)
    if mode == "automatic":
        return AutomaticRecordConfig.from_dict(body)
    raise ValueError(f"unknown record mode: {mode!r}")


def record_config_to_dict(record: RecordConfig) -> dict[str, Any]:
    mode = "manual" if isinstance(record, ManualRecordConfig) else "automatic"
    return {mode: record.to_dict()}


@dataclass
class DomainConfig:
    """Zone and the records kept up to date in it"""

    domain: str
    records: list[RecordConfig] = field(default_factory=list)

    @property
    def automatic_records(self) -> list[AutomaticRecordConfig]:
        return [r for r in self.records if isinstance(r, AutomaticRecordConfig)]

    @property
    def manual_records(self) -> list[ManualRecordConfig]:
        return [r for r in self.records if isinstance(r, ManualRecordConfig)]


@dataclass
class DnsConfig:
    """Domains managed through one configured provider"""

    provider_name: str
    domains: list[DomainConfig] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DnsConfig:
        return cls(
            provider_name=str(data["provider_name"]),
            domains=[
                DomainConfig(
                    domain=str(domain["domain"]),
                    records=[
                        record_config_from_dict(r) for r in domain.get("records") or []
                    ],
                )
                for domain in data.get("domains") or []
            ],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider_name": self.provider_name,
            "domains": [
                {
                    "domain": domain.domain,
                    "records": [record_config_to_dict(r) for r in domain.records],
                }
                for domain in self.domains
            ],
        }


def default_provider_configs() -> list[DNSProviderConfig]:
    return [NitradoConfig.default(), HetznerConfig.default(), NetcupConfig.default()]


def _read_yaml(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"{path}: YAML parsing error: {e}") from e


def _write_yaml(path: Path, data: Any) -> None:
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=False)


def _yaml_files(directory: Path) -> list[Path]:
    return sorted(p for p in directory.iterdir() if p.suffix in YAML_SUFFIXES)


@dataclass
class Config:
    """Fully merged configuration"""

    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    providers: list[DNSProviderConfig] = field(default_factory=default_provider_configs)
    dns: list[DnsConfig] = field(default_factory=list)

    @classmethod
    def load_from_directory(cls, config_dir: Union[str, Path]) -> Config:
        """
        Load configuration from a directory, falling back to defaults.

        Raises:
            ConfigError: a file cannot be parsed
        """
        config_dir = Path(config_dir)
        config = cls(
            resolver=cls._load_resolver_config(config_dir / "resolver.yaml"),
            providers=cls._load_provider_configs(config_dir / "providers"),
            dns=cls._load_dns_configs(config_dir / "dns"),
        )
        logger.debug(
            f"Loaded configuration from {config_dir}: "
            f"{len(config.providers)} providers, {len(config.dns)} DNS configs"
        )
        return config

    @staticmethod
    def _load_resolver_config(path: Path) -> ResolverConfig:
        if not path.exists():
            logger.info(f"Resolver config {path} does not exist, using defaults")
            return ResolverConfig()

        data = _read_yaml(path)
        try:
            return ResolverConfig.from_dict(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"{path}: invalid resolver config: {e}") from e

    @staticmethod
    def _load_provider_configs(providers_dir: Path) -> list[DNSProviderConfig]:
        if not providers_dir.is_dir():
            logger.info(
                f"Providers directory {providers_dir} does not exist, using defaults"
            )
            return default_provider_configs()

        configs: list[DNSProviderConfig] = []
        for path in _yaml_files(providers_dir):
            config_class = get_config_class(path.stem)
            if config_class is None:
                logger.error(
                    f"Unknown provider config file: {path} "
                    f"(expected one of {available_kinds()})"
                )
                continue

            data = _read_yaml(path)
            try:
                configs.append(config_class.from_dict(data))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                raise ConfigError(f"{path}: invalid provider config: {e}") from e
            logger.debug(f"Loaded {config_class.kind} provider config from {path}")

        if not configs:
            logger.info("No provider configs found, using defaults")
            return default_provider_configs()

        return configs

    @staticmethod
    def _load_dns_configs(dns_dir: Path) -> list[DnsConfig]:
        if not dns_dir.is_dir():
            logger.info(f"DNS directory {dns_dir} does not exist, using empty configs")
            return []

        configs = []
        for path in _yaml_files(dns_dir):
            data = _read_yaml(path)
            try:
                configs.append(DnsConfig.from_dict(data))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                raise ConfigError(f"{path}: invalid DNS config: {e}") from e
            logger.debug(f"Loaded DNS config from {path}")

        return configs

    @staticmethod
    def create_example_structure(config_dir: Union[str, Path]) -> None:
        """Write a configuration directory populated with defaults"""
        config_dir = Path(config_dir)
        (config_dir / "providers").mkdir(parents=True, exist_ok=True)
        (config_dir / "dns").mkdir(parents=True, exist_ok=True)

        _write_yaml(config_dir / "resolver.yaml", ResolverConfig().to_dict())

        for provider in default_provider_configs():
            _write_yaml(config_dir / "providers" / f"{provider.kind}.yaml", provider.to_dict())
            _write_yaml(
                config_dir / "dns" / f"{provider.kind}-domains.yaml",
                DnsConfig(provider_name=provider.name).to_dict(),
            )

        logger.info(f"Created example config structure in {config_dir}")
