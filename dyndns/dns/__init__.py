# DNS Management Module
# Canonical record model, abstract provider interface and implementations

from .base import DNSProvider, DNSProviderConfig, Feature
from .errors import DNSError, ProviderError, RecordConversionError
from .hetzner import HetznerConfig, HetznerProvider
from .netcup import NetcupConfig, NetcupProvider
from .nitrado import NitradoConfig, NitradoProvider
from .records import Record, RecordType, RecordValue, parse_record_value
from .registry import create_provider, get_provider, register_provider

__all__ = [
    "DNSError",
    "DNSProvider",
    "DNSProviderConfig",
    "Feature",
    "HetznerConfig",
    "HetznerProvider",
    "NetcupConfig",
    "NetcupProvider",
    "NitradoConfig",
    "NitradoProvider",
    "ProviderError",
    "Record",
    "RecordConversionError",
    "RecordType",
    "RecordValue",
    "create_provider",
    "get_provider",
    "parse_record_value",
    "register_provider",
]
