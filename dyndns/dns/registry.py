"""
DNS Provider Registry

Factory for creating DNS provider instances based on configuration.
"""

import logging
from typing import Iterable, Optional, Type

import requests

from .base import DNSProvider, DNSProviderConfig
from .errors import ProviderNotConfiguredError

logger = logging.getLogger(__name__)

# Provider registry: kind -> (config class, provider class)
_providers: dict[str, tuple[Type[DNSProviderConfig], Type[DNSProvider]]] = {}


def register_provider(
    kind: str,
    config_class: Type[DNSProviderConfig],
    provider_class: Type[DNSProvider],
) -> None:
    """Register a DNS provider class"""
    _providers[kind.lower()] = (config_class, provider_class)
    logger.debug(f"Registered DNS provider: {kind}")


def available_kinds() -> list[str]:
    return list(_providers.keys())


def get_config_class(kind: str) -> Optional[Type[DNSProviderConfig]]:
    """Config class for a provider kind, or None if the kind is unknown"""
    entry = _providers.get(kind.lower())
    return entry[0] if entry else None


def create_provider(
    config: DNSProviderConfig, session: Optional[requests.Session] = None
) -> DNSProvider:
    """Instantiate the provider class registered for a config's kind"""
    try:
        _, provider_class = _providers[config.kind]
    except KeyError:
        raise ValueError(f"Unknown DNS provider kind: {config.kind!r}") from None

    return provider_class(config, session=session)


def get_provider(
    provider_name: str,
    provider_configs: Iterable[DNSProviderConfig],
    session: Optional[requests.Session] = None,
) -> DNSProvider:
    """
    Get a configured DNS provider instance.

    Args:
        provider_name: Configured display name (e.g., "Hetzner1")
        provider_configs: All configured providers
        session: Optional requests session to use instead of a new one

    Returns:
        Configured DNSProvider instance

    Raises:
        ProviderNotConfiguredError: no provider carries this name
    """
    for config in provider_configs:
        if config.name == provider_name:
            logger.debug(f"Creating DNS provider: {provider_name} ({config.kind})")
            return create_provider(config, session=session)

    raise ProviderNotConfiguredError(provider_name)


# Auto-register built-in providers
def _register_builtin_providers() -> None:
    """Register all built-in providers"""
    from .hetzner import HetznerConfig, HetznerProvider
    from .netcup import NetcupConfig, NetcupProvider
    from .nitrado import NitradoConfig, NitradoProvider

    register_provider(NitradoConfig.kind, NitradoConfig, NitradoProvider)
    register_provider(HetznerConfig.kind, HetznerConfig, HetznerProvider)
    register_provider(NetcupConfig.kind, NetcupConfig, NetcupProvider)


_register_builtin_providers()
