# Utility modules
from .ip import IPResolver, IPResolverError, ResolverConfig, resolve_ipv4, resolve_ipv6

__all__ = [
    "IPResolver",
    "IPResolverError",
    "ResolverConfig",
    "resolve_ipv4",
    "resolve_ipv6",
]
