"""
Abstract DNS Provider Interface

Provides the base class every DNS provider adapter derives from. Adapters
know one backend's wire format and authentication scheme and convert the
backend's records into the canonical Record model.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Optional

import requests

from .errors import (
    ProviderDecodeError,
    ProviderRequestError,
    UnimplementedError,
    UnsuccessfulResponseError,
)
from .records import Record

logger = logging.getLogger(__name__)

U32_MAX = 2**32 - 1


# =============================================================================
# JSON field decoding
# =============================================================================


def decode_str(data: dict[str, Any], key: str) -> str:
    """Required string field; raises TypeError for any other JSON type"""
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"field {key!r} must be a string, got {value!r}")
    return value


def decode_optional_str(data: dict[str, Any], key: str) -> Optional[str]:
    if data.get(key) is None:
        return None
    return decode_str(data, key)


def decode_optional_bool(data: dict[str, Any], key: str) -> Optional[bool]:
    value = data.get(key)
    if value is not None and not isinstance(value, bool):
        raise TypeError(f"field {key!r} must be a boolean, got {value!r}")
    return value


def decode_optional_u32(data: dict[str, Any], key: str) -> Optional[int]:
    """
    Optional unsigned 32-bit integer field.

    Floats, booleans and numeric strings are rejected, not coerced.
    """
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"field {key!r} must be an integer, got {value!r}")
    if not 0 <= value <= U32_MAX:
        raise ValueError(f"field {key!r} out of range: {value}")
    return value


def config_str(data: dict[str, Any], key: str) -> str:
    """Required config value; an empty YAML value is rejected"""
    value = data[key]
    if value is None:
        raise ValueError(f"{key!r} must not be empty")
    return str(value)


class Feature(str, Enum):
    """Operations a provider may support"""

    GET_RECORDS = "get_records"
    GET_ALL_RECORDS = "get_all_records"
    ADD_RECORD = "add_record"
    UPDATE_RECORD = "update_record"
    DELETE_RECORD = "delete_record"


@dataclass
class DNSProviderConfig:
    """Base configuration for DNS providers"""

    # Display name, used to select the provider
    name: str

    # API key / token
    api_key: str

    # API base URL, without trailing slash
    api_base_url: str

    # Request timeout in seconds
    timeout: int = 30

    # Provider kind, matches the config file stem (e.g. "hetzner")
    kind: ClassVar[str] = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DNSProviderConfig":
        return cls(
            name=config_str(data, "name"),
            api_key=config_str(data, "api_key"),
            api_base_url=config_str(data, "api_base_url").rstrip("/"),
            timeout=int(data.get("timeout", 30)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "api_key": self.api_key,
            "api_base_url": self.api_base_url,
            "timeout": self.timeout,
        }


class DNSProvider(ABC):
    """
    Abstract base class for DNS providers.

    Subclasses implement get_all_records(); get_records() is derived from it
    so every provider filters subdomains the same way. Write operations are
    declared here and raise UnimplementedError until a provider backs them
    with a real integration.
    """

    # Stable display identifier
    provider_name: ClassVar[str] = ""

    # Operations backed by a real integration
    supported_features: ClassVar[frozenset[Feature]] = frozenset()

    def __init__(
        self, config: DNSProviderConfig, session: Optional[requests.Session] = None
    ):
        self.config = config
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        # Sessions passed in belong to the caller and are not closed here
        self._owns_session = session is None
        self._session = session if session is not None else self._create_session()

    @property
    def name(self) -> str:
        return self.provider_name

    def get_supported_features(self) -> set[Feature]:
        return set(self.supported_features)

    def is_feature_supported(self, feature: Feature) -> bool:
        return feature in self.get_supported_features()

    def close(self) -> None:
        """Release the HTTP session if this provider created it"""
        if self._owns_session:
            self._session.close()

    def _auth_headers(self) -> dict[str, str]:
        """Headers authenticating every request against the provider API"""
        return {}

    def _create_session(self) -> requests.Session:
        """Create configured requests session"""
        session = requests.Session()
        session.headers.update(
            {
                "Content-Type": "application/json",
                **self._auth_headers(),
            }
        )
        return session

    def _api_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """
        Make API request and decode the JSON body.

        Raises:
            ProviderRequestError: transport failure
            UnsuccessfulResponseError: non-2xx status
            ProviderDecodeError: body is not valid JSON
        """
        url = f"{self.config.api_base_url}{endpoint}"
        self.logger.debug(f"{method} {url} params={params}")

        try:
            response = self._session.request(
                method=method,
                url=url,
                params=params,
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            self.logger.error(f"{self.name} API request failed: {e}")
            raise ProviderRequestError(f"Request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            self.logger.error(
                f"{self.name} API error: HTTP {response.status_code} for {url}"
            )
            raise UnsuccessfulResponseError(response.status_code, response)

        try:
            return response.json()
        except ValueError as e:
            raise ProviderDecodeError(f"JSON parsing error: {e}") from e

    # ==========================================================================
    # Abstract methods - must be implemented by providers
    # ==========================================================================

    @abstractmethod
    def get_all_records(self, domain: str) -> list[Record]:
        """
        Fetch every record of a zone.

        Conversion is fail-fast: the first record that cannot be converted
        aborts the whole fetch.

        Args:
            domain: Zone name (e.g. "example.com")

        Returns:
            List of canonical records in provider order

        Raises:
            ProviderError: request, decode or conversion failure
        """

    # ==========================================================================
    # Derived operations
    # ==========================================================================

    def get_records(self, domain: str, subdomains: list[str]) -> list[Record]:
        """
        Fetch the records of a zone whose domain is one of ``subdomains``.

        Matching is exact string membership, order follows the provider.
        """
        return [
            record
            for record in self.get_all_records(domain)
            if record.domain in subdomains
        ]

    def add_record(self, record: Record) -> None:
        raise UnimplementedError(self.name, "add_record")

    def update_record(self, record: Record) -> None:
        raise UnimplementedError(self.name, "update_record")

    def delete_record(self, record: Record) -> None:
        raise UnimplementedError(self.name, "delete_record")
