"""
DNS Provider Errors

Exception hierarchy shared by the record model and the provider adapters.
"""

from typing import Any, Optional


class DNSError(Exception):
    """Base class for all record and provider errors"""


class ProviderError(DNSError):
    """A provider operation failed"""


class ProviderRequestError(ProviderError):
    """HTTP transport failure (connection, TLS, timeout)"""


class UnsuccessfulResponseError(ProviderError):
    """Provider answered with a non-2xx HTTP status"""

    def __init__(self, status_code: int, response: Optional[Any] = None):
        super().__init__(f"HTTP response is not successful: {status_code}")
        self.status_code = status_code
        self.response = response


class ProviderDecodeError(ProviderError):
    """Response body does not match the provider's schema"""


class DomainNotFoundError(ProviderError):
    """Domain has no matching zone at the provider"""

    def __init__(self, domain: str, provider_name: str):
        super().__init__(f"Domain '{domain}' not found in {provider_name} zones")
        self.domain = domain
        self.provider_name = provider_name


class ProviderNotConfiguredError(ProviderError):
    """Requested provider name is not present in the configuration"""

    def __init__(self, name: str):
        super().__init__(f"The given provider is not configured: {name}")
        self.name = name


class UnimplementedError(ProviderError, NotImplementedError):
    """Operation is not backed by a provider integration yet"""

    def __init__(self, provider_name: str, operation: str):
        super().__init__(f"{provider_name} {operation} not yet implemented")
        self.provider_name = provider_name
        self.operation = operation


# =============================================================================
# Record conversion
# =============================================================================


class RecordConversionError(ProviderError, ValueError):
    """Record content does not match the shape its type requires"""

    def __init__(self, message: str, content: str = ""):
        super().__init__(message)
        self.content = content


class InvalidIpError(RecordConversionError):
    def __init__(self, content: str):
        super().__init__(f"Invalid IP address: {content!r}", content)


class InvalidMxFormatError(RecordConversionError):
    def __init__(self, content: str):
        super().__init__(f"Invalid MX record format: {content!r}", content)


class InvalidMxPriorityError(RecordConversionError):
    def __init__(self, content: str):
        super().__init__(f"Invalid priority in MX record: {content!r}", content)


class InvalidSrvFormatError(RecordConversionError):
    def __init__(self, content: str):
        super().__init__(f"Invalid SRV record format: {content!r}", content)


class InvalidSrvValueError(RecordConversionError):
    def __init__(self, content: str):
        super().__init__(
            f"Invalid SRV record priority/weight/port: {content!r}", content
        )


class InvalidTlsaFormatError(RecordConversionError):
    def __init__(self, content: str):
        super().__init__(f"Invalid TLSA record format: {content!r}", content)


class InvalidTlsaValueError(RecordConversionError):
    def __init__(self, content: str):
        super().__init__(
            f"Invalid TLSA record usage/selector/matching type: {content!r}", content
        )


class InvalidCaaFormatError(RecordConversionError):
    def __init__(self, content: str):
        super().__init__(f"Invalid CAA record format: {content!r}", content)


class InvalidCaaFlagError(RecordConversionError):
    def __init__(self, content: str):
        super().__init__(f"Invalid CAA record flag: {content!r}", content)


class UnsupportedRecordTypeError(RecordConversionError):
    def __init__(self, record_type: Any, provider_name: str):
        type_name = getattr(record_type, "value", record_type)
        super().__init__(
            f"Record type {type_name} is not supported by {provider_name} provider"
        )
        self.record_type = record_type
        self.provider_name = provider_name
