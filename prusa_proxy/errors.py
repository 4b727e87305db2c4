"""
Prusa Proxy Errors
==================

Every error carries the HTTP status the proxy answers with when it
surfaces on a single-printer endpoint.
"""

from typing import Optional


class ProxyError(Exception):
    """Base class for proxy errors."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(ProxyError):
    """Configuration file could not be loaded."""


class PrinterNotFoundError(ProxyError):
    """No username or password configured for an address."""

    status_code = 400

    def __init__(self, address: str, field: str = 'username'):
        super().__init__(f'{field} not found for the printer with IP: {address}')
        self.address = address
        self.field = field


class NoJobError(ProxyError):
    """Printer reports job ID 0."""

    status_code = 400

    def __init__(self, address: str):
        super().__init__(f'no job found for the printer with IP: {address}')
        self.address = address


class JobLookupError(ProxyError):
    """Job ID could not be fetched from the printer."""

    status_code = 502

    def __init__(self, address: str, error: Exception):
        super().__init__(
            f'failed to get job ID for the printer with IP: {address}, error: {error}'
        )
        self.address = address
        self.error = error


class PrinterConnectionError(ProxyError):
    """Transport failure talking to a printer."""

    status_code = 502


class PrinterResponseError(ProxyError):
    """Printer answered outside the 2xx range."""

    def __init__(self, status_code: int, reason: str = ''):
        self.status = f'{status_code} {reason}'.strip()
        super().__init__(self.status, status_code=status_code)


class PrinterDecodeError(ProxyError):
    """Printer returned a body that is not the expected JSON."""

    status_code = 502
