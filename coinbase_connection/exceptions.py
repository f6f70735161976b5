"""
Domain exceptions for the Coinbase connection.

Callers catch CoinbaseConnectionError to handle any failure raised by this
package. Transport failures (no HTTP response at all) are not wrapped; they
surface as the httpx exception that caused them.
"""

from typing import Iterable, Optional


class CoinbaseConnectionError(Exception):
    """Base error for the Coinbase connection."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class CredentialsError(CoinbaseConnectionError):
    """Missing or invalid credentials, detected before any request is sent."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class SigningError(CoinbaseConnectionError):
    """Key material could not be used to sign a request token."""


class ResponseError(CoinbaseConnectionError):
    """Coinbase responded, but not with a usable result."""

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.method = method
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class PaginationLimitError(ResponseError):
    """The service kept reporting more pages past the configured limit."""

    def __init__(self, message: str, max_pages: int):
        self.max_pages = max_pages
        super().__init__(message)


class PermissionsError(CoinbaseConnectionError):
    """Granted API scopes do not match the required scopes."""

    def __init__(self, message: str, missing: Iterable[str] = (), extra: Iterable[str] = ()):
        self.missing = list(missing)
        self.extra = list(extra)
        super().__init__(message)
