from __future__ import annotations
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ErrorResponseDetail


class ApiRequestError(Exception):
    """Base class for every failure raised by the request pipeline."""


class AuthError(ApiRequestError):
    """Access token acquisition or renewal failed."""

    def __init__(self, message: str, remote: Optional['RemoteError'] = None):
        super().__init__(message)
        self.remote = remote


class TransportError(ApiRequestError):
    """Network, TLS or connection failure before any response was received."""

    def __init__(self, message: str, method: str = '', url: str = ''):
        super().__init__(message)
        self.method = method
        self.url = url


class TransportTimeoutError(TransportError):
    """The transport deadline elapsed before a response was received."""


class DecodeError(ApiRequestError):
    """A response body could not be parsed into the expected shape."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RemoteError(ApiRequestError):
    """Non-2xx response, normalized from the API's error body.

    https://developer.paypal.com/docs/api/errors/
    """

    def __init__(
        self,
        method: str,
        url: str,
        status_code: int,
        message: str = '',
        name: str = '',
        debug_id: str = '',
        information_link: str = '',
        details: Optional[List['ErrorResponseDetail']] = None,
    ):
        self.method = method
        self.url = url
        self.status_code = status_code
        self.message = message
        self.name = name
        self.debug_id = debug_id
        self.information_link = information_link
        self.details = tuple(details or ())
        super().__init__(str(self))

    def __str__(self) -> str:
        details = [f"{d.field}: {d.issue}" for d in self.details]
        return f"{self.method} {self.url}: {self.status_code} {self.message}, {details}"

    def __repr__(self) -> str:
        return f"RemoteError(status_code={self.status_code}, name={self.name!r}, debug_id={self.debug_id!r})"
