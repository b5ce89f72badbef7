from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

from .log_sink import LogSink, NullLogSink

# sandbox (for testing) and live versions of the API
API_BASE_SANDBOX = 'https://api.sandbox.paypal.com'
API_BASE_LIVE = 'https://api.paypal.com'

API_BASES = {
    'sandbox': API_BASE_SANDBOX,
    'live': API_BASE_LIVE,
}

# seconds before the reported expiry at which a token is renewed
REQUEST_NEW_TOKEN_BEFORE_EXPIRES_IN = 60

DEFAULT_TIMEOUT = 30.0


def resolve_api_base(value: str) -> str:
    """Map ``sandbox``/``live`` or one of the two API URLs to the base URL."""
    key = (value or '').strip()
    if key.lower() in API_BASES:
        return API_BASES[key.lower()]
    url = key.rstrip('/')
    if url in API_BASES.values():
        return url
    raise ValueError(f"Unknown API base {value!r}; expected 'sandbox', 'live', {API_BASE_SANDBOX} or {API_BASE_LIVE}")


def mask(val: Optional[str]) -> Optional[str]:
    if not val:
        return val
    if len(val) <= 6:
        return '*' * len(val)
    return val[:2] + '...' + val[-2:]


@dataclass(frozen=True)
class Credentials:
    client_id: str
    secret: str = field(repr=False)

    def __post_init__(self):
        if not self.client_id or not self.secret:
            raise ValueError('Credentials require a client_id and a secret')

    def masked(self) -> str:
        return f"{self.client_id}:{mask(self.secret)}"


@dataclass(frozen=True)
class ClientOptions:
    """Named construction options; not re-validated after the client is built."""
    timeout: float = DEFAULT_TIMEOUT
    log_sink: LogSink = field(default_factory=NullLogSink)
    token_refresh_margin: float = REQUEST_NEW_TOKEN_BEFORE_EXPIRES_IN
    return_representation: bool = False

    def __post_init__(self):
        if self.timeout <= 0:
            raise ValueError('timeout must be positive')
        if self.token_refresh_margin < 0:
            raise ValueError('token_refresh_margin cannot be negative')
