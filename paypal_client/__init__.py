"""Authenticated request pipeline for the PayPal REST API.

Usage example:
    from paypal_client import PayPalClient
    client = PayPalClient.from_env()
    order = client.request('GET', '/v2/checkout/orders/5O190127TN364715T', result_type=dict)
"""
from .client import PayPalClient  # noqa: F401
from .config import API_BASE_LIVE, API_BASE_SANDBOX, ClientOptions, Credentials  # noqa: F401
from .exceptions import (  # noqa: F401
    ApiRequestError,
    AuthError,
    DecodeError,
    RemoteError,
    TransportError,
    TransportTimeoutError,
)
from .log_sink import LogSink, NullLogSink, StreamLogSink  # noqa: F401
from .models import ErrorResponse, ErrorResponseDetail, Link, Token, TokenResponse  # noqa: F401
