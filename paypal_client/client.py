from __future__ import annotations
import logging
import os
from typing import Any, Callable, Dict, Optional

import requests

from .base_client import BaseClient
from .config import API_BASE_SANDBOX, ClientOptions, Credentials, resolve_api_base
from .decoder import decode
from .log_sink import LogSink, NullLogSink, StreamLogSink
from .models import Token, TokenResponse
from .token_manager import TokenManager, utc_now

logger = logging.getLogger(__name__)

TOKEN_PATH = '/v1/oauth2/token'


class PayPalClient(BaseClient):
    """PayPal REST API client authenticated with the client-credentials grant.

    Usage:
        client = PayPalClient('client-id', 'secret', 'sandbox')
        order = client.request('GET', '/v2/checkout/orders/5O190127TN364715T', result_type=dict)
    """

    def __init__(
        self,
        client_id: str,
        secret: str,
        api_base: str = API_BASE_SANDBOX,
        options: Optional[ClientOptions] = None,
        *,
        session: Optional[requests.Session] = None,
        clock: Callable = utc_now,
    ):
        options = options or ClientOptions()
        super().__init__(timeout=options.timeout, session=session, log_sink=options.log_sink)
        self.credentials = Credentials(client_id, secret)
        self.BASE_URL = resolve_api_base(api_base)
        self.return_representation = options.return_representation
        self.tokens = TokenManager(self._fetch_token, margin_seconds=options.token_refresh_margin, clock=clock)

    @classmethod
    def from_env(cls, session: Optional[requests.Session] = None) -> 'PayPalClient':
        client_id = BaseClient.env('PAYPAL_CLIENT_ID')
        secret = BaseClient.env('PAYPAL_CLIENT_SECRET')
        api_base = os.getenv('PAYPAL_ENVIRONMENT', 'sandbox')
        log_file = os.getenv('PAYPAL_LOG_FILE')
        options = ClientOptions(
            timeout=float(os.getenv('PAYPAL_TIMEOUT', '30')),
            token_refresh_margin=float(os.getenv('PAYPAL_TOKEN_REFRESH_MARGIN', '60')),
            log_sink=StreamLogSink.open(log_file) if log_file else NullLogSink(),
        )
        return cls(client_id, secret, api_base, options, session=session)  # type: ignore[arg-type]

    def __repr__(self) -> str:
        return f"PayPalClient(client_id={self.credentials.client_id!r}, api_base={self.BASE_URL!r})"

    def set_log(self, sink: LogSink) -> None:
        self.log_sink = sink

    def set_return_representation(self) -> None:
        """Ask for the full resource in create/update responses."""
        self.return_representation = True

    def get_access_token(self, force_refresh: bool = False) -> Token:
        return self.tokens.ensure_valid(force_refresh)

    def _fetch_token(self) -> TokenResponse:
        logger.debug('Requesting access token for client %s', self.credentials.client_id)
        req = requests.Request(
            'POST',
            self.url_for(TOKEN_PATH),
            headers={'Accept': 'application/json', 'Content-Type': 'application/x-www-form-urlencoded'},
            data={'grant_type': 'client_credentials'},
            auth=(self.credentials.client_id, self.credentials.secret),
        )
        return decode(self.send(req), TokenResponse)

    def execute(
        self,
        method: str,
        path: str,
        body: Any | None = None,
        *,
        auth_required: bool = True,
        extra_headers: Dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> requests.Response:
        """Build, authorize and send one request; the response is returned undecoded."""
        req = self.new_request(method, path, body)
        auth_header: Optional[str] = None
        if auth_required:
            token = self.tokens.ensure_valid(False)
            auth_header = f"Bearer {token.access_token}"
            if self.return_representation:
                req.headers['Prefer'] = 'return=representation'
        if extra_headers:
            for name, value in extra_headers.items():
                if auth_header is not None and name.lower() == 'authorization':
                    continue
                req.headers[name] = value
        if auth_header is not None:
            req.headers['Authorization'] = auth_header
        return self.send(req, timeout=timeout)

    def request(
        self,
        method: str,
        path: str,
        body: Any | None = None,
        *,
        result_type: Any | None = None,
        auth_required: bool = True,
        extra_headers: Dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> Any:
        resp = self.execute(method, path, body, auth_required=auth_required, extra_headers=extra_headers, timeout=timeout)
        return decode(resp, result_type)

    def get(self, path: str, *, result_type: Any | None = None, extra_headers: Dict[str, str] | None = None) -> Any:
        return self.request('GET', path, result_type=result_type, extra_headers=extra_headers)

    def post(self, path: str, body: Any | None = None, *, result_type: Any | None = None, extra_headers: Dict[str, str] | None = None) -> Any:
        return self.request('POST', path, body, result_type=result_type, extra_headers=extra_headers)

    def patch(self, path: str, body: Any | None = None, *, result_type: Any | None = None, extra_headers: Dict[str, str] | None = None) -> Any:
        return self.request('PATCH', path, body, result_type=result_type, extra_headers=extra_headers)

    def delete(self, path: str, *, extra_headers: Dict[str, str] | None = None) -> None:
        return self.request('DELETE', path, extra_headers=extra_headers)
