from __future__ import annotations
import json
import logging
import os
from typing import Any, Dict, Optional

import requests
from pydantic import BaseModel

from .codecs import json_default
from .exceptions import AuthError, TransportError, TransportTimeoutError
from .log_sink import LogSink, NullLogSink

logger = logging.getLogger(__name__)


class BaseClient:
    """HTTP plumbing: request composition, one pooled session, wire logging."""
    BASE_URL: str = ''

    def __init__(self, timeout: float = 30, session: Optional[requests.Session] = None, log_sink: Optional[LogSink] = None):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.log_sink: LogSink = log_sink or NullLogSink()

    def url_for(self, path: str) -> str:
        """Join ``path`` to the base URL; absolute URLs must point under it."""
        base = self.BASE_URL.rstrip('/')
        if '://' in path:
            if not path.startswith(base + '/'):
                raise ValueError(f"Refusing URL outside {base}: {path}")
            return path
        return base + '/' + path.lstrip('/')

    def new_request(self, method: str, path: str, body: Any | None = None, *, headers: Dict[str, str] | None = None) -> requests.Request:
        """Compose a request; a non-None body is sent as JSON."""
        req_headers: Dict[str, str] = {'Accept': 'application/json'}
        data = None
        if body is not None:
            data = serialize_body(body)
            req_headers['Content-Type'] = 'application/json'
        if headers:
            req_headers.update(headers)
        return requests.Request(method.upper(), self.url_for(path), headers=req_headers, data=data)

    def send(self, request: requests.Request, timeout: float | None = None) -> requests.Response:
        """Send without retries; transport failures become TransportError."""
        timeout = timeout or self.timeout
        try:
            prepared = self.session.prepare_request(request)
        except requests.RequestException as e:
            raise TransportError(f"Invalid request: {e}", method=request.method or '', url=request.url or '') from e
        logger.debug('%s %s', prepared.method, prepared.url)
        try:
            resp = self.session.send(prepared, timeout=timeout)
        except requests.Timeout as e:
            self._log_exchange(prepared, None)
            raise TransportTimeoutError(f"Timeout after {timeout}s: {e}", method=prepared.method or '', url=prepared.url or '') from e
        except requests.RequestException as e:
            self._log_exchange(prepared, None)
            raise TransportError(f"Network error: {e}", method=prepared.method or '', url=prepared.url or '') from e
        logger.debug('%s %s -> %s', prepared.method, prepared.url, resp.status_code)
        self._log_exchange(prepared, resp)
        return resp

    def _log_exchange(self, prepared: requests.PreparedRequest, resp: Optional[requests.Response]) -> None:
        try:
            self.log_sink.write_exchange(prepared, resp)
        except Exception:
            logger.warning('Log sink failed for %s %s', prepared.method, prepared.url, exc_info=True)

    def close(self) -> None:
        self.session.close()
        close_sink = getattr(self.log_sink, 'close', None)
        if close_sink is not None:
            close_sink()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    @staticmethod
    def env(name: str, required: bool = True) -> Optional[str]:
        val = os.getenv(name)
        if required and (val is None or val.strip() == ''):
            raise AuthError(f"Missing required environment variable: {name}")
        return val


def serialize_body(body: Any) -> bytes:
    if isinstance(body, BaseModel):
        body = body.model_dump(mode='python', by_alias=True, exclude_none=True)
    return json.dumps(body, default=json_default, separators=(',', ':')).encode('utf-8')
