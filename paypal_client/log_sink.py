"""Optional wire log: the composed request and the raw response of every call.

The sink is a passive observer; the client catches and logs anything it
raises so the call result is never affected.
"""
from __future__ import annotations
import threading
from typing import IO, Optional, Protocol, runtime_checkable

import requests

MASKED_HEADERS = ('authorization',)


@runtime_checkable
class LogSink(Protocol):
    def write_exchange(self, request: requests.PreparedRequest, response: Optional[requests.Response]) -> None:
        ...


class NullLogSink:
    def write_exchange(self, request, response) -> None:
        return None


def _header_value(name: str, value: str) -> str:
    # basic auth carries the client secret
    if name.lower() in MASKED_HEADERS and value.lower().startswith('basic '):
        return 'Basic ***'
    return value


def _body_text(body) -> str:
    if body is None:
        return ''
    if isinstance(body, bytes):
        return body.decode('utf-8', errors='replace')
    return str(body)


def format_request(request: requests.PreparedRequest) -> str:
    lines = [f"{request.method} {request.url}"]
    for name, value in request.headers.items():
        lines.append(f"{name}: {_header_value(name, value)}")
    lines.append('')
    lines.append(_body_text(request.body))
    return '\n'.join(lines)


def format_response(response: requests.Response) -> str:
    lines = [f"HTTP {response.status_code} {response.reason or ''}".rstrip()]
    for name, value in response.headers.items():
        lines.append(f"{name}: {value}")
    lines.append('')
    lines.append(response.text)
    return '\n'.join(lines)


class StreamLogSink:
    """Write each exchange to a text stream (an open file, ``sys.stderr``...)."""

    def __init__(self, stream: IO[str], owns_stream: bool = False):
        self.stream = stream
        self.owns_stream = owns_stream
        self._lock = threading.Lock()

    @classmethod
    def open(cls, path: str) -> 'StreamLogSink':
        return cls(open(path, 'a', encoding='utf-8'), owns_stream=True)

    def write_exchange(self, request: requests.PreparedRequest, response: Optional[requests.Response]) -> None:
        parts = [format_request(request)]
        if response is not None:
            parts.append(format_response(response))
        text = '\n\n'.join(parts) + '\n\n'
        with self._lock:
            self.stream.write(text)
            self.stream.flush()

    def close(self) -> None:
        # streams passed in by the caller stay open
        if self.owns_stream and not self.stream.closed:
            self.stream.close()
