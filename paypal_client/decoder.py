from __future__ import annotations
import functools
import json
import logging
from typing import Any, Optional

import requests
from pydantic import TypeAdapter, ValidationError

from .exceptions import DecodeError, RemoteError
from .models import ErrorResponse

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=256)
def _adapter(result_type: Any) -> TypeAdapter:
    return TypeAdapter(result_type)


def is_success(status_code: int) -> bool:
    return 200 <= status_code <= 299


def decode(response: requests.Response, result_type: Optional[Any] = None) -> Any:
    """Decode a 2xx body into ``result_type`` or raise the structured error.

    ``result_type`` may be anything pydantic can validate into (a model class,
    ``dict``, ``list[Model]``...), ``bytes`` for the raw body, or None when the
    success carries no body worth reading. An empty body decodes to None only
    on 204.
    """
    if not is_success(response.status_code):
        raise structured_error(response)
    if result_type is None:
        return None
    if result_type is bytes:
        return response.content
    if not response.content or not response.content.strip():
        if response.status_code == 204:
            return None
        raise DecodeError('Empty response body', status_code=response.status_code)
    try:
        data = json.loads(response.content)
    except ValueError as e:
        raise DecodeError(f"Failed to decode JSON response: {e}", status_code=response.status_code) from e
    try:
        return _adapter(result_type).validate_python(data)
    except ValidationError as e:
        raise DecodeError(
            f"Response does not match {getattr(result_type, '__name__', result_type)}: {e}",
            status_code=response.status_code,
        ) from e


def structured_error(response: requests.Response) -> RemoteError:
    request = response.request
    method = (request.method if request is not None else None) or ''
    url = (request.url if request is not None else None) or response.url or ''
    try:
        body = ErrorResponse.model_validate_json(response.content or b'')
    except ValidationError:
        logger.debug('Unparsable error body for %s %s (%s)', method, url, response.status_code)
        return RemoteError(
            method=method,
            url=url,
            status_code=response.status_code,
            message=response.reason or f"HTTP {response.status_code}",
        )
    return RemoteError(
        method=method,
        url=url,
        status_code=response.status_code,
        message=body.message or body.error_description,
        name=body.name or body.error,
        debug_id=body.debug_id,
        information_link=body.information_link,
        details=body.details,
    )
