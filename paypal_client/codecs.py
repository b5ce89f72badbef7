"""Wire codecs for the non-standard encodings used by the PayPal REST API.

Timestamps go out as ``YYYY-MM-DDThh:mm:ssZ`` (UTC, no fractional seconds)
and come back as any RFC 3339 instant. The token endpoint reports
``expires_in`` either as a JSON number or as a numeric string.
"""
from __future__ import annotations
import datetime
import decimal
import enum
import re
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, PlainSerializer

from .exceptions import DecodeError

TIMESTAMP_FORMAT = '%Y-%m-%dT%H:%M:%SZ'
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1
INTEGER_RE = re.compile(r'-?[0-9]+')


def format_timestamp(value: datetime.datetime) -> str:
    # naive datetimes are taken to be UTC already
    if value.tzinfo is not None:
        value = value.astimezone(datetime.timezone.utc)
    return value.strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime.datetime:
    """Parse an RFC 3339 instant into an aware datetime."""
    if not isinstance(value, str) or 'T' not in value.upper():
        raise DecodeError(f'Invalid RFC 3339 timestamp: {value!r}')
    text = value.strip()
    if text[-1] in 'zZ':
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.datetime.fromisoformat(text.replace('t', 'T'))
    except ValueError as e:
        raise DecodeError(f'Invalid RFC 3339 timestamp: {value!r}') from e
    if parsed.tzinfo is None:
        raise DecodeError(f'RFC 3339 timestamp without offset: {value!r}')
    return parsed


def parse_expires_in(value: Any) -> int:
    """Normalize an ``expires_in`` value to a signed 64-bit count of seconds.

    Integers are taken as-is, strings must hold an integer; anything else
    (floats, booleans, fractional strings) is rejected.
    """
    if isinstance(value, bool):
        raise DecodeError(f'expires_in must be an integer, got {value!r}')
    if isinstance(value, int):
        seconds = value
    elif isinstance(value, str):
        if not INTEGER_RE.fullmatch(value):
            raise DecodeError(f'expires_in must be an integer, got {value!r}')
        seconds = int(value)
    else:
        raise DecodeError(f'expires_in must be an integer, got {value!r}')
    if not INT64_MIN <= seconds <= INT64_MAX:
        raise DecodeError(f'expires_in out of range: {value!r}')
    return seconds


def _validate_expires_in(value: Any) -> int:
    # pydantic only wraps ValueError/AssertionError into a ValidationError
    try:
        return parse_expires_in(value)
    except DecodeError as e:
        raise ValueError(str(e)) from e


def _validate_timestamp(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return parse_timestamp(value)
        except DecodeError as e:
            raise ValueError(str(e)) from e
    return value


ExpiresIn = Annotated[int, BeforeValidator(_validate_expires_in)]

JSONTime = Annotated[
    datetime.datetime,
    BeforeValidator(_validate_timestamp),
    PlainSerializer(format_timestamp, return_type=str, when_used='json'),
]


def json_default(obj: Any) -> Any:
    """``default=`` hook for ``json.dumps`` on request bodies."""
    if isinstance(obj, datetime.datetime):
        return format_timestamp(obj)
    if isinstance(obj, datetime.date):
        return obj.isoformat()
    if isinstance(obj, decimal.Decimal):
        return str(obj)
    if isinstance(obj, enum.Enum):
        return obj.value
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode='python', by_alias=True, exclude_none=True)
    raise TypeError(f'Object of type {type(obj).__name__} is not JSON serializable')
