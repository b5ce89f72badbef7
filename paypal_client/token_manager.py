"""Access-token cache with preemptive renewal.

One lock serializes check-then-fetch-then-store, so concurrent callers racing
on a stale token trigger a single fetch and all observe the renewed token.
The lock is released before the caller uses the token.
"""
from __future__ import annotations
import datetime
import logging
import threading
from typing import Callable, Optional

from .config import REQUEST_NEW_TOKEN_BEFORE_EXPIRES_IN
from .exceptions import AuthError, DecodeError, RemoteError
from .models import Token, TokenResponse

logger = logging.getLogger(__name__)


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class TokenManager:
    def __init__(
        self,
        fetch_token: Callable[[], TokenResponse],
        margin_seconds: float = REQUEST_NEW_TOKEN_BEFORE_EXPIRES_IN,
        clock: Callable[[], datetime.datetime] = utc_now,
    ):
        self._fetch_token = fetch_token
        self._margin = datetime.timedelta(seconds=margin_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._token: Optional[Token] = None

    @property
    def current(self) -> Optional[Token]:
        """The stored token, or None when absent or past its recorded expiry."""
        with self._lock:
            token = self._token
        if token is None or self._clock() >= token.expires_at:
            return None
        return token

    def ensure_valid(self, force_refresh: bool = False) -> Token:
        with self._lock:
            token = self._token
            if token is not None and not force_refresh and token.is_valid(self._clock(), self._margin):
                return token
            token = self._renew()
            self._token = token
        return token

    def invalidate(self) -> None:
        with self._lock:
            self._token = None

    def _renew(self) -> Token:
        try:
            resp = self._fetch_token()
        except RemoteError as e:
            raise AuthError(f"Token request rejected: {e}", remote=e) from e
        except DecodeError as e:
            raise AuthError(f"Unparsable token response: {e}") from e
        if resp is None or not resp.access_token:
            raise AuthError('Token response did not contain an access token')
        if resp.expires_in <= 0:
            raise AuthError(f"Token already expired on arrival: expires_in={resp.expires_in}")
        if resp.expires_in <= self._margin.total_seconds():
            logger.warning('Token lifetime %ss is within the %ss renewal margin; every call will renew it', resp.expires_in, self._margin.total_seconds())
        fetched_at = self._clock()
        try:
            token = Token.from_response(resp, fetched_at)
        except OverflowError as e:
            raise AuthError(f"Token expiry out of range: expires_in={resp.expires_in}") from e
        logger.info('Fetched new access token (%s), expires at %s', token.token_type, token.expires_at.isoformat())
        return token
