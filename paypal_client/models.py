"""Payload shapes the request pipeline itself reads or produces.

Endpoint-specific records (orders, subscriptions, payouts, ...) are owned by
callers and passed to ``PayPalClient.request`` as ``result_type``.
"""
from __future__ import annotations
import datetime
from dataclasses import dataclass
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .codecs import ExpiresIn


class TokenResponse(BaseModel):
    """Body of ``POST /v1/oauth2/token``."""
    model_config = ConfigDict(extra='ignore')

    access_token: str
    token_type: str = ''
    refresh_token: Optional[str] = None
    expires_in: ExpiresIn


class Link(BaseModel):
    model_config = ConfigDict(extra='ignore')

    href: str = ''
    rel: str = ''
    method: str = ''
    enctype: str = ''


class ErrorResponseDetail(BaseModel):
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    field: str = ''
    issue: str = ''
    description: str = ''
    links: List[Link] = Field(default_factory=list, alias='link')


class ErrorResponse(BaseModel):
    """Error body of business endpoints; the token endpoint uses the OAuth2
    ``error``/``error_description`` pair instead."""
    model_config = ConfigDict(extra='ignore')

    name: str = ''
    message: str = ''
    debug_id: str = ''
    information_link: str = ''
    details: List[ErrorResponseDetail] = Field(default_factory=list)
    error: str = ''
    error_description: str = ''


@dataclass(frozen=True)
class Token:
    access_token: str
    token_type: str
    expires_at: datetime.datetime
    refresh_token: Optional[str] = None

    @classmethod
    def from_response(cls, resp: TokenResponse, fetched_at: datetime.datetime) -> 'Token':
        return cls(
            access_token=resp.access_token,
            token_type=resp.token_type or 'Bearer',
            expires_at=fetched_at + datetime.timedelta(seconds=resp.expires_in),
            refresh_token=resp.refresh_token,
        )

    def is_valid(self, now: datetime.datetime, margin: datetime.timedelta) -> bool:
        return now < self.expires_at - margin

    def __repr__(self) -> str:
        return f"Token(token_type={self.token_type!r}, expires_at={self.expires_at.isoformat()})"
