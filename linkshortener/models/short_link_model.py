from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timedelta, UTC

from linkshortener.constants import Defaults, TTL
from linkshortener.utils.helpers import new_link_id


@dataclass(frozen=True)
class ClickRecordModel:
    """Represent one observed resolution of a short link.

    Attributes:
        timestamp (datetime):
            Moment the click was recorded (UTC).
        user_agent (str):
            Free-text user agent of the client. May be empty.
        referrer (str):
            Referring page. 'Direct' when the client sent no referrer.

    Example:
        >>> click = ClickRecordModel(timestamp=datetime.now(UTC), user_agent='curl/8.5.0')
        >>> click.referrer
        'Direct'
    """

    timestamp: datetime
    user_agent: str = ''
    referrer: str = Defaults.REFERRER


@dataclass(frozen=True)
class ShortLinkModel:
    """Represent a shortcode to destination URL mapping and its click history.

    Attributes:
        id (str):
            Opaque unique identifier assigned at creation.
        original_url (str):
            Normalized (scheme-qualified) destination URL.
        shortcode (str):
            Unique short identifier used as the redirect path segment.
        created_at (datetime):
            Creation time (UTC).
        validity_minutes (int):
            Validity period the creator asked for.
        expires_at (datetime):
            `created_at + validity_minutes`. Never changed after creation.
        is_active (bool):
            False only after an explicit deactivation.
        clicks (tuple[ClickRecordModel, ...]):
            Append-only click history in insertion order.

    Example:
        >>> link = ShortLinkModel.create(
        ...     original_url='https://example.com/article/123',
        ...     shortcode='abc123',
        ...     validity_minutes=30,
        ... )
        >>> link.expires_at - link.created_at
        datetime.timedelta(seconds=1800)
        >>> link.is_resolvable()
        True
    """

    id: str
    original_url: str
    shortcode: str
    created_at: datetime
    validity_minutes: int
    expires_at: datetime
    is_active: bool = True
    clicks: tuple[ClickRecordModel, ...] = field(default_factory=tuple)

    @classmethod
    def create(
        cls,
        *,
        original_url: str,
        shortcode: str,
        validity_minutes: int,
        created_at: datetime | None = None,
    ) -> ShortLinkModel:
        """Assemble a brand new active link with a fresh id and derived expiry."""
        created_at = created_at or datetime.now(UTC)
        return cls(
            id=new_link_id(created_at),
            original_url=original_url,
            shortcode=shortcode,
            created_at=created_at,
            validity_minutes=validity_minutes,
            expires_at=created_at + timedelta(seconds=validity_minutes * TTL.ONE_MINUTE),
        )

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.now(UTC)) > self.expires_at

    def is_resolvable(self, now: datetime | None = None) -> bool:
        return self.is_active and not self.is_expired(now)

    def status(self, now: datetime | None = None) -> str:
        """Return 'inactive', 'expired' or 'active' (in that order of precedence)."""
        if not self.is_active:
            return 'inactive'
        if self.is_expired(now):
            return 'expired'
        return 'active'

    def with_click(self, click: ClickRecordModel) -> ShortLinkModel:
        return dataclasses.replace(self, clicks=(*self.clicks, click))

    def deactivated(self) -> ShortLinkModel:
        return dataclasses.replace(self, is_active=False)
