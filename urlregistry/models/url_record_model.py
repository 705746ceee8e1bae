from dataclasses import dataclass
from datetime import datetime
from typing import Any

from urlregistry.models.click_event_model import ClickEventModel, parse_timestamp, format_timestamp


@dataclass(frozen=True)
class UrlRecordModel:
    """Represent a shortened URL mapping.

    Records are created once and never updated. Expiry is a predicate over
    `expires_at`, records are never removed once they expire.

    Attributes:
        id (str):
            Opaque unique identifier assigned at creation.
        original_url (str):
            The absolute URL the shortcode redirects to.
        shortcode (str):
            The unique 3-10 character alphanumeric token.
        created_at (datetime):
            Creation instant in UTC.
        expires_at (datetime):
            `created_at + validity_minutes`, computed once at creation.
        validity_minutes (int):
            Validity period in minutes (1..525600).

    Example:
        >>> from datetime import UTC, timedelta
        >>> created_at = datetime(2025, 10, 15, 12, 0, tzinfo=UTC)
        >>> record = UrlRecordModel(
        ...     id='4f1c0b6a9e2d4c8b9a7e3f2d1c0b9a8e',
        ...     original_url='https://example.com/article/123',
        ...     shortcode='abc123',
        ...     created_at=created_at,
        ...     expires_at=created_at + timedelta(minutes=30),
        ...     validity_minutes=30,
        ... )
        >>> record.is_expired(created_at + timedelta(minutes=30))
        False
        >>> record.is_expired(created_at + timedelta(minutes=31))
        True
    """

    id: str
    original_url: str
    shortcode: str
    created_at: datetime
    expires_at: datetime
    validity_minutes: int

    def is_expired(self, now: datetime) -> bool:
        # Strict comparison: a link is still valid at exactly expires_at
        return now > self.expires_at

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'originalUrl': self.original_url,
            'shortcode': self.shortcode,
            'createdAt': format_timestamp(self.created_at),
            'expiresAt': format_timestamp(self.expires_at),
            'validityMinutes': self.validity_minutes,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'UrlRecordModel':
        return cls(
            id=str(data['id']),
            original_url=data['originalUrl'],
            shortcode=data['shortcode'],
            created_at=parse_timestamp(data['createdAt']),
            expires_at=parse_timestamp(data['expiresAt']),
            validity_minutes=int(data['validityMinutes']),
        )


@dataclass(frozen=True)
class ShortenedUrl:
    """Result of creating a short URL: the stored record and its display URL."""

    record: UrlRecordModel
    short_url: str

    @property
    def shortcode(self) -> str:
        return self.record.shortcode


@dataclass(frozen=True)
class UrlRecordWithStats:
    """Read model pairing a record with its click history.

    `click_count` is always derived from `clicks` and never stored.
    """

    record: UrlRecordModel
    short_url: str
    clicks: tuple[ClickEventModel, ...] = ()

    @property
    def click_count(self) -> int:
        return len(self.clicks)

    @property
    def shortcode(self) -> str:
        return self.record.shortcode
