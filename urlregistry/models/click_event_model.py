from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Any, Optional


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, treating naive values as UTC."""
    # 'Z' suffix is what JavaScript's toISOString() emits
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)


def format_timestamp(value: datetime) -> str:
    return value.astimezone(UTC).isoformat(timespec='microseconds').replace('+00:00', 'Z')


@dataclass(frozen=True)
class ClickEventModel:
    """Represent a single visit recorded against a shortcode.

    Attributes:
        timestamp (datetime):
            UTC instant of the click.
        source (str):
            Free-text origin tag, e.g. 'direct_access' or 'statistics_page'.
        location (str):
            Best-effort descriptor of where the click came from.
        client_signature (Optional[str]):
            Raw client string (user-agent like) supplied by the caller.

    Example:
        >>> click = ClickEventModel(
        ...     timestamp=datetime(2025, 10, 15, tzinfo=UTC),
        ...     source='direct_access',
        ...     location='Chrome Browser',
        ...     client_signature='Mozilla/5.0 ... Chrome/120.0',
        ... )
        >>> click.source
        'direct_access'
    """

    timestamp: datetime
    source: str
    location: str
    client_signature: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            'timestamp': format_timestamp(self.timestamp),
            'source': self.source,
            'location': self.location,
            'userAgent': self.client_signature,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'ClickEventModel':
        return cls(
            timestamp=parse_timestamp(data['timestamp']),
            source=data['source'],
            location=data['location'],
            client_signature=data.get('userAgent'),
        )
