"""Read-only reporting over a UrlRegistry

Classes:
    RegistrySummary:
        Aggregate counts for a statistics view.
    QueryService:
        Read-only views over registry state.

Functions:
    describe_client(signature) -> str:
        Coarse, display-only label for a client signature.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from urlregistry.constants import UNKNOWN_LOCATION
from urlregistry.models import UrlRecordModel, UrlRecordWithStats

if TYPE_CHECKING:
    from urlregistry.core.registry import UrlRegistry


# Checked in order, first match wins ('Mobile' user agents also mention Safari)
CLIENT_LABELS = (
    ('Mobile', 'Mobile Device'),
    ('Chrome', 'Chrome Browser'),
    ('Firefox', 'Firefox Browser'),
    ('Safari', 'Safari Browser'),
)


def describe_client(signature: Optional[str]) -> str:
    """Label a client signature by substring match

    This is a display heuristic with no correctness guarantee.

    Example:
        >>> describe_client('Mozilla/5.0 (iPhone; CPU iPhone OS 17_0) Mobile/15E148 Safari/604.1')
        'Mobile Device'
        >>> describe_client(None)
        'Unknown Location'
    """
    if not signature:
        return UNKNOWN_LOCATION
    for needle, label in CLIENT_LABELS:
        if needle in signature:
            return label
    return UNKNOWN_LOCATION


@dataclass(frozen=True)
class RegistrySummary:
    total_urls: int
    active_urls: int
    expired_urls: int
    total_clicks: int


class QueryService:
    """Read-only aggregation over registry state for reporting

    Methods:
        get_all_with_stats() -> list[UrlRecordWithStats]:
            Every record with its clicks and derived click count, in creation order.
        is_expired(record, now) -> bool:
            Pure expiry predicate, now > record.expires_at.
        summary(now=None) -> RegistrySummary:
            Total, active and expired link counts plus total clicks.
    """

    def __init__(self, registry: UrlRegistry):
        self.registry = registry

    def get_all_with_stats(self) -> list[UrlRecordWithStats]:
        return self.registry.list_all()

    @staticmethod
    def is_expired(record: UrlRecordModel, now: datetime) -> bool:
        return record.is_expired(now)

    def summary(self, now: Optional[datetime] = None) -> RegistrySummary:
        now = now if now is not None else self.registry.now()
        entries = self.get_all_with_stats()
        expired = sum(1 for entry in entries if self.is_expired(entry.record, now))

        return RegistrySummary(
            total_urls=len(entries),
            active_urls=len(entries) - expired,
            expired_urls=expired,
            total_clicks=sum(entry.click_count for entry in entries),
        )
