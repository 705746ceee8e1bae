from datetime import datetime, timedelta, UTC

import pytest

from urlregistry.models import UrlRecordModel, ClickEventModel


@pytest.fixture
def record():
    created_at = datetime(2025, 10, 15, 12, 0, 0, 123456, tzinfo=UTC)
    return UrlRecordModel(
        id='0f3a9c1e5b7d4e2a8c6b1d3f5a7e9c0b',
        original_url='https://example.com/a',
        shortcode='abc123',
        created_at=created_at,
        expires_at=created_at + timedelta(minutes=30),
        validity_minutes=30,
    )


@pytest.fixture
def clicks():
    return [
        ClickEventModel(timestamp=datetime(2025, 10, 15, 12, 5, tzinfo=UTC), source='direct_access', location='Chrome Browser', client_signature='Chrome/120.0'),
        ClickEventModel(timestamp=datetime(2025, 10, 15, 12, 6, tzinfo=UTC), source='statistics_page', location='localhost'),
    ]
