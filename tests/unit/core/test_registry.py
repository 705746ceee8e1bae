"""Unit tests for UrlRegistry

Test coverage includes:

1. Creation with generated shortcodes
   - Ensures generated shortcodes are 6 Base62 characters and unique.
   - Ensures records carry computed expiry, a display URL and are persisted.

2. Creation with custom shortcodes
   - Ensures format boundaries (3 and 10 characters) are enforced.
   - Ensures taken shortcodes (active or expired) raise ShortcodeTakenError.

3. Validation
   - Ensures invalid URLs and validity periods are rejected before any mutation.
   - Ensures invalid argument types raise BeartypeCallHintParamViolation.

4. Shortcode generation loop
   - Ensures collisions are retried until an unused code comes back.
   - Ensures the loop is bounded and raises GenerationExhaustedError.

5. Resolution
   - Ensures unknown and expired shortcodes resolve to None.
   - Pins the strict expiry boundary.

6. Persistence failures
   - Ensures failed saves roll back the new record and raise PersistenceFailureError.
   - Ensures clicks recorded before the shortcode was created survive create() and its rollback.

7. Listing and persistence round-trip
   - Ensures list_all() returns every record in creation order with clicks.
   - Ensures a registry reloaded from the same store is identical.
   - Ensures a store holding duplicate shortcodes is rejected on load.

8. Concurrency
   - Ensures concurrent creates can't claim the same custom shortcode twice.
"""

import re
import threading
from datetime import datetime, timedelta, UTC

import pytest
from beartype.roar import BeartypeCallHintParamViolation
from freezegun import freeze_time

from urlregistry.core import UrlRegistry
from urlregistry.dao import RegistryMemoryDAO, RegistryFileDAO
from urlregistry.dao.exceptions import DataStoreError
from urlregistry.exceptions import (
    InvalidURLError,
    InvalidShortcodeError,
    ShortcodeTakenError,
    InvalidValidityError,
    PersistenceFailureError,
    GenerationExhaustedError,
    ValidationError,
)
from urlregistry.models import ShortenedUrl, UrlRecordModel


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def scripted_factory():
    """Build a shortcode factory returning scripted candidates and counting calls."""

    def _build(*candidates):
        calls = []
        iterator = iter(candidates)

        def factory():
            calls.append(1)
            return next(iterator)

        factory.calls = calls
        return factory

    return _build


# -------------------------------
# 1. Creation with generated shortcodes
# -------------------------------


@freeze_time('2025-10-15 12:00:00')
def test_create_with_generated_shortcode(registry, dao):
    """Ensure create() returns a stored record with a 6 character Base62 shortcode."""
    shortened = registry.create('https://example.com/a')

    assert isinstance(shortened, ShortenedUrl)
    record = shortened.record
    assert re.fullmatch(r'[A-Za-z0-9]{6}', record.shortcode)
    assert record.original_url == 'https://example.com/a'
    assert record.validity_minutes == 30
    assert record.created_at == datetime(2025, 10, 15, 12, 0, tzinfo=UTC)
    assert record.expires_at == datetime(2025, 10, 15, 12, 30, tzinfo=UTC)
    assert shortened.short_url == f'https://sho.rt/{record.shortcode}'

    assert dao.saves == 1
    records, clicks = dao.load()
    assert records == [record]
    assert clicks == {record.shortcode: []}


def test_generated_shortcodes_are_unique(registry):
    shortcodes = [registry.create(f'https://example.com/{i}').shortcode for i in range(500)]
    assert len(set(shortcodes)) == 500
    assert all(re.fullmatch(r'[A-Za-z0-9]{6}', code) for code in shortcodes)


def test_record_ids_are_unique(registry):
    ids = {registry.create('https://example.com').record.id for _ in range(50)}
    assert len(ids) == 50


@pytest.mark.parametrize('custom_shortcode', [None, ''])
def test_empty_custom_shortcode_generates_one(registry, custom_shortcode):
    shortened = registry.create('https://example.com', custom_shortcode)
    assert len(shortened.shortcode) == 6


def test_len_and_contains(registry):
    registry.create('https://example.com', 'abc123')
    assert len(registry) == 1
    assert 'abc123' in registry
    assert 'zzz999' not in registry


# -------------------------------
# 2. Creation with custom shortcodes
# -------------------------------


@pytest.mark.parametrize('shortcode', ['abc', 'validcode1', 'MiXeD123'])
def test_create_with_valid_custom_shortcode(registry, shortcode):
    shortened = registry.create('https://example.com', shortcode)
    assert shortened.shortcode == shortcode
    assert shortened.short_url == f'https://sho.rt/{shortcode}'


@pytest.mark.parametrize('shortcode', ['ab', 'toolongcode11', 'has-dash', 'with space', 'under_score'])
def test_create_with_invalid_custom_shortcode(registry, shortcode):
    with pytest.raises(InvalidShortcodeError):
        registry.create('https://example.com', shortcode)


def test_create_with_taken_custom_shortcode(registry):
    registry.create('https://example.com/first', 'taken1')

    with pytest.raises(ShortcodeTakenError):
        registry.create('https://example.com/second', 'taken1')

    assert len(registry) == 1
    assert registry.resolve('taken1').original_url == 'https://example.com/first'


def test_expired_shortcode_is_never_reused():
    """Shortcodes stay reserved after the record expires."""
    with freeze_time('2025-10-15 12:00:00') as frozen:
        registry = UrlRegistry(RegistryMemoryDAO(), base_url='https://sho.rt')
        registry.create('https://example.com', 'oldcode', validity_minutes=1)
        frozen.tick(timedelta(minutes=5))

        assert registry.resolve('oldcode') is None
        with pytest.raises(ShortcodeTakenError):
            registry.create('https://example.com/new', 'oldcode')


def test_generated_shortcode_never_collides_with_custom(registry, scripted_factory):
    registry.create('https://example.com', 'abc123')
    factory = scripted_factory('abc123', 'abc123', 'xyz789')
    registry._shortcode_factory = factory

    assert registry.create('https://example.com/other').shortcode == 'xyz789'
    assert len(factory.calls) == 3


# -------------------------------
# 3. Validation
# -------------------------------


@pytest.mark.parametrize('url', ['not a url', '', 'example.com', 'https://', 'http:// spaced.com'])
def test_create_with_invalid_url(registry, dao, url):
    with pytest.raises(InvalidURLError):
        registry.create(url)

    assert len(registry) == 0
    assert dao.saves == 0


@pytest.mark.parametrize('validity', [0, -5, 525_601, True])
def test_create_with_invalid_validity(registry, dao, validity):
    with pytest.raises(InvalidValidityError):
        registry.create('https://example.com', validity_minutes=validity)

    assert len(registry) == 0
    assert dao.saves == 0


@pytest.mark.parametrize('validity', [1, 525_600])
def test_create_with_validity_bounds(registry, validity):
    record = registry.create('https://example.com', validity_minutes=validity).record
    assert record.expires_at - record.created_at == timedelta(minutes=validity)


def test_validation_errors_share_base_class(registry):
    with pytest.raises(ValidationError) as exc_info:
        registry.create('not a url')
    assert exc_info.value.error_code == 'validation:invalid_url'


def test_url_is_validated_before_shortcode(registry):
    """All validation happens up front, URL first."""
    registry.create('https://example.com', 'taken1')
    with pytest.raises(InvalidURLError):
        registry.create('not a url', 'taken1')


@pytest.mark.parametrize(
    'args',
    [
        (None,),
        (42,),
        ('https://example.com', 123),
        ('https://example.com', None, '30'),
        ('https://example.com', None, 30.0),
    ],
)
def test_create_with_invalid_types(registry, args):
    with pytest.raises(BeartypeCallHintParamViolation):
        registry.create(*args)


# -------------------------------
# 4. Shortcode generation loop
# -------------------------------


def test_generation_exhausted(dao):
    registry = UrlRegistry(dao, base_url='https://sho.rt', shortcode_factory=lambda: 'same01', max_attempts=5)
    registry.create('https://example.com')

    with pytest.raises(GenerationExhaustedError):
        registry.create('https://example.com/again')

    assert len(registry) == 1
    assert dao.saves == 1


def test_generation_stops_at_max_attempts(dao, scripted_factory):
    factory = scripted_factory('same01', *(['same01'] * 10))
    registry = UrlRegistry(dao, base_url='https://sho.rt', shortcode_factory=factory, max_attempts=3)
    registry.create('https://example.com')

    with pytest.raises(GenerationExhaustedError):
        registry.create('https://example.com/again')

    # 1 call for the first create + 3 bounded attempts
    assert len(factory.calls) == 4


@pytest.mark.parametrize('max_attempts', [0, -1])
def test_invalid_max_attempts(dao, max_attempts):
    with pytest.raises(ValueError):
        UrlRegistry(dao, base_url='https://sho.rt', max_attempts=max_attempts)


# -------------------------------
# 5. Resolution
# -------------------------------


def test_resolve_existing_shortcode(registry):
    record = registry.create('https://example.com/a', 'abc123').record
    assert registry.resolve('abc123') == record


def test_resolve_unknown_shortcode(registry):
    assert registry.resolve('missing') is None


def test_resolve_expiry_boundary():
    """At exactly expires_at the link still resolves, one second later it doesn't."""
    with freeze_time('2025-10-15 12:00:00') as frozen:
        registry = UrlRegistry(RegistryMemoryDAO(), base_url='https://sho.rt')
        record = registry.create('https://example.com/a', 'edge01', validity_minutes=1).record

        frozen.move_to(record.expires_at)
        assert registry.resolve('edge01') == record

        frozen.tick(timedelta(seconds=1))
        assert registry.resolve('edge01') is None


def test_expired_record_still_listed():
    """create(url, None, 1) -> wait past a minute -> resolve is None, list_all still has it."""
    with freeze_time('2025-10-15 12:00:00') as frozen:
        registry = UrlRegistry(RegistryMemoryDAO(), base_url='https://sho.rt')
        code = registry.create('https://example.com/a', None, 1).shortcode

        frozen.tick(timedelta(minutes=1, seconds=1))

        assert registry.resolve(code) is None
        [entry] = registry.list_all()
        assert entry.shortcode == code
        assert entry.click_count == 0


def test_injected_clock_is_used(dao):
    now = [datetime(2025, 1, 1, tzinfo=UTC)]
    registry = UrlRegistry(dao, base_url='https://sho.rt', clock=lambda: now[0])
    record = registry.create('https://example.com', 'clock1', validity_minutes=10).record

    assert record.created_at == datetime(2025, 1, 1, tzinfo=UTC)
    now[0] = datetime(2025, 1, 1, 0, 11, tzinfo=UTC)
    assert registry.resolve('clock1') is None


def test_resolve_with_invalid_type(registry):
    with pytest.raises(BeartypeCallHintParamViolation):
        registry.resolve(123)


# -------------------------------
# 6. Persistence failures
# -------------------------------


def test_create_rolls_back_on_persistence_failure(registry, dao):
    dao.fail_saves = True

    with pytest.raises(PersistenceFailureError) as exc_info:
        registry.create('https://example.com', 'abc123')

    assert exc_info.value.__cause__ is not None
    assert len(registry) == 0
    assert 'abc123' not in registry
    assert registry.resolve('abc123') is None
    assert registry.list_all() == []
    assert registry._clicks == {}
    assert dao.load() == ([], {})


def test_create_after_rollback_can_reuse_shortcode(registry, dao):
    dao.fail_saves = True
    with pytest.raises(PersistenceFailureError):
        registry.create('https://example.com', 'abc123')

    dao.fail_saves = False
    assert registry.create('https://example.com', 'abc123').shortcode == 'abc123'


def test_rollback_keeps_earlier_records(registry, dao):
    first = registry.create('https://example.com/first', 'first1').record
    dao.fail_saves = True

    with pytest.raises(PersistenceFailureError):
        registry.create('https://example.com/second', 'second')

    assert [entry.record for entry in registry.list_all()] == [first]
    assert dao.load() == ([first], {'first1': []})


def test_create_keeps_clicks_recorded_before_creation(registry, dao):
    early = registry.record_click('abc123', 'direct_access')

    registry.create('https://example.com', 'abc123')

    assert registry.list_all()[0].clicks == (early,)
    assert dao.load()[1] == {'abc123': [early]}


def test_failed_create_keeps_clicks_recorded_before_creation(registry, dao):
    early = registry.record_click('abc123', 'direct_access')
    dao.fail_saves = True

    with pytest.raises(PersistenceFailureError):
        registry.create('https://example.com', 'abc123')

    assert 'abc123' not in registry
    assert registry._clicks == {'abc123': [early]}
    assert dao.load() == ([], {'abc123': [early]})


# -------------------------------
# 7. Listing and persistence round-trip
# -------------------------------


def test_list_all_in_creation_order(registry):
    codes = ['first1', 'second', 'third3']
    for code in codes:
        registry.create(f'https://example.com/{code}', code)

    entries = registry.list_all()

    assert [entry.shortcode for entry in entries] == codes
    assert [entry.short_url for entry in entries] == [f'https://sho.rt/{code}' for code in codes]
    assert all(entry.click_count == 0 for entry in entries)


def test_registry_loads_existing_state(registry, dao):
    registry.create('https://example.com/a', 'abc123')
    registry.record_click('abc123', 'direct_access')

    reloaded = UrlRegistry(dao, base_url='https://sho.rt')

    assert reloaded.list_all() == registry.list_all()
    with pytest.raises(ShortcodeTakenError):
        reloaded.create('https://example.com/b', 'abc123')


def test_file_round_trip_preserves_records_and_clicks(tmp_path):
    path = tmp_path / 'state.json'
    registry = UrlRegistry(RegistryFileDAO(path), base_url='https://sho.rt')
    registry.create('https://example.com/a', 'first1')
    registry.create('https://example.com/b', 'second', validity_minutes=600)
    registry.record_click('second', 'direct_access', 'Mozilla/5.0 Firefox/121.0')
    registry.record_click('first1', 'statistics_page')
    registry.record_click('second', 'statistics_page', location='localhost')

    reloaded = UrlRegistry(RegistryFileDAO(path), base_url='https://sho.rt')

    assert reloaded.list_all() == registry.list_all()
    assert [click.source for click in reloaded.list_all()[1].clicks] == ['direct_access', 'statistics_page']
    assert all(isinstance(entry.record, UrlRecordModel) for entry in reloaded.list_all())


def test_duplicate_shortcodes_in_store_raise(registry):
    record = registry.create('https://example.com/a', 'abc123').record

    with pytest.raises(DataStoreError, match='abc123'):
        UrlRegistry(RegistryMemoryDAO(records=[record, record]), base_url='https://sho.rt')


# -------------------------------
# 8. Concurrency
# -------------------------------


def test_concurrent_creates_claim_custom_shortcode_once(registry):
    results = []
    barrier = threading.Barrier(8)

    def worker(i):
        barrier.wait()
        try:
            registry.create(f'https://example.com/{i}', 'race01')
            results.append('ok')
        except ShortcodeTakenError:
            results.append('taken')

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results.count('ok') == 1
    assert results.count('taken') == 7
    assert len(registry) == 1
