"""Shortcode registry: the single source of truth for shortened URLs

The registry owns every UrlRecordModel and its click list, enforces shortcode
format and global uniqueness, computes expiry once at creation and mirrors
every mutation to an injected durable store (DAO) before returning.

Classes:
    UrlRegistry:
        create(), resolve(), record_click() and list_all() over one registry state.

Example:
    >>> from urlregistry.core import UrlRegistry
    >>> from urlregistry.dao import RegistryMemoryDAO
    >>> registry = UrlRegistry(RegistryMemoryDAO(), base_url='https://sho.rt')
    >>> shortened = registry.create('https://example.com/article/123', 'article')
    >>> shortened.short_url
    'https://sho.rt/article'
    >>> registry.resolve('article').original_url
    'https://example.com/article/123'
    >>> registry.resolve('missing') is None
    True
"""

import uuid
import logging
import threading
from datetime import datetime, timedelta
from typing import Optional
from collections.abc import Callable

from beartype import beartype

from urlregistry.constants import (
    Shortcode,
    Validity,
    DEFAULT_CLICK_SOURCE,
    CLICK_LIST_MISSING,
    SHORT_URL_CREATED,
    SHORT_URL_NOT_FOUND,
    SHORT_URL_EXPIRED,
    PERSISTENCE_FAILED,
)
from urlregistry.core.clicks import ClickRecorder
from urlregistry.dao.base import RegistryBaseDAO
from urlregistry.dao.exceptions import DataStoreError
from urlregistry.exceptions import (
    InvalidURLError,
    InvalidShortcodeError,
    ShortcodeTakenError,
    InvalidValidityError,
    PersistenceFailureError,
    GenerationExhaustedError,
)
from urlregistry.models import UrlRecordModel, ClickEventModel, ShortenedUrl, UrlRecordWithStats
from urlregistry.utils.helpers import get_short_url, is_valid_url, is_valid_shortcode, utcnow
from urlregistry.utils.shortener import generate_shortcode


logger = logging.getLogger(__name__)


class UrlRegistry:
    """Registry of shortcode -> UrlRecordModel mappings

    Attributes:
        dao (RegistryBaseDAO):
            Durable store, loaded once on construction and saved after every mutation.
        base_url (str):
            Public origin used to build display URLs.
        clicks (ClickRecorder):
            Click recorder appending visits to this registry's click lists.

    Methods:
        create(original_url, custom_shortcode=None, validity_minutes=30) -> ShortenedUrl:
            Validate, allocate a shortcode, store and persist a new record.
        resolve(shortcode) -> UrlRecordModel | None:
            Return the record for an unexpired shortcode, None otherwise.
        record_click(shortcode, source='direct', client_signature=None, location=None) -> ClickEventModel:
            Append a click to a shortcode's click list (see ClickRecorder).
        list_all() -> list[UrlRecordWithStats]:
            Every record ever created, with its clicks, in creation order.

    NOTE:
        All operations run under one re-entrant lock. Mutations cover
        "check + append + persist" in a single critical section, so two
        concurrent create() calls can't both claim the same custom shortcode
        and concurrent clicks can't overwrite each other's append.
    """

    def __init__(
        self,
        dao: RegistryBaseDAO,
        base_url: str,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        shortcode_factory: Callable[[], str] = generate_shortcode,
        max_attempts: int = Shortcode.MAX_GENERATION_ATTEMPTS,
    ):
        """Initialize a registry and load its state from the durable store

        Args:
            dao (RegistryBaseDAO):
                Durable store holding the registry state.

            base_url (str):
                Public origin for display URLs, e.g. 'https://sho.rt'.

            clock (Optional[Callable[[], datetime]]):
                Source of the current UTC instant. Defaults to utcnow().

            shortcode_factory (Callable[[], str]):
                Candidate shortcode generator. Defaults to generate_shortcode().

            max_attempts (int):
                Upper bound on generator calls per create(). Defaults to 1000.

        Raises:
            DataStoreError:
                If the durable store can't be loaded or holds duplicate shortcodes.
        """
        if max_attempts < 1:
            raise ValueError(f'max_attempts must be a positive integer (given value: {max_attempts}).')

        self.dao = dao
        self.base_url = base_url
        self.max_attempts = max_attempts
        self._clock = clock or utcnow
        self._shortcode_factory = shortcode_factory
        self._lock = threading.RLock()

        records, clicks = dao.load()
        self._records: list[UrlRecordModel] = list(records)
        self._by_shortcode: dict[str, UrlRecordModel] = {}
        for record in self._records:
            if record.shortcode in self._by_shortcode:
                raise DataStoreError(f"Durable store holds more than one record for shortcode '{record.shortcode}'.")
            self._by_shortcode[record.shortcode] = record
        self._clicks: dict[str, list[ClickEventModel]] = {shortcode: list(events) for shortcode, events in clicks.items()}

        self.clicks = ClickRecorder(self)
        logger.info('Registry initialized.', extra={'urlCount': len(self._records)})

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, shortcode: object) -> bool:
        return shortcode in self._by_shortcode

    def now(self) -> datetime:
        return self._clock()

    def get_short_url(self, shortcode: str) -> str:
        return get_short_url(shortcode, self.base_url)

    @beartype
    def create(self, original_url: str, custom_shortcode: Optional[str] = None, validity_minutes: int = Validity.DEFAULT) -> ShortenedUrl:
        """Create a new short URL

        Procedure:
        - Step 1: Validate original URL, custom shortcode format and validity period
        - Step 2: Check the custom shortcode is unused, or generate an unused one
        - Step 3: Append the record and an empty click list (unless clicks already exist)
        - Step 4: Persist state, rolling back Step 3 if the store fails

        Args:
            original_url (str):
                Absolute URL the shortcode will redirect to.

            custom_shortcode (Optional[str]):
                Caller chosen 3-10 alphanumeric shortcode. None or '' generates one.

            validity_minutes (int):
                Minutes the link stays valid (1..525600). Defaults to 30.

        Returns:
            ShortenedUrl:
                The stored record and its display URL.

        Raises:
            InvalidURLError:
                If original_url is not a valid absolute URL.
            InvalidShortcodeError:
                If custom_shortcode is not 3-10 alphanumeric characters.
            InvalidValidityError:
                If validity_minutes is outside 1..525600.
            ShortcodeTakenError:
                If custom_shortcode is used by any record, expired or not.
            GenerationExhaustedError:
                If no unused shortcode was generated within max_attempts.
            PersistenceFailureError:
                If the durable store rejected the save (nothing was stored).

        Example:
            >>> registry.create('https://example.com', validity_minutes=60).record.validity_minutes
            60
        """
        logger.debug(
            'Creating short URL.',
            extra={'originalUrl': original_url, 'customShortcode': custom_shortcode, 'validityMinutes': validity_minutes},
        )

        # 1- Validate everything before touching state
        if not is_valid_url(original_url):
            logger.info('Rejected invalid URL.', extra={'originalUrl': original_url})
            raise InvalidURLError(f"'{original_url}' is not a valid absolute URL.")
        if custom_shortcode and not is_valid_shortcode(custom_shortcode):
            logger.info('Rejected invalid shortcode.', extra={'customShortcode': custom_shortcode})
            raise InvalidShortcodeError(
                f"Shortcode '{custom_shortcode}' must be {Shortcode.MIN_LENGTH}-{Shortcode.MAX_LENGTH} alphanumeric characters."
            )
        if isinstance(validity_minutes, bool) or not Validity.MIN <= validity_minutes <= Validity.MAX:
            logger.info('Rejected invalid validity period.', extra={'validityMinutes': validity_minutes})
            raise InvalidValidityError(f'Validity must be between {Validity.MIN} and {Validity.MAX} minutes (given value: {validity_minutes}).')

        with self._lock:
            # 2- Claim a shortcode
            if custom_shortcode:
                if custom_shortcode in self._by_shortcode:
                    logger.info('Rejected taken shortcode.', extra={'shortcode': custom_shortcode})
                    raise ShortcodeTakenError(f"Shortcode '{custom_shortcode}' is already taken.")
                shortcode = custom_shortcode
            else:
                shortcode = self._generate_unique_shortcode()

            created_at = self.now()
            record = UrlRecordModel(
                id=uuid.uuid4().hex,
                original_url=original_url,
                shortcode=shortcode,
                created_at=created_at,
                expires_at=created_at + timedelta(minutes=validity_minutes),
                validity_minutes=validity_minutes,
            )

            # 3- Append record, keep clicks already recorded against the shortcode
            self._records.append(record)
            self._by_shortcode[shortcode] = record
            had_clicks = shortcode in self._clicks
            self._clicks.setdefault(shortcode, [])

            # 4- Persist, undo step 3 if the store fails
            try:
                self.persist()
            except PersistenceFailureError:
                self._records.pop()
                del self._by_shortcode[shortcode]
                if not had_clicks:
                    del self._clicks[shortcode]
                raise

        logger.info('Short URL created.', extra={'shortcode': shortcode, 'originalUrl': original_url, 'event': SHORT_URL_CREATED})
        return ShortenedUrl(record=record, short_url=self.get_short_url(shortcode))

    @beartype
    def resolve(self, shortcode: str) -> Optional[UrlRecordModel]:
        """Look up an unexpired record by shortcode

        NOTE: unknown and expired shortcodes both return None. Callers can't
              tell them apart, only the log line differs.

        Args:
            shortcode (str):
                The shortcode to resolve.

        Returns:
            UrlRecordModel | None:
                The record if it exists and now <= expires_at, otherwise None.

        Example:
            >>> registry.resolve('abc123')
            UrlRecordModel(id='...', original_url='https://example.com', shortcode='abc123', ...)
        """
        with self._lock:
            record = self._by_shortcode.get(shortcode)

        if record is None:
            logger.warning('Short URL not found.', extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND})
            return None

        if record.is_expired(self.now()):
            logger.warning(
                'Short URL has expired.',
                extra={'shortcode': shortcode, 'expiresAt': record.expires_at.isoformat(), 'event': SHORT_URL_EXPIRED},
            )
            return None

        return record

    def record_click(
        self,
        shortcode: str,
        source: str = DEFAULT_CLICK_SOURCE,
        client_signature: Optional[str] = None,
        location: Optional[str] = None,
    ) -> ClickEventModel:
        return self.clicks.record_click(shortcode, source=source, client_signature=client_signature, location=location)

    def append_click(self, shortcode: str, source: str, location: str, client_signature: Optional[str] = None) -> tuple[ClickEventModel, int]:
        """Stamp, append and persist one click event

        The timestamp is taken inside the lock, so each click list stays in
        timestamp order. A shortcode without a click list gets one on demand.

        Returns:
            tuple[ClickEventModel, int]: The appended event and the shortcode's new click count.

        Raises:
            PersistenceFailureError:
                If the durable store rejected the save. The event is not kept.
        """
        with self._lock:
            event = ClickEventModel(timestamp=self.now(), source=source, location=location, client_signature=client_signature)

            events = self._clicks.get(shortcode)
            created_list = events is None
            if created_list:
                logger.warning(
                    'Click list missing for shortcode. Creating it on demand.',
                    extra={'shortcode': shortcode, 'event': CLICK_LIST_MISSING},
                )
                events = self._clicks[shortcode] = []

            events.append(event)
            try:
                self.persist()
            except PersistenceFailureError:
                events.pop()
                if created_list:
                    del self._clicks[shortcode]
                raise

            return event, len(events)

    def list_all(self) -> list[UrlRecordWithStats]:
        """Return every record ever created, expired included, in creation order

        Each entry carries the record's clicks in append order; click_count is
        derived from them.
        """
        with self._lock:
            return [
                UrlRecordWithStats(
                    record=record,
                    short_url=self.get_short_url(record.shortcode),
                    clicks=tuple(self._clicks.get(record.shortcode, ())),
                )
                for record in self._records
            ]

    def persist(self) -> None:
        """Save the current state to the durable store

        Callers hold the lock and undo their own change when this raises.

        Raises:
            PersistenceFailureError:
                If the durable store raised DataStoreError.
        """
        try:
            self.dao.save(self._records, self._clicks)
        except DataStoreError as e:
            logger.error('Failed to persist registry state.', exc_info=True, extra={'event': PERSISTENCE_FAILED})
            raise PersistenceFailureError(f'Failed to persist registry state: {e}') from e

    def _generate_unique_shortcode(self) -> str:
        for attempt in range(1, self.max_attempts + 1):
            candidate = self._shortcode_factory()
            if candidate not in self._by_shortcode:
                if attempt > 1:
                    logger.debug('Generated unique shortcode after collisions.', extra={'shortcode': candidate, 'attempts': attempt})
                return candidate

        raise GenerationExhaustedError(f'Could not generate a unique shortcode after {self.max_attempts} attempts.')
