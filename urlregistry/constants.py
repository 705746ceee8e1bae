from enum import StrEnum


class Shortcode:
    """Shortcode format constraints."""

    ALPHABET = 'abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789'
    GENERATED_LENGTH = 6
    MIN_LENGTH = 3
    MAX_LENGTH = 10
    PATTERN = r'^[A-Za-z0-9]{3,10}$'
    MAX_GENERATION_ATTEMPTS = 1_000


class Validity:
    """Link validity bounds in minutes."""

    DEFAULT = 30
    MIN = 1
    MAX = 525_600  # 60 * 24 * 365


class Storage:
    """Storage document keys (kept compatible with the browser demo's local storage)."""

    RECORDS = 'shortened_urls'
    CLICKS = 'url_clicks'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        LOG_LEVEL = 'LOG_LEVEL'
        LOG_FORMAT = 'LOG_FORMAT'

    class Registry(StrEnum):
        BACKEND = 'URLREGISTRY_BACKEND'
        BASE_URL = 'URLREGISTRY_BASE_URL'
        STATE_FILE = 'URLREGISTRY_STATE_FILE'


# Default public origin used to build display URLs
DEFAULT_BASE_URL = 'http://localhost:3000'

# Supported durable store backends
BACKENDS = ('memory', 'file', 'redis')

# Default click tags
DEFAULT_CLICK_SOURCE = 'direct'
UNKNOWN_LOCATION = 'Unknown Location'

# Log event codes
SHORT_URL_CREATED = 'SHORT_URL_CREATED'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
SHORT_URL_EXPIRED = 'SHORT_URL_EXPIRED'
CLICK_RECORDED = 'CLICK_RECORDED'
CLICK_LIST_MISSING = 'CLICK_LIST_MISSING'
PERSISTENCE_FAILED = 'PERSISTENCE_FAILED'
