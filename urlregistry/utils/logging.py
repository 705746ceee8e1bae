"""Logging set-up for processes embedding the registry

`initialize_logging()` configures the `urlregistry` logger namespace only, so
an application hosting the registry keeps control of its root logger. Call it
once at start-up, before the first registry is built.

Environment:
    LOG_LEVEL:  DEBUG, INFO (default), WARNING, ...
    LOG_FORMAT: 'json' (default) or 'text'

JSON log line:
{
    "timestamp": "2025-12-26T12:00:00.000000Z",
    "level": "INFO",
    "logger": "urlregistry.core.registry",
    "env": "prod",
    "message": "Short URL created.",
    "shortcode": "abc123",
    "event": "SHORT_URL_CREATED"
}

Text log line:
    2025-12-26 12:00:00,000 INFO urlregistry.core.registry [SHORT_URL_CREATED] Short URL created.
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC
from typing import Optional

from urlregistry.constants import ENV
from urlregistry.exceptions import BadConfigurationError
from urlregistry.models.click_event_model import format_timestamp
from urlregistry.utils.config import app_env


LOGGER_NAMESPACE = 'urlregistry'
LOG_FORMATS = ('json', 'text')
TEXT_FORMAT = '%(asctime)s %(levelname)s %(name)s [%(event)s] %(message)s'


class JsonFormatter(logging.Formatter):
    """Render a LogRecord and its `extra` fields as one JSON object"""

    # Attributes every LogRecord carries; anything else came in through `extra`
    RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {'message', 'asctime'}

    def __init__(self, env: Optional[str] = None):
        super().__init__()
        self.env = env

    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': format_timestamp(datetime.fromtimestamp(record.created, tz=UTC)),
            'level': record.levelname,
            'logger': record.name,
        }
        if self.env:
            log['env'] = self.env
        log['message'] = record.getMessage()

        log.update((key, value) for key, value in vars(record).items() if key not in self.RESERVED_ATTRS)

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        return json.dumps(log, default=str)


class EventFilter(logging.Filter):
    """Give records logged without an event code a '-' placeholder for TEXT_FORMAT"""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, 'event'):
            record.event = '-'
        return True


def initialize_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Attach a stdout handler to the `urlregistry` logger

    Args:
        level (Optional[str]): Log level. Defaults to $LOG_LEVEL, then INFO.
        fmt (Optional[str]): 'json' or 'text'. Defaults to $LOG_FORMAT, then json.

    Raises:
        BadConfigurationError: If the format is not one of LOG_FORMATS.
    """
    level = (level or os.getenv(ENV.App.LOG_LEVEL, 'INFO')).upper()
    fmt = (fmt or os.getenv(ENV.App.LOG_FORMAT, 'json')).lower()
    if fmt not in LOG_FORMATS:
        raise BadConfigurationError(f"Unknown log format '{fmt}' (expected one of: {', '.join(LOG_FORMATS)}).")

    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                    'env': app_env(),
                },
                'text': {
                    'format': TEXT_FORMAT,
                },
            },
            'filters': {
                'event': {
                    '()': EventFilter,
                },
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': fmt,
                    'filters': ['event'] if fmt == 'text' else [],
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {
                LOGGER_NAMESPACE: {
                    'level': level,
                    'handlers': ['stdout'],
                    'propagate': False,
                },
            },
        }
    )
