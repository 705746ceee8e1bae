"""Utility functions for application configuration management.

Configuration is stored as one YAML document per application environment
(`APP_ENV`) under the project's `config/` directory:

    config/
    ├── local.yml
    ├── dev.yml
    └── prod.yml

Each document follows this structure (every key is optional):

    backend: redis              # memory | file | redis
    base_url: https://sho.rt    # public origin for display URLs
    file:
      path: /var/lib/urlregistry/state.json
    redis:
      host: localhost
      port: 6379
      db: 0

A handful of environment variables override the document so that a
deployment can switch stores without shipping a new file:

    URLREGISTRY_BACKEND     – backend name
    URLREGISTRY_BASE_URL    – public origin
    URLREGISTRY_STATE_FILE  – JSON state file path (file backend)

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for DAOs, or None if `APP_NAME` is not set.

    project_root() -> Path
        Return the absolute path to the project root directory, using
        `PROJECT_ROOT` when available.

    load_config(path: str | Path | None = None) -> dict
        Load the configuration document and apply defaults and overrides.

Example:
    >>> from urlregistry.utils.config import load_config
    >>> config = load_config()
    >>> config['backend']
    'memory'
"""

import os
import logging
from pathlib import Path
from typing import Any

import yaml

from urlregistry.constants import ENV, BACKENDS, DEFAULT_BASE_URL
from urlregistry.exceptions import BadConfigurationError
from urlregistry.types import AppConfig


logger = logging.getLogger(__name__)

DEFAULT_STATE_FILE = 'urlregistry.json'


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Returns:
        str:
            Value of `APP_ENV` environment variable, `'local'` by default.

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def project_root() -> Path:
    """Return the absolute path to the project root directory

    Reads the PROJECT_ROOT environment variable and falls back to the current
    working directory.
    """
    return Path(os.environ.get(ENV.App.PROJECT_ROOT, os.getcwd()))


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'urlregistry'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'urlregistry:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def _read_document(path: Path) -> dict[str, Any]:
    with path.open('r', encoding='utf-8') as f:
        document = yaml.safe_load(f)

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise BadConfigurationError(f'Configuration document {path} must be a mapping (given type: {type(document)}).')
    return document


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load the application configuration

    Reads the YAML document at `path`, or `<project root>/config/<APP_ENV>.yml`
    when no path is given. A missing default document is not an error: the
    registry then runs on defaults (in-memory store, localhost origin).

    Args:
        path (str | Path | None):
            Explicit configuration file. Must exist when given.

    Returns:
        dict: Configuration with keys 'backend', 'base_url', 'file' and 'redis'.

    Raises:
        FileNotFoundError:
            If an explicit path was given and doesn't exist.
        BadConfigurationError:
            If the document is malformed or names an unknown backend.

    Example:
        >>> os.environ['URLREGISTRY_BACKEND'] = 'file'
        >>> load_config()['backend']
        'file'
    """
    if path is not None:
        config_path = Path(path)
        if not config_path.is_file():
            raise FileNotFoundError(f'Configuration file {config_path} not found.')
    else:
        config_path = project_root() / 'config' / f'{app_env()}.yml'

    if config_path.is_file():
        logger.debug('Loading configuration document.', extra={'configPath': str(config_path)})
        document = _read_document(config_path)
    else:
        logger.debug('No configuration document found. Using defaults.', extra={'configPath': str(config_path)})
        document = {}

    backend = (os.environ.get(ENV.Registry.BACKEND) or document.get('backend') or 'memory').lower()
    if backend not in BACKENDS:
        raise BadConfigurationError(f"Unknown backend '{backend}' (expected one of: {', '.join(BACKENDS)}).")

    file_section = dict(document.get('file') or {})
    file_section['path'] = os.environ.get(ENV.Registry.STATE_FILE) or file_section.get('path') or DEFAULT_STATE_FILE

    redis_section = document.get('redis') or {}
    if not isinstance(redis_section, dict):
        raise BadConfigurationError(f"'redis' section must be a mapping (given type: {type(redis_section)}).")

    return {
        'backend': backend,
        'base_url': os.environ.get(ENV.Registry.BASE_URL) or document.get('base_url') or DEFAULT_BASE_URL,
        'file': file_section,
        'redis': dict(redis_section),
    }
