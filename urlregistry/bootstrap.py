"""Construct a registry from application configuration

Functions:
    build_dao(config: dict) -> RegistryBaseDAO
        Create the durable store named by config['backend'].
    build_registry(config: dict | None = None, **kwargs) -> UrlRegistry
        Create a registry over the configured store.

Example:
    >>> from urlregistry.bootstrap import build_registry
    >>> registry = build_registry({'backend': 'memory', 'base_url': 'https://sho.rt', 'file': {}, 'redis': {}})
    >>> registry.base_url
    'https://sho.rt'
"""

import logging
from typing import Any, Optional

from urlregistry.core import UrlRegistry
from urlregistry.dao import RegistryBaseDAO, RegistryMemoryDAO, RegistryFileDAO
from urlregistry.exceptions import BadConfigurationError
from urlregistry.types import AppConfig
from urlregistry.utils.config import load_config, app_prefix


logger = logging.getLogger(__name__)


def build_dao(config: AppConfig) -> RegistryBaseDAO:
    """Create the durable store named by the configuration

    Args:
        config (dict): configuration as returned by load_config()

    Returns:
        RegistryBaseDAO: memory, file or Redis backed store

    Raises:
        BadConfigurationError: If the backend is unknown or its section is incomplete.
        DataStoreError: If Redis is unreachable.
    """
    backend = config.get('backend', 'memory')

    if backend == 'memory':
        logger.debug('Using in-memory store. State is lost on restart.')
        return RegistryMemoryDAO()

    if backend == 'file':
        path = (config.get('file') or {}).get('path')
        if not path:
            raise BadConfigurationError("File backend requires 'file.path'.")
        logger.debug('Using JSON file store.', extra={'statePath': str(path)})
        return RegistryFileDAO(path)

    if backend == 'redis':
        # Imported lazily so memory and file deployments don't need a Redis client
        from urlregistry.dao.redis import RegistryRedisDAO

        redis_config = {f'redis_{k}': v for k, v in (config.get('redis') or {}).items()}
        logger.debug('Using Redis store.', extra={'redisHost': redis_config.get('redis_host', 'localhost')})
        return RegistryRedisDAO(**redis_config, prefix=app_prefix())

    raise BadConfigurationError(f"Unknown backend '{backend}'.")


def build_registry(config: Optional[AppConfig] = None, **kwargs: Any) -> UrlRegistry:
    """Create a registry over the configured durable store

    Args:
        config (dict | None): configuration, loaded via load_config() when None
        **kwargs: forwarded to UrlRegistry (clock, shortcode_factory, max_attempts)

    Returns:
        UrlRegistry: registry with its state loaded from the store
    """
    if config is None:
        config = load_config()

    return UrlRegistry(build_dao(config), base_url=config['base_url'], **kwargs)
