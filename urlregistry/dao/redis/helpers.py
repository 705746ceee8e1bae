import functools
import redis
from typing import TypeVar, Any
from collections.abc import Callable

from urlregistry.dao.exceptions import DataStoreError


__all__ = []

F = TypeVar('F', bound=Callable[..., Any])


def describe_connection(dao: Any) -> str:
    info = dao.redis.connection_pool.connection_kwargs
    return f'{info.get("host")}:{info.get("port")}/{info.get("db")}'


def decode_reply(value: str | bytes) -> str:
    return value.decode('utf-8') if isinstance(value, bytes) else value


def handle_redis_errors(method: F) -> F:
    """Wrap Redis-interacting DAO methods to translate Redis failures

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise redis.exceptions.RedisError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on connectivity issues with Redis
            or when Redis rejects a command (e.g. OOM, READONLY replica).

    Example:
        >>> @handle_redis_errors
        ... def load(self):
        ...     return self.redis.lrange('links:records', 0, -1)
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            raise DataStoreError(f"Can't connect to Redis at {describe_connection(self)}.") from e
        except redis.exceptions.RedisError as e:
            raise DataStoreError(f'Redis at {describe_connection(self)} rejected the command ({e}).') from e

    return wrapper
