"""Redis client set-up and start-up checks for the registry DAOs

RegistryRedisDAO keeps the whole registry under two keys (see RedisKeySchema):
a LIST of records and a HASH of click lists. Before the first load, the mixin
makes sure Redis answers and that neither key holds a value of another type.

Classes:
    RedisClientMixin:
        Builds (or adopts) the Redis client, binds the key schema and runs _healthcheck().

Example:
    >>> class RegistryRedisDAO(RedisClientMixin, RegistryBaseDAO):
    ...     pass
    ...
    >>> dao = RegistryRedisDAO(redis_host='localhost', prefix='urlregistry:dev')
    >>> dao._healthcheck()
    True
"""

from typing import Optional

import redis

from urlregistry.dao.exceptions import DataStoreError
from urlregistry.dao.redis.helpers import describe_connection, decode_reply
from urlregistry.dao.redis.redis_key_schema import RedisKeySchema


class RedisClientMixin:
    """Shared Redis plumbing for registry DAOs

    Attributes:
        redis (redis.Redis):
            Client used for every registry command.
        keys (RedisKeySchema):
            Namespaced names of the records LIST and the clicks HASH.
        KEY_TYPES (dict[str, str]):
            Key schema method -> Redis TYPE the key must hold when it exists.
    """

    KEY_TYPES = {
        'records_key': 'list',
        'clicks_key': 'hash',
    }

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_decode_responses: Optional[bool] = True,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        """Connect to Redis and verify the registry keys

        The redis_* arguments mirror the `redis` section of the YAML config
        (bootstrap passes them as `redis_<name>`). They are ignored when an
        existing client is given.

        Args:
            redis_host, redis_port, redis_db (Optional[str | int]):
                Server address and database index.

            redis_decode_responses (Optional[bool]):
                Decode replies to str. Byte replies are accepted either way.

            redis_username, redis_password (Optional[str]):
                ACL credentials, if the server requires them.

            redis_client (Optional[redis.Redis]):
                Pre-built client, e.g. a shared connection pool or a test double.

            prefix (Optional[str]):
                Key namespace such as 'urlregistry:prod'.

        Raises:
            DataStoreError:
                If Redis is unreachable or a registry key holds the wrong type.
        """
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis, then check TYPE of both registry keys

        Args:
            raise_error (bool):
                Raise DataStoreError on failure instead of returning False.

        Returns:
            bool: True when Redis answers and both keys are absent or of the expected type.
        """
        try:
            self.redis.ping()
            mismatches = self._key_type_mismatches()
        except redis.exceptions.ConnectionError as e:
            if not raise_error:
                return False
            raise DataStoreError(
                f"Can't connect to Redis at {describe_connection(self)}. Check the provided configuration parameters."
            ) from e

        if mismatches:
            if not raise_error:
                return False
            raise DataStoreError(f'Registry keys at {describe_connection(self)} hold unexpected types: {"; ".join(mismatches)}.')

        return True

    def _key_type_mismatches(self) -> list[str]:
        mismatches = []
        for method_name, expected in self.KEY_TYPES.items():
            key = getattr(self.keys, method_name)()
            actual = decode_reply(self.redis.type(key))
            if actual not in ('none', expected):
                mismatches.append(f'{key} is {actual.upper()}, expected {expected.upper()}')
        return mismatches
