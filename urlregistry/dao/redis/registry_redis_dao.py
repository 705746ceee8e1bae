"""Data Access Object (DAO) implementation for storing registry state in Redis

Responsibilities:
    - Load records and click lists from Redis;
    - Replace the stored state in a single MULTI/EXEC transaction;
    - Raise DataStoreError on connectivity issues and corrupted entries.

Redis layout (see RedisKeySchema):
    <prefix>:links:records   LIST of JSON records, creation order
    <prefix>:links:clicks    HASH shortcode -> JSON list of clicks

Classes:
    RegistryRedisDAO:
        DAO for storing and retrieving registry state in a Redis datastore.

Example:
    >>> dao = RegistryRedisDAO(redis_host='localhost', prefix='urlregistry:dev')
    >>> records, clicks = dao.load()
    >>> dao.save(records, clicks)
"""

import json

from beartype import beartype

from urlregistry.constants import Storage
from urlregistry.dao.base import RegistryBaseDAO
from urlregistry.dao.exceptions import DataStoreError
from urlregistry.dao.redis.mixins import RedisClientMixin
from urlregistry.dao.redis.helpers import handle_redis_errors, decode_reply
from urlregistry.dao.serialization import dump_state, load_state
from urlregistry.models import UrlRecordModel, ClickEventModel
from urlregistry.types import RegistryState


class RegistryRedisDAO(RedisClientMixin, RegistryBaseDAO):
    """Redis-based Data Access Object (DAO) for registry state

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        load(**kwargs) -> RegistryState:
            Read records and click lists in one transaction.
            Raises DataStoreError on connectivity issues or undecodable entries.

        save(records, clicks, **kwargs) -> None:
            Replace both keys in one transaction.
            Raises DataStoreError on connectivity issues with Redis.
    """

    @handle_redis_errors
    def load(self, **kwargs) -> RegistryState:
        records_key = self.keys.records_key()
        clicks_key = self.keys.clicks_key()

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.lrange(records_key, 0, -1)
            pipe.hgetall(clicks_key)
            raw_records, raw_clicks = pipe.execute()

        try:
            document = {
                Storage.RECORDS: [json.loads(item) for item in raw_records],
                Storage.CLICKS: {decode_reply(shortcode): json.loads(events) for shortcode, events in raw_clicks.items()},
            }
        except json.JSONDecodeError as e:
            raise DataStoreError(f'Registry state under {records_key} / {clicks_key} is not valid JSON.') from e

        return load_state(document)

    @handle_redis_errors
    @beartype
    def save(self, records: list[UrlRecordModel], clicks: dict[str, list[ClickEventModel]], **kwargs) -> None:
        records_key = self.keys.records_key()
        clicks_key = self.keys.clicks_key()
        document = dump_state(records, clicks)

        # NOTE: DEL + RPUSH + HSET run as one MULTI/EXEC block. Another client
        #       reading between the DEL and the writes would otherwise see an
        #       empty registry. RPUSH and HSET reject empty arguments, so empty
        #       collections are represented by the keys being absent.
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.delete(records_key, clicks_key)
            if document[Storage.RECORDS]:
                pipe.rpush(records_key, *(json.dumps(item) for item in document[Storage.RECORDS]))
            if document[Storage.CLICKS]:
                pipe.hset(clicks_key, mapping={shortcode: json.dumps(events) for shortcode, events in document[Storage.CLICKS].items()})
            pipe.execute()
