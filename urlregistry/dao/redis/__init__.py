from urlregistry.dao.redis.redis_key_schema import RedisKeySchema
from urlregistry.dao.redis.registry_redis_dao import RegistryRedisDAO
from urlregistry.dao.redis.mixins import RedisClientMixin


__all__ = [
    'RedisKeySchema',
    'RegistryRedisDAO',
    'RedisClientMixin',
]
