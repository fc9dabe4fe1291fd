from testbuddy.infrastructure.cache.redis_client import RedisClient, get_redis, redis_client

__all__ = ["RedisClient", "get_redis", "redis_client"]
