"""Redis mixin providing shared client initialization and connectivity checks.

Responsibilities:
    - Build a Redis client that returns decoded (str) responses
    - Reject injected clients that return raw bytes
    - Healthcheck the Redis connection

The short link codecs (see helpers.py) read hash fields by str keys, so a
client built with `decode_responses=False` would make every stored link
undecodable. Such clients are refused up front.

Classes:
    - RedisClientMixin: Base mixin to inject Redis key management, client setup & healthcheck.

Example:
    Typical usage with a DAO implementation:

        >>> class ShortLinkRedisDAO(RedisClientMixin, ShortLinkBaseDAO):
        ...     pass
        ...
        >>> dao = ShortLinkRedisDAO(redis_host='redis.internal', prefix='linkshortener:prod')
        >>> dao.connection_label()
        'redis.internal:6379/0'
"""

from typing import Optional

import redis

from linkshortener.dao.redis.redis_key_schema import RedisKeySchema
from linkshortener.dao.exceptions import DataStoreError
from linkshortener.exceptions import BadConfigurationError


class RedisClientMixin:
    """Redis client setup and health check for Redis-backed short link DAOs.

    Attributes:
        redis (redis.Redis):
            Active Redis client instance, always decoding responses to str.

        keys (RedisKeySchema):
            Helper class for generating namespaced Redis key names.

    Methods:
        connection_label() -> str:
            'host:port/db' of the client, used in error messages.

        _healthcheck(raise_error: bool = True) -> bool:
            Ping Redis to verify connectivity.
            Optionally raise a DataStoreError if unreachable.
    """

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        """Initialize a Redis-based short link DAO

        Either an existing Redis client is reused or one is created from the
        connection parameters. Created clients always decode responses.

        Args:
            redis_host (Optional[str]):
                Hostname of the Redis server. Defaults to 'localhost'.

            redis_port (Optional[int]):
                Redis server port. Defaults to 6379.

            redis_db (Optional[int]):
                Redis database index. Defaults to 0.

            redis_username (Optional[str]):
                Username for Redis authentication (if required).

            redis_password (Optional[str]):
                Password for Redis authentication (if required).

            redis_client (Optional[redis.Redis]):
                Pre-initialized Redis client created with `decode_responses=True`.

            prefix (Optional[str]):
                Namespace prefix for all Redis keys, e.g. 'linkshortener:prod'.

        Raises:
            BadConfigurationError:
                If the injected client does not decode responses.
            DataStoreError:
                If Redis healthcheck fails (connectivity issues).
        """
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=True,
                username=redis_username,
                password=redis_password,
            )
        elif not redis_client.connection_pool.connection_kwargs.get('decode_responses', False):
            raise BadConfigurationError('The Redis client must be created with decode_responses=True.')

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    def connection_label(self) -> str:
        info = self.redis.connection_pool.connection_kwargs
        return f'{info.get("host")}:{info.get("port")}/{info.get("db")}'

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis to healthcheck connectivity

        Args:
            raise_error (bool):
                If True, raises DataStoreError on failure. Defaults to True.

        Returns:
            bool:
                True if Redis is reachable, False otherwise (only if raise_error=False).

        Raises:
            DataStoreError:
                If Redis connection cannot be established and raise_error=True.
        """
        try:
            self.redis.ping()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            if not raise_error:
                return False
            raise DataStoreError(
                f"Can't connect to Redis at {self.connection_label()}. Check the provided configuration parameters."
            ) from e
        return True
