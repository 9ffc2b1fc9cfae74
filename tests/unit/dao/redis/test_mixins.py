"""Unit tests for Redis-based mixins.

Test coverage includes:
    1. Initialization and configuration
       - Ensures a created client always decodes responses.
       - Ensures an injected decoding client is reused.
       - Confirms an injected bytes-returning client raises BadConfigurationError.
       - Confirms decode_responses can't be passed as a connection option.
       - Confirms unreachable Redis raises DataStoreError.
    2. Healthcheck behavior
       - Healthcheck pings Redis.
       - Missed pong from Redis raises error, or returns False when asked not to raise.
"""

from unittest.mock import MagicMock, patch

import pytest
import redis

from linkshortener.dao.exceptions import DataStoreError
from linkshortener.dao.redis import RedisClientMixin, RedisKeySchema
from linkshortener.exceptions import BadConfigurationError


# -------------------------------
# 1. Initialization and configuration
# -------------------------------


def test_initialize_without_redis_client():
    """Ensure the mixin creates a decoding Redis client when none is provided."""
    redis_config = {
        'redis_host': 'redis',
        'redis_port': '6379',
        'redis_db': 0,
        'redis_username': 'default',
        'redis_password': 'password',
    }

    with patch('linkshortener.dao.redis.mixins.redis.Redis', autospec=True) as redis_mock:
        redis_mock_instance = redis_mock.return_value
        mixin = RedisClientMixin(**redis_config, prefix='testapp:test')

        redis_mock.assert_called_once_with(host='redis', port=6379, db=0, decode_responses=True, username='default', password='password')
        assert mixin.redis is redis_mock_instance
        assert isinstance(mixin.keys, RedisKeySchema)
        assert mixin.keys.prefix == 'testapp:test'


def test_decode_responses_is_not_an_option():
    with pytest.raises(TypeError):
        RedisClientMixin(redis_decode_responses=False)


def test_initialize_with_redis_client(redis_client):
    """Ensure the mixin uses a pre-initialized decoding Redis client."""
    mixin = RedisClientMixin(redis_client=redis_client, prefix='testapp:test')
    assert mixin.redis is redis_client
    redis_client.ping.assert_called_once()


@pytest.mark.parametrize('connection_kwargs', [{'host': 'redis.test'}, {'host': 'redis.test', 'decode_responses': False}])
def test_initialize_with_bytes_client(redis_client, connection_kwargs):
    """Ensure a client returning bytes is refused before any command runs."""
    redis_client.connection_pool.connection_kwargs = connection_kwargs

    with pytest.raises(BadConfigurationError, match='decode_responses=True'):
        RedisClientMixin(redis_client=redis_client)

    redis_client.ping.assert_not_called()


def test_initialize_with_invalid_redis_config():
    """Ensure an unreachable Redis raises DataStoreError."""
    exception_message = "Can't connect to Redis at 203.0.113.1:18000/5. Check the provided configuration parameters."

    with patch('linkshortener.dao.redis.mixins.redis.Redis', autospec=True) as redis_mock:
        redis_mock_instance = redis_mock.return_value
        redis_mock_instance.ping.side_effect = redis.exceptions.ConnectionError('Connection error')
        redis_mock_instance.connection_pool = MagicMock()
        redis_mock_instance.connection_pool.connection_kwargs = {'host': '203.0.113.1', 'port': 18000, 'db': 5}

        with pytest.raises(DataStoreError, match=exception_message):
            RedisClientMixin(redis_host='203.0.113.1', redis_port=18000, redis_db=5)


def test_connection_label(redis_client):
    assert RedisClientMixin(redis_client=redis_client).connection_label() == 'redis.test:6379/0'


# -------------------------------
# 2. Healthcheck behavior
# -------------------------------


def test_healthcheck_passes(redis_client):
    mixin = RedisClientMixin(redis_client=redis_client)

    assert mixin._healthcheck()
    assert redis_client.ping.call_count == 2  # once in initialization, once separately


@pytest.mark.parametrize('error', [redis.exceptions.ConnectionError, redis.exceptions.TimeoutError])
def test_healthcheck_fails(redis_client, error):
    redis_client.ping.side_effect = error('unreachable')

    with pytest.raises(DataStoreError):
        RedisClientMixin(redis_client=redis_client)


def test_healthcheck_without_raising(redis_client):
    mixin = RedisClientMixin(redis_client=redis_client)
    redis_client.ping.side_effect = redis.exceptions.ConnectionError('unreachable')

    assert mixin._healthcheck(raise_error=False) is False
