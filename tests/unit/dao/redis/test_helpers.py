"""Unit tests for Redis DAO helpers.

Test coverage includes:
    1. handle_redis_errors decorator
       - Ensures the wrapped method executes and returns its result.
       - Ensures connection and timeout errors are converted into DataStoreError.
       - Ensures rejected commands (e.g. OOM) are converted into DataStoreError.
       - Confirms functools.wraps preserves the original function's name and docstring.
    2. Short link and click codecs
       - Ensures links and clicks survive an encode/decode cycle unchanged.
       - Ensures missing or malformed fields raise KeyError / ValueError.
       - Ensures a blank stored referrer reads back as 'Direct'.
"""

import json
from unittest.mock import MagicMock

import pytest
import redis

from linkshortener.dao.exceptions import DataStoreError
from linkshortener.dao.redis.helpers import (
    handle_redis_errors,
    encode_short_link,
    decode_short_link,
    encode_click,
    decode_click,
)


# -------------------------------
# Fixtures
# -------------------------------


class DummyDAO:
    def __init__(self, error=None):
        self.redis = MagicMock()
        self.redis.connection_pool.connection_kwargs = {'host': 'redis.test', 'port': 6379, 'db': 0}
        self.error = error

    @handle_redis_errors
    def ping(self):
        """Ping Redis."""
        if self.error:
            raise self.error
        return 'OK'


# -------------------------------
# 1. handle_redis_errors decorator
# -------------------------------


def test_decorator_allows_normal_execution():
    assert DummyDAO().ping() == 'OK'


@pytest.mark.parametrize('error', [redis.exceptions.ConnectionError('down'), redis.exceptions.TimeoutError('slow')])
def test_decorator_converts_connection_errors(error):
    with pytest.raises(DataStoreError, match="Can't connect to Redis at redis.test:6379/0.") as exc_info:
        DummyDAO(error).ping()

    assert exc_info.value.__cause__ is error


def test_decorator_converts_rejected_commands():
    error = redis.exceptions.ResponseError("OOM command not allowed when used memory > 'maxmemory'.")
    with pytest.raises(DataStoreError, match='Redis rejected the operation: OOM'):
        DummyDAO(error).ping()


def test_decorator_passes_other_errors_through():
    with pytest.raises(KeyError):
        DummyDAO(KeyError('id')).ping()


def test_decorator_preserves_metadata():
    assert DummyDAO.ping.__name__ == 'ping'
    assert DummyDAO.ping.__doc__ == 'Ping Redis.'


# -------------------------------
# 2. Short link and click codecs
# -------------------------------


def test_encode_short_link(link):
    assert encode_short_link(link) == {
        'id': '1792324800000-k3j9x0q2m',
        'original_url': 'https://example.com/page',
        'shortcode': 'abc123',
        'created_at': '2026-10-18T12:00:00+00:00',
        'validity_minutes': '30',
        'expires_at': '2026-10-18T12:30:00+00:00',
        'is_active': '1',
    }


def test_decode_short_link_with_clicks(link, click):
    fields = encode_short_link(link.deactivated())

    decoded = decode_short_link(fields, [encode_click(click)])

    assert decoded == link.deactivated().with_click(click)


def test_decode_short_link_missing_field(link):
    fields = encode_short_link(link)
    del fields['expires_at']

    with pytest.raises(KeyError):
        decode_short_link(fields, [])


@pytest.mark.parametrize('field, value', [('created_at', 'yesterday'), ('validity_minutes', 'thirty')])
def test_decode_short_link_malformed_field(link, field, value):
    fields = {**encode_short_link(link), field: value}

    with pytest.raises(ValueError):
        decode_short_link(fields, [])


def test_decode_short_link_malformed_click(link):
    with pytest.raises(ValueError):
        decode_short_link(encode_short_link(link), ['{not json'])


def test_encode_click(click):
    assert json.loads(encode_click(click)) == {
        'timestamp': '2026-10-18T12:05:00+00:00',
        'user_agent': 'curl/8.5.0',
        'referrer': 'https://news.example',
    }


def test_decode_click_blank_referrer_is_direct():
    click = decode_click(json.dumps({'timestamp': '2026-10-18T12:05:00+00:00', 'user_agent': '', 'referrer': ''}))
    assert click.referrer == 'Direct'
    assert click.user_agent == ''
