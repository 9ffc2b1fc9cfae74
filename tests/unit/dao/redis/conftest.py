from datetime import datetime, UTC
from unittest.mock import MagicMock

import pytest
import redis

from linkshortener.models import ShortLinkModel, ClickRecordModel


@pytest.fixture
def app_prefix() -> str:
    return 'testapp:test'


@pytest.fixture
def redis_client() -> redis.Redis:
    """Mock a Redis pipeline-compatible client.

    `transaction(func, *watches)` calls `func` with the client itself and then
    returns `execute()`, like redis-py does for a transaction without conflicts.
    """
    client = MagicMock(spec=redis.client.Pipeline)
    client.connection_pool = MagicMock(
        spec=redis.ConnectionPool,
        connection_kwargs={'host': 'redis.test', 'port': 6379, 'db': 0, 'decode_responses': True},
    )
    client.ping.return_value = True
    client.exists.return_value = 0
    client.pipeline.return_value = client
    client.__enter__.return_value = client
    client.__exit__.return_value = None
    client.transaction = MagicMock(side_effect=lambda func, *watches, **kwargs: (func(client), client.execute())[1])
    return client


@pytest.fixture
def created_at() -> datetime:
    return datetime(2026, 10, 18, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def link(created_at) -> ShortLinkModel:
    return ShortLinkModel(
        id='1792324800000-k3j9x0q2m',
        original_url='https://example.com/page',
        shortcode='abc123',
        created_at=created_at,
        validity_minutes=30,
        expires_at=datetime(2026, 10, 18, 12, 30, 0, tzinfo=UTC),
    )


@pytest.fixture
def click(created_at) -> ClickRecordModel:
    return ClickRecordModel(
        timestamp=datetime(2026, 10, 18, 12, 5, 0, tzinfo=UTC),
        user_agent='curl/8.5.0',
        referrer='https://news.example',
    )
