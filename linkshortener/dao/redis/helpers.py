import json
import functools
from datetime import datetime
from typing import TypeVar, Any
from collections.abc import Callable, Sequence

import redis

from linkshortener.constants import Defaults
from linkshortener.models import ShortLinkModel, ClickRecordModel
from linkshortener.dao.exceptions import DataStoreError


__all__ = ['handle_redis_errors', 'encode_short_link', 'decode_short_link', 'encode_click', 'decode_click']

F = TypeVar('F', bound=Callable[..., Any])


def handle_redis_errors(method: F) -> F:
    """Wrap Redis-interacting DAO methods to translate Redis failures

    - redis.exceptions.ConnectionError / TimeoutError -> DataStoreError (can't connect)
    - redis.exceptions.ResponseError -> DataStoreError (server rejected a command,
      e.g. "OOM command not allowed when used memory > 'maxmemory'")

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on Redis failures.

    Example:
        >>> @handle_redis_errors
        ... def shortcodes(self):
        ...     return set(self.redis.lrange(self.keys.index_key(), 0, -1))
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            info = self.redis.connection_pool.connection_kwargs
            redis_host = info.get('host')
            redis_port = info.get('port')
            redis_db = info.get('db')
            raise DataStoreError(f"Can't connect to Redis at {redis_host}:{redis_port}/{redis_db}.") from e
        except redis.exceptions.ResponseError as e:
            raise DataStoreError(f'Redis rejected the operation: {e}') from e

    return wrapper


def encode_short_link(link: ShortLinkModel) -> dict[str, str]:
    """Flatten a link (without its clicks) into a Redis hash mapping.

    Timestamps are stored as ISO-8601 with microseconds and UTC offset, so
    they round-trip exactly through decode_short_link().
    """
    return {
        'id': link.id,
        'original_url': link.original_url,
        'shortcode': link.shortcode,
        'created_at': link.created_at.isoformat(),
        'validity_minutes': str(link.validity_minutes),
        'expires_at': link.expires_at.isoformat(),
        'is_active': '1' if link.is_active else '0',
    }


def decode_short_link(fields: dict[str, str], clicks: Sequence[str]) -> ShortLinkModel:
    """Rebuild a link from its Redis hash and click list.

    Raises:
        KeyError: if a field is missing (including an empty hash)
        ValueError: if a field or click holds an unparsable value
    """
    return ShortLinkModel(
        id=fields['id'],
        original_url=fields['original_url'],
        shortcode=fields['shortcode'],
        created_at=datetime.fromisoformat(fields['created_at']),
        validity_minutes=int(fields['validity_minutes']),
        expires_at=datetime.fromisoformat(fields['expires_at']),
        is_active=fields['is_active'] == '1',
        clicks=tuple(decode_click(raw) for raw in clicks),
    )


def encode_click(click: ClickRecordModel) -> str:
    return json.dumps(
        {
            'timestamp': click.timestamp.isoformat(),
            'user_agent': click.user_agent,
            'referrer': click.referrer,
        }
    )


def decode_click(raw: str) -> ClickRecordModel:
    data = json.loads(raw)
    return ClickRecordModel(
        timestamp=datetime.fromisoformat(data['timestamp']),
        user_agent=data.get('user_agent', ''),
        referrer=data.get('referrer') or Defaults.REFERRER,
    )
