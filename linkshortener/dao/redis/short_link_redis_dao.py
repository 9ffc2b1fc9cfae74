"""Data Access Object (DAO) implementation for managing short links in Redis

This module provides a Redis-based implementation of ShortLinkBaseDAO for CRUD-like
operations with ShortLinkModel instances.

Responsibilities:
    - Store batches of short links atomically;
    - Retrieve single links or the whole collection in insertion order;
    - Append click records per link without rewriting the dataset;
    - Deactivate links and clear the store;
    - Provide defensive error handling and raise appropriate DAO exceptions.

Classes:
    ShortLinkRedisDAO:
        DAO for storing and retrieving ShortLinkModel in a Redis datastore.

Example:
    >>> from linkshortener.models import ShortLinkModel, ClickRecordModel
    >>> from linkshortener.dao.redis import ShortLinkRedisDAO

    >>> dao = ShortLinkRedisDAO(prefix="linkshortener:dev")

    >>> link = ShortLinkModel.create(
    ...     original_url="https://example.com/page",
    ...     shortcode="abc123",
    ...     validity_minutes=60,
    ... )
    >>> dao.save_batch([link])
    <ShortLinkRedisDAO>

    >>> dao.get("abc123").original_url
    'https://example.com/page'

    >>> dao.record_click("abc123", ClickRecordModel(timestamp=datetime.now(UTC)))
    1
"""

import logging
from collections.abc import Sequence

from beartype import beartype

from linkshortener.models import ShortLinkModel, ClickRecordModel
from linkshortener.dao.base import ShortLinkBaseDAO, LoadResult
from linkshortener.dao.redis.mixins import RedisClientMixin
from linkshortener.dao.redis.helpers import (
    handle_redis_errors,
    encode_short_link,
    decode_short_link,
    encode_click,
)
from linkshortener.dao.exceptions import DataStoreError, ShortLinkAlreadyExistsError, ShortLinkNotFoundError
from linkshortener.exceptions import BadConfigurationError


logger = logging.getLogger(__name__)


class ShortLinkRedisDAO(RedisClientMixin, ShortLinkBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short links

    This class implements the ShortLinkBaseDAO interface using Redis as a data store.
    Every mutation touches only the keys of the affected shortcode(s), so
    concurrent writers never overwrite each other's changes.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        load_all(**kwargs) -> LoadResult:
            Retrieve all links (with clicks) in insertion order, plus the
            shortcodes of undecodable records that were skipped.

        save_batch(links: Sequence[ShortLinkModel], **kwargs) -> ShortLinkRedisDAO:
            Insert links in a single WATCH-guarded MULTI/EXEC transaction.
            Raises ShortLinkAlreadyExistsError when a shortcode is taken.

        get(shortcode: str, **kwargs) -> ShortLinkModel:
            Retrieve a link and its clicks by shortcode.
            Raises ShortLinkNotFoundError when the shortcode doesn't exist.

        record_click(shortcode: str, click: ClickRecordModel, **kwargs) -> int:
            RPUSH a click onto the link's click list. Returns the new click count.
            Raises ShortLinkNotFoundError when the shortcode doesn't exist.

        deactivate(shortcode: str, **kwargs) -> ShortLinkRedisDAO:
            Flip the link's is_active flag off.

        clear_all(**kwargs) -> ShortLinkRedisDAO:
            Delete every key under the (required) prefixed links namespace.

        shortcodes(**kwargs) -> set[str]:
            Return all allocated shortcodes.

        All methods raise DataStoreError on connectivity issues with Redis.
    """

    @handle_redis_errors
    def load_all(self, **kwargs) -> LoadResult:
        """Retrieve every stored link in insertion order

        Hashes and click lists are fetched in one pipeline round trip.
        Records that can't be decoded are skipped, logged as warnings and
        reported in LoadResult.skipped.

        Returns:
            LoadResult: stored links (oldest first) and skipped shortcodes

        Example:
            >>> dao.load_all()
            LoadResult(links=[ShortLinkModel(..., shortcode='abc123', ...)], skipped=('broken',))
        """
        shortcodes = self.redis.lrange(self.keys.index_key(), 0, -1)
        if not shortcodes:
            return LoadResult(links=[])

        with self.redis.pipeline(transaction=True) as pipe:
            for shortcode in shortcodes:
                pipe.hgetall(self.keys.link_key(shortcode))
                pipe.lrange(self.keys.link_clicks_key(shortcode), 0, -1)
            results = pipe.execute()

        links, skipped = [], []
        for shortcode, fields, clicks in zip(shortcodes, results[0::2], results[1::2]):
            try:
                links.append(decode_short_link(fields, clicks))
            except (KeyError, ValueError, TypeError) as e:
                skipped.append(shortcode)
                logger.warning(
                    'Skipping undecodable short link record.',
                    extra={'component': 'store', 'shortcode': shortcode, 'error': repr(e)},
                )
        return LoadResult(links=links, skipped=tuple(skipped))

    @handle_redis_errors
    @beartype
    def save_batch(self, links: Sequence[ShortLinkModel], **kwargs) -> 'ShortLinkRedisDAO':
        """Insert a batch of short links into Redis

        The existence check and all writes run inside `Redis.transaction()`:
        the link keys are WATCHed, checked, and then written with MULTI/EXEC.
        If another client touches one of the watched keys before EXEC, the
        transaction is retried and the existence check then fails. Either every
        link is stored or none is.

        Args:
            links (Sequence[ShortLinkModel]):
                Links to store, in order.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortLinkRedisDAO: self (for method chaining)

        Raises:
            ShortLinkAlreadyExistsError:
                If a shortcode is already stored or repeated within the batch.
            DataStoreError:
                If a Redis connection issue occurs or Redis rejects the write (e.g. OOM).
        """
        if not links:
            return self

        shortcodes = [link.shortcode for link in links]
        repeated = sorted({code for code in shortcodes if shortcodes.count(code) > 1})
        if repeated:
            raise ShortLinkAlreadyExistsError(f'Shortcodes repeated within the batch: {", ".join(repeated)}.')

        link_keys = [self.keys.link_key(code) for code in shortcodes]

        def insert(pipe) -> None:
            taken = [code for code, key in zip(shortcodes, link_keys) if pipe.exists(key)]
            if taken:
                raise ShortLinkAlreadyExistsError(f'Short links with codes {", ".join(taken)} already exist.')

            pipe.multi()
            for link, link_key in zip(links, link_keys):
                clicks_key = self.keys.link_clicks_key(link.shortcode)
                pipe.hset(link_key, mapping=encode_short_link(link))
                # NOTE: drop any stale click list left behind under a reused key
                pipe.delete(clicks_key)
                if link.clicks:
                    pipe.rpush(clicks_key, *(encode_click(click) for click in link.clicks))
            pipe.rpush(self.keys.index_key(), *shortcodes)

        self.redis.transaction(insert, *link_keys)
        logger.debug('Stored short links.', extra={'component': 'store', 'shortcodes': shortcodes})
        return self

    @handle_redis_errors
    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortLinkModel:
        """Retrieve a stored short link by shortcode

        Fetches the link hash and its click list in a single transaction.

        Args:
            shortcode (str):
                The shortcode identifier of the link.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortLinkModel:
                The retrieved link, clicks included.

        Raises:
            ShortLinkNotFoundError:
                If the link does not exist in Redis.
            DataStoreError:
                If Redis connectivity issues occur or the record is corrupted.

        Example:
            >>> dao.get('abc123')
            ShortLinkModel(id='1760788800000-k3j9x0q2m', original_url='https://example.com', ...)
        """
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.hgetall(self.keys.link_key(shortcode))
            pipe.lrange(self.keys.link_clicks_key(shortcode), 0, -1)
            fields, clicks = pipe.execute()

        if not fields:
            raise ShortLinkNotFoundError(f"Short link with code '{shortcode}' not found.")

        try:
            return decode_short_link(fields, clicks)
        except (KeyError, ValueError, TypeError) as e:
            raise DataStoreError(f"Short link record '{shortcode}' is corrupted.") from e

    @handle_redis_errors
    @beartype
    def record_click(self, shortcode: str, click: ClickRecordModel, **kwargs) -> int:
        """Append a click record to a short link

        NOTE: The existence check and the RPUSH run in one WATCH-guarded
              transaction, so a click can't land on a link that is cleared
              in between (it would otherwise leave an orphaned click list):

              (client 1): record_click():
                          -> EXISTS <app>:links:code:<shortcode>
                          ... interruption
              (client 2): clear_all():
                          -> DEL <app>:links:code:<shortcode> ...
              (client 1): record_click() continued...:
                          -> RPUSH <app>:links:code:<shortcode>:clicks <click>

              With WATCH, client 1's EXEC fails, the transaction is retried and
              the existence check raises ShortLinkNotFoundError instead.

        Args:
            shortcode (str):
                The shortcode of the clicked link.
            click (ClickRecordModel):
                Click details.
            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            int: total number of clicks on the link after this one

        Raises:
            ShortLinkNotFoundError:
                If no link with the given shortcode exists.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        link_key = self.keys.link_key(shortcode)
        clicks_key = self.keys.link_clicks_key(shortcode)

        def append(pipe) -> None:
            if not pipe.exists(link_key):
                raise ShortLinkNotFoundError(f"Short link with code '{shortcode}' not found.")
            pipe.multi()
            pipe.rpush(clicks_key, encode_click(click))

        (clicks,) = self.redis.transaction(append, link_key)
        return clicks

    @handle_redis_errors
    @beartype
    def deactivate(self, shortcode: str, **kwargs) -> 'ShortLinkRedisDAO':
        link_key = self.keys.link_key(shortcode)

        def flip(pipe) -> None:
            if not pipe.exists(link_key):
                raise ShortLinkNotFoundError(f"Short link with code '{shortcode}' not found.")
            pipe.multi()
            pipe.hset(link_key, 'is_active', '0')

        self.redis.transaction(flip, link_key)
        return self

    @handle_redis_errors
    def clear_all(self, **kwargs) -> 'ShortLinkRedisDAO':
        """Delete every key in the links namespace (index, link hashes, click lists)

        NOTE: SCAN and DEL are not one transaction. Links created while
              clear_all() runs may survive it (fully or partially).

        Raises:
            BadConfigurationError:
                If the DAO has no key prefix. An unprefixed 'links:*' pattern
                would match keys of any other application in the database.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        if self.keys.prefix is None:
            raise BadConfigurationError('Refusing to clear an unprefixed Redis keyspace; configure a key prefix.')

        keys = list(self.redis.scan_iter(match=self.keys.links_pattern()))
        if keys:
            self.redis.delete(*keys)
        logger.info('Cleared short link store.', extra={'component': 'store', 'deleted_keys': len(keys)})
        return self

    @handle_redis_errors
    def shortcodes(self, **kwargs) -> set[str]:
        return set(self.redis.lrange(self.keys.index_key(), 0, -1))
