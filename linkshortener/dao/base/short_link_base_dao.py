"""Abstract base class for ShortLink data access objects (DAOs).

This class establishes a consistent contract for all ShortLink DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, in-process memory).

Responsibilities:
    - Provide an interface for storing, retrieving and mutating ShortLinkModel objects.
    - Standardize error handling across multiple data store implementations.
    - Keep every mutation keyed by shortcode and atomic, so concurrent
      writers never lose each other's updates.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from linkshortener.models import ShortLinkModel, ClickRecordModel
        >>> from linkshortener.dao.redis import ShortLinkRedisDAO

        >>> dao = ShortLinkRedisDAO(...)

        >>> link = ShortLinkModel.create(
        ...     original_url="https://example.com/blog/article-123",
        ...     shortcode="a1b2c3",
        ...     validity_minutes=30,
        ... )
        >>> dao.save_batch([link])

        >>> dao.get("a1b2c3").original_url
        'https://example.com/blog/article-123'

        >>> dao.record_click("a1b2c3", ClickRecordModel(timestamp=datetime.now(UTC)))
        1
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import NamedTuple

from linkshortener.models import ShortLinkModel, ClickRecordModel
from linkshortener.dao.exceptions import ShortLinkNotFoundError


class LoadResult(NamedTuple):
    """Outcome of a full read: decoded links plus the shortcodes of skipped records"""

    links: list[ShortLinkModel]
    skipped: tuple[str, ...] = ()


class ShortLinkBaseDAO(ABC):
    """Interface for ShortLink data access objects (DAOs).

    Methods:
        load_all(**kwargs) -> LoadResult:
            Retrieve every stored link in insertion order.
            Undecodable records are skipped (treated as absent), logged and
            reported by shortcode in LoadResult.skipped.
            Raises DataStoreError on connection or read failure.

        get_all(**kwargs) -> list[ShortLinkModel]:
            Same as load_all(), returning only the links.

        save_batch(links: Sequence[ShortLinkModel], **kwargs) -> ShortLinkBaseDAO:
            Atomically store new links. Either all of them are written or none.
            Raises ShortLinkAlreadyExistsError if any shortcode is taken.
            Raises DataStoreError on connection or write failure.

        get(shortcode: str, **kwargs) -> ShortLinkModel:
            Retrieve a link by exact shortcode.
            Raises ShortLinkNotFoundError if the entry does not exist.
            Raises DataStoreError on connection or read failure.

        find(shortcode: str, **kwargs) -> ShortLinkModel | None:
            Same as get(), returning None instead of raising ShortLinkNotFoundError.

        record_click(shortcode: str, click: ClickRecordModel, **kwargs) -> int:
            Atomically append a click to a link. Returns the new click count.
            Raises ShortLinkNotFoundError if the entry does not exist.
            Raises DataStoreError on connection or write failure.

        deactivate(shortcode: str, **kwargs) -> ShortLinkBaseDAO:
            Mark a link inactive.
            Raises ShortLinkNotFoundError if the entry does not exist.

        clear_all(**kwargs) -> ShortLinkBaseDAO:
            Irreversibly remove every link and click.

        shortcodes(**kwargs) -> set[str]:
            Return every allocated shortcode, expired or not.

    Subclassing:
        Datastore-specific implementations (e.g., ShortLinkRedisDAO or
        ShortLinkMemoryDAO) must extend this class and implement all
        abstract methods.

    NOTE:
        - Links are never deleted individually. Expired links stay stored
          (and their shortcodes stay reserved) until clear_all().
    """

    @abstractmethod
    def load_all(self, **kwargs) -> LoadResult:
        """Retrieve every stored link in insertion order.

        Returns:
            LoadResult: all decodable links (possibly empty) and the
                shortcodes of records that could not be decoded

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    def get_all(self, **kwargs) -> list[ShortLinkModel]:
        return self.load_all(**kwargs).links

    @abstractmethod
    def save_batch(self, links: Sequence[ShortLinkModel], **kwargs) -> 'ShortLinkBaseDAO':
        """Store new links in one atomic write.

        Args:
            links (Sequence[ShortLinkModel]):
                Links to append, in order.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortLinkBaseDAO: self (for method chaining)

        Raises:
            ShortLinkAlreadyExistsError:
                If any of the shortcodes is already stored (or repeated within `links`).

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> ShortLinkModel:
        """Retrieve a link by its shortcode.

        Args:
            shortcode (str):
                The shortcode of the link to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortLinkModel: the stored link, including its click history

        Raises:
            ShortLinkNotFoundError:
                If no link with the given shortcode exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    def find(self, shortcode: str, **kwargs) -> ShortLinkModel | None:
        try:
            return self.get(shortcode, **kwargs)
        except ShortLinkNotFoundError:
            return None

    @abstractmethod
    def record_click(self, shortcode: str, click: ClickRecordModel, **kwargs) -> int:
        """Append a click to a link's history.

        Args:
            shortcode (str):
                The shortcode of the clicked link.

            click (ClickRecordModel):
                Click details.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            int: number of clicks recorded for the link after the append

        Raises:
            ShortLinkNotFoundError:
                If no link with the given shortcode exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def deactivate(self, shortcode: str, **kwargs) -> 'ShortLinkBaseDAO':
        """Mark a link inactive. Deactivated links no longer resolve.

        Raises:
            ShortLinkNotFoundError:
                If no link with the given shortcode exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def clear_all(self, **kwargs) -> 'ShortLinkBaseDAO':
        """Remove every link and click. Irreversible."""
        pass

    @abstractmethod
    def shortcodes(self, **kwargs) -> set[str]:
        """Return the set of all allocated shortcodes."""
        pass
