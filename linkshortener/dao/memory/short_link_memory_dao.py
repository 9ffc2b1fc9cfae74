"""In-process Data Access Object (DAO) for short links

Keeps links in an insertion-ordered dict keyed by shortcode. Every
mutation holds a re-entrant lock, so the DAO can be shared by threads
of one process. Nothing survives the process; use it for embedding,
local experiments and tests.

Classes:
    ShortLinkMemoryDAO:
        DAO storing ShortLinkModel instances in process memory.

Example:
    >>> dao = ShortLinkMemoryDAO()
    >>> dao.save_batch([ShortLinkModel.create(original_url='https://example.com', shortcode='abc123', validity_minutes=5)])
    <ShortLinkMemoryDAO>
    >>> dao.shortcodes()
    {'abc123'}
"""

import threading
from collections.abc import Sequence

from beartype import beartype

from linkshortener.models import ShortLinkModel, ClickRecordModel
from linkshortener.dao.base import ShortLinkBaseDAO, LoadResult
from linkshortener.dao.exceptions import ShortLinkAlreadyExistsError, ShortLinkNotFoundError


class ShortLinkMemoryDAO(ShortLinkBaseDAO):
    """Thread-safe in-memory implementation of ShortLinkBaseDAO

    Links are frozen dataclasses, so returned objects are snapshots: a click
    recorded later does not show up on a link fetched earlier.
    """

    def __init__(self, links: Sequence[ShortLinkModel] = ()):
        self._links: dict[str, ShortLinkModel] = {}
        self._lock = threading.RLock()
        if links:
            self.save_batch(links)

    def load_all(self, **kwargs) -> LoadResult:
        with self._lock:
            return LoadResult(links=list(self._links.values()))

    @beartype
    def save_batch(self, links: Sequence[ShortLinkModel], **kwargs) -> 'ShortLinkMemoryDAO':
        shortcodes = [link.shortcode for link in links]
        with self._lock:
            taken = sorted({code for code in shortcodes if code in self._links or shortcodes.count(code) > 1})
            if taken:
                raise ShortLinkAlreadyExistsError(f'Short links with codes {", ".join(taken)} already exist.')
            for link in links:
                self._links[link.shortcode] = link
        return self

    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortLinkModel:
        with self._lock:
            try:
                return self._links[shortcode]
            except KeyError:
                raise ShortLinkNotFoundError(f"Short link with code '{shortcode}' not found.") from None

    @beartype
    def record_click(self, shortcode: str, click: ClickRecordModel, **kwargs) -> int:
        with self._lock:
            link = self.get(shortcode).with_click(click)
            self._links[shortcode] = link
            return len(link.clicks)

    @beartype
    def deactivate(self, shortcode: str, **kwargs) -> 'ShortLinkMemoryDAO':
        with self._lock:
            self._links[shortcode] = self.get(shortcode).deactivated()
        return self

    def clear_all(self, **kwargs) -> 'ShortLinkMemoryDAO':
        with self._lock:
            self._links.clear()
        return self

    def shortcodes(self, **kwargs) -> set[str]:
        with self._lock:
            return set(self._links)
