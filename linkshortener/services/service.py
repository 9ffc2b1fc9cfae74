"""Application-facing entry point of the link shortener core

Classes:
    LinkShortenerService:
        Facade exposing create_links(), resolve(), list_stats(), link_stats(),
        deactivate(), clear_all() and short_url() over one injected DAO.

Functions:
    build_dao(settings) -> ShortLinkBaseDAO
        Construct the DAO selected by configuration.
    create_service(settings=None) -> LinkShortenerService
        Construct a service from (loaded) configuration.

Example:
    >>> from linkshortener.services import create_service
    >>> service = create_service()
    >>> [link] = service.create_links([CreationRequest(url='example.com/docs', custom_shortcode='docs')])
    >>> service.resolve('docs').destination
    'https://example.com/docs'
"""

import logging
from datetime import datetime, UTC
from collections.abc import Iterable

from linkshortener.constants import Backend
from linkshortener.models import ShortLinkModel, CreationRequest, RequestContext, ResolveOutcome, LinkStats, StatsSnapshot
from linkshortener.dao.base import ShortLinkBaseDAO
from linkshortener.utils.config import Settings, load_config
from linkshortener.utils.helpers import get_short_url
from linkshortener.services.creation import CreationWorkflow
from linkshortener.services.resolver import LinkResolver
from linkshortener.services.stats import collect_stats, summarize_link
from linkshortener.services.constants import LINK_DEACTIVATED, STORE_CLEARED


logger = logging.getLogger(__name__)


class LinkShortenerService:
    """Facade over the creation workflow, the resolver and the stats aggregator

    The DAO is injected and shared by every component; its lifetime is the
    lifetime of the service object.

    Args:
        dao (ShortLinkBaseDAO): store holding the links
        settings (Settings | None): configuration, defaults to Settings()
    """

    def __init__(self, dao: ShortLinkBaseDAO, settings: Settings | None = None):
        self.dao = dao
        self.settings = settings or Settings()
        self.creation = CreationWorkflow(
            dao,
            shortcode_length=self.settings.shortcode_length,
            max_attempts=self.settings.max_attempts,
        )
        self.resolver = LinkResolver(dao)

    def create_links(self, requests: Iterable[CreationRequest]) -> list[ShortLinkModel]:
        return self.creation.create(requests)

    def resolve(self, shortcode: str | None, context: RequestContext | None = None) -> ResolveOutcome:
        return self.resolver.resolve(shortcode, context)

    def list_stats(self) -> StatsSnapshot:
        """Statistics for every stored link. Undecodable records are counted in skipped_records."""
        result = self.dao.load_all()
        return collect_stats(result.links, skipped_records=len(result.skipped))

    def link_stats(self, shortcode: str) -> LinkStats:
        """Raises ShortLinkNotFoundError when the shortcode is unknown."""
        link = self.dao.get(shortcode)
        return summarize_link(link, datetime.now(UTC))

    def deactivate(self, shortcode: str) -> None:
        self.dao.deactivate(shortcode)
        logger.info(
            'Short link deactivated.',
            extra={'component': 'service', 'event': LINK_DEACTIVATED, 'shortcode': shortcode},
        )

    def clear_all(self) -> None:
        self.dao.clear_all()
        logger.info('All data cleared.', extra={'component': 'service', 'event': STORE_CLEARED})

    def short_url(self, shortcode: str) -> str:
        return get_short_url(shortcode, self.settings.base_url)


def build_dao(settings: Settings) -> ShortLinkBaseDAO:
    """Construct the DAO selected by `settings.backend`

    Raises:
        DataStoreError: if the Redis backend is selected and Redis is unreachable
    """
    if settings.backend == Backend.REDIS:
        from linkshortener.dao.redis import ShortLinkRedisDAO

        logger.debug('Using Redis as the backend database for short links.')
        redis_config = {f'redis_{k}': v for k, v in settings.redis.items()}
        return ShortLinkRedisDAO(**redis_config, prefix=settings.prefix)

    from linkshortener.dao.memory import ShortLinkMemoryDAO

    logger.debug('Using process memory as the backend database for short links.')
    return ShortLinkMemoryDAO()


def create_service(settings: Settings | None = None) -> LinkShortenerService:
    settings = settings or load_config()
    return LinkShortenerService(build_dao(settings), settings)
