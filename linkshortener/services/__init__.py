from linkshortener.services.creation import CreationWorkflow
from linkshortener.services.resolver import LinkResolver
from linkshortener.services.stats import collect_stats, summarize_link
from linkshortener.services.service import LinkShortenerService, build_dao, create_service


__all__ = [
    'CreationWorkflow',
    'LinkResolver',
    'collect_stats',
    'summarize_link',
    'LinkShortenerService',
    'build_dao',
    'create_service',
]
