from linkshortener.models.short_link_model import ShortLinkModel, ClickRecordModel
from linkshortener.models.creation_request_model import CreationRequest
from linkshortener.models.resolve_outcome_model import ResolveStatus, RequestContext, ResolveOutcome
from linkshortener.models.stats_model import LinkStats, StatsSnapshot


__all__ = [
    'ShortLinkModel',
    'ClickRecordModel',
    'CreationRequest',
    'ResolveStatus',
    'RequestContext',
    'ResolveOutcome',
    'LinkStats',
    'StatsSnapshot',
]
