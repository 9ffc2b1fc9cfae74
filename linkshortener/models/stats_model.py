from dataclasses import dataclass
from datetime import datetime

from linkshortener.models.short_link_model import ClickRecordModel, ShortLinkModel


# fmt: off
@dataclass(frozen=True)
class LinkStats:
    link: ShortLinkModel                         # The link being described
    status: str                                  # 'active', 'expired' or 'inactive'
    total_clicks: int                            # All clicks ever recorded
    clicks_last_24h: int                         # Clicks strictly newer than now - 24h
    last_click: ClickRecordModel | None          # Most recent click, if any
    recent_clicks: tuple[ClickRecordModel, ...]  # Newest first, capped
    remaining_clicks: int                        # Clicks not listed in recent_clicks


@dataclass(frozen=True)
class StatsSnapshot:
    generated_at: datetime        # "now" used for every derived value below
    total_links: int
    total_clicks: int
    active_links: int             # Active and not expired
    expired_links: int            # Expired, regardless of is_active
    inactive_links: int           # Explicitly deactivated
    links: tuple[LinkStats, ...]  # Newest link first
    skipped_records: int = 0      # Stored records that could not be decoded
# fmt: on
