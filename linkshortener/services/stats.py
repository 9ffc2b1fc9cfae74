"""Read-only statistics over stored short links

Functions:
    summarize_link(link, now) -> LinkStats
        Per-link click figures.
    collect_stats(links, now=None, skipped_records=0) -> StatsSnapshot
        Totals plus per-link figures, newest link first.
"""

from collections.abc import Iterable
from datetime import datetime, timedelta, UTC

from linkshortener.constants import Limits, TTL
from linkshortener.models import ShortLinkModel, LinkStats, StatsSnapshot


def summarize_link(link: ShortLinkModel, now: datetime) -> LinkStats:
    window_start = now - timedelta(seconds=TTL.ONE_DAY)
    newest_first = sorted(link.clicks, key=lambda click: click.timestamp, reverse=True)
    recent = tuple(newest_first[: Limits.RECENT_CLICKS])

    return LinkStats(
        link=link,
        status=link.status(now),
        total_clicks=len(link.clicks),
        clicks_last_24h=sum(1 for click in link.clicks if click.timestamp > window_start),
        last_click=newest_first[0] if newest_first else None,
        recent_clicks=recent,
        remaining_clicks=len(link.clicks) - len(recent),
    )


def collect_stats(
    links: Iterable[ShortLinkModel],
    now: datetime | None = None,
    skipped_records: int = 0,
) -> StatsSnapshot:
    """Aggregate statistics for a collection of links

    Active links are active and not expired. Expired links are counted
    regardless of their activity flag, so a deactivated link that also
    expired counts as both expired and inactive.

    Args:
        links (Iterable[ShortLinkModel]): links to describe
        now (datetime | None): reference time, defaults to the current UTC time
        skipped_records (int): stored records the DAO could not decode

    Returns:
        StatsSnapshot: aggregated statistics
    """
    now = now or datetime.now(UTC)
    links = sorted(links, key=lambda link: link.created_at, reverse=True)

    return StatsSnapshot(
        generated_at=now,
        total_links=len(links),
        total_clicks=sum(len(link.clicks) for link in links),
        active_links=sum(1 for link in links if link.is_resolvable(now)),
        expired_links=sum(1 for link in links if link.is_expired(now)),
        inactive_links=sum(1 for link in links if not link.is_active),
        links=tuple(summarize_link(link, now) for link in links),
        skipped_records=skipped_records,
    )
