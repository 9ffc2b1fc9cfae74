import logging
from datetime import datetime, UTC

from linkshortener.constants import Defaults
from linkshortener.models import ClickRecordModel, RequestContext, ResolveOutcome, ResolveStatus
from linkshortener.dao.base import ShortLinkBaseDAO
from linkshortener.dao.exceptions import DataStoreError, ShortLinkNotFoundError
from linkshortener.services.constants import (
    MISSING_SHORTCODE,
    SHORT_LINK_NOT_FOUND,
    SHORT_LINK_EXPIRED,
    SHORT_LINK_DEACTIVATED,
    CLICK_RECORDED,
    CLICK_NOT_RECORDED,
    REDIRECT_SUCCESS,
    REASON_MISSING_SHORTCODE,
    REASON_NOT_FOUND,
    REASON_EXPIRED,
    REASON_DEACTIVATED,
)


logger = logging.getLogger(__name__)


class LinkResolver:
    """Resolve shortcodes to destination URLs and record clicks

    Args:
        dao (ShortLinkBaseDAO): store holding the links
    """

    def __init__(self, dao: ShortLinkBaseDAO):
        self.dao = dao

    def resolve(self, shortcode: str | None, context: RequestContext | None = None) -> ResolveOutcome:
        """Resolve a shortcode

        This method follows this procedure:
        - Step 1: Reject a missing/blank shortcode (MISSING_INPUT)
        - Step 2: Look the link up (NOT_FOUND)
        - Step 3: Check expiry before activity, so an expired link reports
                  EXPIRED even when it was also deactivated (EXPIRED)
        - Step 4: Check activity (DEACTIVATED)
        - Step 5: Record a click (best-effort) and redirect (REDIRECTING)

        Args:
            shortcode (str | None):
                Shortcode taken from the request path.
            context (RequestContext | None):
                Client user agent and referrer for the click record.

        Returns:
            ResolveOutcome: terminal outcome; only REDIRECTING has a destination

        Raises:
            DataStoreError:
                If the link can't be read from the store. A failed click
                write is reported on the outcome instead.
        """
        context = context or RequestContext()

        # 1- Reject missing shortcode
        if shortcode is None or not shortcode.strip():
            logger.info('Missing shortcode.', extra={'component': 'resolver', 'event': MISSING_SHORTCODE})
            return ResolveOutcome(status=ResolveStatus.MISSING_INPUT, reason=REASON_MISSING_SHORTCODE)

        # 2- Look up the short link
        link = self.dao.find(shortcode)
        if link is None:
            logger.info(
                'Short link not found.',
                extra={'component': 'resolver', 'event': SHORT_LINK_NOT_FOUND, 'shortcode': shortcode},
            )
            return ResolveOutcome(status=ResolveStatus.NOT_FOUND, shortcode=shortcode, reason=REASON_NOT_FOUND)

        # 3- Expiry wins over deactivation
        now = datetime.now(UTC)
        if link.is_expired(now):
            logger.info(
                'Short link expired.',
                extra={'component': 'resolver', 'event': SHORT_LINK_EXPIRED, 'shortcode': shortcode},
            )
            return ResolveOutcome(status=ResolveStatus.EXPIRED, shortcode=shortcode, reason=REASON_EXPIRED)

        # 4- Activity
        if not link.is_active:
            logger.info(
                'Short link deactivated.',
                extra={'component': 'resolver', 'event': SHORT_LINK_DEACTIVATED, 'shortcode': shortcode},
            )
            return ResolveOutcome(status=ResolveStatus.DEACTIVATED, shortcode=shortcode, reason=REASON_DEACTIVATED)

        # 5- Record the click; a failed write never blocks the redirect
        click = ClickRecordModel(
            timestamp=now,
            user_agent=context.user_agent or '',
            referrer=context.referrer or Defaults.REFERRER,
        )
        click_error = None
        try:
            clicks = self.dao.record_click(shortcode, click)
        except ShortLinkNotFoundError as e:
            # NOTE: the store was cleared between lookup and click write
            click_error = str(e)
            logger.warning(
                'Could not record click: short link vanished.',
                extra={'component': 'resolver', 'event': CLICK_NOT_RECORDED, 'shortcode': shortcode},
            )
        except DataStoreError as e:
            click_error = str(e)
            logger.error(
                'Could not record click: data store failure.',
                extra={'component': 'resolver', 'event': CLICK_NOT_RECORDED, 'shortcode': shortcode, 'error': str(e)},
            )
        else:
            logger.debug(
                'Click recorded.',
                extra={'component': 'resolver', 'event': CLICK_RECORDED, 'shortcode': shortcode, 'clicks': clicks},
            )

        logger.info(
            'Redirecting client to destination URL.',
            extra={'component': 'resolver', 'event': REDIRECT_SUCCESS, 'shortcode': shortcode},
        )
        return ResolveOutcome(
            status=ResolveStatus.REDIRECTING,
            shortcode=shortcode,
            destination=link.original_url,
            click_recorded=click_error is None,
            click_error=click_error,
        )
