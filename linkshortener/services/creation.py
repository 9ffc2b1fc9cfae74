"""Creation workflow: validate a batch of link requests, allocate shortcodes, persist

Procedure:
    - Step 1: Check the batch size (1 to 5 requests)
    - Step 2: Snapshot the persisted shortcodes once
    - Step 3: Validate every entry (URL, custom shortcode, validity period)
    - Step 4: Reject the whole batch if any entry failed; nothing is stored
    - Step 5: Assemble links, allocating shortcodes where none was requested
    - Step 6: Persist all links with a single save_batch() call

Example:
    >>> workflow = CreationWorkflow(ShortLinkMemoryDAO())
    >>> links = workflow.create([CreationRequest(url='example.com', validity_minutes=60)])
    >>> links[0].original_url
    'https://example.com'
"""

import logging
from collections.abc import Collection, Iterable

from linkshortener.constants import Defaults, Limits
from linkshortener.models import ShortLinkModel, CreationRequest
from linkshortener.dao.base import ShortLinkBaseDAO
from linkshortener.dao.exceptions import DAOError
from linkshortener.exceptions import (
    ValidationError,
    BatchValidationError,
    ShortcodeInUseError,
    InvalidValidityPeriodError,
    InvalidBatchSizeError,
)
from linkshortener.utils.url_validator import validate_url
from linkshortener.utils.shortener import validate_shortcode, is_shortcode_unique, allocate_shortcode
from linkshortener.services.constants import BATCH_VALIDATION_FAILED, SHORTCODE_ALLOCATED, LINKS_CREATED, PERSISTENCE_FAILED


logger = logging.getLogger(__name__)


def validate_validity_period(validity_minutes: int) -> int:
    if (
        not isinstance(validity_minutes, int)
        or isinstance(validity_minutes, bool)
        or not Limits.MIN_VALIDITY_MINUTES <= validity_minutes <= Limits.MAX_VALIDITY_MINUTES
    ):
        raise InvalidValidityPeriodError(
            f'Validity must be between {Limits.MIN_VALIDITY_MINUTES} minute and 30 days '
            f'({Limits.MAX_VALIDITY_MINUTES} minutes)'
        )
    return validity_minutes


class CreationWorkflow:
    """Create batches of short links with all-or-nothing semantics

    Args:
        dao (ShortLinkBaseDAO): store the links are written to
        shortcode_length (int): length of generated shortcodes
        max_attempts (int): allocation retry bound per generated shortcode
    """

    def __init__(
        self,
        dao: ShortLinkBaseDAO,
        shortcode_length: int = Defaults.SHORTCODE_LENGTH,
        max_attempts: int = Defaults.SHORTCODE_MAX_ATTEMPTS,
    ):
        self.dao = dao
        self.shortcode_length = shortcode_length
        self.max_attempts = max_attempts

    def validate(self, requests: list[CreationRequest], existing: Collection[str]) -> dict[int, ValidationError]:
        """Validate every entry against one snapshot of persisted shortcodes.

        Returns:
            dict[int, ValidationError]: first error per failing entry (empty if all are valid)
        """
        custom_codes = [(request.custom_shortcode or '').strip() for request in requests]
        errors: dict[int, ValidationError] = {}
        for index, request in enumerate(requests):
            try:
                self._validate_entry(index, request, custom_codes, existing)
            except ValidationError as e:
                errors[index] = e
        return errors

    def _validate_entry(
        self,
        index: int,
        request: CreationRequest,
        custom_codes: list[str],
        existing: Collection[str],
    ) -> None:
        validate_url(request.url)

        shortcode = custom_codes[index]
        if shortcode:
            validate_shortcode(shortcode)
            in_batch = any(other == shortcode for position, other in enumerate(custom_codes) if position != index)
            if in_batch or not is_shortcode_unique(shortcode, existing):
                raise ShortcodeInUseError('This shortcode is already in use')

        validate_validity_period(request.validity_minutes)

    def create(self, requests: Iterable[CreationRequest]) -> list[ShortLinkModel]:
        """Validate and persist a batch of link creation requests

        Args:
            requests (Iterable[CreationRequest]): 1 to 5 requests

        Returns:
            list[ShortLinkModel]: created links, in request order

        Raises:
            InvalidBatchSizeError:
                If the batch is empty or holds more than 5 requests.
            BatchValidationError:
                If any entry fails validation. Nothing is persisted.
            AllocationExhaustedError:
                If no unique shortcode could be generated. Nothing is persisted.
            ShortLinkAlreadyExistsError, DataStoreError:
                If the store rejects the write. No link is considered created.
        """
        requests = list(requests)
        if not Limits.MIN_BATCH_SIZE <= len(requests) <= Limits.MAX_BATCH_SIZE:
            raise InvalidBatchSizeError(
                f'Between {Limits.MIN_BATCH_SIZE} and {Limits.MAX_BATCH_SIZE} URLs can be shortened at once '
                f'(given: {len(requests)}).'
            )

        existing = self.dao.shortcodes()
        errors = self.validate(requests, existing)
        if errors:
            logger.info(
                'Rejected link creation batch.',
                extra={
                    'component': 'creation',
                    'event': BATCH_VALIDATION_FAILED,
                    'errors': {index: error.error_code for index, error in errors.items()},
                },
            )
            raise BatchValidationError(errors)

        custom_codes = [(request.custom_shortcode or '').strip() for request in requests]
        # Generated codes must avoid stored codes and every custom code of this batch
        taken = set(existing) | {code for code in custom_codes if code}

        links = []
        for request, custom_code in zip(requests, custom_codes):
            shortcode = custom_code
            if not shortcode:
                shortcode = allocate_shortcode(taken, length=self.shortcode_length, max_attempts=self.max_attempts)
                taken.add(shortcode)
                logger.debug(
                    'Allocated shortcode for new link.',
                    extra={'component': 'creation', 'event': SHORTCODE_ALLOCATED, 'shortcode': shortcode},
                )

            links.append(
                ShortLinkModel.create(
                    original_url=validate_url(request.url),
                    shortcode=shortcode,
                    validity_minutes=request.validity_minutes,
                )
            )

        try:
            self.dao.save_batch(links)
        except DAOError:
            logger.exception(
                'Failed to persist link creation batch.',
                extra={'component': 'creation', 'event': PERSISTENCE_FAILED},
            )
            raise

        logger.info(
            'Created short links.',
            extra={
                'component': 'creation',
                'event': LINKS_CREATED,
                'shortcodes': [link.shortcode for link in links],
            },
        )
        return links
