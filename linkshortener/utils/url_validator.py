"""Destination URL normalization and validation

Functions:
    validate_url(raw: str) -> str
        Normalize a user-typed URL and validate it. Returns the normalized URL.
    validate_urls(raws: Iterable[str]) -> list[str | ValidationError]
        Validate several URLs; failures are returned in place, not raised.

Example:
    >>> validate_url('  example.com/path?q=1 ')
    'https://example.com/path?q=1'
    >>> validate_url('http://localhost:8000')
    Traceback (most recent call last):
        ...
    linkshortener.exceptions.LocalhostNotAllowedError: Localhost URLs are not allowed
"""

import re
import logging
import urllib.parse
from collections.abc import Iterable

from linkshortener.constants import FORBIDDEN_HOSTNAMES
from linkshortener.exceptions import (
    ValidationError,
    EmptyInputError,
    MalformedUrlError,
    InvalidHostnameError,
    LocalhostNotAllowedError,
    InvalidDomainFormatError,
)


logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r'^https?://', re.IGNORECASE)


def validate_url(raw: str | None) -> str:
    """Normalize and validate a destination URL

    Procedure:
    - Step 1: Trim input and reject blank strings
    - Step 2: Prefix 'https://' when no http(s) scheme is present
    - Step 3: Parse the URL (hostname and port must be well-formed)
    - Step 4: Reject empty hostnames, localhost and dot-less domains

    Args:
        raw (str | None): URL as typed by the user

    Returns:
        str: normalized, scheme-qualified URL (this is the form that gets stored)

    Raises:
        EmptyInputError, MalformedUrlError, InvalidHostnameError,
        LocalhostNotAllowedError, InvalidDomainFormatError
    """
    if raw is None or not raw.strip():
        raise EmptyInputError('URL cannot be empty')

    url = raw.strip()
    if not _SCHEME_RE.match(url):
        url = f'https://{url}'

    try:
        components = urllib.parse.urlsplit(url)
        hostname = components.hostname
        components.port  # noqa: B018 raises ValueError on a non-numeric or out-of-range port
    except ValueError as e:
        logger.info('URL validation failed.', extra={'component': 'urlValidator', 'url': url, 'error': str(e)})
        raise MalformedUrlError('Invalid URL format') from e

    if any(ch.isspace() for ch in components.netloc):
        raise MalformedUrlError('Invalid URL format')
    if not hostname:
        raise InvalidHostnameError('Invalid hostname')
    if hostname in FORBIDDEN_HOSTNAMES:
        raise LocalhostNotAllowedError('Localhost URLs are not allowed')
    if '.' not in hostname:
        raise InvalidDomainFormatError('Invalid domain format')

    logger.debug('URL validated successfully.', extra={'component': 'urlValidator', 'url': url})
    return url


def validate_urls(raws: Iterable[str | None]) -> list[str | ValidationError]:
    results: list[str | ValidationError] = []
    for raw in raws:
        try:
            results.append(validate_url(raw))
        except ValidationError as e:
            results.append(e)
    return results
