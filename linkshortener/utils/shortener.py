"""Shortcode generation, validation and allocation utilities

Functions:
    generate_shortcode(length=6) -> str:
        Draw a random Base62 shortcode. Not unique by itself.
    validate_shortcode(shortcode) -> str:
        Check a user-supplied shortcode's format and return it trimmed.
    is_shortcode_unique(shortcode, existing) -> bool:
        Membership check against already allocated shortcodes.
    allocate_shortcode(existing, length=6, max_attempts=1000) -> str:
        Generate shortcodes until one is unique, within a bounded number of attempts.

Example:
    >>> from linkshortener.utils import allocate_shortcode
    >>> code = allocate_shortcode({'abc123', 'xyz789'})
    >>> len(code)
    6
"""

import logging
import secrets
from collections.abc import Collection

from linkshortener.constants import SHORTCODE_ALPHABET, RESERVED_SHORTCODES, Defaults, Limits
from linkshortener.dao.exceptions import AllocationExhaustedError
from linkshortener.exceptions import EmptyInputError, InvalidLengthError, InvalidCharactersError, ReservedWordError


logger = logging.getLogger(__name__)

_ALPHABET_CHARS = frozenset(SHORTCODE_ALPHABET)


def generate_shortcode(length: int = Defaults.SHORTCODE_LENGTH) -> str:
    """Generate a random shortcode of `length` Base62 characters.

    Every character is drawn uniformly from [a-zA-Z0-9] with the `secrets`
    CSPRNG. With 62^6 possible 6-character codes two draws almost never
    collide, but callers must still check uniqueness (see allocate_shortcode()).

    Args:
        length (int, optional):
            Number of characters. Defaults to 6.

    Returns:
        str: randomly generated shortcode

    Raises:
        TypeError: if length is not an integer
        ValueError: if length is not positive
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length < 1:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')

    return ''.join(secrets.choice(SHORTCODE_ALPHABET) for _ in range(length))


def validate_shortcode(shortcode: str | None) -> str:
    """Validate the format of a custom shortcode.

    Checks run in this order and the first failure wins:
    1- blank input
    2- length between 3 and 20 characters (inclusive)
    3- only ASCII letters and digits
    4- not a reserved route name (case-insensitive)

    Args:
        shortcode (str | None): user-supplied shortcode

    Returns:
        str: the trimmed shortcode

    Raises:
        EmptyInputError, InvalidLengthError, InvalidCharactersError, ReservedWordError

    Example:
        >>> validate_shortcode('  link42 ')
        'link42'
        >>> validate_shortcode('admin')
        Traceback (most recent call last):
            ...
        linkshortener.exceptions.ReservedWordError: This shortcode is reserved and cannot be used
    """
    if shortcode is None or not shortcode.strip():
        raise EmptyInputError('Shortcode cannot be empty')

    trimmed = shortcode.strip()
    if not Limits.MIN_SHORTCODE_LENGTH <= len(trimmed) <= Limits.MAX_SHORTCODE_LENGTH:
        raise InvalidLengthError(
            f'Shortcode must be between {Limits.MIN_SHORTCODE_LENGTH} and {Limits.MAX_SHORTCODE_LENGTH} characters'
        )
    if not set(trimmed) <= _ALPHABET_CHARS:
        raise InvalidCharactersError('Shortcode must contain only letters and numbers')
    if trimmed.lower() in RESERVED_SHORTCODES:
        raise ReservedWordError('This shortcode is reserved and cannot be used')

    logger.debug('Shortcode validated successfully.', extra={'component': 'shortcode', 'shortcode': trimmed})
    return trimmed


def is_shortcode_unique(shortcode: str, existing: Collection[str]) -> bool:
    """Return True if `shortcode` is not among the `existing` shortcodes.

    `existing` must hold both persisted shortcodes and the ones already picked
    earlier in the current batch.
    """
    return shortcode not in existing


def allocate_shortcode(
    existing: Collection[str],
    length: int = Defaults.SHORTCODE_LENGTH,
    max_attempts: int = Defaults.SHORTCODE_MAX_ATTEMPTS,
) -> str:
    """Generate a shortcode that does not collide with `existing`.

    Args:
        existing (Collection[str]):
            Persisted shortcodes plus shortcodes already assigned in this batch.
        length (int, optional):
            Length of generated shortcodes. Defaults to 6.
        max_attempts (int, optional):
            Upper bound on generation attempts. Defaults to 1000.

    Returns:
        str: a shortcode absent from `existing`

    Raises:
        AllocationExhaustedError: if every attempt collided
    """
    if max_attempts < 1:
        raise ValueError(f'max_attempts must be a positive integer (given value: {max_attempts}).')

    for attempt in range(1, max_attempts + 1):
        shortcode = generate_shortcode(length)
        if is_shortcode_unique(shortcode, existing):
            logger.debug(
                'Allocated shortcode.',
                extra={'component': 'shortcode', 'shortcode': shortcode, 'attempts': attempt},
            )
            return shortcode

    logger.error(
        'Shortcode allocation exhausted.',
        extra={'component': 'shortcode', 'attempts': max_attempts, 'length': length},
    )
    raise AllocationExhaustedError(f'Could not allocate a unique {length}-character shortcode in {max_attempts} attempts.')
