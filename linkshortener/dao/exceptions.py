"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ShortLinkNotFoundError:
        Raised when a ShortLinkModel is not found in the data store.

    ShortLinkAlreadyExistsError:
        Raised when attempting to insert a ShortLinkModel whose shortcode is taken.

    DataStoreError:
        Raised when the data store fails to read or persist data
        (e.g., connection issues, timeouts, OOM, etc.).

    AllocationExhaustedError:
        Raised when no unique shortcode could be allocated within the retry bound.

Example:
    >>> from linkshortener.dao.exceptions import ShortLinkNotFoundError
    >>> raise ShortLinkNotFoundError("Short link with code 'zzzzzz' not found.")
    Traceback (most recent call last):
        ...
    linkshortener.dao.exceptions.ShortLinkNotFoundError: Short link with code 'zzzzzz' not found.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    error_code = 'store:dao_error'


class ShortLinkNotFoundError(DAOError):
    """Exception raised when a ShortLinkModel is not found in the data store."""

    error_code = 'store:not_found'


class ShortLinkAlreadyExistsError(DAOError):
    """Exception raised when attempting to insert a ShortLinkModel that already exists in the data store."""

    error_code = 'store:already_exists'


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    Nothing is considered written when a write raises this error.
    """

    error_code = 'store:persistence_failure'


class AllocationExhaustedError(DAOError):
    """Exception raised when every shortcode generation attempt collided."""

    error_code = 'store:allocation_exhausted'
