"""Small helpers shared across the package.

Functions:
    new_link_id(created_at: datetime) -> str
        Mint an opaque identifier for a new short link
    get_short_url(shortcode: str, base_url: str) -> str
        Get string representation of short URL for a given shortcode

Example:
    >>> get_short_url('abc123', 'https://sho.rt/')
    'https://sho.rt/abc123'
"""

import secrets
import string
from datetime import datetime


ID_ALPHABET = string.digits + string.ascii_lowercase  # base36
ID_SUFFIX_LENGTH = 9


def new_link_id(created_at: datetime) -> str:
    """Mint an opaque identifier for a new short link

    The identifier is `<creation epoch millis>-<9 random base36 characters>`.
    It is unique with overwhelming probability and never parsed back.

    Args:
        created_at (datetime): creation time of the link

    Returns:
        str: link identifier, e.g. '1760788800000-k3j9x0q2m'
    """
    millis = int(created_at.timestamp() * 1000)
    suffix = ''.join(secrets.choice(ID_ALPHABET) for _ in range(ID_SUFFIX_LENGTH))
    return f'{millis}-{suffix}'


def get_short_url(shortcode: str, base_url: str) -> str:
    """Get string representation of shortened URL

    Args:
        shortcode (str): shortcode
        base_url (str): public base URL of the redirect service

    Returns:
        str: short url string representation
    """
    return f'{base_url.rstrip("/")}/{shortcode}'
