import functools
from collections.abc import Callable


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing short links.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "linkshortener:prod" or "linkshortener:dev".

    Key layout:
        links:index                  list of shortcodes in insertion order
        links:code:<shortcode>       hash holding the link's fields
        links:code:<shortcode>:clicks list of JSON-encoded click records

    Shortcodes are alphanumeric, so 'links:index' can never collide with a link key.
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def index_key(self) -> str:
        return 'links:index'

    @prefix_key
    def link_key(self, shortcode: str) -> str:
        return f'links:code:{shortcode}'

    @prefix_key
    def link_clicks_key(self, shortcode: str) -> str:
        return f'links:code:{shortcode}:clicks'

    @prefix_key
    def links_pattern(self) -> str:
        return 'links:*'
