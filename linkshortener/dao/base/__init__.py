from linkshortener.dao.base.short_link_base_dao import ShortLinkBaseDAO, LoadResult


__all__ = [
    'ShortLinkBaseDAO',
    'LoadResult',
]
