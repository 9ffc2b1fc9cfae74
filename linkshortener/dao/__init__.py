"""Data access objects for short links.

Subpackages:
    base:   ShortLinkBaseDAO interface
    redis:  Redis-backed implementation
    memory: in-process implementation
"""
