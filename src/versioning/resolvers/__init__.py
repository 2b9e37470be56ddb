"""Version range resolvers."""

from .npm import NpmRangeResolver

__all__ = [
    "NpmRangeResolver",
]
