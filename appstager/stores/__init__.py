"""Caches shared across analysis passes."""

from .source_cache import SourceCache

__all__ = ["SourceCache"]
