"""Go import graph analysis: source parsing, package resolution and traversal."""

from __future__ import annotations

from .dependencies import DependencyAnalyzer
from .gosource import GoFileHeader, GoSourceError, parse_header
from .resolver import PackageResolver

__all__ = [
    "DependencyAnalyzer",
    "GoFileHeader",
    "GoSourceError",
    "PackageResolver",
    "parse_header",
]
