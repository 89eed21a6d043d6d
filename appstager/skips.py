"""Import namespaces and file names that never make it into a staged app."""

from __future__ import annotations

from typing import AbstractSet, FrozenSet

from .models import PlatformMode

# Top-level namespaces provided by the runtime, used instead of depending on a GOROOT.
SKIPPED_PACKAGES: FrozenSet[str] = frozenset(
    {
        "appengine",
        "appengine_internal",
        "C",
        "unsafe",
        "archive",
        "bufio",
        "builtin",
        "bytes",
        "compress",
        "container",
        "context",
        "crypto",
        "database",
        "debug",
        "encoding",
        "errors",
        "expvar",
        "flag",
        "fmt",
        "go",
        "hash",
        "html",
        "image",
        "index",
        "io",
        "log",
        "math",
        "mime",
        "net",
        "os",
        "path",
        "reflect",
        "regexp",
        "runtime",
        "sort",
        "strconv",
        "strings",
        "sync",
        "syscall",
        "testing",
        "text",
        "time",
        "unicode",
    }
)

SKIPPED_FILES: FrozenSet[str] = frozenset(
    {
        ".git",
        ".gitconfig",
        ".hg",
        ".travis.yml",
    }
)

# The classic "appengine" package does not exist on Flexible; it has to be vendored.
_FLEXIBLE_UNSKIPPED = frozenset({"appengine"})


def effective_skip_set(mode: PlatformMode) -> FrozenSet[str]:
    """Return the runtime-provided namespaces for ``mode``."""
    if mode is PlatformMode.FLEXIBLE:
        return SKIPPED_PACKAGES - _FLEXIBLE_UNSKIPPED
    return SKIPPED_PACKAGES


def first_segment(import_path: str) -> str:
    return import_path.split("/", 1)[0]


def is_skipped(import_path: str, skip_set: AbstractSet[str]) -> bool:
    """True when the first path segment of ``import_path`` is runtime-provided."""
    return first_segment(import_path) in skip_set


__all__ = [
    "SKIPPED_FILES",
    "SKIPPED_PACKAGES",
    "effective_skip_set",
    "first_segment",
    "is_skipped",
]
