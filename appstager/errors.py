"""Exception hierarchy for staging runs.

Every error raised here is fatal for the run: the CLI prints the message as a
single diagnostic line and exits non-zero. Messages always name the path(s)
involved so the operator can act on them without a traceback.
"""

from __future__ import annotations


class StagingError(RuntimeError):
    """Base class for all failures surfaced by appstager."""


class ManifestReadError(StagingError):
    """Raised when the service manifest cannot be read from disk."""


class ManifestParseError(StagingError):
    """Raised when the service manifest is not valid YAML or has bad field types."""


class EntryPointRequiredError(StagingError):
    """Raised when the app root must be an executable package but is not."""


class ImportResolutionError(StagingError):
    """Raised when an import path cannot be resolved to a buildable package."""


class BundleCopyError(StagingError):
    """Raised when a dependency cannot be vendored into the output tree."""


class TreeCopyError(StagingError):
    """Raised when a directory tree cannot be copied."""


class CreateDirectoryError(TreeCopyError):
    pass


class ListDirectoryError(TreeCopyError):
    pass


class OpenSourceError(TreeCopyError):
    pass


class CreateDestinationError(TreeCopyError):
    pass


class CopyBytesError(TreeCopyError):
    pass


class CloseHandleError(TreeCopyError):
    pass


__all__ = [
    "BundleCopyError",
    "CloseHandleError",
    "CopyBytesError",
    "CreateDestinationError",
    "CreateDirectoryError",
    "EntryPointRequiredError",
    "ImportResolutionError",
    "ListDirectoryError",
    "ManifestParseError",
    "ManifestReadError",
    "OpenSourceError",
    "StagingError",
    "TreeCopyError",
]
