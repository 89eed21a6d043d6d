"""Resolution contexts, one per Go minor version."""

from __future__ import annotations

from typing import Tuple

from .config import StagerSettings
from .models import BuildContext, PlatformMode


def platform_tags(mode: PlatformMode) -> Tuple[str, ...]:
    if mode is PlatformMode.FLEXIBLE:
        return ("appenginevm",)
    return ("appengine",)


def release_tags(minor_version: int) -> Tuple[str, ...]:
    """Return ``go1.1`` through ``go1.<minor_version>`` in increasing order."""
    return tuple(f"go1.{i}" for i in range(1, minor_version + 1))


def build_context(
    mode: PlatformMode, minor_version: int, settings: StagerSettings | None = None
) -> BuildContext:
    """Return the context used to resolve imports for ``go1.<minor_version>``."""
    settings = settings or StagerSettings()
    return BuildContext(
        goos=settings.goos,
        goarch=settings.goarch,
        compiler=settings.compiler,
        build_tags=platform_tags(mode),
        release_tags=release_tags(minor_version),
        gopath=tuple(settings.gopath),
    )


__all__ = ["build_context", "platform_tags", "release_tags"]
