"""Tests for appstager.build_context."""

from __future__ import annotations

from appstager.build_context import build_context, platform_tags, release_tags
from appstager.config import StagerSettings
from appstager.models import PlatformMode


def test_release_tags_are_cumulative() -> None:
    assert release_tags(1) == ("go1.1",)
    assert release_tags(3) == ("go1.1", "go1.2", "go1.3")


def test_platform_tags_differ_by_mode() -> None:
    assert platform_tags(PlatformMode.STANDARD) == ("appengine",)
    assert platform_tags(PlatformMode.FLEXIBLE) == ("appenginevm",)


def test_build_context_targets_linux_amd64() -> None:
    settings = StagerSettings(gopath=("/go", "/opt/go"))

    context = build_context(PlatformMode.STANDARD, 8, settings)

    assert (context.goos, context.goarch, context.compiler) == ("linux", "amd64", "gc")
    assert context.cgo_enabled is False
    assert context.gopath == ("/go", "/opt/go")
    assert context.conditional_tags[0] == "appengine"
    assert context.conditional_tags[-1] == "go1.8"


def test_higher_levels_are_supersets() -> None:
    settings = StagerSettings()
    lower = build_context(PlatformMode.FLEXIBLE, 6, settings)
    higher = build_context(PlatformMode.FLEXIBLE, 7, settings)

    assert set(lower.conditional_tags) < set(higher.conditional_tags)
    assert lower.build_tags == higher.build_tags == ("appenginevm",)


def test_build_context_is_pure() -> None:
    settings = StagerSettings(gopath=("/go",))

    assert build_context(PlatformMode.STANDARD, 7, settings) == build_context(
        PlatformMode.STANDARD, 7, settings
    )
