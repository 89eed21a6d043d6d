"""Tests for import path resolution."""

from __future__ import annotations

import pytest

from appstager.analyzers.resolver import PackageResolver
from appstager.build_context import build_context
from appstager.errors import ImportResolutionError
from appstager.models import PlatformMode
from appstager.stores import SourceCache
from tests._fixtures.go_workspace import GoWorkspace, go_source


def _resolver(workspace: GoWorkspace, *, mode: PlatformMode = PlatformMode.STANDARD, minor: int = 8) -> PackageResolver:
    return PackageResolver(build_context(mode, minor, workspace.settings()))


def test_resolve_from_gopath(workspace: GoWorkspace) -> None:
    directory = workspace.package("example.com/lib", ["fmt", "example.com/util"])
    workspace.write(
        directory,
        {"extra.go": go_source("lib", ["example.com/util", "os"])},
    )

    pkg = _resolver(workspace).resolve("example.com/lib", str(workspace.app))

    assert pkg.import_path == "example.com/lib"
    assert pkg.src_root == str(workspace.src)
    assert pkg.directory == str(directory)
    assert pkg.canonical_dir == str(directory)
    assert pkg.name == "lib"
    assert pkg.is_command is False
    assert pkg.go_files == ["extra.go", "lib.go"]
    assert pkg.imports == ["example.com/util", "fmt", "os"]


def test_search_roots_are_tried_in_order(workspace: GoWorkspace, tmp_path) -> None:
    second = tmp_path / "second"
    (second / "src" / "example.com" / "only").mkdir(parents=True)
    (second / "src" / "example.com" / "only" / "only.go").write_text(
        go_source("only"), encoding="utf-8"
    )
    (second / "src" / "example.com" / "both").mkdir(parents=True)
    (second / "src" / "example.com" / "both" / "both.go").write_text(
        go_source("shadowed"), encoding="utf-8"
    )
    workspace.package("example.com/both")

    settings = workspace.settings()
    settings.gopath = (str(workspace.gopath), str(second))
    resolver = PackageResolver(build_context(PlatformMode.STANDARD, 8, settings))

    assert resolver.resolve("example.com/both", str(workspace.app)).name == "both"
    only = resolver.resolve("example.com/only", str(workspace.app))
    assert only.src_root == str(second / "src")


def test_vendor_directory_shadows_gopath(workspace: GoWorkspace) -> None:
    app_dir = workspace.package("example.com/app", ["lib"], name="main")
    workspace.write(app_dir, {"vendor/lib/lib.go": go_source("lib")})
    workspace.package("lib")
    resolver = _resolver(workspace)

    from_app = resolver.resolve("lib", str(app_dir))
    from_elsewhere = resolver.resolve("lib", str(workspace.app))

    assert from_app.import_path == "example.com/app/vendor/lib"
    assert from_app.directory == str(app_dir / "vendor" / "lib")
    assert from_elsewhere.import_path == "lib"
    assert from_elsewhere.directory == str(workspace.src / "lib")


def test_vendor_directory_is_found_from_nested_packages(workspace: GoWorkspace) -> None:
    app_dir = workspace.package("example.com/app", name="main")
    workspace.write(app_dir, {"vendor/lib/lib.go": go_source("lib")})
    nested = workspace.package("example.com/app/handlers/api", ["lib"])

    pkg = _resolver(workspace).resolve("lib", str(nested))

    assert pkg.import_path == "example.com/app/vendor/lib"


def test_top_level_vendor_directory_serves_every_gopath_package(workspace: GoWorkspace) -> None:
    workspace.write(workspace.src, {"vendor/shared/shared.go": go_source("shared")})
    lib = workspace.package("example.com/lib", ["shared"])
    resolver = _resolver(workspace)

    pkg = resolver.resolve("shared", str(lib))

    assert pkg.import_path == "vendor/shared"
    assert pkg.directory == str(workspace.src / "vendor" / "shared")
    assert pkg.canonical_dir == pkg.directory


def test_top_level_vendor_directory_is_ignored_outside_gopath(workspace: GoWorkspace) -> None:
    workspace.write(workspace.src, {"vendor/shared/shared.go": go_source("shared")})

    with pytest.raises(ImportResolutionError):
        _resolver(workspace).resolve("shared", str(workspace.app))


def test_relative_import_outside_gopath(workspace: GoWorkspace) -> None:
    workspace.write_app({"models/models.go": go_source("models")})

    pkg = _resolver(workspace).resolve("./models", str(workspace.app))

    assert pkg.import_path == "./models"
    assert pkg.src_root == ""
    assert pkg.canonical_dir == str(workspace.app / "models")


def test_import_dir_outside_gopath_has_dot_import_path(workspace: GoWorkspace) -> None:
    workspace.app_main(["fmt"])

    pkg = _resolver(workspace).import_dir(str(workspace.app))

    assert pkg.import_path == "."
    assert pkg.is_command is True
    assert pkg.imports == ["fmt"]


def test_import_dir_inside_gopath_uses_canonical_path(workspace: GoWorkspace) -> None:
    directory = workspace.package("example.com/app", name="main")

    pkg = _resolver(workspace).import_dir(str(directory))

    assert pkg.import_path == "example.com/app"
    assert pkg.src_root == str(workspace.src)


def test_missing_package_reports_searched_directories(workspace: GoWorkspace) -> None:
    with pytest.raises(ImportResolutionError) as excinfo:
        _resolver(workspace).resolve("example.com/missing", str(workspace.app))

    message = str(excinfo.value)
    assert "example.com/missing" in message
    assert str(workspace.src / "example.com" / "missing") in message
    assert "\n" not in message


def test_absolute_import_path_is_rejected(workspace: GoWorkspace) -> None:
    with pytest.raises(ImportResolutionError):
        _resolver(workspace).resolve("/etc/lib", str(workspace.app))


def test_directory_without_buildable_files_is_an_error(workspace: GoWorkspace) -> None:
    workspace.write(
        workspace.src,
        {
            "example.com/tests/lib_test.go": go_source("lib"),
            "example.com/tests/_ignored.go": go_source("lib"),
            "example.com/tests/README.md": "# docs\n",
        },
    )

    with pytest.raises(ImportResolutionError) as excinfo:
        _resolver(workspace).resolve("example.com/tests", str(workspace.app))

    assert "no buildable Go source files" in str(excinfo.value)


def test_mixed_package_names_are_an_error(workspace: GoWorkspace) -> None:
    workspace.write(
        workspace.src,
        {
            "example.com/mixed/a.go": go_source("alpha"),
            "example.com/mixed/b.go": go_source("beta"),
        },
    )

    with pytest.raises(ImportResolutionError) as excinfo:
        _resolver(workspace).resolve("example.com/mixed", str(workspace.app))

    assert "alpha" in str(excinfo.value)
    assert "beta" in str(excinfo.value)


def test_excluded_files_do_not_contribute_imports(workspace: GoWorkspace) -> None:
    workspace.write(
        workspace.src,
        {
            "example.com/lib/lib.go": go_source("lib", ["example.com/common"]),
            "example.com/lib/lib_windows.go": go_source("lib", ["example.com/win"]),
            "example.com/lib/cgo.go": go_source("lib", ["C", "example.com/cgo"]),
            "example.com/lib/tool.go": go_source("main", ["example.com/tool"], "// +build ignore"),
            "example.com/lib/vm.go": go_source("lib", ["example.com/vm"], "// +build appenginevm"),
            "example.com/lib/doc.go": go_source("documentation"),
        },
    )

    pkg = _resolver(workspace).resolve("example.com/lib", str(workspace.app))

    assert pkg.go_files == ["lib.go"]
    assert pkg.imports == ["example.com/common"]


def test_build_tags_follow_platform_mode(workspace: GoWorkspace) -> None:
    workspace.write(
        workspace.src,
        {
            "example.com/lib/lib.go": go_source("lib"),
            "example.com/lib/vm.go": go_source("lib", ["example.com/vm"], "//go:build appenginevm"),
        },
    )

    pkg = _resolver(workspace, mode=PlatformMode.FLEXIBLE).resolve(
        "example.com/lib", str(workspace.app)
    )

    assert pkg.imports == ["example.com/vm"]


def test_invalid_constraint_is_a_resolution_error(workspace: GoWorkspace) -> None:
    workspace.write(
        workspace.src,
        {"example.com/lib/lib.go": go_source("lib", constraint="//go:build linux &&")},
    )

    with pytest.raises(ImportResolutionError) as excinfo:
        _resolver(workspace).resolve("example.com/lib", str(workspace.app))

    assert "lib.go" in str(excinfo.value)


def test_parsed_headers_are_shared_through_cache(workspace: GoWorkspace) -> None:
    workspace.package("example.com/lib", ["fmt"])
    cache = SourceCache()
    settings = workspace.settings()

    first = PackageResolver(build_context(PlatformMode.STANDARD, 6, settings), cache)
    second = PackageResolver(build_context(PlatformMode.STANDARD, 7, settings), cache)
    first.resolve("example.com/lib", str(workspace.app))
    pkg = second.resolve("example.com/lib", str(workspace.app))

    assert pkg.imports == ["fmt"]
    assert cache.hits == 1
    assert len(cache) == 1
