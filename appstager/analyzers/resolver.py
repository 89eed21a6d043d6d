"""Resolve Go import paths to on-disk packages under a build context."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from ..errors import ImportResolutionError
from ..logging import get_logger
from ..models import BuildContext, ResolvedPackage
from ..stores.source_cache import SourceCache
from .constraints import good_os_arch_file, should_build
from .gosource import GoFileHeader, GoSourceError, parse_header


@dataclass
class _PackageFiles:
    name: str = ""
    name_file: str = ""
    go_files: List[str] = field(default_factory=list)
    imports: List[str] = field(default_factory=list)


def is_local_import(import_path: str) -> bool:
    return import_path in (".", "..") or import_path.startswith(("./", "../"))


def _has_subdir(root: str, directory: str) -> Optional[str]:
    """Return ``directory`` relative to ``root`` as a slash path, or None."""
    try:
        rel = os.path.relpath(directory, root)
    except ValueError:
        return None
    if rel == os.curdir:
        return ""
    if rel == os.pardir or rel.startswith(os.pardir + os.sep) or os.path.isabs(rel):
        return None
    return Path(rel).as_posix()


class PackageResolver:
    """Locates and loads Go packages the way ``go/build`` does for GOPATH mode."""

    def __init__(self, context: BuildContext, cache: SourceCache | None = None) -> None:
        self.context = context
        self.cache = cache if cache is not None else SourceCache()
        self.logger = get_logger("resolver")

    @property
    def src_roots(self) -> List[str]:
        return [os.path.join(os.path.abspath(root), "src") for root in self.context.gopath]

    def import_dir(self, directory: str) -> ResolvedPackage:
        """Load the package rooted at ``directory`` itself."""
        directory = os.path.abspath(directory)
        if not os.path.isdir(directory):
            raise ImportResolutionError(f"cannot find package in directory {directory}")
        import_path, src_root = self._canonical_import_path(directory)
        return self._load(import_path or ".", src_root, directory)

    def resolve(self, import_path: str, origin_dir: str) -> ResolvedPackage:
        """Resolve ``import_path`` as imported from source files in ``origin_dir``."""
        if is_local_import(import_path):
            directory = os.path.normpath(os.path.join(origin_dir, import_path))
            if not os.path.isdir(directory):
                raise ImportResolutionError(
                    f"cannot find package {import_path!r} in {directory}"
                )
            canonical, src_root = self._canonical_import_path(directory)
            return self._load(canonical or import_path, src_root, directory)

        if import_path.startswith("/"):
            raise ImportResolutionError(f"import path cannot be absolute path: {import_path!r}")

        vendored = self._search_vendor(import_path, origin_dir)
        if vendored is not None:
            vendored_path, src_root, directory = vendored
            return self._load(vendored_path, src_root, directory)

        tried: List[str] = []
        for src_root in self.src_roots:
            directory = os.path.join(src_root, *import_path.split("/"))
            if os.path.isdir(directory):
                return self._load(import_path, src_root, directory)
            tried.append(directory)

        searched = ", ".join(tried) if tried else "($GOPATH not set)"
        raise ImportResolutionError(
            f"cannot find package {import_path!r} imported from {origin_dir} in any of: "
            f"{searched} (GOPATH: {os.pathsep.join(self.context.gopath)})"
        )

    def _canonical_import_path(self, directory: str) -> Tuple[str, str]:
        for src_root in self.src_roots:
            rel = _has_subdir(src_root, directory)
            if rel:
                return rel, src_root
        return "", ""

    def _search_vendor(
        self, import_path: str, origin_dir: str
    ) -> Optional[Tuple[str, str, str]]:
        """Look for ``vendor/<import_path>`` from ``origin_dir`` up to ``<root>/src/vendor``.

        Only origins strictly inside a search root's ``src`` are considered.
        """
        for src_root in self.src_roots:
            sub = _has_subdir(src_root, origin_dir)
            if not sub:
                continue
            parts = sub.split("/")
            while True:
                candidate = os.path.join(src_root, *parts, "vendor", *import_path.split("/"))
                if os.path.isdir(candidate) and _has_go_files(candidate):
                    vendored = "/".join([*parts, "vendor", import_path])
                    return vendored, src_root, candidate
                if not parts:
                    break
                parts.pop()
        return None

    def _load(self, import_path: str, src_root: str, directory: str) -> ResolvedPackage:
        files = self._scan(import_path, directory)
        self.logger.debug("resolved %s -> %s", import_path, directory)
        return ResolvedPackage(
            import_path=import_path,
            src_root=src_root,
            directory=directory,
            name=files.name,
            imports=sorted(set(files.imports)),
            go_files=files.go_files,
        )

    def _scan(self, import_path: str, directory: str) -> _PackageFiles:
        try:
            with os.scandir(directory) as iterator:
                entries = sorted(iterator, key=lambda entry: entry.name)
        except OSError as exc:
            raise ImportResolutionError(f"unable to read dir {directory!r}: {exc}") from exc

        files = _PackageFiles()
        for entry in entries:
            name = entry.name
            if not name.endswith(".go") or name.startswith(("_", ".")):
                continue
            if name.endswith("_test.go") or not entry.is_file():
                continue
            if not good_os_arch_file(name, self.context):
                continue
            header = self._header(entry.path)
            try:
                if not should_build(header, self.context):
                    continue
            except GoSourceError as exc:
                raise ImportResolutionError(f"{entry.path}: {exc}") from exc
            if header.uses_cgo and not self.context.cgo_enabled:
                continue
            if header.package == "documentation":
                continue
            if not files.name:
                files.name = header.package
                files.name_file = name
            elif header.package != files.name:
                raise ImportResolutionError(
                    f"found packages {files.name} ({files.name_file}) and "
                    f"{header.package} ({name}) in {directory}"
                )
            files.go_files.append(name)
            files.imports.extend(header.imports)

        if not files.go_files:
            raise ImportResolutionError(
                f"no buildable Go source files in {directory} (package {import_path!r}, "
                f"context {self.context.fingerprint})"
            )
        return files

    def _header(self, path: str) -> GoFileHeader:
        try:
            stat_result = os.stat(path)
        except OSError as exc:
            raise ImportResolutionError(f"unable to stat {path}: {exc}") from exc
        cached = self.cache.get(path, stat_result)
        if cached is not None:
            return cached
        try:
            with open(path, "r", encoding="utf-8", errors="replace") as handle:
                text = handle.read()
        except OSError as exc:
            raise ImportResolutionError(f"unable to read {path}: {exc}") from exc
        try:
            header = parse_header(text)
        except GoSourceError as exc:
            raise ImportResolutionError(f"{path}: {exc}") from exc
        self.cache.store(path, stat_result, header)
        return header


def _has_go_files(directory: str) -> bool:
    try:
        with os.scandir(directory) as entries:
            return any(
                entry.name.endswith(".go") and entry.is_file() for entry in entries
            )
    except OSError:
        return False


__all__ = ["PackageResolver", "is_local_import"]
