"""Pipeline orchestration for a staging run."""

from __future__ import annotations

import os
from pathlib import Path

from .analyzers import DependencyAnalyzer, PackageResolver
from .build_context import build_context
from .bundler import Bundler
from .config import StagerSettings, load_manifest
from .copier import copy_tree
from .errors import StagingError, TreeCopyError
from .logging import get_logger
from .models import PassResult, PlatformMode, StageReport
from .skips import effective_skip_set
from .stores import SourceCache


class Orchestrator:
    """Stages an app: one analysis and bundle pass per Go minor version, then a full copy.

    Passes are independent. Conditional compilation can change the import
    graph between minor versions, so each pass builds its own context and
    re-walks the graph; nothing but the parsed-header cache is shared. A later
    pass may overwrite files vendored by an earlier one.
    """

    def __init__(
        self,
        settings: StagerSettings | None = None,
        bundler: Bundler | None = None,
        cache: SourceCache | None = None,
    ) -> None:
        self.settings = settings or StagerSettings.from_env()
        self.bundler = bundler or Bundler()
        self.cache = cache if cache is not None else SourceCache()
        self.logger = get_logger("orchestrator")

    def run(self, manifest_path: str | Path, output_dir: str | Path) -> StageReport:
        manifest = Path(manifest_path).expanduser()
        src = os.path.abspath(manifest.parent)
        dst = os.path.abspath(Path(output_dir).expanduser())

        descriptor = load_manifest(manifest)
        mode = descriptor.mode
        flexible = mode is PlatformMode.FLEXIBLE
        vendor_dir = self.settings.vendor_dir if flexible else None
        skip_set = effective_skip_set(mode)
        self.logger.info("Staging %s (%s) into %s", src, mode.value, dst)

        report = StageReport(manifest_path=Path(dst) / manifest.name, mode=mode)
        for minor_version in self.settings.minor_versions:
            context = build_context(mode, minor_version, self.settings)
            self.logger.debug("Pass go1.%d: %s", minor_version, context.fingerprint)
            analyzer = DependencyAnalyzer(PackageResolver(context, self.cache), skip_set)
            try:
                packages = analyzer.analyze(src, enforce_entry_point=flexible)
            except StagingError as exc:
                raise type(exc)(f"failed analyzing {src}: {exc}") from exc
            stats = self.bundler.bundle(packages, src, dst, vendor_dir)
            self.logger.debug(
                "Pass go1.%d: %d packages, %d files vendored",
                minor_version,
                len(packages),
                stats.files_copied,
            )
            report.passes.append(
                PassResult(minor_version=minor_version, context=context, packages=packages)
            )

        try:
            stats = copy_tree(dst, "", src, True, exclude_dir=os.path.realpath(dst))
        except TreeCopyError as exc:
            raise type(exc)(f"unable to copy root directory {src} to {dst}: {exc}") from exc
        self.logger.info(
            "Staged %d files (%d bytes) from %s", stats.files_copied, stats.bytes_copied, src
        )
        return report


__all__ = ["Orchestrator"]
