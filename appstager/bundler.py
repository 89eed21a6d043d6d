"""Vendor resolved dependencies into the staged output tree."""

from __future__ import annotations

import posixpath
from typing import Iterable, Optional

from .copier import CopyStats, copy_tree
from .errors import BundleCopyError, TreeCopyError
from .logging import get_logger
from .models import ResolvedPackage


class Bundler:
    """Copies externally resolved packages under ``<output>/<vendor_dir>``."""

    def __init__(self) -> None:
        self.logger = get_logger("bundler")

    def bundle(
        self,
        packages: Iterable[ResolvedPackage],
        app_root: str,
        output_root: str,
        vendor_dir: Optional[str],
    ) -> CopyStats:
        """Vendor ``packages``; a ``vendor_dir`` of None means nothing is vendored."""
        stats = CopyStats()
        if vendor_dir is None:
            self.logger.debug("no vendor directory for this platform; nothing to bundle")
            return stats

        for pkg in packages:
            if not pkg.src_root:
                # Lives inside the app tree and arrives with the full-root copy.
                self.logger.debug(
                    "not vendoring %s from %s: outside every search root", pkg.import_path, app_root
                )
                continue
            dst_dir = posixpath.join(vendor_dir, pkg.import_path)
            src_dir = pkg.canonical_dir
            try:
                stats.add(copy_tree(output_root, dst_dir, src_dir, True))
            except TreeCopyError as exc:
                raise BundleCopyError(
                    f"unable to copy directory {src_dir} to {dst_dir}: {exc}"
                ) from exc
        return stats


__all__ = ["Bundler"]
