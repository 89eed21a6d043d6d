"""Breadth-first import graph analysis rooted at the application directory."""

from __future__ import annotations

import os
from collections import deque
from typing import AbstractSet, Deque, List, Set

from ..errors import EntryPointRequiredError
from ..logging import get_logger
from ..models import ImportEdge, ResolvedPackage
from ..skips import SKIPPED_PACKAGES, is_skipped
from .resolver import PackageResolver


class DependencyAnalyzer:
    """Collects every package the application transitively imports.

    Traversal is keyed by :class:`ImportEdge` (import path plus the directory
    it is imported from), because the same import path may denote different
    packages depending on where it is imported from (``vendor/`` shadowing).
    The output is de-duplicated separately, by the package's canonical
    directory, and keeps discovery order.
    """

    def __init__(
        self,
        resolver: PackageResolver,
        skip_set: AbstractSet[str] = SKIPPED_PACKAGES,
    ) -> None:
        self.resolver = resolver
        self.skip_set = frozenset(skip_set)
        self.logger = get_logger("analyzer")

    def analyze(self, root: str, *, enforce_entry_point: bool = False) -> List[ResolvedPackage]:
        root_dir = os.path.abspath(root)
        root_pkg = self.resolver.import_dir(root_dir)
        if enforce_entry_point and not root_pkg.is_command:
            raise EntryPointRequiredError(
                f'the root of your app needs to be package "main" (currently {root_pkg.name!r}) '
                f"in {root_dir}"
            )

        queue: Deque[ImportEdge] = deque(
            ImportEdge(import_path=path, origin_dir=root_dir) for path in root_pkg.imports
        )
        visited: Set[ImportEdge] = set()
        recorded: Set[str] = set()
        packages: List[ResolvedPackage] = []

        while queue:
            edge = queue.popleft()
            if edge in visited:
                continue
            visited.add(edge)
            if is_skipped(edge.import_path, self.skip_set):
                continue

            pkg = self.resolver.resolve(edge.import_path, edge.origin_dir)
            if pkg.canonical_dir not in recorded:
                recorded.add(pkg.canonical_dir)
                packages.append(pkg)

            queue.extend(
                ImportEdge(import_path=path, origin_dir=pkg.directory) for path in pkg.imports
            )

        self.logger.debug(
            "analyzed %s: %d edges visited, %d packages discovered",
            root_dir,
            len(visited),
            len(packages),
        )
        return packages


__all__ = ["DependencyAnalyzer"]
