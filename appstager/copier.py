"""Directory tree copying with basename exclusions and symlink flattening."""

from __future__ import annotations

import os
import shutil
from contextlib import suppress
from dataclasses import dataclass
from typing import AbstractSet, Optional

from .errors import (
    CloseHandleError,
    CopyBytesError,
    CreateDestinationError,
    CreateDirectoryError,
    ListDirectoryError,
    OpenSourceError,
    TreeCopyError,
)
from .logging import get_logger
from .skips import SKIPPED_FILES

logger = get_logger("copier")


@dataclass
class CopyStats:
    """Counters collected while copying a directory tree."""

    files_copied: int = 0
    bytes_copied: int = 0

    def add(self, other: "CopyStats") -> None:
        self.files_copied += other.files_copied
        self.bytes_copied += other.bytes_copied


def copy_tree(
    dst_root: str,
    dst_dir: str,
    src_dir: str,
    recursive: bool,
    *,
    skip_files: AbstractSet[str] = SKIPPED_FILES,
    exclude_dir: Optional[str] = None,
) -> CopyStats:
    """Copy ``src_dir`` to ``dst_dir`` relative to ``dst_root``.

    Entries whose basename is in ``skip_files`` are skipped at every depth.
    Symbolic links are followed, so linked directories and files are staged
    as real ones. Subdirectories are only descended into when ``recursive``.
    ``exclude_dir`` names a directory that is never copied, which keeps an
    output directory nested inside the source tree from copying itself.
    """
    target = os.path.join(dst_root, dst_dir)
    try:
        os.makedirs(target, mode=0o755, exist_ok=True)
    except OSError as exc:
        raise CreateDirectoryError(f"unable to create directory {target!r}: {exc}") from exc

    try:
        with os.scandir(src_dir) as iterator:
            entries = sorted(iterator, key=lambda entry: entry.name)
    except OSError as exc:
        raise ListDirectoryError(f"unable to read dir {src_dir!r}: {exc}") from exc

    stats = CopyStats()
    for entry in entries:
        name = entry.name
        source = os.path.join(src_dir, name)
        if name in skip_files:
            logger.info("skipping %s", source)
            continue
        try:
            # Links are classified by their target; a dangling link is an error.
            if entry.is_symlink():
                os.stat(source)
            is_dir = entry.is_dir()
        except OSError as exc:
            raise ListDirectoryError(f"unable to stat {source}: {exc}") from exc

        relative = os.path.join(dst_dir, name)
        if is_dir:
            if not recursive:
                continue
            if exclude_dir is not None and os.path.realpath(source) == exclude_dir:
                logger.debug("not copying output directory %s into itself", source)
                continue
            try:
                stats.add(
                    copy_tree(
                        dst_root,
                        relative,
                        source,
                        recursive,
                        skip_files=skip_files,
                        exclude_dir=exclude_dir,
                    )
                )
            except TreeCopyError as exc:
                raise type(exc)(f"unable to copy dir {source!r} to {relative!r}: {exc}") from exc
            continue

        try:
            copied = copy_file(dst_root, relative, source)
        except TreeCopyError as exc:
            raise type(exc)(f"unable to copy {source!r} to {relative!r}: {exc}") from exc
        stats.files_copied += 1
        stats.bytes_copied += copied
        logger.info("copied %s to %s", source, os.path.join(dst_root, relative))
    return stats


def copy_file(dst_root: str, dst: str, src: str) -> int:
    """Copy ``src`` to ``dst`` relative to ``dst_root`` and return the byte count.

    Both handles are released on every path out of this function.
    """
    try:
        source = open(src, "rb")
    except OSError as exc:
        raise OpenSourceError(f"unable to open {src!r}: {exc}") from exc

    with source:
        destination_path = os.path.join(dst_root, dst)
        try:
            destination = open(destination_path, "wb")
        except OSError as exc:
            raise CreateDestinationError(
                f"unable to create {destination_path!r}: {exc}"
            ) from exc

        try:
            shutil.copyfileobj(source, destination)
            copied = destination.tell()
        except OSError as exc:
            # The copy already failed; a close error would only hide it.
            with suppress(OSError):
                destination.close()
            raise CopyBytesError(
                f"unable to copy {src!r} to {destination_path!r}: {exc}"
            ) from exc

        try:
            destination.close()
        except OSError as exc:
            raise CloseHandleError(f"unable to close {destination_path!r}: {exc}") from exc
    return copied


__all__ = ["CopyStats", "copy_file", "copy_tree"]
