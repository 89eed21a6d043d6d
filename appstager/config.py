"""Configuration loading: the service manifest (app.yaml) and stager settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple

import yaml

from .errors import ManifestParseError, ManifestReadError
from .models import PlatformDescriptor

DEFAULT_MINOR_VERSIONS: Tuple[int, ...] = (6, 7, 8)
DEFAULT_VENDOR_DIR = "_gopath/src"


@dataclass
class StagerSettings:
    """Knobs that shape the resolution contexts and the output layout."""

    minor_versions: Tuple[int, ...] = DEFAULT_MINOR_VERSIONS
    goos: str = "linux"
    goarch: str = "amd64"
    compiler: str = "gc"
    vendor_dir: str = DEFAULT_VENDOR_DIR
    gopath: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "StagerSettings":
        """Build settings whose search roots come from ``$GOPATH``."""
        env = os.environ if environ is None else environ
        return cls(gopath=_gopath_from_env(env))


def _gopath_from_env(environ: Mapping[str, str]) -> Tuple[str, ...]:
    raw = environ.get("GOPATH", "")
    roots = tuple(entry for entry in raw.split(os.pathsep) if entry)
    if roots:
        return roots
    home = environ.get("HOME")
    if not home:
        return ()
    return (str(Path(home) / "go"),)


def load_manifest(manifest_path: Path) -> PlatformDescriptor:
    """Read the ``vm`` and ``env`` fields from a service manifest.

    Every other key is ignored. An empty document yields the defaults.
    """
    try:
        text = manifest_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestReadError(f"failed to read {manifest_path}: {exc}") from exc

    data = _parse_yaml(manifest_path, text)
    if not isinstance(data, dict):
        raise ManifestParseError(
            f"failed to unmarshal YAML config {manifest_path}: expected a mapping at the root"
        )

    vm = data.get("vm")
    if vm is None:
        vm = False
    if not isinstance(vm, bool):
        raise ManifestParseError(
            f"failed to unmarshal YAML config {manifest_path}: 'vm' must be a boolean, got {vm!r}"
        )

    env = _as_str(data.get("env"))
    return PlatformDescriptor(vm=vm, env=env or "")


def _parse_yaml(path: Path, text: str) -> Any:
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ManifestParseError(f"failed to unmarshal YAML config {path}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


__all__ = [
    "DEFAULT_MINOR_VERSIONS",
    "DEFAULT_VENDOR_DIR",
    "StagerSettings",
    "load_manifest",
]
