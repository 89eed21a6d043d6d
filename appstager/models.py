"""Core data models shared across appstager components."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Tuple


class PlatformMode(str, Enum):
    """Target hosting environment derived from the service manifest."""

    STANDARD = "standard"
    FLEXIBLE = "flexible"


_FLEXIBLE_ENVS = frozenset({"flex", "flexible", "2"})


@dataclass(frozen=True)
class PlatformDescriptor:
    """The two manifest fields the stager consults."""

    vm: bool = False
    env: str = ""

    @property
    def mode(self) -> PlatformMode:
        if self.vm or self.env in _FLEXIBLE_ENVS:
            return PlatformMode.FLEXIBLE
        return PlatformMode.STANDARD


@dataclass(frozen=True)
class BuildContext:
    """Everything needed to resolve one import path to one on-disk package.

    ``gopath`` lists the search roots in priority order; each root holds
    packages under its ``src`` directory.
    """

    goos: str
    goarch: str
    compiler: str
    build_tags: Tuple[str, ...]
    release_tags: Tuple[str, ...]
    gopath: Tuple[str, ...]
    cgo_enabled: bool = False

    @property
    def conditional_tags(self) -> Tuple[str, ...]:
        return self.build_tags + self.release_tags

    @property
    def fingerprint(self) -> str:
        tags = ",".join(self.conditional_tags)
        return f"{self.goos}/{self.goarch} [{tags}]"


@dataclass(frozen=True)
class ImportEdge:
    """An import path together with the directory it is imported from."""

    import_path: str
    origin_dir: str


@dataclass
class ResolvedPackage:
    """A Go package located on disk under a particular build context."""

    import_path: str
    src_root: str
    directory: str
    name: str
    imports: List[str] = field(default_factory=list)
    go_files: List[str] = field(default_factory=list)

    @property
    def is_command(self) -> bool:
        return self.name == "main"

    @property
    def canonical_dir(self) -> str:
        """Directory that identifies this package for staging purposes."""
        if self.src_root:
            return str(Path(self.src_root) / self.import_path)
        return self.directory


@dataclass
class PassResult:
    """Packages discovered for one feature-version level."""

    minor_version: int
    context: BuildContext
    packages: List[ResolvedPackage]


@dataclass
class StageReport:
    """Outcome of a complete staging run."""

    manifest_path: Path
    mode: PlatformMode
    passes: List[PassResult] = field(default_factory=list)
