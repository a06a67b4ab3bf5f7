"""Cargo metadata data model --- manifests, targets, and the resolve graph.

Pure data holders mirroring the shape of ``cargo metadata
--format-version=1``. Every class is a frozen dataclass so that a loaded
snapshot cannot be mutated once an index has been built over it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NewType

PackageId = NewType("PackageId", str)

# Stable small integer handle for a package inside one index.
PkgRef = int


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class DepKind(Enum):
    """Kind of a declared dependency (``[dependencies]`` and friends)."""

    NORMAL = "normal"
    DEV = "dev"
    BUILD = "build"

    @classmethod
    def parse(cls, raw: str | None) -> DepKind:
        """Decode cargo's ``null | "dev" | "build"`` representation."""
        if raw is None:
            return cls.NORMAL
        return cls(raw)

    def applicable_kinds(self) -> frozenset[TargetKind]:
        """Target kinds which a dependency of this kind can supply."""
        return _APPLICABLE_KINDS[self]

    def applies_to(self, target: ManifestTarget) -> bool:
        """Whether a dependency of this kind is visible to *target*."""
        return not self.applicable_kinds().isdisjoint(target.kinds)


class TargetKind(Enum):
    """Kind of a build target within a package."""

    LIB = "lib"
    BIN = "bin"
    EXAMPLE = "example"
    TEST = "test"
    BENCH = "bench"
    PROC_MACRO = "proc-macro"
    CDYLIB = "cdylib"
    CUSTOM_BUILD = "custom-build"

    @classmethod
    def parse(cls, raw: str) -> TargetKind:
        """Decode a cargo target kind string.

        The Rust library flavours (``rlib``, ``dylib``, ``staticlib``) all
        fold into ``LIB``.

        Raises:
            ValueError: If *raw* is not a known target kind.
        """
        if raw in _LIBRARY_ALIASES:
            return cls.LIB
        return cls(raw)


_LIBRARY_ALIASES = frozenset({"rlib", "dylib", "staticlib"})

_APPLICABLE_KINDS: dict[DepKind, frozenset[TargetKind]] = {
    DepKind.NORMAL: frozenset(
        {TargetKind.LIB, TargetKind.PROC_MACRO, TargetKind.BIN, TargetKind.CDYLIB}
    ),
    DepKind.DEV: frozenset({TargetKind.BENCH, TargetKind.TEST, TargetKind.EXAMPLE}),
    DepKind.BUILD: frozenset({TargetKind.CUSTOM_BUILD}),
}


class TargetReq(Enum):
    """Which target of a package a dependency edge refers to."""

    LIB = "lib"
    EVERY_BIN = "every-bin"


# ---------------------------------------------------------------------------
# Manifest side: what each package declares
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ManifestDep:
    """A dependency as written in a package's manifest.

    Attributes:
        name: Package name of the dependency (not the rename).
        kind: Normal, dev or build dependency.
        rename: Alias the depending package uses for it, if any.
        target: Platform condition (``cfg(...)`` or a target triple), or
            None when the dependency is unconditional.
        req: Version requirement string.
        optional: Whether the dependency is behind a feature.
    """

    name: str
    kind: DepKind = DepKind.NORMAL
    rename: str | None = None
    target: str | None = None
    req: str = "*"
    optional: bool = False


@dataclass(frozen=True)
class ManifestTarget:
    """A build target (library, binary, test, ...) of a package."""

    name: str
    kinds: tuple[TargetKind, ...]
    src_path: str = ""
    required_features: tuple[str, ...] = ()

    def kind_lib(self) -> bool:
        return TargetKind.LIB in self.kinds

    def kind_bin(self) -> bool:
        return TargetKind.BIN in self.kinds

    def kind_example(self) -> bool:
        return TargetKind.EXAMPLE in self.kinds

    def kind_test(self) -> bool:
        return TargetKind.TEST in self.kinds

    def kind_bench(self) -> bool:
        return TargetKind.BENCH in self.kinds

    def kind_proc_macro(self) -> bool:
        return TargetKind.PROC_MACRO in self.kinds

    def kind_cdylib(self) -> bool:
        return TargetKind.CDYLIB in self.kinds

    def kind_custom_build(self) -> bool:
        return TargetKind.CUSTOM_BUILD in self.kinds


@dataclass(frozen=True)
class Manifest:
    """A package with its declared dependencies, targets, and metadata.

    ``str(manifest)`` gives the ``name-version`` identity used for private
    rule names.
    """

    id: PackageId
    name: str
    version: str
    source: str | None = None
    dependencies: tuple[ManifestDep, ...] = ()
    targets: tuple[ManifestTarget, ...] = ()
    metadata: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)
    features: dict[str, tuple[str, ...]] = field(
        default_factory=dict, hash=False, compare=False
    )
    edition: str = ""
    license: str | None = None
    manifest_path: str = ""

    def __str__(self) -> str:
        return f"{self.name}-{self.version}"


# ---------------------------------------------------------------------------
# Resolve side: what cargo actually chose
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NodeDepKind:
    """One way in which a resolved edge is used.

    Attributes:
        kind: Normal, dev or build.
        target: Platform condition attached to this particular use, passed
            through to callers without being merged.
        extern_name: Crate name the dependency is imported under, used when
            the edge itself carries no name.
        artifact: Artifact dependency kind (``"bin"``, ``"cdylib"``, ...),
            None for an ordinary library dependency.
    """

    kind: DepKind = DepKind.NORMAL
    target: str | None = None
    extern_name: str | None = None
    artifact: str | None = None

    def target_req(self) -> TargetReq:
        """The target of the dependency package this use refers to."""
        if self.artifact == "bin":
            return TargetReq.EVERY_BIN
        return TargetReq.LIB


@dataclass(frozen=True)
class NodeDep:
    """A resolved dependency edge from one package to another."""

    pkg: PackageId
    name: str | None = None
    dep_kinds: tuple[NodeDepKind, ...] = ()


@dataclass(frozen=True)
class Node:
    """Resolution result for one package: its edges and enabled features."""

    id: PackageId
    deps: tuple[NodeDep, ...] = ()
    features: tuple[str, ...] = ()


@dataclass(frozen=True)
class Resolve:
    """The resolve section of the metadata snapshot."""

    nodes: tuple[Node, ...] = ()
    root: PackageId | None = None


@dataclass(frozen=True)
class Metadata:
    """A complete ``cargo metadata`` snapshot."""

    packages: tuple[Manifest, ...]
    resolve: Resolve
    workspace_members: tuple[PackageId, ...] = ()
    workspace_root: str = ""
