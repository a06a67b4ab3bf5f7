"""The ``Index`` --- an immutable, queryable view of a metadata snapshot.

Built exactly once from a loaded snapshot. Construction indexes packages
and resolve nodes, locates the root, and computes the public surface; any
broken input invariant aborts construction with ``MetadataError``. After
that every method is a pure query, so an ``Index`` may be shared between
threads without locking.

Example::

    index = Index.from_path(Path("metadata.json"))
    for ref in index.all_packages():
        if index.is_public_package(ref):
            print(index.public_rule_name(ref))
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from crateindex.cargo.loader import read_metadata
from crateindex.cargo.models import (
    Manifest,
    ManifestDep,
    ManifestTarget,
    Metadata,
    NodeDepKind,
    PackageId,
    PkgRef,
    TargetReq,
)
from crateindex.config import IndexConfig
from crateindex.core.index.catalog import ManifestCatalog, ResolutionGraph, find_root
from crateindex.core.index.extra_meta import ExtraMetadataReport, load_extra_metadata
from crateindex.core.index.resolver import (
    DependencyResolver,
    PlatformErrorHandler,
    ResolvedDep,
)
from crateindex.core.index.visibility import VisibilityComputer


class Index:
    """Index over a Cargo metadata snapshot.

    Args:
        metadata: The snapshot; a top-level package and all its transitive
            dependencies.
        config: Construction options.
        on_platform_error: Handler for unparseable platform conditions met
            during per-target resolution. Defaults to logging.

    Raises:
        MetadataError: If the root cannot be identified, the resolve graph
            refers to unknown packages, or a resolved edge has no name.
    """

    def __init__(
        self,
        metadata: Metadata,
        config: IndexConfig | None = None,
        on_platform_error: PlatformErrorHandler | None = None,
    ) -> None:
        self.config = config or IndexConfig()
        self._catalog = ManifestCatalog(metadata.packages)
        self.root_ref: PkgRef = find_root(self._catalog, metadata.resolve.root)
        self._graph = ResolutionGraph(metadata.resolve.nodes, self._catalog)
        # Surface a missing root node now rather than on first query.
        self._graph.node(self.root_ref)
        self._visibility = VisibilityComputer(
            self._catalog,
            self._graph,
            self.root_ref,
            root_is_real=self.config.root_is_real,
            strict=self.config.strict_public_targets,
        )
        self._resolver = DependencyResolver(
            self._catalog, self._graph, on_platform_error=on_platform_error
        )

    @classmethod
    def from_path(cls, path: Path, config: IndexConfig | None = None) -> Index:
        """Build an index from a ``cargo metadata`` JSON file."""
        return cls(read_metadata(path), config)

    # -- Packages -----------------------------------------------------------

    @property
    def root(self) -> Manifest:
        """The manifest of the root package."""
        return self._catalog.get(self.root_ref)

    def ref(self, pkg_id: PackageId) -> PkgRef:
        """Handle for a package id."""
        return self._catalog.ref(pkg_id)

    def manifest(self, ref: PkgRef) -> Manifest:
        """Manifest for a handle."""
        return self._catalog.get(ref)

    def all_packages(self) -> range:
        """Handles of every package in the snapshot."""
        return self._catalog.refs()

    def find_by_name(self, name: str) -> list[PkgRef]:
        """Handles of all packages called *name*, one per resolved version."""
        return [ref for ref in self._catalog.refs() if self._catalog.get(ref).name == name]

    def resolved_features(self, ref: PkgRef) -> tuple[str, ...]:
        """Features cargo resolved for a package."""
        return self._graph.resolved_features(ref)

    # -- Visibility ---------------------------------------------------------

    def is_root_package(self, ref: PkgRef) -> bool:
        return self._visibility.is_root_package(ref)

    def is_public_package(self, ref: PkgRef) -> bool:
        return self._visibility.is_public_package(ref)

    def is_public_target(self, ref: PkgRef, target_req: TargetReq) -> bool:
        return self._visibility.is_public_target(ref, target_req)

    def public_rule_name(self, ref: PkgRef) -> str:
        return self._visibility.public_rule_name(ref)

    def private_rule_name(self, ref: PkgRef) -> str:
        return self._visibility.private_rule_name(ref)

    # -- Dependencies -------------------------------------------------------

    def resolved_deps(self, ref: PkgRef) -> Iterator[tuple[str, NodeDepKind, Manifest]]:
        return self._resolver.resolved_deps(ref)

    def deps_for_target(self, ref: PkgRef, target: ManifestTarget) -> list[ManifestDep]:
        return self._resolver.deps_for_target(ref, target)

    def resolved_deps_for_target(
        self, ref: PkgRef, target: ManifestTarget
    ) -> list[ResolvedDep]:
        return self._resolver.resolved_deps_for_target(ref, target)

    # -- Extra metadata -----------------------------------------------------

    def get_extra_meta(self) -> ExtraMetadataReport:
        """Ownership table of the root package, validated against its deps."""
        return load_extra_metadata(self.root, self.config.extra_metadata_key)
