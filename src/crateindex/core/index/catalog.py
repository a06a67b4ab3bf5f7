"""Manifest catalog and resolution graph --- id-keyed lookup tables.

The catalog assigns every package of the snapshot a stable small integer
handle (``PkgRef``). All later components address packages through these
handles; the catalog is the single side table from handle to manifest.

The resolution graph indexes resolve nodes by the same handles and checks,
once, that the resolve section only refers to packages the catalog knows
and that every resolved edge has a name.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from crateindex.cargo.models import (
    Manifest,
    Node,
    NodeDep,
    NodeDepKind,
    PackageId,
    PkgRef,
)
from crateindex.exceptions import MetadataError

logger = logging.getLogger(__name__)


def edge_name(dep: NodeDep, dep_kind: NodeDepKind) -> str | None:
    """Name under which a resolved edge is imported.

    The edge-level name wins; otherwise the kind record's extern name.
    """
    return dep.name or dep_kind.extern_name


# ---------------------------------------------------------------------------
# ManifestCatalog
# ---------------------------------------------------------------------------


class ManifestCatalog:
    """O(1) lookup from package id (or handle) to manifest.

    Handles are assigned in snapshot order. If the same id occurs twice the
    later manifest replaces the earlier one under the original handle.
    """

    def __init__(self, packages: Iterable[Manifest]) -> None:
        self._manifests: list[Manifest] = []
        self._refs: dict[PackageId, PkgRef] = {}
        for pkg in packages:
            existing = self._refs.get(pkg.id)
            if existing is not None:
                logger.warning("Duplicate package id %s; keeping the last one", pkg.id)
                self._manifests[existing] = pkg
                continue
            self._refs[pkg.id] = len(self._manifests)
            self._manifests.append(pkg)

    def __len__(self) -> int:
        return len(self._manifests)

    def __iter__(self) -> Iterator[Manifest]:
        return iter(self._manifests)

    def __contains__(self, pkg_id: object) -> bool:
        return pkg_id in self._refs

    def refs(self) -> range:
        """All package handles."""
        return range(len(self._manifests))

    def ref(self, pkg_id: PackageId) -> PkgRef:
        """Return the handle for *pkg_id*.

        Raises:
            MetadataError: If the id is not part of the snapshot.
        """
        try:
            return self._refs[pkg_id]
        except KeyError:
            raise MetadataError(f"unknown package id {pkg_id!r}") from None

    def get(self, ref: PkgRef) -> Manifest:
        """Return the manifest for a handle."""
        return self._manifests[ref]

    def by_id(self, pkg_id: PackageId) -> Manifest:
        """Return the manifest for a package id."""
        return self._manifests[self.ref(pkg_id)]


# ---------------------------------------------------------------------------
# ResolutionGraph
# ---------------------------------------------------------------------------


class ResolutionGraph:
    """O(1) lookup from package handle to its resolve node.

    Args:
        nodes: The resolve nodes of the snapshot.
        catalog: Catalog the node and edge ids must resolve in.

    Raises:
        MetadataError: If a node or edge names a package missing from the
            catalog or from the resolve, or an edge has neither an edge name
            nor an extern name.
    """

    def __init__(self, nodes: Iterable[Node], catalog: ManifestCatalog) -> None:
        self._catalog = catalog
        self._nodes: dict[PkgRef, Node] = {}
        for node in nodes:
            if node.id not in catalog:
                raise MetadataError(f"resolve node {node.id!r} has no package manifest")
            for dep in node.deps:
                if dep.pkg not in catalog:
                    raise MetadataError(
                        f"resolve edge {node.id!r} -> {dep.pkg!r} targets an unknown package"
                    )
                for dep_kind in dep.dep_kinds:
                    if edge_name(dep, dep_kind) is None:
                        raise MetadataError(
                            f"resolve edge {node.id!r} -> {dep.pkg!r} has no name"
                        )
            self._nodes[catalog.ref(node.id)] = node

        for node in self._nodes.values():
            for dep in node.deps:
                if catalog.ref(dep.pkg) not in self._nodes:
                    raise MetadataError(
                        f"resolve edge {node.id!r} -> {dep.pkg!r} targets a package "
                        "with no resolve node"
                    )

    def __contains__(self, ref: object) -> bool:
        return ref in self._nodes

    def node(self, ref: PkgRef) -> Node:
        """Return the resolve node for a package.

        Raises:
            MetadataError: If the package was not part of the resolve.
        """
        try:
            return self._nodes[ref]
        except KeyError:
            pkg = self._catalog.get(ref)
            raise MetadataError(f"no resolve node for package {pkg}") from None

    def resolved_features(self, ref: PkgRef) -> tuple[str, ...]:
        """Features cargo enabled for a package."""
        return self.node(ref).features

    def edges(self, ref: PkgRef) -> Iterator[tuple[str, NodeDepKind, PkgRef]]:
        """Flatten a package's resolved edges, one entry per kind record.

        Yields:
            ``(name, dep_kind, dependency_ref)`` tuples in resolve order.
        """
        for dep in self.node(ref).deps:
            dep_ref = self._catalog.ref(dep.pkg)
            for dep_kind in dep.dep_kinds:
                name = edge_name(dep, dep_kind)
                if name is None:
                    raise MetadataError(f"resolve edge {ref} -> {dep.pkg!r} has no name")
                yield name, dep_kind, dep_ref


def find_root(catalog: ManifestCatalog, root_id: PackageId | None) -> PkgRef:
    """Locate the resolution root in the catalog.

    Raises:
        MetadataError: If the snapshot declares no root or the root is not
            among its packages.
    """
    if root_id is None or root_id not in catalog:
        raise MetadataError("couldn't identify unambiguous top-level package")
    return catalog.ref(root_id)
