"""Public surface computation --- which packages and targets are buildable.

The public set consists of:

- the root package's library and binaries, when the root is a real package
  rather than a virtual umbrella manifest;
- every first-order dependency of the root, one entry per way it is used
  (an edge may be normal, dev and build at once).

Each public target optionally carries the rename the root imports it under.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType

from crateindex.cargo.models import PkgRef, TargetReq
from crateindex.core.index.catalog import ManifestCatalog, ResolutionGraph
from crateindex.exceptions import MetadataError

logger = logging.getLogger(__name__)

PublicKey = tuple[PkgRef, TargetReq]


class VisibilityComputer:
    """Computes and answers queries about the public surface.

    The computation happens once, at construction. Entries are recorded in
    a fixed order: the root's resolved edges first, then the synthetic
    entries for the root itself. A later entry for an identical key
    overwrites an earlier one, unless *strict* is set, in which case a
    conflicting rename raises ``MetadataError``.

    Args:
        catalog: Package catalog.
        graph: Resolution graph.
        root: Handle of the root package.
        root_is_real: Whether the root's own targets are public.
        strict: Reject keys recorded twice with different renames.
    """

    def __init__(
        self,
        catalog: ManifestCatalog,
        graph: ResolutionGraph,
        root: PkgRef,
        root_is_real: bool = True,
        strict: bool = False,
    ) -> None:
        self._catalog = catalog
        self._root = root
        self._strict = strict
        self._public_targets: dict[PublicKey, str | None] = {}

        top_levels = [root] if root_is_real else []

        # Cargo normalizes renames to identifiers: map "foo_bar" -> "foo-bar"
        root_pkg = catalog.get(root)
        dep_renamed = {
            dep.rename.replace("-", "_"): dep.rename
            for dep in root_pkg.dependencies
            if dep.rename is not None
        }

        for name, dep_kind, dep_ref in graph.edges(root):
            self._record((dep_ref, dep_kind.target_req()), dep_renamed.get(name))

        for pkg_ref in top_levels:
            self._record((pkg_ref, TargetReq.LIB), None)
            self._record((pkg_ref, TargetReq.EVERY_BIN), None)

        self._public_packages = frozenset(ref for ref, _ in self._public_targets)
        logger.debug(
            "%d public packages, %d public targets",
            len(self._public_packages),
            len(self._public_targets),
        )

    def _record(self, key: PublicKey, rename: str | None) -> None:
        if self._strict and key in self._public_targets:
            previous = self._public_targets[key]
            if previous != rename:
                pkg = self._catalog.get(key[0])
                raise MetadataError(
                    f"conflicting renames for {pkg} ({key[1].value}): "
                    f"{previous!r} and {rename!r}"
                )
        self._public_targets[key] = rename

    @property
    def public_targets(self) -> Mapping[PublicKey, str | None]:
        """Read-only view of the public targets and their renames."""
        return MappingProxyType(self._public_targets)

    @property
    def public_packages(self) -> frozenset[PkgRef]:
        return self._public_packages

    def is_root_package(self, ref: PkgRef) -> bool:
        return ref == self._root

    def is_public_package(self, ref: PkgRef) -> bool:
        """Whether any target of the package is public."""
        return ref in self._public_packages

    def is_public_target(self, ref: PkgRef, target_req: TargetReq) -> bool:
        """Whether a specific target of the package is public."""
        return (ref, target_req) in self._public_targets

    def public_rule_name(self, ref: PkgRef) -> str:
        """The package's rename if its library is public under one, else its name."""
        rename = self._public_targets.get((ref, TargetReq.LIB))
        return rename if rename is not None else self._catalog.get(ref).name

    def private_rule_name(self, ref: PkgRef) -> str:
        """Fully versioned rule name, suffixed with the rename if there is one."""
        pkg = self._catalog.get(ref)
        rename = self._public_targets.get((ref, TargetReq.LIB))
        if rename is None:
            return str(pkg)
        return f"{pkg}-{rename}"
