"""Per-target dependency resolution.

Merges two views of a package's dependencies:

- the *declared* dependencies from its manifest, which say which target
  kinds a dependency applies to and under which platform condition;
- the *resolved* edges from cargo's resolve graph, which say which concrete
  package was chosen and under which name it is imported.

For each build target the result is one ``ResolvedDep`` per resolved edge
use, carrying a single platform guard that is the union of all applicable
declarations of that dependency.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from crateindex.cargo.models import (
    DepKind,
    Manifest,
    ManifestDep,
    ManifestTarget,
    NodeDepKind,
    PkgRef,
    TargetKind,
)
from crateindex.core.index.catalog import ManifestCatalog, ResolutionGraph
from crateindex.exceptions import PlatformParseError
from crateindex.platform import CfgAny, PlatformExpr, PlatformPredicate

logger = logging.getLogger(__name__)

# Receives platform conditions that failed to parse, with the dependency
# they were declared for.
PlatformErrorHandler = Callable[[Manifest, PlatformParseError], None]


def log_platform_error(dep: Manifest, err: PlatformParseError) -> None:
    """Default handler: log and carry on."""
    logger.error("Failed to parse predicate for %s: %s", dep, err)


@dataclass(frozen=True)
class ResolvedDep:
    """A resolved dependency of one build target.

    Attributes:
        package_ref: Handle of the dependency package.
        package: Manifest of the dependency package.
        platform: Combined ``cfg(...)`` guard of all applicable declarations,
            or None when the dependency is unconditional.
        rename: Name the dependency is imported under.
        dep_kind: The resolve graph's kind record for this use. Its own
            ``target`` condition is passed through untouched.
    """

    package_ref: PkgRef
    package: Manifest
    platform: PlatformExpr | None
    rename: str
    dep_kind: NodeDepKind


class DependencyResolver:
    """Resolves the dependencies of packages and their build targets.

    Args:
        catalog: Package catalog.
        graph: Resolution graph.
        on_platform_error: Called for every platform condition that fails
            to parse. Defaults to logging an error.
    """

    def __init__(
        self,
        catalog: ManifestCatalog,
        graph: ResolutionGraph,
        on_platform_error: PlatformErrorHandler | None = None,
    ) -> None:
        self._catalog = catalog
        self._graph = graph
        self._on_platform_error = on_platform_error or log_platform_error

    @staticmethod
    def applicable_kinds(dep_kind: DepKind) -> frozenset[TargetKind]:
        """Target kinds a dependency of *dep_kind* can supply.

        Normal dependencies feed libraries, proc-macros, binaries and
        cdylibs; dev dependencies feed tests, benches and examples; build
        dependencies feed the build script.
        """
        return dep_kind.applicable_kinds()

    def resolved_deps(self, ref: PkgRef) -> Iterator[tuple[str, NodeDepKind, Manifest]]:
        """All resolved dependencies of a package, regardless of target.

        Yields:
            ``(name, dep_kind, manifest)`` for every kind record of every
            resolved edge.
        """
        for name, dep_kind, dep_ref in self._graph.edges(ref):
            yield name, dep_kind, self._catalog.get(dep_ref)

    def deps_for_target(self, ref: PkgRef, target: ManifestTarget) -> list[ManifestDep]:
        """Declared dependencies of a package that apply to *target*.

        Raises:
            ValueError: If *target* is not one of the package's targets.
        """
        pkg = self._catalog.get(ref)
        if target not in pkg.targets:
            raise ValueError(f"target {target.name!r} does not belong to {pkg}")
        return [dep for dep in pkg.dependencies if dep.kind.applies_to(target)]

    def resolved_deps_for_target(
        self, ref: PkgRef, target: ManifestTarget
    ) -> list[ResolvedDep]:
        """Resolved dependencies of one build target with merged platform guards.

        Raises:
            ValueError: If *target* is not one of the package's targets.
        """
        # A name may be declared several times under different conditions.
        groups: dict[str, list[ManifestDep]] = {}
        for dep in self.deps_for_target(ref, target):
            group = groups.setdefault(dep.name, [])
            if dep not in group:
                group.append(dep)

        guards: dict[str, PlatformExpr | None] = {}
        resolved: list[ResolvedDep] = []
        for rename, dep_kind, dep_ref in self._graph.edges(ref):
            dep = self._catalog.get(dep_ref)
            mdeps = groups.get(dep.name)
            if not mdeps:
                continue
            if dep.name not in guards:
                guards[dep.name] = self._combined_guard(dep, mdeps)
            resolved.append(
                ResolvedDep(
                    package_ref=dep_ref,
                    package=dep,
                    platform=guards[dep.name],
                    rename=rename,
                    dep_kind=dep_kind,
                )
            )
        return resolved

    def _combined_guard(
        self, dep: Manifest, mdeps: list[ManifestDep]
    ) -> PlatformExpr | None:
        """Union of the platform conditions of *mdeps*; unconditional wins."""
        if len({m.kind for m in mdeps}) > 1:
            logger.debug(
                "Merging platform conditions of %s across dependency kinds %s",
                dep,
                sorted(m.kind.value for m in mdeps),
            )

        if any(m.target is None for m in mdeps):
            return None

        platforms: list[PlatformPredicate] = []
        for mdep in mdeps:
            try:
                platforms.append(PlatformPredicate.parse(mdep.target or ""))
            except PlatformParseError as err:
                self._on_platform_error(dep, err)

        if not platforms:
            return None
        if len(platforms) == 1:
            return platforms[0].to_expr()
        return CfgAny(tuple(platforms)).to_expr()
