"""Index for Cargo metadata, and the traversals built on it.

The package is split into focused submodules:

- ``catalog``: ``ManifestCatalog`` and ``ResolutionGraph`` lookup tables.
- ``visibility``: ``VisibilityComputer`` for the public surface.
- ``resolver``: ``DependencyResolver`` and ``ResolvedDep``.
- ``extra_meta``: ownership table loading and validation.
- ``index``: the ``Index`` facade tying them together.
"""

from crateindex.core.index.catalog import (
    ManifestCatalog,
    ResolutionGraph,
    edge_name,
    find_root,
)
from crateindex.core.index.extra_meta import (
    ExtraMetadata,
    ExtraMetadataReport,
    load_extra_metadata,
)
from crateindex.core.index.index import Index
from crateindex.core.index.resolver import (
    DependencyResolver,
    PlatformErrorHandler,
    ResolvedDep,
    log_platform_error,
)
from crateindex.core.index.visibility import VisibilityComputer

__all__ = [
    "DependencyResolver",
    "ExtraMetadata",
    "ExtraMetadataReport",
    "Index",
    "ManifestCatalog",
    "PlatformErrorHandler",
    "ResolutionGraph",
    "ResolvedDep",
    "VisibilityComputer",
    "edge_name",
    "find_root",
    "load_extra_metadata",
    "log_platform_error",
]
