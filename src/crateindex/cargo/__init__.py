"""Cargo metadata model and loader.

All public names are re-exported here so that callers can write
``from crateindex.cargo import Manifest``.
"""

from crateindex.cargo.loader import (
    metadata_from_dict,
    metadata_from_json,
    read_metadata,
)
from crateindex.cargo.models import (
    DepKind,
    Manifest,
    ManifestDep,
    ManifestTarget,
    Metadata,
    Node,
    NodeDep,
    NodeDepKind,
    PackageId,
    PkgRef,
    Resolve,
    TargetKind,
    TargetReq,
)

__all__ = [
    "DepKind",
    "Manifest",
    "ManifestDep",
    "ManifestTarget",
    "Metadata",
    "Node",
    "NodeDep",
    "NodeDepKind",
    "PackageId",
    "PkgRef",
    "Resolve",
    "TargetKind",
    "TargetReq",
    "metadata_from_dict",
    "metadata_from_json",
    "read_metadata",
]
