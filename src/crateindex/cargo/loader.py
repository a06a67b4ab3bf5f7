"""Decoding of ``cargo metadata --format-version=1`` documents.

Turns the parsed JSON document into the frozen model classes of
``crateindex.cargo.models``. Only the fields the index needs are decoded;
unknown fields are ignored so that newer cargo releases keep loading.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

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
    Resolve,
    TargetKind,
)
from crateindex.exceptions import MetadataError


def _manifest_dep(data: dict[str, Any]) -> ManifestDep:
    return ManifestDep(
        name=data["name"],
        kind=DepKind.parse(data.get("kind")),
        rename=data.get("rename"),
        target=data.get("target"),
        req=data.get("req", "*"),
        optional=bool(data.get("optional", False)),
    )


def _manifest_target(data: dict[str, Any]) -> ManifestTarget:
    return ManifestTarget(
        name=data["name"],
        kinds=tuple(TargetKind.parse(k) for k in data.get("kind", [])),
        src_path=data.get("src_path", ""),
        required_features=tuple(data.get("required-features", [])),
    )


def _manifest(data: dict[str, Any]) -> Manifest:
    return Manifest(
        id=PackageId(data["id"]),
        name=data["name"],
        version=data["version"],
        source=data.get("source"),
        dependencies=tuple(_manifest_dep(d) for d in data.get("dependencies", [])),
        targets=tuple(_manifest_target(t) for t in data.get("targets", [])),
        metadata=dict(data.get("metadata") or {}),
        features={k: tuple(v) for k, v in (data.get("features") or {}).items()},
        edition=data.get("edition", ""),
        license=data.get("license"),
        manifest_path=data.get("manifest_path", ""),
    )


def _node_dep_kind(data: dict[str, Any]) -> NodeDepKind:
    return NodeDepKind(
        kind=DepKind.parse(data.get("kind")),
        target=data.get("target"),
        extern_name=data.get("extern_name") or None,
        artifact=data.get("artifact"),
    )


def _node(data: dict[str, Any]) -> Node:
    deps = tuple(
        NodeDep(
            pkg=PackageId(d["pkg"]),
            # cargo reports "" for edges that only have per-kind extern names
            name=d.get("name") or None,
            dep_kinds=tuple(_node_dep_kind(k) for k in d.get("dep_kinds", [])),
        )
        for d in data.get("deps", [])
    )
    return Node(
        id=PackageId(data["id"]),
        deps=deps,
        features=tuple(data.get("features", [])),
    )


def metadata_from_dict(data: dict[str, Any]) -> Metadata:
    """Decode a parsed ``cargo metadata`` document.

    Args:
        data: The JSON document as a dictionary.

    Returns:
        The decoded ``Metadata`` snapshot.

    Raises:
        MetadataError: If a required field is missing or has the wrong shape.
    """
    try:
        packages = tuple(_manifest(p) for p in data["packages"])
        resolve_data = data.get("resolve") or {}
        root = resolve_data.get("root")
        resolve = Resolve(
            nodes=tuple(_node(n) for n in resolve_data.get("nodes", [])),
            root=PackageId(root) if root is not None else None,
        )
    except KeyError as exc:
        raise MetadataError(f"missing field in cargo metadata: {exc}") from exc
    except (TypeError, ValueError, AttributeError) as exc:
        raise MetadataError(f"malformed cargo metadata: {exc}") from exc

    return Metadata(
        packages=packages,
        resolve=resolve,
        workspace_members=tuple(
            PackageId(m) for m in data.get("workspace_members", [])
        ),
        workspace_root=data.get("workspace_root", ""),
    )


def metadata_from_json(json_str: str) -> Metadata:
    """Decode a ``cargo metadata`` JSON string.

    Raises:
        MetadataError: If the string is not valid JSON or not a metadata
            document.
    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as exc:
        raise MetadataError(f"invalid JSON in cargo metadata: {exc}") from exc
    if not isinstance(data, dict):
        raise MetadataError("cargo metadata must be a JSON object")
    return metadata_from_dict(data)


def read_metadata(path: Path) -> Metadata:
    """Read and decode a ``cargo metadata`` snapshot from disk.

    Raises:
        MetadataError: If the file cannot be read or decoded.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MetadataError(f"Failed to load {path}: {exc}") from exc
    return metadata_from_json(text)
