"""Shared builders for ``cargo metadata`` documents used across tests.

The builders emit plain dictionaries in the exact JSON shape produced by
``cargo metadata --format-version=1`` so that tests go through the real
loader rather than constructing model objects by hand.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

REGISTRY = "registry+https://github.com/rust-lang/crates.io-index"
ROOT_NAME = "rust-third-party"


def pkg_id(name: str, version: str = "1.0.0", source: str | None = REGISTRY) -> str:
    """Package id in cargo's ``<source>#<name>@<version>`` form."""
    if source is None:
        return f"path+file:///work/third-party#{name}@{version}"
    return f"{source}#{name}@{version}"


def dep(
    name: str,
    kind: str | None = None,
    rename: str | None = None,
    target: str | None = None,
) -> dict[str, Any]:
    return {
        "name": name,
        "source": REGISTRY,
        "req": "*",
        "kind": kind,
        "rename": rename,
        "optional": False,
        "uses_default_features": True,
        "features": [],
        "target": target,
        "registry": None,
    }


def target(name: str, *kinds: str) -> dict[str, Any]:
    return {
        "kind": list(kinds) or ["lib"],
        "crate_types": list(kinds) or ["lib"],
        "name": name,
        "src_path": f"/src/{name}.rs",
        "edition": "2021",
        "doctest": True,
        "test": True,
    }


def package(
    name: str,
    version: str = "1.0.0",
    source: str | None = REGISTRY,
    deps: list[dict[str, Any]] | None = None,
    targets: list[dict[str, Any]] | None = None,
    metadata: dict[str, Any] | None = None,
) -> dict[str, Any]:
    return {
        "name": name,
        "version": version,
        "id": pkg_id(name, version, source),
        "license": "MIT",
        "source": source,
        "dependencies": deps or [],
        "targets": targets if targets is not None else [target(name.replace("-", "_"), "lib")],
        "features": {},
        "manifest_path": f"/work/{name}/Cargo.toml",
        "metadata": metadata,
        "edition": "2021",
    }


def dep_kind(kind: str | None = None, target: str | None = None, **extra: Any) -> dict[str, Any]:
    return {"kind": kind, "target": target, **extra}


def edge(dep_id: str, name: str, *kinds: dict[str, Any]) -> dict[str, Any]:
    return {
        "name": name,
        "pkg": dep_id,
        "dep_kinds": list(kinds) or [dep_kind()],
    }


def node(
    node_id: str,
    deps: list[dict[str, Any]] | None = None,
    features: list[str] | None = None,
) -> dict[str, Any]:
    deps = deps or []
    return {
        "id": node_id,
        "dependencies": [d["pkg"] for d in deps],
        "deps": deps,
        "features": features or [],
    }


def metadata(
    packages: list[dict[str, Any]],
    nodes: list[dict[str, Any]],
    root: str | None,
) -> dict[str, Any]:
    return {
        "packages": packages,
        "workspace_members": [root] if root else [],
        "resolve": {"nodes": nodes, "root": root},
        "target_directory": "/work/target",
        "version": 1,
        "workspace_root": "/work/third-party",
    }


ROOT_ID = pkg_id(ROOT_NAME, "0.0.0", None)
ALPHA_ID = pkg_id("alpha")
BETA_ID = pkg_id("beta")
GAMMA_ID = pkg_id("gamma")
DELTA_ID = pkg_id("delta-core")
EPSILON_ID = pkg_id("epsilon")
ZETA_ID = pkg_id("zeta", "0.3.1")


def third_party_metadata(root_metadata: dict[str, Any] | None = None) -> dict[str, Any]:
    """A root package exercising every dependency shape.

    Root declarations:
        alpha       normal, unconditional
        beta        normal, cfg(windows)
        alpha       dev, cfg(unix)
        gamma       dev, unconditional
        delta-core  normal, renamed to ``delta-rs``
        epsilon     build

    ``zeta`` is only reachable through ``alpha`` and is therefore private.
    """
    root = package(
        ROOT_NAME,
        "0.0.0",
        None,
        deps=[
            dep("alpha"),
            dep("beta", target="cfg(windows)"),
            dep("alpha", kind="dev", target="cfg(unix)"),
            dep("gamma", kind="dev"),
            dep("delta-core", rename="delta-rs"),
            dep("epsilon", kind="build"),
        ],
        targets=[
            target("rust_third_party", "lib"),
            target("integration", "test"),
            target("build-script-build", "custom-build"),
        ],
        metadata=root_metadata,
    )
    packages = [
        root,
        package("alpha", deps=[dep("zeta")]),
        package("beta"),
        package("gamma"),
        package("delta-core"),
        package("epsilon"),
        package("zeta", "0.3.1"),
    ]
    nodes = [
        node(
            ROOT_ID,
            [
                edge(ALPHA_ID, "alpha", dep_kind(), dep_kind("dev", "cfg(unix)")),
                edge(BETA_ID, "beta", dep_kind(None, "cfg(windows)")),
                edge(GAMMA_ID, "gamma", dep_kind("dev")),
                edge(DELTA_ID, "delta_rs", dep_kind()),
                edge(EPSILON_ID, "epsilon", dep_kind("build")),
            ],
        ),
        node(ALPHA_ID, [edge(ZETA_ID, "zeta")], features=["default", "std"]),
        node(BETA_ID),
        node(GAMMA_ID),
        node(DELTA_ID),
        node(EPSILON_ID),
        node(ZETA_ID),
    ]
    return metadata(packages, nodes, ROOT_ID)


def write_metadata(directory: Path, data: dict[str, Any]) -> Path:
    path = directory / "metadata.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


LOCKED = [
    ("alpha", "1.0.0"),
    ("beta", "1.0.0"),
    ("delta-core", "1.0.0"),
    ("epsilon", "1.0.0"),
    ("gamma", "1.0.0"),
    ("zeta", "0.3.1"),
]


def write_lockfile(directory: Path, locked: list[tuple[str, str]]) -> Path:
    """Write a version 3 ``Cargo.lock`` with one registry entry per package.

    The root path package is always included, without a source. Checksums
    are the entry's position in *locked*, zero-padded to 64 hex digits.
    """
    lines = ["version = 3", "", "[[package]]", f'name = "{ROOT_NAME}"', 'version = "0.0.0"']
    for i, (name, version) in enumerate(locked):
        lines += [
            "",
            "[[package]]",
            f'name = "{name}"',
            f'version = "{version}"',
            f'source = "{REGISTRY}"',
            f'checksum = "{i:064x}"',
        ]
    path = directory / "Cargo.lock"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
