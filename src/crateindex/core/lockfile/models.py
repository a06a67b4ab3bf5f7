"""Lockfile data model --- one ``[[package]]`` entry of ``Cargo.lock``.

Also defines the ordering used to sort and search entries: by name, then
``semantic_version`` precedence (build metadata breaks remaining ties),
then source.
"""

from __future__ import annotations

from dataclasses import dataclass

import semantic_version

# Cargo.lock schema version this package understands.
EXPECTED_LOCKFILE_VERSION = 3

LockKey = tuple[str, tuple, tuple[bool, str]]


def lock_key(
    name: str, version: semantic_version.Version, source: str | None
) -> LockKey:
    """Sort key for a (name, version, source) triple; no source sorts first."""
    return (name, version.precedence_key, (source is not None, source or ""))


@dataclass(frozen=True)
class LockfilePackage:
    """A pinned package in the lockfile.

    Attributes:
        name: Package name.
        version: Exact resolved version.
        source: Registry or git source URL; None for path dependencies.
        checksum: SHA-256 of the downloaded crate, for registry packages.
        dependencies: Dependency specs as recorded by cargo.
    """

    name: str
    version: semantic_version.Version
    source: str | None = None
    checksum: str | None = None
    dependencies: tuple[str, ...] = ()

    @property
    def key(self) -> LockKey:
        return lock_key(self.name, self.version, self.source)
