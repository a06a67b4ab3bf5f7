"""Cargo.lock loading and exact-match lookup.

The lockfile is read once, its entries sorted by (name, version, source),
and afterwards only queried. ``find`` performs an exact binary search for
the triple computed from a manifest; there is no fuzzy matching.

A schema version other than 3 is logged as a warning and otherwise
ignored: the entry format has been stable across versions for the fields
read here.
"""

from __future__ import annotations

import bisect
import logging
import tomllib
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import semantic_version

from crateindex.cargo.models import Manifest
from crateindex.core.lockfile.models import (
    EXPECTED_LOCKFILE_VERSION,
    LockfilePackage,
    lock_key,
)
from crateindex.exceptions import LockfileError

logger = logging.getLogger(__name__)


class Lockfile:
    """A sorted, read-only view of a ``Cargo.lock`` file.

    Example::

        lockfile = Lockfile.load(Path("Cargo.lock"))
        entry = lockfile.find(manifest)
        if entry is not None:
            print(entry.checksum)
    """

    def __init__(self, version: int | None, packages: list[LockfilePackage]) -> None:
        self.version = version
        self._packages = sorted(packages, key=lambda p: p.key)
        self._keys = [p.key for p in self._packages]

    # -- Loading ------------------------------------------------------------

    @classmethod
    def load(cls, path: Path) -> Lockfile:
        """Read and decode a lockfile from disk.

        Raises:
            LockfileError: If the file cannot be read or decoded.
        """
        try:
            content = path.read_bytes()
        except OSError as exc:
            raise LockfileError(f"Failed to load {path}: {exc}") from exc
        try:
            return cls.from_toml(content.decode("utf-8"))
        except (LockfileError, UnicodeDecodeError) as exc:
            raise LockfileError(f"Failed to parse {path}: {exc}") from exc

    @classmethod
    def from_toml(cls, toml_str: str) -> Lockfile:
        """Decode a lockfile from TOML text.

        Raises:
            LockfileError: If the text is not valid TOML or not a lockfile.
        """
        try:
            data = tomllib.loads(toml_str)
        except tomllib.TOMLDecodeError as exc:
            raise LockfileError(f"invalid TOML: {exc}") from exc
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Lockfile:
        """Decode a lockfile from its parsed TOML table.

        Raises:
            LockfileError: If an entry is missing a field or has an invalid
                version.
        """
        version = data.get("version")
        if version is not None and (isinstance(version, bool) or not isinstance(version, int)):
            raise LockfileError(f"lockfile version must be an integer, got {version!r}")
        if version != EXPECTED_LOCKFILE_VERSION:
            logger.warning("Unrecognized Cargo.lock format version: %s", version)

        packages = []
        for entry in data.get("package", []):
            try:
                packages.append(
                    LockfilePackage(
                        name=entry["name"],
                        version=semantic_version.Version(entry["version"]),
                        source=entry.get("source"),
                        checksum=entry.get("checksum"),
                        dependencies=tuple(entry.get("dependencies", [])),
                    )
                )
            except KeyError as exc:
                raise LockfileError(f"lockfile package missing field {exc}") from exc
            except (TypeError, ValueError) as exc:
                raise LockfileError(f"invalid lockfile package {entry!r}: {exc}") from exc
        return cls(version, packages)

    # -- Queries ------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._packages)

    def __iter__(self) -> Iterator[LockfilePackage]:
        return iter(self._packages)

    @property
    def packages(self) -> tuple[LockfilePackage, ...]:
        """Entries in sorted order."""
        return tuple(self._packages)

    def find(self, manifest: Manifest) -> LockfilePackage | None:
        """Exact-match lookup of a manifest's (name, version, source).

        A manifest whose version is not valid SemVer matches nothing.
        """
        try:
            version = semantic_version.Version(manifest.version)
        except ValueError:
            logger.debug("Not a SemVer version for %s: %r", manifest.name, manifest.version)
            return None
        key = lock_key(manifest.name, version, manifest.source)
        i = bisect.bisect_left(self._keys, key)
        if i < len(self._keys) and self._keys[i] == key:
            return self._packages[i]
        return None

    def checksum_for(self, manifest: Manifest) -> str | None:
        """Checksum of the manifest's lockfile entry, if it has one."""
        entry = self.find(manifest)
        return entry.checksum if entry is not None else None
