"""Configuration for index construction and input locations."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_METADATA_FILE = "metadata.json"
DEFAULT_LOCKFILE = "Cargo.lock"
DEFAULT_EXTRA_METADATA_KEY = "third-party"


@dataclass(frozen=True)
class IndexConfig:
    """Options controlling how an ``Index`` is built.

    Attributes:
        root_is_real: Whether the root package is a real package whose own
            library and binaries are public. False for a virtual umbrella
            manifest that only exists to pull in dependencies.
        strict_public_targets: Reject a public target recorded twice with
            different renames instead of letting the later entry win.
        extra_metadata_key: Name of the ownership sub-table inside the root
            manifest's ``package.metadata``.
    """

    root_is_real: bool = True
    strict_public_targets: bool = False
    extra_metadata_key: str = DEFAULT_EXTRA_METADATA_KEY


@dataclass(frozen=True)
class Paths:
    """Locations of the metadata snapshot and the lockfile."""

    metadata_path: Path
    lockfile_path: Path

    @classmethod
    def for_directory(cls, directory: Path) -> Paths:
        """Default file names inside a third-party directory."""
        return cls(
            metadata_path=directory / DEFAULT_METADATA_FILE,
            lockfile_path=directory / DEFAULT_LOCKFILE,
        )
