"""Cargo.lock loading and lookup.

- ``models``: ``LockfilePackage`` and the (name, version, source) ordering.
- ``lockfile``: the ``Lockfile`` class with loading and exact-match search.
"""

from crateindex.core.lockfile.lockfile import Lockfile
from crateindex.core.lockfile.models import (
    EXPECTED_LOCKFILE_VERSION,
    LockfilePackage,
    lock_key,
)

__all__ = [
    "EXPECTED_LOCKFILE_VERSION",
    "Lockfile",
    "LockfilePackage",
    "lock_key",
]
