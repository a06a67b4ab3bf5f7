"""crateindex exception hierarchy.

All public exceptions inherit from CrateIndexError, giving callers a single
base class to catch when they want to handle any crateindex-specific failure
without swallowing unrelated errors.
"""

from __future__ import annotations


class CrateIndexError(Exception):
    """Base exception for all crateindex errors."""


class MetadataError(CrateIndexError):
    """Raised when a metadata snapshot cannot be indexed.

    Covers malformed ``cargo metadata`` documents, a missing or ambiguous
    root package, resolve nodes or edges referring to unknown packages, and
    resolved edges without any usable name. Index construction is aborted;
    no partial index is produced.
    """


class PlatformParseError(CrateIndexError):
    """Raised when a platform condition string cannot be parsed.

    Attributes:
        text: The condition string that failed to parse.
    """

    def __init__(self, text: str, reason: str) -> None:
        super().__init__(f"invalid platform predicate {text!r}: {reason}")
        self.text = text
        self.reason = reason


class ExtraMetadataError(CrateIndexError):
    """Raised when the root package's ownership table fails validation.

    Carries every offending entry at once rather than the first one found.

    Attributes:
        unknown: Names with no matching direct dependency of the root.
        malformed: Descriptions of entries that could not be decoded.
    """

    def __init__(self, unknown: list[str], malformed: list[str] | None = None) -> None:
        self.unknown = list(unknown)
        self.malformed = list(malformed or [])
        parts = []
        if self.unknown:
            parts.append("Extra metadata for package(s): " + " ".join(self.unknown))
        if self.malformed:
            parts.append("Malformed metadata: " + "; ".join(self.malformed))
        super().__init__(". ".join(parts) or "Package metadata: all OK")


class LockfileError(CrateIndexError):
    """Raised when a lockfile cannot be read or decoded.

    A schema version other than the expected one is not an error; it is
    only logged.
    """
