"""Ownership metadata embedded in the root manifest.

The root ``Cargo.toml`` may carry a table such as::

    [package.metadata.third-party.serde]
    oncall = "rust_libraries"

Every key must name a direct dependency of the root. Entries that do not,
or that cannot be decoded, are collected into a single report rather than
failing on the first one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from crateindex.cargo.models import Manifest
from crateindex.config import DEFAULT_EXTRA_METADATA_KEY
from crateindex.exceptions import ExtraMetadataError


@dataclass(frozen=True)
class ExtraMetadata:
    """Per-package ownership record.

    Attributes:
        oncall: Oncall shortname used as the package maintainer.
    """

    oncall: str


@dataclass
class ExtraMetadataReport:
    """Result of loading the ownership table.

    Attributes:
        owners: Ownership records keyed by the dependency name as declared
            by the root manifest.
        unknown: Sorted table keys that match no direct dependency.
        malformed: Descriptions of entries that could not be decoded.
    """

    owners: dict[str, ExtraMetadata] = field(default_factory=dict)
    unknown: list[str] = field(default_factory=list)
    malformed: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.unknown and not self.malformed

    def raise_for_errors(self) -> None:
        """Raise ``ExtraMetadataError`` if validation failed."""
        if not self.success:
            raise ExtraMetadataError(self.unknown, self.malformed)


def _decode_entry(name: str, raw: Any) -> ExtraMetadata | str:
    """Decode one entry, or describe why it cannot be decoded."""
    if not isinstance(raw, dict):
        return f"{name}: expected a table, found {type(raw).__name__}"
    oncall = raw.get("oncall")
    if not isinstance(oncall, str):
        return f"{name}: missing string field 'oncall'"
    return ExtraMetadata(oncall=oncall)


def load_extra_metadata(
    root: Manifest, key: str = DEFAULT_EXTRA_METADATA_KEY
) -> ExtraMetadataReport:
    """Load and validate the ownership table of the root package.

    Args:
        root: The root manifest.
        key: Name of the sub-table within ``package.metadata``.

    Returns:
        An ``ExtraMetadataReport``. A missing sub-table gives an empty,
        successful report.
    """
    report = ExtraMetadataReport()
    table = root.metadata.get(key)
    if table is None:
        return report
    if not isinstance(table, dict):
        report.malformed.append(f"{key}: expected a table, found {type(table).__name__}")
        return report

    # Borrow names from the manifest rather than the table keys.
    direct: dict[str, str] = {}
    for dep in root.dependencies:
        direct.setdefault(dep.name, dep.name)

    for name, raw in table.items():
        decoded = _decode_entry(name, raw)
        if isinstance(decoded, str):
            report.malformed.append(decoded)
        pkg_name = direct.get(name)
        if pkg_name is None:
            report.unknown.append(name)
        elif isinstance(decoded, ExtraMetadata):
            report.owners[pkg_name] = decoded

    report.unknown.sort()
    return report
