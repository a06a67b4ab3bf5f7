"""Shared fixtures for CLI tests.

Provides a third-party directory holding a ``metadata.json`` snapshot and
a matching ``Cargo.lock``, plus variants with ownership metadata.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from tests.helpers import LOCKED, third_party_metadata, write_lockfile, write_metadata


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def third_party_dir(tmp_path: Path) -> Path:
    """A directory with the standard snapshot and a complete lockfile."""
    write_metadata(tmp_path, third_party_metadata({
        "third-party": {
            "alpha": {"oncall": "rust_libraries"},
            "delta-core": {"oncall": "crypto"},
        },
    }))
    write_lockfile(tmp_path, LOCKED)
    return tmp_path


@pytest.fixture
def bad_owners_dir(tmp_path: Path) -> Path:
    """A snapshot whose ownership table names unknown and malformed entries."""
    write_metadata(tmp_path, third_party_metadata({
        "third-party": {
            "zeta": {"oncall": "a"},
            "mystery": {"oncall": "b"},
            "beta": {"owner": "c"},
        },
    }))
    return tmp_path


@pytest.fixture
def empty_dir(tmp_path: Path) -> Path:
    """A directory with neither a snapshot nor a lockfile."""
    return tmp_path
