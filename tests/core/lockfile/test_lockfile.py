"""Tests for Cargo.lock loading, ordering, and exact-match lookup."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
import semantic_version

from crateindex.cargo import Manifest, PackageId
from crateindex.core.lockfile import Lockfile, LockfilePackage, lock_key
from crateindex.exceptions import LockfileError
from tests.helpers import REGISTRY

GIT = "git+https://github.com/example/forked?branch=main#0123456789abcdef"

LOCKFILE = f"""\
# This file is automatically @generated by Cargo.
# It is not intended for manual editing.
version = 3

[[package]]
name = "serde"
version = "1.0.190"
source = "{REGISTRY}"
checksum = "91d3c334ca1ee894a2c6f6ad698fe8c435b76d504b13d436f0685d648d6d96f7"
dependencies = [
 "serde_derive",
]

[[package]]
name = "rust-third-party"
version = "0.0.0"

[[package]]
name = "rand"
version = "0.8.5"
source = "{REGISTRY}"
checksum = "34af8d1a0e25924bc5b7c43c079c942339d8f0a8b57c39049bef581b46327404"

[[package]]
name = "rand"
version = "0.7.3"
source = "{REGISTRY}"
checksum = "6a6b1679d49b24bbfe0c803429aa1874472f50d9b363131f0e89fc356b544d03"

[[package]]
name = "rand"
version = "0.8.5"
source = "{GIT}"

[[package]]
name = "serde_derive"
version = "1.0.190"
source = "{REGISTRY}"
checksum = "67c5609f394e5c2bd7fc51efda478004ea80ef42fee983d5c67a65e34f32c0e3"
"""


def _manifest(name: str, version: str, source: str | None = REGISTRY) -> Manifest:
    return Manifest(id=PackageId(f"{name}@{version}"), name=name, version=version, source=source)


@pytest.fixture
def lockfile() -> Lockfile:
    return Lockfile.from_toml(LOCKFILE)


class TestLoad:
    """Decoding and sorting."""

    def test_entries_decoded(self, lockfile: Lockfile) -> None:
        assert len(lockfile) == 6
        assert lockfile.version == 3

    def test_sorted_by_name_version_source(self, lockfile: Lockfile) -> None:
        order = [(p.name, str(p.version), p.source) for p in lockfile]
        assert order == [
            ("rand", "0.7.3", REGISTRY),
            ("rand", "0.8.5", GIT),
            ("rand", "0.8.5", REGISTRY),
            ("rust-third-party", "0.0.0", None),
            ("serde", "1.0.190", REGISTRY),
            ("serde_derive", "1.0.190", REGISTRY),
        ]

    def test_versions_parsed_as_semver(self, lockfile: Lockfile) -> None:
        assert lockfile.packages[0].version == semantic_version.Version("0.7.3")
        serde = lockfile.packages[4]
        assert serde.dependencies == ("serde_derive",)

    def test_load_from_disk(self, tmp_path: Path) -> None:
        path = tmp_path / "Cargo.lock"
        path.write_text(LOCKFILE, encoding="utf-8")
        assert len(Lockfile.load(path)) == 6

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(LockfileError, match="Failed to load"):
            Lockfile.load(tmp_path / "Cargo.lock")

    def test_invalid_toml_names_path(self, tmp_path: Path) -> None:
        path = tmp_path / "Cargo.lock"
        path.write_text("version = = 3\n", encoding="utf-8")
        with pytest.raises(LockfileError, match="Failed to parse"):
            Lockfile.load(path)

    def test_entry_missing_version(self) -> None:
        with pytest.raises(LockfileError, match="missing field"):
            Lockfile.from_toml('version = 3\n[[package]]\nname = "x"\n')

    def test_entry_invalid_version(self) -> None:
        with pytest.raises(LockfileError, match="invalid lockfile package"):
            Lockfile.from_toml('version = 3\n[[package]]\nname = "x"\nversion = "one"\n')

    def test_non_integer_schema_version(self) -> None:
        with pytest.raises(LockfileError, match="must be an integer"):
            Lockfile.from_toml('version = "3"\n')


class TestSchemaVersion:
    """Unexpected schema versions only warn."""

    def test_version_3_is_silent(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            Lockfile.from_toml(LOCKFILE)
        assert "Unrecognized Cargo.lock format version" not in caplog.text

    @pytest.mark.parametrize("version", [1, 2, 4])
    def test_other_versions_warn_and_load(
        self, version: int, caplog: pytest.LogCaptureFixture
    ) -> None:
        text = LOCKFILE.replace("version = 3", f"version = {version}")
        with caplog.at_level(logging.WARNING):
            lockfile = Lockfile.from_toml(text)
        assert f"Unrecognized Cargo.lock format version: {version}" in caplog.text
        assert len(lockfile) == 6
        assert lockfile.find(_manifest("serde", "1.0.190")) is not None

    def test_missing_version_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            lockfile = Lockfile.from_toml('[[package]]\nname = "x"\nversion = "1.0.0"\n')
        assert "Unrecognized Cargo.lock format version: None" in caplog.text
        assert lockfile.version is None


class TestFind:
    """Exact-match lookup."""

    def test_exact_match(self, lockfile: Lockfile) -> None:
        entry = lockfile.find(_manifest("serde", "1.0.190"))
        assert entry is not None
        assert entry.checksum.startswith("91d3c334")

    def test_source_distinguishes_entries(self, lockfile: Lockfile) -> None:
        git = lockfile.find(_manifest("rand", "0.8.5", GIT))
        registry = lockfile.find(_manifest("rand", "0.8.5"))
        assert git is not None and git.checksum is None
        assert registry is not None and registry.checksum is not None

    def test_path_package_without_source(self, lockfile: Lockfile) -> None:
        entry = lockfile.find(_manifest("rust-third-party", "0.0.0", None))
        assert entry is not None
        assert entry.source is None

    @pytest.mark.parametrize(
        "name,version,source",
        [
            ("serde", "1.0.191", REGISTRY),
            ("serde", "1.0.190", None),
            ("serde", "1.0.190", GIT),
            ("rand", "0.8.4", REGISTRY),
            ("ser", "1.0.190", REGISTRY),
            ("zzz", "9.9.9", REGISTRY),
            ("aaa", "0.0.1", REGISTRY),
        ],
    )
    def test_no_partial_match(
        self, lockfile: Lockfile, name: str, version: str, source: str | None
    ) -> None:
        assert lockfile.find(_manifest(name, version, source)) is None

    def test_checksum_for(self, lockfile: Lockfile) -> None:
        assert lockfile.checksum_for(_manifest("rand", "0.7.3")).startswith("6a6b1679")
        assert lockfile.checksum_for(_manifest("rand", "0.7.4")) is None

    def test_empty_lockfile(self) -> None:
        assert Lockfile.from_toml("version = 3\n").find(_manifest("serde", "1.0.0")) is None

    @pytest.mark.parametrize("version", ["1.0", "latest", ""])
    def test_non_semver_manifest_version_matches_nothing(
        self, lockfile: Lockfile, version: str
    ) -> None:
        assert lockfile.find(_manifest("serde", version)) is None
        assert lockfile.checksum_for(_manifest("serde", version)) is None


class TestOrdering:
    """The (name, version, source) key."""

    def test_prerelease_before_release(self) -> None:
        pre = lock_key("x", semantic_version.Version("1.0.0-alpha.1"), None)
        rel = lock_key("x", semantic_version.Version("1.0.0"), None)
        assert pre < rel

    def test_numeric_prerelease_identifiers(self) -> None:
        two = lock_key("x", semantic_version.Version("1.0.0-rc.2"), None)
        ten = lock_key("x", semantic_version.Version("1.0.0-rc.10"), None)
        assert two < ten

    def test_build_metadata_distinguishes(self) -> None:
        """Versions differing only in build metadata are distinct entries."""
        lockfile = Lockfile(3, [
            LockfilePackage("x", semantic_version.Version("1.0.0+b"), REGISTRY),
            LockfilePackage("x", semantic_version.Version("1.0.0+a"), REGISTRY),
        ])
        assert [str(p.version) for p in lockfile] == ["1.0.0+a", "1.0.0+b"]
        assert str(lockfile.find(_manifest("x", "1.0.0+b")).version) == "1.0.0+b"

    def test_no_source_sorts_first(self) -> None:
        local = lock_key("x", semantic_version.Version("1.0.0"), None)
        remote = lock_key("x", semantic_version.Version("1.0.0"), "a")
        assert local < remote
