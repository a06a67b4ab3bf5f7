"""crateindex CLI --- Inspect the index built from a Cargo metadata snapshot.

Entry point for the ``crateindex`` command-line tool. Registers all
subcommands under a single Click group. Each command reads
``<dir>/metadata.json`` (the output of ``cargo metadata
--format-version=1``) unless ``--metadata`` points elsewhere.

Commands:
    public    --- List public packages and their rule names.
    deps      --- Show per-target resolved dependencies of a package.
    owners    --- Validate the root's ownership metadata.
    checksum  --- Look up Cargo.lock checksums for every package.

Usage::

    crateindex public third-party/
    crateindex deps third-party/ --package serde --format json
    crateindex owners third-party/
    crateindex checksum third-party/ --lockfile third-party/Cargo.lock
"""

from __future__ import annotations

import click

from crateindex import __version__
from crateindex.cli.checksum_cmd import checksum_command
from crateindex.cli.deps_cmd import deps_command
from crateindex.cli.owners_cmd import owners_command
from crateindex.cli.public_cmd import public_command


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """crateindex: query resolved Cargo metadata for build rule generation."""


cli.add_command(public_command)
cli.add_command(deps_command)
cli.add_command(owners_command)
cli.add_command(checksum_command)
