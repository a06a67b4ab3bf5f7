"""Shared click options and index construction for CLI commands."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from crateindex.config import IndexConfig, Paths
from crateindex.core.index import Index
from crateindex.exceptions import MetadataError


def common_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the input-location and index options every command takes."""
    func = click.option(
        "--verbose", "-v",
        is_flag=True,
        default=False,
        help="Enable debug logging.",
    )(func)
    func = click.option(
        "--virtual-root",
        is_flag=True,
        envvar="CRATEINDEX_VIRTUAL_ROOT",
        default=False,
        help="Treat the root package as a virtual umbrella with no public targets.",
    )(func)
    func = click.option(
        "--metadata", "metadata_path",
        type=click.Path(dir_okay=False),
        envvar="CRATEINDEX_METADATA",
        default=None,
        help="cargo metadata JSON (default: <dir>/metadata.json).",
    )(func)
    func = click.argument(
        "directory",
        type=click.Path(exists=True, file_okay=False),
        default=".",
    )(func)
    return func


def resolve_paths(
    directory: str, metadata_path: str | None, lockfile_path: str | None = None
) -> Paths:
    """Apply explicit overrides on top of the directory defaults."""
    defaults = Paths.for_directory(Path(directory))
    return Paths(
        metadata_path=Path(metadata_path) if metadata_path else defaults.metadata_path,
        lockfile_path=Path(lockfile_path) if lockfile_path else defaults.lockfile_path,
    )


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def build_index(paths: Paths, virtual_root: bool) -> Index:
    """Load the snapshot and build the index, exiting with code 2 on failure."""
    config = IndexConfig(root_is_real=not virtual_root)
    try:
        return Index.from_path(paths.metadata_path, config)
    except MetadataError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)
