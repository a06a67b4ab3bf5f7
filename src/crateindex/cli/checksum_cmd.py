"""``crateindex checksum [DIR]`` --- Look up lockfile checksums for every package.

Matches each package of the snapshot against ``Cargo.lock`` by exact
(name, version, source). Local path packages have no source and are not
expected to carry a checksum.

Exit Codes:
    0 --- Every sourced package was found in the lockfile.
    1 --- At least one sourced package is missing from the lockfile.
    2 --- The snapshot or the lockfile could not be loaded.
"""

from __future__ import annotations

import json
import sys

import click

from crateindex.cli.options import build_index, common_options, configure_logging, resolve_paths
from crateindex.core.lockfile import Lockfile
from crateindex.exceptions import LockfileError


@click.command("checksum")
@common_options
@click.option(
    "--lockfile", "lockfile_path",
    type=click.Path(dir_okay=False),
    envvar="CRATEINDEX_LOCKFILE",
    default=None,
    help="Cargo.lock to read (default: <dir>/Cargo.lock).",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def checksum_command(
    directory: str,
    metadata_path: str | None,
    virtual_root: bool,
    verbose: bool,
    lockfile_path: str | None,
    output_format: str,
) -> None:
    """Report the lockfile checksum of every package in the snapshot."""
    configure_logging(verbose)
    paths = resolve_paths(directory, metadata_path, lockfile_path)
    index = build_index(paths, virtual_root)
    try:
        lockfile = Lockfile.load(paths.lockfile_path)
    except LockfileError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    rows = []
    missing = []
    for ref in index.all_packages():
        pkg = index.manifest(ref)
        entry = lockfile.find(pkg)
        if entry is None and pkg.source is not None:
            missing.append(str(pkg))
        rows.append({
            "package": str(pkg),
            "source": pkg.source,
            "checksum": entry.checksum if entry is not None else None,
            "locked": entry is not None,
        })
    rows.sort(key=lambda r: r["package"])

    if output_format == "json":
        click.echo(json.dumps({"packages": rows, "missing": sorted(missing)}, indent=2))
    else:
        from crateindex.cli.output import console
        for row in rows:
            if row["checksum"]:
                status = row["checksum"]
            elif row["locked"]:
                status = "[dim]no checksum[/dim]"
            else:
                status = "[red]not locked[/red]"
            console.print(f"{row['package']}  {status}")
        if missing:
            console.print(f"[red]{len(missing)} package(s) missing from the lockfile[/red]")

    sys.exit(1 if missing else 0)
