"""``crateindex owners [DIR]`` --- Validate and show the ownership table.

Exit Codes:
    0 --- Every entry names a direct dependency of the root.
    1 --- One or more entries are unknown or malformed.
    2 --- The metadata snapshot could not be loaded or indexed.
"""

from __future__ import annotations

import json
import sys

import click

from crateindex.cli.options import build_index, common_options, configure_logging, resolve_paths


@click.command("owners")
@common_options
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def owners_command(
    directory: str,
    metadata_path: str | None,
    virtual_root: bool,
    verbose: bool,
    output_format: str,
) -> None:
    """Validate the root's ownership metadata against its dependencies.

    Every problem is reported at once. Exit code 1 if any entry is invalid.
    """
    configure_logging(verbose)
    index = build_index(resolve_paths(directory, metadata_path), virtual_root)
    report = index.get_extra_meta()

    if output_format == "json":
        click.echo(json.dumps({
            "success": report.success,
            "owners": {name: meta.oncall for name, meta in sorted(report.owners.items())},
            "unknown": report.unknown,
            "malformed": report.malformed,
        }, indent=2))
    else:
        from crateindex.cli.output import print_owners
        print_owners(report)

    sys.exit(0 if report.success else 1)
