"""``crateindex public [DIR]`` --- List the public packages and their rule names.

Exit Codes:
    0 --- Index built and listed.
    2 --- The metadata snapshot could not be loaded or indexed.
"""

from __future__ import annotations

import json

import click

from crateindex.cargo.models import TargetReq
from crateindex.cli.options import build_index, common_options, configure_logging, resolve_paths
from crateindex.core.index import Index


def _public_to_json(index: Index) -> list[dict]:
    entries = []
    for ref in index.all_packages():
        if not index.is_public_package(ref):
            continue
        pkg = index.manifest(ref)
        entries.append({
            "id": pkg.id,
            "name": pkg.name,
            "version": pkg.version,
            "public_name": index.public_rule_name(ref),
            "private_name": index.private_rule_name(ref),
            "lib": index.is_public_target(ref, TargetReq.LIB),
            "bins": index.is_public_target(ref, TargetReq.EVERY_BIN),
            "root": index.is_root_package(ref),
        })
    return sorted(entries, key=lambda e: e["private_name"])


@click.command("public")
@common_options
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def public_command(
    directory: str,
    metadata_path: str | None,
    virtual_root: bool,
    verbose: bool,
    output_format: str,
) -> None:
    """List packages with at least one public target.

    Public packages are the root's first-order dependencies, plus the root
    itself unless --virtual-root is given.
    """
    configure_logging(verbose)
    index = build_index(resolve_paths(directory, metadata_path), virtual_root)

    if output_format == "json":
        click.echo(json.dumps(_public_to_json(index), indent=2))
    else:
        from crateindex.cli.output import print_public_packages
        print_public_packages(index)
