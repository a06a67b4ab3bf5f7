"""``crateindex deps [DIR] --package NAME`` --- Show per-target resolved dependencies.

For every build target of the selected package, prints its resolved
dependencies with the merged platform guard under which each applies.

Exit Codes:
    0 --- Dependencies listed.
    2 --- Snapshot could not be indexed, or the package/target is unknown.
"""

from __future__ import annotations

import json
import sys

import click

from crateindex.cli.options import build_index, common_options, configure_logging, resolve_paths
from crateindex.core.index import ResolvedDep


def _dep_to_json(dep: ResolvedDep) -> dict:
    return {
        "name": dep.rename,
        "package": dep.package.id,
        "kind": dep.dep_kind.kind.value,
        "platform": dep.platform,
        "kind_platform": dep.dep_kind.target,
    }


@click.command("deps")
@common_options
@click.option("--package", "-p", "package_name", default=None,
              help="Package name (default: the root package).")
@click.option("--pkg-version", "package_version", default=None,
              help="Disambiguate when several versions of the package are resolved.")
@click.option("--target", "-t", "target_name", default=None,
              help="Only show this build target.")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def deps_command(
    directory: str,
    metadata_path: str | None,
    virtual_root: bool,
    verbose: bool,
    package_name: str | None,
    package_version: str | None,
    target_name: str | None,
    output_format: str,
) -> None:
    """Show resolved dependencies for each build target of a package."""
    configure_logging(verbose)
    index = build_index(resolve_paths(directory, metadata_path), virtual_root)

    if package_name is None:
        ref = index.root_ref
    else:
        candidates = [
            r for r in index.find_by_name(package_name)
            if package_version is None or index.manifest(r).version == package_version
        ]
        if len(candidates) != 1:
            what = "No" if not candidates else "Ambiguous"
            click.echo(f"Error: {what} package matching {package_name!r}", err=True)
            sys.exit(2)
        ref = candidates[0]

    pkg = index.manifest(ref)
    targets = [t for t in pkg.targets if target_name is None or t.name == target_name]
    if not targets:
        click.echo(f"Error: {pkg} has no target {target_name!r}", err=True)
        sys.exit(2)

    per_target = {t.name: index.resolved_deps_for_target(ref, t) for t in targets}

    if output_format == "json":
        click.echo(json.dumps(
            {name: [_dep_to_json(d) for d in deps] for name, deps in per_target.items()},
            indent=2,
        ))
    else:
        from crateindex.cli.output import print_target_deps
        for name, deps in per_target.items():
            print_target_deps(name, deps)
