"""Rich output formatting helpers for the crateindex CLI."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from crateindex.cargo.models import TargetReq
from crateindex.core.index import ExtraMetadataReport, Index, ResolvedDep

console = Console()


def print_public_packages(index: Index) -> None:
    """Print a table of public packages and their rule names.

    Args:
        index: The built index.
    """
    table = Table(title="Public Packages", show_header=True, header_style="bold")
    table.add_column("Package", style="bold")
    table.add_column("Version", style="dim")
    table.add_column("Public Name")
    table.add_column("Private Name", style="dim")
    table.add_column("Lib", justify="center")
    table.add_column("Bins", justify="center")

    public = [ref for ref in index.all_packages() if index.is_public_package(ref)]
    for ref in sorted(public, key=lambda r: index.private_rule_name(r)):
        pkg = index.manifest(ref)
        table.add_row(
            pkg.name,
            pkg.version,
            index.public_rule_name(ref),
            index.private_rule_name(ref),
            _mark(index.is_public_target(ref, TargetReq.LIB)),
            _mark(index.is_public_target(ref, TargetReq.EVERY_BIN)),
        )

    console.print(table)
    console.print(
        f"[bold]{len(public)}[/bold] public of "
        f"{len(index.all_packages())} packages"
    )


def _mark(flag: bool) -> Text:
    return Text("yes", style="green") if flag else Text("-", style="dim")


def print_target_deps(target_name: str, deps: list[ResolvedDep]) -> None:
    """Print the resolved dependencies of one build target."""
    table = Table(title=f"Target: {target_name}", show_header=True)
    table.add_column("Name", style="bold")
    table.add_column("Package")
    table.add_column("Kind", justify="center")
    table.add_column("Platform", style="cyan")
    for dep in deps:
        table.add_row(
            dep.rename,
            str(dep.package),
            dep.dep_kind.kind.value,
            dep.platform or "-",
        )
    console.print(table)


def print_owners(report: ExtraMetadataReport) -> None:
    """Print the ownership table, or its validation problems."""
    if report.success:
        table = Table(title="Package Owners", show_header=True)
        table.add_column("Package", style="bold")
        table.add_column("Oncall")
        for name in sorted(report.owners):
            table.add_row(name, report.owners[name].oncall)
        console.print(table)
        return

    console.print(Panel("[bold red]Ownership metadata invalid[/bold red]", title="Owners"))
    for name in report.unknown:
        console.print(f"  [red]- no direct dependency named {name}[/red]")
    for problem in report.malformed:
        console.print(f"  [red]- {problem}[/red]")

