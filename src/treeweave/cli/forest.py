"""Commands that assemble record files into forests."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from treeweave.exceptions import CyclicParentageError, InvalidInputError
from treeweave.records import Record, load_records
from treeweave.tree import ForestAssemblyResult, ForestBuilder, ForestValidator, TreeNode
from treeweave.utils.logging import logging_context

from .common import CLIError, console, get_state, resolve_path


def _label(node: TreeNode) -> str:
    record = node.payload
    if isinstance(record, Record) and record.label:
        return f"{escape(record.label)} [dim]({escape(str(record.id))})[/dim]"
    if isinstance(record, Record):
        return escape(str(record.id))
    return escape(repr(record))


def _graft(branch: Tree, node: TreeNode, *, depth: int, max_depth: Optional[int]) -> None:
    for child in node.children:
        sub = branch.add(_label(child))
        if max_depth is not None and depth + 1 >= max_depth:
            if child.children:
                sub.add(f"[dim]... {len(child.children)} more[/dim]")
            continue
        _graft(sub, child, depth=depth + 1, max_depth=max_depth)


def render_forest(roots: List[TreeNode], *, title: str, max_depth: Optional[int] = None) -> Tree:
    """Build a Rich tree with one branch per root."""

    tree = Tree(f"[bold]{title}[/bold]")
    for root in roots:
        branch = tree.add(f"[cyan]{_label(root)}[/cyan]")
        if max_depth is None or max_depth > 0:
            _graft(branch, root, depth=0, max_depth=max_depth)
    return tree


def _assemble(ctx: typer.Context, path: Path, *, step: str) -> ForestAssemblyResult:
    state = get_state(ctx)
    source = resolve_path(path)
    try:
        with logging_context(step=step):
            records = load_records(source)
            return ForestBuilder(state.settings.policies.forest_assembly).run(records)
    except CyclicParentageError as exc:
        raise CLIError(str(exc)) from exc
    except InvalidInputError as exc:
        raise CLIError(str(exc)) from exc


def _record_id(result: ForestAssemblyResult, index: int) -> str:
    payload = result.nodes[index].payload
    return str(payload.id) if isinstance(payload, Record) else str(index)


def show_command(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="JSON, JSON Lines or YAML file of records."),
    max_depth: Optional[int] = typer.Option(
        None,
        "--max-depth",
        min=0,
        help="Stop rendering below this depth.",
    ),
) -> None:
    """Render the forest implied by a record file."""

    result = _assemble(ctx, path, step="show")
    console.print(render_forest(result.roots, title=path.name, max_depth=max_depth))
    for cycle in result.cycles:
        members = " -> ".join(_record_id(result, index) for index in cycle)
        console.print(f"[yellow]Cycle left out of the forest:[/yellow] {members}")


def validate_command(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="JSON, JSON Lines or YAML file of records."),
) -> None:
    """Check the forest for broken links, cycles and unreachable records."""

    result = _assemble(ctx, path, step="validate")
    report = ForestValidator().run(result.nodes)
    stats = result.statistics()

    table = Table(title=f"Forest: {path.name}", box=None)
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    for key in ("node_count", "root_count", "edge_count", "max_depth", "cycle_count", "unreachable_count"):
        table.add_row(key.replace("_", " ").title(), str(stats[key]))
    table.add_row("Violations", str(len(report.violations)))
    console.print(table)

    for violation in report.violations:
        console.print(f"[red]{violation['code']}[/red] {violation['detail']}")

    if not report.passed:
        raise typer.Exit(code=1)
    console.print("[green]Forest is well formed.[/green]")


__all__ = ["render_forest", "show_command", "validate_command"]
