"""Table FSM CLI tool.

This module provides a command-line interface for:
- Validating machine description files
- Showing the rows of a machine's tables
- Running a machine on text or file input
"""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .. import __version__
from ..config.builder import TableBuilder
from ..config.loader import ConfigLoader
from ..config.schema import MachineConfig
from ..core.context import ContextIsolation, SnapshotContext
from ..core.cursor import Cursor
from ..core.engine import TableEngine
from ..core.exceptions import TableFSMError
from ..core.machine import Machine
from ..core.transition import CharacterOf, ExactString, Function, NestedTable, Transition
from ..observability import RunTrace

console = Console()


def _load(config_file: str) -> tuple[MachineConfig, Machine]:
    try:
        config = ConfigLoader().load_from_file(config_file)
        return config, TableBuilder().build(config)
    except (TableFSMError, FileNotFoundError) as e:
        console.print(f"[red]Error loading configuration: {escape(str(e))}[/red]")
        if isinstance(e, TableFSMError):
            for error in e.context.get("errors", []):
                location = ".".join(str(part) for part in error.get("loc", ()))
                console.print(f"  {escape(location)}: {escape(error.get('msg', ''))}")
        sys.exit(1)


def _describe_match(transition: Transition) -> str:
    match = transition.match
    if isinstance(match, ExactString):
        return repr(match.literal)
    if isinstance(match, CharacterOf):
        return f"one of {match.chars!r}"
    if isinstance(match, Function):
        return match.display_name
    if isinstance(match, NestedTable):
        return f"table {getattr(match.table, 'name', None)}"
    return "-"


@click.group()
@click.version_option(version=__version__)
def cli():
    """Table FSM CLI - run table-driven state machines over input"""
    pass


@cli.command()
@click.argument('config_file', type=click.Path(exists=True))
@click.option('--verbose', '-v', is_flag=True, help='Show detailed validation output')
def validate(config_file: str, verbose: bool):
    """Validate a machine description file"""
    config, machine = _load(config_file)

    console.print("[green]✓[/green] Configuration is valid!")

    if verbose:
        console.print("\n[bold]Configuration Details:[/bold]")
        console.print(f"  Name: {escape(config.name)}")
        console.print(f"  Version: {escape(config.version)}")
        console.print(f"  Entry table: {escape(machine.main)}")
        console.print(f"  Tables: {len(machine.tables)}")
        for name, table in machine.tables.items():
            console.print(f"    {escape(name)}: {len(table)} transition(s)")


@cli.command()
@click.argument('config_file', type=click.Path(exists=True))
@click.option('--table', '-t', 'table_name', help='Only show this table')
def show(config_file: str, table_name: str | None):
    """Show the transitions of a machine's tables"""
    _, machine = _load(config_file)

    names = [table_name] if table_name else list(machine.tables)
    for name in names:
        if name not in machine.tables:
            console.print(f"[red]Table '{escape(name)}' not found[/red]")
            sys.exit(1)

        rows = Table(title=f"{name}{' (entry)' if name == machine.main else ''}")
        rows.add_column("#", justify="right")
        rows.add_column("State", justify="right")
        rows.add_column("Match")
        rows.add_column("Argument")
        rows.add_column("Success", justify="right")
        rows.add_column("Failure", justify="right")
        rows.add_column("Type")
        rows.add_column("Side effect")
        rows.add_column("Label")

        for index, transition in enumerate(machine.tables[name]):
            side_effect = transition.side_effect
            rows.add_row(
                str(index),
                str(transition.current_state),
                transition.match_kind.value if transition.match_kind else "-",
                escape(_describe_match(transition)),
                str(transition.success_state),
                str(transition.failure_state) if transition.failure_state >= 0 else "-",
                transition.state_type.value,
                escape(getattr(side_effect, "__name__", "-")) if side_effect else "-",
                escape(transition.label or ""),
            )
        console.print(rows)


@cli.command()
@click.argument('config_file', type=click.Path(exists=True))
@click.option('--input', '-i', 'input_text', help='Input text (encoded with the machine encoding)')
@click.option('--file', '-f', 'input_file', type=click.Path(exists=True), help='Input file (read as bytes)')
@click.option('--table', '-t', 'table_name', help='Run this table instead of the entry table')
@click.option('--trace', is_flag=True, help='Show every fired transition')
@click.option('--isolation', type=click.Choice(['shared', 'snapshot']), default='shared',
              help='Context isolation for failed attempts')
@click.option('--max-transitions', type=int, help='Fail a run that needs more than this many transitions')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def run(
    config_file: str,
    input_text: str | None,
    input_file: str | None,
    table_name: str | None,
    trace: bool,
    isolation: str,
    max_transitions: int | None,
    verbose: bool,
):
    """Run a machine on input"""
    if (input_text is None) == (input_file is None):
        console.print("[red]Provide exactly one of --input or --file[/red]")
        sys.exit(2)

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )

    config, machine = _load(config_file)

    if input_file is not None:
        data = Path(input_file).read_bytes()
    else:
        data = input_text.encode(config.encoding)

    engine = TableEngine(
        isolation=ContextIsolation(isolation),
        max_transitions=max_transitions,
    )
    run_trace = RunTrace()
    if trace:
        engine.add_transition_hook(run_trace)

    cursor = Cursor(data)
    context = SnapshotContext()
    try:
        result = machine.run(cursor, context, table=table_name, engine=engine)
    except TableFSMError as e:
        console.print(f"[red]Run failed: {escape(str(e))}[/red]")
        sys.exit(1)

    if result.success:
        console.print(f"[green]✓[/green] Accepted {result.consumed} byte(s)")
    else:
        console.print(f"[red]✗[/red] Rejected after {result.consumed} byte(s)")
    if not cursor.at_end():
        console.print(f"  Remaining: {escape(repr(cursor.remaining))}")

    tokens = context.get("tokens", [])
    if tokens:
        token_table = Table(title="Tokens")
        token_table.add_column("Kind")
        token_table.add_column("Text")
        token_table.add_column("Span", justify="right")
        for token in tokens:
            token_table.add_row(
                escape(str(token.kind)),
                escape(repr(token.text)),
                f"{token.start}-{token.end}",
            )
        console.print(token_table)

    if trace:
        trace_table = Table(title="Transitions")
        trace_table.add_column("Depth", justify="right")
        trace_table.add_column("From", justify="right")
        trace_table.add_column("To", justify="right")
        trace_table.add_column("Label")
        trace_table.add_column("Kind")
        trace_table.add_column("Consumed", justify="right")
        for record in run_trace.records:
            trace_table.add_row(
                str(record.depth),
                str(record.from_state),
                str(record.to_state),
                escape(record.label),
                record.match_kind.value if record.match_kind else "-",
                str(record.consumed),
            )
        console.print(trace_table)

    sys.exit(0 if result.success else 1)


def main():
    cli()


if __name__ == '__main__':
    main()
