"""
Mode injector CLI.

Commands:
- apply: sync a token document into the JSON variable store
- plan: show collection dependencies and processing order
- collections: list collections and modes in the store
- export: write the store back out as a collections document
- color: parse a single color value
"""

from __future__ import annotations

import asyncio
import json
import platform
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ._version import get_version
from .core import ir
from .core.batch import apply_mode_to_collection, list_collection_summaries, run_batch
from .core.color import parse_color
from .core.document_loader import load_document
from .core.errors import ColorParseError, InjectorError
from .core.exporter import export_document_file
from .core.graph import plan_collections
from .core.manifest import InjectorConfig, load_config
from .logging_config import setup_logging
from .store.json_file import JsonFileVariableStore

app = typer.Typer(
    help="""Mode injector – sync design-token collections into a variable store

  • apply: create/update collections, modes, and variables, then link aliases
  • plan: preview dependency order without touching the store
  • collections / export: inspect the store
""",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def _print(text: str) -> None:
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def _fail(message: str) -> typer.Exit:
    err_console.print(f"Error: {message}", markup=False, highlight=False, soft_wrap=True)
    return typer.Exit(code=1)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"mode-injector version {get_version()}")
        typer.echo(f"Python {platform.python_implementation()} {platform.python_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version information",
    ),
) -> None:
    """Mode injector CLI main callback for global options."""
    pass


def _setup(config_path: Path | None, verbose: bool) -> InjectorConfig:
    try:
        config = load_config(config_path)
    except InjectorError as e:
        raise _fail(e.message) from e
    setup_logging("DEBUG" if verbose else config.logging.level, config.log_dir)
    return config


def _open_store(config: InjectorConfig, store_path: Path | None) -> JsonFileVariableStore:
    try:
        return JsonFileVariableStore.load(store_path or config.store_path)
    except InjectorError as e:
        raise _fail(e.message) from e


# =============================================================================
# Commands
# =============================================================================


async def _apply_flat(
    store: JsonFileVariableStore,
    collection: str,
    mode: str,
    data: dict[str, ir.RawValue],
    *,
    strict_hex: bool,
) -> ir.SyncReport:
    """Resolve --collection as an id first, then as a name."""
    target = await store.get_collection_by_id(collection)
    if target is None:
        target = await store.get_collection_by_name(collection)
    collection_id = target.id if target is not None else collection
    return await apply_mode_to_collection(store, collection_id, mode, data, strict_hex=strict_hex)


@app.command(name="apply")
def apply_command(
    tokens: Path = typer.Argument(..., help="Token document (.json, .yaml, .yml)"),
    store_path: Path | None = typer.Option(None, "--store", "-s", help="Store snapshot file"),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Path to modeinjector.toml"
    ),
    collection: str | None = typer.Option(
        None, "--collection", help="Flat maps only: target collection id or name"
    ),
    mode: str | None = typer.Option(None, "--mode", "-m", help="Flat maps only: new mode name"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Run without saving the store"),
    verbose: bool = typer.Option(False, "--verbose", help="Log every assignment"),
) -> None:
    """
    Apply a token document to the store.

    A list of collections is materialized and linked in dependency
    order. A flat {name: value} map is added as a new mode of an existing
    collection (requires --collection and --mode).
    """
    config = _setup(config_path, verbose)
    try:
        document = load_document(tokens)
    except InjectorError as e:
        raise _fail(e.message) from e

    store = _open_store(config, store_path)
    strict_hex = config.colors.strict_hex

    if document.is_flat:
        if not collection or not mode:
            raise _fail("Flat token maps need --collection and --mode")
        report = asyncio.run(
            _apply_flat(store, collection, mode, document.flat or {}, strict_hex=strict_hex)
        )
    else:
        report = asyncio.run(run_batch(store, document.collections, strict_hex=strict_hex))

    _print(report.format_summary(config.report.error_limit))

    if report.aborted:
        _print("Store not saved.")
        raise typer.Exit(code=1)
    if dry_run:
        _print("Dry run: store not saved.")
        return
    try:
        saved = store.save()
    except InjectorError as e:
        raise _fail(e.message) from e
    _print(f"Saved {saved}")


@app.command(name="plan")
def plan_command(
    tokens: Path = typer.Argument(..., help="Token document (.json, .yaml, .yml)"),
) -> None:
    """Show cross-collection dependencies and the processing order."""
    try:
        document = load_document(tokens)
        if document.is_flat:
            raise _fail("plan needs a collections document, not a flat map")
        plan = plan_collections(document.collections)
    except InjectorError as e:
        raise _fail(e.message) from e

    table = Table(title="Processing order")
    table.add_column("#", justify="right")
    table.add_column("Collection")
    table.add_column("Depends on")
    for position, name in enumerate(plan.order, start=1):
        table.add_row(str(position), name, ", ".join(plan.graph.dependencies(name)) or "-")
    console.print(table)

    for source, target in plan.graph.dangling():
        _print(f"Warning: '{source}' references '{target}', which is not in this document")


@app.command(name="collections")
def collections_command(
    store_path: Path | None = typer.Option(None, "--store", "-s", help="Store snapshot file"),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Path to modeinjector.toml"
    ),
) -> None:
    """List collections and their modes."""
    config = _setup(config_path, verbose=False)
    store = _open_store(config, store_path)
    summaries = asyncio.run(list_collection_summaries(store))

    if not summaries:
        _print("No collections.")
        return

    table = Table(title="Collections")
    table.add_column("Id")
    table.add_column("Name")
    table.add_column("Modes")
    for summary in summaries:
        table.add_row(
            summary["id"],
            summary["name"],
            ", ".join(mode["name"] for mode in summary["modes"]),
        )
    console.print(table)


@app.command(name="export")
def export_command(
    output: Path = typer.Option(Path("tokens.json"), "--output", "-o", help="Output file"),
    store_path: Path | None = typer.Option(None, "--store", "-s", help="Store snapshot file"),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Path to modeinjector.toml"
    ),
) -> None:
    """Export the store as a collections document."""
    config = _setup(config_path, verbose=False)
    store = _open_store(config, store_path)
    written = asyncio.run(export_document_file(store, output))
    _print(f"Exported to {written}")


@app.command(name="color")
def color_command(
    value: str = typer.Argument(..., help="Color string: #hex, rgb()/rgba(), or oklch()"),
    strict: bool = typer.Option(False, "--strict", help="Reject malformed hex"),
) -> None:
    """Parse a color value and print its RGBA channels."""
    try:
        color = parse_color(value, strict_hex=strict)
    except ColorParseError as e:
        raise _fail(e.message) from e
    if color is None:
        _print(f"not a color: {value}")
        raise typer.Exit(code=1)
    _print(json.dumps(color.model_dump()))


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


if __name__ == "__main__":
    main(sys.argv[1:])
