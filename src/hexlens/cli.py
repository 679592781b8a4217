"""Command-line interface for hexlens."""

import sys
import importlib
import importlib.util
from pathlib import Path
from collections.abc import Callable
from typing import Any

import click
from rich.console import Console
from rich.table import Table
from rich.markup import escape

from hexlens.errors import HexlensError

console = Console()

# Module name prefix for layout files loaded by path
LAYOUT_MODULE_PREFIX = "hexlens_layout_"


def resolve_layout(ref: str) -> tuple[str, Any]:
    """Resolve ``[prefix=]module:Name`` to a name prefix and a layout object.

    ``module`` is a dotted import path or a path to a ``.py`` file. The prefix
    defaults to ``Name``.
    """
    prefix, sep, target = ref.partition("=")
    if not sep:
        prefix, target = "", ref

    module_ref, sep, attr = target.rpartition(":")
    if not sep or not module_ref or not attr:
        raise click.BadParameter(f"Expected module:Name, got {ref!r}")

    if module_ref.endswith(".py"):
        path = Path(module_ref)
        spec = importlib.util.spec_from_file_location(f"{LAYOUT_MODULE_PREFIX}{path.stem}", path)
        if spec is None or spec.loader is None:
            raise click.BadParameter(f"Cannot load layout module {module_ref!r}")
        module = importlib.util.module_from_spec(spec)
        # Registered before exec so dataclasses can resolve the module
        sys.modules[spec.name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            del sys.modules[spec.name]
            raise click.BadParameter(f"Cannot load layout module {module_ref!r}: {e}") from e
    else:
        try:
            module = importlib.import_module(module_ref)
        except ImportError as e:
            raise click.BadParameter(f"Cannot import {module_ref!r}: {e}") from e

    obj: Any = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise click.BadParameter(f"{module_ref!r} has no attribute {attr!r}") from None

    return prefix or attr, obj


def _open_reader(binary: str, layouts: tuple[str, ...], endian: str, offset: str, color: bool):
    """Marshal every layout in order and return the reader."""
    from hexlens import DumpStyle, ByteOrder, AnnotatingReader

    resolved = [resolve_layout(ref) for ref in layouts]

    data = Path(binary).read_bytes()
    reader = AnnotatingReader(data, ByteOrder.parse(endian), style=DumpStyle(color=color))

    try:
        start = int(offset, 0)
    except ValueError:
        raise click.BadParameter(f"Invalid offset: {offset}") from None
    reader.seek(start)

    for prefix, layout in resolved:
        reader.marshal(layout, prefix)

    return reader


def reader_options(func: Callable) -> Callable:
    """Options shared by every command that marshals a file."""
    func = click.option("--no-color", is_flag=True, help="Disable colored output")(func)
    func = click.option("-o", "--offset", default="0", help="Start offset (e.g. 0x100)")(func)
    func = click.option(
        "-e",
        "--endian",
        type=click.Choice(["little", "big"]),
        default="little",
        help="Byte order of multi-byte scalars",
    )(func)
    func = click.option(
        "-l",
        "--layout",
        "layouts",
        multiple=True,
        required=True,
        help="Layout to marshal, as [prefix=]module:Name (repeatable)",
    )(func)
    func = click.argument("binary", type=click.Path(exists=True, dir_okay=False))(func)
    return func


@click.group()
@click.version_option(version="0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool) -> None:
    """hexlens - annotated hex dumps of binary records."""
    if verbose:
        from hexlens import enable_logging

        enable_logging("DEBUG")


@main.command()
@reader_options
def dump(binary: str, layouts: tuple[str, ...], endian: str, offset: str, no_color: bool) -> None:
    """Print an annotated hex dump."""
    try:
        reader = _open_reader(binary, layouts, endian, offset, not no_color)
        click.echo(reader.dump())
    except HexlensError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)


@main.command()
@reader_options
def fields(binary: str, layouts: tuple[str, ...], endian: str, offset: str, no_color: bool) -> None:
    """List annotated fields."""
    try:
        reader = _open_reader(binary, layouts, endian, offset, not no_color)
    except HexlensError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)

    table = Table(title="Fields")
    table.add_column("Offset", style="green")
    table.add_column("Size")
    table.add_column("Type", style="cyan")
    table.add_column("Name")
    table.add_column("Value")

    for ann in reader.store:
        table.add_row(
            f"{ann.offset:#010x}",
            str(ann.size),
            str(ann.field_type),
            ann.name,
            "" if ann.value is None else str(ann.value),
        )

    console.print(table)
    console.print(f"\nTotal: {len(reader.store)} fields, {reader.store.total_size()} bytes")

    for start, end in reader.store.gaps():
        console.print(f"[yellow]Unannotated: {start:#x}-{end:#x} ({end - start} bytes)[/yellow]")


@main.command()
@reader_options
def export(binary: str, layouts: tuple[str, ...], endian: str, offset: str, no_color: bool) -> None:
    """Print the annotation table as JSON."""
    try:
        reader = _open_reader(binary, layouts, endian, offset, False)
    except HexlensError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)

    click.echo(reader.store.to_json())


if __name__ == "__main__":
    main()
