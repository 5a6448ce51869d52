"""Command-line interface for quill code generation."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from quill.generator import python
from quill.generator.classifier import wire_type_of
from quill.generator.instructions import Attribute, Name, walk
from quill.generator.schema import SchemaError, load_schema
from quill.generator.synthesizer import get_write_body
from quill.generator.types import GenerationError, type_name

if TYPE_CHECKING:
    from quill.generator.schema import Schema

logger = logging.getLogger("quill")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(console=Console(stderr=True), show_path=verbose)
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)


def _load(input_file: str, namespace: str | None = None) -> Schema:
    with open(input_file, encoding="utf-8") as f:
        text = f.read()
    return load_schema(text, namespace)


def _fail(message: str) -> None:
    Console(stderr=True).print(f"[bold red]error:[/bold red] {escape(message)}")
    sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Quill write-path code generator."""
    _setup_logging(verbose)


@cli.command()
@click.option("--language", "-l", default="python", help="Target language (python)")
@click.option("--input", "-i", "input_file", required=True, help="Resolved schema (JSON)")
@click.option("--output", "-o", "output_file", required=True, help="Output file")
@click.option(
    "--runtime-import",
    "runtime_import",
    is_flag=False,
    flag_value="quill.proto",
    default=None,
    help="Import path for runtime. No value=quill.proto, omit=quill_runtime",
)
@click.option("--namespace", "-n", default=None, help="Override the schema namespace")
def gen(
    language: str,
    input_file: str,
    output_file: str,
    runtime_import: str | None,
    namespace: str | None,
) -> None:
    """Generate serialization code from a resolved schema."""
    if language != "python":
        print(f"Unknown language: {language}")
        sys.exit(1)

    try:
        schema = _load(input_file, namespace)
        import_path = runtime_import if runtime_import is not None else "quill_runtime"
        generated_file = python.render(schema, runtime_import=import_path)
    except (GenerationError, SchemaError) as e:
        logger.debug("Generation failed", exc_info=True)
        _fail(str(e))
        return

    with open(output_file, "w", encoding="utf-8") as f:
        f.write(generated_file)
    logger.info("Wrote %s", output_file)


@cli.command()
@click.option("--language", "-l", default="python", help="Target language (python)")
@click.option("--output", "-o", "output_path", default=".", help="Output directory")
@click.option("--name", default="quill_runtime", help="Runtime folder name")
def runtime(language: str, output_path: str, name: str) -> None:
    """Generate runtime support code."""
    if language != "python":
        print(f"Unknown language: {language}")
        sys.exit(1)

    runtime_dir = Path(output_path) / name
    runtime_dir.mkdir(parents=True, exist_ok=True)
    for filename, content in python.runtime().items():
        (runtime_dir / filename).write_text(content)
    print(f"Generated Python runtime in {runtime_dir}")


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="Resolved schema (JSON)")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def info(input_file: str, output_json: bool) -> None:
    """Display struct fields with their wire types and write instruction counts."""
    try:
        schema = _load(input_file)
        rows = _field_rows(schema)
    except (GenerationError, SchemaError) as e:
        _fail(str(e))
        return

    if output_json:
        print(json.dumps(rows, indent=2))
    else:
        _output_plain(rows)


def _field_rows(schema: Schema) -> dict[str, list[dict]]:
    rows: dict[str, list[dict]] = {}
    for struct in schema.structs:
        rows[struct.name] = []
        for f in struct.fields:
            body = get_write_body(f.type, Attribute(Name("self"), f.name))
            rows[struct.name].append(
                {
                    "id": f.id,
                    "name": f.name,
                    "type": type_name(f.type),
                    "wire_type": wire_type_of(f.type).name,
                    "required": f.required,
                    "instructions": sum(1 for _ in walk(body)),
                }
            )
    return rows


def _output_plain(rows: dict[str, list[dict]]) -> None:
    """Output struct info using rich text formatting."""
    console = Console()

    for struct_name, fields in rows.items():
        console.print(f"[bold cyan]{struct_name}[/bold cyan]")

        table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
        table.add_column("ID", style="green", justify="right")
        table.add_column("Name", style="white")
        table.add_column("Type", style="yellow")
        table.add_column("Wire", style="dim")
        table.add_column("Instr", justify="right")

        for row in fields:
            name = row["name"] + ("" if not row["required"] else " *")
            table.add_row(
                str(row["id"]), name, row["type"], row["wire_type"], str(row["instructions"])
            )

        console.print(table)
        console.print()


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
