"""commandschema CLI: extract native command schemas from component type declarations."""

import logging
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from commandschema import __version__

console = Console()
err_console = Console(stderr=True)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.version_option(version=__version__)
@click.option("--log-level", default="WARNING", type=click.Choice(LOG_LEVELS), help="Logging verbosity")
def main(log_level: str):
    """commandschema: Command Schema Extractor.

    Reads the command interface of a native component from its TypeScript
    spec file and emits the validated command schema that native-code
    generators consume.
    """
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ── Extract ──────────────────────────────────────────────────────────


@main.command()
@click.argument("spec_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("type_expr")
@click.option("--command", "-c", "command_names", multiple=True, required=True, help="Command to extract (repeatable, in order)")
@click.option("--format", "-f", "output_format", default="json", type=click.Choice(["json", "yaml", "table"]))
@click.option("--config", "config_path", default=None, type=click.Path(dir_okay=False), help="YAML extraction config")
@click.option("--strict-ref", is_flag=True, help="Require the first parameter to be Ref<'ViewName'>")
def extract(
    spec_file: str,
    type_expr: str,
    command_names: tuple,
    output_format: str,
    config_path: str | None,
    strict_ref: bool,
):
    """Extract the commands declared on TYPE_EXPR in SPEC_FILE.

    TYPE_EXPR is a type as written in the file, usually the name of the
    commands interface (e.g. NativeCommands).
    """
    import dataclasses

    from commandschema.commands import CommandRequest, extract_commands
    from commandschema.config import ConfigError, ExtractionOptions, RefPolicy, load_options
    from commandschema.typescript import TypeScriptOracle, parse_file, parse_type
    from commandschema.typescript.parser import TypeScriptSyntaxError

    try:
        options = load_options(config_path) if config_path else ExtractionOptions()
    except ConfigError as e:
        err_console.print(f"[red]Invalid config:[/] {escape(str(e))}")
        sys.exit(2)
    if strict_ref:
        options = dataclasses.replace(options, ref_policy=RefPolicy.STRICT)

    try:
        source_file = parse_file(spec_file)
        type_node = parse_type(type_expr)
    except TypeScriptSyntaxError as e:
        err_console.print(f"[red]Failed to parse:[/] {escape(str(e))}")
        sys.exit(2)

    oracle = TypeScriptOracle(source_file, int32_type_names=options.int32_type_names)
    request = CommandRequest(type_node=type_node, supported_commands=tuple(command_names))
    result = extract_commands(request, oracle, options)

    if not result.passed:
        err_console.print(f"[red]x[/] {result.error.kind.name}: {escape(result.error.message)}")
        sys.exit(1)

    _print_commands(result.commands, output_format)


def _print_commands(commands, output_format: str) -> None:
    import json

    import yaml

    from commandschema.ir.models import commands_to_schema

    if output_format == "table":
        table = Table(title=f"Commands ({len(commands)})")
        table.add_column("Name", style="cyan")
        table.add_column("Optional", justify="center")
        table.add_column("Parameters")
        for command in commands:
            optional = "[yellow]Y[/]" if command.optional else "N"
            params = ", ".join(f"{p.name}: {p.kind.value}" for p in command.parameters)
            table.add_row(command.name, optional, params or "[dim]none[/]")
        console.print(table)
        return

    schema = commands_to_schema(commands)
    if output_format == "yaml":
        click.echo(yaml.safe_dump(schema, sort_keys=False), nl=False)
    else:
        click.echo(json.dumps(schema, indent=2))


# ── Schema ───────────────────────────────────────────────────────────


@main.command(name="schema")
def dump_schema():
    """Print the JSON Schema for extracted command lists."""
    import json

    from commandschema.ir.schema import get_schema

    click.echo(json.dumps(get_schema(), indent=2))


if __name__ == "__main__":
    main()
