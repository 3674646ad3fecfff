import typer
from typing import List, Optional

from rich.table import Table
from rich.markup import escape

from symloader.logging_config import logger
from symloader.config import get_resolver_config
from symloader.exceptions import ConfigError, ConstructionError, InvalidArgumentError, SymbolNotFoundError
from symloader.locations import open_location
from symloader.parents import ImportlibResolver, NullResolver
from symloader.resolver import Resolver
from symloader.cli.config import CLIConfig
from symloader.cli.output import get_console, print_error, print_json, describe_value

app = typer.Typer(help="Resolve qualified names through a hierarchy of resolvers.")
console = get_console()

EXIT_NOT_FOUND = 1
EXIT_FAILED = 2


@app.callback()
def global_options(
    human: bool = typer.Option(
        False,
        "--human",
        "-H",
        help="Enable human mode: pretty output with tables and colors (also via SYMLOADER_HUMAN_MODE env var)"
    ),
):
    """
    Global options applied to all commands.
    """
    CLIConfig.set_machine_mode(False if human else None)


def _build_parent(parent: str):
    if parent == "importlib":
        return ImportlibResolver()
    if parent == "none":
        return NullResolver()
    raise InvalidArgumentError(
        f"Unknown parent '{parent}'. Expected one of: {', '.join(CLIConfig.PARENT_CHOICES)}"
    )


@app.command()
def resolve(
    name: str = typer.Argument(..., help="Qualified name to resolve, e.g. plugins.audio.mixer"),
    paths: List[str] = typer.Option(
        ..., "--path", "-p",
        help="Search location (directory or zip archive). Repeat to add more; order is priority.",
    ),
    exclude: Optional[List[str]] = typer.Option(
        None, "--exclude", "-x", help="Name always delegated to the parent. Can be used multiple times."
    ),
    parent: str = typer.Option(
        CLIConfig.DEFAULT_PARENT, "--parent", help="Root of the parent chain: importlib or none."
    ),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON."),
):
    """
    Resolves NAME through a resolver built from the given locations.
    """
    try:
        resolver = Resolver(paths, _build_parent(parent), config=get_resolver_config())
        for excluded in exclude or []:
            resolver.add_exclusion(excluded)
        artifact = resolver.resolve(name)
    except SymbolNotFoundError as e:
        print_error("SYMBOL_NOT_FOUND", str(e), name, json_output)
        raise typer.Exit(code=EXIT_NOT_FOUND)
    except ConstructionError as e:
        print_error("CONSTRUCTION_FAILED", str(e), name, json_output)
        raise typer.Exit(code=EXIT_FAILED)
    except (InvalidArgumentError, ConfigError) as e:
        print_error("INVALID_ARGUMENT", str(e), name, json_output)
        raise typer.Exit(code=EXIT_FAILED)

    origin = "local" if resolver.is_resolved(name) else "parent"
    logger.debug(f"{name} resolved from {origin}")
    payload = {
        "status": "ok",
        "name": name,
        "origin": origin,
        "file": getattr(artifact, "__file__", None),
        "artifact": describe_value(artifact),
        "exclusions": resolver.list_exclusions(),
    }

    if json_output:
        print_json(payload)
        return

    if CLIConfig.is_machine_mode():
        typer.echo(f"{name} {origin} {payload['file'] or payload['artifact']}")
        return

    table = Table(title=f"Resolved '{escape(name)}'")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="magenta")
    table.add_row("Origin", origin)
    table.add_row("File", escape(str(payload["file"] or "-")))
    table.add_row("Artifact", escape(payload["artifact"]))
    table.add_row("Exclusions", escape(", ".join(payload["exclusions"]) or "-"))
    console.print(table)


@app.command()
def locate(
    name: str = typer.Argument(..., help="Qualified name to look for."),
    paths: List[str] = typer.Option(
        ..., "--path", "-p", help="Search location (directory or zip archive). Repeat to add more."
    ),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON."),
):
    """
    Lists every location that defines NAME, in search order, without constructing it.
    """
    try:
        config = get_resolver_config()
        locations = [open_location(p, config.suffixes) for p in paths]
    except (InvalidArgumentError, ConfigError) as e:
        print_error("INVALID_ARGUMENT", str(e), name, json_output)
        raise typer.Exit(code=EXIT_FAILED)

    matches = []
    for position, location in enumerate(locations):
        raw = location.find_definition(name)
        if raw is not None:
            matches.append({
                "position": position,
                "location": location.describe(),
                "origin": raw.origin,
                "kind": raw.kind,
                "size": len(raw.source),
            })

    if json_output:
        print_json({"name": name, "matches": matches})
    elif CLIConfig.is_machine_mode():
        for match in matches:
            typer.echo(f"{match['position']} {match['location']} {match['origin']}")
    else:
        table = Table(title=f"Definitions of '{escape(name)}'")
        table.add_column("#", style="dim")
        table.add_column("Location", style="cyan")
        table.add_column("Origin", style="green")
        table.add_column("Kind", style="yellow")
        for i, match in enumerate(matches):
            style = "bold" if i == 0 else None
            table.add_row(str(match["position"]), escape(match["location"]), escape(match["origin"]), match["kind"], style=style)
        console.print(table)

    if not matches:
        raise typer.Exit(code=EXIT_NOT_FOUND)


@app.command("config")
def show_config(
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON."),
):
    """
    Displays the effective resolver configuration.
    """
    try:
        config = get_resolver_config()
    except ConfigError as e:
        print_error("INVALID_CONFIG", str(e), json_output=json_output)
        raise typer.Exit(code=EXIT_FAILED)

    settings = config.to_dict()
    if json_output:
        print_json(settings)
        return

    if CLIConfig.is_machine_mode():
        for key, value in settings.items():
            if isinstance(value, list):
                value = ",".join(value)
            typer.echo(f"{key}={value}")
        return

    table = Table(title="Resolver Configuration")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="magenta")
    for key, value in settings.items():
        table.add_row(key, escape(str(value)))
    console.print(table)


if __name__ == "__main__":
    app()
