"""``agentmd agents`` — list, inspect, validate, and author agent markdown files."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TextIO

import click

from agentmd.cli_commands._output import (
    console,
    definition_to_dict,
    print_agents_table,
    print_definition,
    print_definitions_json,
)
from agentmd.config import CompilerDefaults
from agentmd.errors import AgentMarkdownError


@click.group()
def agents() -> None:
    """Manage agent markdown files."""


@agents.command("list")
@click.option(
    "--dir",
    "directory",
    default="agents",
    type=click.Path(exists=False),
    help="Directory containing *.agent.md files.",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format.",
)
@click.pass_obj
def list_agents(defaults: CompilerDefaults, directory: str, fmt: str) -> None:
    """List all agents defined in a directory."""
    from agentmd.compiler.loader import AgentLoader

    dir_path = Path(directory)
    if not dir_path.is_dir():
        console.print(f"[yellow]Directory not found: {directory}[/yellow]")
        return

    definitions = AgentLoader(dir_path, defaults=defaults).load_all()

    if not definitions:
        console.print("[yellow]No agent definitions found.[/yellow]")
        return

    if fmt == "json":
        print_definitions_json(definitions)
    else:
        print_agents_table(definitions)


@agents.command("show")
@click.argument("agent_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_obj
def show(defaults: CompilerDefaults, agent_file: Path, as_json: bool) -> None:
    """Compile AGENT_FILE and print the resulting definition."""
    from agentmd.compiler.parser import parse_agent_file

    try:
        definition = parse_agent_file(agent_file, defaults=defaults)
    except (AgentMarkdownError, OSError, UnicodeDecodeError) as exc:
        console.print(f"[red]Error compiling {agent_file}:[/red] {exc}", soft_wrap=True)
        sys.exit(1)

    if as_json:
        console.print_json(json.dumps(definition_to_dict(definition), default=str))
    else:
        print_definition(definition)


@agents.command("validate")
@click.argument(
    "agent_files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.pass_obj
def validate(defaults: CompilerDefaults, agent_files: tuple[Path, ...]) -> None:
    """Check that every AGENT_FILES entry compiles; exit 1 if any fails."""
    from agentmd.compiler.loader import LoadFailure, load_agent_file

    failed = 0
    for path in agent_files:
        result = load_agent_file(path, defaults=defaults)
        if isinstance(result, LoadFailure):
            failed += 1
            console.print(f"[red]FAIL[/red] {path}: {result.reason}", soft_wrap=True)
        else:
            console.print(f"[green]OK[/green]   {path} ({result.definition.name})", soft_wrap=True)

    if failed:
        console.print(f"[red]{failed} of {len(agent_files)} file(s) failed.[/red]")
        sys.exit(1)


@agents.command("prompt")
@click.option("--name", "-n", required=True, help="Display name for the new agent.")
@click.option("--idea", "-p", required=True, help="What the agent should do, in plain words.")
def prompt(name: str, idea: str) -> None:
    """Print the instructions a language model needs to author a new agent file."""
    from agentmd.authoring import build_authoring_prompt

    try:
        click.echo(build_authoring_prompt(name, idea))
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc


@agents.command("save")
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option("--name", "-n", required=True, help="Agent name used for the file slug.")
@click.option(
    "--dir",
    "directory",
    default=None,
    help="Destination directory (defaults to ./agents).",
)
@click.option("--overwrite", "-f", is_flag=True, help="Replace an existing file.")
@click.pass_obj
def save(
    defaults: CompilerDefaults,
    source: TextIO,
    name: str,
    directory: str | None,
    overwrite: bool,
) -> None:
    """Validate generated markdown from SOURCE (or - for stdin) and save it."""
    from agentmd.authoring import resolve_agents_dir, save_agent_markdown

    markdown = source.read()
    if not markdown.strip():
        console.print("[red]No markdown provided.[/red]")
        sys.exit(1)

    try:
        target = save_agent_markdown(
            markdown,
            name,
            resolve_agents_dir(directory),
            overwrite=overwrite,
            defaults=defaults,
        )
    except (AgentMarkdownError, FileExistsError) as exc:
        console.print(f"[red]Failed to save agent:[/red] {exc}", soft_wrap=True)
        sys.exit(1)

    console.print(f"[green]Created agent \"{name}\" at {target}[/green]", soft_wrap=True)
