"""Shared CLI output formatters."""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.table import Table

from agentmd.compiler.models import AgentDefinition  # noqa: TC001

console = Console()
err_console = Console(stderr=True)


def definition_to_dict(definition: AgentDefinition) -> dict[str, Any]:
    """JSON-compatible view of a definition (the output schema as JSON Schema)."""
    return definition.model_dump(mode="json")


def print_definitions_json(definitions: dict[str, AgentDefinition]) -> None:
    data = {name: definition_to_dict(d) for name, d in definitions.items()}
    console.print_json(json.dumps(data, default=str))


def print_agents_table(definitions: dict[str, AgentDefinition]) -> None:
    """Pretty-print agent definitions as a table."""
    table = Table(title="Agent Definitions")
    table.add_column("Name", style="cyan")
    table.add_column("Model")
    table.add_column("Description")
    table.add_column("Tools")

    for definition in definitions.values():
        tools = definition.tool_config.tools if definition.tool_config else ()
        table.add_row(
            definition.name,
            definition.model_settings.model,
            _truncate(definition.description),
            ", ".join(tools) or "-",
        )

    console.print(table)


def print_definition(definition: AgentDefinition) -> None:
    """Pretty-print one definition: settings, inputs, output, and prompts."""
    model = definition.model_settings
    run = definition.run_config
    output = definition.output_config

    console.print(f"\n[bold]{definition.display_name}[/bold]")
    console.print(f"  Description: {definition.description}")
    console.print(
        f"  Model: {model.model} (temperature={model.temperature}, top_p={model.top_p}, "
        f"thinking_budget={model.thinking_budget})"
    )
    console.print(f"  Limits: {run.max_time_minutes} min, {run.max_turns} turns")
    if definition.tool_config:
        console.print(f"  Tools: {', '.join(definition.tool_config.tools)}")
    if definition.mcp_servers:
        console.print(f"  MCP servers: {', '.join(definition.mcp_servers)}")

    table = Table(title="Inputs")
    table.add_column("Name", style="cyan")
    table.add_column("Type")
    table.add_column("Required")
    table.add_column("Description")
    for name, param in definition.input_config.inputs.items():
        table.add_row(name, param.type.value, "yes" if param.required else "no", param.description)
    console.print(table)

    console.print(f"\n[bold]Output:[/bold] {output.output_name} ({output.output_schema.kind.value})")
    console.print(f"  {output.description}")

    console.print("\n[bold]System prompt:[/bold]")
    console.print(definition.prompt_config.system_prompt, markup=False, soft_wrap=True)
    console.print("\n[bold]Query:[/bold]")
    console.print(definition.prompt_config.query, markup=False, soft_wrap=True)


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
