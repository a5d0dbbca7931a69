"""Definition assembly: defaults, system prompt synthesis, and the final artifact."""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from string import Template
from typing import Any

from agentmd.compiler.models import (
    AgentDefinition,
    AgentInputSpec,
    AgentModelSpec,
    AgentOutputSpec,
    AgentRunConfigSpec,
    InputConfig,
    InputParameter,
    InputType,
    ModelSettings,
    OutputConfig,
    ParsedAgentConfig,
    PromptConfig,
    RunConfig,
    ToolConfig,
)
from agentmd.compiler.schema import compile_schema, text_schema
from agentmd.config import CompilerDefaults

CLOSING_INSTRUCTION = (
    "Think step-by-step, justify your reasoning, and provide actionable, concrete outputs."
)

_INPUT_TYPE_MAP: dict[str, InputType] = {
    "string": InputType.STRING,
    "number": InputType.NUMBER,
    "integer": InputType.NUMBER,
    "boolean": InputType.BOOLEAN,
    "string[]": InputType.STRING_ARRAY,
    "number[]": InputType.NUMBER_ARRAY,
}


def assemble_definition(
    config: ParsedAgentConfig,
    source: str,
    defaults: CompilerDefaults | None = None,
) -> AgentDefinition:
    """Apply *defaults* to *config* and build the :class:`AgentDefinition`."""
    defaults = defaults or CompilerDefaults()
    expects_json = config.output is not None and config.output.type == "json"

    system_prompt = append_tooling_context(
        build_system_prompt(config), config.tools, config.mcp_servers
    )

    return AgentDefinition(
        name=config.name,
        display_name=config.name,
        description=resolve_description(config, source),
        prompt_config=PromptConfig(
            system_prompt=system_prompt,
            query=config.query or defaults.query,
        ),
        model_settings=build_model_settings(config.model, defaults),
        run_config=build_run_config(config.run_config, defaults),
        tool_config=build_tool_config(config.tools),
        mcp_servers=tuple(config.mcp_servers or ()),
        output_config=build_output_config(config.output),
        input_config=build_input_config(config.inputs, defaults),
        process_output=format_json_output if expects_json else None,
    )


def resolve_description(config: ParsedAgentConfig, source: str) -> str:
    return config.summary or config.role or f"Custom agent defined in {source}"


# ---------------------------------------------------------------------------
# Prompt
# ---------------------------------------------------------------------------


def build_system_prompt(config: ParsedAgentConfig) -> str:
    """Return the explicit system prompt, or compose one from role, persona and guidelines."""
    if config.system_prompt:
        return config.system_prompt.strip()

    segments: list[str] = []
    identity = config.role or config.summary
    if identity:
        segments.append(f"You are **{config.name}**, {identity}.")
    else:
        segments.append(f"You are **{config.name}**, a specialized assistant.")

    if config.persona:
        segments.append(f"Persona:\n{config.persona}")

    if config.guidelines:
        bullets = "\n".join(f"- {line}" for line in config.guidelines)
        segments.append(f"Follow these guidelines:\n{bullets}")

    segments.append(CLOSING_INSTRUCTION)
    return "\n\n".join(segments).strip()


def append_tooling_context(
    prompt: str,
    tools: list[str] | None = None,
    mcp_servers: list[str] | None = None,
) -> str:
    """Append tool and MCP server availability notices to *prompt*."""
    additions: list[str] = []
    if tools:
        additions.append(f"You can invoke the following tools when needed: {', '.join(tools)}.")
    if mcp_servers:
        additions.append(
            f"You have access to these MCP servers: {', '.join(mcp_servers)}. "
            "Use them when they can provide better context or direct actions."
        )

    if not additions:
        return prompt
    return f"{prompt}\n\n" + "\n".join(additions)


# ---------------------------------------------------------------------------
# Configuration blocks
# ---------------------------------------------------------------------------


def build_model_settings(spec: AgentModelSpec | None, defaults: CompilerDefaults) -> ModelSettings:
    spec = spec or AgentModelSpec()
    return ModelSettings(
        model=spec.model or defaults.model,
        temperature=defaults.temperature if spec.temperature is None else spec.temperature,
        top_p=defaults.top_p if spec.top_p is None else spec.top_p,
        thinking_budget=(
            defaults.thinking_budget if spec.thinking_budget is None else spec.thinking_budget
        ),
    )


def build_run_config(spec: AgentRunConfigSpec | None, defaults: CompilerDefaults) -> RunConfig:
    """Keep declared limits only when they are finite and strictly positive."""
    spec = spec or AgentRunConfigSpec()
    return RunConfig(
        max_time_minutes=_positive_or(spec.max_time_minutes, defaults.max_time_minutes),
        max_turns=_positive_or(spec.max_turns, defaults.max_turns),
    )


def _positive_or(value: int | float | None, default: int | float) -> int | float:
    if value is None:
        return default
    try:
        finite = math.isfinite(value)
    except OverflowError:
        return default
    return value if finite and value > 0 else default


def build_tool_config(tools: list[str] | None) -> ToolConfig | None:
    if not tools:
        return None
    return ToolConfig(tools=tuple(tools))


def build_output_config(output: AgentOutputSpec | None) -> OutputConfig:
    if output is None:
        return OutputConfig(
            output_name="result",
            description="Final answer generated by the agent.",
            output_schema=text_schema(),
        )

    if output.type == "json":
        schema = compile_schema(output.json_schema)
        fallback = "Structured JSON output generated by the agent."
    else:
        schema = text_schema()
        fallback = "Textual result generated by the agent."

    return OutputConfig(
        output_name=output.name,
        description=output.description or fallback,
        output_schema=schema,
    )


def build_input_config(
    inputs: list[AgentInputSpec] | None,
    defaults: CompilerDefaults,
) -> InputConfig:
    """Map declared inputs, or a single required ``objective`` when none survive."""
    effective = inputs or [
        AgentInputSpec(
            name="objective",
            type="string",
            required=True,
            description=defaults.objective_description,
        )
    ]
    return InputConfig(
        inputs={
            spec.name: InputParameter(
                description=spec.description,
                type=map_input_type(spec.type),
                required=spec.required,
            )
            for spec in effective
        }
    )


def map_input_type(type_: str) -> InputType:
    return _INPUT_TYPE_MAP.get(type_.strip().lower(), InputType.STRING)


# ---------------------------------------------------------------------------
# Helpers for consumers of the definition
# ---------------------------------------------------------------------------


def format_json_output(value: Any) -> str:
    """Render a structured result as 2-space indented JSON."""
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def render_query(definition: AgentDefinition, values: Mapping[str, Any] | None = None) -> str:
    """Substitute ``${input}`` placeholders in the definition's query.

    List values are joined with ``", "``.  Unknown placeholders are left
    as-is (:meth:`string.Template.safe_substitute`).
    """
    rendered: dict[str, str] = {}
    for key, value in (values or {}).items():
        if isinstance(value, (list, tuple)):
            rendered[key] = ", ".join(str(item) for item in value)
        else:
            rendered[key] = str(value)
    return Template(definition.prompt_config.query).safe_substitute(rendered)
