"""Single-document entry points: markdown text or file in, ``AgentDefinition`` out.

Typical usage::

    definition = parse_agent_markdown(text, "planner.agent.md")
    definition.prompt_config.system_prompt
    definition.output_config.output_schema.validate(result)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from agentmd.compiler.assembler import assemble_definition
from agentmd.compiler.fields import build_parsed_config
from agentmd.compiler.sections import extract_agent_name, extract_sections, normalize_newlines
from agentmd.utils.telemetry import (
    ATTR_AGENT_NAME,
    ATTR_INPUT_COUNT,
    ATTR_OUTPUT_TYPE,
    ATTR_SOURCE,
    SPAN_COMPILE,
    get_tracer,
)

if TYPE_CHECKING:
    from pathlib import Path

    from agentmd.compiler.models import AgentDefinition
    from agentmd.config import CompilerDefaults

_tracer = get_tracer(__name__)


def parse_agent_markdown(
    markdown: str,
    source: str = "agent markdown",
    *,
    defaults: CompilerDefaults | None = None,
) -> AgentDefinition:
    """Compile agent markdown into an :class:`AgentDefinition`.

    Args:
        markdown: The document text.
        source: Identifier used in error messages and the fallback description.
        defaults: Fallback values; built-in defaults when omitted.

    Raises:
        MissingAgentNameError: If the ``# Agent: <name>`` heading is absent or blank.
        MalformedSectionError: If a structured section has no single valid JSON block.
    """
    with _tracer.start_as_current_span(SPAN_COMPILE) as span:
        span.set_attribute(ATTR_SOURCE, source)

        text = normalize_newlines(markdown)
        sections = extract_sections(text)
        name = extract_agent_name(text, source)
        config = build_parsed_config(name, sections, source)
        definition = assemble_definition(config, source, defaults)

        span.set_attribute(ATTR_AGENT_NAME, definition.name)
        span.set_attribute(ATTR_OUTPUT_TYPE, config.output.type if config.output else "text")
        span.set_attribute(ATTR_INPUT_COUNT, len(definition.input_config.inputs))
        return definition


def parse_agent_file(path: Path, *, defaults: CompilerDefaults | None = None) -> AgentDefinition:
    """Read *path* as UTF-8 and compile it; the path is the error-message source."""
    return parse_agent_markdown(path.read_text(encoding="utf-8"), str(path), defaults=defaults)
