"""Agent markdown compiler — section grammars, schema compiler, and directory loader."""

from agentmd.compiler.assembler import assemble_definition, render_query
from agentmd.compiler.loader import (
    AgentLoader,
    DirectoryLoadReport,
    LoadFailure,
    LoadResult,
    LoadSuccess,
    load_agents_from_directory,
    scan_directory,
)
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
from agentmd.compiler.parser import parse_agent_file, parse_agent_markdown
from agentmd.compiler.schema import CompiledSchema, SchemaKind, compile_schema

__all__ = [
    "AgentDefinition",
    "AgentInputSpec",
    "AgentLoader",
    "AgentModelSpec",
    "AgentOutputSpec",
    "AgentRunConfigSpec",
    "CompiledSchema",
    "DirectoryLoadReport",
    "InputConfig",
    "InputParameter",
    "InputType",
    "LoadFailure",
    "LoadResult",
    "LoadSuccess",
    "ModelSettings",
    "OutputConfig",
    "ParsedAgentConfig",
    "PromptConfig",
    "RunConfig",
    "SchemaKind",
    "ToolConfig",
    "assemble_definition",
    "compile_schema",
    "load_agents_from_directory",
    "parse_agent_file",
    "parse_agent_markdown",
    "render_query",
    "scan_directory",
]
