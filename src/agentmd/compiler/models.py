"""Agent definition models — intermediate parse results and the compiled artifact.

``ParsedAgentConfig`` is the loosely-populated result of reading the
markdown sections; ``AgentDefinition`` is the frozen, fully-defaulted
contract an execution engine loads.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field, field_serializer

from agentmd.compiler.schema import CompiledSchema  # noqa: TC001

DECLARED_INPUT_TYPES = frozenset(
    {"string", "number", "boolean", "integer", "string[]", "number[]"}
)


class InputType(str, Enum):
    """Canonical input kinds understood by the execution engine."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING_ARRAY = "string[]"
    NUMBER_ARRAY = "number[]"


# ---------------------------------------------------------------------------
# Intermediate (per-section) results
# ---------------------------------------------------------------------------


class AgentInputSpec(BaseModel):
    """One declared input parameter from the ``## Inputs`` section."""

    name: str = Field(..., min_length=1)
    type: str
    required: bool = True
    description: str = ""


class AgentOutputSpec(BaseModel):
    """The declared output contract from the ``## Output`` section."""

    name: str = "result"
    type: Literal["text", "json"] = "text"
    description: str = ""
    json_schema: Any = None


class AgentModelSpec(BaseModel):
    """Model overrides from the ``## Model`` section."""

    model: str | None = None
    temperature: float | None = None
    top_p: float | None = None
    thinking_budget: int | float | None = None


class AgentRunConfigSpec(BaseModel):
    """Execution-limit overrides from the ``## Run Config`` section."""

    max_time_minutes: int | float | None = None
    max_turns: int | float | None = None


class ParsedAgentConfig(BaseModel):
    """Everything extracted from a document before defaults are applied."""

    name: str
    summary: str | None = None
    persona: str | None = None
    role: str | None = None
    guidelines: list[str] | None = None
    inputs: list[AgentInputSpec] | None = None
    output: AgentOutputSpec | None = None
    tools: list[str] | None = None
    mcp_servers: list[str] | None = None
    model: AgentModelSpec | None = None
    run_config: AgentRunConfigSpec | None = None
    query: str | None = None
    system_prompt: str | None = None


# ---------------------------------------------------------------------------
# Compiled artifact
# ---------------------------------------------------------------------------


class PromptConfig(BaseModel):
    model_config = {"frozen": True}

    system_prompt: str
    query: str


class ModelSettings(BaseModel):
    model_config = {"frozen": True, "protected_namespaces": ()}

    model: str = Field(..., min_length=1)
    temperature: float
    top_p: float
    thinking_budget: int | float


class RunConfig(BaseModel):
    model_config = {"frozen": True}

    max_time_minutes: int | float = Field(..., gt=0)
    max_turns: int | float = Field(..., gt=0)


class ToolConfig(BaseModel):
    model_config = {"frozen": True}

    tools: tuple[str, ...]


class OutputConfig(BaseModel):
    """Output contract: name, description, and the compiled validator."""

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    output_name: str
    description: str
    output_schema: CompiledSchema

    @field_serializer("output_schema")
    def _serialize_schema(self, value: CompiledSchema) -> dict[str, Any]:
        return value.json_schema()


class InputParameter(BaseModel):
    model_config = {"frozen": True}

    description: str
    type: InputType
    required: bool


class InputConfig(BaseModel):
    model_config = {"frozen": True}

    inputs: dict[str, InputParameter] = Field(..., min_length=1)


class AgentDefinition(BaseModel):
    """The compiled, executable agent contract.

    ``process_output`` is only set for JSON outputs and renders the
    validated structured result as indented JSON text for display.
    """

    model_config = {"frozen": True, "protected_namespaces": ()}

    name: str = Field(..., min_length=1)
    display_name: str
    description: str
    prompt_config: PromptConfig
    model_settings: ModelSettings
    run_config: RunConfig
    tool_config: ToolConfig | None = None
    mcp_servers: tuple[str, ...] = ()
    output_config: OutputConfig
    input_config: InputConfig
    process_output: Callable[[Any], str] | None = Field(default=None, exclude=True)
