"""Compiler defaults — fallbacks for model settings and run limits.

Defaults are resolved in three layers (later wins):

1. Built-in values on :class:`CompilerDefaults`.
2. An optional YAML file passed to :func:`load_defaults`.
3. ``AGENTMD_MODEL`` / ``AGENTMD_THINKING_BUDGET`` environment variables.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from agentmd.errors import DefaultsConfigError

DEFAULT_MODEL = "gemini-2.5-pro"
DEFAULT_THINKING_BUDGET = -1
DEFAULT_TEMPERATURE = 0.2
DEFAULT_TOP_P = 0.9
DEFAULT_MAX_TIME_MINUTES = 5
DEFAULT_MAX_TURNS = 10
DEFAULT_QUERY = "Use the provided inputs to accomplish the requested task with precision."
DEFAULT_OBJECTIVE_DESCRIPTION = "Detailed description of the task to accomplish."
AGENT_FILE_SUFFIX = ".agent.md"

ENV_MODEL = "AGENTMD_MODEL"
ENV_THINKING_BUDGET = "AGENTMD_THINKING_BUDGET"


class CompilerDefaults(BaseModel):
    """Process-wide fallbacks applied when a document leaves a field undeclared.

    A thinking budget of ``-1`` lets the model decide dynamically.
    """

    model_config = {"frozen": True, "protected_namespaces": ()}

    model: str = Field(default=DEFAULT_MODEL, min_length=1)
    thinking_budget: int = DEFAULT_THINKING_BUDGET
    temperature: float = DEFAULT_TEMPERATURE
    top_p: float = DEFAULT_TOP_P
    max_time_minutes: float = Field(default=DEFAULT_MAX_TIME_MINUTES, gt=0)
    max_turns: int = Field(default=DEFAULT_MAX_TURNS, gt=0)
    query: str = DEFAULT_QUERY
    objective_description: str = DEFAULT_OBJECTIVE_DESCRIPTION
    agent_file_suffix: str = Field(default=AGENT_FILE_SUFFIX, min_length=1)


def load_defaults(
    path: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> CompilerDefaults:
    """Resolve :class:`CompilerDefaults` from built-ins, *path*, and the environment.

    ``${VAR}`` references inside the YAML file are expanded with
    :func:`os.path.expandvars` before parsing.

    Raises:
        DefaultsConfigError: If the file cannot be read, is not a YAML
            mapping, or holds invalid values.
    """
    env = os.environ if environ is None else environ
    data: dict[str, Any] = {}

    if path is not None:
        data.update(_read_yaml(path))

    if env.get(ENV_MODEL):
        data["model"] = env[ENV_MODEL]
    if env.get(ENV_THINKING_BUDGET):
        data["thinking_budget"] = env[ENV_THINKING_BUDGET]

    try:
        return CompilerDefaults.model_validate(data)
    except ValidationError as exc:
        raise DefaultsConfigError(f"Invalid compiler defaults: {exc}") from exc


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DefaultsConfigError(f"Cannot read {path}: {exc}") from exc

    try:
        data: Any = yaml.safe_load(os.path.expandvars(raw))
    except yaml.YAMLError as exc:
        raise DefaultsConfigError(f"YAML parse error in {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DefaultsConfigError(f"Defaults file {path} must contain a mapping")
    return data
