"""Section grammars: plain text, guideline lists, and fenced JSON blocks.

Structured sections are read in two stages.  The fenced block is first
decoded into an untyped JSON tree, then each field is checked and coerced
on its own so one bad value never depends on the shape of another.
"""

from __future__ import annotations

import json
import re
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from agentmd.compiler.models import (
    DECLARED_INPUT_TYPES,
    AgentInputSpec,
    AgentModelSpec,
    AgentOutputSpec,
    AgentRunConfigSpec,
    ParsedAgentConfig,
)
from agentmd.compiler.sections import strip_code_fences
from agentmd.errors import MalformedSectionError

JSON_BLOCK_RE = re.compile(r"```json[ \t]*\n?(.*?)```", re.IGNORECASE | re.DOTALL)
BULLET_RE = re.compile(r"^(?:-+\s*|[*+]\s+|\d+[.)]\s+)")

ModelT = TypeVar("ModelT", bound=BaseModel)

TEXT_SECTIONS = ("summary", "persona", "role", "query", "system prompt")

# (model field, JSON key)
_MODEL_NUMBER_FIELDS = (
    ("temperature", "temperature"),
    ("top_p", "top_p"),
    ("thinking_budget", "thinkingBudget"),
)


def extract_text(sections: dict[str, str], key: str) -> str | None:
    body = sections.get(key)
    if not body:
        return None
    return strip_code_fences(body) or None


def extract_guidelines(body: str | None) -> list[str] | None:
    """Parse the guidelines section into an ordered list.

    Bullet lines win when any exist; otherwise the whole paragraph becomes a
    single guideline.
    """
    if not body:
        return None

    lines = [line.strip() for line in body.splitlines() if line.strip()]
    bullets = [BULLET_RE.sub("", line, count=1).strip() for line in lines if BULLET_RE.match(line)]
    bullets = [bullet for bullet in bullets if bullet]

    if bullets:
        return bullets
    if lines:
        return [" ".join(lines)]
    return None


def extract_json(sections: dict[str, str], key: str, source: str) -> Any:
    """Decode the single fenced JSON block of section *key*.

    Returns ``None`` when the section is absent or empty.

    Raises:
        MalformedSectionError: If the block is missing, repeated, or invalid.
    """
    body = sections.get(key)
    if not body:
        return None

    blocks = JSON_BLOCK_RE.findall(body)
    if not blocks:
        raise MalformedSectionError(key, source, "Expected a JSON code block")
    if len(blocks) > 1:
        raise MalformedSectionError(key, source, "Expected exactly one JSON code block")

    try:
        return json.loads(blocks[0], parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        raise MalformedSectionError(key, source, "Invalid JSON", str(exc)) from exc


def _reject_constant(token: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {token}")


def _expect(value: Any, kind: type, key: str, source: str) -> None:
    if not isinstance(value, kind):
        label = "array" if kind is list else "object"
        raise MalformedSectionError(key, source, f"Expected a JSON {label}")


def _is_number(value: Any) -> bool:
    """True for JSON numbers that fit in a float; booleans are not numbers."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        float(value)
    except OverflowError:
        return False
    return True


def _as_text(value: Any) -> str:
    """Render a JSON scalar the way it appears in the document."""
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _build(spec_cls: type[ModelT], key: str, source: str, /, **fields: Any) -> ModelT:
    try:
        return spec_cls(**fields)
    except ValidationError as exc:
        raise MalformedSectionError(key, source, "Invalid value", str(exc)) from exc


# ---------------------------------------------------------------------------
# Per-section coercion
# ---------------------------------------------------------------------------


def parse_inputs(value: Any, source: str = "agent markdown") -> list[AgentInputSpec] | None:
    """Keep entries with a non-empty name and an allowed type; drop the rest."""
    if value is None:
        return None
    _expect(value, list, "inputs", source)

    specs: list[AgentInputSpec] = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        name = entry.get("name")
        type_ = entry.get("type")
        if not isinstance(name, str) or not isinstance(type_, str):
            continue
        name = name.strip()
        type_ = type_.strip().lower()
        if not name or type_ not in DECLARED_INPUT_TYPES:
            continue

        required = entry.get("required")
        description = entry.get("description")
        specs.append(
            _build(
                AgentInputSpec,
                "inputs",
                source,
                name=name,
                type=type_,
                required=required if isinstance(required, bool) else True,
                description=description.strip() if isinstance(description, str) else "",
            )
        )

    return specs or None


def parse_output(value: Any, source: str = "agent markdown") -> AgentOutputSpec | None:
    if value is None:
        return None
    _expect(value, dict, "output", source)

    name = value.get("name")
    type_ = value.get("type")
    description = value.get("description")
    return _build(
        AgentOutputSpec,
        "output",
        source,
        name=(name.strip() if isinstance(name, str) else "") or "result",
        type="json" if isinstance(type_, str) and type_.strip().lower() == "json" else "text",
        description=description.strip() if isinstance(description, str) else "",
        json_schema=value.get("schema"),
    )


def parse_string_list(value: Any, key: str, source: str = "agent markdown") -> list[str] | None:
    """Trim, drop empties, and de-duplicate (first occurrence wins)."""
    if value is None:
        return None
    _expect(value, list, key, source)

    cleaned = (_as_text(item).strip() for item in value if item is not None)
    unique = list(dict.fromkeys(item for item in cleaned if item))
    return unique or None


def parse_model(value: Any, source: str = "agent markdown") -> AgentModelSpec | None:
    if value is None:
        return None
    _expect(value, dict, "model", source)

    fields: dict[str, Any] = {}
    model = value.get("model")
    if isinstance(model, str) and model.strip():
        fields["model"] = model.strip()
    for field, key in _MODEL_NUMBER_FIELDS:
        if _is_number(value.get(key)):
            fields[field] = value[key]
    return _build(AgentModelSpec, "model", source, **fields)


def parse_run_config(value: Any, source: str = "agent markdown") -> AgentRunConfigSpec | None:
    if value is None:
        return None
    _expect(value, dict, "run config", source)

    limits = {
        key: value[key] for key in ("max_time_minutes", "max_turns") if _is_number(value.get(key))
    }
    return _build(AgentRunConfigSpec, "run config", source, **limits)


def build_parsed_config(name: str, sections: dict[str, str], source: str) -> ParsedAgentConfig:
    """Run every section grammar over *sections*."""
    text = {key: extract_text(sections, key) for key in TEXT_SECTIONS}

    return ParsedAgentConfig(
        name=name,
        summary=text["summary"],
        persona=text["persona"],
        role=text["role"],
        guidelines=extract_guidelines(sections.get("guidelines")),
        inputs=parse_inputs(extract_json(sections, "inputs", source), source),
        output=parse_output(extract_json(sections, "output", source), source),
        tools=parse_string_list(extract_json(sections, "tools", source), "tools", source),
        mcp_servers=parse_string_list(extract_json(sections, "mcp", source), "mcp", source),
        model=parse_model(extract_json(sections, "model", source), source),
        run_config=parse_run_config(extract_json(sections, "run config", source), source),
        query=text["query"],
        system_prompt=text["system prompt"],
    )
