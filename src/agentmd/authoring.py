"""Authoring helpers for new agent markdown files.

Generating the markdown itself is left to a language model of the caller's
choosing: :func:`build_authoring_prompt` produces the instruction text, and
:func:`save_agent_markdown` checks that the reply compiles before writing it
to ``<slug>.agent.md``.
"""

from __future__ import annotations

import re
import time
from pathlib import Path
from string import Template

from agentmd.compiler.parser import parse_agent_markdown
from agentmd.config import AGENT_FILE_SUFFIX, CompilerDefaults

AUTHORING_PROMPT_TEMPLATE = """\
You are an expert AI agent architect. Your job is to translate the user's idea \
into a complete Markdown specification for a specialized subagent.

Agent Name: $agent_name
Agent Concept: $user_idea

Return ONLY valid Markdown that follows **exactly** the structure shown below. \
Do not add explanations, front matter, or trailing commentary. Fill in every \
section and replace every placeholder such as <...> with concrete content \
tailored to this agent. All JSON code blocks must contain strictly valid JSON \
with values that match the agent concept.

# Agent: $agent_name

## Summary
<2-4 sentence overview describing the agent's purpose and strengths.>

## Persona
<Describe the tone, style, and decision-making personality of the agent.>

## Guidelines
- <Concrete rule the agent must always follow>
- <Another actionable rule>
- <Add more bullets as needed>

## Inputs
```json
[
  {
    "name": "objective",
    "type": "string",
    "required": true,
    "description": "Concise but detailed statement of the user goal the agent should accomplish."
  }
]
```
- Include every input the agent needs. Allowed types: "string", "number", \
"boolean", "integer", "string[]", "number[]".

## Output
```json
{
  "name": "report",
  "type": "json",
  "description": "What the calling agent receives at completion.",
  "schema": {
    "type": "object",
    "properties": {
      "Summary": { "type": "string" },
      "Insights": { "type": "array", "items": { "type": "string" } }
    },
    "required": ["Summary", "Insights"]
  }
}
```
- If the agent should return free-form text, set "type" to "text" and omit the schema field.

## Tools
```json
["read_file", "ls", "glob", "grep", "web_fetch", "web_search", "write_file", "shell"]
```
- Provide only tool identifiers that exist in the host. Remove or add tools as \
needed to fit the agent's responsibilities.

## MCP
```json
["github", "jira"]
```
- List MCP server identifiers the agent can rely on. Use an empty array ([]) if none are needed.

## Model
```json
{
  "model": "gemini-2.5-pro",
  "temperature": 0.25,
  "top_p": 0.9,
  "thinkingBudget": 120
}
```
- Adjust values to match the agent's needs. Leave numbers as plain JSON numbers.

## Run Config
```json
{
  "max_time_minutes": 6,
  "max_turns": 12
}
```

## Query
<Write the kick-off user message template. Reference inputs using $${input_name} syntax.>

## System Prompt
<Authoritative instructions that combine the persona, guidelines, tooling \
expectations, and goal for the agent.>

The response must be valid Markdown and every JSON block must be strictly valid JSON.
"""

_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")


def build_authoring_prompt(name: str, idea: str) -> str:
    """Fill the authoring template with the agent name and concept.

    Raises:
        ValueError: If *name* or *idea* is blank.
    """
    name = name.strip()
    idea = idea.strip()
    if not name:
        raise ValueError("Agent name cannot be empty.")
    if not idea:
        raise ValueError("Agent idea cannot be empty.")
    return Template(AUTHORING_PROMPT_TEMPLATE).safe_substitute(agent_name=name, user_idea=idea)


def slugify(name: str) -> str:
    """``"Code Cartographer!"`` → ``"code-cartographer"``; blank names get a timestamp."""
    slug = _NON_SLUG_RE.sub("-", name.lower()).strip("-")
    return slug or f"agent-{int(time.time() * 1000)}"


def format_markdown(markdown: str) -> str:
    return markdown.strip() + "\n"


def resolve_agents_dir(directory: str | Path | None = None, *, base: Path | None = None) -> Path:
    """Resolve the destination directory; ``./agents`` when none is given."""
    base = base or Path.cwd()
    if directory is None:
        return (base / "agents").resolve()
    return (base / Path(directory)).resolve()


def save_agent_markdown(
    markdown: str,
    name: str,
    directory: Path,
    *,
    overwrite: bool = False,
    defaults: CompilerDefaults | None = None,
) -> Path:
    """Validate *markdown* and write it to ``<directory>/<slug>.agent.md``.

    Raises:
        AgentMarkdownError: If the markdown does not compile.
        FileExistsError: If the target exists and *overwrite* is false.
    """
    parse_agent_markdown(markdown, "generated agent", defaults=defaults)

    suffix = defaults.agent_file_suffix if defaults else AGENT_FILE_SUFFIX
    target = directory / f"{slugify(name)}{suffix}"
    if target.exists() and not overwrite:
        raise FileExistsError(
            f"Agent file already exists at {target}. Use --overwrite to replace it."
        )

    directory.mkdir(parents=True, exist_ok=True)
    target.write_text(format_markdown(markdown), encoding="utf-8")
    return target
