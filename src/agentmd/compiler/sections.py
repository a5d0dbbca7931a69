"""Markdown segmentation: the agent-name heading and ``##`` sections."""

from __future__ import annotations

import re

from agentmd.errors import MissingAgentNameError

SECTION_HEADING_RE = re.compile(r"^##[ \t]+(.+?)[ \t]*$", re.MULTILINE)
AGENT_NAME_RE = re.compile(r"^#[ \t]*Agent:[ \t]*(.*)$", re.IGNORECASE | re.MULTILINE)
CODE_FENCE_RE = re.compile(r"```.*?```", re.DOTALL)


def normalize_newlines(markdown: str) -> str:
    return markdown.replace("\r\n", "\n").replace("\r", "\n")


def extract_sections(markdown: str) -> dict[str, str]:
    """Split *markdown* into ``{lower-cased heading: trimmed body}``.

    A body runs from its heading to the next ``##`` heading or the end of
    the document.  Repeated headings overwrite earlier ones.
    """
    sections: dict[str, str] = {}
    matches = list(SECTION_HEADING_RE.finditer(markdown))

    for index, match in enumerate(matches):
        heading = match.group(1).strip().lower()
        end = matches[index + 1].start() if index + 1 < len(matches) else len(markdown)
        sections[heading] = markdown[match.end() : end].strip()

    return sections


def extract_agent_name(markdown: str, source: str) -> str:
    """Return the name from the first ``# Agent: <name>`` heading.

    Raises:
        MissingAgentNameError: If no such heading exists or the name is blank.
    """
    match = AGENT_NAME_RE.search(markdown)
    if match is None:
        raise MissingAgentNameError(source)

    name = match.group(1).strip()
    if not name:
        raise MissingAgentNameError(source, empty=True)
    return name


def strip_code_fences(text: str) -> str:
    return CODE_FENCE_RE.sub("", text).strip()
