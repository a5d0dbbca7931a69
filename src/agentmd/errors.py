"""Error types raised while compiling agent markdown documents."""

from __future__ import annotations


class AgentMarkdownError(Exception):
    """Base error for all agent markdown compilation failures."""


class MissingAgentNameError(AgentMarkdownError):
    """The document has no ``# Agent: <name>`` heading, or the name is blank."""

    def __init__(self, source: str, *, empty: bool = False) -> None:
        self.source = source
        self.empty = empty
        if empty:
            msg = f"Agent name is empty in {source}."
        else:
            msg = f'Missing "# Agent: <name>" header in {source}.'
        super().__init__(msg)


class MalformedSectionError(AgentMarkdownError):
    """A structured section lacks a single valid fenced JSON block."""

    def __init__(self, section: str, source: str, reason: str, detail: str = "") -> None:
        self.section = section
        self.source = source
        self.reason = reason
        self.detail = detail
        msg = f'{reason} in "{section}" section of {source}'
        super().__init__(msg + (f": {detail}" if detail else "."))


class DefaultsConfigError(AgentMarkdownError):
    """The compiler defaults file could not be read or validated."""
