"""agentmd — compile agent markdown documents into typed agent definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from agentmd.compiler.loader import AgentLoader as AgentLoader
    from agentmd.compiler.loader import load_agents_from_directory as load_agents_from_directory
    from agentmd.compiler.parser import parse_agent_markdown as parse_agent_markdown

_COMPILER_EXPORTS = {
    "AgentLoader": "agentmd.compiler.loader",
    "load_agents_from_directory": "agentmd.compiler.loader",
    "parse_agent_markdown": "agentmd.compiler.parser",
}


def __getattr__(name: str) -> object:
    module_path = _COMPILER_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'agentmd' has no attribute {name!r}")
