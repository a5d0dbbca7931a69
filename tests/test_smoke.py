"""Smoke test to verify the project scaffolding works."""

from __future__ import annotations


def test_import() -> None:
    import agentmd

    assert agentmd.__version__ == "0.1.0"


def test_cli_entrypoint() -> None:
    from agentmd.cli import main

    assert callable(main)


def test_compiler_imports() -> None:
    from agentmd.compiler import (
        AgentDefinition,
        AgentLoader,
        CompiledSchema,
        compile_schema,
        load_agents_from_directory,
        parse_agent_file,
        parse_agent_markdown,
    )

    assert AgentDefinition is not None
    assert AgentLoader is not None
    assert CompiledSchema is not None
    assert callable(compile_schema)
    assert callable(load_agents_from_directory)
    assert callable(parse_agent_file)
    assert callable(parse_agent_markdown)


def test_lazy_import_from_agentmd() -> None:
    import agentmd

    assert agentmd.parse_agent_markdown is not None
    assert agentmd.load_agents_from_directory is not None
    assert agentmd.AgentLoader is not None
