"""Tests for batch loading of agent directories."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from agentmd.compiler.loader import (
    AgentLoader,
    LoadFailure,
    LoadSuccess,
    is_agent_file,
    list_agent_files,
    load_agent_file,
    load_agents_from_directory,
    scan_directory,
)
from agentmd.config import CompilerDefaults


def _write(directory: Path, filename: str, content: str) -> Path:
    path = directory / filename
    path.write_text(content, encoding="utf-8")
    return path


class TestAgentFiles:
    def test_suffix_match_is_case_insensitive(self, tmp_path: Path) -> None:
        upper = _write(tmp_path, "Upper.AGENT.MD", "# Agent: U\n")
        other = _write(tmp_path, "notes.md", "# Agent: N\n")
        assert is_agent_file(upper, ".agent.md")
        assert not is_agent_file(other, ".agent.md")

    def test_directories_are_not_agent_files(self, tmp_path: Path) -> None:
        nested = tmp_path / "nested.agent.md"
        nested.mkdir()
        assert not is_agent_file(nested, ".agent.md")

    def test_sorted_and_not_recursive(self, tmp_path: Path) -> None:
        _write(tmp_path, "b.agent.md", "# Agent: B\n")
        _write(tmp_path, "a.agent.md", "# Agent: A\n")
        sub = tmp_path / "sub"
        sub.mkdir()
        _write(sub, "c.agent.md", "# Agent: C\n")
        names = [p.name for p in list_agent_files(tmp_path, ".agent.md")]
        assert names == ["a.agent.md", "b.agent.md"]


class TestLoadAgentFile:
    def test_success(self, tmp_path: Path, travel_markdown: str) -> None:
        result = load_agent_file(_write(tmp_path, "trip.agent.md", travel_markdown))
        assert isinstance(result, LoadSuccess)
        assert result.status == "parsed"
        assert result.definition.name == "Trip Builder"

    def test_compile_failure(self, tmp_path: Path) -> None:
        result = load_agent_file(_write(tmp_path, "bad.agent.md", "no heading"))
        assert isinstance(result, LoadFailure)
        assert result.status == "skipped"
        assert "Missing" in result.reason

    def test_undecodable_file(self, tmp_path: Path) -> None:
        path = tmp_path / "binary.agent.md"
        path.write_bytes(b"\xff\xfe\x00# Agent")
        result = load_agent_file(path)
        assert isinstance(result, LoadFailure)


class TestLoadAgentsFromDirectory:
    def test_only_agent_files_loaded(self, tmp_path: Path) -> None:
        _write(tmp_path, "x.agent.md", "# Agent: X\n\n## Summary\nDoes X.\n")
        _write(tmp_path, "notes.txt", "# Agent: Notes\n")
        definitions = load_agents_from_directory(tmp_path)
        assert [d.name for d in definitions] == ["X"]

    def test_failures_skipped_with_warning(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        _write(tmp_path, "a.agent.md", "# Agent: A\n")
        bad = _write(tmp_path, "b.agent.md", "# Agent: B\n\n## Tools\nnot json\n")
        _write(tmp_path, "c.agent.md", "# Agent: C\n")

        with caplog.at_level(logging.WARNING, logger="agentmd.compiler.loader"):
            definitions = load_agents_from_directory(tmp_path)

        assert [d.name for d in definitions] == ["A", "C"]
        warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert warnings[0].startswith(f"Failed to load agent from {bad}:")
        assert '"tools"' in warnings[0]

    def test_extreme_json_values_do_not_abort_batch(self, tmp_path: Path) -> None:
        huge = "1" + "0" * 400
        depth = 100_000
        _write(tmp_path, "a.agent.md", "# Agent: A\n")
        _write(
            tmp_path,
            "b.agent.md",
            f'# Agent: B\n\n## Run Config\n```json\n{{"max_turns": {huge}}}\n```\n',
        )
        _write(
            tmp_path,
            "c.agent.md",
            f'# Agent: C\n\n## Model\n```json\n{{"temperature": {huge}}}\n```\n',
        )
        deep = _write(
            tmp_path,
            "d.agent.md",
            f"# Agent: D\n\n## Tools\n```json\n{'[' * depth}{']' * depth}\n```\n",
        )

        report = scan_directory(tmp_path)

        assert [d.name for d in report.definitions] == ["A", "B", "C"]
        assert report.definitions[1].run_config.max_turns == CompilerDefaults().max_turns
        assert [f.path for f in report.failures] == [deep]
        assert "Invalid JSON" in report.failures[0].reason

    @pytest.mark.parametrize("max_workers", [None, 4])
    def test_unexpected_error_becomes_failure(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, max_workers: int | None
    ) -> None:
        import agentmd.compiler.loader as loader_module

        real_parse = loader_module.parse_agent_file

        def flaky_parse(path: Path, **kwargs: object) -> object:
            if path.name == "b.agent.md":
                raise RuntimeError("boom")
            return real_parse(path, **kwargs)  # type: ignore[arg-type]

        monkeypatch.setattr(loader_module, "parse_agent_file", flaky_parse)
        _write(tmp_path, "a.agent.md", "# Agent: A\n")
        bad = _write(tmp_path, "b.agent.md", "# Agent: B\n")
        _write(tmp_path, "c.agent.md", "# Agent: C\n")

        report = scan_directory(tmp_path, max_workers=max_workers)

        assert [d.name for d in report.definitions] == ["A", "C"]
        assert report.warnings == [f"Failed to load agent from {bad}: RuntimeError: boom"]

    def test_missing_directory_is_empty(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="agentmd.compiler.loader"):
            assert load_agents_from_directory(tmp_path / "missing") == []
        assert not caplog.records

    def test_path_is_a_file(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        target = _write(tmp_path, "plain.txt", "")
        with caplog.at_level(logging.WARNING, logger="agentmd.compiler.loader"):
            assert load_agents_from_directory(target) == []
        assert any("Unable to read agents directory" in r.getMessage() for r in caplog.records)

    def test_empty_directory(self, tmp_path: Path) -> None:
        assert load_agents_from_directory(tmp_path) == []

    def test_thread_pool_keeps_order(self, tmp_path: Path) -> None:
        for letter in "dcba":
            _write(tmp_path, f"{letter}.agent.md", f"# Agent: {letter.upper()}\n")
        definitions = load_agents_from_directory(tmp_path, max_workers=4)
        assert [d.name for d in definitions] == ["A", "B", "C", "D"]

    def test_custom_suffix(self, tmp_path: Path) -> None:
        _write(tmp_path, "x.agent.md", "# Agent: X\n")
        _write(tmp_path, "y.bot.md", "# Agent: Y\n")
        defaults = CompilerDefaults(agent_file_suffix=".bot.md")
        assert [d.name for d in load_agents_from_directory(tmp_path, defaults=defaults)] == ["Y"]


class TestScanDirectory:
    def test_report(self, tmp_path: Path) -> None:
        _write(tmp_path, "good.agent.md", "# Agent: Good\n")
        bad = _write(tmp_path, "bad.agent.md", "")
        report = scan_directory(tmp_path)
        assert [d.name for d in report.definitions] == ["Good"]
        assert [f.path for f in report.failures] == [bad]
        assert report.warnings == [f"Failed to load agent from {bad}: {report.failures[0].reason}"]


class TestAgentLoader:
    def test_load_all_keyed_by_name(self, tmp_path: Path, sample_markdown: str) -> None:
        _write(tmp_path, "cartographer.agent.md", sample_markdown)
        _write(tmp_path, "other.agent.md", "# Agent: Other\n")
        definitions = AgentLoader(tmp_path).load_all()
        assert set(definitions) == {"Code Cartographer", "Other"}

    def test_duplicate_names_first_wins(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        _write(tmp_path, "a.agent.md", "# Agent: Twin\n\n## Summary\nFirst.\n")
        _write(tmp_path, "b.agent.md", "# Agent: Twin\n\n## Summary\nSecond.\n")
        with caplog.at_level(logging.WARNING, logger="agentmd.compiler.loader"):
            definitions = AgentLoader(tmp_path).load_all()
        assert definitions["Twin"].description == "First."
        assert any("Duplicate agent name 'Twin'" in r.getMessage() for r in caplog.records)

    def test_load_one(self, tmp_path: Path, travel_markdown: str) -> None:
        _write(tmp_path, "trip.agent.md", travel_markdown)
        loader = AgentLoader(tmp_path)
        assert loader.load_one("Trip Builder").name == "Trip Builder"

    def test_load_one_unknown(self, tmp_path: Path) -> None:
        with pytest.raises(KeyError, match="Nobody"):
            AgentLoader(tmp_path).load_one("Nobody")

    def test_reload_picks_up_new_files(self, tmp_path: Path) -> None:
        loader = AgentLoader(tmp_path)
        assert loader.load_all() == {}
        _write(tmp_path, "late.agent.md", "# Agent: Late\n")
        assert loader.load_one("Late").name == "Late"
