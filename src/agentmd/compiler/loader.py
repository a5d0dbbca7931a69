"""Agent directory loader — discover and compile ``*.agent.md`` files in batch.

Each file moves from pending to either parsed (:class:`LoadSuccess`) or
skipped-with-warning (:class:`LoadFailure`).  A failing file never aborts
the batch, and a missing directory simply yields nothing.

Typical usage::

    definitions = load_agents_from_directory(Path("agents"))

    loader = AgentLoader(Path("agents"))
    planner = loader.load_one("Planner")
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from agentmd.compiler.models import AgentDefinition  # noqa: TC001
from agentmd.compiler.parser import parse_agent_file
from agentmd.config import CompilerDefaults
from agentmd.errors import AgentMarkdownError
from agentmd.utils.telemetry import (
    ATTR_DIRECTORY,
    ATTR_FAILED,
    ATTR_LOADED,
    SPAN_LOAD_DIRECTORY,
    get_tracer,
)

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


class LoadSuccess(BaseModel):
    """A file that compiled into a definition."""

    status: Literal["parsed"] = "parsed"
    path: Path
    definition: AgentDefinition


class LoadFailure(BaseModel):
    """A file that was skipped, with the reason it failed."""

    status: Literal["skipped"] = "skipped"
    path: Path
    reason: str


LoadResult = LoadSuccess | LoadFailure


class DirectoryLoadReport(BaseModel):
    """Aggregated outcome of loading one directory."""

    directory: Path
    definitions: list[AgentDefinition] = Field(default_factory=list)
    failures: list[LoadFailure] = Field(default_factory=list)

    @property
    def warnings(self) -> list[str]:
        return [f"Failed to load agent from {f.path}: {f.reason}" for f in self.failures]


def is_agent_file(path: Path, suffix: str) -> bool:
    return path.name.lower().endswith(suffix.lower()) and path.is_file()


def load_agent_file(path: Path, *, defaults: CompilerDefaults | None = None) -> LoadResult:
    """Compile one file, capturing any failure as a :class:`LoadFailure`."""
    try:
        definition = parse_agent_file(path, defaults=defaults)
    except (AgentMarkdownError, OSError, UnicodeDecodeError) as exc:
        return LoadFailure(path=path, reason=str(exc))
    except Exception as exc:
        logger.debug("Unexpected error compiling %s", path, exc_info=True)
        return LoadFailure(path=path, reason=f"{type(exc).__name__}: {exc}")
    return LoadSuccess(path=path, definition=definition)


def list_agent_files(directory: Path, suffix: str) -> list[Path]:
    """Return agent files directly inside *directory*, sorted by name.

    Raises:
        OSError: If the directory cannot be listed (including when missing).
    """
    return sorted(path for path in directory.iterdir() if is_agent_file(path, suffix))


def scan_directory(
    directory: Path,
    *,
    defaults: CompilerDefaults | None = None,
    max_workers: int | None = None,
) -> DirectoryLoadReport:
    """Load every agent file in *directory* and report successes and failures.

    Args:
        directory: Directory to scan (not recursive).
        defaults: Compiler defaults; also supplies the agent file suffix.
        max_workers: When greater than one, files are compiled on a thread
            pool of that size.  Results keep file-name order either way.
    """
    defaults = defaults or CompilerDefaults()
    report = DirectoryLoadReport(directory=directory)

    with _tracer.start_as_current_span(SPAN_LOAD_DIRECTORY) as span:
        span.set_attribute(ATTR_DIRECTORY, str(directory))

        try:
            paths = list_agent_files(directory, defaults.agent_file_suffix)
        except FileNotFoundError:
            logger.debug("Agents directory %s does not exist", directory)
            return report
        except OSError as exc:
            logger.warning("Unable to read agents directory %s: %s", directory, exc)
            return report

        if max_workers and max_workers > 1 and len(paths) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                results = list(pool.map(lambda p: load_agent_file(p, defaults=defaults), paths))
        else:
            results = [load_agent_file(p, defaults=defaults) for p in paths]

        for result in results:
            if isinstance(result, LoadSuccess):
                report.definitions.append(result.definition)
            else:
                logger.warning("Failed to load agent from %s: %s", result.path, result.reason)
                report.failures.append(result)

        span.set_attribute(ATTR_LOADED, len(report.definitions))
        span.set_attribute(ATTR_FAILED, len(report.failures))

    logger.debug(
        "Loaded %d agent definition(s) from %s (%d skipped)",
        len(report.definitions),
        directory,
        len(report.failures),
    )
    return report


def load_agents_from_directory(
    directory: Path,
    *,
    defaults: CompilerDefaults | None = None,
    max_workers: int | None = None,
) -> list[AgentDefinition]:
    """Return the definitions that compiled; failures are logged as warnings."""
    return scan_directory(directory, defaults=defaults, max_workers=max_workers).definitions


class AgentLoader:
    """Load and cache agent definitions from a directory, keyed by agent name.

    When two files declare the same agent name the first (in file-name
    order) wins and the later one is logged and skipped.
    """

    def __init__(self, directory: Path, *, defaults: CompilerDefaults | None = None) -> None:
        self.directory = directory
        self.defaults = defaults or CompilerDefaults()
        self._cache: dict[str, AgentDefinition] = {}

    def load_all(self) -> dict[str, AgentDefinition]:
        """Load all definitions from the directory.

        Re-reads from disk every call.
        """
        definitions: dict[str, AgentDefinition] = {}
        for definition in load_agents_from_directory(self.directory, defaults=self.defaults):
            if definition.name in definitions:
                logger.warning(
                    "Duplicate agent name '%s' in %s (skipping)",
                    definition.name,
                    self.directory,
                )
                continue
            definitions[definition.name] = definition

        self._cache = definitions
        return definitions

    def load_one(self, name: str) -> AgentDefinition:
        """Return the definition named *name*, loading the directory if needed.

        Raises:
            KeyError: If no agent file in the directory declares *name*.
        """
        if name not in self._cache:
            self.load_all()
        try:
            return self._cache[name]
        except KeyError:
            raise KeyError(f"No agent named {name!r} in {self.directory}") from None
