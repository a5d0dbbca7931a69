"""agentmd CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import click
from rich.logging import RichHandler

from agentmd import __version__


@click.group()
@click.version_option(version=__version__, prog_name="agentmd")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
@click.option(
    "--defaults",
    "defaults_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML file overriding the compiler defaults.",
)
@click.option("--trace", is_flag=True, help="Print OpenTelemetry spans (needs agentmd[otel]).")
@click.option("--otlp-endpoint", default=None, help="Export spans via OTLP to this endpoint.")
@click.pass_context
def main(
    ctx: click.Context,
    verbose: bool,
    defaults_path: Path | None,
    trace: bool,
    otlp_endpoint: str | None,
) -> None:
    """agentmd — compile agent markdown into agent definitions."""
    from agentmd.cli_commands._output import err_console
    from agentmd.config import load_defaults
    from agentmd.errors import DefaultsConfigError

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )

    if trace or otlp_endpoint:
        from agentmd.utils.telemetry import configure_telemetry

        try:
            configure_telemetry(export_to_console=trace, otlp_endpoint=otlp_endpoint)
        except ImportError as exc:
            raise click.ClickException(str(exc)) from exc

    try:
        ctx.obj = load_defaults(defaults_path)
    except DefaultsConfigError as exc:
        raise click.ClickException(str(exc)) from exc


# Register subcommands
from agentmd.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
