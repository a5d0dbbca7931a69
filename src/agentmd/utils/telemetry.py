"""OpenTelemetry tracing helpers for agentmd.

Compilation and directory loading open spans through :func:`get_tracer`.
Without a configured SDK the OpenTelemetry API hands back no-op tracers, so
instrumentation costs nothing unless :func:`configure_telemetry` is called
(requires the ``otel`` extra: ``pip install agentmd[otel]``).

Usage::

    from agentmd.utils.telemetry import ATTR_SOURCE, get_tracer

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("agentmd.compile") as span:
        span.set_attribute(ATTR_SOURCE, "planner.agent.md")
"""

from __future__ import annotations

from typing import Any

from opentelemetry import trace

# ---------------------------------------------------------------------------
# Semantic attribute keys used throughout agentmd instrumentation
# ---------------------------------------------------------------------------

ATTR_SOURCE = "agentmd.source"
ATTR_AGENT_NAME = "agentmd.agent.name"
ATTR_OUTPUT_TYPE = "agentmd.output.type"
ATTR_INPUT_COUNT = "agentmd.input.count"
ATTR_DIRECTORY = "agentmd.directory"
ATTR_LOADED = "agentmd.load.loaded"
ATTR_FAILED = "agentmd.load.failed"

SPAN_COMPILE = "agentmd.compile"
SPAN_LOAD_DIRECTORY = "agentmd.load_directory"

_INSTRUMENTATION_NAME = "agentmd"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a :class:`~opentelemetry.trace.Tracer` for *name*.

    If the OpenTelemetry SDK has not been configured the returned tracer
    is a no-op.
    """
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(
    *,
    service_name: str = "agentmd",
    export_to_console: bool = True,
    otlp_endpoint: str | None = None,
) -> None:
    """Configure OpenTelemetry tracing (requires ``agentmd[otel]``).

    Parameters
    ----------
    service_name:
        The ``service.name`` resource attribute.
    export_to_console:
        If ``True``, export spans as JSON to stdout.
    otlp_endpoint:
        If set, export spans via OTLP/gRPC to this endpoint.

    Raises
    ------
    ImportError
        If the ``opentelemetry-sdk`` package is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace.export import (  # pyright: ignore[reportMissingImports]
            BatchSpanProcessor,
            SimpleSpanProcessor,
        )
    except ImportError as exc:
        msg = (
            "opentelemetry-sdk is required for configure_telemetry(). "
            "Install it with: pip install agentmd[otel]"
        )
        raise ImportError(msg) from exc

    resource = Resource.create({"service.name": service_name})
    provider = TracerProvider(resource=resource)

    if export_to_console:
        _add_console_exporter(provider, SimpleSpanProcessor)

    if otlp_endpoint:
        _add_otlp_exporter(provider, BatchSpanProcessor, otlp_endpoint)

    trace.set_tracer_provider(provider)


def _add_console_exporter(provider: Any, processor_cls: Any) -> None:
    from opentelemetry.sdk.trace.export import ConsoleSpanExporter  # pyright: ignore[reportMissingImports]

    provider.add_span_processor(processor_cls(ConsoleSpanExporter()))


def _add_otlp_exporter(provider: Any, processor_cls: Any, endpoint: str) -> None:
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (  # pyright: ignore[reportMissingImports]
            OTLPSpanExporter,
        )
    except ImportError as exc:
        msg = (
            "opentelemetry-exporter-otlp is required for OTLP export. "
            "Install it with: pip install agentmd[otel]"
        )
        raise ImportError(msg) from exc

    provider.add_span_processor(processor_cls(OTLPSpanExporter(endpoint=endpoint)))
