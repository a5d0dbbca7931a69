"""JSON-Schema fragment compiler.

Translates the loose, LLM-authored ``schema`` of an agent's output section
into an executable pydantic validator.  Only a small subset of JSON Schema is
understood::

    {"type": "string" | "number" | "integer" | "boolean"}
    {"type": "array", "items": <node>}
    {"type": "object", "properties": {<key>: <node>, ...}, "required": [...]}

Every other node (missing or unknown ``type``, non-object values) compiles to
an accept-anything validator.  :func:`compile_schema` never raises: if
building the validator fails for any reason the whole schema degrades to
accept-anything.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

from pydantic import (
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    create_model,
)

logger = logging.getLogger(__name__)

_OBJECT_CONFIG = ConfigDict(extra="allow")


class SchemaKind(str, Enum):
    """Node kinds the compiler distinguishes."""

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    UNKNOWN = "unknown"


def classify(node: Any) -> SchemaKind:
    """Return the :class:`SchemaKind` of a schema node."""
    if not isinstance(node, dict):
        return SchemaKind.UNKNOWN
    type_ = node.get("type")
    if not isinstance(type_, str):
        return SchemaKind.UNKNOWN
    try:
        return SchemaKind(type_)
    except ValueError:
        return SchemaKind.UNKNOWN


class CompiledSchema:
    """An executable validator produced by :func:`compile_schema`.

    ``validate`` returns plain JSON-compatible data (objects come back as
    dicts keyed by their original property names, undeclared properties
    included) and raises :class:`pydantic.ValidationError` on mismatch.
    """

    __slots__ = ("_adapter", "annotation", "kind", "source")

    def __init__(self, annotation: Any, *, kind: SchemaKind, source: Any = None) -> None:
        self.annotation = annotation
        self.kind = kind
        self.source = source
        self._adapter: TypeAdapter[Any] = TypeAdapter(annotation)

    def validate(self, value: Any) -> Any:
        validated = self._adapter.validate_python(value)
        return self._adapter.dump_python(
            validated, mode="json", by_alias=True, exclude_unset=True
        )

    def is_valid(self, value: Any) -> bool:
        try:
            self.validate(value)
        except ValidationError:
            return False
        return True

    def json_schema(self) -> dict[str, Any]:
        """Return the JSON Schema the compiled validator enforces."""
        return self._adapter.json_schema(by_alias=True)

    def __repr__(self) -> str:
        return f"CompiledSchema(kind={self.kind.value!r})"


def compile_schema(schema: Any) -> CompiledSchema:
    """Compile a JSON-Schema-like fragment; never raises."""
    try:
        return CompiledSchema(_compile_node(schema, ()), kind=classify(schema), source=schema)
    except Exception:
        logger.debug("Schema compilation failed; accepting any value", exc_info=True)
        return CompiledSchema(Any, kind=SchemaKind.UNKNOWN, source=schema)


def text_schema() -> CompiledSchema:
    """Validator for free-form text outputs."""
    return CompiledSchema(StrictStr, kind=SchemaKind.STRING, source={"type": "string"})


# ---------------------------------------------------------------------------
# Visitor
# ---------------------------------------------------------------------------


def _compile_node(node: Any, path: tuple[str, ...]) -> Any:
    return _COMPILERS[classify(node)](node, path)


def _compile_array(node: dict[str, Any], path: tuple[str, ...]) -> Any:
    items = node.get("items")
    if not isinstance(items, dict):
        return list[Any]
    return list[_compile_node(items, (*path, "items"))]  # type: ignore[misc]


def _compile_object(node: dict[str, Any], path: tuple[str, ...]) -> Any:
    properties = node.get("properties")
    if not isinstance(properties, dict):
        return dict[str, Any]

    required = node.get("required")
    required_keys = (
        {key for key in required if isinstance(key, str)} if isinstance(required, list) else set()
    )

    # Property names become aliases so keys that are not Python identifiers,
    # or that clash with BaseModel attributes, still validate.
    fields: dict[str, Any] = {}
    for index, (key, value) in enumerate(properties.items()):
        annotation = _compile_node(value, (*path, str(key)))
        if key in required_keys:
            fields[f"field_{index}"] = (annotation, Field(alias=str(key)))
        else:
            fields[f"field_{index}"] = (annotation, Field(default=None, alias=str(key)))

    return create_model(_model_name(path), __config__=_OBJECT_CONFIG, **fields)


def _model_name(path: tuple[str, ...]) -> str:
    parts = ["".join(ch for ch in part.title() if ch.isalnum()) for part in path]
    return "OutputObject" + "".join(parts)


_COMPILERS: dict[SchemaKind, Callable[[Any, tuple[str, ...]], Any]] = {
    SchemaKind.STRING: lambda _node, _path: StrictStr,
    SchemaKind.NUMBER: lambda _node, _path: StrictInt | StrictFloat,
    SchemaKind.INTEGER: lambda _node, _path: StrictInt,
    SchemaKind.BOOLEAN: lambda _node, _path: StrictBool,
    SchemaKind.ARRAY: _compile_array,
    SchemaKind.OBJECT: _compile_object,
    SchemaKind.UNKNOWN: lambda _node, _path: Any,
}
