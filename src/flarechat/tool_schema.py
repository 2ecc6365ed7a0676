"""Canonical tool definitions -> Workers AI function-calling schema.

Workers AI accepts a narrower JSON-schema dialect than the one hosts usually
produce. Every ``input_schema`` is re-validated through the pydantic models
below: unknown keywords are dropped, and keywords the provider cannot express
at all (composition, references, union types) are rejected.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from flarechat.errors import SchemaConversionError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from flarechat.types import ToolDefinition

logger = logging.getLogger(__name__)

_UNSUPPORTED_KEYWORDS = ("anyOf", "oneOf", "allOf", "not", "$ref")


class ParameterSchema(BaseModel):
    """A single property schema in the provider's dialect."""

    model_config = ConfigDict(extra="ignore")

    type: str | None = None
    description: str | None = None
    enum: list[Any] | None = None
    default: Any = None
    items: ParameterSchema | None = None
    properties: dict[str, ParameterSchema] | None = None
    required: list[str] | None = None

    @model_validator(mode="before")
    @classmethod
    def _reject_unsupported(cls, data: Any) -> Any:
        if isinstance(data, dict):
            for keyword in _UNSUPPORTED_KEYWORDS:
                if keyword in data:
                    raise ValueError(f"unsupported JSON-schema keyword {keyword!r}")
        return data


class FunctionParameters(ParameterSchema):
    """Top-level ``parameters`` object of a function definition."""

    type: str = "object"
    properties: dict[str, ParameterSchema] = {}

    @model_validator(mode="after")
    def _require_object(self) -> FunctionParameters:
        if self.type != "object":
            raise ValueError(f"top-level schema type must be 'object', got {self.type!r}")
        return self


def encode_tool(definition: ToolDefinition) -> dict[str, Any]:
    """Encode one tool definition.

    Raises:
        SchemaConversionError: If the input schema cannot be represented.
    """
    schema = definition.input_schema or {}
    try:
        params = FunctionParameters.model_validate(schema)
    except ValidationError as e:
        raise SchemaConversionError(
            f"failed to convert schema for tool {definition.name!r}: {e}",
            hint="Flatten anyOf/oneOf/$ref and use a single 'type' per property.",
            tool_name=definition.name,
        ) from e

    parameters = params.model_dump(exclude_none=True)
    parameters.setdefault("properties", {})
    return {
        "type": "function",
        "function": {
            "name": definition.name,
            "description": definition.description,
            "parameters": parameters,
        },
    }


def encode_tools(definitions: Sequence[ToolDefinition]) -> list[dict[str, Any]] | None:
    """Encode tool definitions, or return None when there are none.

    None means "omit the ``tools`` field": some models reject an empty array.
    """
    if not definitions:
        return None
    tools = [encode_tool(d) for d in definitions]
    logger.debug("Encoded %d tool definition(s)", len(tools))
    return tools
