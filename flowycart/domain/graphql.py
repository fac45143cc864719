"""Envelope types for the GraphQL request and response bodies."""

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import to_jsonable_python


def _decimals_as_floats(value: Any) -> Any:
    # GraphQL Float inputs reject the strings pydantic emits for Decimal
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Mapping):
        return {key: _decimals_as_floats(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [_decimals_as_floats(item) for item in value]
    return value


class GraphQLRequestBody(BaseModel):
    query: str
    variables: dict[str, Any] = Field(default_factory=dict)

    def payload(self) -> dict[str, Any]:
        """The body as JSON-ready data.

        Raises:
            pydantic_core.PydanticSerializationError: if a variable has no JSON form.
        """
        return to_jsonable_python(
            {"query": self.query, "variables": _decimals_as_floats(self.variables)}
        )


class GraphQLErrorEntry(BaseModel):
    """One entry of the top-level ``errors`` array; ``locations``, ``path`` etc. are kept as extras."""

    model_config = ConfigDict(extra="allow")

    message: str | None = None

    @field_validator("message", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str | None:
        return value if value is None or isinstance(value, str) else str(value)


class GraphQLResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    data: dict[str, Any] | None = None
    errors: list[GraphQLErrorEntry] | None = None

    @property
    def error_message(self) -> str:
        """All error messages joined by newline, in the order the API sent them."""
        return "\n".join(
            error.message if error.message is not None else "Unknown GraphQL error"
            for error in self.errors or []
        )
