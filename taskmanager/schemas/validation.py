"""Explicit request validation: parse a JSON body into a schema and return Ok or Invalid."""

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class Ok(Generic[ModelT]):
    """Validated request body."""

    value: ModelT


@dataclass(frozen=True)
class Invalid:
    """Field-level validation failures keyed by dotted field path."""

    errors: dict[str, str] = field(default_factory=dict)

    @property
    def message(self) -> str:
        return "; ".join(f"{name}: {msg}" for name, msg in self.errors.items())


def validate_payload(model: type[ModelT], data: Any) -> Ok[ModelT] | Invalid:
    """
    Validate a decoded JSON body against a pydantic model.

    Never raises for bad input: a non-object body or any field error comes back
    as Invalid with one human-readable message per field (first error wins).
    """
    if not isinstance(data, dict):
        return Invalid({"body": "Request body must be a JSON object."})
    try:
        return Ok(model.model_validate(data))
    except PydanticValidationError as e:
        errors: dict[str, str] = {}
        for err in e.errors():
            name = ".".join(str(part) for part in err.get("loc", ())) or "body"
            msg = str(err.get("msg", "Invalid value"))
            # Strip pydantic's "Value error, " prefix from custom validator messages.
            if msg.startswith("Value error, "):
                msg = msg[len("Value error, "):]
            errors.setdefault(name, msg)
        return Invalid(errors)
