"""
Postboard Backend: Request Validation
======================================

What:  Runs a Pydantic schema against an untyped request body and reports
       every problem as a readable message.
How:   validate() returns the accepted model or raises RequestValidationFailed
       carrying one message per failing field. It is pure: no I/O, no logging.

Message format:
    "<field>: <pydantic message>", e.g.
        title: String should have at least 1 character
        body: Field required
"""

from typing import Any, Iterable, List, Mapping, Type, TypeVar

from pydantic import BaseModel, ValidationError

from app.exceptions import RequestValidationFailed

ModelT = TypeVar("ModelT", bound=BaseModel)

# First element of a FastAPI error location names where the value came from
_REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def format_errors(errors: Iterable[Mapping[str, Any]], location_prefixed: bool = False) -> List[str]:
    """
    Turn Pydantic error dicts into "<field>: <message>" strings.

    Args:
        errors: ``ValidationError.errors()`` or FastAPI's ``RequestValidationError.errors()``
        location_prefixed: True for FastAPI errors, whose ``loc`` starts with
            the request location ("body", "query", ...) rather than the field
    """
    messages = []
    for error in errors:
        loc = list(error.get("loc", ()))
        if location_prefixed and loc and loc[0] in _REQUEST_LOCATIONS:
            loc = loc[1:]
        field = ".".join(str(part) for part in loc)
        msg = error.get("msg", "Invalid value")
        messages.append(f"{field}: {msg}" if field else msg)
    return messages


def validate(schema: Type[ModelT], data: Any) -> ModelT:
    """
    Validate ``data`` against ``schema``.

    Returns:
        The accepted model instance.

    Raises:
        RequestValidationFailed: with every field-level message, never just the first.
    """
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        raise RequestValidationFailed(errors=format_errors(exc.errors())) from exc
