"""Canonical JSON rendering of headers and claims."""

import json
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from jwtkit.core.errors import CanonicalizationError, ParseError


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        data = value.model_dump(mode="json", by_alias=True, exclude_none=True)
        # unset fields are omitted, explicit nulls in extra fields are kept
        for key, extra in (value.model_extra or {}).items():
            if extra is None:
                data[key] = None
        return data
    return to_jsonable_python(value, by_alias=True)


def canonicalize(value: Any) -> bytes:
    """Serialize ``value`` to compact UTF-8 JSON with sorted object keys."""
    try:
        jsonable = _to_jsonable(value)
        text = json.dumps(
            jsonable,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
        return text.encode("utf-8")
    except (
        PydanticSerializationError, TypeError, ValueError, RecursionError
    ) as exc:
        raise CanonicalizationError(str(exc)) from exc


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Out of range float value: {name}")


def decanonicalize(data: bytes, into: Any = None) -> Any:
    """Parse JSON bytes, optionally validating the result into ``into``."""
    try:
        value = json.loads(data.decode("utf-8"), parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        raise ParseError(f"Invalid JSON: {exc}") from exc
    if into is None:
        return value
    return validate_into(value, into)


def validate_into(value: Any, into: Any) -> Any:
    """Validate already-decoded JSON into a pydantic-supported type."""
    try:
        return TypeAdapter(into).validate_python(value)
    except ValidationError as exc:
        raise ParseError(str(exc)) from exc
