from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError
from pydantic_core import to_json

from recipe_api.framework.errors import InvalidPayload

M = TypeVar("M", bound=BaseModel)


def decode(data: bytes, model: Type[M]) -> M:
    """
    Parses JSON bytes into `model`.
    Malformed JSON and shape mismatches both raise InvalidPayload.
    """
    try:
        return model.model_validate_json(data)
    except ValidationError as exc:
        raise InvalidPayload(
            f"{model.__name__}: {exc.error_count()} validation error(s)"
        ) from exc


def encode(value: Any) -> bytes:
    """
    Compact JSON (no whitespace) for models, lists of models and plain data.
    """
    return to_json(value)
