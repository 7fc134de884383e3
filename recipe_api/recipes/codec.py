from recipe_api.framework.errors import DecodeError, InvalidPayload
from recipe_api.shared.lib import codec
from recipe_api.shared.schemas.recipe import Recipe

RECORD_PREFIX = "recipe:"


def record_key(recipe_id: str) -> str:
    return f"{RECORD_PREFIX}{recipe_id}"


def encode_recipe(recipe: Recipe) -> bytes:
    """
    Serializes a recipe record. Optional fields are always written, as null when unset.
    """
    return codec.encode(recipe)


def decode_recipe(data: bytes) -> Recipe:
    """
    Parses a client payload. Raises InvalidPayload.
    """
    return codec.decode(data, Recipe)


def decode_record(data: bytes, recipe_id: str) -> Recipe:
    """
    Parses a record read back from the bucket. The service wrote it, so a
    failure here is an internal DecodeError rather than a client error.
    """
    try:
        return codec.decode(data, Recipe)
    except InvalidPayload as exc:
        raise DecodeError(
            f"stored record {record_key(recipe_id)!r} is not a valid recipe",
            recipe_id=recipe_id,
        ) from exc
