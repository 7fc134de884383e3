import json

import pytest

from recipe_api.framework.errors import DecodeError, InvalidPayload
from recipe_api.recipes.codec import decode_record, decode_recipe, encode_recipe, record_key
from tests.factories import make_recipe, recipe_dict


def test_record_key():
    assert record_key("abc") == "recipe:abc"


def test_encode_is_compact_and_keeps_nulls():
    recipe = make_recipe(id="r1", description=None)
    data = encode_recipe(recipe)

    assert data == json.dumps(json.loads(data), separators=(",", ":")).encode()
    parsed = json.loads(data)
    assert parsed["description"] is None
    assert parsed["instructions"][1]["duration_mins"] is None
    assert list(parsed) == [
        "id",
        "name",
        "description",
        "ingredients",
        "instructions",
        "servings",
        "prep_time_mins",
        "cook_time_mins",
        "difficulty",
        "tags",
        "dietary_info",
        "created_at",
        "updated_at",
    ]


def test_decode_reproduces_every_field():
    recipe = make_recipe(id="r1", created_at=11, updated_at=12, tags=["a", "a", "b"])
    decoded = decode_recipe(encode_recipe(recipe))

    assert decoded == recipe
    # duplicates are kept as sent
    assert decoded.tags == ["a", "a", "b"]


def test_decode_accepts_missing_id_and_timestamps():
    data = recipe_dict()
    for key in ("id", "created_at", "updated_at", "description"):
        data.pop(key)

    recipe = decode_recipe(json.dumps(data).encode())

    assert recipe.id == ""
    assert recipe.created_at == 0
    assert recipe.description is None


def test_decode_ignores_unknown_fields():
    recipe = decode_recipe(json.dumps(recipe_dict(rating=5)).encode())
    assert recipe.name == "Pancakes"


def test_decode_is_permissive_about_content():
    recipe = decode_recipe(json.dumps(recipe_dict(name="", difficulty="impossible")).encode())
    assert recipe.name == ""
    assert recipe.difficulty == "impossible"


@pytest.mark.parametrize(
    "body",
    [
        b"",
        b"not json",
        b"{\"name\": ",
        b"[]",
        b"\xff\xfe",
        json.dumps({"name": "only a name"}).encode(),
        json.dumps(recipe_dict(servings="lots")).encode(),
        json.dumps(recipe_dict(servings=-1)).encode(),
        json.dumps(recipe_dict(servings="4")).encode(),
        json.dumps(recipe_dict(prep_time_mins=10.0)).encode(),
        json.dumps(
            recipe_dict(ingredients=[{"name": "salt", "amount": 1, "unit": "pinch", "optional": "yes"}])
        ).encode(),
    ],
)
def test_decode_rejects_malformed_payloads(body):
    with pytest.raises(InvalidPayload):
        decode_recipe(body)


def test_decode_record_failure_is_internal():
    with pytest.raises(DecodeError) as excinfo:
        decode_record(b"{broken", "r1")

    assert excinfo.value.status_code == 500
    assert excinfo.value.context == {"recipe_id": "r1"}


def test_decode_accepts_integer_amounts():
    recipe = decode_recipe(
        json.dumps(recipe_dict(ingredients=[{"name": "egg", "amount": 2, "unit": "pc"}])).encode()
    )

    assert recipe.ingredients[0].amount == 2.0
    assert recipe.ingredients[0].optional is False
