from typing import List

from recipe_api.framework.errors import RecipeNotFound
from recipe_api.recipes.store import RecipeStore
from recipe_api.shared.schemas import generic as gs
from recipe_api.shared.schemas import recipe as rs


async def health(store: RecipeStore) -> gs.StatusResponse:
    """
    Static liveness payload, does not touch the bucket.
    """
    return gs.StatusResponse(status="healthy")


async def list_recipes(store: RecipeStore) -> List[rs.Recipe]:
    """
    Lists every recipe referenced by the id index.
    """
    return await store.list()


async def get_recipe(recipe_id: str, store: RecipeStore) -> rs.Recipe:
    """
    Retrieves a single recipe by its ID.
    """
    recipe = await store.get(recipe_id)
    if recipe is None:
        raise RecipeNotFound(recipe_id=recipe_id)
    return recipe


async def create_recipe(data: rs.Recipe, store: RecipeStore) -> gs.CreatedResponse:
    """
    Creates a new recipe, assigning an id when the payload has none.
    """
    recipe_id = await store.create(data)
    return gs.CreatedResponse(id=recipe_id)


async def update_recipe(
    recipe_id: str, data: rs.Recipe, store: RecipeStore
) -> gs.StatusResponse:
    """
    Replaces the recipe stored under `recipe_id`.
    """
    await store.update(recipe_id, data)
    return gs.StatusResponse(status="updated")


async def delete_recipe(recipe_id: str, store: RecipeStore) -> gs.StatusResponse:
    """
    Deletes a recipe by its ID.
    """
    await store.delete(recipe_id)
    return gs.StatusResponse(status="deleted")
