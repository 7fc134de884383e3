from recipe_api.recipes.db import bucket, service
from recipe_api.recipes.store import RecipeStore

_store = RecipeStore(bucket, options=service.options)


def get_store() -> RecipeStore:
    """
    Get the recipe store bound to the configured bucket.
    """
    return _store
