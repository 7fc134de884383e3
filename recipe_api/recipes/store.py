import logging
import time
import uuid
from typing import Callable, List, Optional

from recipe_api.config import ServiceOptions
from recipe_api.framework.errors import DecodeError, RecipeNotFound, StoreUnavailable
from recipe_api.framework.logging import log_event
from recipe_api.framework.tracing import traced
from recipe_api.recipes.codec import decode_record, encode_recipe, record_key
from recipe_api.recipes.index import IdIndex
from recipe_api.shared.lib.kv import Bucket
from recipe_api.shared.schemas.recipe import Recipe


def unix_now() -> int:
    return int(time.time())


class RecipeStore:
    """
    CRUD over a key-value bucket.

    Each recipe lives under `recipe:<id>`; the IdIndex enumerates them for
    listing. A record and its index entry are written in two separate
    calls, record first, with no transaction around them. If the index
    write fails the record stays reachable by id but is missing from
    `list()` until it is created again.
    """

    def __init__(
        self,
        bucket: Bucket,
        options: Optional[ServiceOptions] = None,
        clock: Callable[[], int] = unix_now,
    ):
        self.bucket = bucket
        self.index = IdIndex(bucket)
        self.options = options or ServiceOptions()
        self.clock = clock

    def new_id(self) -> str:
        if self.options.id_strategy == "uuid":
            return f"recipe_{uuid.uuid4().hex}"
        # one id per second, concurrent creates in the same second collide
        return f"recipe_{self.clock()}"

    @traced
    async def list(self) -> List[Recipe]:
        """
        Recipes in index order. Ids whose record is missing or unreadable are skipped.
        """
        recipes = []
        for recipe_id in await self.index.load():
            try:
                recipe = await self.get(recipe_id)
            except (DecodeError, StoreUnavailable) as exc:
                log_event(
                    "list_skipped_record",
                    level=logging.WARNING,
                    recipe_id=recipe_id,
                    error=str(exc),
                )
                continue
            if recipe is not None:
                recipes.append(recipe)
        return recipes

    @traced
    async def get(self, recipe_id: str) -> Optional[Recipe]:
        data = await self.bucket.get(record_key(recipe_id))
        if data is None:
            return None
        return decode_record(data, recipe_id)

    @traced
    async def create(self, payload: Recipe) -> str:
        recipe_id = payload.id or self.new_id()
        now = self.clock()
        recipe = payload.model_copy(
            update={"id": recipe_id, "created_at": now, "updated_at": now}
        )

        await self.bucket.set(record_key(recipe_id), encode_recipe(recipe))
        try:
            await self.index.add(recipe_id)
        except StoreUnavailable:
            log_event(
                "index_add_failed",
                level=logging.ERROR,
                recipe_id=recipe_id,
                message="record stored without index entry",
            )
            raise

        return recipe_id

    @traced
    async def update(self, recipe_id: str, payload: Recipe) -> None:
        """
        Full replace of `recipe:<id>`. The body's id is ignored in favor of `recipe_id`.

        With default options no existence check is made, so updating an
        unknown id writes a record the index does not list, and the
        client's timestamps are stored as sent.
        """
        recipe = payload.model_copy(update={"id": recipe_id})

        opts = self.options
        if opts.update_requires_existing or opts.update_touches_timestamps:
            existing = await self.get(recipe_id)
            if existing is None and opts.update_requires_existing:
                raise RecipeNotFound(recipe_id=recipe_id)
            if opts.update_touches_timestamps:
                now = self.clock()
                recipe = recipe.model_copy(
                    update={
                        "created_at": existing.created_at if existing else now,
                        "updated_at": now,
                    }
                )

        await self.bucket.set(record_key(recipe_id), encode_recipe(recipe))

    @traced
    async def delete(self, recipe_id: str) -> None:
        """
        Removes the record and its index entry. Deleting an unknown id succeeds.
        """
        await self.bucket.delete(record_key(recipe_id))
        await self.index.remove(recipe_id)
