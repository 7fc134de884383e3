import logging
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from recipe_api.framework.logging import log_event
from recipe_api.shared.lib import codec
from recipe_api.shared.lib.kv import Bucket

INDEX_KEY = "_recipe_ids"

_ids_adapter = TypeAdapter(List[str])


class IdIndex:
    """
    The list of every known recipe id, kept as one JSON array under `_recipe_ids`.

    Both mutators are read-modify-write without isolation: two concurrent
    writers race and the last one wins on the whole array. The index is
    derived data, so an unreadable blob is treated as empty.
    """

    def __init__(self, bucket: Bucket):
        self.bucket = bucket

    async def _read(self) -> Optional[List[str]]:
        raw = await self.bucket.get(INDEX_KEY)
        if raw is None:
            return None
        try:
            return _ids_adapter.validate_json(raw)
        except ValidationError:
            log_event("index_unreadable", level=logging.WARNING, key=INDEX_KEY)
            return []

    async def _write(self, ids: List[str]) -> None:
        await self.bucket.set(INDEX_KEY, codec.encode(ids))

    async def load(self) -> List[str]:
        return await self._read() or []

    async def add(self, recipe_id: str) -> None:
        ids = await self.load()
        if recipe_id in ids:
            return
        ids.append(recipe_id)
        await self._write(ids)

    async def remove(self, recipe_id: str) -> None:
        ids = await self._read()
        # the index only comes into existence through add
        if ids is None:
            return
        await self._write([i for i in ids if i != recipe_id])
