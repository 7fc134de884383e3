from typing import Callable, Dict, Optional, Protocol
from urllib.parse import urlparse

from redis.asyncio import Redis
from redis.exceptions import RedisError

from recipe_api.framework.errors import StoreUnavailable


class Bucket(Protocol):
    """
    A single named key-value namespace.
    No operation spans more than one key and nothing is atomic across calls.
    """

    name: str

    async def get(self, key: str) -> Optional[bytes]: ...

    async def set(self, key: str, value: bytes) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def close(self) -> None: ...


class MemoryBucket:
    """
    In-process bucket, used for local runs and tests.

    `fail_on(op, key)` may return True to make that call raise
    StoreUnavailable, which lets tests exercise partial failures.
    """

    def __init__(
        self,
        name: str = "recipes",
        fail_on: Optional[Callable[[str, str], bool]] = None,
    ):
        self.name = name
        self.data: Dict[str, bytes] = {}
        self.fail_on = fail_on
        self.closed = False

    def _check(self, op: str, key: str):
        if self.fail_on and self.fail_on(op, key):
            raise StoreUnavailable(f"{op} {key!r} failed", op=op, key=key)

    async def get(self, key: str) -> Optional[bytes]:
        self._check("get", key)
        return self.data.get(key)

    async def set(self, key: str, value: bytes) -> None:
        self._check("set", key)
        self.data[key] = bytes(value)

    async def delete(self, key: str) -> None:
        self._check("delete", key)
        self.data.pop(key, None)

    async def close(self) -> None:
        self.closed = True


class RedisBucket:
    """
    Bucket backed by Redis. Keys are stored as `<bucket>:<key>`.
    """

    def __init__(self, client: Redis, name: str = "recipes"):
        self.client = client
        self.name = name

    def _key(self, key: str) -> str:
        return f"{self.name}:{key}"

    async def get(self, key: str) -> Optional[bytes]:
        try:
            return await self.client.get(self._key(key))
        except RedisError as exc:
            raise StoreUnavailable(f"get {key!r} failed: {exc}", op="get", key=key) from exc

    async def set(self, key: str, value: bytes) -> None:
        try:
            await self.client.set(self._key(key), value)
        except RedisError as exc:
            raise StoreUnavailable(f"set {key!r} failed: {exc}", op="set", key=key) from exc

    async def delete(self, key: str) -> None:
        try:
            await self.client.delete(self._key(key))
        except RedisError as exc:
            raise StoreUnavailable(
                f"delete {key!r} failed: {exc}", op="delete", key=key
            ) from exc

    async def close(self) -> None:
        await self.client.aclose()


def open_bucket(url: str, name: str) -> Bucket:
    """
    Opens the bucket `name` on the store addressed by `url`
    (`memory://` or `redis://...`).
    """
    scheme = urlparse(url).scheme
    if scheme == "memory":
        return MemoryBucket(name)
    if scheme in ("redis", "rediss", "unix"):
        # raw bytes in and out, records are not necessarily text
        return RedisBucket(Redis.from_url(url, decode_responses=False), name)
    raise StoreUnavailable(f"Unsupported key-value store url scheme {scheme!r}")
