import logging
from typing import Any, Callable, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from app.core.exceptions import StoreUnavailable

log = logging.getLogger("app.db.mongo")


class MongoCatalogStore:
    """Owns the single Motor client shared by every request.

    Created once in the application lifespan: ``connect()`` at startup,
    ``ping()`` for health checks, ``close()`` at shutdown. Repositories get the
    store injected and ask it for the database on each query.
    """

    def __init__(
        self,
        uri: str,
        db_name: str,
        timeout_ms: int = 5000,
        client_factory: Callable[..., Any] = AsyncIOMotorClient,
    ) -> None:
        self._uri = uri
        self._db_name = db_name
        self._timeout_ms = timeout_ms
        self._client_factory = client_factory
        self._client: Optional[AsyncIOMotorClient] = None

    @property
    def connected(self) -> bool:
        return self._client is not None

    async def connect(self) -> None:
        if self._client is not None:
            return
        client = self._client_factory(self._uri, serverSelectionTimeoutMS=self._timeout_ms)
        try:
            await client.admin.command("ping")
        except PyMongoError as exc:
            client.close()
            raise StoreUnavailable("Failed to connect to MongoDB") from exc
        self._client = client
        log.info("Connected to MongoDB db=%s", self._db_name)

    async def ping(self) -> bool:
        if self._client is None:
            return False
        try:
            await self._client.admin.command("ping")
        except PyMongoError:
            log.warning("MongoDB ping failed", exc_info=True)
            return False
        return True

    def database(self) -> AsyncIOMotorDatabase:
        if self._client is None:
            raise StoreUnavailable("MongoDB connection has not been established")
        return self._client[self._db_name]

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            log.info("MongoDB connection closed")
