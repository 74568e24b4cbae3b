# freshcart/db/mongo.py
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
import certifi

logger = logging.getLogger(__name__)

_client: AsyncIOMotorClient | None = None
_db: AsyncIOMotorDatabase | None = None


def get_db() -> AsyncIOMotorDatabase | None:
    """Catalog database, or None when Mongo is not configured."""
    return _db


def _new_client(uri: str) -> AsyncIOMotorClient:
    kwargs = dict(
        uuidRepresentation="standard",
        serverSelectionTimeoutMS=6000,
        connectTimeoutMS=6000,
    )
    if uri.startswith("mongodb+srv://"):
        # SRV implies TLS; containers often ship without a CA bundle
        kwargs.update(tls=True, tlsCAFile=certifi.where())
    return AsyncIOMotorClient(uri, **kwargs)


async def connect(uri: Optional[str], db_name: str) -> None:
    """
    Create the Motor client for the product catalog.
    A failed ping keeps a lazy client so the first real query can retry.
    """
    global _client, _db
    if not uri:
        logger.warning("No MONGO_URI configured, skipping Mongo connection")
        return

    try:
        _client = _new_client(uri)
        _db = _client[db_name]
        await _client.admin.command("ping")
        logger.info("Mongo connected (ping ok)")
    except Exception as e:
        logger.warning("Mongo ping at startup failed, connection stays lazy: %s", e)


async def disconnect() -> None:
    global _client, _db
    if _client:
        _client.close()
        logger.info("Mongo disconnected")
    _client = None
    _db = None
