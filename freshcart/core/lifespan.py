# freshcart/core/lifespan.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from freshcart.core.config import get_settings
from freshcart.core.services import build_services
from freshcart.db import mongo, redis as r

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # --- Startup ---
    # Both stores are optional: the service degrades to in-memory state
    await r.connect(settings.REDIS_URL)
    if settings.CATALOG_BACKEND == "mongo":
        await mongo.connect(settings.MONGO_URI, settings.MONGO_DB)

    app.state.services = build_services(settings, redis=r.get_redis(), mongo_db=mongo.get_db())
    logger.info(
        "%s started env=%s catalog=%s ai=%s",
        settings.APP_NAME, settings.APP_ENV, settings.CATALOG_BACKEND,
        "on" if app.state.services.llm_configured else "off",
    )

    # Application runs
    yield

    # --- Shutdown ---
    try:
        await r.disconnect()
    except Exception as e:
        logger.warning("Redis disconnect failed: %s", e)
    try:
        await mongo.disconnect()
    except Exception as e:
        logger.warning("Mongo disconnect failed: %s", e)
