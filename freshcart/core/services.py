# freshcart/core/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from redis.asyncio import Redis

from freshcart.core.config import Settings
from freshcart.domain.models.interaction import ActionKind
from freshcart.domain.repositories.catalog_repo import CatalogSource, KVCatalogRepo, MongoCatalogRepo
from freshcart.domain.repositories.interaction_repo import InteractionRepo
from freshcart.domain.repositories.kv_store import InMemoryKVStore, KeyValueStore, RedisKVStore
from freshcart.domain.services.arbitration_svc import RecommendationEngine
from freshcart.domain.services.assistant_svc import ShoppingAssistant
from freshcart.domain.services.context_svc import ContextService
from freshcart.domain.services.llm_client import LLMBackend, build_llm_backend
from freshcart.domain.services.rate_limiter import RateLimiter
from freshcart.domain.services.support_chat_svc import SupportChat

logger = logging.getLogger(__name__)


@dataclass
class Services:
    store: KeyValueStore
    catalog: CatalogSource
    interactions: InteractionRepo
    context: ContextService
    engine: RecommendationEngine
    assistant: ShoppingAssistant
    chat: SupportChat
    limiter: RateLimiter
    llm_configured: bool


def build_services(
    settings: Settings,
    *,
    redis: Optional[Redis] = None,
    mongo_db: Optional[AsyncIOMotorDatabase] = None,
    store: Optional[KeyValueStore] = None,
    reco_llm: Optional[LLMBackend] = None,
    chat_llm: Optional[LLMBackend] = None,
    limiter: Optional[RateLimiter] = None,
) -> Services:
    """
    Wire repositories and services. Explicit arguments win over settings, so
    tests can pass an in-memory store and fake backends.
    """
    if store is None:
        store = RedisKVStore(redis, prefix=settings.KV_PREFIX) if redis is not None else InMemoryKVStore(settings.KV_PREFIX)
    logger.info("Key-value store: %s", type(store).__name__)

    catalog: CatalogSource
    if settings.CATALOG_BACKEND == "mongo" and mongo_db is not None:
        catalog = MongoCatalogRepo(mongo_db)
    else:
        if settings.CATALOG_BACKEND == "mongo":
            logger.warning("CATALOG_BACKEND=mongo but Mongo is unavailable, using the key-value catalog")
        catalog = KVCatalogRepo(store)

    interactions = InteractionRepo(
        store,
        retention={
            ActionKind.VIEW: settings.VIEWED_RETENTION,
            ActionKind.ADD_TO_CART: settings.CART_RETENTION,
            ActionKind.PURCHASE: settings.PURCHASED_RETENTION,
        },
    )

    # one limiter for every AI call in the process
    limiter = limiter or RateLimiter(settings.AI_MIN_INTERVAL_S)
    if reco_llm is None:
        reco_llm = build_llm_backend(settings, limiter, model=settings.OPENAI_RECO_MODEL)
    if chat_llm is None:
        chat_llm = build_llm_backend(settings, limiter, model=settings.OPENAI_CHAT_MODEL)

    return Services(
        store=store,
        catalog=catalog,
        interactions=interactions,
        context=ContextService(store, catalog, interactions),
        engine=RecommendationEngine(reco_llm),
        assistant=ShoppingAssistant(catalog, chat_llm),
        chat=SupportChat(chat_llm),
        limiter=limiter,
        llm_configured=reco_llm is not None,
    )
