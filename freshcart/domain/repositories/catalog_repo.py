# freshcart/domain/repositories/catalog_repo.py
from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Protocol

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError

from freshcart.domain.models.product import Product
from freshcart.domain.repositories.kv_store import KeyValueStore, get_json, set_json
from freshcart.domain.services.constants import KEY_APP_DATA

logger = logging.getLogger(__name__)


class CatalogSource(Protocol):
    async def get_all(self) -> List[Product]: ...

    async def get_by_category(self, category: str) -> List[Product]: ...

    async def search_by_name(self, text: str) -> List[Product]: ...

    async def get_popular(self, limit: int = 6) -> List[Product]: ...


def _to_products(docs: Iterable[Any]) -> List[Product]:
    """Validate raw catalog documents, dropping the ones that do not describe a product."""
    out: List[Product] = []
    seen: set[int] = set()
    for doc in docs:
        if not isinstance(doc, dict):
            continue
        try:
            p = Product.model_validate(doc)
        except ValidationError as e:
            logger.warning("Skipping invalid catalog entry %s: %s", doc.get("product_id"), e.errors()[:1])
            continue
        if p.product_id in seen:
            continue
        seen.add(p.product_id)
        out.append(p)
    return out


def _by_rating(products: List[Product]) -> List[Product]:
    # stable: equal ratings keep catalog order
    return sorted(products, key=lambda p: p.rating or 0.0, reverse=True)


class KVCatalogRepo:
    """
    Catalog kept as the `appData` blob: {"products": [...]}.
    The blob is replaced wholesale, never patched.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def get_all(self) -> List[Product]:
        blob = await get_json(self.store, KEY_APP_DATA, {})
        docs = blob.get("products", []) if isinstance(blob, dict) else []
        return _to_products(docs if isinstance(docs, list) else [])

    async def replace(self, products: Iterable[Product]) -> None:
        payload = {"products": [p.model_dump(mode="json", by_alias=True) for p in products]}
        await set_json(self.store, KEY_APP_DATA, payload)
        logger.info("Catalog replaced (%s products)", len(payload["products"]))

    async def get_by_category(self, category: str) -> List[Product]:
        wanted = category.strip().casefold()
        return [p for p in await self.get_all() if p.category.casefold() == wanted]

    async def search_by_name(self, text: str) -> List[Product]:
        needle = text.strip().casefold()
        if not needle:
            return []
        return [p for p in await self.get_all() if needle in p.name.casefold()]

    async def get_popular(self, limit: int = 6) -> List[Product]:
        return _by_rating(await self.get_all())[:limit]


class MongoCatalogRepo:
    """
    Catalog backed by the 'products' collection; popularity comes from
    purchase events in the 'events' collection.
    """

    _PROJECTION = {"_id": 0}

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "products"):
        self.db = db
        self.col = db[collection_name]

    async def _find(self, query: Dict[str, Any]) -> List[Product]:
        cursor = self.col.find(query, self._PROJECTION).sort("product_id", 1)
        return _to_products([doc async for doc in cursor])

    async def get_all(self) -> List[Product]:
        return await self._find({})

    async def get_by_category(self, category: str) -> List[Product]:
        return await self._find({"category": {"$regex": f"^{re.escape(category.strip())}$", "$options": "i"}})

    async def search_by_name(self, text: str) -> List[Product]:
        if not text.strip():
            return []
        return await self._find({"name": {"$regex": re.escape(text.strip()), "$options": "i"}})

    async def get_popular(self, limit: int = 6) -> List[Product]:
        # Most purchased units first, then orders
        pipeline = [
            {"$match": {"event_type": "purchase"}},
            {"$addFields": {"q": {"$ifNull": ["$metadata.quantity", 1]}}},
            {"$group": {"_id": "$product_id", "units": {"$sum": "$q"}, "orders": {"$sum": 1}}},
            {"$sort": {"units": -1, "orders": -1}},
            {"$limit": limit},
        ]
        docs = await self.db["events"].aggregate(pipeline).to_list(length=limit)
        ranked_ids = [d["_id"] for d in docs if d.get("_id") is not None]
        if not ranked_ids:
            logger.info("No purchase events, ranking popular products by rating")
            return _by_rating(await self.get_all())[:limit]

        by_id = {p.product_id: p for p in await self._find({"product_id": {"$in": ranked_ids}})}
        return [by_id[pid] for pid in ranked_ids if pid in by_id]
