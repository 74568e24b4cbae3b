import logging
from typing import Any, Awaitable, Dict, List, TypeVar

from freshcart.domain.models.interaction import ActionKind
from freshcart.domain.models.product import AppContext, Product
from freshcart.domain.repositories.catalog_repo import CatalogSource
from freshcart.domain.repositories.interaction_repo import InteractionRepo
from freshcart.domain.repositories.kv_store import KeyValueStore, get_json
from freshcart.domain.services.constants import KEY_HISTORY, KEY_PREFERENCES
from freshcart.domain.services.history_scorer import preferred_categories
from freshcart.domain.services.sample_data import SAMPLE_INTERACTIONS, SAMPLE_PRODUCTS

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _or_default(what: str, pending: Awaitable[T], default: T) -> T:
    """Await a store / catalog read; an outage degrades to `default`."""
    try:
        return await pending
    except Exception as e:
        logger.error("Failed to read %s, continuing without it: %s", what, e)
        return default


class ContextService:
    """
    Assembles the AppContext snapshot a recommendation request works on.
    `build` never raises: unreadable sources become empty streams and the
    sample catalog.
    """

    def __init__(self, store: KeyValueStore, catalog: CatalogSource, interactions: InteractionRepo):
        self.store = store
        self.catalog = catalog
        self.interactions = interactions

    async def products(self) -> List[Product]:
        """
        Catalog snapshot; the built-in sample products stand in for an empty
        or unreachable catalog. An empty catalog is seeded with them when the
        source supports it.
        """
        try:
            products = await self.catalog.get_all()
        except Exception as e:
            logger.error("Catalog unavailable, using %s sample products: %s", len(SAMPLE_PRODUCTS), e)
            return list(SAMPLE_PRODUCTS)
        if products:
            return products
        logger.warning("Catalog is empty, using %s sample products", len(SAMPLE_PRODUCTS))
        if hasattr(self.catalog, "replace"):
            await _or_default("catalog write-back", self.catalog.replace(SAMPLE_PRODUCTS), None)
        return list(SAMPLE_PRODUCTS)

    async def build(self, current_page: str = "/") -> AppContext:
        viewed = await _or_default("viewed items", self.interactions.list(ActionKind.VIEW), [])
        cart = await _or_default("cart items", self.interactions.list(ActionKind.ADD_TO_CART), [])
        purchased = await _or_default("purchased items", self.interactions.list(ActionKind.PURCHASE), [])

        prefs: Dict[str, Any] = await _or_default("preferences", get_json(self.store, KEY_PREFERENCES, {}), {})
        history = await _or_default("history", get_json(self.store, KEY_HISTORY, []), [])

        ctx = AppContext(
            user_preferences=prefs if isinstance(prefs, dict) else {},
            current_page=current_page,
            user_history=history if isinstance(history, list) else [],
            products=await self.products(),
            viewed=viewed,
            cart=cart,
            purchased=purchased,
            categories=preferred_categories(viewed, cart, purchased),
        )
        logger.debug(
            "Context built page=%s products=%s viewed=%s cart=%s purchased=%s categories=%s",
            current_page, len(ctx.products), len(viewed), len(cart), len(purchased), ctx.categories,
        )
        return ctx

    async def seed_sample_interactions(self) -> bool:
        """Record demo interactions over the sample products, only when no history exists."""
        if await self.interactions.has_any():
            return False
        logger.info("Seeding sample user interaction data")
        for action, idx in SAMPLE_INTERACTIONS:
            p = SAMPLE_PRODUCTS[idx]
            await self.interactions.record(action, p.product_id, p.name, p.category)
        return True
