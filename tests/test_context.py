import json

from freshcart.domain.models.interaction import ActionKind
from freshcart.domain.repositories.catalog_repo import KVCatalogRepo
from freshcart.domain.repositories.interaction_repo import InteractionRepo
from freshcart.domain.services.context_svc import ContextService


async def test_build_collects_streams_and_preferences(store, catalog, interactions):
    await store.set("userPreferences", json.dumps({"diet": "vegetarian"}))
    await interactions.record(ActionKind.VIEW, 3, "Fresh Spinach", "Vegetables")
    await interactions.record(ActionKind.VIEW, 1, "Fresh Apples", "Fruits")
    await interactions.record(ActionKind.PURCHASE, 2, "Organic Bananas", "Fruits")

    ctx = await ContextService(store, catalog, interactions).build("/products")

    assert ctx.current_page == "/products"
    assert ctx.user_preferences == {"diet": "vegetarian"}
    assert ctx.user_history == []
    assert [r.id for r in ctx.viewed] == [3, 1]
    assert [r.id for r in ctx.purchased] == [2]
    assert ctx.categories == ["Fruits", "Vegetables"]
    assert len(ctx.products) == 5


async def test_empty_catalog_is_replaced_by_samples(store, interactions):
    catalog = KVCatalogRepo(store)
    ctx = await ContextService(store, catalog, interactions).build()

    assert [p.name for p in ctx.products][:2] == ["Fresh Apples", "Organic Bananas"]
    assert len(await catalog.get_all()) == 5


async def test_seed_only_when_history_is_empty(store, catalog, interactions):
    svc = ContextService(store, catalog, interactions)

    assert await svc.seed_sample_interactions() is True
    assert [r.id for r in await interactions.list(ActionKind.VIEW)] == [1, 3, 4, 2]
    assert [r.id for r in await interactions.list(ActionKind.ADD_TO_CART)] == [1, 4]
    assert [r.id for r in await interactions.list(ActionKind.PURCHASE)] == [3]

    assert await svc.seed_sample_interactions() is False
    assert len(await interactions.list(ActionKind.VIEW)) == 4


class _DownCatalog:
    async def get_all(self):
        raise ConnectionError("mongo down")


class _DownStore:
    async def get(self, key):
        raise ConnectionError("redis down")

    async def set(self, key, value):
        raise ConnectionError("redis down")

    async def delete(self, key):
        raise ConnectionError("redis down")

    def namespace(self, prefix):
        return self


async def test_unreachable_catalog_falls_back_to_samples(store, interactions):
    await interactions.record(ActionKind.VIEW, 1, "Fresh Apples", "Fruits")
    ctx = await ContextService(store, _DownCatalog(), interactions).build()

    assert [p.product_id for p in ctx.products] == [1, 2, 3, 4, 5]
    assert [r.id for r in ctx.viewed] == [1]


async def test_unreachable_store_yields_empty_streams():
    store = _DownStore()
    ctx = await ContextService(store, KVCatalogRepo(store), InteractionRepo(store)).build("/cart")

    assert ctx.current_page == "/cart"
    assert ctx.viewed == [] and ctx.cart == [] and ctx.purchased == []
    assert ctx.user_preferences == {}
    assert len(ctx.products) == 5
