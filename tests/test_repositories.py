import json

from freshcart.domain.models.interaction import ActionKind
from freshcart.domain.models.product import Product
from freshcart.domain.repositories.catalog_repo import KVCatalogRepo
from freshcart.domain.repositories.interaction_repo import InteractionRepo
from freshcart.domain.repositories.kv_store import InMemoryKVStore, get_json


# ── Key-value store ────────────────────────────────


async def test_namespaces_share_backing_data_without_colliding():
    root = InMemoryKVStore("shop")
    user = root.namespace("user-1")
    await root.set("cartItems", "[]")
    await user.set("cartItems", "[1]")

    assert await root.get("cartItems") == "[]"
    assert await user.get("cartItems") == "[1]"
    assert set(root.data) == {"shop:cartItems", "shop:user-1:cartItems"}


async def test_corrupt_blob_reads_as_default():
    store = InMemoryKVStore()
    await store.set("userHistory", "{not json")
    assert await get_json(store, "userHistory", []) == []


# ── Interaction recorder ───────────────────────────


async def test_record_appends_to_list_for_action(interactions):
    await interactions.record(ActionKind.VIEW, 1, "Fresh Apples", "Fruits")
    await interactions.record(ActionKind.ADD_TO_CART, 4, "Whole Milk", "Dairy")

    viewed = await interactions.list(ActionKind.VIEW)
    assert [(r.id, r.category, r.action) for r in viewed] == [(1, "Fruits", ActionKind.VIEW)]
    assert [r.id for r in await interactions.list(ActionKind.ADD_TO_CART)] == [4]
    assert await interactions.list(ActionKind.PURCHASE) == []


async def test_views_are_capped_oldest_first(store):
    repo = InteractionRepo(store, retention={ActionKind.VIEW: 50})
    for pid in range(1, 56):
        await repo.record(ActionKind.VIEW, pid, f"p{pid}", "Fruits")

    viewed = await repo.list(ActionKind.VIEW)
    assert len(viewed) == 50
    assert viewed[0].id == 6
    assert viewed[-1].id == 55


async def test_uncapped_kinds_keep_everything(store):
    repo = InteractionRepo(store, retention={ActionKind.VIEW: 50, ActionKind.PURCHASE: None})
    for pid in range(1, 61):
        await repo.record(ActionKind.PURCHASE, pid, f"p{pid}", "Meat")
    assert len(await repo.list(ActionKind.PURCHASE)) == 60


async def test_configured_cart_cap_is_honoured(store):
    repo = InteractionRepo(store, retention={ActionKind.ADD_TO_CART: 2})
    for pid in (1, 2, 3):
        await repo.record(ActionKind.ADD_TO_CART, pid, "", "Fruits")
    assert [r.id for r in await repo.list(ActionKind.ADD_TO_CART)] == [2, 3]


async def test_storefront_blobs_are_readable(store, interactions):
    legacy = [
        {"id": 2, "name": "Organic Bananas", "category": "Fruits", "timestamp": "2024-01-20T10:00:00Z", "action": "click"},
        {"name": "missing id", "timestamp": "2024-01-20T10:00:00Z"},
        "garbage",
    ]
    await store.set("clickedItems", json.dumps(legacy))

    viewed = await interactions.list(ActionKind.VIEW)
    assert [(r.id, r.action) for r in viewed] == [(2, ActionKind.VIEW)]


async def test_clear_and_has_any(interactions):
    assert not await interactions.has_any()
    await interactions.record(ActionKind.PURCHASE, 3, "Fresh Spinach", "Vegetables")
    assert await interactions.has_any()
    await interactions.clear(ActionKind.PURCHASE)
    assert not await interactions.has_any()


# ── Catalog ────────────────────────────────────────


async def test_catalog_round_trips_camel_case_blob(store, catalog):
    blob = json.loads(await store.get("appData"))
    assert blob["products"][0]["harvestDate"] == "2024-01-15"
    products = await catalog.get_all()
    assert [p.product_id for p in products] == [1, 2, 3, 4, 5]
    assert products[0].harvest_date == "2024-01-15"


async def test_catalog_queries(catalog):
    assert [p.product_id for p in await catalog.get_by_category("fruits")] == [1, 2]
    assert [p.name for p in await catalog.search_by_name("FRESH")] == ["Fresh Apples", "Fresh Spinach"]
    assert await catalog.search_by_name("   ") == []
    assert [p.product_id for p in await catalog.get_popular(3)] == [4, 5, 1]


async def test_invalid_and_duplicate_catalog_entries_are_dropped(store):
    good = Product(product_id=7, name="Honey", category="Pantry", price=6.5).model_dump(by_alias=True)
    await store.set("appData", json.dumps({"products": [good, {**good, "name": "Dup"}, {"product_id": -1, "name": "x", "category": "y", "price": 1}]}))
    products = await KVCatalogRepo(store).get_all()
    assert [(p.product_id, p.name) for p in products] == [(7, "Honey")]
