import pytest
from conftest import FakeLLM

from freshcart.domain.models.assistant import Intent, NavigationAction
from freshcart.domain.models.product import Product
from freshcart.domain.repositories.catalog_repo import KVCatalogRepo
from freshcart.domain.repositories.kv_store import InMemoryKVStore
from freshcart.domain.services.assistant_svc import AI_ERROR_RESPONSE, NO_AI_RESPONSE, ShoppingAssistant


@pytest.fixture
def assistant(catalog):
    return ShoppingAssistant(catalog)


@pytest.mark.parametrize(
    "query, intent, action",
    [
        ("How do I checkout?", Intent.CHECKOUT_HELP, None),
        ("Show me all stores", Intent.BROWSE_STORES, NavigationAction.STORES),
        ("browse products please", Intent.BROWSE_PRODUCTS, NavigationAction.PRODUCTS),
        ("Browse categories", Intent.LIST_CATEGORIES, None),
        ("What's trending today?", Intent.POPULAR, None),
        ("anything under 3", Intent.PRICE_FILTER, None),
        ("help me shop", Intent.SHOPPING_HELP, None),
        ("where can i buy", Intent.STORE_HELP, None),
        ("go to cart", Intent.VIEW_CART, NavigationAction.CART),
        ("Go to checkout", Intent.CHECKOUT, NavigationAction.CHECKOUT),
    ],
)
async def test_keyword_routing(assistant, query, intent, action):
    reply = await assistant.handle(query)
    assert reply.intent == intent
    assert reply.action == action
    assert reply.response


async def test_categories_listed_with_suggestions(assistant):
    reply = await assistant.handle("show me all categories")
    assert "Fruits, Vegetables, Dairy, Meat" in reply.response
    assert reply.suggestions == ["Fruits", "Vegetables", "Dairy", "Meat", "Show me stores"]


async def test_stores_come_from_catalog_sellers(assistant):
    reply = await assistant.handle("browse stores")
    assert "5 available stores" in reply.response


async def test_price_filter_with_currency(assistant):
    reply = await assistant.handle("Products under KSh 3")
    assert reply.intent == Intent.PRICE_FILTER
    assert [p.product_id for p in reply.products] == [2, 3]


async def test_price_filter_without_matches(assistant):
    reply = await assistant.handle("cheaper than 1")
    assert reply.products == []
    assert "KSh 1" in reply.response


async def test_popular_uses_catalog_ranking(assistant):
    reply = await assistant.handle("recommend something")
    assert [p.product_id for p in reply.products] == [4, 5, 1, 2, 3]


async def test_category_match(assistant):
    reply = await assistant.handle("dairy")
    assert reply.intent == Intent.CATEGORY
    assert [p.name for p in reply.products] == ["Whole Milk"]


async def test_product_search_strips_prefix(assistant):
    reply = await assistant.handle("Do you have milk")
    assert reply.intent == Intent.PRODUCT_SEARCH
    assert [p.product_id for p in reply.products] == [4]
    assert '"milk"' in reply.response


async def test_unmatched_query_without_backend_gets_static_answer(assistant):
    reply = await assistant.handle("tell me a joke")
    assert reply.intent == Intent.GENERAL
    assert reply.response == NO_AI_RESPONSE
    assert len(reply.products) == 5


async def test_unmatched_query_uses_llm(catalog):
    llm = FakeLLM("  Try our fresh apples!  ")
    reply = await ShoppingAssistant(catalog, llm).handle("tell me a joke")
    assert reply.response == "Try our fresh apples!"
    assert 'User message: "tell me a joke"' in llm.prompts[0]
    assert "Showing search results for: tell me a joke" in llm.prompts[0]


async def test_llm_failure_is_not_raised(catalog):
    reply = await ShoppingAssistant(catalog, FakeLLM(RuntimeError("boom"))).handle("tell me a joke")
    assert reply.response == AI_ERROR_RESPONSE


async def test_empty_catalog_reports_loading():
    reply = await ShoppingAssistant(KVCatalogRepo(InMemoryKVStore())).handle("show me stores")
    assert reply.intent == Intent.LOADING


async def test_retry_reloads_catalog(assistant):
    reply = await assistant.handle("try again")
    assert reply.intent == Intent.RETRY
    assert "4 categories, 5 products, and 5 stores" in reply.response


# ── Similar products ───────────────────────────────


async def test_similar_excludes_the_product_itself(assistant):
    reply = await assistant.similar(1)
    assert reply.intent == Intent.SIMILAR
    assert [p.product_id for p in reply.products] == [2]
    assert "Fresh Apples" in reply.response


async def test_similar_is_capped_at_four(catalog, products):
    extra = [Product(product_id=10 + i, name=f"Pear {i}", category="Fruits", price=1.5) for i in range(5)]
    await catalog.replace(products + extra)
    reply = await ShoppingAssistant(catalog).similar(2)
    assert [p.product_id for p in reply.products] == [1, 10, 11, 12]


async def test_similar_without_matches_explains(assistant):
    reply = await assistant.similar(3)
    assert reply.products == []
    assert "couldn't find similar products to Fresh Spinach" in reply.response


async def test_similar_for_unknown_product_is_none(assistant):
    assert await assistant.similar(99) is None
