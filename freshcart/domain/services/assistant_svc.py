# freshcart/domain/services/assistant_svc.py
"""
Rule-based intent routing for the shopping assistant.

Free text is matched, in order, against keyword and pattern rules; the first
rule that matches decides the intent. Only the catch-all `general` intent
reaches the LLM.
"""
from __future__ import annotations

import logging
import re
from typing import Callable, Iterable, List, Optional

from freshcart.domain.models.assistant import AssistantReply, Intent, NavigationAction
from freshcart.domain.models.product import Product
from freshcart.domain.repositories.catalog_repo import CatalogSource
from freshcart.domain.services.constants import ASSISTANT_MAX_PRODUCTS, SIMILAR_MAX_PRODUCTS
from freshcart.domain.services.llm_client import LLMBackend
from freshcart.domain.services.prompts import assistant_prompt

logger = logging.getLogger(__name__)

PRICE_RE = re.compile(r"(?:under|below|less than|cheaper than)\s*(?:ksh?\s*)?(\d+)", re.IGNORECASE)
SEARCH_PREFIX_RE = re.compile(r"^(?:find|search|show me|do you have|what is|which is|where is)\s*(.*)$", re.IGNORECASE)
SEARCH_PLACEHOLDERS = {"search specific product", "do you have this product"}

NO_AI_RESPONSE = "I'm currently unable to provide AI-powered responses. Let me help you with basic product search instead."
AI_ERROR_RESPONSE = "I'm having trouble processing that request. Let me help you search for products instead."

CHECKOUT_STEPS = (
    "Here's how to checkout on FreshCart:\n\n"
    '1. Click "Shop" on any product to open its store\n'
    "2. Browse and select products in that store\n"
    '3. Click "Go to Checkout" and complete your purchase'
)
SHOPPING_OPTIONS = (
    "I'd love to help you shop! Here are your options:\n\n"
    "Browse Stores: view all available stores and shop directly from them\n"
    "Add to Cart: build your cart from multiple stores, then checkout\n"
    "Search Products: find specific items across all stores\n\n"
    "Which approach would you prefer?"
)
STORE_OPTIONS = (
    "To find stores and shop:\n\n"
    "1. Browse All Stores: see all available stores and their products\n"
    '2. Product-Specific: click "Shop" on any product to go to its store\n'
    "3. Store Selection: choose a store, browse products, checkout directly\n\n"
    "Would you like to see all available stores?"
)


def _has_any(text: str, phrases: Iterable[str]) -> bool:
    return any(p in text for p in phrases)


def _categories(products: List[Product]) -> List[str]:
    return list(dict.fromkeys(p.category for p in products if p.category))


def _stores(products: List[Product]) -> List[str]:
    # a store is a seller of at least one catalog product
    return list(dict.fromkeys(p.seller for p in products if p.seller))


class ShoppingAssistant:
    def __init__(self, catalog: CatalogSource, llm: Optional[LLMBackend] = None):
        self.catalog = catalog
        self.llm = llm

    async def handle(self, query: str) -> AssistantReply:
        lower = query.lower()
        normal = query.strip()

        if _has_any(lower, ("retry", "try again")):
            return await self._reload()

        products = await self.catalog.get_all()
        if not products:
            return AssistantReply(
                intent=Intent.LOADING,
                response="I'm still loading our product catalog. Please wait a moment and try again.",
                suggestions=["Try again"],
            )
        categories = _categories(products)
        stores = _stores(products)

        for rule in self._rules():
            reply = await rule(lower, normal, products, categories, stores)
            if reply is not None:
                logger.info("Assistant routed query to intent=%s", reply.intent.value)
                return reply

        return await self._general(normal, categories, stores)

    def _rules(self) -> List[Callable]:
        return [
            self._checkout_help,
            self._browse_stores,
            self._browse_products,
            self._list_categories,
            self._popular,
            self._price_filter,
            self._category,
            self._shopping_help,
            self._store_help,
            self._view_cart,
            self._checkout,
            self._product_search,
        ]

    # ---- rules ------------------------------------------------------------

    async def _reload(self) -> AssistantReply:
        try:
            products = await self.catalog.get_all()
        except Exception as e:
            logger.error("Catalog reload failed: %s", e)
            return AssistantReply(
                intent=Intent.RETRY,
                response="I'm still having trouble loading data. Please check your connection and try again.",
                suggestions=["Try again", "Contact support"],
            )
        return AssistantReply(
            intent=Intent.RETRY,
            response=(
                f"I've reloaded our catalog. We now have {len(_categories(products))} categories, "
                f"{len(products)} products, and {len(_stores(products))} stores available."
            ),
            suggestions=["Show me stores", "Browse categories", "Search products", "Get recommendations"],
        )

    async def _checkout_help(self, lower, normal, products, categories, stores):
        if not _has_any(lower, ("checkout", "how to buy")) or _has_any(lower, ("go to checkout", "view checkout")):
            return None
        return AssistantReply(
            intent=Intent.CHECKOUT_HELP,
            response=CHECKOUT_STEPS,
            suggestions=["Show me all stores", "Add items to cart", "Browse products", "View my cart"],
        )

    async def _browse_stores(self, lower, normal, products, categories, stores):
        if not _has_any(lower, ("show me all stores", "show stores", "show me stores", "all stores", "browse stores")):
            return None
        if not stores:
            return AssistantReply(
                intent=Intent.BROWSE_STORES,
                response="I don't have any stores loaded right now. Please try refreshing.",
                suggestions=["Retry loading", "Contact support"],
            )
        return AssistantReply(
            intent=Intent.BROWSE_STORES,
            response=(
                f"Great! I'm taking you to browse our {len(stores)} available stores. "
                "You can select any store and start shopping directly from there."
            ),
            suggestions=["Browse products", "Search specific item", "How to checkout?"],
            action=NavigationAction.STORES,
        )

    async def _browse_products(self, lower, normal, products, categories, stores):
        if not _has_any(lower, ("show me all products", "all products", "browse products", "search products")):
            return None
        return AssistantReply(
            intent=Intent.BROWSE_PRODUCTS,
            response=f"Taking you to all {len(products)} products.",
            suggestions=["Browse categories", "Show me stores", "Get recommendations"],
            action=NavigationAction.PRODUCTS,
        )

    async def _list_categories(self, lower, normal, products, categories, stores):
        if not _has_any(lower, ("show me all categories", "all categories", "browse categories")):
            return None
        return AssistantReply(
            intent=Intent.LIST_CATEGORIES,
            response=(
                f"Here are our {len(categories)} available categories: {', '.join(categories)}. "
                "Which category interests you most?"
            ),
            suggestions=categories[:5] + ["Show me stores"],
        )

    async def _popular(self, lower, normal, products, categories, stores):
        if not _has_any(lower, ("popular", "trending", "recommend")):
            return None
        fallback_suggestions = ["Show me stores", "Browse categories", "Search products"]
        try:
            popular = await self.catalog.get_popular(ASSISTANT_MAX_PRODUCTS)
        except Exception as e:
            logger.error("Error getting popular products: %s", e)
            return AssistantReply(
                intent=Intent.POPULAR,
                response="I'm having trouble loading popular products right now. Try browsing our stores or categories instead.",
                suggestions=fallback_suggestions,
            )
        if not popular:
            return AssistantReply(
                intent=Intent.POPULAR,
                response="No popular products found right now. Try browsing our stores or categories instead.",
                suggestions=fallback_suggestions,
            )
        return AssistantReply(
            intent=Intent.POPULAR,
            products=popular[:ASSISTANT_MAX_PRODUCTS],
            response="Here are today's most popular products! Click 'Shop' on any item to go directly to its store.",
            suggestions=["View more popular", "Show me stores", "Browse categories"],
        )

    async def _price_filter(self, lower, normal, products, categories, stores):
        m = PRICE_RE.search(lower)
        if not m:
            return None
        max_price = int(m.group(1))
        matches = [p for p in products if p.price <= max_price]
        if not matches:
            return AssistantReply(
                intent=Intent.PRICE_FILTER,
                response=f"I couldn't find any products under KSh {max_price} right now. Try a different price range.",
                suggestions=["Different price range", "Show me stores", "Browse categories"],
            )
        return AssistantReply(
            intent=Intent.PRICE_FILTER,
            products=matches[:ASSISTANT_MAX_PRODUCTS],
            response=f"Found {len(matches)} products under KSh {max_price}!",
            suggestions=["Show more", "Different price range", "Show me stores"],
        )

    async def _category(self, lower, normal, products, categories, stores):
        term = lower.strip()
        if not term:
            return None
        matched = next((c for c in categories if term in c.lower() or c.lower() in term), None)
        if matched is None:
            return None
        try:
            in_category = await self.catalog.get_by_category(matched)
        except Exception as e:
            logger.error("Error fetching category products: %s", e)
            return AssistantReply(
                intent=Intent.CATEGORY,
                response=f"Sorry, I had trouble loading products from {matched}. Please try again or browse our stores.",
                suggestions=["Try again", "Show me stores", "Different category"],
            )
        if not in_category:
            return AssistantReply(
                intent=Intent.CATEGORY,
                response=f"I couldn't find any products in {matched} right now. Try a different category.",
                suggestions=["Show me stores", "Different category", "Browse categories"],
            )
        return AssistantReply(
            intent=Intent.CATEGORY,
            products=in_category[:ASSISTANT_MAX_PRODUCTS],
            response=f"Here are {matched} products! Click \"Shop\" on any item to go directly to its store.",
            suggestions=["Show all products", "Show me stores", "Different category"],
        )

    async def _shopping_help(self, lower, normal, products, categories, stores):
        if not _has_any(lower, ("help me shop", "shop for me", "how to shop")):
            return None
        return AssistantReply(
            intent=Intent.SHOPPING_HELP,
            response=SHOPPING_OPTIONS,
            suggestions=["Show me stores", "Browse categories", "Search specific product", "How to checkout?"],
        )

    async def _store_help(self, lower, normal, products, categories, stores):
        if not _has_any(lower, ("find store", "where to buy", "stores", "where can i buy")):
            return None
        return AssistantReply(
            intent=Intent.STORE_HELP,
            response=STORE_OPTIONS,
            suggestions=["Show me stores", "Browse products", "Search specific item", "How to checkout?"],
        )

    async def _view_cart(self, lower, normal, products, categories, stores):
        if not _has_any(lower, ("go to cart", "view my cart", "my cart")):
            return None
        return AssistantReply(
            intent=Intent.VIEW_CART,
            response="Taking you to your cart! From there you can pick a delivery method and proceed to checkout.",
            suggestions=["Continue shopping", "Show me stores", "Browse categories", "Get recommendations"],
            action=NavigationAction.CART,
        )

    async def _checkout(self, lower, normal, products, categories, stores):
        if not _has_any(lower, ("go to checkout", "view checkout")):
            return None
        return AssistantReply(
            intent=Intent.CHECKOUT,
            response="Taking you to checkout! Complete your purchase and choose your preferred delivery method.",
            suggestions=["Continue shopping", "View cart", "Show me stores", "Browse more items"],
            action=NavigationAction.CHECKOUT,
        )

    async def _product_search(self, lower, normal, products, categories, stores):
        if len(normal) <= 2 or lower.strip() in SEARCH_PLACEHOLDERS:
            return None
        m = SEARCH_PREFIX_RE.match(normal)
        name = (m.group(1) if m else normal).strip()
        if not name:
            return None
        suggestions = ["Show me stores", "View similar", "Browse category", "How to checkout?"]

        needle = name.lower()
        found = [p for p in products if needle in p.name.lower()]
        if found:
            return AssistantReply(
                intent=Intent.PRODUCT_SEARCH,
                products=found[:ASSISTANT_MAX_PRODUCTS],
                response=f'Found "{name}"! Click "Shop" on any item to go directly to its store and purchase it.',
                suggestions=suggestions,
            )
        try:
            found = await self.catalog.search_by_name(name)
        except Exception as e:
            logger.error("Error searching products by name: %s", e)
            return None
        if not found:
            return None
        return AssistantReply(
            intent=Intent.PRODUCT_SEARCH,
            products=found[:ASSISTANT_MAX_PRODUCTS],
            response=f'Found {len(found)} product(s) matching "{name}".',
            suggestions=suggestions,
        )

    # ---- product actions ----------------------------------------------------

    async def similar(self, product_id: int) -> Optional[AssistantReply]:
        """Up to 4 other products from the same category; None when the product is unknown."""
        products = await self.catalog.get_all()
        product = next((p for p in products if p.product_id == product_id), None)
        if product is None:
            return None

        try:
            same_category = await self.catalog.get_by_category(product.category)
        except Exception as e:
            logger.error("Error finding similar products: %s", e)
            return AssistantReply(
                intent=Intent.SIMILAR,
                response="Sorry, I had trouble finding similar products. Try browsing our stores or categories instead.",
                suggestions=["Show me stores", "Browse categories", "Search products"],
            )

        others = [p for p in same_category if p.product_id != product_id][:SIMILAR_MAX_PRODUCTS]
        if not others:
            return AssistantReply(
                intent=Intent.SIMILAR,
                response=(
                    f"I couldn't find similar products to {product.name} right now. "
                    "Try browsing the category or exploring our stores."
                ),
                suggestions=["Browse category", "Show me stores", "Search products", "Try different category"],
            )
        return AssistantReply(
            intent=Intent.SIMILAR,
            products=others,
            response=f'Here are similar products to {product.name}. Click "Shop" on any item to purchase directly from its store!',
            suggestions=["Show me stores", "How to checkout?", "View more", "Different category"],
        )

    # ---- catch-all ----------------------------------------------------------

    async def _general(self, normal: str, categories: List[str], stores: List[str]) -> AssistantReply:
        try:
            products = await self.catalog.get_all()
            context = f"Showing search results for: {normal}" if products else f"No products found for: {normal}"
        except Exception as e:
            logger.error("Error searching products: %s", e)
            products, context = [], f"Search error for: {normal}"

        return AssistantReply(
            intent=Intent.GENERAL,
            products=products[:ASSISTANT_MAX_PRODUCTS],
            response=await self._ai_response(normal, categories, len(products), len(stores), context),
            suggestions=["Show me stores", "Browse categories", "How to checkout?"],
        )

    async def _ai_response(self, message: str, categories: List[str], product_count: int, store_count: int, context: str) -> str:
        if self.llm is None:
            return NO_AI_RESPONSE
        prompt = assistant_prompt(
            message,
            categories=categories,
            product_count=product_count,
            store_count=store_count,
            context=context,
        )
        try:
            return (await self.llm.generate(prompt)).strip() or AI_ERROR_RESPONSE
        except Exception as e:
            logger.error("Error generating AI response: %s", e)
            return AI_ERROR_RESPONSE
