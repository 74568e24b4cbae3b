from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from freshcart.domain.models.product import Product


class Intent(str, Enum):
    LOADING = "loading"
    RETRY = "retry"
    CHECKOUT_HELP = "checkout_help"
    BROWSE_STORES = "browse_stores"
    BROWSE_PRODUCTS = "browse_products"
    LIST_CATEGORIES = "list_categories"
    POPULAR = "popular"
    PRICE_FILTER = "price_filter"
    CATEGORY = "category"
    SHOPPING_HELP = "shopping_help"
    STORE_HELP = "store_help"
    VIEW_CART = "view_cart"
    CHECKOUT = "checkout"
    PRODUCT_SEARCH = "product_search"
    SIMILAR = "similar"
    GENERAL = "general"


class NavigationAction(str, Enum):
    STORES = "navigate_stores"
    PRODUCTS = "navigate_products"
    CART = "navigate_cart"
    CHECKOUT = "navigate_checkout"


class AssistantReply(BaseModel):
    intent: Intent
    response: str
    products: List[Product] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    action: Optional[NavigationAction] = None
    model_config = ConfigDict(frozen=True)
