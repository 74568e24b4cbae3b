# Constants for the recommendation engine and the shopping assistant.
from freshcart.domain.models.interaction import ActionKind

# Key-value store namespaces (names match the blobs the storefront writes)
KEY_PREFERENCES = "userPreferences"
KEY_HISTORY = "userHistory"
KEY_APP_DATA = "appData"
INTERACTION_KEYS = {
    ActionKind.VIEW: "clickedItems",
    ActionKind.ADD_TO_CART: "cartItems",
    ActionKind.PURCHASE: "mostOrderedItems",
}

# Engine sizes
RECOMMENDATION_COUNT = 5      # suggestions per result
MAX_PREFERRED_CATEGORIES = 6  # HistoryScorer top-N
PROMPT_VIEWED_WINDOW = 10     # most recent views embedded in the prompt
PROMPT_PURCHASED_WINDOW = 5   # most recent purchases embedded in the prompt

# Assistant sizes
ASSISTANT_MAX_PRODUCTS = 6
SIMILAR_MAX_PRODUCTS = 4
CHAT_HISTORY_WINDOW = 4

# Fallback reasons
REASON_COLD_START = "Popular {category} item - great for new customers!"
REASON_PREFERRED = "Recommended based on your interest in {category}"
REASON_POPULAR = "Popular {category} item"
MESSAGE_EMPTY_CATALOG = "No products are available to recommend right now."
MESSAGE_NO_MATCH = "No new products match your interests yet."
