import json
from typing import Any, Sequence

from freshcart.domain.models.product import AppContext
from freshcart.domain.services.constants import (
    PROMPT_PURCHASED_WINDOW,
    PROMPT_VIEWED_WINDOW,
    RECOMMENDATION_COUNT,
)


def _dump(obj: Any) -> str:
    """Compact JSON for prompt embedding (pydantic models included)."""
    if isinstance(obj, (list, tuple)):
        obj = [o.model_dump(mode="json", by_alias=True) if hasattr(o, "model_dump") else o for o in obj]
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":"))


def recommendation_prompt(ctx: AppContext) -> str:
    # Output contract is enforced by response_parser, not by the backend
    return (
        f"Based on the following user behavior data, recommend {RECOMMENDATION_COUNT} products "
        "that this user might be interested in.\n\n"
        f"Recently Viewed Items: {_dump(ctx.viewed[-PROMPT_VIEWED_WINDOW:])}\n"
        f"Current Cart Items: {_dump(ctx.cart)}\n"
        f"Most Ordered Items: {_dump(ctx.purchased[-PROMPT_PURCHASED_WINDOW:])}\n"
        f"Preferred Categories: {_dump(ctx.categories)}\n"
        f"Current Page: {ctx.current_page}\n\n"
        f"Available Products: {_dump(ctx.products)}\n\n"
        f"Suggest {RECOMMENDATION_COUNT} products from different categories the user is likely to purchase.\n"
        "Return a JSON array with product IDs and brief explanations.\n"
        'Format: [{"productId": 123, "reason": "why recommended"}]\n\n'
        "RULES:\n"
        "- Return ONLY the JSON array, no additional text or formatting\n"
        "- Product IDs must be numbers, not strings\n"
        "- Only recommend products that exist in the Available Products list\n"
        "- Mention a health benefit of the product in the reason\n"
        "- Do not recommend the same product twice"
    )


def assistant_prompt(
    message: str,
    *,
    categories: Sequence[str],
    product_count: int,
    store_count: int,
    context: str = "",
) -> str:
    return (
        "You are a helpful shopping assistant for FreshCart, a grocery delivery app.\n\n"
        "Shopping process:\n"
        "1. Users can browse stores and select one to shop from\n"
        "2. They can add products to cart or shop directly from a store\n"
        "3. Checkout: Store selection -> Product selection -> Add to cart -> Checkout\n"
        '4. Direct shopping: click "Shop" on any product -> its store -> select products -> checkout\n\n'
        "Available data:\n"
        f"- Categories: {', '.join(categories)}\n"
        f"- Total products: {product_count}\n"
        f"- Available stores: {store_count}\n"
        f"{context}\n\n"
        f'User message: "{message}"\n\n'
        "Reply in at most 2-3 friendly sentences that guide the user through shopping, "
        "mention direct store shopping when relevant and explain checkout when asked."
    )


def support_prompt(message: str, history: Sequence[tuple[str, str]]) -> str:
    """`history` holds (speaker, text) pairs, oldest first."""
    lines = "\n".join(f"{'User' if who == 'user' else 'Assistant'}: {text}" for who, text in history)
    context = f"Context:\n{lines}\n\n" if lines else ""
    return (
        "You are a compassionate mental health assistant supporting software developers.\n\n"
        f"{context}"
        f'User: "{message}"\n\n'
        "Be warm and concise (2-3 sentences). Validate feelings and normalize developer challenges. "
        "Suggest finding a therapist if the user seems distressed."
    )
