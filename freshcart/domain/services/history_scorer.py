from collections import Counter
from itertools import chain
from typing import List, Sequence

from freshcart.domain.models.interaction import InteractionRecord
from freshcart.domain.services.constants import MAX_PREFERRED_CATEGORIES


def preferred_categories(
    viewed: Sequence[InteractionRecord],
    cart: Sequence[InteractionRecord],
    purchased: Sequence[InteractionRecord],
    limit: int = MAX_PREFERRED_CATEGORIES,
) -> List[str]:
    """
    Rank categories by how often they appear across the three interaction streams.

    Records without a category are skipped. Ties keep the order in which the
    category first appeared (views, then cart, then purchases).
    """
    labels = [r.category for r in chain(viewed, cart, purchased) if r.category]
    # Counter preserves insertion order and sorted() is stable
    counts = Counter(labels)
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    return [category for category, _ in ranked[:limit]]
