from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from freshcart.domain.models.interaction import InteractionRecord


class Product(BaseModel):
    product_id: int = Field(gt=0)
    name: str
    category: str
    price: float = Field(ge=0)
    image_url: Optional[str] = None
    description: Optional[str] = None
    seller: Optional[str] = None
    location: Optional[str] = None
    unit: Optional[str] = None
    quantity: Optional[str] = None
    harvest_date: Optional[str] = Field(default=None, alias="harvestDate")
    rating: Optional[float] = None

    # immutable once loaded; stored blobs use the camelCase "harvestDate"
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Provenance(str, Enum):
    AI_SOURCED = "ai-sourced"
    FALLBACK = "fallback"


class Recommendation(BaseModel):
    product_id: int
    reason: str
    model_config = ConfigDict(frozen=True)


class AppContext(BaseModel):
    """Snapshot of everything a recommendation request is computed from."""

    user_preferences: Dict[str, Any] = Field(default_factory=dict)
    current_page: str = "/"
    user_history: List[Any] = Field(default_factory=list)
    products: List[Product] = Field(default_factory=list)
    viewed: List[InteractionRecord] = Field(default_factory=list)
    cart: List[InteractionRecord] = Field(default_factory=list)
    purchased: List[InteractionRecord] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    model_config = ConfigDict(frozen=True)

    def has_interactions(self) -> bool:
        return bool(self.viewed or self.cart or self.purchased)

    def interacted_ids(self) -> set[int]:
        return {r.id for r in (*self.viewed, *self.cart, *self.purchased)}

    def catalog_ids(self) -> set[int]:
        return {p.product_id for p in self.products}


class RecommendationResult(BaseModel):
    recommendations: List[Recommendation]
    context: AppContext
    provenance: Provenance
    timestamp: datetime
    message: Optional[str] = None
    model_config = ConfigDict(frozen=True)
