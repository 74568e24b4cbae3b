# freshcart/api/v1/schemas/reco.py
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from freshcart.domain.models.interaction import ActionKind


class RecommendationRequest(BaseModel):
    current_page: str = "/"


class PreferredCategoriesOut(BaseModel):
    categories: List[str]


class InteractionIn(BaseModel):
    action: ActionKind
    product_id: int = Field(gt=0)
    name: str = ""
    category: Optional[str] = None


class SeedResult(BaseModel):
    seeded: bool


class AssistantQuery(BaseModel):
    query: str = Field(min_length=1, max_length=500)


class ChatTurn(BaseModel):
    sender: Literal["user", "assistant"]
    text: str


class ChatRequest(BaseModel):
    message: str = Field(min_length=1, max_length=2000)
    history: List[ChatTurn] = Field(default_factory=list)


class ChatResponse(BaseModel):
    reply: str
