from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ActionKind(str, Enum):
    VIEW = "view"
    ADD_TO_CART = "add_to_cart"
    PURCHASE = "purchase"


class InteractionRecord(BaseModel):
    id: int                          # product_id of the interacted product
    name: str = ""
    category: Optional[str] = None   # denormalized so scoring survives catalog refreshes
    timestamp: str
    action: ActionKind
    model_config = ConfigDict(frozen=True)
