# freshcart/api/v1/routers/assistant.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Path

from freshcart.api.deps import services_dep
from freshcart.api.v1.schemas.reco import AssistantQuery, ChatRequest, ChatResponse
from freshcart.core.services import Services
from freshcart.domain.models.assistant import AssistantReply

logger = logging.getLogger(__name__)

router = APIRouter(tags=["assistant"])


@router.post("/assistant/query", response_model=AssistantReply)
async def assistant_query(body: AssistantQuery, services: Services = Depends(services_dep)):
    """Route a shopper's free-text message to an intent, products and suggestions."""
    reply = await services.assistant.handle(body.query)
    logger.info("Response: assistant intent=%s products=%s", reply.intent.value, len(reply.products))
    return reply


@router.get("/assistant/similar/{product_id}", response_model=AssistantReply)
async def similar_products(
    product_id: int = Path(..., gt=0),
    services: Services = Depends(services_dep),
):
    """Other products from the same category as `product_id`."""
    logger.info("Request: similar_products product_id=%s", product_id)
    reply = await services.assistant.similar(product_id)
    if reply is None:
        raise HTTPException(status_code=404, detail=f"Product {product_id} not found")
    logger.info("Response: similar_products product_id=%s count=%s", product_id, len(reply.products))
    return reply


@router.post("/chat", response_model=ChatResponse)
async def support_chat(body: ChatRequest, services: Services = Depends(services_dep)):
    history = [(turn.sender, turn.text) for turn in body.history]
    return ChatResponse(reply=await services.chat.reply(body.message, history))
