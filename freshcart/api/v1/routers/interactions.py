# freshcart/api/v1/routers/interactions.py
import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status

from freshcart.api.deps import context_dep, interactions_dep
from freshcart.api.v1.schemas.reco import InteractionIn, SeedResult
from freshcart.domain.models.interaction import ActionKind, InteractionRecord
from freshcart.domain.repositories.interaction_repo import InteractionRepo
from freshcart.domain.services.context_svc import ContextService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/interactions", tags=["interactions"])


@router.post("", status_code=status.HTTP_204_NO_CONTENT)
async def track_interaction(body: InteractionIn, repo: InteractionRepo = Depends(interactions_dep)):
    """Fire-and-forget: append one view / add-to-cart / purchase event."""
    await repo.record(body.action, body.product_id, body.name, body.category)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/seed", response_model=SeedResult)
async def seed_interactions(context: ContextService = Depends(context_dep)):
    """Record demo interactions over the sample catalog when no history exists yet."""
    seeded = await context.seed_sample_interactions()
    logger.info("Seed requested seeded=%s", seeded)
    return SeedResult(seeded=seeded)


@router.get("/{action}", response_model=List[InteractionRecord])
async def list_interactions(action: ActionKind, repo: InteractionRepo = Depends(interactions_dep)):
    return await repo.list(action)


@router.delete("/{action}", status_code=status.HTTP_204_NO_CONTENT)
async def clear_interactions(action: ActionKind, repo: InteractionRepo = Depends(interactions_dep)):
    await repo.clear(action)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
