# freshcart/api/v1/routers/recommendations.py
import logging
import time

from fastapi import APIRouter, Depends

from freshcart.api.deps import context_dep, services_dep
from freshcart.api.v1.schemas.reco import PreferredCategoriesOut, RecommendationRequest
from freshcart.core.services import Services
from freshcart.domain.models.product import RecommendationResult
from freshcart.domain.services.context_svc import ContextService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["recommendations"])


@router.post("/recommendations", response_model=RecommendationResult)
async def get_recommendations(
    body: RecommendationRequest,
    services: Services = Depends(services_dep),
):
    """
    Personalized recommendations for the current shopper.
    AI-sourced when the backend answers with valid products, rule-based otherwise.
    """
    logger.info("Request: recommendations current_page=%s", body.current_page)
    start_time = time.perf_counter()

    ctx = await services.context.build(body.current_page)
    res = await services.engine.recommend(ctx)

    elapsed_time = time.perf_counter() - start_time
    logger.info(
        "Response: recommendations count=%s provenance=%s elapsed_time=%.4fs",
        len(res.recommendations), res.provenance.value, elapsed_time,
    )
    return res


@router.get("/recommendations/preferred-categories", response_model=PreferredCategoriesOut)
async def get_preferred_categories(context: ContextService = Depends(context_dep)):
    ctx = await context.build()
    return PreferredCategoriesOut(categories=ctx.categories)
