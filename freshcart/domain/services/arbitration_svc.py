import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from freshcart.domain.models.product import (
    AppContext,
    Provenance,
    Recommendation,
    RecommendationResult,
)
from freshcart.domain.services.constants import (
    MESSAGE_EMPTY_CATALOG,
    MESSAGE_NO_MATCH,
    REASON_COLD_START,
    REASON_POPULAR,
    REASON_PREFERRED,
    RECOMMENDATION_COUNT,
)
from freshcart.domain.services.llm_client import LLMBackend, is_rate_limit_error
from freshcart.domain.services.prompts import recommendation_prompt
from freshcart.domain.services.response_parser import ParseOutcome, parse_recommendations

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def rule_based_recommendations(ctx: AppContext, count: int = RECOMMENDATION_COUNT) -> Tuple[List[Recommendation], Optional[str]]:
    """
    Deterministic local selection over the catalog snapshot.

    Products the user already interacted with are skipped. With preferred
    categories only those categories qualify; without, the catalog order is
    the popularity order. Returns the list plus a message when it is empty.
    """
    if not ctx.products:
        return [], MESSAGE_EMPTY_CATALOG

    seen = ctx.interacted_ids()
    fresh = [p for p in ctx.products if p.product_id not in seen]

    if ctx.categories:
        preferred = set(ctx.categories)
        recs = [
            Recommendation(product_id=p.product_id, reason=REASON_PREFERRED.format(category=p.category))
            for p in fresh
            if p.category in preferred
        ][:count]
    else:
        recs = [
            Recommendation(product_id=p.product_id, reason=REASON_POPULAR.format(category=p.category.lower()))
            for p in fresh[:count]
        ]
    return recs, (None if recs else MESSAGE_NO_MATCH)


def cold_start_recommendations(ctx: AppContext, count: int = RECOMMENDATION_COUNT) -> Tuple[List[Recommendation], Optional[str]]:
    """First catalog products, for a user with no interaction history at all."""
    recs = [
        Recommendation(product_id=p.product_id, reason=REASON_COLD_START.format(category=p.category.lower()))
        for p in ctx.products[:count]
    ]
    return recs, (None if recs else MESSAGE_EMPTY_CATALOG)


class RecommendationEngine:
    """
    Arbitrates between AI-generated and rule-based recommendations.

    Every path yields a RecommendationResult: backend errors, malformed output
    and unknown product ids all collapse to the rule-based fallback, and the
    caller only sees the difference through `provenance`.
    """

    def __init__(self, llm: Optional[LLMBackend] = None, now: Callable[[], datetime] = _utc_now):
        self.llm = llm
        self._now = now

    def _result(self, ctx: AppContext, recs: List[Recommendation], provenance: Provenance, message: Optional[str] = None) -> RecommendationResult:
        return RecommendationResult(
            recommendations=recs,
            context=ctx,
            provenance=provenance,
            timestamp=self._now(),
            message=message,
        )

    def fallback(self, ctx: AppContext) -> RecommendationResult:
        recs, message = rule_based_recommendations(ctx)
        logger.info("Serving rule-based recommendations count=%s categories=%s", len(recs), ctx.categories)
        return self._result(ctx, recs, Provenance.FALLBACK, message)

    async def recommend(self, ctx: AppContext) -> RecommendationResult:
        try:
            # ---- 1) Cold start: nothing to personalize on, skip the AI call ----
            if not ctx.has_interactions():
                recs, message = cold_start_recommendations(ctx)
                logger.info("Cold start, serving %s catalog products", len(recs))
                return self._result(ctx, recs, Provenance.FALLBACK, message)

            # ---- 2) AI attempt + 3) validation --------------------------------
            if self.llm is not None:
                outcome = await self._ai_recommendations(ctx)
                if outcome.ok:
                    logger.info(
                        "AI recommendations accepted count=%s rejected=%s",
                        len(outcome.recommendations), outcome.rejected,
                    )
                    return self._result(ctx, outcome.recommendations, Provenance.AI_SOURCED)
                logger.warning("AI recommendations discarded: %s", outcome.error)
            else:
                logger.debug("No AI backend configured")

            # ---- 4) Rule-based fallback ---------------------------------------
            return self.fallback(ctx)
        except Exception as e:
            logger.exception("Unexpected error while recommending, using fallback: %s", e)
            return self.fallback(ctx)

    async def _ai_recommendations(self, ctx: AppContext) -> ParseOutcome:
        prompt = recommendation_prompt(ctx)
        logger.debug("Recommendation prompt size=%.1fKB", len(prompt) / 1024)
        try:
            text = await self.llm.generate(prompt)
        except Exception as e:
            if is_rate_limit_error(e):
                logger.warning("AI backend rate-limited or out of quota: %s", e)
            else:
                logger.error("Error getting AI recommendations: %s", e)
            return ParseOutcome(error=f"backend error: {e}")

        outcome = parse_recommendations(text, ctx.catalog_ids())
        if outcome.error:
            logger.debug("Raw AI response: %s", (text or "")[:1000])
        return outcome
