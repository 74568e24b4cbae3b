# freshcart/domain/services/response_parser.py
"""
Strict parse-then-validate step for the recommendation JSON returned by the LLM.

Expected payload (possibly wrapped in ``` or ```json fences):
  [{"productId": 123, "reason": "why recommended"}, ...]

`parse_recommendations` never raises: it returns a ParseOutcome carrying either
the surviving recommendations or the reason nothing survived.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from freshcart.domain.models.product import Recommendation

logger = logging.getLogger(__name__)

DEFAULT_REASON = "Recommended for you"
# catalog ids fit comfortably; longer digit strings are noise
MAX_ID_DIGITS = 18

# =============================================================================
#                               VALIDATION SCHEMA
# =============================================================================


class AIRecommendation(BaseModel):
    """
    One entry of the LLM output, matching prompts.recommendation_prompt:
      {"productId": 123, "reason": "why recommended"}
    Numeric strings are accepted; bools and fractional numbers are not.
    """

    product_id: int = Field(gt=0, alias="productId")
    reason: Optional[str] = None

    @field_validator("product_id", mode="before")
    @classmethod
    def _plain_number(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("boolean is not a product id")
        if isinstance(v, str):
            v = v.strip()
            if len(v.lstrip("+-")) > MAX_ID_DIGITS:
                raise ValueError("product id has too many digits")
        return v

    @field_validator("reason", mode="before")
    @classmethod
    def _reason_text(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return str(v).strip() or None


class ParseOutcome(BaseModel):
    recommendations: List[Recommendation] = Field(default_factory=list)
    error: Optional[str] = None
    rejected: int = 0
    model_config = ConfigDict(frozen=True)

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.recommendations)


# Regex to strip code fences (``` or ```json) from LLM output
_CODE_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_fences(text: str) -> str:
    """Remove ``` or ```json fences the LLM might add."""
    return _CODE_FENCE_RE.sub("", text or "").strip()


def parse_recommendations(text: str, catalog_ids: set[int]) -> ParseOutcome:
    raw = strip_fences(text)
    if not raw:
        return ParseOutcome(error="empty response")
    try:
        parsed = json.loads(raw)
    except ValueError as e:
        # JSONDecodeError, and oversized integer literals
        return ParseOutcome(error=f"invalid JSON: {e}")
    if not isinstance(parsed, list):
        return ParseOutcome(error=f"expected a JSON array, got {type(parsed).__name__}")

    kept: List[Recommendation] = []
    seen: set[int] = set()
    rejected = 0
    for entry in parsed:
        try:
            item = AIRecommendation.model_validate(entry)
        except ValidationError as e:
            logger.warning("Invalid recommendation entry: %s", e.errors()[:1])
            rejected += 1
            continue
        if item.product_id not in catalog_ids:
            logger.warning("Product with ID %s not found in products list", item.product_id)
            rejected += 1
            continue
        if item.product_id in seen:
            rejected += 1
            continue
        seen.add(item.product_id)
        kept.append(Recommendation(product_id=item.product_id, reason=item.reason or DEFAULT_REASON))

    if not kept:
        return ParseOutcome(error="no valid recommendations", rejected=rejected)
    return ParseOutcome(recommendations=kept, rejected=rejected)
