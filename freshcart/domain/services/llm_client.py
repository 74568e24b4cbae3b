# freshcart/domain/services/llm_client.py
from __future__ import annotations

import logging
from time import monotonic as _now
from typing import Optional, Protocol

from openai import AsyncOpenAI

from freshcart.core.config import Settings
from freshcart.domain.services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class LLMBackend(Protocol):
    """Text-completion collaborator: one prompt in, one text blob out."""

    async def generate(self, prompt: str) -> str: ...


class OpenAILLMBackend:
    """
    Generative-language backend over the OpenAI chat API (or any compatible
    endpoint via base_url). Every call goes through the shared rate limiter.
    No retries: callers route failures to their own fallback.
    """

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        limiter: RateLimiter,
        base_url: Optional[str] = None,
        timeout_s: float = 30,
        temperature: float = 0.7,
        client: Optional[AsyncOpenAI] = None,
    ):
        self._client = client or AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0)
        self.model = model
        self.limiter = limiter
        self.timeout_s = timeout_s
        self.temperature = temperature

    async def generate(self, prompt: str) -> str:
        await self.limiter.acquire()
        t0 = _now()
        resp = await self._client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.temperature,
            timeout=self.timeout_s,
        )
        dt = _now() - t0
        # Best-effort usage logging
        u = getattr(resp, "usage", None)
        logger.info(
            "LLM call model=%s duration=%.3fs tokens(prompt=%s, completion=%s)",
            getattr(resp, "model", self.model), dt,
            getattr(u, "prompt_tokens", None), getattr(u, "completion_tokens", None),
        )
        return resp.choices[0].message.content or ""


def is_rate_limit_error(exc: Exception) -> bool:
    """429 / quota signals, whatever the client library wraps them in."""
    if getattr(exc, "status_code", None) == 429 or getattr(exc, "status", None) == 429:
        return True
    msg = str(exc).lower()
    return "429" in msg or "quota" in msg or "rate limit" in msg


def build_llm_backend(settings: Settings, limiter: RateLimiter, *, model: Optional[str] = None) -> Optional[LLMBackend]:
    """None when no API key is configured: callers then stay on their fallback for the whole process."""
    if not settings.OPENAI_API_KEY:
        logger.warning("No OPENAI_API_KEY configured, AI features use fallbacks only")
        return None
    return OpenAILLMBackend(
        api_key=settings.OPENAI_API_KEY,
        model=model or settings.OPENAI_RECO_MODEL,
        limiter=limiter,
        base_url=settings.OPENAI_BASE_URL,
        timeout_s=settings.openai_timeout_s,
    )
