import logging
from typing import Optional, Sequence

from freshcart.domain.services.constants import CHAT_HISTORY_WINDOW
from freshcart.domain.services.llm_client import LLMBackend, is_rate_limit_error
from freshcart.domain.services.prompts import support_prompt

logger = logging.getLogger(__name__)

NOT_CONFIGURED = "I'm currently unable to provide AI-powered responses. Please check that the API key is configured correctly."
RATE_LIMITED = "I'm getting too many requests right now. Please wait a moment and try again."
UNAVAILABLE = "I apologize, I'm having trouble connecting right now. Please try again in a moment."


class SupportChat:
    """Supportive chat replies; every failure becomes a static message."""

    def __init__(self, llm: Optional[LLMBackend] = None):
        self.llm = llm

    async def reply(self, message: str, history: Sequence[tuple[str, str]] = ()) -> str:
        if self.llm is None:
            return NOT_CONFIGURED
        prompt = support_prompt(message, list(history)[-CHAT_HISTORY_WINDOW:])
        try:
            text = await self.llm.generate(prompt)
        except Exception as e:
            logger.error("Error generating AI response: %s", e)
            return RATE_LIMITED if is_rate_limit_error(e) else UNAVAILABLE
        return text.strip() or UNAVAILABLE
