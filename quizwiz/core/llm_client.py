# quizwiz/core/llm_client.py
import logging
from typing import Optional

from openai import AsyncOpenAI
from openai import APIConnectionError, APITimeoutError, RateLimitError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from quizwiz.core import config

logger = logging.getLogger(__name__)


class LLMClient:
    """
    Wrapper around Groq (or any OpenAI-compatible provider).
    Forces STRICT JSON output using the official `response_format={"type": "json_object"}`.

    Errors are NOT swallowed here: transient ones are retried, everything else
    propagates so the caller can decide on a fallback.
    """

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        self.model = model or config.LLM_MODEL

        api_key = api_key or config.LLM_API_KEY
        if not api_key:
            raise ValueError("LLM_API_KEY (or GROQ_API_KEY / OPENAI_API_KEY) environment variable is required.")

        self.async_client: AsyncOpenAI = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url or config.LLM_BASE_URL,
            max_retries=0,  # retries handled by tenacity below
        )

    @retry(
        stop=stop_after_attempt(config.LLM_MAX_RETRIES),
        wait=wait_exponential(multiplier=1, min=1, max=4),
        retry=retry_if_exception_type((RateLimitError, APIConnectionError, APITimeoutError)),
        reraise=True,
    )
    async def chat(self, system_prompt: str, user_prompt: str) -> str:
        """
        Send a system + user message pair and return the raw JSON text.
        """
        response = await self.async_client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            # FORCE VALID JSON
            response_format={"type": "json_object"},
            # grading must be repeatable
            temperature=0.0,
            max_tokens=512,
        )
        content = response.choices[0].message.content or ""
        return content.strip()


def build_default_client() -> Optional[LLMClient]:
    """Return a configured client, or None when no API key is available."""
    try:
        return LLMClient()
    except ValueError as e:
        logger.warning(f"Rubric grading will use heuristic fallback only: {e}")
        return None
