"""Completion client for OpenAI-compatible chat endpoints (Groq by default)."""

import logging

from openai import AsyncOpenAI

from ..config import Settings
from ..exceptions import CompletionError
from .prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class CompletionClient:
    """Single-shot chat completion client.

    Makes exactly one request per call; the SDK's own retries are disabled.
    Transport, auth and rate-limit errors from the SDK propagate to the caller.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.client = AsyncOpenAI(
            api_key=settings.llm_api_key,
            base_url=settings.llm_base_url,
            timeout=settings.request_timeout,
            max_retries=0,
        )
        self.model = settings.llm_model

    async def complete(self, prompt: str) -> str:
        """Send the prompt and return the raw reply text."""
        prompt_preview = prompt[:100].replace("\n", " ")
        logger.debug(f"[LLM] Prompt ({len(prompt)} chars): {prompt_preview}...")
        logger.debug(f"[LLM] Model: {self.model}, max_tokens: {self.settings.llm_max_tokens}")

        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=self.settings.llm_temperature,
            max_tokens=self.settings.llm_max_tokens,
        )

        if not response.choices:
            raise CompletionError("Completion returned no choices")
        content = response.choices[0].message.content
        if not content:
            raise CompletionError("Completion returned an empty message")

        response_preview = content[:100].replace("\n", " ")
        logger.debug(f"[LLM] Response ({len(content)} chars): {response_preview}...")
        return content
