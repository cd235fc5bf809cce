"""OpenAI chat completion client."""

import logging
import os
import time
from collections.abc import AsyncGenerator

from openai import AsyncOpenAI

from mdai.config import DEFAULT_MAX_TOKENS, DEFAULT_MODEL, DEFAULT_TEMPERATURE, QualityConfig
from mdai.cost_tracker import CostRecord
from mdai.errors import CompletionError

logger = logging.getLogger(__name__)


class OpenAIClient:
    """Async OpenAI client for system/user message completions."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
    ):
        api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY environment variable is required")

        self.client = AsyncOpenAI(api_key=api_key)
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.last_cost: CostRecord | None = None

    @classmethod
    def from_quality(cls, model: str, quality: QualityConfig, api_key: str | None = None) -> "OpenAIClient":
        return cls(
            api_key=api_key,
            model=model,
            max_tokens=quality.max_tokens,
            temperature=quality.temperature,
        )

    def _messages(self, system_message: str, user_message: str) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": system_message},
            {"role": "user", "content": user_message},
        ]

    async def complete(self, system_message: str, user_message: str, operation: str = "") -> str:
        """Return the whole completion text in one response."""
        self.last_cost = CostRecord(model=self.model, operation=operation)
        t_start = time.perf_counter()

        completion = await self.client.chat.completions.create(
            model=self.model,
            messages=self._messages(system_message, user_message),
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        if not completion.choices:
            raise CompletionError("no response from OpenAI API")

        self.last_cost.total_time = time.perf_counter() - t_start
        if completion.usage:
            self.last_cost.input_tokens = completion.usage.prompt_tokens
            self.last_cost.output_tokens = completion.usage.completion_tokens
        logger.info("cost information: %s", self.last_cost)

        return completion.choices[0].message.content or ""

    async def stream(
        self, system_message: str, user_message: str, operation: str = ""
    ) -> AsyncGenerator[str, None]:
        """Yield completion text as it arrives."""
        self.last_cost = CostRecord(model=self.model, operation=operation)

        stream = await self.client.chat.completions.create(
            model=self.model,
            messages=self._messages(system_message, user_message),
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            stream=True,
            stream_options={"include_usage": True},
        )

        t_start = time.perf_counter()
        first_chunk = True

        async for chunk in stream:
            if chunk.usage:
                self.last_cost.input_tokens = chunk.usage.prompt_tokens
                self.last_cost.output_tokens = chunk.usage.completion_tokens
                self.last_cost.total_time = time.perf_counter() - t_start
            if chunk.choices and chunk.choices[0].delta.content:
                if first_chunk:
                    self.last_cost.time_to_first_token = time.perf_counter() - t_start
                    first_chunk = False
                yield chunk.choices[0].delta.content

        logger.info("cost information: %s", self.last_cost)
