"""Generative text service used by the draft and specificity stages."""

import asyncio
import logging
from typing import Optional, Protocol

from pydantic_ai import Agent

from bookmark_tagger.lib.retry import retry_on_failure_async

from .config import DEFAULT_TEMPERATURE

logger = logging.getLogger(__name__)


class CompletionService(Protocol):
    """Call-response text generation.

    Implementations:
    - PydanticAICompletionService: any model pydantic-ai supports
    - FakeCompletionService: scripted replies for testing
    """

    async def complete(
        self,
        system_prompt: str,
        user_content: str,
        *,
        max_output_tokens: int,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> str:
        """Return the model's free-text reply."""
        ...


class PydanticAICompletionService:
    """Completion service backed by a pydantic-ai Agent.

    Holds only immutable configuration. A fresh Agent is built per call since
    each stage sends its own system prompt.
    """

    def __init__(
        self,
        model: str,
        request_timeout: Optional[float] = 30.0,
        max_retries: int = 2,
        retry_base_delay: float = 0.5,
    ):
        """Initialize completion service.

        Args:
            model: pydantic-ai model identifier (e.g. "anthropic:claude-3-5-haiku-latest")
            request_timeout: Deadline per attempt in seconds (None disables it)
            max_retries: Retries on transient transport errors
            retry_base_delay: First backoff delay in seconds
        """
        self.model = model
        self.request_timeout = request_timeout
        self.max_retries = max_retries
        self._run = retry_on_failure_async(
            max_retries=max_retries,
            base_delay=retry_base_delay,
        )(self._run_once)

    async def _run_once(
        self,
        system_prompt: str,
        user_content: str,
        max_output_tokens: int,
        temperature: float,
    ) -> str:
        model_settings = {
            "max_tokens": max_output_tokens,
            "temperature": temperature,
        }
        if self.request_timeout is not None:
            model_settings["timeout"] = self.request_timeout

        agent = Agent(
            self.model,
            system_prompt=system_prompt,
            model_settings=model_settings,
        )

        run = agent.run(user_content)
        if self.request_timeout is not None:
            result = await asyncio.wait_for(run, timeout=self.request_timeout)
        else:
            result = await run

        return result.output if hasattr(result, "output") else str(result)

    async def complete(
        self,
        system_prompt: str,
        user_content: str,
        *,
        max_output_tokens: int,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> str:
        logger.debug(
            f"Calling {self.model} (max_tokens={max_output_tokens}, temperature={temperature})"
        )
        return await self._run(system_prompt, user_content, max_output_tokens, temperature)
