"""LLM provider clients used by the section generators.

Each client exposes `complete(prompt, max_tokens=...) -> str` and translates
provider failures into the generation error taxonomy:

- connection errors, timeouts, HTTP 429 and 5xx (incl. 529 overloaded)
  become TransientGenerationError and may be retried by the Section Runner
- everything else (auth, bad request, empty reply) is a non-transient
  GenerationError with code "provider_error"
"""

import logging
import time
from typing import Optional, Protocol, runtime_checkable

import anthropic
import httpx
from anthropic import AsyncAnthropic

from idea_analysis.errors import GenerationError, TransientGenerationError

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = {408, 409, 429}


def is_retryable_status(status_code: int) -> bool:
    return status_code in RETRYABLE_STATUS or status_code >= 500


@runtime_checkable
class LLMClient(Protocol):
    name: str

    async def complete(self, prompt: str, *, max_tokens: int) -> str:
        ...

    async def close(self) -> None:
        ...


class AnthropicClient:
    """Claude via the official async SDK."""

    name = "anthropic"

    def __init__(self, api_key: str, model: str, timeout: float = 120.0):
        # Retries are owned by the Section Runner, not the SDK.
        self._client = AsyncAnthropic(api_key=api_key, timeout=timeout, max_retries=0)
        self._model = model

    async def complete(self, prompt: str, *, max_tokens: int) -> str:
        start_time = time.time()
        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIConnectionError as e:
            raise TransientGenerationError(f"Anthropic connection error: {e}") from e
        except anthropic.APIStatusError as e:
            if is_retryable_status(e.status_code):
                raise TransientGenerationError(
                    f"Anthropic returned {e.status_code}: {e.message}"
                ) from e
            raise GenerationError(
                f"Anthropic returned {e.status_code}: {e.message}",
                code="provider_error",
            ) from e

        text = "".join(
            block.text for block in response.content if getattr(block, "text", None)
        )
        if not text.strip():
            raise GenerationError(
                f"Empty response from {self._model}", code="provider_error"
            )

        logger.debug(
            "Anthropic %s: %s+%s tokens in %dms",
            self._model,
            response.usage.input_tokens,
            response.usage.output_tokens,
            int((time.time() - start_time) * 1000),
        )
        return text

    async def close(self) -> None:
        await self._client.close()


class PerplexityClient:
    """Perplexity chat completions (OpenAI-compatible) over httpx."""

    name = "perplexity"

    def __init__(
        self,
        api_key: str,
        model: str = "sonar",
        base_url: str = "https://api.perplexity.ai",
        timeout: float = 120.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._model = model
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout, connect=30.0),
            headers={"Authorization": f"Bearer {api_key}"},
        )

    async def complete(self, prompt: str, *, max_tokens: int) -> str:
        payload = {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": max_tokens,
        }
        try:
            response = await self._client.post("/chat/completions", json=payload)
        except httpx.TransportError as e:
            raise TransientGenerationError(f"Perplexity connection error: {e}") from e

        if response.status_code >= 400:
            message = f"Perplexity returned {response.status_code}: {response.text[:200]}"
            if is_retryable_status(response.status_code):
                raise TransientGenerationError(message)
            raise GenerationError(message, code="provider_error")

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise GenerationError(
                f"Unexpected Perplexity response shape: {e}", code="provider_error"
            ) from e

        if not content or not content.strip():
            raise GenerationError(
                f"Empty response from {self._model}", code="provider_error"
            )
        return content

    async def close(self) -> None:
        await self._client.aclose()
