"""Extraction service clients.

The pipeline only needs ``await client.extract(request) -> str``. Clients
report transport problems as :class:`TransportError` / :class:`RateLimitError`
and never look at what the model wrote.
"""

import logging
import os
from typing import Optional, Protocol

import openai
from openai import AsyncOpenAI

from .config import ExtractionConfig, ModelConfig
from .errors import RateLimitError, TransportError
from .schemas import ExtractionRequest

logger = logging.getLogger(__name__)


class ExtractionClient(Protocol):
    async def extract(self, request: ExtractionRequest) -> str:
        ...


def _retry_after(error: openai.APIStatusError) -> Optional[float]:
    """Seconds suggested by a 429 response, if the server sent any."""
    response = getattr(error, "response", None)
    if response is None:
        return None
    value = response.headers.get("retry-after")
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


class OpenAIExtractionClient:
    """Chat-completions backend for one model."""

    def __init__(
        self,
        model: ModelConfig,
        api_key: Optional[str] = None,
        timeout: float = 180.0,
        max_retries: int = 0,
        sdk_client: Optional[AsyncOpenAI] = None,
    ):
        self.model = model
        if sdk_client is not None:
            self._client = sdk_client
            return

        api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY environment variable not set")
        # Rate-limit retries are driven by the pipeline, not the SDK
        self._client = AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=max_retries)

    async def extract(self, request: ExtractionRequest) -> str:
        try:
            completion = await self._client.chat.completions.create(
                model=self.model.name,
                messages=[
                    {"role": "system", "content": request.system_prompt},
                    {"role": "user", "content": request.user_prompt},
                ],
                temperature=request.temperature,
                max_tokens=self.model.max_output_tokens,
            )
        except openai.RateLimitError as e:
            raise RateLimitError(f"{self.model.name} rate limited: {e}", retry_after=_retry_after(e)) from e
        except openai.APIStatusError as e:
            raise TransportError(f"{self.model.name} returned {e.status_code}: {e}", status_code=e.status_code) from e
        except openai.APIError as e:
            raise TransportError(f"{self.model.name} request failed: {e}") from e

        if not completion.choices:
            return ""
        choice = completion.choices[0]
        if choice.finish_reason == "length":
            logger.warning(f"{self.model.name} response hit the output limit; expecting truncated JSON")
        return choice.message.content or ""

    async def aclose(self) -> None:
        await self._client.close()


class FallbackExtractionClient:
    """Try the primary backend; on a transport failure ask the secondary one."""

    def __init__(self, primary: ExtractionClient, secondary: ExtractionClient):
        self.primary = primary
        self.secondary = secondary

    async def extract(self, request: ExtractionRequest) -> str:
        try:
            return await self.primary.extract(request)
        except TransportError as e:
            logger.warning(f"Primary backend failed ({e}); trying fallback backend")
        return await self.secondary.extract(request)

    async def aclose(self) -> None:
        for client in (self.primary, self.secondary):
            close = getattr(client, "aclose", None)
            if close is not None:
                await close()


def build_default_client(config: ExtractionConfig, api_key: Optional[str] = None) -> FallbackExtractionClient:
    """Primary model with the cheaper fallback model behind it."""
    primary = OpenAIExtractionClient(config.model, api_key=api_key, timeout=config.request_timeout_seconds)
    secondary = OpenAIExtractionClient(config.fallback_model, api_key=api_key, timeout=config.request_timeout_seconds)
    return FallbackExtractionClient(primary, secondary)


def build_simplified_client(config: ExtractionConfig, api_key: Optional[str] = None) -> OpenAIExtractionClient:
    """Client used for simplified-prompt retries (the cheaper model)."""
    return OpenAIExtractionClient(config.fallback_model, api_key=api_key, timeout=config.request_timeout_seconds)
