"""
Menuplan - Generation client.

Invokes a single named provider with a prompt and returns raw text.
No retries here; failures are translated into the typed errors of
menuplan.llm.errors for the rotation engine to classify.

Provider ids:
- "ollama/<model>": local Ollama server over HTTP
- anything else: a Gemini model through the OpenAI-compatible endpoint
"""

import logging
import re

import httpx
import openai
from openai import AsyncOpenAI

from menuplan.config import settings
from menuplan.llm.errors import ProviderAuthError, ProviderError, ProviderRateLimitError
from menuplan.llm.pools import OLLAMA_PREFIX, is_local
from menuplan.llm.prompt_logger import log_prompt

logger = logging.getLogger(__name__)

# "retry in 56.10s" or "retryDelay":"56s"
_RETRY_PATTERNS = (
    re.compile(r"retry in (\d+(?:\.\d+)?)s"),
    re.compile(r'"retryDelay"\s*:\s*"(\d+(?:\.\d+)?)s"'),
)


def parse_retry_after(message: str, headers: httpx.Headers | dict | None = None) -> float | None:
    """Suggested wait in seconds from a Retry-After header or the error text."""
    if headers:
        value = headers.get("retry-after")
        if value:
            try:
                return float(value)
            except ValueError:
                pass
    for pattern in _RETRY_PATTERNS:
        match = pattern.search(message)
        if match:
            return float(match.group(1))
    return None


class GenerationClient:
    """Single-provider text generation."""

    def __init__(
        self,
        openai_client: AsyncOpenAI | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._openai = openai_client
        self._http = http_client

    def _get_openai(self) -> AsyncOpenAI:
        if self._openai is None:
            self._openai = AsyncOpenAI(
                api_key=settings.google_api_key or "missing-key",
                base_url=settings.gemini_base_url,
                max_retries=0,
            )
        return self._openai

    async def invoke(self, provider: str, prompt: str, *, call_site: str = "generate") -> str:
        """Run prompt on provider and return the raw text."""
        try:
            if is_local(provider):
                text = await self._invoke_ollama(provider[len(OLLAMA_PREFIX):], prompt)
            else:
                text = await self._invoke_gemini(provider, prompt)
        except ProviderError as e:
            log_prompt(call_site=call_site, provider=provider, prompt=prompt, error=str(e))
            raise

        log_prompt(call_site=call_site, provider=provider, prompt=prompt, response=text)
        return text

    async def _invoke_gemini(self, model: str, prompt: str) -> str:
        client = self._get_openai()
        try:
            completion = await client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
            )
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            raise ProviderAuthError(model, str(e)) from e
        except openai.RateLimitError as e:
            retry_after = parse_retry_after(str(e), e.response.headers if e.response is not None else None)
            raise ProviderRateLimitError(model, str(e), retry_after=retry_after) from e
        except openai.APIError as e:
            raise ProviderError(model, str(e)) from e

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise ProviderError(model, "empty response")
        return content

    async def _invoke_ollama(self, model: str, prompt: str) -> str:
        payload = {"model": model, "prompt": prompt, "stream": False}
        url = f"{settings.ollama_base_url.rstrip('/')}/api/generate"
        try:
            if self._http is not None:
                response = await self._http.post(url, json=payload, timeout=settings.ollama_timeout_seconds)
            else:
                async with httpx.AsyncClient(timeout=settings.ollama_timeout_seconds) as client:
                    response = await client.post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderError(f"{OLLAMA_PREFIX}{model}", f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise ProviderError(f"{OLLAMA_PREFIX}{model}", str(e) or type(e).__name__) from e

        try:
            text = response.json().get("response") or ""
        except ValueError as e:
            raise ProviderError(f"{OLLAMA_PREFIX}{model}", "invalid JSON body") from e
        if not text:
            raise ProviderError(f"{OLLAMA_PREFIX}{model}", "empty response")
        return text
