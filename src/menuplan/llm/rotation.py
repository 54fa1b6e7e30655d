"""
Menuplan - Provider rotation.

Tries providers one after another (never in parallel) until one answers:
- authorization errors abort at once
- rate limits with a short suggested wait are waited out and retried
  once on the same provider
- everything else moves on to the next provider after a short pause

If every provider fails, AllProvidersExhausted carries each attempt.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Protocol

from menuplan.config import settings
from menuplan.llm.errors import (
    AllProvidersExhausted,
    ProviderAuthError,
    ProviderError,
    ProviderRateLimitError,
)
from menuplan.llm.pools import Pool, get_local_provider, get_pool
from menuplan.randomness import RandomSource, SystemRandomSource, shuffled

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class Transport(Protocol):
    async def invoke(self, provider: str, prompt: str, *, call_site: str = "generate") -> str: ...


class ProviderRotationEngine:
    """Sequential fallback across generation providers."""

    def __init__(
        self,
        client: Transport,
        *,
        random_source: RandomSource | None = None,
        sleep: Sleep = asyncio.sleep,
        retry_threshold: float | None = None,
        default_rate_limit_delay: float | None = None,
        inter_attempt_delay: float | None = None,
    ):
        self.client = client
        self.random_source = random_source or SystemRandomSource()
        self.sleep = sleep
        self.retry_threshold = (
            retry_threshold if retry_threshold is not None else settings.rate_limit_retry_threshold_seconds
        )
        self.default_rate_limit_delay = (
            default_rate_limit_delay
            if default_rate_limit_delay is not None
            else settings.rate_limit_default_delay_seconds
        )
        self.inter_attempt_delay = (
            inter_attempt_delay if inter_attempt_delay is not None else settings.inter_attempt_delay_seconds
        )

    async def invoke(
        self,
        prompt: str,
        providers: list[str],
        *,
        call_site: str = "generate",
        local_provider: str | None = None,
    ) -> str:
        """
        Return the first successful provider response.

        Remote providers are shuffled; `local_provider`, when given, is
        tried last. Raises ProviderAuthError immediately, or
        AllProvidersExhausted once every provider has failed.
        """
        order = shuffled(self.random_source, providers)
        if local_provider:
            order.append(local_provider)

        attempts: list[tuple[str, Exception]] = []

        for index, provider in enumerate(order):
            is_last = index == len(order) - 1
            try:
                return await self.client.invoke(provider, prompt, call_site=call_site)
            except ProviderAuthError:
                logger.error(f"[ROTATION] Authorization failure on {provider}; aborting rotation")
                raise
            except ProviderRateLimitError as e:
                attempts.append((provider, e))
                if e.retry_after is not None and e.retry_after < self.retry_threshold:
                    wait = e.retry_after + 1
                    logger.info(f"[ROTATION] Rate limit on {provider}. Waiting {wait:.0f}s before retrying")
                    await self.sleep(wait)
                    try:
                        return await self.client.invoke(provider, prompt, call_site=call_site)
                    except ProviderAuthError:
                        logger.error(f"[ROTATION] Authorization failure on {provider} retry; aborting rotation")
                        raise
                    except ProviderError as retry_error:
                        logger.warning(f"[ROTATION] Retry failed on {provider}: {_short(retry_error)}")
                        attempts.append((provider, retry_error))
                    if not is_last:
                        await self.sleep(self.inter_attempt_delay)
                else:
                    logger.warning(f"[ROTATION] Rate limit on {provider} (retry after {e.retry_after}); moving on")
                    if not is_last:
                        delay = self.default_rate_limit_delay if e.retry_after is None else self.inter_attempt_delay
                        await self.sleep(delay)
            except ProviderError as e:
                logger.warning(f"[ROTATION] Failed on {provider}: {_short(e)}")
                attempts.append((provider, e))
                if not is_last:
                    await self.sleep(self.inter_attempt_delay)

        raise AllProvidersExhausted(attempts)

    async def invoke_pool(self, prompt: str, pool: Pool | str, *, call_site: str = "generate") -> str:
        """invoke() with the configured providers of a pool plus the local provider."""
        return await self.invoke(
            prompt,
            get_pool(pool),
            call_site=call_site,
            local_provider=get_local_provider(),
        )


def _short(error: Exception, limit: int = 150) -> str:
    text = str(error)
    return text if len(text) <= limit else f"{text[:limit]}..."
