"""
Menuplan - Generation layer.

GenerationClient calls one provider; ProviderRotationEngine rotates
through a pool of them.
"""

from menuplan.llm.client import GenerationClient
from menuplan.llm.errors import (
    AllProvidersExhausted,
    ProviderAuthError,
    ProviderError,
    ProviderRateLimitError,
)
from menuplan.llm.pools import Pool, get_pool
from menuplan.llm.rotation import ProviderRotationEngine

__all__ = [
    "AllProvidersExhausted",
    "GenerationClient",
    "Pool",
    "ProviderAuthError",
    "ProviderError",
    "ProviderRateLimitError",
    "ProviderRotationEngine",
    "get_pool",
]
