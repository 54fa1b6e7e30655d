"""
Menuplan - Provider pools.

Two pools, picked by call site:
- chef: full weekly plans and recipe narratives (quality first)
- worker: structured extraction such as flyer offers (speed and quota first)

Both come from settings so deployments can reorder or trim them.
"""

from enum import Enum

from menuplan.config import settings

OLLAMA_PREFIX = "ollama/"


class Pool(str, Enum):
    CHEF = "chef"
    WORKER = "worker"


def get_pool(pool: Pool | str) -> list[str]:
    """Remote providers for a pool."""
    pool = Pool(pool)
    models = settings.chef_models if pool == Pool.CHEF else settings.worker_models
    return list(models)


def get_local_provider() -> str | None:
    """The local fallback provider id, when an Ollama model is configured."""
    if settings.ollama_model:
        return f"{OLLAMA_PREFIX}{settings.ollama_model}"
    return None


def is_local(provider: str) -> bool:
    return provider.startswith(OLLAMA_PREFIX)
