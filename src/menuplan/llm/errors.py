"""
Menuplan - Generation errors.

The transport raises one of three classes; the rotation engine decides
what to do with each.
"""


class ProviderError(Exception):
    """Any provider failure that is worth trying elsewhere."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        self.message = message
        super().__init__(f"{provider}: {message}")


class ProviderAuthError(ProviderError):
    """Bad API key or missing permission. Never retried."""


class ProviderRateLimitError(ProviderError):
    """Quota hit. `retry_after` is the provider's suggested wait, when it gave one."""

    def __init__(self, provider: str, message: str, retry_after: float | None = None):
        super().__init__(provider, message)
        self.retry_after = retry_after


class AllProvidersExhausted(Exception):
    """Every provider in the list failed."""

    def __init__(self, attempts: list[tuple[str, Exception]]):
        self.attempts = attempts
        lines = "\n".join(f"{provider}: {error}" for provider, error in attempts)
        super().__init__(f"All providers failed:\n{lines}")

    @property
    def providers(self) -> list[str]:
        return [provider for provider, _ in self.attempts]
