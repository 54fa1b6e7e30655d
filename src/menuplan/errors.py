"""
Menuplan - Domain exceptions.

Raised by the service layer and mapped to HTTP responses by the web app.
Generation-provider failures live in menuplan.llm.errors.
"""

from typing import Any


class MenuplanError(Exception):
    """Base class for application errors carrying an HTTP status and details."""

    def __init__(self, message: str, status_code: int = 500, details: dict[str, Any] | None = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class NotFoundError(MenuplanError):
    """A plan day, slot or meal the request refers to does not exist."""

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            f"{resource} '{identifier}' not found",
            status_code=404,
            details={"resource": resource, "id": identifier},
        )


class InvalidRequestError(MenuplanError):
    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, status_code=400, details={"field": field} if field else {})


class StateStoreError(MenuplanError):
    """The state document could not be written."""

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message, status_code=500, details={"operation": operation} if operation else {})


class FlyerFetchError(MenuplanError):
    """A store page, flyer viewer or flyer document could not be downloaded or read."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Could not fetch {url}: {reason}", status_code=502, details={"url": url})
