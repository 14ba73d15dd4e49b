"""Exception hierarchy for multi-kind-app.

Services raise these; handlers turn them into HTTPException and the app
renders every HTTPException as an ``{"error": ...}`` body:

    BackendError             -> 500
    BackendUnavailableError  -> 500
    ItemNotFoundError        -> 404
    StartupError             -> process exits during lifespan startup
"""


class MultiKindError(Exception):
    """Base class for all application errors."""


class BackendError(MultiKindError):
    """A call to a backend failed.

    Attributes:
        backend: Backend name (redis, mongo, postgres, mysql, http)
    """

    def __init__(self, backend: str, message: str) -> None:
        super().__init__(message)
        self.backend = backend


class BackendUnavailableError(BackendError):
    """The backend handle could not be created at startup."""

    def __init__(self, backend: str) -> None:
        super().__init__(backend, f"{backend} backend is not configured")


class ItemNotFoundError(MultiKindError):
    def __init__(self, item_id: str) -> None:
        super().__init__(f"item {item_id!r} not found")
        self.item_id = item_id


class StartupError(MultiKindError):
    """A backend the service cannot run without is unreachable."""
