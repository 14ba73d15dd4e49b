"""Outbound HTTP protocol."""

from typing import Protocol, runtime_checkable

from multikind_app.entities import HttpResultEntity


@runtime_checkable
class HttpProbe(Protocol):
    """Protocol for the outbound call made by ``/http`` and ``/kitchen-sink``.

    Unlike the storage protocols this one is async: the call runs on the
    event loop so request cancellation reaches it.
    """

    async def fetch(self, val: str) -> HttpResultEntity:
        """GET the configured target with ``val`` as a query parameter.

        Returns:
            Status code and body length of the response
        """
        ...

    async def close(self) -> None:
        ...
