"""httpx implementation of HttpProbe."""

import logging

import httpx

from multikind_app.config import Settings, get_http_client, settings
from multikind_app.entities import HttpResultEntity

logger = logging.getLogger(__name__)


class HttpxProbeRepository:
    """Outbound GET against a fixed target URL.

    Example:
        ```python
        probe = HttpxProbeRepository.create()
        result = await probe.fetch("hello")
        print(result.status, result.body_len)
        ```
    """

    def __init__(self, client: httpx.AsyncClient, target_url: str) -> None:
        """Initialize the probe.

        Args:
            client: Shared async HTTP client.
            target_url: URL requested on every fetch.
        """
        self._client = client
        self._target_url = target_url

    @classmethod
    def create(cls, config: Settings = settings) -> "HttpxProbeRepository":
        """Factory method to create HttpxProbeRepository from settings.

        Args:
            config: Settings holding ``HTTP_TARGET_URL`` and ``HTTP_TIMEOUT``.

        Returns:
            Configured HttpxProbeRepository
        """
        return cls(client=get_http_client(config), target_url=config.http_target_url)

    async def fetch(self, val: str) -> HttpResultEntity:
        # Non-2xx responses are results, not errors
        response = await self._client.get(self._target_url, params={"val": val})
        logger.debug("GET %s -> %d", response.url, response.status_code)
        return HttpResultEntity(status=response.status_code, body_len=len(response.content))

    async def close(self) -> None:
        await self._client.aclose()
