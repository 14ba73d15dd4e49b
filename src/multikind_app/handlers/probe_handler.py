"""HTTP handlers for the backend probe endpoints.

Single-kind endpoints fail fast: the first backend error becomes a 500.
Aggregate endpoints are best-effort: backend errors are reported inline
and the response is always 200.
"""

import logging
from typing import Any

from fastapi import HTTPException, status

from multikind_app.exceptions import BackendError
from multikind_app.services import COMBOS, ProbeService

logger = logging.getLogger(__name__)

# Fixed values written by the legacy ``/<backend>-only`` endpoints
LEGACY_VALUES = {
    "redis": "hello-redis",
    "mongo": "test-item",
    "postgres": "pg-item",
    "mysql": "mysql-item",
    "http": "http-probe",
}


class ProbeHandler:
    """HTTP handlers for probe operations.

    Example:
        ```python
        handler = ProbeHandler(probe_service=ProbeService(backends))

        @app.get("/redis/{val}")
        async def redis_probe(val: str):
            return await handler.single("redis", val)
        ```
    """

    def __init__(self, probe_service: ProbeService) -> None:
        """Initialize the probe handler.

        Args:
            probe_service: The probe service (required).
        """
        self._probes = probe_service

    async def single(self, backend: str, val: str) -> dict[str, Any]:
        """Handle ``GET /<backend>/{val}``.

        Returns:
            ``{"source": backend, ...}`` with the read-back fields

        Raises:
            HTTPException: 500 on the first backend failure
        """
        try:
            result = await self._probes.probe(backend, val)
        except BackendError as e:
            logger.warning("%s probe failed: %s", backend, e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=str(e),
            ) from e

        return result.to_response()

    async def legacy(self, backend: str) -> dict[str, Any]:
        """Handle ``GET /<backend>-only`` with the backend's fixed value."""
        return await self.single(backend, LEGACY_VALUES[backend])

    async def aggregate(self, combo_name: str, val: str | None = None) -> dict[str, Any]:
        """Handle the multi-kind endpoints (``/all-dbs`` etc).

        Returns:
            Read-back value per backend, ``<backend>_error`` for failures
        """
        return await self._probes.fan_out(COMBOS[combo_name], val)
