"""multi-kind-app - exercises several backend kinds from single requests.

Every endpoint writes a value to one or more backends (Redis, MongoDB,
PostgreSQL, MySQL, outbound HTTP) and reads it straight back, so a
recording tool can capture a fixture for each backend kind.

Layers:
    - protocols: Interface contracts, one per backend kind
    - repositories: Driver-backed implementations
    - services: Probe fan-out and item write-through
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

For the HTTP API:
    ```python
    from multikind_app.api.app import app, create_app
    ```
"""

from multikind_app.backends import Backends, build_backends
from multikind_app.config import Settings, get_settings, settings
from multikind_app.entities import ItemEntity, ProbeResult, RowEntity
from multikind_app.handlers import ItemHandler, ProbeHandler
from multikind_app.protocols import CacheStore, DocumentStore, HttpProbe, RelationalStore
from multikind_app.services import COMBOS, ItemService, ProbeService

__all__ = [
    # Configuration
    "Settings",
    "settings",
    "get_settings",
    # Backends
    "Backends",
    "build_backends",
    # Protocols (interfaces)
    "CacheStore",
    "DocumentStore",
    "RelationalStore",
    "HttpProbe",
    # Services
    "ProbeService",
    "ItemService",
    "COMBOS",
    # Handlers (HTTP)
    "ProbeHandler",
    "ItemHandler",
    # Entities
    "ItemEntity",
    "RowEntity",
    "ProbeResult",
]
