"""Handler layer for HTTP endpoints.

Handlers depend on services, not directly on repositories.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Orchestration) -> (Data Access)
"""

from .item_handler import ItemHandler
from .probe_handler import ProbeHandler

__all__ = [
    "ItemHandler",
    "ProbeHandler",
]
