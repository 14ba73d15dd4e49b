"""Service layer for orchestration.

Services depend on protocols, not on concrete drivers, so tests can hand
them in-memory doubles.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Orchestration) -> (Data Access)
"""

from .item_service import ItemService
from .probe_service import BACKEND_ORDER, COMBOS, Combo, ProbeService

__all__ = [
    "ItemService",
    "ProbeService",
    "Combo",
    "COMBOS",
    "BACKEND_ORDER",
]
