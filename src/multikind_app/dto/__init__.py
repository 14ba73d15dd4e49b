"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
Internal logic uses entities from the entities package.
"""

from .requests import CreateItemRequest
from .responses import (
    ErrorResponse,
    HealthResponse,
    ItemCreatedResponse,
    ItemLookupResponse,
    ItemPayload,
)

__all__ = [
    "CreateItemRequest",
    "ErrorResponse",
    "HealthResponse",
    "ItemCreatedResponse",
    "ItemLookupResponse",
    "ItemPayload",
]
