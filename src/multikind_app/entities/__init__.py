"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .item import ItemEntity
from .probe import HttpResultEntity, ProbeResult, RowEntity

__all__ = ["ItemEntity", "RowEntity", "HttpResultEntity", "ProbeResult"]
