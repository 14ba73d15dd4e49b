"""Response DTOs for API endpoints."""

from pydantic import BaseModel, Field

from multikind_app.entities import ItemEntity


class HealthResponse(BaseModel):
    status: str = Field("ok", description="Always 'ok'; backends are not checked")


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response."""

    error: str = Field(..., description="Free-text error message")


class ItemPayload(BaseModel):
    id: str
    name: str
    value: str

    @classmethod
    def from_entity(cls, item: ItemEntity) -> "ItemPayload":
        return cls(id=item.id, name=item.name, value=item.value)


class ItemCreatedResponse(BaseModel):
    status: str = Field("created", description="Always 'created'")
    id: str = Field(..., description="Identifier of the upserted item")


class ItemLookupResponse(BaseModel):
    item: ItemPayload
    redis_cached: str | None = Field(
        None,
        description="Cached value, or null on a cache miss or cache failure",
    )
