"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field

from multikind_app.entities import ItemEntity


class CreateItemRequest(BaseModel):
    """Request DTO for ``POST /api/item``."""

    id: str = Field(..., description="Item identifier, the document key", min_length=1)
    name: str = Field("", description="Display name")
    value: str = Field("", description="Payload, also cached under item:<id>")

    def to_entity(self) -> ItemEntity:
        return ItemEntity(id=self.id, name=self.name, value=self.value)
