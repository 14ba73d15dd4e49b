"""HTTP handlers for the item API."""

from fastapi import HTTPException, status

from multikind_app.dto import (
    CreateItemRequest,
    ItemCreatedResponse,
    ItemLookupResponse,
    ItemPayload,
)
from multikind_app.exceptions import BackendError, ItemNotFoundError
from multikind_app.services import ItemService


class ItemHandler:
    """HTTP handlers for ``/api/item``.

    Converts DTOs to entities, delegates to ItemService and maps service
    errors to status codes.
    """

    def __init__(self, item_service: ItemService) -> None:
        self._items = item_service

    async def create_item(self, request: CreateItemRequest) -> ItemCreatedResponse:
        """Handle POST /api/item requests.

        Raises:
            HTTPException: 500 if the document store or cache write fails
        """
        try:
            item = await self._items.create_item(request.to_entity())
        except BackendError as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=str(e),
            ) from e

        return ItemCreatedResponse(id=item.id)

    async def get_item(self, item_id: str) -> ItemLookupResponse:
        """Handle GET /api/item/{id} requests.

        Raises:
            HTTPException: 404 if the item does not exist, 500 on store failure
        """
        try:
            item, cached = await self._items.get_item(item_id)
        except ItemNotFoundError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
        except BackendError as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=str(e),
            ) from e

        return ItemLookupResponse(item=ItemPayload.from_entity(item), redis_cached=cached)
