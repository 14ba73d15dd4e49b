"""Document store protocol."""

from typing import Any, Protocol, runtime_checkable

from multikind_app.entities import ItemEntity


@runtime_checkable
class DocumentStore(Protocol):
    """Protocol for document storage backends (MongoDB)."""

    def insert_probe(self, name: str) -> dict[str, Any]:
        """Insert a probe document and read it back by its id.

        Args:
            name: Value stored in the document's ``name`` field

        Returns:
            The stored document, JSON-ready (``_id`` rendered as a string)
        """
        ...

    def upsert_item(self, item: ItemEntity) -> None:
        """Insert or replace the document keyed by ``item.id``."""
        ...

    def find_item(self, item_id: str) -> ItemEntity | None:
        """Look up an item by id.

        Returns:
            The item, or None if no document has that id
        """
        ...

    def ping(self) -> bool:
        ...

    def close(self) -> None:
        ...
