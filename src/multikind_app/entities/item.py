"""Item domain entity."""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class ItemEntity:
    """An item stored in the document store and mirrored in the cache.

    Attributes:
        id: Caller-chosen identifier, the document key
        name: Display name
        value: Payload, also written to the cache under ``item:<id>``
    """

    id: str
    name: str
    value: str

    @property
    def cache_key(self) -> str:
        return item_cache_key(self.id)

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def item_cache_key(item_id: str) -> str:
    return f"item:{item_id}"
