"""Relational store protocol."""

from typing import Protocol, runtime_checkable

from multikind_app.entities import RowEntity


@runtime_checkable
class RelationalStore(Protocol):
    """Protocol for SQL backends holding the ``items`` table.

    The same interface covers PostgreSQL and MySQL; ``label`` tells
    them apart in logs and error messages.
    """

    @property
    def label(self) -> str:
        """Backend name, e.g. ``postgres`` or ``mysql``."""
        ...

    def insert_and_fetch_last(self, name: str) -> RowEntity:
        """Insert a row then select the row with the highest id.

        Args:
            name: Value for the ``name`` column

        Returns:
            The last row of the table
        """
        ...

    def ensure_schema(self) -> None:
        """Create the ``items`` table if it does not exist."""
        ...

    def ping(self) -> bool:
        ...

    def close(self) -> None:
        ...
