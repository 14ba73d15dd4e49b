"""SQLAlchemy implementation of RelationalStore.

One class serves both PostgreSQL and MySQL: the ``items`` table is
declared with SQLAlchemy Core so the dialect picks the right
autoincrement and timestamp DDL.
"""

import logging

from sqlalchemy import (
    Column,
    DateTime,
    Engine,
    Integer,
    MetaData,
    String,
    Table,
    func,
    insert,
    select,
    text,
)
from sqlalchemy.exc import SQLAlchemyError

from multikind_app.config import Settings, get_sql_engine, settings
from multikind_app.entities import RowEntity

logger = logging.getLogger(__name__)

metadata = MetaData()

items_table = Table(
    "items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255)),
    Column("created_at", DateTime, server_default=func.now()),
)


class SqlRelationalRepository:
    """Relational store over a pooled SQLAlchemy engine."""

    def __init__(self, engine: Engine, label: str) -> None:
        """Initialize the repository.

        Args:
            engine: Engine bound to the target database.
            label: Backend name used in logs and errors (postgres, mysql).
        """
        self._engine = engine
        self._label = label

    @classmethod
    def create_postgres(cls, config: Settings = settings) -> "SqlRelationalRepository":
        return cls(engine=get_sql_engine(config.pg_url, config), label="postgres")

    @classmethod
    def create_mysql(cls, config: Settings = settings) -> "SqlRelationalRepository":
        return cls(engine=get_sql_engine(config.mysql_url, config), label="mysql")

    @property
    def label(self) -> str:
        return self._label

    def insert_and_fetch_last(self, name: str) -> RowEntity:
        """Insert a row then read back the row with the highest id.

        The read-back is not tied to the insert: under concurrent writers
        it may return another request's row.
        """
        with self._engine.begin() as conn:
            conn.execute(insert(items_table).values(name=name))
        with self._engine.connect() as conn:
            row = conn.execute(
                select(items_table.c.id, items_table.c.name)
                .order_by(items_table.c.id.desc())
                .limit(1)
            ).one()
        return RowEntity(id=row.id, name=row.name)

    def ensure_schema(self) -> None:
        metadata.create_all(self._engine, checkfirst=True)

    def ping(self) -> bool:
        """Check if the database is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning("%s ping failed: %s", self._label, e)
            return False

    def close(self) -> None:
        self._engine.dispose()

    @property
    def engine(self) -> Engine:
        return self._engine
