from __future__ import annotations

import typing as t

import pydantic as p

from .base import BaseSettings


class StorageSettings(BaseSettings):
    persistent: PersistentSettings


class PersistentSettings(BaseSettings):
    database: DatabaseSettings


class DatabaseSettings(BaseSettings):
    """Relational database holding classes, scores and report cards.

    PostgreSQL in deployed environments; the test environment runs against
    an in-memory SQLite database (``database: ":memory:"``).
    """

    driver: t.Literal["postgresql+psycopg", "sqlite+pysqlite"] = "postgresql+psycopg"
    host: p.IPvAnyAddress | str | None = None
    port: int | None = 5432
    database: str
    echo: bool = False

    @property
    def is_sqlite(self) -> bool:
        return self.driver.startswith("sqlite")
