"""
Scope Storage

Physical side of tenant isolation: one database per scope. The database
URL of a scope comes from the configured template, e.g.
"sqlite+aiosqlite:///./tenants/{scope}.db" (one file per scope) or
"postgresql+asyncpg://user:pw@host/{scope}" (one database per scope,
created and dropped through the platform connection).
"""

import logging
import os
from pathlib import Path
from typing import Optional

from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import SQLModel

from src.domain.entities import Category, Customer, Order, Product, Tenant, User
from src.domain.errors import ScopeUnavailable

logger = logging.getLogger(__name__)

PLATFORM_TABLES = [Tenant.__table__]
TENANT_TABLES = [
    Category.__table__,
    Product.__table__,
    Customer.__table__,
    Order.__table__,
    User.__table__,
]

SQLITE_SIDE_FILES = ("-wal", "-shm", "-journal")


def create_platform_schema(connection):
    SQLModel.metadata.create_all(connection, tables=PLATFORM_TABLES, checkfirst=True)


def create_tenant_schema(connection):
    SQLModel.metadata.create_all(connection, tables=TENANT_TABLES, checkfirst=True)


class ScopeStorage:
    """Creates, attaches and drops the database behind a scope token"""

    def __init__(
        self,
        url_template: str,
        admin_url: Optional[str] = None,
        operation_timeout: float = 10.0,
    ):
        if "{scope}" not in url_template:
            raise ValueError("url_template must contain a {scope} placeholder")
        self.url_template = url_template
        self.admin_url = admin_url
        self.operation_timeout = operation_timeout

    def url_for(self, scope_id: str) -> URL:
        return make_url(self.url_template.format(scope=scope_id))

    def _sqlite_path(self, url: URL) -> Optional[Path]:
        if url.get_backend_name() != "sqlite":
            return None
        if not url.database or url.database == ":memory:":
            raise ValueError("SQLite scopes need a file-backed database path")
        return Path(url.database)

    def _connect_args(self, url: URL) -> dict:
        if url.get_backend_name() == "sqlite":
            return {"timeout": self.operation_timeout}
        if url.get_driver_name() == "asyncpg":
            return {"command_timeout": self.operation_timeout}
        return {}

    def create_engine(self, scope_id: str) -> AsyncEngine:
        url = self.url_for(scope_id)
        return create_async_engine(
            url, echo=False, future=True, connect_args=self._connect_args(url)
        )

    async def exists(self, scope_id: str) -> bool:
        url = self.url_for(scope_id)
        path = self._sqlite_path(url)
        if path is not None:
            return path.exists()

        admin = self._admin_engine()
        try:
            async with admin.connect() as conn:
                if url.get_backend_name() == "postgresql":
                    stmt = text("SELECT 1 FROM pg_database WHERE datname = :name")
                else:
                    stmt = text(
                        "SELECT 1 FROM information_schema.schemata WHERE schema_name = :name"
                    )
                result = await conn.execute(stmt, {"name": url.database})
                return result.first() is not None
        finally:
            await admin.dispose()

    async def attach(self, scope_id: str) -> AsyncEngine:
        """
        Open an engine on an existing scope and make sure its tables exist.

        Raises ScopeUnavailable when the scope storage is missing.
        """
        path = self._sqlite_path(self.url_for(scope_id))
        if path is not None and not path.exists():
            raise ScopeUnavailable(scope_id, f"database file {path} does not exist")

        engine = self.create_engine(scope_id)
        try:
            async with engine.begin() as conn:
                await conn.run_sync(create_tenant_schema)
        except Exception:
            await engine.dispose()
            raise
        return engine

    async def create(self, scope_id: str) -> None:
        """
        Create the scope database with every tenant table and index.

        Either the scope is fully created or nothing is left behind.
        Raises FileExistsError when the storage already exists.
        """
        if await self.exists(scope_id):
            raise FileExistsError(f"storage for scope {scope_id} already exists")

        url = self.url_for(scope_id)
        path = self._sqlite_path(url)
        if path is not None:
            path.parent.mkdir(parents=True, exist_ok=True)
        else:
            await self._execute_admin("CREATE DATABASE {}", url.database)

        engine = self.create_engine(scope_id)
        try:
            async with engine.begin() as conn:
                await conn.run_sync(create_tenant_schema)
        except Exception:
            await engine.dispose()
            await self.drop(scope_id)
            raise
        await engine.dispose()
        logger.info(f"Created storage for scope {scope_id}")

    async def drop(self, scope_id: str) -> None:
        """Remove the scope database; missing storage is not an error"""
        url = self.url_for(scope_id)
        path = self._sqlite_path(url)
        if path is not None:
            for candidate in [str(path)] + [f"{path}{suffix}" for suffix in SQLITE_SIDE_FILES]:
                if os.path.exists(candidate):
                    os.remove(candidate)
        else:
            await self._execute_admin("DROP DATABASE IF EXISTS {}", url.database)
        logger.info(f"Dropped storage for scope {scope_id}")

    def _admin_engine(self) -> AsyncEngine:
        if not self.admin_url:
            raise ScopeUnavailable("*", "no platform connection configured for scope admin")
        return create_async_engine(self.admin_url, isolation_level="AUTOCOMMIT")

    async def _execute_admin(self, template: str, database: str) -> None:
        admin = self._admin_engine()
        try:
            quoted = admin.dialect.identifier_preparer.quote_identifier(database)
            async with admin.connect() as conn:
                await conn.execute(text(template.format(quoted)))
        finally:
            await admin.dispose()
