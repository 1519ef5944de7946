"""
Resource persistence.

Two interchangeable backends implement the same async interface:
- `PostgresResourceRepository`: raw SQL through `core.db` (asyncpg pool)
- `InMemoryResourceRepository`: per-process dict, for tests and local runs

Record dicts use column names: id, name, description, due_date,
created_at, updated_at.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Protocol

import asyncpg

from core import db

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceKind:
    collection: str
    label: str


TASKS = ResourceKind(collection="tasks", label="Task")
GOALS = ResourceKind(collection="goals", label="Goal")
RESOURCE_KINDS = (TASKS, GOALS)


# Repository failures are explicit and separable from HTTP concerns.
class ResourceError(RuntimeError):
    pass


class ResourceNotFoundError(ResourceError):
    pass


class InvalidIdentifierError(ResourceError):
    pass


class StoreError(ResourceError):
    pass


class ResourceRepository(Protocol):
    kind: ResourceKind

    async def ensure_schema(self) -> None: ...

    async def list_all(self) -> list[dict[str, Any]]: ...

    async def get(self, resource_id: int) -> dict[str, Any]: ...

    async def create(self, *, name: str, description: str, due_date: str) -> dict[str, Any]: ...

    async def delete(self, resource_id: int) -> None: ...


_COLUMNS = "id, name, description, due_date, created_at, updated_at"

# asyncpg raises InterfaceError for client-side misuse (closed pool) and
# OSError subclasses when the server is unreachable.
_STORE_EXCEPTIONS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


class PostgresResourceRepository:
    def __init__(self, kind: ResourceKind) -> None:
        if not kind.collection.isidentifier():
            raise ValueError(f"Unsafe table name: {kind.collection!r}")
        self.kind = kind
        self._table = kind.collection

    async def _run(self, op: str, call, sql: str, *args: Any):
        try:
            return await call(sql, *args)
        except _STORE_EXCEPTIONS as exc:
            logger.error("store_failed collection=%s op=%s error=%s", self._table, op, exc)
            raise StoreError(str(exc)) from exc

    def _not_found(self, resource_id: int) -> ResourceNotFoundError:
        return ResourceNotFoundError(f"{self.kind.label} {resource_id} not found.")

    async def ensure_schema(self) -> None:
        await self._run(
            "ensure_schema",
            db.execute,
            f"""
            CREATE TABLE IF NOT EXISTS {self._table} (
                id          BIGINT GENERATED ALWAYS AS IDENTITY PRIMARY KEY,
                name        TEXT NOT NULL CHECK (name <> ''),
                description TEXT NOT NULL CHECK (description <> ''),
                due_date    TEXT NOT NULL CHECK (due_date <> ''),
                created_at  TIMESTAMPTZ NOT NULL DEFAULT now(),
                updated_at  TIMESTAMPTZ NOT NULL DEFAULT now()
            )
            """,
        )

    async def list_all(self) -> list[dict[str, Any]]:
        return await self._run(
            "list",
            db.fetch_all,
            f"""
            SELECT {_COLUMNS}
            FROM {self._table}
            ORDER BY id ASC
            """,
        )

    async def get(self, resource_id: int) -> dict[str, Any]:
        row = await self._run(
            "get",
            db.fetch_one,
            f"""
            SELECT {_COLUMNS}
            FROM {self._table}
            WHERE id = $1
            """,
            resource_id,
        )
        if row is None:
            raise self._not_found(resource_id)
        return row

    async def create(self, *, name: str, description: str, due_date: str) -> dict[str, Any]:
        row = await self._run(
            "create",
            db.fetch_one,
            f"""
            INSERT INTO {self._table} (name, description, due_date)
            VALUES ($1, $2, $3)
            RETURNING {_COLUMNS}
            """,
            name,
            description,
            due_date,
        )
        if row is None:
            raise StoreError(f"Failed to create {self.kind.label.lower()}.")
        return row

    async def delete(self, resource_id: int) -> None:
        row = await self._run(
            "delete",
            db.fetch_one,
            f"""
            DELETE FROM {self._table}
            WHERE id = $1
            RETURNING id
            """,
            resource_id,
        )
        if row is None:
            raise self._not_found(resource_id)


class InMemoryResourceRepository:
    """
    Process-local store owned by one app instance.

    Ids come from a counter that only moves forward, so a deleted id is
    never handed out again. The lock makes id allocation and the dict
    mutation one step.
    """

    def __init__(self, kind: ResourceKind) -> None:
        self.kind = kind
        self._records: dict[int, dict[str, Any]] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()

    def _not_found(self, resource_id: int) -> ResourceNotFoundError:
        return ResourceNotFoundError(f"{self.kind.label} {resource_id} not found.")

    async def ensure_schema(self) -> None:
        return None

    async def list_all(self) -> list[dict[str, Any]]:
        async with self._lock:
            return [dict(record) for record in self._records.values()]

    async def get(self, resource_id: int) -> dict[str, Any]:
        async with self._lock:
            record = self._records.get(resource_id)
            if record is None:
                raise self._not_found(resource_id)
            return dict(record)

    async def create(self, *, name: str, description: str, due_date: str) -> dict[str, Any]:
        now = datetime.now(timezone.utc)
        async with self._lock:
            resource_id = self._next_id
            self._next_id += 1
            record = {
                "id": resource_id,
                "name": name,
                "description": description,
                "due_date": due_date,
                "created_at": now,
                "updated_at": now,
            }
            self._records[resource_id] = record
            return dict(record)

    async def delete(self, resource_id: int) -> None:
        async with self._lock:
            if self._records.pop(resource_id, None) is None:
                raise self._not_found(resource_id)


def build_repositories(backend: str) -> dict[str, ResourceRepository]:
    """
    One repository per resource kind, keyed by collection name.
    """
    if backend == "postgres":
        factory = PostgresResourceRepository
    elif backend == "memory":
        factory = InMemoryResourceRepository
    else:
        raise ValueError(f"Unknown store backend: {backend!r}")
    return {kind.collection: factory(kind) for kind in RESOURCE_KINDS}
