"""
Resource persistence (raw SQL).

Every function runs a single statement on its own connection (see
`core.db.connection`). Driver and connection errors propagate unchanged.
"""

from __future__ import annotations

import logging

from core import db

from .schemas import Resource

logger = logging.getLogger(__name__)


class ResourceNotFoundError(LookupError):
    def __init__(self, resource_id: int) -> None:
        super().__init__(f"resource {resource_id} not found")
        self.resource_id = resource_id


def _rows_affected(status: str) -> int:
    # asyncpg returns the command tag, e.g. "UPDATE 1" / "DELETE 0".
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (AttributeError, ValueError):
        return -1


async def create_resource(*, name: str) -> int:
    resource_id = await db.fetch_value(
        """
        INSERT INTO resources (name)
        VALUES ($1)
        RETURNING id
        """,
        name,
    )
    if resource_id is None:
        raise RuntimeError("Failed to create resource.")
    return int(resource_id)


async def read_resource(resource_id: int) -> Resource:
    row = await db.fetch_one(
        """
        SELECT id, name
        FROM resources
        WHERE id = $1
        """,
        resource_id,
    )
    if row is None:
        raise ResourceNotFoundError(resource_id)
    return Resource(id=int(row["id"]), name=row["name"])


async def list_resources() -> list[Resource]:
    rows = await db.fetch_all(
        """
        SELECT id, name
        FROM resources
        ORDER BY id
        """
    )
    return [Resource(id=int(row["id"]), name=row["name"]) for row in rows]


async def update_resource(resource_id: int, *, name: str) -> None:
    status = await db.execute(
        """
        UPDATE resources
        SET name = $1
        WHERE id = $2
        """,
        name,
        resource_id,
    )
    # A missing row is not an error here; callers load the resource first.
    if _rows_affected(status) == 0:
        logger.warning("resource_update_no_rows resource_id=%s", resource_id)


async def delete_resource(resource_id: int) -> None:
    status = await db.execute(
        """
        DELETE FROM resources
        WHERE id = $1
        """,
        resource_id,
    )
    if _rows_affected(status) == 0:
        logger.warning("resource_delete_no_rows resource_id=%s", resource_id)
