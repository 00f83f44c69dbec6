"""
Resource CRUD endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from . import dependencies, repository
from .schemas import Resource

router = APIRouter()

logger = logging.getLogger(__name__)


def _store_failed(operation: str, exc: Exception) -> HTTPException:
    logger.exception("resource_%s_failed", operation)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.post("/resources", status_code=status.HTTP_201_CREATED)
async def create_resource(request: Request) -> Response:
    dependencies.require_json(request)
    payload = await dependencies.read_payload(request)
    try:
        resource_id = await repository.create_resource(name=payload.name)
    except Exception as exc:
        raise _store_failed("create", exc) from exc
    return Response(
        status_code=status.HTTP_201_CREATED,
        headers={"Location": f"/resources/{resource_id}"},
    )


@router.get("/resources", response_model=list[Resource])
async def list_resources() -> list[Resource]:
    try:
        return await repository.list_resources()
    except Exception as exc:
        raise _store_failed("list", exc) from exc


@router.get("/resources/{resource_id}", response_model=Resource)
async def get_resource(
    resource: Resource = Depends(dependencies.load_resource),
) -> Resource:
    return dependencies.require_loaded(resource)


@router.put("/resources/{resource_id}")
async def update_resource(
    request: Request,
    resource: Resource = Depends(dependencies.load_resource),
) -> Response:
    dependencies.require_json(request)
    current = dependencies.require_loaded(resource)
    payload = await dependencies.read_payload(request)
    try:
        await repository.update_resource(current.id, name=payload.name)
    except Exception as exc:
        raise _store_failed("update", exc) from exc
    return Response(status_code=status.HTTP_200_OK)


@router.delete("/resources/{resource_id}")
async def delete_resource(
    resource: Resource = Depends(dependencies.load_resource),
) -> Response:
    current = dependencies.require_loaded(resource)
    try:
        await repository.delete_resource(current.id)
    except Exception as exc:
        raise _store_failed("delete", exc) from exc
    return Response(status_code=status.HTTP_200_OK)
