"""
Request-pipeline stages shared by the `/resources/{resource_id}` routes.
"""

from __future__ import annotations

import json
import logging
import re

from fastapi import HTTPException, Request, status
from pydantic import ValidationError

from . import repository
from .schemas import Resource, ResourceIn

JSON_MEDIA_TYPE = "application/json"

MISSING_RESOURCE_MESSAGE = "failed to read resource from the context"

_RESOURCE_ID = re.compile(r"[+-]?[0-9]+")

logger = logging.getLogger(__name__)


def require_json(request: Request) -> None:
    content_type = request.headers.get("content-type", "")
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type != JSON_MEDIA_TYPE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="invalid Content-Type - should be application/json",
        )


async def read_payload(request: Request) -> ResourceIn:
    try:
        body = await request.body()
    except Exception as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc

    try:
        return ResourceIn.model_validate_json(body)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_first_error(exc)) from exc


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    error = errors[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = str(error.get("msg", "invalid payload"))
    return f"{location}: {message}" if location else message


def require_loaded(resource: object) -> Resource:
    if not isinstance(resource, Resource):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=MISSING_RESOURCE_MESSAGE)
    return resource


async def load_resource(resource_id: str) -> Resource:
    """
    Resolve the `{resource_id}` path segment to a stored resource.

    Any lookup failure is reported as 404, not only a missing row.
    """
    # int() alone would also take "1_000", " 1" and non-ASCII digits.
    if _RESOURCE_ID.fullmatch(resource_id) is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"invalid resource id: {json.dumps(resource_id)}",
        )
    parsed_id = int(resource_id)

    try:
        return await repository.read_resource(parsed_id)
    except repository.ResourceNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except Exception as exc:
        logger.warning("resource_load_failed resource_id=%s error=%s", parsed_id, exc)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
