"""
Pydantic schemas for resource endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel


class ResourceIn(BaseModel):
    """
    Create/update payload. Any client-supplied `id` is ignored.
    """

    name: str


class Resource(BaseModel):
    id: int
    name: str
