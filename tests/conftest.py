"""
Shared fixtures: an in-memory stand-in for the resource repository and a
TestClient wired to it. The app lifespan (DB pool) is not started.
"""

from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

import main
from resources import repository
from resources.schemas import Resource


class FakeStore:
    def __init__(self) -> None:
        self.rows: dict[int, str] = {}
        self.next_id = 1
        self.calls: dict[str, list[Any]] = {
            "create": [],
            "read": [],
            "list": [],
            "update": [],
            "delete": [],
        }
        self.errors: dict[str, Exception] = {}

    def add(self, name: str) -> int:
        resource_id = self.next_id
        self.rows[resource_id] = name
        self.next_id += 1
        return resource_id

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.errors:
            raise self.errors[operation]

    async def create_resource(self, *, name: str) -> int:
        self.calls["create"].append(name)
        self._maybe_fail("create")
        return self.add(name)

    async def read_resource(self, resource_id: int) -> Resource:
        self.calls["read"].append(resource_id)
        self._maybe_fail("read")
        if resource_id not in self.rows:
            raise repository.ResourceNotFoundError(resource_id)
        return Resource(id=resource_id, name=self.rows[resource_id])

    async def list_resources(self) -> list[Resource]:
        self.calls["list"].append(None)
        self._maybe_fail("list")
        return [Resource(id=rid, name=name) for rid, name in sorted(self.rows.items())]

    async def update_resource(self, resource_id: int, *, name: str) -> None:
        self.calls["update"].append((resource_id, name))
        self._maybe_fail("update")
        if resource_id in self.rows:
            self.rows[resource_id] = name

    async def delete_resource(self, resource_id: int) -> None:
        self.calls["delete"].append(resource_id)
        self._maybe_fail("delete")
        self.rows.pop(resource_id, None)


@pytest.fixture
def store(monkeypatch: pytest.MonkeyPatch) -> FakeStore:
    fake = FakeStore()
    monkeypatch.setattr(repository, "create_resource", fake.create_resource)
    monkeypatch.setattr(repository, "read_resource", fake.read_resource)
    monkeypatch.setattr(repository, "list_resources", fake.list_resources)
    monkeypatch.setattr(repository, "update_resource", fake.update_resource)
    monkeypatch.setattr(repository, "delete_resource", fake.delete_resource)
    return fake


@pytest.fixture
def app(store: FakeStore):
    return main.create_app()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
