"""Shared fixtures: an in-memory record store standing in for Supabase."""

import copy
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from main import create_app
from services.auth import create_access_token


class FakeStore:
    """In-memory implementation of the Database store contract."""

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {
            "users": [],
            "ai_tools": [],
            "ai_operations": [],
            "pending_tasks": [],
        }
        self.fail_inserts: set = set()
        self.fail_updates: set = set()
        self.raise_on: set = set()
        self.updates: List[tuple] = []

    async def insert(self, table: str, record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if ("insert", table) in self.raise_on:
            raise ConnectionError(f"store unavailable for {table}")
        if table in self.fail_inserts:
            return None
        stored = copy.deepcopy(record)
        self.tables.setdefault(table, []).append(stored)
        return copy.deepcopy(stored)

    async def update(self, table: str, record_id: str, patch: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        self.updates.append((table, record_id, copy.deepcopy(patch)))
        if ("update", table) in self.raise_on:
            raise ConnectionError(f"store unavailable for {table}")
        if table in self.fail_updates:
            return None
        for row in self.tables.get(table, []):
            if row.get("id") == record_id:
                row.update(copy.deepcopy(patch))
                return copy.deepcopy(row)
        return None

    async def select(self, table: str, filters: Optional[Dict[str, Any]] = None, order=None, limit=None):
        rows = [
            copy.deepcopy(row)
            for row in self.tables.get(table, [])
            if all(row.get(k) == v for k, v in (filters or {}).items())
        ]
        return rows[:limit] if limit else rows

    async def get_user_by_id(self, user_id: str):
        rows = await self.select("users", {"id": user_id})
        return rows[0] if rows else None

    async def get_tool_by_slug(self, tool_slug: str):
        rows = await self.select("ai_tools", {"tool_slug": tool_slug}, limit=1)
        return rows[0] if rows else None

    async def get_user_operations(self, user_id: str, limit: int = 20):
        return await self.select("ai_operations", {"user_id": user_id}, limit=limit)

    async def get_user_pending_tasks(self, user_id: str, limit: int = 50):
        return await self.select("pending_tasks", {"user_id": user_id}, limit=limit)

    async def get_pending_task(self, task_id: str):
        rows = await self.select("pending_tasks", {"id": task_id}, limit=1)
        return rows[0] if rows else None


@pytest.fixture
def store() -> FakeStore:
    store = FakeStore()
    store.tables["users"].append({"id": "user-1", "name": "Ada", "email": "ada@example.com", "plan": "free"})
    store.tables["users"].append({"id": "user-2", "name": "Bo", "email": "bo@example.com", "plan": "free"})
    store.tables["ai_tools"].append({"id": 7, "tool_slug": "csv-converter"})
    store.tables["ai_tools"].append({"id": 8, "tool_slug": "converter"})
    return store


@pytest.fixture
def client(store: FakeStore):
    app = create_app(database=store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    token = create_access_token({"sub": "user-1"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers() -> Dict[str, str]:
    token = create_access_token({"sub": "user-2"})
    return {"Authorization": f"Bearer {token}"}
