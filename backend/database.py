import httpx
from fastapi import Request
from typing import Any, Dict, List, Optional


class Database:
    """Thin Supabase PostgREST client.

    Exposes the generic ``insert`` / ``update`` / ``select`` store contract used by
    the operation logger plus a few named queries for the routes.
    """

    def __init__(self, supabase_url: str, supabase_key: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = f"{supabase_url.rstrip('/')}/rest/v1"
        self.headers = {
            "apikey": supabase_key,
            "Authorization": f"Bearer {supabase_key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation"
        }
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport, timeout=30.0)

    @staticmethod
    def _first(response: httpx.Response) -> Optional[Dict[str, Any]]:
        try:
            if response.text:
                data = response.json()
                return data[0] if data and len(data) > 0 else None
            else:
                return None
        except ValueError as e:
            print(f"JSON parse error: {e}")
            return None

    async def insert(self, table: str, record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Insert one row and return the stored representation"""
        async with self._client() as client:
            response = await client.post(
                f"{self.base_url}/{table}?select=*",
                headers=self.headers,
                json=record
            )
        if response.status_code != 201:
            print(f"Insert into {table} failed: {response.status_code} - {response.text}")
            return None
        return self._first(response)

    async def update(self, table: str, record_id: str, patch: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Patch one row by id"""
        async with self._client() as client:
            response = await client.patch(
                f"{self.base_url}/{table}?id=eq.{record_id}&select=*",
                headers=self.headers,
                json=patch
            )
        if response.status_code != 200:
            print(f"Update of {table}/{record_id} failed: {response.status_code} - {response.text}")
            return None
        return self._first(response)

    async def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Select rows matching equality filters"""
        params = {"select": "*"}
        for column, value in (filters or {}).items():
            params[column] = f"eq.{value}"
        if order:
            params["order"] = order
        if limit:
            params["limit"] = str(limit)

        async with self._client() as client:
            response = await client.get(
                f"{self.base_url}/{table}",
                headers=self.headers,
                params=params
            )
        if response.status_code != 200:
            print(f"Select from {table} failed: {response.status_code} - {response.text}")
            return []
        return response.json() or []

    async def get_user_by_id(self, user_id: str):
        """Get user by ID"""
        rows = await self.select("users", {"id": user_id})
        return rows[0] if rows else None

    async def get_tool_by_slug(self, tool_slug: str):
        """Look up a tool in the ai_tools registry"""
        rows = await self.select("ai_tools", {"tool_slug": tool_slug}, limit=1)
        return rows[0] if rows else None

    async def get_user_operations(self, user_id: str, limit: int = 20):
        """Get user's operation history"""
        return await self.select("ai_operations", {"user_id": user_id}, order="timestamp.desc", limit=limit)

    async def get_user_pending_tasks(self, user_id: str, limit: int = 50):
        """Get user's pending tasks, newest first"""
        return await self.select("pending_tasks", {"user_id": user_id}, order="created_at.desc", limit=limit)

    async def get_pending_task(self, task_id: str):
        rows = await self.select("pending_tasks", {"id": task_id}, limit=1)
        return rows[0] if rows else None


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the app-scoped Database built in create_app."""
    return request.app.state.db
