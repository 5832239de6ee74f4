# src/ambitask/client/http_client.py

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from ..core.errors import NetworkError
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP {resp.status_code}"


class TaskApiClient:
    """
    Async client for the Task API (implements the TaskApi port).

    Every failure (transport error, timeout, non-2xx, malformed body) is raised as
    NetworkError; callers decide whether it is fatal (it never is for mutations).
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> TaskApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, *, json: Any = None) -> Any:
        try:
            resp = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            raise NetworkError(f"{method} {path} failed: {e.__class__.__name__}: {e}") from e

        if resp.is_error:
            raise NetworkError(
                f"{method} {path} -> {resp.status_code}: {_error_message(resp)}",
                status_code=resp.status_code,
            )

        try:
            return resp.json()
        except ValueError as e:
            raise NetworkError(f"{method} {path} returned invalid JSON") from e

    @staticmethod
    def _to_task(data: Any) -> Task:
        if not isinstance(data, dict):
            raise NetworkError("Unexpected task payload")
        try:
            return Task.from_wire(data)
        except (KeyError, TypeError, ValueError) as e:
            raise NetworkError(f"Malformed task payload: {e}") from e

    async def list_tasks(self) -> list[Task]:
        data = await self._request("GET", "/tasks")
        if not isinstance(data, list):
            raise NetworkError("GET /tasks returned a non-list payload")
        return [self._to_task(item) for item in data]

    async def create_task(self, payload: Mapping[str, Any]) -> Task:
        data = await self._request("POST", "/tasks", json=dict(payload))
        return self._to_task(data)

    async def update_task(self, task_id: str, changes: Mapping[str, Any]) -> Task:
        data = await self._request("PUT", f"/tasks/{task_id}", json=dict(changes))
        return self._to_task(data)

    async def delete_task(self, task_id: str) -> None:
        await self._request("DELETE", f"/tasks/{task_id}")
