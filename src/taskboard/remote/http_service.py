# src/taskboard/remote/http_service.py

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from ..core.errors import RemoteError, RemoteRejected, TransportFailure
from ..tasks.task_models import TaskRecord

logger = logging.getLogger(__name__)

_DETAIL_MAX = 300


def _response_detail(response: httpx.Response) -> str:
    """Best-effort human-readable reason from an error response body."""
    detail = ""
    try:
        payload = response.json()
        if isinstance(payload, dict):
            err = payload.get("error")
            if isinstance(err, dict):
                detail = str(err.get("message") or "")
            elif isinstance(err, str):
                detail = err
            if not detail:
                detail = str(payload.get("message") or payload.get("detail") or "")
    except Exception:
        detail = response.text.strip()
    if not detail:
        detail = response.reason_phrase or ""
    return detail[:_DETAIL_MAX]


def _make_timeout(connect_s: float, read_s: float) -> httpx.Timeout:
    return httpx.Timeout(connect=connect_s, read=read_s, write=10.0, pool=connect_s)


class HttpTaskService:
    """
    REST client for the task collection service.

    GET /tasks, POST /tasks, PUT /tasks/{id}, DELETE /tasks/{id}.
    Non-2xx answers raise RemoteRejected, transport problems raise TransportFailure.
    """

    def __init__(
        self,
        base_url: str,
        *,
        connect_timeout: float = 5.0,
        read_timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        base_url = (base_url or "").strip().rstrip("/")
        if not base_url:
            raise ValueError("task service base URL is not set (TASKBOARD_API_URL)")
        self._base_url = base_url
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=_make_timeout(connect_timeout, read_timeout),
            headers={"Accept": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings) -> HttpTaskService:
        return cls(
            str(getattr(settings, "api_url", "")),
            connect_timeout=float(getattr(settings, "connect_timeout_seconds", 5.0)),
            read_timeout=float(getattr(settings, "read_timeout_seconds", 15.0)),
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        await self._client.aclose()

    # ---- low-level helpers ----

    async def _request(self, method: str, path: str, *, json: Any = None) -> httpx.Response:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.TimeoutException as e:
            raise TransportFailure(f"{method} {path} timed out") from e
        except httpx.HTTPError as e:
            raise TransportFailure(f"{method} {path} failed: {e.__class__.__name__}") from e

        if not response.is_success:
            detail = _response_detail(response)
            logger.debug("%s %s -> %s %s", method, path, response.status_code, detail)
            raise RemoteRejected(response.status_code, detail)
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise RemoteError("Task service returned a response that is not JSON.") from e

    @staticmethod
    def _task_path(task_id: str) -> str:
        return f"/tasks/{quote(str(task_id), safe='')}"

    # ---- TaskService ----

    async def list_tasks(self) -> list[TaskRecord]:
        payload = self._json(await self._request("GET", "/tasks"))
        if not isinstance(payload, list):
            raise RemoteError("Task service returned a malformed task list.")
        try:
            return [TaskRecord.from_payload(item) for item in payload]
        except ValueError as e:
            raise RemoteError(f"Task service returned a malformed task: {e}") from e

    async def create_task(self, title: str, description: str) -> TaskRecord:
        response = await self._request(
            "POST", "/tasks", json={"title": title, "description": description}
        )
        try:
            return TaskRecord.from_payload(self._json(response))
        except ValueError as e:
            raise RemoteError(f"Task service returned a malformed task: {e}") from e

    async def update_task(self, task_id: str, *, completed: bool) -> None:
        # Only the status matters; the body is not read back.
        await self._request("PUT", self._task_path(task_id), json={"completed": bool(completed)})

    async def delete_task(self, task_id: str) -> None:
        await self._request("DELETE", self._task_path(task_id))
