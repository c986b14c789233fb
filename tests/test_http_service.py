# tests/test_http_service.py

from __future__ import annotations

import json

import httpx
import pytest

from taskboard.core.errors import RemoteError, RemoteRejected, TransportFailure
from taskboard.remote.http_service import HttpTaskService


def _service(handler) -> HttpTaskService:
    return HttpTaskService("http://tasks.test/", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_list_tasks_parses_records() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=[
                {"id": 1, "title": "A", "completed": False},
                {"id": "b", "title": "B", "description": "details", "completed": True},
            ],
        )

    svc = _service(handler)
    records = await svc.list_tasks()
    await svc.aclose()

    assert seen[0].method == "GET"
    assert seen[0].url.path == "/tasks"
    assert [r.id for r in records] == ["1", "b"]
    assert records[1].description == "details"
    assert records[1].completed is True
    assert not any(r.is_provisional for r in records)


@pytest.mark.asyncio
async def test_create_posts_title_and_description() -> None:
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.url.path == "/tasks"
        bodies.append(json.loads(request.content))
        return httpx.Response(201, json={"id": "9", "title": "Buy milk", "description": "", "completed": False})

    svc = _service(handler)
    created = await svc.create_task("Buy milk", "")
    await svc.aclose()

    assert bodies == [{"title": "Buy milk", "description": ""}]
    assert created.id == "9"
    assert created.completed is False


@pytest.mark.asyncio
async def test_update_and_delete_hit_task_path() -> None:
    seen: list[tuple[str, str, bytes]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path, request.content))
        return httpx.Response(204)

    svc = _service(handler)
    await svc.update_task("42", completed=True)
    await svc.delete_task("42")
    await svc.aclose()

    assert seen[0][:2] == ("PUT", "/tasks/42")
    assert json.loads(seen[0][2]) == {"completed": True}
    assert seen[1][:2] == ("DELETE", "/tasks/42")


@pytest.mark.asyncio
async def test_non_success_status_is_rejection_with_detail() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": {"message": "db down"}})

    svc = _service(handler)
    with pytest.raises(RemoteRejected) as info:
        await svc.update_task("1", completed=False)
    await svc.aclose()

    assert info.value.status_code == 500
    assert info.value.detail == "db down"
    assert str(info.value) == "HTTP 500: db down"


@pytest.mark.asyncio
async def test_plain_text_error_body_is_used_as_detail() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text="no such task")

    svc = _service(handler)
    with pytest.raises(RemoteRejected) as info:
        await svc.delete_task("1")
    await svc.aclose()

    assert info.value.status_code == 404
    assert info.value.detail == "no such task"


@pytest.mark.asyncio
async def test_connection_problems_are_transport_failures() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    def slow(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    svc = _service(refuse)
    with pytest.raises(TransportFailure):
        await svc.list_tasks()
    await svc.aclose()

    svc = _service(slow)
    with pytest.raises(TransportFailure, match="timed out"):
        await svc.create_task("A", "")
    await svc.aclose()


@pytest.mark.asyncio
async def test_malformed_payloads_are_remote_errors() -> None:
    def not_json(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>oops</html>")

    def not_a_list(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"tasks": []})

    def missing_title(request: httpx.Request) -> httpx.Response:
        return httpx.Response(201, json={"id": "1"})

    for handler, call in (
        (not_json, lambda s: s.list_tasks()),
        (not_a_list, lambda s: s.list_tasks()),
        (missing_title, lambda s: s.create_task("A", "")),
    ):
        svc = _service(handler)
        with pytest.raises(RemoteError) as info:
            await call(svc)
        await svc.aclose()
        assert not isinstance(info.value, (RemoteRejected, TransportFailure))


def test_base_url_is_required() -> None:
    with pytest.raises(ValueError):
        HttpTaskService("  ")
