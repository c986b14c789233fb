# tests/test_commands.py

from __future__ import annotations

import pytest

from taskboard.cli.commands import EMPTY_LIST_TEXT, CommandRegistry, registry, render_board, resolve_task_ref

from .fakes import task


@pytest.mark.asyncio
async def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    async def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")

    assert await reg.handle(state, "/a x") == "h2"
    assert await reg.handle(state, "/b y", emit=lambda _: None) == "h3"
    assert called["h2"] == 1
    assert called["h3"] == 1


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")


def test_resolve_task_ref_by_position_and_id(state) -> None:
    state.store.load([task("a"), task("7"), task("c")])
    assert resolve_task_ref(state, "1") == "a"
    assert resolve_task_ref(state, "3") == "c"
    assert resolve_task_ref(state, "4") is None
    assert resolve_task_ref(state, "id:7") == "7"
    assert resolve_task_ref(state, "c") == "c"
    assert resolve_task_ref(state, "zzz") is None


def test_render_board_empty_and_loading(state) -> None:
    assert EMPTY_LIST_TEXT in render_board(state)
    state.store.loading = True
    assert render_board(state) == "Loading tasks..."


@pytest.mark.asyncio
async def test_add_toggle_delete_through_commands(state, service) -> None:
    out = await registry.handle(state, "/add Buy milk | 2 liters")
    assert "Buy milk" in out and "(saving...)" in out
    await state.engine.drain()
    assert service.calls == [("create", ("Buy milk", "2 liters"))]
    assert state.draft.is_empty

    await registry.handle(state, "/toggle 1")
    await state.engine.drain()
    assert state.store.records[0].completed is True

    out = await registry.handle(state, "/delete 1")
    assert "Are you absolutely sure?" in out
    assert state.confirmation.target == state.store.records[0].id

    assert await registry.handle(state, "/no") == "Delete cancelled."
    assert len(state.store) == 1

    await registry.handle(state, "/delete 1")
    await registry.handle(state, "/yes")
    await state.engine.drain()
    assert state.store.records == ()
    assert state.confirmation.target is None


@pytest.mark.asyncio
async def test_add_with_blank_title_keeps_store(state, service) -> None:
    out = await registry.handle(state, "/add   ")
    assert out.startswith("Usage")
    assert state.store.records == ()
    assert service.calls == []


@pytest.mark.asyncio
async def test_reload_command(state, service) -> None:
    service.records = [task("1", "From server")]
    out = await registry.handle(state, "/reload")
    assert "From server" in out
    assert "Tasks: 1" in (await registry.handle(state, "/status"))


@pytest.mark.asyncio
async def test_add_keeps_title_text_and_only_drops_spaces_around_separator(state, service) -> None:
    await registry.handle(state, "/add Call  mom ")
    await registry.handle(state, "/add Fix bug|  in parser ")
    await state.engine.drain()

    # the registry splits on whitespace, so the argument text is "Call mom"
    assert service.calls == [
        ("create", ("Call mom", "")),
        ("create", ("Fix bug", "in parser")),
    ]
