# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskboard.cli.bootstrap import create_initial_state
from taskboard.core.state import AppState

from .fakes import FakeTaskService


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's .env.
    """
    return SimpleNamespace(
        app_name="taskboard-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        api_url="http://tasks.test",
        connect_timeout_seconds=1.0,
        read_timeout_seconds=1.0,
        offline=False,
        offline_latency_seconds=0.0,
        offline_failure_rate=0.0,
        notice_history=20,
    )


@pytest.fixture()
def service() -> FakeTaskService:
    return FakeTaskService()


@pytest.fixture()
def state(settings: SimpleNamespace, service: FakeTaskService) -> AppState:
    """AppState wired through the real composition root, with a fake task service."""
    return create_initial_state(settings=settings, service=service)


@pytest.fixture()
def store(state: AppState):
    return state.store


@pytest.fixture()
def engine(state: AppState):
    return state.engine


@pytest.fixture()
def notices(state: AppState):
    return state.notices
