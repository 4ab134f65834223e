from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List

import pytest
from fastapi.testclient import TestClient

from excel_analyst.app import app
from excel_analyst.errors import CollaboratorFailure
from excel_analyst.orchestrator.orchestrator import Orchestrator, get_orchestrator
from excel_analyst.orchestrator.session_store import SessionStore


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeLLM:
    def __init__(self, reply: str = "Respuesta de prueba", fail: bool = False) -> None:
        self.reply = reply
        self.fail = fail
        self.prompts: List[str] = []

    async def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.fail:
            raise CollaboratorFailure("LLM request failed")
        return self.reply


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> SessionStore:
    return SessionStore(clock=clock)


@pytest.fixture
def llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def orchestrator(store: SessionStore, llm: FakeLLM) -> Orchestrator:
    return Orchestrator(store=store, llm=llm)


@pytest.fixture
def client(orchestrator: Orchestrator):
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sales() -> list:
    return [
        {"region": "A", "ventas": 10},
        {"region": "A", "ventas": 20},
        {"region": "B", "ventas": 5},
    ]
