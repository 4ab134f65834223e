from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest
from openai import OpenAIError

from excel_analyst.config import settings
from excel_analyst.errors import CollaboratorFailure
from excel_analyst.utils import llm_utils


class FakeAsyncOpenAI:
    instances: list = []

    def __init__(self, fail: bool = False, **kwargs) -> None:
        self.kwargs = kwargs
        self.fail = fail
        self.closed = False
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))
        FakeAsyncOpenAI.instances.append(self)

    async def _create(self, **kwargs):
        if self.fail:
            raise OpenAIError("boom")
        message = SimpleNamespace(content="  respuesta real  ")
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.closed = True


@pytest.fixture
def fake_openai(monkeypatch):
    FakeAsyncOpenAI.instances = []
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "test-key")
    monkeypatch.setattr(llm_utils, "AsyncOpenAI", FakeAsyncOpenAI)
    return FakeAsyncOpenAI


def test_mock_response_without_api_key(monkeypatch) -> None:
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "")

    text = asyncio.run(llm_utils.get_llm_response("INFORME ESTRATÉGICO"))

    assert text.startswith("**RESUMEN EJECUTIVO**")


def test_client_is_closed_after_each_call(fake_openai) -> None:
    text = asyncio.run(llm_utils.get_llm_response("hola"))

    assert text == "respuesta real"
    assert len(fake_openai.instances) == 1
    assert fake_openai.instances[0].closed
    assert fake_openai.instances[0].kwargs["timeout"] == settings.LLM_TIMEOUT


def test_api_error_becomes_collaborator_failure(fake_openai, monkeypatch) -> None:
    monkeypatch.setattr(llm_utils, "AsyncOpenAI", lambda **kwargs: FakeAsyncOpenAI(fail=True, **kwargs))

    with pytest.raises(CollaboratorFailure):
        asyncio.run(llm_utils.get_llm_response("hola"))

    assert fake_openai.instances[-1].closed
