"""LLMService tests: settings injection, structured parsing, error logging (no network)."""
import logging

import pytest
from pydantic import BaseModel, Field

from caselens.llm.errors import LLMAuthError, LLMResponseInvalid, LLMTimeout
from caselens.llm.service import LLMService, json_schema_format, parse_structured, strip_json_block
from caselens.llm.settings import LLMSettings
from caselens.llm.telemetry import redact_preview
from caselens.llm.types import LLMMessage, LLMProvider, LLMRequest, LLMResponse


class _Verdict(BaseModel):
    label: str
    score: float = Field(..., ge=0.0, le=1.0)


class _ScriptedClient:
    def __init__(self, reply: str | Exception) -> None:
        self.reply = reply
        self.seen: list[tuple[str, LLMRequest, dict]] = []

    async def acompletion(self, provider, model, req, *, timeout_s=None, api_base=None, api_key=None):
        self.seen.append((model, req, {"timeout_s": timeout_s, "api_base": api_base, "api_key": api_key}))
        if isinstance(self.reply, Exception):
            raise self.reply
        return LLMResponse(text=self.reply, provider=provider, model=model, latency_ms=3)


def _req(**kwargs) -> LLMRequest:
    return LLMRequest(messages=[LLMMessage(role="user", content="Hi")], metadata={"stage": "test"}, **kwargs)


def _settings(**kwargs) -> LLMSettings:
    data = {"openai_api_key": "sk-test", "model": "gpt-4o", "default_timeout_s": 15.0}
    data.update(kwargs)
    return LLMSettings(**data)


def test_strip_json_block() -> None:
    assert strip_json_block('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_json_block('  {"a": 1} ') == '{"a": 1}'


def test_parse_structured_valid() -> None:
    out = parse_structured('```json\n{"label": "ok", "score": 0.5}\n```', _Verdict)
    assert out == _Verdict(label="ok", score=0.5)


@pytest.mark.parametrize("raw", ["not json", '{"label": "ok"}', '{"label": "ok", "score": 2}', "[]"])
def test_parse_structured_invalid(raw: str) -> None:
    with pytest.raises(LLMResponseInvalid):
        parse_structured(raw, _Verdict)


def test_json_schema_format() -> None:
    fmt = json_schema_format(_Verdict)
    assert fmt["type"] == "json_schema"
    assert fmt["json_schema"]["name"] == "_Verdict"
    assert "score" in fmt["json_schema"]["schema"]["properties"]


@pytest.mark.asyncio
async def test_chat_passes_injected_settings() -> None:
    client = _ScriptedClient("hello")
    service = LLMService(_settings(api_base="http://localhost:9999"), client=client)
    resp = await service.chat(_req())
    assert resp.text == "hello"
    model, req, kw = client.seen[0]
    assert model == "gpt-4o"
    assert req.temperature == pytest.approx(0.3)
    assert kw == {"timeout_s": 15.0, "api_base": "http://localhost:9999", "api_key": "sk-test"}


@pytest.mark.asyncio
async def test_chat_keeps_explicit_temperature() -> None:
    client = _ScriptedClient("hello")
    await LLMService(_settings(), client=client).chat(_req(temperature=0.0))
    assert client.seen[0][1].temperature == 0.0


@pytest.mark.asyncio
async def test_chat_without_api_key_fails_before_call(monkeypatch) -> None:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("LLM_OPENAI_API_KEY", raising=False)
    client = _ScriptedClient("hello")
    service = LLMService(LLMSettings(openai_api_key=None, _env_file=None), client=client)
    with pytest.raises(LLMAuthError):
        await service.chat(_req())
    assert client.seen == []


@pytest.mark.asyncio
async def test_chat_error_propagates_and_is_logged(caplog) -> None:
    service = LLMService(_settings(), client=_ScriptedClient(LLMTimeout(provider=LLMProvider.OPENAI)))
    with caplog.at_level(logging.WARNING, logger="caselens.llm.telemetry"):
        with pytest.raises(LLMTimeout):
            await service.chat(_req())
    assert any("TIMEOUT" in rec.getMessage() for rec in caplog.records)


@pytest.mark.asyncio
async def test_chat_structured_sets_response_format() -> None:
    client = _ScriptedClient('{"label": "ok", "score": 0.9}')
    out = await LLMService(_settings(), client=client).chat_structured(_req(), _Verdict)
    assert out.label == "ok"
    assert client.seen[0][1].response_format["json_schema"]["name"] == "_Verdict"


@pytest.mark.asyncio
async def test_chat_structured_invalid_reply() -> None:
    client = _ScriptedClient("The label is ok.")
    with pytest.raises(LLMResponseInvalid):
        await LLMService(_settings(log_previews=True), client=client).chat_structured(_req(), _Verdict)


def test_settings_read_openai_api_key_env(monkeypatch) -> None:
    monkeypatch.delenv("LLM_OPENAI_API_KEY", raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-from-env")
    assert LLMSettings(_env_file=None).openai_api_key == "sk-from-env"


def test_redact_preview() -> None:
    text = "key sk-abcdefghijklmnopqrstuvwxyz012345 mail bob@example.com"
    out = redact_preview(text)
    assert "sk-abc" not in out
    assert "[REDACTED]" in out
    assert "[EMAIL]" in out
    assert redact_preview("x" * 500).endswith("...")
