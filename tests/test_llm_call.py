from __future__ import annotations

import json
from typing import Any

import pytest
import requests

from lecturesnap.llm import llm_call as llm_module
from lecturesnap.llm.llm_call import build_request, call_llm
from lecturesnap.models.exceptions import LLMError
from lecturesnap.models.llm_config import Backend, LLMConfig


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, text: str | None = None) -> None:
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else ("" if body is None else json.dumps(body))

    def json(self) -> Any:
        if self._body is None:
            raise ValueError("no json")
        return self._body

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code}", response=self)  # type: ignore[arg-type]


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch) -> dict[str, Any]:
    calls: dict[str, Any] = {}

    def install(response: FakeResponse | Exception) -> None:
        def fake_post(url: str, json: Any = None, headers: Any = None, timeout: Any = None) -> FakeResponse:
            calls.update(url=url, json=json, headers=headers, timeout=timeout)
            if isinstance(response, Exception):
                raise response
            return response

        monkeypatch.setattr(llm_module.requests, "post", fake_post)

    calls["install"] = install
    return calls


def test_build_request_remote(remote_config: LLMConfig) -> None:
    url, headers, payload = build_request("hello", remote_config)
    assert url == "https://api.openai.com/v1/chat/completions"
    assert headers == {"Content-Type": "application/json", "Authorization": "Bearer sk-test"}
    assert payload == {
        "model": "gpt-test",
        "messages": [{"role": "user", "content": "hello"}],
        "temperature": 0.7,
        "max_tokens": 256,
    }


def test_build_request_local(local_config: LLMConfig) -> None:
    url, headers, payload = build_request("hello", local_config)
    assert url == "http://localhost:11434/v1/chat/completions"
    assert "Authorization" not in headers
    assert "max_tokens" not in payload
    assert payload["temperature"] == 0.7


def test_build_request_missing_credential() -> None:
    with pytest.raises(LLMError):
        build_request("hello", LLMConfig(backend=Backend.REMOTE, credential=""))
    with pytest.raises(LLMError):
        build_request("hello", LLMConfig(backend=Backend.LOCAL, server_url=""))


def test_call_llm_remote_returns_content(captured: dict[str, Any], remote_config: LLMConfig) -> None:
    captured["install"](FakeResponse(body={"choices": [{"message": {"content": "  answer  "}}]}))
    assert call_llm("hello", remote_config) == "answer"
    assert captured["timeout"] == remote_config.timeout


def test_call_llm_remote_bad_shape(captured: dict[str, Any], remote_config: LLMConfig) -> None:
    captured["install"](FakeResponse(body={"unexpected": True}))
    with pytest.raises(LLMError, match="Unexpected response format"):
        call_llm("hello", remote_config)


def test_call_llm_local_returns_raw_body(captured: dict[str, Any], local_config: LLMConfig) -> None:
    body = {"choices": [{"message": {"content": "Subject: A\nCourse Folder: B"}}]}
    captured["install"](FakeResponse(body=body))
    raw = call_llm("hello", local_config)
    assert '"choices"' in raw


@pytest.mark.parametrize(
    "failure, reason",
    [
        (requests.exceptions.Timeout(), "Request timed out"),
        (requests.exceptions.ConnectionError(), "Connection failed"),
        (requests.exceptions.MissingSchema(), "Invalid endpoint"),
    ],
)
def test_call_llm_transport_errors(
    captured: dict[str, Any], remote_config: LLMConfig, failure: Exception, reason: str
) -> None:
    captured["install"](failure)
    with pytest.raises(LLMError) as info:
        call_llm("hello", remote_config)
    assert info.value.reason == reason


def test_call_llm_http_status_error(captured: dict[str, Any], remote_config: LLMConfig) -> None:
    captured["install"](FakeResponse(status_code=401, body={"error": "bad key"}))
    with pytest.raises(LLMError) as info:
        call_llm("hello", remote_config)
    assert info.value.reason == "HTTP 401"
    assert info.value.ctx["status"] == 401
