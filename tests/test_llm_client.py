from types import SimpleNamespace

import pytest
import requests

from llm_client import (
    GeminiClient,
    HuggingFaceClient,
    LLMError,
    build_client,
    is_quota_error,
)
from results import INTERVIEW_FEEDBACK_SCHEMA


class FakeResponse:
    def __init__(self, status_code, payload=None, body_error=False):
        self.status_code = status_code
        self._payload = payload
        self._body_error = body_error

    def json(self):
        if self._body_error:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def post(self, url, **kwargs):
        self.requests.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


def _ok(text):
    return FakeResponse(200, {"candidates": [{"content": {"parts": [{"text": text}]}}]})


def test_gemini_free_text_request_shape():
    session = FakeSession(_ok("hello there"))
    client = GeminiClient("k-123", base_url="https://example.test/v1beta", timeout=5, session=session)
    assert client.invoke("gemini-2.0-flash", "Hi", system="Be brief") == "hello there"

    url, kwargs = session.requests[0]
    assert url == "https://example.test/v1beta/models/gemini-2.0-flash:generateContent"
    assert kwargs["params"] == {"key": "k-123"}
    assert kwargs["timeout"] == 5
    body = kwargs["json"]
    assert body["contents"][0]["parts"][0]["text"] == "Hi"
    assert body["systemInstruction"]["parts"][0]["text"] == "Be brief"
    assert "generationConfig" not in body


def test_gemini_schema_request_shape():
    session = FakeSession(_ok('{"feedback": "x"}'))
    client = GeminiClient("k", session=session)
    client.invoke("m", "Evaluate", schema=INTERVIEW_FEEDBACK_SCHEMA)
    config = session.requests[0][1]["json"]["generationConfig"]
    assert config["responseMimeType"] == "application/json"
    assert config["responseSchema"] == INTERVIEW_FEEDBACK_SCHEMA


def test_gemini_joins_parts_and_handles_no_candidates():
    resp = FakeResponse(200, {"candidates": [{"content": {"parts": [{"text": "a"}, {"text": "b"}]}}]})
    assert GeminiClient("k", session=FakeSession(resp)).invoke("m", "p") == "ab"
    assert GeminiClient("k", session=FakeSession(FakeResponse(200, {}))).invoke("m", "p") == ""


def test_gemini_http_429_is_quota():
    resp = FakeResponse(429, {"error": {"code": 429, "message": "Quota exceeded", "status": "RESOURCE_EXHAUSTED"}})
    client = GeminiClient("k", session=FakeSession(resp))
    with pytest.raises(LLMError) as info:
        client.invoke("m", "p")
    assert info.value.status_code == 429
    assert is_quota_error(info.value)


def test_gemini_transport_error_is_wrapped():
    client = GeminiClient("k", session=FakeSession(error=requests.ConnectionError("down")))
    with pytest.raises(LLMError) as info:
        client.invoke("m", "p")
    assert isinstance(info.value.__cause__, requests.ConnectionError)
    assert not is_quota_error(info.value)


def test_gemini_non_json_body():
    client = GeminiClient("k", session=FakeSession(FakeResponse(502, body_error=True)))
    with pytest.raises(LLMError) as info:
        client.invoke("m", "p")
    assert info.value.status_code == 502


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _hf(completions):
    fake = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return HuggingFaceClient("hf-key", client=fake, max_tokens=100, temperature=0.1)


def test_hf_puts_schema_in_prompt():
    completions = FakeCompletions(content='{"rating": 3}')
    assert _hf(completions).invoke("mistral", "Evaluate", schema=INTERVIEW_FEEDBACK_SCHEMA, system="sys") == '{"rating": 3}'
    messages = completions.kwargs["messages"]
    assert messages[0] == {"role": "system", "content": "sys"}
    assert "betterAnswer" in messages[1]["content"]
    assert completions.kwargs["model"] == "mistral"


def test_hf_list_content_is_joined():
    completions = FakeCompletions(content=[{"text": "a"}, {"text": "b"}])
    assert _hf(completions).invoke("m", "p") == "a b"


def test_hf_error_keeps_status():
    error = RuntimeError("429 Too Many Requests")
    error.response = SimpleNamespace(status_code=429)
    with pytest.raises(LLMError) as info:
        _hf(FakeCompletions(error=error)).invoke("m", "p")
    assert info.value.status_code == 429
    assert is_quota_error(info.value)


def test_build_client():
    assert build_client("gemini", "") is None
    assert isinstance(build_client("gemini", "k"), GeminiClient)


@pytest.mark.parametrize("payload", [
    ["unexpected"],
    {"candidates": ["oops"]},
    {"candidates": [{"content": "not an object"}]},
    {"candidates": [{"content": {"parts": "nope"}}]},
])
def test_gemini_malformed_body_raises_llm_error(payload):
    client = GeminiClient("k", session=FakeSession(FakeResponse(200, payload)))
    with pytest.raises(LLMError) as info:
        client.invoke("m", "p")
    assert info.value.status_code == 200
    assert not is_quota_error(info.value)


def test_gemini_null_text_and_blocked_candidate_read_as_empty():
    null_text = FakeResponse(200, {"candidates": [{"content": {"parts": [{"text": None}, {"text": "ok"}]}}]})
    assert GeminiClient("k", session=FakeSession(null_text)).invoke("m", "p") == "ok"
    blocked = FakeResponse(200, {"candidates": [{"finishReason": "SAFETY"}]})
    assert GeminiClient("k", session=FakeSession(blocked)).invoke("m", "p") == ""


def test_hf_no_choices_reads_as_empty():
    class NoChoices:
        def create(self, **kwargs):
            return SimpleNamespace(choices=[])

    assert _hf(NoChoices()).invoke("m", "p") == ""


def test_hf_null_block_text_is_skipped():
    completions = FakeCompletions(content=[{"text": None}, {"text": "b"}])
    assert _hf(completions).invoke("m", "p") == "b"
