import json
import logging

import requests
from huggingface_hub import InferenceClient

import settings

logger = logging.getLogger("career_assistant.llm")

_QUOTA_MARKERS = ("429", "resource_exhausted", "quota")


class LLMError(Exception):
    """Any failure talking to the model provider: transport, HTTP status or payload."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class QuotaExceededError(Exception):
    code = "QUOTA_EXCEEDED"

    def __init__(self, message="QUOTA_EXCEEDED"):
        super().__init__(message)


def is_quota_error(exc) -> bool:
    if getattr(exc, "status_code", None) == 429:
        return True
    low = str(exc).lower()
    return any(marker in low for marker in _QUOTA_MARKERS)


def _status_of(exc):
    response = getattr(exc, "response", None)
    return getattr(response, "status_code", None)


class LLMClient:
    """One outbound "generate content" call per ``invoke``; no retries."""

    provider = ""

    def invoke(self, model_id, prompt, schema=None, system=None) -> str:
        raise NotImplementedError


class GeminiClient(LLMClient):
    provider = "gemini"

    def __init__(self, api_key, base_url=None, timeout=None, session=None):
        self.api_key = api_key
        self.base_url = (base_url or settings.GEMINI_API_BASE).rstrip("/")
        self.timeout = timeout or settings.LLM_TIMEOUT_SECONDS
        self.session = session or requests.Session()

    def _payload(self, prompt, schema=None, system=None):
        payload = {"contents": [{"role": "user", "parts": [{"text": str(prompt or "")}]}]}
        if system:
            payload["systemInstruction"] = {"parts": [{"text": system}]}
        if schema:
            payload["generationConfig"] = {
                "responseMimeType": "application/json",
                "responseSchema": schema,
            }
        return payload

    def invoke(self, model_id, prompt, schema=None, system=None) -> str:
        url = f"{self.base_url}/models/{model_id}:generateContent"
        try:
            response = self.session.post(
                url,
                params={"key": self.api_key},
                json=self._payload(prompt, schema=schema, system=system),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise LLMError(f"Gemini request failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise LLMError(f"Gemini returned non-JSON body (HTTP {response.status_code})", response.status_code) from exc

        if response.status_code >= 400:
            err = data.get("error", {}) if isinstance(data, dict) else {}
            message = err.get("message") or f"HTTP {response.status_code}"
            status = err.get("status") or ""
            raise LLMError(f"Gemini error {response.status_code} {status}: {message}".strip(), response.status_code)

        if not isinstance(data, dict):
            raise LLMError(f"Gemini returned unexpected body type {type(data).__name__}", response.status_code)
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        first = candidates[0]
        if not isinstance(first, dict):
            raise LLMError("Gemini returned a malformed candidate", response.status_code)
        # A blocked candidate carries no content.
        content = first.get("content")
        if content is None:
            return ""
        if not isinstance(content, dict):
            raise LLMError("Gemini returned malformed candidate content", response.status_code)
        parts = content.get("parts") or []
        if not isinstance(parts, list):
            raise LLMError("Gemini returned malformed content parts", response.status_code)
        return "".join(
            str(part.get("text") or "") for part in parts if isinstance(part, dict)
        ).strip()


class HuggingFaceClient(LLMClient):
    """Chat-completions through the HF inference router.

    There is no server-side schema here, so the schema is spelled out in the
    prompt and the caller relies on the normalizer.
    """

    provider = "hf"

    def __init__(self, api_key, timeout=None, client=None, max_tokens=None, temperature=None):
        self.timeout = timeout or settings.LLM_TIMEOUT_SECONDS
        self.max_tokens = max_tokens or settings.LLM_MAX_TOKENS
        self.temperature = settings.LLM_TEMPERATURE if temperature is None else temperature
        self.client = client or InferenceClient(provider="auto", api_key=api_key, timeout=self.timeout)

    def invoke(self, model_id, prompt, schema=None, system=None) -> str:
        user_text = str(prompt or "").strip()
        if schema:
            user_text = (
                f"{user_text}\n\n"
                "Return raw JSON only (no markdown) matching this schema:\n"
                f"{json.dumps(schema)}"
            )
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": user_text})

        try:
            completion = self.client.chat.completions.create(
                model=model_id,
                messages=messages,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except Exception as exc:
            raise LLMError(f"HuggingFace request failed: {exc}", _status_of(exc)) from exc

        choices = getattr(completion, "choices", None) or []
        if not choices:
            return ""
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if isinstance(content, list):
            content = " ".join(
                str(block.get("text") or "") if isinstance(block, dict) else str(block)
                for block in content
            )
        return str(content or "").strip()


def build_client(provider, api_key):
    if not api_key:
        return None
    if provider == "hf":
        return HuggingFaceClient(api_key)
    return GeminiClient(api_key)
