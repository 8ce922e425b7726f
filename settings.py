import os

from dotenv import load_dotenv

load_dotenv()

# Checked in order; the first usable value wins.
GEMINI_KEY_SOURCES = ("VITE_GEMINI_API_KEY", "GEMINI_API_KEY", "API_KEY")
HF_KEY_SOURCES = ("HUGGINGFACE_API_KEY", "HF_TOKEN")

_PLACEHOLDERS = {"", "undefined"}


def truthy(value) -> bool:
    return str(value or "").strip().lower() in {"1", "true", "yes", "on"}


def is_usable_key(value) -> bool:
    return (value or "").strip() not in _PLACEHOLDERS


def resolve_api_key(sources, env=None) -> str:
    """Return the first present, non-placeholder value among ``sources``.

    ``env`` defaults to ``os.environ``; tests pass a plain dict.
    """
    env = os.environ if env is None else env
    for name in sources:
        value = (env.get(name) or "").strip()
        if is_usable_key(value):
            return value
    return ""


LLM_PROVIDER = (os.getenv("LLM_PROVIDER") or "gemini").strip().lower()
if LLM_PROVIDER not in {"gemini", "hf"}:
    LLM_PROVIDER = "gemini"

GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
GEMINI_API_BASE = os.getenv("GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta").rstrip("/")
HF_MODEL_NAME = os.getenv("HF_MODEL_NAME", "mistralai/Mistral-7B-Instruct-v0.2")

LLM_TIMEOUT_SECONDS = int(os.getenv("LLM_TIMEOUT_SECONDS", "90"))
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.25"))
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "900"))

CACHE_TTL_SEC = float(os.getenv("CACHE_TTL_SEC", "300"))
