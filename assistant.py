import json
import logging
import time

import demo_data
import settings
from llm_client import LLMError, QuotaExceededError, build_client, is_quota_error
from normalizer import normalize
from result_cache import ResultCache
from results import (
    INTERVIEW_FEEDBACK_FIELDS,
    INTERVIEW_FEEDBACK_SCHEMA,
    RESUME_ANALYSIS_FIELDS,
    RESUME_ANALYSIS_SCHEMA,
    TUTOR_PLAN_FIELDS,
    TUTOR_PLAN_SCHEMA,
)

logger = logging.getLogger("career_assistant.assistant")

ASSISTANT_NAME = "Prashikshan Assistant"
RESUME_KEY_CHARS = 100
RESUME_PROMPT_CHARS = 2000

EMPTY_REPLY = "I'm sorry, I couldn't process that."
CONNECTION_REPLY = "I'm having trouble connecting to my brain right now."


class CareerAssistant:
    def __init__(self, api_key=None, provider=None, model_name=None, client=None, cache=None,
                 sleep=time.sleep, key_sources=None):
        self.provider = provider or settings.LLM_PROVIDER
        if model_name:
            self.model_name = model_name
        else:
            self.model_name = settings.HF_MODEL_NAME if self.provider == "hf" else settings.GEMINI_MODEL

        if api_key is None:
            if key_sources is None:
                key_sources = settings.HF_KEY_SOURCES if self.provider == "hf" else settings.GEMINI_KEY_SOURCES
            api_key = settings.resolve_api_key(key_sources)
        api_key = (api_key or "").strip()

        # Decided once; there is no reload.
        self._live = settings.is_usable_key(api_key)
        if self._live:
            logger.info("llm_key_detected provider=%s length=%s", self.provider, len(api_key))
        else:
            logger.warning("llm_key_missing provider=%s mode=demo", self.provider)

        if client is not None:
            self.client = client
        else:
            self.client = build_client(self.provider, api_key) if self._live else None
        self.cache = cache if cache is not None else ResultCache(ttl=settings.CACHE_TTL_SEC)
        self._sleep = sleep

    def is_live(self) -> bool:
        return self._live

    def get_status_info(self):
        return {
            "mode": "live" if self._live else "demo",
            "provider": self.provider,
            "model": self.model_name,
            "cached_results": len(self.cache),
        }

    def get_chatbot_response(self, message, profile=None) -> str:
        if not self._live:
            self._sleep(demo_data.CHAT_DELAY_SEC)
            return demo_data.DEMO_CHAT_REPLY

        system_text = (
            f'You are "{ASSISTANT_NAME}", an AI career coach.\n'
            f"Current User Profile: {json.dumps(profile, default=str)}.\n"
            "Answer concisely."
        )
        try:
            text = self.client.invoke(self.model_name, f"User Message: {message}", system=system_text)
        except LLMError:
            logger.exception("chat_failed provider=%s", self.provider)
            return CONNECTION_REPLY
        return text or EMPTY_REPLY

    def analyze_resume(self, resume_text):
        """Score a resume and list strengths and improvements.

        Results are cached by the first 100 characters of the text. A quota or
        rate-limit rejection raises ``QuotaExceededError``; any other failure
        returns ``None``.
        """
        resume_text = str(resume_text or "")
        cache_key = f"resume:{resume_text[:RESUME_KEY_CHARS]}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info("resume_analysis_cache_hit")
            return cached

        if not self._live:
            self._sleep(demo_data.RESUME_DELAY_SEC)
            return demo_data.resume_analysis()

        prompt = (
            "Analyze this resume. Return JSON: "
            "{score:number (0-100), strengths:string[], improvements:string[]}\n"
            f"Resume: {resume_text[:RESUME_PROMPT_CHARS]}"
        )
        try:
            raw = self.client.invoke(self.model_name, prompt, schema=RESUME_ANALYSIS_SCHEMA)
        except LLMError as exc:
            if is_quota_error(exc):
                logger.warning("resume_analysis_quota_exceeded status=%s", exc.status_code)
                raise QuotaExceededError() from exc
            logger.exception("resume_analysis_failed provider=%s", self.provider)
            return None

        result = normalize(raw or "{}", required=RESUME_ANALYSIS_FIELDS)
        self.cache.put(cache_key, result)
        return result

    def get_interview_feedback(self, question, answer):
        # Blank answers are the caller's problem; they go to the model as-is.
        if not self._live:
            self._sleep(demo_data.FEEDBACK_DELAY_SEC)
            return demo_data.interview_feedback(question)

        prompt = (
            "Evaluate this interview answer.\n"
            f"Question: {question}\n"
            f"User's Answer: {answer}\n\n"
            "Return JSON with keys: feedback (string), betterAnswer (string), rating (number out of 10)."
        )
        try:
            raw = self.client.invoke(self.model_name, prompt, schema=INTERVIEW_FEEDBACK_SCHEMA)
        except LLMError:
            logger.exception("interview_feedback_failed provider=%s", self.provider)
            return None
        return normalize(raw or "{}", required=INTERVIEW_FEEDBACK_FIELDS)

    def generate_tutor_plan(self, score, total, domain):
        if not self._live:
            self._sleep(demo_data.TUTOR_DELAY_SEC)
            return demo_data.tutor_plan(score, domain)

        percentage = (score / total) * 100 if total else 0
        prompt = (
            f"Student scored {score}/{total} ({percentage:.0f}%) in {domain}.\n\n"
            "Create a learning plan.\n"
            "Return JSON with keys: level (Beginner, Intermediate or Advanced), feedback (string), "
            "weakAreas (array of strings), assignments (array of objects with title, description, "
            "difficulty of Easy, Medium or Hard), recommendedSkills (array of strings)."
        )
        try:
            raw = self.client.invoke(self.model_name, prompt, schema=TUTOR_PLAN_SCHEMA)
        except LLMError:
            logger.exception("tutor_plan_failed provider=%s", self.provider)
            return None
        return normalize(raw or "{}", required=TUTOR_PLAN_FIELDS)
