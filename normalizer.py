import json
import logging
import re

logger = logging.getLogger("career_assistant.normalizer")

_FENCE_RE = re.compile(r"```[A-Za-z]*")


def strip_code_fences(text: str) -> str:
    # Models often wrap JSON in ```json ... ``` even when asked not to.
    return _FENCE_RE.sub("", str(text or "")).strip()


def normalize(raw_text, required=None) -> dict:
    """Parse model output into a mapping, or ``{}`` if that is not possible.

    Never raises. When ``required`` is given, a payload missing any of those
    keys is also discarded so callers never see a partially filled result.
    """
    cleaned = strip_code_fences(raw_text)
    try:
        data = json.loads(cleaned)
    except (TypeError, ValueError) as exc:
        logger.warning("normalize_parse_failed error=%s raw_len=%s", exc, len(cleaned))
        return {}

    if not isinstance(data, dict):
        logger.warning("normalize_not_object type=%s", type(data).__name__)
        return {}

    if required:
        missing = [name for name in required if name not in data]
        if missing:
            logger.warning("normalize_missing_fields fields=%s", ",".join(missing))
            return {}
    return data
