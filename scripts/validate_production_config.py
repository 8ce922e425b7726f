import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from settings import GEMINI_KEY_SOURCES, HF_KEY_SOURCES, resolve_api_key, truthy


def parse_env_file(path: Path) -> dict:
    values = {}
    if not path.exists():
        raise FileNotFoundError(f"Env file not found: {path}")
    for raw in path.read_text(encoding="utf-8", errors="ignore").splitlines():
        s = raw.strip()
        if not s or s.startswith("#") or "=" not in s:
            continue
        k, v = s.split("=", 1)
        key = k.strip().lstrip("\ufeff")
        values[key] = v.strip().strip('"').strip("'")
    return values


def validate(env: dict, strict: bool = False, allow_demo: bool = False) -> list[str]:
    errors = []

    provider = (env.get("LLM_PROVIDER") or "gemini").strip().lower()
    if provider not in {"gemini", "hf"}:
        errors.append("LLM_PROVIDER must be 'gemini' or 'hf'.")
        provider = "gemini"

    sources = HF_KEY_SOURCES if provider == "hf" else GEMINI_KEY_SOURCES
    if not allow_demo and not resolve_api_key(sources, env):
        errors.append(f"No model key set ({' / '.join(sources)}); the app would run in demo mode.")

    if not truthy(env.get("DISABLE_DOCS", "true")):
        errors.append("DISABLE_DOCS must be true.")

    cors = env.get("CORS_ORIGINS", "").strip()
    if not cors:
        errors.append("CORS_ORIGINS must be set in production.")
    else:
        origins = [x.strip() for x in cors.split(",") if x.strip()]
        lowered = {o.lower() for o in origins}
        if "*" in lowered:
            errors.append("CORS_ORIGINS must not include '*'.")
        if "null" in lowered:
            errors.append("CORS_ORIGINS must not include 'null' in production.")
        if strict and any(o.startswith("http://") for o in origins):
            errors.append("CORS_ORIGINS should use https:// only in strict mode.")

    for name, minimum in (("CACHE_TTL_SEC", 1), ("LLM_TIMEOUT_SECONDS", 1), ("RATE_LIMIT_AI_PER_WINDOW", 1)):
        value = env.get(name, "").strip()
        if not value:
            continue
        try:
            if float(value) < minimum:
                errors.append(f"{name} should be >= {minimum}.")
        except ValueError:
            errors.append(f"{name} must be a number.")

    if strict and truthy(env.get("TRUST_X_FORWARDED_FOR", "false")):
        errors.append("TRUST_X_FORWARDED_FOR should be false unless behind trusted proxy.")

    return errors


def main() -> int:
    parser = argparse.ArgumentParser(description="Validate production-safe env policy.")
    parser.add_argument("--env-file", default=".env", help="Path to env file (default: .env)")
    parser.add_argument("--strict", action="store_true", help="Enable stricter production checks")
    parser.add_argument("--allow-demo", action="store_true", help="Do not require a model key")
    args = parser.parse_args()

    env = parse_env_file(Path(args.env_file))
    errors = validate(env, strict=args.strict, allow_demo=args.allow_demo)
    if errors:
        print("Production config validation failed:")
        for e in errors:
            print(f"- {e}")
        return 1
    print("Production config validation passed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
