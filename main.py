from io import BytesIO
import os
import time
import json
import logging
import uuid
from collections import defaultdict, deque

import pdfplumber
from docx import Document
from fastapi import FastAPI, File, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
import uvicorn

from assistant import CareerAssistant
from internships import LOCATION_FILTERS, filter_internships, interview_question
from llm_client import QuotaExceededError
from settings import truthy

DISABLE_DOCS = truthy(os.getenv("DISABLE_DOCS", "true"))
app = FastAPI(
    docs_url=None if DISABLE_DOCS else "/docs",
    redoc_url=None if DISABLE_DOCS else "/redoc",
    openapi_url=None if DISABLE_DOCS else "/openapi.json",
)

LOG_LEVEL = (os.getenv("LOG_LEVEL", "INFO") or "INFO").upper()
logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger("career_assistant.api")

cors_env = os.getenv("CORS_ORIGINS", "").strip()
if cors_env:
    ALLOW_ORIGINS = [x.strip() for x in cors_env.split(",") if x.strip()]
else:
    ALLOW_ORIGINS = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOW_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-ID"],
)

MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", "5242880"))  # 5MB default
MAX_QUERY_BYTES = int(os.getenv("MAX_QUERY_BYTES", "20000"))  # 20KB default
RATE_LIMIT_WINDOW_SEC = int(os.getenv("RATE_LIMIT_WINDOW_SEC", "60"))
RATE_LIMIT_AI_PER_WINDOW = int(os.getenv("RATE_LIMIT_AI_PER_WINDOW", "30"))
TRUST_X_FORWARDED_FOR = truthy(os.getenv("TRUST_X_FORWARDED_FOR", "false"))

# One assistant per process: the live/demo decision and the cache are shared.
assistant = CareerAssistant()

_rate_buckets = defaultdict(deque)


class PayloadError(ValueError):
    def __init__(self, message, status_code=400):
        super().__init__(message)
        self.status_code = status_code


def _client_ip(request: Request):
    if TRUST_X_FORWARDED_FOR:
        xff = request.headers.get("x-forwarded-for", "")
        if xff:
            return xff.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _check_rate_limit(bucket_key: str, limit: int):
    now = time.time()
    q = _rate_buckets[bucket_key]
    while q and (now - q[0]) > RATE_LIMIT_WINDOW_SEC:
        q.popleft()
    if len(q) >= limit:
        return False
    q.append(now)
    return True


def _rate_limited(request: Request):
    if _check_rate_limit(f"ai:{_client_ip(request)}", RATE_LIMIT_AI_PER_WINDOW):
        return None
    return JSONResponse(status_code=429, content={"ok": False, "error": "RATE_LIMITED", "message": "Rate limit exceeded. Try again shortly."})


async def _read_json(request: Request) -> dict:
    raw = await request.body()
    if len(raw) > MAX_QUERY_BYTES:
        raise PayloadError("Payload too large.", status_code=413)
    try:
        data = json.loads(raw.decode("utf-8", errors="strict") or "{}")
    except ValueError:
        raise PayloadError("Invalid JSON payload.")
    if not isinstance(data, dict):
        raise PayloadError("JSON payload must be an object.")
    return data


def _string_field(data: dict, name: str) -> str:
    value = data.get(name, "")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise PayloadError(f"Invalid {name} type.")
    return value


def _number_field(data: dict, name: str):
    value = data.get(name)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PayloadError(f"{name} must be a number.")
    return value


def _extract_resume_text(file: UploadFile, content: bytes):
    name = (file.filename or "").lower()

    if name.endswith(".pdf"):
        pages_text = []
        with pdfplumber.open(BytesIO(content)) as pdf:
            for page in pdf.pages:
                page_text = (page.extract_text() or "").strip()
                if page_text:
                    pages_text.append(page_text)
        return "\n".join(pages_text).strip()

    if name.endswith(".docx"):
        doc = Document(BytesIO(content))
        parts = [(p.text or "").strip() for p in doc.paragraphs]
        return "\n".join([p for p in parts if p]).strip()

    if name.endswith(".txt"):
        return content.decode("utf-8", errors="ignore").strip()

    raise PayloadError("Unsupported file format. Please upload PDF, DOCX, or TXT.")


async def _analysis_response(resume_text: str):
    try:
        analysis = await run_in_threadpool(assistant.analyze_resume, resume_text)
    except QuotaExceededError as exc:
        return JSONResponse(status_code=429, content={"ok": False, "error": exc.code})
    return JSONResponse(content=jsonable_encoder({"ok": bool(analysis), "analysis": analysis}))


@app.middleware("http")
async def add_request_context(request: Request, call_next):
    request_id = (request.headers.get("X-Request-ID") or str(uuid.uuid4())).strip()[:128]
    request.state.request_id = request_id
    start = time.time()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception(
            "unhandled_exception request_id=%s method=%s path=%s ip=%s",
            request_id,
            request.method,
            request.url.path,
            _client_ip(request),
        )
        response = JSONResponse(status_code=500, content={"error": "Request processing failed.", "request_id": request_id})
    elapsed_ms = int((time.time() - start) * 1000)
    response.headers["X-Request-ID"] = request_id
    response.headers["X-Process-Time-Ms"] = str(elapsed_ms)
    response.headers["X-Content-Type-Options"] = "nosniff"
    logger.info(
        "request request_id=%s method=%s path=%s status=%s duration_ms=%s ip=%s",
        request_id,
        request.method,
        request.url.path,
        getattr(response, "status_code", "?"),
        elapsed_ms,
        _client_ip(request),
    )
    return response


@app.exception_handler(PayloadError)
async def payload_error_handler(request: Request, exc: PayloadError):
    return JSONResponse(status_code=exc.status_code, content={"ok": False, "message": str(exc)})


@app.get("/health")
async def health():
    return {"ok": True}


@app.get("/status")
async def get_status():
    return assistant.get_status_info()


@app.get("/internships")
async def list_internships(q: str = "", location: str = "All"):
    if location not in LOCATION_FILTERS:
        return JSONResponse(status_code=400, content={"ok": False, "message": f"location must be one of {', '.join(LOCATION_FILTERS)}."})
    items = filter_internships(q, location)
    return {"count": len(items), "items": items}


@app.get("/interview/questions")
async def get_interview_question(index: int = 0):
    return interview_question(index)


@app.post("/chat")
async def chat_endpoint(request: Request):
    limited = _rate_limited(request)
    if limited:
        return limited
    data = await _read_json(request)
    message = _string_field(data, "message")
    if not message.strip():
        return JSONResponse(status_code=400, content={"ok": False, "message": "Please enter a message."})
    profile = data.get("profile") or {}
    reply = await run_in_threadpool(assistant.get_chatbot_response, message, profile)
    return {"reply": reply}


@app.post("/resume/analyze")
async def resume_analyze(request: Request):
    limited = _rate_limited(request)
    if limited:
        return limited
    data = await _read_json(request)
    text = _string_field(data, "text")
    if not text.strip():
        return JSONResponse(status_code=400, content={"ok": False, "message": "Resume text is empty."})
    return await _analysis_response(text)


@app.post("/resume/upload")
async def resume_upload(request: Request, file: UploadFile = File(...)):
    limited = _rate_limited(request)
    if limited:
        return limited
    if not file.filename:
        return JSONResponse(status_code=400, content={"ok": False, "message": "Missing file name."})

    content = await file.read()
    if len(content) > MAX_UPLOAD_BYTES:
        return JSONResponse(status_code=413, content={"ok": False, "message": "Uploaded file is too large."})
    if not content:
        return JSONResponse(status_code=400, content={"ok": False, "message": "Uploaded file is empty."})

    try:
        text = _extract_resume_text(file, content)
    except PayloadError:
        raise
    except Exception:
        logger.exception("resume_extract_failed request_id=%s", getattr(request.state, "request_id", "-"))
        return JSONResponse(status_code=400, content={"ok": False, "message": "Could not read the uploaded file."})
    if not text:
        return JSONResponse(status_code=400, content={"ok": False, "message": "No text found in the uploaded file."})
    return await _analysis_response(text)


@app.post("/interview/feedback")
async def interview_feedback(request: Request):
    limited = _rate_limited(request)
    if limited:
        return limited
    data = await _read_json(request)
    question = _string_field(data, "question")
    answer = _string_field(data, "answer")
    if not answer.strip():
        return JSONResponse(status_code=400, content={"ok": False, "message": "Please type an answer first."})
    feedback = await run_in_threadpool(assistant.get_interview_feedback, question, answer)
    return JSONResponse(content=jsonable_encoder({"ok": bool(feedback), "feedback": feedback}))


@app.post("/tutor/plan")
async def tutor_plan(request: Request):
    limited = _rate_limited(request)
    if limited:
        return limited
    data = await _read_json(request)
    score = _number_field(data, "score")
    total = _number_field(data, "total")
    domain = _string_field(data, "domain") or "General"
    plan = await run_in_threadpool(assistant.generate_tutor_plan, score, total, domain)
    return JSONResponse(content=jsonable_encoder({"ok": bool(plan), "plan": plan}))


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8001")))
