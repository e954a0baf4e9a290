from __future__ import annotations

import logging
import uvicorn
from functools import lru_cache
from pathlib import Path

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from models import ChatRequest, ChatResponse, ErrorResponse
from utils import get_env
from chat_service import ChatService
from llm import build_gateway
from store import ReportStore

# -------- Paths --------
BASE_DIR = Path(__file__).resolve().parent
STATIC_DIR = BASE_DIR / "static"

# -------- Logging --------
logging.basicConfig(
    level=get_env("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# -------- App --------
app = FastAPI(title="WebAudit AI Chat", version="1.0.0")

# -------- CORS --------
def _parse_origins(val: str):
    if not val or val.strip() == "*":
        return ["*"], False
    items = [x.strip() for x in val.split(",") if x.strip()]
    return items or ["*"], True

_raw = get_env("CORS_ORIGINS", "*")
_allow, _creds = _parse_origins(_raw)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allow,
    allow_credentials=_creds,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -------- Errors --------
@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    # no body at all, or a message field that is missing or not a string
    missing = any(
        tuple(err.get("loc", ())) == ("body",) or "message" in err.get("loc", ())
        for err in exc.errors()
    )
    error = "Message is required" if missing else "Invalid request body"
    return JSONResponse(status_code=400, content={"success": False, "error": error})

@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": str(exc) or "Internal server error"},
    )

# -------- Widget --------
if STATIC_DIR.exists():
    app.mount("/widget", StaticFiles(directory=str(STATIC_DIR), html=True), name="widget")

# -------- Service --------
@lru_cache(maxsize=1)
def get_chat_service() -> ChatService:
    return ChatService(build_gateway(), ReportStore.from_env())

# -------- Health --------
@app.get("/health")
def health():
    return {"status": "ok"}

@app.get("/health/llm")
def health_llm(service: ChatService = Depends(get_chat_service)):
    gw = service.gateway
    return {"provider": gw.provider, "model": gw.model, "configured": gw.configured}

# -------- Chat --------
@app.post(
    "/api/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def chat(req: ChatRequest, service: ChatService = Depends(get_chat_service)):
    message = (req.message or "").strip()
    if not message:
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": "Message is required"},
        )

    logger.info('Message: "%s..." | Report: %s', message[:80], req.report_id or "none")

    try:
        history = [h.model_dump() for h in req.history]
        result = service.chat(req.report_id, message, history)
    except Exception as e:
        logger.exception("Chat request failed")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": str(e) or "Chat failed"},
        )

    return ChatResponse(reply=result.reply, intent=result.intent, sources=result.sources)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=get_env("HOST", "0.0.0.0"),
        port=int(get_env("PORT", "8000")),
    )
