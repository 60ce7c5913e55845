# app/main.py
import logging
import os
import re
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path as PathlibPath
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from partnerhub.audit_log import log_json
from partnerhub.database import close_pool
from partnerhub.errors import (
    BrokerValidationError,
    CompanyNotFound,
    CompanyValidationError,
    ExportError,
    InvalidSearchRequest,
    MissingPhoneError,
    PartnerHubError,
    RestoreError,
    SearchFailed,
)
from partnerhub.settings import APP_ENV

fmt = logging.Formatter("[%(levelname)s] %(asctime)s %(name)s :: %(message)s", "%H:%M:%S")


def _api_log_dir() -> Optional[PathlibPath]:
    log_dir = os.getenv("TROUBLESHOOT_API_LOG_DIR")
    if not log_dir and APP_ENV in {"dev", "development", "local", "localhost"}:
        log_dir = ".log_api"
    return PathlibPath(log_dir).expanduser() if log_dir else None


def _configure_api_file_logging() -> None:
    """Daily-rotated ``api.log`` on the root logger, kept for two weeks."""
    base = _api_log_dir()
    if base is None:
        return
    root = logging.getLogger()
    file_path = str(base / "api.log")
    # uvicorn --reload imports this module again in the same process
    if any(getattr(h, "baseFilename", None) == file_path for h in root.handlers):
        return
    try:
        base.mkdir(parents=True, exist_ok=True)
        handler = TimedRotatingFileHandler(file_path, when="midnight", backupCount=14, encoding="utf-8", utc=True)
    except OSError as exc:
        logging.getLogger("startup").warning("api file logging disabled: %s", exc)
        return
    handler.suffix = "%Y-%m-%d"
    handler.extMatch = re.compile(r"^\d{4}-\d{2}-\d{2}$")  # type: ignore[attr-defined]
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s", "%Y-%m-%d %H:%M:%S"))
    handler.setLevel(logging.INFO)
    root.addHandler(handler)
    if root.level == logging.NOTSET or root.level > logging.INFO:
        root.setLevel(logging.INFO)


def _stream_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    lg = logging.getLogger(name)
    if not lg.handlers:
        h = logging.StreamHandler()
        h.setFormatter(fmt)
        lg.addHandler(h)
    lg.setLevel(level)
    return lg


_configure_api_file_logging()
logger = _stream_logger("startup")
_stream_logger("partnerhub")
# google-genai and httpx log every request at INFO
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("google_genai").setLevel(logging.WARNING)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("PartnerHub API starting env=%s", APP_ENV)
    yield
    # Only opened when the postgres backend is in use
    close_pool()


app = FastAPI(title="PartnerHub API", version="1.0.0", lifespan=lifespan)

extra_origins = [o.strip() for o in (os.getenv("EXTRA_CORS_ORIGINS") or "").split(",") if o.strip()]
allow_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
] + extra_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Tag every request with an id (from X-Request-Id or generated) and echo it back."""
    req_id = request.headers.get("x-request-id") or f"r-{uuid.uuid4().hex[:16]}"
    request.state.request_id = req_id
    response = await call_next(request)
    response.headers["x-request-id"] = req_id
    return response


from app.companies_routes import public_router, router as companies_router  # noqa: E402
from app.lookup_routes import router as lookup_router  # noqa: E402
from app.prospecting_routes import router as prospecting_router  # noqa: E402
from app.reports_routes import router as reports_router  # noqa: E402

app.include_router(companies_router)
app.include_router(public_router)
app.include_router(prospecting_router)
app.include_router(lookup_router)
app.include_router(reports_router)


# Domain errors -> HTTP status; the message is already operator-facing Portuguese
_STATUS_BY_ERROR = (
    (CompanyNotFound, 404),
    (SearchFailed, 502),
    (InvalidSearchRequest, 400),
    (RestoreError, 400),
    (BrokerValidationError, 400),
    (ExportError, 400),
    (MissingPhoneError, 400),
    (CompanyValidationError, 422),
)


def _request_fields(request: Request) -> dict:
    return {
        "path": request.url.path,
        "method": request.method,
        "request_id": getattr(request.state, "request_id", None),
    }


@app.exception_handler(PartnerHubError)
async def partnerhub_error_handler(request: Request, exc: PartnerHubError):
    status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(exc, cls)), 400)
    level = "error" if status >= 500 else "warn"
    log_json("api", level, type(exc).__name__, {"status": status, "detail": str(exc), **_request_fields(request)})
    return JSONResponse(status_code=status, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    log_json("api", "error", "unhandled_exception", {"error_type": type(exc).__name__, **_request_fields(request)})
    return JSONResponse(status_code=500, content={"detail": "internal_server_error"})


@app.get("/health")
async def health():
    return {"status": "ok", "env": APP_ENV, "time": datetime.now(timezone.utc).isoformat(timespec="seconds")}
