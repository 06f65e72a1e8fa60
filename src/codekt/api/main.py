from __future__ import annotations

from datetime import UTC, datetime
import logging
import os
from dotenv import load_dotenv
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

from .routers.projects import router as projects_router, files_router
from .routers.chat import router as chat_router
from ..observability.metrics import metrics_middleware_factory

load_dotenv()  # Load model credentials (OPENAI_API_KEY, AI_INTEGRATIONS_OPENAI_*) from .env if present

APP_NAME = "Code KT API"
APP_VERSION = "0.1.0"

app = FastAPI(title=APP_NAME, version=APP_VERSION)

logging.getLogger("codekt").info("app_starting")

# Observability: request latency histogram
app.middleware("http")(metrics_middleware_factory())

# Routers
app.include_router(projects_router)
app.include_router(files_router)
app.include_router(chat_router)

# Same routers under /api, with chat and conversations under /api/kt as the dashboard client expects
app.include_router(projects_router, prefix="/api")
app.include_router(files_router, prefix="/api")
app.include_router(chat_router, prefix="/api/kt")

_default_origins = "http://localhost:5173,http://127.0.0.1:5173"
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("CODEKT_CORS_ORIGINS", _default_origins).split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _health_payload() -> dict:
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        "components": {
            "api": "ok",
            "repo": "in-memory",
        },
    }


@app.get("/")
def root():
    return {"name": APP_NAME, "version": APP_VERSION}


@app.get("/health")
def health():
    return _health_payload()


@app.get("/metrics")
def metrics() -> Response:
    data = generate_latest(REGISTRY)
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)


@app.get("/api/health")
def api_health():
    return _health_payload()
