"""
GradeSheet — Report-card grade sheet engine
FastAPI backend entry point.
"""

import logging
import os
import time

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

# Load environment before route modules read their settings
load_dotenv()

from routes.sheet import router as sheet_router  # noqa: E402
from routes.edit import router as edit_router  # noqa: E402
from routes.export import router as export_router  # noqa: E402

SCHOOL_NAME = os.getenv("SCHOOL_NAME", "My School")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEFAULT_TABLE_SIZE = os.getenv("DEFAULT_TABLE_SIZE", "auto")
# Comma-separated allowed origins, e.g. http://localhost:5173,https://app.example.com
raw_origins = os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000")
ALLOWED_ORIGINS = [o.strip() for o in raw_origins.split(",") if o.strip()]

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="GradeSheet API",
    description=(
        "Report-card grade sheets — scoring-scale grouping, derived totals "
        "and structural edits over a document's flat subject list."
    ),
    version="1.0.0",
)

# CORS — allow the React dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    t0 = time.perf_counter()
    logger.info("REQUEST  %s %s", request.method, request.url.path)
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - t0) * 1000
    logger.info("RESPONSE %s %s — status: %d, time: %.1fms",
                request.method, request.url.path, response.status_code, elapsed_ms)
    return response


# Register route modules
app.include_router(sheet_router, prefix="/api/sheet", tags=["Sheet"])
app.include_router(edit_router, prefix="/api/edit", tags=["Edit"])
app.include_router(export_router, prefix="/api/export", tags=["Export"])


@app.get("/api/health")
async def health_check():
    return {
        "status": "ok",
        "school_name": SCHOOL_NAME,
    }


@app.get("/api/config")
async def get_config():
    """Return server configuration to the frontend."""
    return {
        "school_name": SCHOOL_NAME,
        "default_table_size": DEFAULT_TABLE_SIZE,
    }
