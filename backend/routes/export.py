"""
Export routes — grade sheet download as Excel.
"""

import logging
import os
import re
import uuid
from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask

from core.sheet_export import generate_sheet_excel
from models import ExportRequest
from routes.sheet import records_from_request, sheet_view

logger = logging.getLogger(__name__)

router = APIRouter()

SCHOOL_NAME = os.getenv("SCHOOL_NAME", "My School")
EXPORT_DIR = Path(__file__).resolve().parent.parent / "exports"
EXPORT_DIR.mkdir(parents=True, exist_ok=True)


def _safe_token(value: str, fallback: str = "sheet") -> str:
    """Create filesystem-safe token for filenames."""
    token = re.sub(r"[^A-Za-z0-9._-]+", "_", str(value)).strip("._-")
    return token or fallback


def _safe_unlink(path: str):
    """Best-effort file deletion after response is sent."""
    try:
        Path(path).unlink(missing_ok=True)
    except OSError:
        logger.warning("Could not delete export file %s", path)


@router.post("/excel")
async def export_excel(payload: ExportRequest):
    """Grouped grade sheet with totals and summary rows as .xlsx."""
    records = records_from_request(payload)
    title = payload.title or SCHOOL_NAME
    output_path = EXPORT_DIR / f"grade_sheet_{str(uuid.uuid4())[:8]}.xlsx"

    generate_sheet_excel(str(output_path), sheet_view(records, payload), title=title)

    return FileResponse(
        str(output_path),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        filename=f"{_safe_token(title)}.xlsx",
        background=BackgroundTask(_safe_unlink, str(output_path)),
    )
