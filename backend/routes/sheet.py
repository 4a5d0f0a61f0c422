"""
Sheet routes — grouped view, normalization, validation and tier selection.
"""

import logging
import os
from typing import List

from fastapi import APIRouter, HTTPException

from core.normalize import generate_normalization_report, normalize_subjects
from core.records import SubjectRecord, records_from_payload, records_to_payload
from core.sheet_view import build_sheet_view
from core.sizing import density_hints, select_tier
from core.validation import has_critical_issues, validate_sheet
from models import SheetPayload, TierRequest

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_TABLE_SIZE = os.getenv("DEFAULT_TABLE_SIZE", "auto")
PLACEHOLDER_ROWS = int(os.getenv("PLACEHOLDER_ROWS", "10"))


def records_from_request(payload: SheetPayload) -> List[SubjectRecord]:
    """Extract the flat record list from a request body."""
    if payload.subjects is None:
        raise HTTPException(400, "No subjects provided.")
    return records_from_payload(payload.subjects)


def sheet_view(records: List[SubjectRecord], payload: SheetPayload) -> dict:
    return build_sheet_view(
        records,
        table_size=payload.table_size or DEFAULT_TABLE_SIZE,
        placeholder_rows=PLACEHOLDER_ROWS,
    )


@router.post("/view")
async def view(payload: SheetPayload):
    """Grouped, sorted sheet with derived totals, sizing tier and summary rows."""
    records = records_from_request(payload)
    logger.info("POST /sheet/view — %d subjects", len(records))
    return sheet_view(records, payload)


@router.post("/normalize")
async def normalize(payload: SheetPayload):
    """Map extracted subject spellings onto the canonical record shape."""
    if payload.subjects is None:
        raise HTTPException(400, "No subjects provided.")
    records, report = normalize_subjects(payload.subjects)
    return {
        "subjects": records_to_payload(records),
        "report": report,
        "report_text": generate_normalization_report(report),
    }


@router.post("/validate")
async def validate(payload: SheetPayload):
    """Issues found in a subject list; critical ones make it invalid."""
    records = records_from_request(payload)
    issues = validate_sheet(records)
    return {"is_valid": not has_critical_issues(issues), "issues": issues}


@router.post("/tier")
async def tier(payload: TierRequest):
    """Density tier for a subject count, honouring a manual table size."""
    selected = select_tier(payload.visible_count, payload.table_size or DEFAULT_TABLE_SIZE)
    return density_hints(selected)
