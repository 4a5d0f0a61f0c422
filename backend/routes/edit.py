"""
Edit routes — structural edits of a document's grade sheet.

Each endpoint receives the current subject list, applies one edit and
returns the resulting list with a fresh grouped view. A refused edit
(bad index, no groups, ambiguous group) answers 200 with
``applied: false`` and the list unchanged.

Removal endpoints expect the user to have confirmed already.
"""

import logging

from fastapi import APIRouter

from core.editing import (
    EditResult,
    add_custom_group,
    add_group,
    add_subject_to_group,
    move_group,
    remove_group,
    remove_subject,
    update_group_scale,
    update_subject_score,
)
from core.records import records_to_payload
from models import (
    AddGroupRequest,
    GroupTarget,
    MoveGroupRequest,
    SheetPayload,
    SubjectTarget,
    UpdateScaleRequest,
    UpdateScoreRequest,
)
from routes.sheet import records_from_request, sheet_view

logger = logging.getLogger(__name__)

router = APIRouter()


def _respond(result: EditResult, payload: SheetPayload) -> dict:
    return {
        "applied": result.applied,
        "message": result.message,
        "removed_count": result.removed_count,
        "record_id": result.record_id,
        "subjects": records_to_payload(result.records),
        "view": sheet_view(result.records, payload),
    }


@router.post("/add-subject")
async def add_subject(payload: GroupTarget):
    """Append a blank subject to the group at ``groupIndex``."""
    records = records_from_request(payload)
    return _respond(add_subject_to_group(records, payload.group_index), payload)


@router.post("/remove-subject")
async def delete_subject(payload: SubjectTarget):
    """Delete the subject at ``recordIndex``."""
    records = records_from_request(payload)
    return _respond(remove_subject(records, payload.record_index), payload)


@router.post("/update-score")
async def update_score(payload: UpdateScoreRequest):
    """Set one raw score cell or the subject name."""
    records = records_from_request(payload)
    result = update_subject_score(records, payload.record_index, payload.field, payload.value)
    return _respond(result, payload)


@router.post("/add-group")
async def create_group(payload: AddGroupRequest):
    """Add a scoring-scale group; default 20/40/80 unless ``maxima`` is given."""
    records = records_from_request(payload)
    if payload.maxima is None:
        result = add_group(records)
    else:
        maxima = payload.maxima
        result = add_custom_group(
            records,
            maxima.get("periodMaxima"),
            maxima.get("examMaxima"),
            maxima.get("totalMaxima"),
        )
    return _respond(result, payload)


@router.post("/remove-group")
async def delete_group(payload: GroupTarget):
    """Delete every subject of the group at ``groupIndex``."""
    records = records_from_request(payload)
    result = remove_group(records, payload.group_index)
    logger.info("POST /edit/remove-group — group %d, removed %d",
                payload.group_index, result.removed_count)
    return _respond(result, payload)


@router.post("/update-scale")
async def update_scale(payload: UpdateScaleRequest):
    """Change one maxima field for the whole group."""
    records = records_from_request(payload)
    result = update_group_scale(records, payload.group_index, payload.field, payload.value)
    return _respond(result, payload)


@router.post("/move-group")
async def reorder_group(payload: MoveGroupRequest):
    """Move a group's subjects before or after another group in the list."""
    records = records_from_request(payload)
    result = move_group(records, payload.from_index, payload.to_index)
    return _respond(result, payload)
