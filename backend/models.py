from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SheetPayload(BaseModel):
    """A document's flat subject list plus its stored table size."""

    model_config = ConfigDict(populate_by_name=True)

    subjects: Optional[List[Dict[str, Any]]] = None
    table_size: Optional[str] = Field(default=None, alias="tableSize")


class TierRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    visible_count: int = Field(alias="visibleCount", ge=0)
    table_size: Optional[str] = Field(default=None, alias="tableSize")


class ExportRequest(SheetPayload):
    title: Optional[str] = None


class GroupTarget(SheetPayload):
    group_index: int = Field(alias="groupIndex")


class SubjectTarget(SheetPayload):
    record_index: int = Field(alias="recordIndex")


class AddGroupRequest(SheetPayload):
    # periodMaxima / examMaxima / totalMaxima as typed; absent → default 20/40/80
    maxima: Optional[Dict[str, Any]] = None


class UpdateScaleRequest(GroupTarget):
    field: str
    value: Any = None


class UpdateScoreRequest(SubjectTarget):
    field: str
    value: Any = None


class MoveGroupRequest(SheetPayload):
    from_index: int = Field(alias="fromIndex")
    to_index: int = Field(alias="toIndex")
