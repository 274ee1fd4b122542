from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.core.enums import RowStatus


class ValidatedRowResponse(BaseModel):
    row_index: int = Field(..., description="1-based data row number (header excluded)")
    data: Dict[str, str]
    status: RowStatus
    errors: List[str]
    matched_id: Optional[UUID] = Field(None, description="Existing entity the row updates; set only when status=update")


class ImportPreviewResponse(BaseModel):
    total: int
    rows: List[ValidatedRowResponse]


class ImportCommitResponse(ImportPreviewResponse):
    created: int
    updated: int
    skipped: int
