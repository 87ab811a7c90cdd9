from datetime import datetime, timezone
from typing import Dict, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from .document_type import DocumentType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReportRecord(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    user_id: str
    file_name: str = "Unknown"
    doc_type: DocumentType
    report_type: str
    uploaded_at: datetime = Field(default_factory=_utcnow)
    raw_text: str = ""
    extracted_values: Dict[str, str] = Field(default_factory=dict)
    insight: Optional[str] = None


class ReportListItem(BaseModel):
    id: str
    file_name: str
    uploaded_at: datetime
    report_type: str

    @classmethod
    def from_record(cls, record: ReportRecord) -> "ReportListItem":
        return cls(
            id=record.id,
            file_name=record.file_name,
            uploaded_at=record.uploaded_at,
            report_type=record.report_type,
        )
