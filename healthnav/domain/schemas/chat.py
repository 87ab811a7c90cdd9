from typing import Optional

from pydantic import BaseModel, Field

from .document_type import DocumentType


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)
    user_id: Optional[str] = None


class ChatReply(BaseModel):
    reply: str


class ExtractRequest(BaseModel):
    text: str
    doc_type: DocumentType = DocumentType.BLOOD_REPORT
