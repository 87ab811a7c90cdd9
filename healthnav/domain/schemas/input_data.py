from typing import Optional

from pydantic import BaseModel, Field, HttpUrl, model_validator

from .document_type import DocumentType


class DocumentPayload(BaseModel):
    """Raw document payload supplied by the client."""

    data: Optional[bytes] = None
    url: Optional[HttpUrl] = None
    filename: Optional[str] = None
    content_type: Optional[str] = None
    size_bytes: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def validate_source(self) -> "DocumentPayload":
        if self.data is None and self.url is None:
            raise ValueError("document payload requires either inline data or a URL")
        return self


class ProcessingOptions(BaseModel):
    """Flags that control how the pipeline should process the document."""

    doc_type: DocumentType = DocumentType.BLOOD_REPORT
    user_id: Optional[str] = None
    run_insight: bool = True
    save_report: bool = True


class RequestContext(BaseModel):
    """Request-scoped metadata propagated through the pipeline."""

    request_id: Optional[str] = None


class InputData(BaseModel):
    """Full payload consumed by the pipeline orchestrator."""

    document: DocumentPayload
    options: ProcessingOptions = Field(default_factory=ProcessingOptions)
    context: RequestContext = Field(default_factory=RequestContext)
