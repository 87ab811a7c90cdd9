from __future__ import annotations

import mimetypes
import os
from typing import Optional

from fastapi import APIRouter, File, HTTPException, Query, Request, UploadFile
from pydantic import AnyHttpUrl

from healthnav.domain.errors import OCRError, UnreadableImageError
from healthnav.domain.schemas.chat import ExtractRequest
from healthnav.domain.schemas.document_type import DocumentType
from healthnav.domain.schemas.input_data import DocumentPayload, InputData, ProcessingOptions, RequestContext
from healthnav.domain.schemas.result_data import ExtractionResult, ResultData

from .deps import get_pipeline


router = APIRouter()


def _guess_mime(filename: Optional[str]) -> Optional[str]:
    if not filename:
        return None
    mime, _ = mimetypes.guess_type(filename)
    return mime


def _max_bytes() -> int:
    return int(float(os.getenv("MAX_FILE_MB", "10")) * 1024 * 1024)


@router.post("/scan", summary="OCR a blood report or nutrition label photo", response_model=ResultData)
async def scan(
    request: Request,
    file: Optional[UploadFile] = File(default=None, description="Image to process"),
    url: Optional[AnyHttpUrl] = Query(default=None, description="Public URL of the image"),
    doc_type: DocumentType = Query(default=DocumentType.BLOOD_REPORT),
    user_id: Optional[str] = Query(default=None, description="Owner of the report history"),
    insight: bool = Query(default=True, description="Ask the assistant to explain the values"),
) -> ResultData:
    if not file and not url:
        raise HTTPException(status_code=400, detail="either file or url must be provided")

    if file is not None:
        content = await file.read()
        if len(content) > _max_bytes():
            raise HTTPException(status_code=413, detail="file too large")
        payload = DocumentPayload(
            data=content,
            filename=file.filename,
            content_type=file.content_type or _guess_mime(file.filename),
            size_bytes=len(content),
        )
    else:
        payload = DocumentPayload(url=str(url), filename=os.path.basename(str(url)) or None)

    input_data = InputData(
        document=payload,
        options=ProcessingOptions(doc_type=doc_type, user_id=user_id, run_insight=insight),
        context=RequestContext(request_id=request.headers.get("X-Request-ID")),
    )

    pipeline = get_pipeline(request)
    try:
        return pipeline.run(input_data)
    except UnreadableImageError as e:
        raise HTTPException(status_code=422, detail=f"could not read image: {e}") from e
    except OCRError as e:
        raise HTTPException(status_code=502, detail=f"ocr failed: {e}") from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.post("/extract", summary="Extract fields from already recognized text", response_model=ExtractionResult)
def extract(request: Request, body: ExtractRequest) -> ExtractionResult:
    return get_pipeline(request).extract_text(body.text, body.doc_type)
