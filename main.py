from __future__ import annotations

import mimetypes
import os
import sys
from pathlib import Path
from typing import Optional

from healthnav.domain.schemas.document_type import DocumentType
from healthnav.domain.schemas.input_data import DocumentPayload, InputData, ProcessingOptions
from healthnav.service.pipeline_service import PipelineService

from dotenv import load_dotenv
load_dotenv()


def _as_bool(v: object, default: bool = False) -> bool:
    if v is None:
        return default
    return str(v).lower() in ("1", "true", "yes")


def build_input_from_file(path: Path, doc_type: DocumentType, user_id: Optional[str] = None) -> InputData:
    data = path.read_bytes()
    mime, _ = mimetypes.guess_type(str(path))
    options = ProcessingOptions(
        doc_type=doc_type,
        user_id=user_id,
        run_insight=_as_bool(os.getenv("RUN_INSIGHT", "1"), True),
    )
    payload = DocumentPayload(data=data, filename=path.name, content_type=mime)
    return InputData(document=payload, options=options)


def main() -> None:
    serve = _as_bool(os.getenv("SERVE", "0"))
    if serve and len(sys.argv) <= 1:
        # Run HTTP server; host/port from env
        import uvicorn
        host = os.getenv("DOMAIN", "0.0.0.0")
        port = int(os.getenv("PORT", "8080"))
        uvicorn.run("healthnav.transport.http.server:app", host=host, port=port, reload=False)
        return

    # CLI mode: image path, optional doc type
    if len(sys.argv) <= 1:
        print(
            "Usage: python main.py <image> [blood_report|nutrition_label]  # or set SERVE=1 to start HTTP server",
            flush=True,
        )
        sys.exit(2)

    file_path = sys.argv[1]
    doc_type = DocumentType(sys.argv[2] if len(sys.argv) > 2 else os.getenv("DOC_TYPE", "blood_report"))

    input_data = build_input_from_file(Path(file_path), doc_type, user_id=os.getenv("USER_ID") or None)
    pipeline = PipelineService()
    result = pipeline.run(input_data)
    print(result.model_dump_json(indent=2), flush=True)


if __name__ == "__main__":
    main()
