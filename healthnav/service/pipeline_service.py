from __future__ import annotations

import time
from typing import Optional, Tuple

from healthnav.domain.errors import AssistantError
from healthnav.domain.ports.Assistant_provider import Assistant_provider
from healthnav.domain.ports.OCR_provider import OCR_provider, ProgressCallback
from healthnav.domain.ports.Pipeline_interface import Pipeline_interface
from healthnav.domain.ports.Report_store_provider import Report_store_provider
from healthnav.domain.schemas.document_type import DocumentType
from healthnav.domain.schemas.input_data import InputData
from healthnav.domain.schemas.profile import UserContext
from healthnav.domain.schemas.report import ReportRecord
from healthnav.domain.schemas.result_data import ErrorEntry, ExtractionResult, MetaInfo, ResultData
from healthnav.lib.logger import get_logger

from .assistant_service import AssistantService
from .insight_prompt_service import InsightPromptService
from .ocr_service import OCRService
from .preprocess_cv_service import PreprocessCVService
from .report_assembler_service import ReportAssemblerService
from .report_store_service import JsonFileReportStore

NO_VALUES_MESSAGE = "Could not extract values for AI insight."


class PipelineService(Pipeline_interface):
    """Image -> OCR -> field extraction -> assistant insight -> report history.

    OCR and assistant providers load models or open clients, so they are
    created on first use and then reused for the life of the pipeline.
    """

    def __init__(
        self,
        ocr: Optional[OCR_provider] = None,
        assistant: Optional[Assistant_provider] = None,
        store: Optional[Report_store_provider] = None,
        preprocess: Optional[PreprocessCVService] = None,
    ) -> None:
        self.logger = get_logger("pipeline")
        self._ocr = OCRService(ocr) if ocr is not None else None
        self._assistant = AssistantService(assistant) if assistant is not None else None
        self._store = store
        self._preprocess = preprocess
        self.assembler = ReportAssemblerService()
        self.prompts = InsightPromptService()

    @property
    def ocr(self) -> OCRService:
        if self._ocr is None:
            self._ocr = OCRService()
        return self._ocr

    @property
    def assistant(self) -> AssistantService:
        if self._assistant is None:
            self._assistant = AssistantService()
        return self._assistant

    @property
    def store(self) -> Report_store_provider:
        if self._store is None:
            self._store = JsonFileReportStore()
        return self._store

    @property
    def preprocess(self) -> PreprocessCVService:
        if self._preprocess is None:
            self._preprocess = PreprocessCVService()
        return self._preprocess

    def run(self, input_data: InputData, progress: Optional[ProgressCallback] = None) -> ResultData:
        t0 = time.perf_counter()
        opts = input_data.options
        meta = MetaInfo(request_id=input_data.context.request_id or None, timings_ms={})
        self.logger.info("start pipeline: doc_type=%s user=%s", opts.doc_type.value, opts.user_id)

        # 1) Preprocess
        images = self.preprocess.get_image(input_data)
        meta.timings_ms["preprocess"] = int((time.perf_counter() - t0) * 1000)

        # 2) OCR
        t1 = time.perf_counter()

        def _on_progress(fraction: float) -> None:
            self.logger.debug("ocr progress: %d%%", round(fraction * 100))
            if progress:
                progress(fraction)

        ocr = self.ocr.run(images, progress=_on_progress)
        meta.timings_ms["ocr"] = int((time.perf_counter() - t1) * 1000)
        raw_text = ocr.text
        self.logger.info("ocr: pages=%d, lines=%d", len(ocr.pages), ocr.line_count)
        if not raw_text:
            self.logger.warning("ocr produced 0 text lines")

        # 3) Field extraction
        t2 = time.perf_counter()
        result = self.extract_text(raw_text, opts.doc_type)
        meta.timings_ms["extract"] = int((time.perf_counter() - t2) * 1000)

        data = ResultData(meta=meta, raw_text=raw_text, result=result)

        # 4) Insight
        if opts.run_insight:
            t3 = time.perf_counter()
            context = self.load_context(opts.user_id)
            data.insight, data.insight_error = self.generate_insight(result, context)
            meta.timings_ms["insight"] = int((time.perf_counter() - t3) * 1000)

        # 5) History
        if opts.user_id and opts.save_report:
            record = ReportRecord(
                user_id=opts.user_id,
                file_name=input_data.document.filename or "Unknown",
                doc_type=opts.doc_type,
                report_type=opts.doc_type.report_type,
                raw_text=raw_text,
                extracted_values=result.present,
                insight=data.insight,
            )
            data.report_id = self.store.save_report(record).id

        total_ms = int((time.perf_counter() - t0) * 1000)
        meta.timings_ms["total"] = total_ms
        self.logger.info("done: total=%d ms", total_ms)
        return data

    def extract_text(self, raw_text: str, doc_type: DocumentType) -> ExtractionResult:
        result = self.assembler.assemble_for(raw_text, doc_type)
        self.logger.info(
            "extracted: doc_type=%s present=%d/%d missing=%s",
            result.doc_type.value if result.doc_type else None,
            len(result.present),
            len(result.values),
            ",".join(result.missing) or "-",
        )
        return result

    def load_context(self, user_id: Optional[str]) -> Optional[UserContext]:
        if not user_id:
            return None
        profile = self.store.get_profile(user_id)
        return profile.to_context() if profile else None

    def generate_insight(
        self, result: ExtractionResult, context: Optional[UserContext] = None
    ) -> Tuple[Optional[str], Optional[ErrorEntry]]:
        if result.is_empty:
            return None, ErrorEntry(code="no_values", message=NO_VALUES_MESSAGE)
        prompt = self.prompts.build(result, context)
        try:
            return self.assistant.ask(prompt), None
        except AssistantError as e:
            self.logger.warning("insight failed: %s", e)
            return None, ErrorEntry(code=e.kind.value, message=e.user_message)

    def chat(self, message: str, user_id: Optional[str] = None) -> str:
        """Free-form health question; AssistantError propagates to the caller."""
        prompt = self.prompts.build_chat(message, self.load_context(user_id))
        return self.assistant.ask(prompt)
