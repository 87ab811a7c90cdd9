from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from healthnav.domain.ports.Field_extractor_provider import Report_assembler_provider
from healthnav.domain.rule_tables import rules_for
from healthnav.domain.schemas.document_type import DocumentType
from healthnav.domain.schemas.field_rule import FieldRule
from healthnav.domain.schemas.result_data import ExtractionResult, FieldDiagnostic, FieldStatus
from healthnav.lib.logger import get_logger

from .field_extractor_service import FieldExtractorService
from .preprocess_text_service import PreprocessTextService


class ReportAssemblerService(Report_assembler_provider):
    """Run the extractor over a whole rule table.

    Partial results are the normal case: OCR quality varies field by field, so
    a miss only marks that field absent. Empty or unreadable text yields an
    all-absent result.
    """

    def __init__(
        self,
        extractor: Optional[FieldExtractorService] = None,
        normalizer: Optional[PreprocessTextService] = None,
    ) -> None:
        self.logger = get_logger("assemble")
        self.extractor = extractor or FieldExtractorService()
        self.normalizer = normalizer or PreprocessTextService()

    def assemble(
        self,
        raw_text: str,
        rules: Sequence[FieldRule],
        doc_type: Optional[DocumentType] = None,
    ) -> ExtractionResult:
        names = [r.field_name for r in rules]
        if len(set(names)) != len(names):
            raise ValueError("rule table contains duplicate field names")

        text = self.normalizer.normalize(raw_text)
        values: Dict[str, Optional[str]] = {}
        diagnostics: List[FieldDiagnostic] = []

        for rule in rules:
            competing = tuple(kw for other in rules if other is not rule for kw in other.keywords)
            try:
                diag = self.extractor.extract_field(text, rule, competing)
            except Exception as exc:
                self.logger.warning("field %s skipped: %s", rule.field_name, exc)
                diag = FieldDiagnostic(field_name=rule.field_name, status=FieldStatus.INVALID)

            if diag.value is not None and not self.extractor.sanitizer.is_valid(diag.value):
                diag = FieldDiagnostic(
                    field_name=rule.field_name,
                    status=FieldStatus.INVALID,
                    keyword=diag.keyword,
                    candidate=diag.candidate,
                )
            values[rule.field_name] = diag.value
            diagnostics.append(diag)

        return ExtractionResult(doc_type=doc_type, values=values, diagnostics=diagnostics)

    def assemble_for(self, raw_text: str, doc_type: DocumentType) -> ExtractionResult:
        doc_type = DocumentType(doc_type)
        return self.assemble(raw_text, rules_for(doc_type), doc_type)
