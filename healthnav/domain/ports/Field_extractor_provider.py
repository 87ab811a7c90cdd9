from abc import ABC, abstractmethod
from typing import Optional, Sequence

from healthnav.domain.schemas.document_type import DocumentType
from healthnav.domain.schemas.field_rule import FieldRule
from healthnav.domain.schemas.result_data import ExtractionResult, FieldDiagnostic


class Field_extractor_provider(ABC):
    @abstractmethod
    def extract_field(self, text: str, rule: FieldRule, competing: Sequence[str] = ()) -> FieldDiagnostic:
        """Locate and validate the value for a single rule in normalized text.

        `competing` are the labels of sibling fields; a value separated from
        the label by one of them is not taken.
        """
        pass


class Report_assembler_provider(ABC):
    @abstractmethod
    def assemble(
        self, raw_text: str, rules: Sequence[FieldRule], doc_type: Optional[DocumentType] = None
    ) -> ExtractionResult:
        """Run every rule over the text; never raises for a missing field."""
        pass
