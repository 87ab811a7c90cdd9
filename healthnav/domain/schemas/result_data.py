from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .document_type import DocumentType


class ErrorEntry(BaseModel):
    code: Optional[str] = None
    message: str
    field: Optional[str] = None


class FieldStatus(str, Enum):
    MATCHED = "matched"
    RECOVERED = "recovered"  # numeric prefix salvaged from a malformed token
    INVALID = "invalid"  # label found, value rejected by the shape check
    MISSING = "missing"


class FieldDiagnostic(BaseModel):
    field_name: str
    status: FieldStatus
    keyword: Optional[str] = None
    candidate: Optional[str] = None
    value: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class ExtractionResult(BaseModel):
    """Per-document extraction output.

    `values` keeps rule-table order and holds None for every field that could
    not be located or validated. It is a read-only mapping; the result cannot
    be changed once returned.
    """

    doc_type: Optional[DocumentType] = None
    values: Mapping[str, Optional[str]] = Field(default_factory=dict, validate_default=True)
    diagnostics: Tuple[FieldDiagnostic, ...] = ()

    model_config = ConfigDict(frozen=True)

    @field_validator("values")
    @classmethod
    def freeze_values(cls, value: Mapping[str, Optional[str]]) -> Mapping[str, Optional[str]]:
        return MappingProxyType(dict(value))

    @field_serializer("values")
    def dump_values(self, value: Mapping[str, Optional[str]]) -> Dict[str, Optional[str]]:
        return dict(value)

    @property
    def present(self) -> Dict[str, str]:
        return {k: v for k, v in self.values.items() if v is not None}

    @property
    def missing(self) -> List[str]:
        return [k for k, v in self.values.items() if v is None]

    @property
    def is_empty(self) -> bool:
        return not self.present


class MetaInfo(BaseModel):
    request_id: Optional[str] = None
    timings_ms: Dict[str, int] = Field(default_factory=dict)


class ResultData(BaseModel):
    meta: MetaInfo = Field(default_factory=MetaInfo)
    raw_text: Optional[str] = None
    result: ExtractionResult = Field(default_factory=ExtractionResult)
    insight: Optional[str] = None
    insight_error: Optional[ErrorEntry] = None
    report_id: Optional[str] = None
