import re
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FieldRule(BaseModel):
    """Detection rule for one extractable field.

    `keywords` are literal label anchors tried in order; the first is the
    primary label, the rest are fallbacks for labels OCR commonly garbles.
    `value_pattern` matches the candidate token that follows the label.
    """

    field_name: str
    keywords: Tuple[str, ...] = Field(..., min_length=1)
    value_pattern: re.Pattern
    unit: Optional[str] = None
    max_gap: int = Field(default=16, ge=0)

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @field_validator("value_pattern", mode="before")
    @classmethod
    def compile_pattern(cls, value: object) -> object:
        if isinstance(value, str):
            return re.compile(value)
        return value

    @field_validator("keywords")
    @classmethod
    def reject_blank_keywords(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if any(not kw.strip() for kw in value):
            raise ValueError("keywords must be non-empty strings")
        return value
