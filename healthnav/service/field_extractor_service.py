from __future__ import annotations

import re
from functools import lru_cache
from typing import Optional, Sequence, Tuple

from healthnav.domain.ports.Field_extractor_provider import Field_extractor_provider
from healthnav.domain.schemas.field_rule import FieldRule
from healthnav.domain.schemas.result_data import FieldDiagnostic, FieldStatus

from .value_sanitizer_service import ValueSanitizerService

_NUMERIC_PREFIX_RE = re.compile(r"\d+(?:\.\d+)?")


def _bounded(keyword: str) -> str:
    # keyword is literal text; a letter at either end must not run into another word
    head = r"(?<![A-Za-z])" if keyword[0].isalpha() else ""
    tail = r"(?![A-Za-z])" if keyword[-1].isalpha() else ""
    return f"{head}{re.escape(keyword)}{tail}"


@lru_cache(maxsize=512)
def _anchor_regex(keyword: str, value_pattern: str, max_gap: int) -> re.Pattern:
    return re.compile(
        rf"{_bounded(keyword)}(?P<gap>[^\d]{{0,{max_gap}}}?)(?P<value>{value_pattern})",
        re.IGNORECASE,
    )


@lru_cache(maxsize=64)
def _competing_regex(anchors: Tuple[str, ...]) -> Optional[re.Pattern]:
    if not anchors:
        return None
    ordered = sorted(set(anchors), key=len, reverse=True)
    return re.compile("|".join(_bounded(a) for a in ordered), re.IGNORECASE)


def recover_numeric_prefix(candidate: Optional[str]) -> Optional[str]:
    """Leading number of a malformed token, e.g. "94mg/dl" -> "94"."""
    if not candidate:
        return None
    m = _NUMERIC_PREFIX_RE.match(candidate.strip().replace(":", "."))
    return m.group(0) if m else None


class FieldExtractorService(Field_extractor_provider):
    """Keyword-anchored value locator.

    Printed report and label tables put the value right after its label, but
    OCR joins them with inconsistent spacing, punctuation or a stray word
    ("Platelet Count 2.5"). The extractor anchors on the label and takes the
    next value token within `rule.max_gap` non-digit characters.

    `competing` holds the labels of the other fields in the same table. A
    match is skipped when one of them sits between the label and the value
    (the value belongs to that other field) or when the label is only the
    tail of a longer one ("Neutrophils" inside "Absolute Neutrophils").
    """

    def __init__(self, sanitizer: Optional[ValueSanitizerService] = None) -> None:
        self.sanitizer = sanitizer or ValueSanitizerService()

    def find_candidate(
        self, text: str, keyword: str, rule: FieldRule, competing: Sequence[str] = ()
    ) -> Optional[str]:
        if not text:
            return None
        regex = _anchor_regex(keyword, rule.value_pattern.pattern, rule.max_gap)
        stop = _competing_regex(tuple(competing))
        longer = [a for a in competing if len(a) > len(keyword)]

        for m in regex.finditer(text):
            if stop is not None and stop.search(m.group("gap")):
                continue
            end = m.start("gap")
            if any(text[max(0, end - len(a)):end].lower() == a.lower() for a in longer):
                continue
            return m.group("value")
        return None

    def extract_field(self, text: str, rule: FieldRule, competing: Sequence[str] = ()) -> FieldDiagnostic:
        rejected: Optional[Tuple[str, str]] = None

        for keyword in rule.keywords:
            candidate = self.find_candidate(text, keyword, rule, competing)
            if candidate is None:
                continue

            value = self.sanitizer.sanitize(candidate, rule)
            if value is not None:
                return FieldDiagnostic(
                    field_name=rule.field_name,
                    status=FieldStatus.MATCHED,
                    keyword=keyword,
                    candidate=candidate,
                    value=value,
                )

            prefix = recover_numeric_prefix(candidate)
            value = self.sanitizer.sanitize(prefix, rule)
            if value is not None:
                return FieldDiagnostic(
                    field_name=rule.field_name,
                    status=FieldStatus.RECOVERED,
                    keyword=keyword,
                    candidate=candidate,
                    value=value,
                )

            if rejected is None:
                rejected = (keyword, candidate)

        if rejected is not None:
            return FieldDiagnostic(
                field_name=rule.field_name,
                status=FieldStatus.INVALID,
                keyword=rejected[0],
                candidate=rejected[1],
            )
        return FieldDiagnostic(field_name=rule.field_name, status=FieldStatus.MISSING)
