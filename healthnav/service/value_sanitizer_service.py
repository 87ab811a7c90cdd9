from __future__ import annotations

import re
from typing import Optional

from healthnav.domain.schemas.field_rule import FieldRule

KNOWN_UNITS = frozenset({"g", "mg", "mcg", "kcal"})

# a lone O/o (optionally followed by a unit) is a zero the OCR read as a letter
_ZERO_MISREAD_RE = re.compile(r"^[Oo](?=\s*(?:m?g|p)?$)", re.I)
# "5p" / "5o": the trailing g of a gram amount misread
_GRAM_MISREAD_RE = re.compile(r"(\d)\s*[pPoO]$")
_THOUSANDS_RE = re.compile(r"(?<=\d),(?=\d{3}(?!\d))")
_TRAILING_SEP_RE = re.compile(r"[.,:]+(?=\s*[A-Za-z]*$)")
_SHAPE_RE = re.compile(r"(\d+(?:\.\d+)?)\s*([A-Za-z]+)?")
VALID_VALUE_RE = re.compile(r"\d+(?:\.\d+)?(?: [a-z]+)?")


class ValueSanitizerService:
    """Per-field cleanup of raw candidate tokens.

    Output is always "<number>" or "<number> <unit>"; anything that cannot be
    brought into that shape comes back as None.
    """

    def sanitize(self, candidate: Optional[str], rule: FieldRule) -> Optional[str]:
        if candidate is None:
            return None
        value = candidate.replace("¢", " ").strip()
        if not value:
            return None

        value = _ZERO_MISREAD_RE.sub("0", value)
        if rule.unit == "g":
            value = _GRAM_MISREAD_RE.sub(r"\1g", value)

        value = value.replace(":", ".")
        value = _THOUSANDS_RE.sub("", value)
        value = value.replace(",", ".")
        value = _TRAILING_SEP_RE.sub("", value).strip()
        if value.startswith("."):
            value = "0" + value

        m = _SHAPE_RE.fullmatch(value)
        if not m:
            return None
        number, suffix = m.group(1), m.group(2)
        if suffix:
            suffix = suffix.lower()
            if suffix not in KNOWN_UNITS:
                return None
        elif rule.unit:
            suffix = rule.unit

        return f"{number} {suffix}" if suffix else number

    def is_valid(self, value: Optional[str]) -> bool:
        return value is not None and VALID_VALUE_RE.fullmatch(value) is not None
