"""Fixed field rule tables per document type.

Several blood report anchors are not canonical labels: they are OCR misreads
seen on real report scans ("Basophis", "oss", "Hematoct", "mov", "MeH",
"MeHe", "ROW-CV", "wey"). They stay as the primary anchor of their field and
are followed by the canonical label as a fallback.
"""
import re
from typing import Dict, Tuple

from healthnav.domain.schemas.document_type import DocumentType
from healthnav.domain.schemas.field_rule import FieldRule

# digits with an optional decimal part; OCR often reads the point as a colon.
# A bare leading point (".5") stays on the value so it is not read as 5.
NUMERIC_VALUE = re.compile(r"\.?\d+(?:[.:]\d+)?[.:]?")

# label amounts: 12g, 1,200mg, 5 mg, 140¢, plus zero read as the letter O.
# Label rows put the amount right after the name, hence the short max_gap.
NUTRIENT_VALUE = re.compile(r"\.?\d[\d.,]*(?:\s?m?g(?![a-z])|\s?¢)?|O(?:m?g|p)(?![a-z])")

# "1,200" is a thousands separator, not a decimal comma
CALORIE_VALUE = re.compile(r"\d{1,3}(?:,\d{3})+(?!\d)|\d+(?:\.\d+)?")


def _blood(field_name: str, *keywords: str) -> FieldRule:
    return FieldRule(field_name=field_name, keywords=keywords, value_pattern=NUMERIC_VALUE)


def _nutrient(field_name: str, unit: str, *keywords: str) -> FieldRule:
    return FieldRule(
        field_name=field_name, keywords=keywords, value_pattern=NUTRIENT_VALUE, unit=unit, max_gap=4
    )


BLOOD_REPORT_RULES: Tuple[FieldRule, ...] = (
    _blood("Haemoglobin", "Haemoglobin"),
    _blood("TotalLeucocyteCount", "Total Leukocyte Count"),
    _blood("Neutrophils", "Neutrophils"),
    _blood("Lymphocytes", "Lymphocytes"),
    _blood("Eosinophils", "Eosinophils"),
    _blood("Monocytes", "Monocytes"),
    _blood("Basophils", "Basophis", "Basophils"),
    _blood("AbsoluteNeutrophils", "Absolute Neutrophils"),
    _blood("AbsoluteLymphocytes", "Absolute Lymphocytes"),
    _blood("AbsoluteEosinophils", "Absolute Eosinophils"),
    _blood("AbsoluteMonocytes", "oss", "Absolute Monocytes"),
    _blood("AbsoluteBasophils", "Absolute Basophils"),
    _blood("TotalRedBloodCount", "Total Red Blood Count"),
    _blood("Hematocrit", "Hematoct", "Hematocrit"),
    _blood("MCV", "mov", "MCV"),
    _blood("MCH", "MeH", "MCH"),
    _blood("Platelet", "Platelet"),
    _blood("MCHC", "MeHe", "MCHC"),
    _blood("RDWCv", "ROW-CV", "RDW-CV"),
    _blood("MPV", "wey", "MPV"),
)

NUTRITION_LABEL_RULES: Tuple[FieldRule, ...] = (
    FieldRule(
        field_name="calories",
        keywords=("Calories", "Amount per serving"),
        value_pattern=CALORIE_VALUE,
    ),
    _nutrient("totalFat", "g", "Total Fat"),
    _nutrient("saturatedFat", "g", "Saturated Fat"),
    _nutrient("transFat", "g", "Trans Fat"),
    _nutrient("cholesterol", "mg", "Cholesterol"),
    _nutrient("sodium", "mg", "Sodium"),
    _nutrient("totalCarbohydrate", "g", "Total Carbohydrate"),
    _nutrient("dietaryFiber", "g", "Dietary Fiber"),
    _nutrient("sugar", "g", "Total Sugars", "Sugars", "Sugar"),
    _nutrient("protein", "g", "Protein"),
)

RULE_TABLES: Dict[DocumentType, Tuple[FieldRule, ...]] = {
    DocumentType.BLOOD_REPORT: BLOOD_REPORT_RULES,
    DocumentType.NUTRITION_LABEL: NUTRITION_LABEL_RULES,
}


def rules_for(doc_type: DocumentType) -> Tuple[FieldRule, ...]:
    return RULE_TABLES[DocumentType(doc_type)]
