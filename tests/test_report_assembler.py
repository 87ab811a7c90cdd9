from __future__ import annotations

import pytest

from healthnav.domain.rule_tables import BLOOD_REPORT_RULES, NUMERIC_VALUE, NUTRITION_LABEL_RULES, rules_for
from healthnav.domain.schemas.document_type import DocumentType
from healthnav.domain.schemas.field_rule import FieldRule
from healthnav.domain.schemas.result_data import FieldStatus
from healthnav.service.report_assembler_service import ReportAssemblerService

from conftest import BLOOD_REPORT_TEXT, NUTRITION_LABEL_TEXT

assembler = ReportAssemblerService()


def test_blood_report_partial_extraction():
    result = assembler.assemble_for(BLOOD_REPORT_TEXT, DocumentType.BLOOD_REPORT)

    assert list(result.values) == [r.field_name for r in BLOOD_REPORT_RULES]
    assert result.present == {
        "Haemoglobin": "13.5",
        "TotalLeucocyteCount": "7200",
        "Neutrophils": "60",
        "Lymphocytes": "30",
        "Eosinophils": "4",
        "Monocytes": "5",
        "Basophils": "1",
        "AbsoluteNeutrophils": "4.32",
        "AbsoluteLymphocytes": "2.16",
        "Platelet": "2.5",
        "MCV": "88.2",
    }
    assert len(result.missing) == len(BLOOD_REPORT_RULES) - 11
    assert "MPV" in result.missing
    assert len(result.diagnostics) == len(BLOOD_REPORT_RULES)


def test_nutrition_label_extraction():
    result = assembler.assemble_for(NUTRITION_LABEL_TEXT, DocumentType.NUTRITION_LABEL)

    assert result.values == {
        "calories": "230",
        "totalFat": "8 g",
        "saturatedFat": "1 g",
        "transFat": "0 g",
        "cholesterol": "0 mg",
        "sodium": "160 mg",
        "totalCarbohydrate": "37 g",
        "dietaryFiber": "4 g",
        "sugar": "12 g",
        "protein": "3 g",
    }
    assert result.doc_type == DocumentType.NUTRITION_LABEL


def test_two_field_table_end_to_end():
    rules = [
        FieldRule(field_name="Platelet", keywords=("Platelet",), value_pattern=NUMERIC_VALUE),
        FieldRule(field_name="Cholesterol", keywords=("Cholesterol",), value_pattern=NUMERIC_VALUE),
    ]
    text = "Lab summary ... Platelet Count 2.5 ... Cholesterol 190 mg/dl ... end"
    result = assembler.assemble(text, rules)
    assert result.values == {"Platelet": "2.5", "Cholesterol": "190"}


@pytest.mark.parametrize("text", ["", "   \n  ", "%%%% ### ~~~"])
def test_unreadable_input_gives_all_absent(text):
    result = assembler.assemble_for(text, DocumentType.NUTRITION_LABEL)
    assert result.is_empty
    assert set(result.values) == {r.field_name for r in NUTRITION_LABEL_RULES}
    assert all(d.status == FieldStatus.MISSING for d in result.diagnostics)


def test_missing_field_does_not_affect_siblings():
    rules = rules_for(DocumentType.BLOOD_REPORT)
    with_all = assembler.assemble("Haemoglobin 13.5 Platelet 2.1", rules)
    without_platelet = assembler.assemble("Haemoglobin 13.5", rules)
    assert with_all.values["Haemoglobin"] == without_platelet.values["Haemoglobin"] == "13.5"
    assert without_platelet.values["Platelet"] is None


def test_rule_order_does_not_change_values():
    forward = assembler.assemble(NUTRITION_LABEL_TEXT, NUTRITION_LABEL_RULES)
    backward = assembler.assemble(NUTRITION_LABEL_TEXT, tuple(reversed(NUTRITION_LABEL_RULES)))
    assert forward.present == backward.present
    assert list(backward.values) == [r.field_name for r in reversed(NUTRITION_LABEL_RULES)]


def test_every_present_value_has_valid_shape():
    result = assembler.assemble_for(BLOOD_REPORT_TEXT + NUTRITION_LABEL_TEXT, DocumentType.NUTRITION_LABEL)
    for value in result.present.values():
        assert assembler.extractor.sanitizer.is_valid(value)


def test_duplicate_field_names_rejected():
    rule = FieldRule(field_name="x", keywords=("x",), value_pattern=NUMERIC_VALUE)
    with pytest.raises(ValueError):
        assembler.assemble("x 1", [rule, rule])


def test_result_is_immutable():
    result = assembler.assemble_for("Haemoglobin 13.5", DocumentType.BLOOD_REPORT)
    with pytest.raises(Exception):
        result.doc_type = DocumentType.NUTRITION_LABEL
    with pytest.raises(TypeError):
        result.values["Haemoglobin"] = "99"
    assert result.present == {"Haemoglobin": "13.5"}


def test_read_only_values_still_serialize():
    result = assembler.assemble_for("Sodium 140mg", DocumentType.NUTRITION_LABEL)
    dumped = result.model_dump()
    assert type(dumped["values"]) is dict
    assert dumped["values"]["sodium"] == "140 mg"
    assert '"sodium":"140 mg"' in result.model_dump_json()


def test_label_without_value_does_not_take_next_fields_value():
    result = assembler.assemble_for("Eosinophils Monocytes 5 %", DocumentType.BLOOD_REPORT)
    assert result.values["Eosinophils"] is None
    assert result.values["Monocytes"] == "5"


def test_short_label_inside_longer_label_is_not_an_anchor():
    result = assembler.assemble_for("Absolute Neutrophils 4.32", DocumentType.BLOOD_REPORT)
    assert result.values["Neutrophils"] is None
    assert result.values["AbsoluteNeutrophils"] == "4.32"


def test_alias_does_not_match_inside_other_words():
    result = assembler.assemble_for("Gross appearance 2 Absolute Monocytes 0.45", DocumentType.BLOOD_REPORT)
    assert result.values["AbsoluteMonocytes"] == "0.45"


def test_leading_decimal_point_kept():
    result = assembler.assemble_for("Total Fat .5g Sodium 140mg", DocumentType.NUTRITION_LABEL)
    assert result.values["totalFat"] == "0.5 g"
    assert result.values["sodium"] == "140 mg"


def test_calories_with_thousands_separator():
    result = assembler.assemble_for("Calories 1,200 Total Fat 8g", DocumentType.NUTRITION_LABEL)
    assert result.values["calories"] == "1200"
