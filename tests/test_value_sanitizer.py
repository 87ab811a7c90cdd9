from __future__ import annotations

import pytest

from healthnav.domain.rule_tables import NUMERIC_VALUE, NUTRIENT_VALUE
from healthnav.domain.schemas.field_rule import FieldRule
from healthnav.service.value_sanitizer_service import ValueSanitizerService

GRAMS = FieldRule(field_name="totalFat", keywords=("Total Fat",), value_pattern=NUTRIENT_VALUE, unit="g")
MILLIGRAMS = FieldRule(field_name="sodium", keywords=("Sodium",), value_pattern=NUTRIENT_VALUE, unit="mg")
PLAIN = FieldRule(field_name="Haemoglobin", keywords=("Haemoglobin",), value_pattern=NUMERIC_VALUE)

sanitizer = ValueSanitizerService()


@pytest.mark.parametrize(
    "candidate,rule,expected",
    [
        ("0g", GRAMS, "0 g"),
        ("Og", GRAMS, "0 g"),
        ("og", GRAMS, "0 g"),
        ("Op", GRAMS, "0 g"),
        ("5p", GRAMS, "5 g"),
        ("8", GRAMS, "8 g"),
        ("2,5g", GRAMS, "2.5 g"),
        ("140mg", MILLIGRAMS, "140 mg"),
        ("140 mg", MILLIGRAMS, "140 mg"),
        ("140", MILLIGRAMS, "140 mg"),
        ("1,200mg", MILLIGRAMS, "1200 mg"),
        ("160 ¢", MILLIGRAMS, "160 mg"),
        ("Omg", MILLIGRAMS, "0 mg"),
        ("13:5", PLAIN, "13.5"),
        ("13.", PLAIN, "13"),
        ("4.32", PLAIN, "4.32"),
        (".5g", GRAMS, "0.5 g"),
        (".5", PLAIN, "0.5"),
        ("1,200", PLAIN, "1200"),
    ],
)
def test_sanitize(candidate, rule, expected):
    assert sanitizer.sanitize(candidate, rule) == expected


@pytest.mark.parametrize("candidate", [None, "", "   ", "high", "94mg/dl", "12 lakhs", "."])
def test_sanitize_rejects_bad_shapes(candidate):
    assert sanitizer.sanitize(candidate, PLAIN) is None


def test_unit_misread_only_applies_to_gram_fields():
    # a trailing "p" on a milligram field is not rewritten to g
    assert sanitizer.sanitize("5p", MILLIGRAMS) is None


def test_is_valid():
    assert sanitizer.is_valid("13.5")
    assert sanitizer.is_valid("0 g")
    assert not sanitizer.is_valid("0g")
    assert not sanitizer.is_valid("13.5.1")
    assert not sanitizer.is_valid(None)
