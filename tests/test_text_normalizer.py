from __future__ import annotations

import pytest

from healthnav.service.preprocess_text_service import PreprocessTextService, normalize_text


@pytest.mark.parametrize(
    "raw",
    [
        "Haemoglobin 13.5 g/dL",
        "  Haemoglobin\n\n 13.5\t g/dL  ",
        "Haemoglobin\r\n13.5\n\ng/dL",
        "\tHaemoglobin   13.5    g/dL\n",
    ],
)
def test_whitespace_variants_normalize_identically(raw):
    assert normalize_text(raw) == "Haemoglobin 13.5 g/dL"


def test_normalize_is_idempotent():
    raw = "Total  Fat\n 8g \n\n Sodium\t160mg "
    once = normalize_text(raw)
    assert normalize_text(once) == once


def test_empty_and_none_inputs():
    assert normalize_text("") == ""
    assert normalize_text(None) == ""
    assert normalize_text(" \n\t ") == ""


def test_service_delegates_to_function():
    assert PreprocessTextService().normalize("a \n b") == "a b"
