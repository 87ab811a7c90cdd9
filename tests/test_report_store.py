from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from healthnav.domain.schemas.document_type import DocumentType
from healthnav.domain.schemas.profile import UserProfile
from healthnav.domain.schemas.report import ReportRecord
from healthnav.service.report_store_service import InMemoryReportStore, JsonFileReportStore


@pytest.fixture(params=["json", "memory"])
def store(request, tmp_path):
    if request.param == "json":
        return JsonFileReportStore(root=str(tmp_path))
    return InMemoryReportStore()


def _record(user_id="u1", minutes_ago=0, doc_type=DocumentType.BLOOD_REPORT):
    return ReportRecord(
        user_id=user_id,
        file_name="cbc.jpg",
        doc_type=doc_type,
        report_type=doc_type.report_type,
        uploaded_at=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
        extracted_values={"Haemoglobin": "13.5"},
    )


def test_profile_round_trip(store):
    assert store.get_profile("u1") is None
    profile = UserProfile(full_name="Sam", conditions=["Diabetes"], goals=["Lose weight"], consent=True)
    store.save_profile("u1", profile)
    assert store.get_profile("u1") == profile


def test_reports_listed_newest_first(store):
    old = store.save_report(_record(minutes_ago=30))
    new = store.save_report(_record(minutes_ago=1, doc_type=DocumentType.NUTRITION_LABEL))
    store.save_report(_record(user_id="u2"))

    listed = store.list_reports("u1")
    assert [r.id for r in listed] == [new.id, old.id]
    assert listed[0].report_type == "Nutrition Label"


def test_get_report(store):
    saved = store.save_report(_record())
    assert store.get_report("u1", saved.id) == saved
    assert store.get_report("u2", saved.id) is None


def test_unknown_user_has_no_reports(store):
    assert store.list_reports("nobody") == []


@pytest.mark.parametrize("user_id", ["", "../etc", "a b", "x" * 129])
def test_unsafe_user_id_rejected(store, user_id):
    with pytest.raises(ValueError):
        store.get_profile(user_id)


def test_json_store_writes_expected_layout(tmp_path):
    store = JsonFileReportStore(root=str(tmp_path))
    store.save_profile("u1", UserProfile())
    record = store.save_report(_record())
    assert (tmp_path / "profiles" / "u1.json").exists()
    assert (tmp_path / "reports" / "u1" / f"{record.id}.json").exists()
